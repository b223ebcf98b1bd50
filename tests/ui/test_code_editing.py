"""UI tests for switching between block and code editing.

Each scenario drives the app through an EditorSession: keys are typed
into whichever editor has focus, and every transition waits until the
target editor is mounted and focused.
"""

import pytest

from blockfence.logseq.fences import find_fenced_regions
from blockfence.models.block import Mode
from blockfence.tui.widgets import CodeBlockView, CodeEditorOverlay


@pytest.mark.asyncio
async def test_switch_code_editing_mode(open_session):
    """Typing a fence opens the code editor; Escape toggles back and forth."""
    async with open_session() as session:
        await session.type("```clojure\n")
        await session.wait_for_mode(Mode.CODE_EDITING)

        assert session.code_editor_visible()
        assert session.line_number() == "1"
        assert session.language_label() == "clojure"

        await session.escape_to_block_editor()
        assert not session.code_editor_visible()
        assert session.block_text() == "```clojure\n```"

        await session.escape_to_code_editor()
        await session.type("(+ 1 1")
        await session.escape_to_block_editor()
        assert session.block_text() == "```clojure\n(+ 1 1)\n```"

        await session.click_code_block(0, offset=(0, 0))
        await session.type(";; comment\n\n  \n")
        await session.escape_to_block_editor()
        assert session.block_text() == "```clojure\n;; comment\n\n  \n(+ 1 1)\n```"


@pytest.mark.asyncio
async def test_convert_from_block_content_to_code(open_session):
    """Block text with fences round-trips through the code editor unchanged."""
    async with open_session() as session:
        await session.type("```")
        await session.press("shift+enter")
        assert session.block_text() == "```\n```"

        await session.escape_to_code_editor()
        assert session.line_number() == "1"
        await session.escape_to_block_editor()
        assert session.block_text() == "```\n```"

        for text, expected_lines in [("```\n\n```", "1"), ("```\n\n\n```", "2")]:
            await session.fill(text)
            await session.escape_to_code_editor()
            assert session.line_number() == expected_lines
            await session.escape_to_block_editor()
            assert session.block_text() == text

        for text in ["```\n  indented\nsecond line\n\n```", "```\n  indented\n  indented\n```"]:
            await session.fill(text)
            await session.escape_to_code_editor()
            await session.escape_to_block_editor()
            assert session.block_text() == text


@pytest.mark.asyncio
async def test_code_block_mixed_input_source(open_session):
    """New code lines inherit the indentation of the line above."""
    async with open_session() as session:
        await session.fill("```\n  ABC\n```")
        await session.escape_to_code_editor()
        await session.type("  DEF\nGHI")
        await session.escape_to_block_editor()

        assert session.block_text() == "```\n  ABC  DEF\n  GHI\n```"


@pytest.mark.asyncio
async def test_code_block_with_text_around(open_session):
    """Text outside the fences survives an edit of the region."""
    async with open_session() as session:
        await session.fill("Heading\n```\n```\nFooter")
        await session.escape_to_code_editor()
        await session.type("first\n  second")
        await session.escape_to_block_editor()

        assert session.block_text() == "Heading\n```\nfirst\n  second\n```\nFooter"


@pytest.mark.asyncio
async def test_multiple_code_blocks(open_session):
    """Editing one region leaves the others untouched."""
    async with open_session() as session:
        await session.fill("Heading\n```clojure\n```\nMiddle\n```clojure\n```\nFooter")

        await session.click_code_block(0)
        await session.type(":key-test\n")
        await session.escape_to_block_editor()
        assert session.block_text() == (
            "Heading\n```clojure\n:key-test\n\n```\nMiddle\n```clojure\n```\nFooter"
        )

        await session.click_code_block(1)
        await session.type("\n  :key-test\n")
        await session.escape_to_block_editor()
        assert session.block_text() == (
            "Heading\n```clojure\n:key-test\n\n```\nMiddle\n"
            "```clojure\n\n  :key-test\n\n```\nFooter"
        )


@pytest.mark.asyncio
async def test_escape_away_from_region_stays_in_block_mode(open_session):
    async with open_session() as session:
        await session.fill("Heading\n```\n```\nFooter")
        await session.press("escape")
        await session.wait_for_mode(Mode.BLOCK_EDITING)

        assert session.mode == Mode.BLOCK_EDITING
        assert not session.code_editor_visible()


@pytest.mark.asyncio
async def test_unclosed_fence_has_no_code_editor(open_session):
    async with open_session() as session:
        await session.fill("```clojure\n(+ 1 1)")
        await session.press("escape")
        await session.wait_for_mode(Mode.BLOCK_EDITING)

        assert len(session.screen.query(".code-block")) == 0
        assert session.block_text() == "```clojure\n(+ 1 1)"


@pytest.mark.asyncio
async def test_line_count_follows_typing(open_session):
    async with open_session() as session:
        await session.fill("```\n```")
        await session.escape_to_code_editor()
        await session.type("a\nb\nc")

        assert session.line_number() == "3"


@pytest.mark.asyncio
async def test_clicking_other_region_switches_overlay(open_session):
    """Selecting a second region flushes the first before opening it."""
    async with open_session() as session:
        await session.fill("```\n```\nMiddle\n```\n```")

        await session.click_code_block(0)
        await session.type("one")
        await session.click_code_block(1)

        assert session.screen.controller.active_region.index == 1
        assert session.screen.active_block.content == "```\none\n```\nMiddle\n```\n```"

        await session.type("two")
        await session.escape_to_block_editor()
        assert session.block_text() == "```\none\n```\nMiddle\n```\ntwo\n```"


@pytest.mark.asyncio
async def test_region_widgets_keep_their_fenced_region(open_session):
    """Views and overlays are built for a region without clobbering widget geometry."""
    (region,) = find_fenced_regions("```clojure\n(+ 1 1)\n```")

    async with open_session():
        view = CodeBlockView(region)
        overlay = CodeEditorOverlay(region)

        assert view.fence_region is region
        assert view.id == "code-block-0"
        assert overlay.fence_region is region
        assert overlay.get_text() == "(+ 1 1)"


@pytest.mark.asyncio
async def test_blank_line_region_round_trip(open_session):
    async with open_session("```\n\n```") as session:
        await session.escape_to_code_editor()
        assert session.line_number() == "1"
        await session.escape_to_block_editor()

        assert session.block_text() == "```\n\n```"


@pytest.mark.asyncio
async def test_region_container_never_takes_focus(open_session):
    """Clicks on region views reach the view while the overlay keeps focus."""
    async with open_session("```\n```\nMiddle\n```\n```") as session:
        container = session.screen.query_one("#code-blocks")
        assert container.can_focus is False

        await session.click_code_block(0)
        await session.click_code_block(1)

        assert session.screen.overlay.fence_region.index == 1
        assert session.screen.overlay.editor.has_focus

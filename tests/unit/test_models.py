"""Unit tests for block, page and fenced region models."""

import pytest

from blockfence.logseq.fences import find_fenced_regions
from blockfence.models.block import Block, Mode, Page
from blockfence.models.fence import FencedRegion


class TestFencedRegion:
    """Test FencedRegion geometry and flush-back."""

    def test_region_is_immutable(self):
        (region,) = find_fenced_regions("```\n```")

        with pytest.raises(Exception):  # Pydantic ValidationError
            region.language = "python"

    def test_contains_fence_lines_and_interior(self):
        (region,) = find_fenced_regions("Heading\n```\nx\n```\nFooter")

        assert region.contains(region.fence_start)
        assert region.contains(region.fence_end)
        assert not region.contains(region.fence_start - 1)
        assert not region.contains(region.fence_end + 1)

    def test_adjacency_is_one_character_outside(self):
        (region,) = find_fenced_regions("Heading\n```\n```\nFooter")

        assert region.is_adjacent(region.fence_start - 1)
        assert region.is_adjacent(region.fence_end + 1)
        assert not region.is_adjacent(region.fence_end)
        assert not region.is_adjacent(0)

    def test_replace_interior_fills_zero_line_region(self):
        text = "```clojure\n```"
        (region,) = find_fenced_regions(text)

        assert region.replace_interior(text, "(+ 1 1)") == "```clojure\n(+ 1 1)\n```"

    def test_replace_interior_empty_gives_zero_line_form(self):
        text = "```\nold\n```"
        (region,) = find_fenced_regions(text)

        assert region.replace_interior(text, "") == "```\n```"

    def test_replace_interior_keeps_surrounding_text(self):
        text = "Heading\n```\n```\nFooter"
        (region,) = find_fenced_regions(text)

        updated = region.replace_interior(text, "first\n  second")

        assert updated == "Heading\n```\nfirst\n  second\n```\nFooter"

    def test_replace_interior_preserves_blank_lines(self):
        text = "```\n```"
        (region,) = find_fenced_regions(text)

        assert region.replace_interior(text, "\n") == "```\n\n\n```"

    def test_line_count_never_below_one(self):
        region = FencedRegion(
            index=0,
            fence_start=0,
            open_end=3,
            close_start=4,
            fence_end=7,
            has_interior_lines=False,
        )
        assert region.line_count == 1


class TestBlock:
    """Test Block model."""

    def test_block_ids_are_unique(self):
        assert Block().block_id != Block().block_id

    def test_block_content_is_mutable(self):
        block = Block(content="a")
        block.content = "b"
        assert block.content == "b"


class TestPage:
    """Test Page model."""

    def test_add_block_appends(self):
        page = Page()
        first = page.add_block("one")
        second = page.add_block("two")

        assert page.blocks == [first, second]

    def test_add_block_after(self):
        page = Page()
        first = page.add_block("one")
        last = page.add_block("three")
        middle = page.add_block("two", after=first)

        assert page.blocks == [first, middle, last]

    def test_render_as_bullets(self):
        page = Page(blocks=[
            Block(content="plain"),
            Block(content="```clojure\n(+ 1 1)\n```"),
        ])

        assert page.render() == "- plain\n- ```clojure\n  (+ 1 1)\n  ```"

    def test_render_empty_block(self):
        assert Page(blocks=[Block()]).render() == "- "


class TestMode:
    """Test Mode enum."""

    def test_mode_values(self):
        assert Mode.BLOCK_EDITING.value == "block_editing"
        assert Mode("code_editing") is Mode.CODE_EDITING

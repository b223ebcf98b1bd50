"""Headless editor session for driving the block editor in tests.

``EditorSession`` wraps a running ``BlockfenceApp`` and its Textual
``Pilot``. Each scenario receives a session explicitly and drives the UI
through it. Waits poll observable state (mode, mounted overlay, focused
widget) instead of sleeping for a fixed time.

Example:
    async with app.run_test(size=(100, 40)) as pilot:
        session = EditorSession(app, pilot)
        await session.fill("```\\n  ABC\\n```")
        await session.escape_to_code_editor()
        await session.type("  DEF\\nGHI")
        await session.escape_to_block_editor()
        assert session.block_text() == "```\\n  ABC  DEF\\n  GHI\\n```"
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from textual.pilot import Pilot
from textual.widgets import Label
import structlog

from blockfence.logseq.fences import find_fenced_regions
from blockfence.models.block import Block, Mode, Page
from blockfence.models.config import Config, SessionConfig
from blockfence.services.exceptions import SessionTimeoutError
from blockfence.tui.app import BlockfenceApp
from blockfence.tui.screens.block_editing import BlockEditingScreen
from blockfence.tui.widgets.code_block_view import CodeBlockView

logger = structlog.get_logger()

SPECIAL_KEYS = {
    "\n": "enter",
    "\t": "tab",
}


class EditorSession:
    """Explicit session context for one editing scenario."""

    def __init__(
        self,
        app: BlockfenceApp,
        pilot: Pilot,
        session_config: Optional[SessionConfig] = None,
    ):
        self.app = app
        self.pilot = pilot
        self.config = session_config or app.config.session

    @property
    def screen(self) -> BlockEditingScreen:
        return self.app.editing_screen

    @property
    def mode(self) -> Mode:
        return self.screen.mode

    async def wait_for(self, condition: Callable[[], bool], description: str) -> None:
        """Poll until ``condition`` holds.

        Raises:
            SessionTimeoutError: If it does not hold within ``settle_timeout``
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.settle_timeout
        while True:
            await self.pilot.pause()
            if condition():
                return
            if loop.time() >= deadline:
                logger.warning("session_wait_timeout", description=description)
                raise SessionTimeoutError(f"Timed out waiting for {description}")
            await self.pilot.pause(self.config.poll_interval)

    def _settled_in(self, mode: Mode) -> bool:
        if not self.screen.is_mounted:
            return False
        overlay = self.screen.overlay
        if mode == Mode.CODE_EDITING:
            return (
                self.mode == mode
                and overlay is not None
                and overlay.is_mounted
                and overlay.editor.has_focus
            )
        return self.mode == mode and overlay is None and self.screen.block_editor.has_focus

    def _views_match_text(self) -> bool:
        expected = len(find_fenced_regions(self.screen.active_block.content))
        return len(self.screen.query(CodeBlockView)) == expected

    async def wait_for_mode(self, mode: Mode) -> None:
        """Wait until ``mode`` is active and its surface is mounted and focused."""
        await self.wait_for(lambda: self._settled_in(mode), f"mode {mode.value}")

    async def fill(self, text: str) -> None:
        """Replace the block editor's text, like filling an input."""
        self.screen.block_editor.load_content(text)
        await self.wait_for(
            lambda: self.screen.active_block.content == text and self._views_match_text(),
            "block text to update",
        )

    async def press(self, *keys: str) -> None:
        await self.pilot.press(*keys)
        await self.pilot.pause()

    async def type(self, text: str) -> None:
        """Type text key by key into whichever editor has focus."""
        await self.press(*(SPECIAL_KEYS.get(char, char) for char in text))

    async def click_code_block(self, index: int = 0, offset: tuple[int, int] = (0, 0)) -> None:
        """Click a rendered code region's body and wait for its overlay."""
        selector = f"#code-block-{index} .code-body"
        await self.wait_for(
            lambda: len(self.screen.query(selector)) == 1,
            f"code block {index} to render",
        )
        await self.pilot.click(selector, offset=offset)
        await self.wait_for(
            lambda: self._settled_in(Mode.CODE_EDITING) and self.screen.overlay.fence_region.index == index,
            f"code editor for region {index}",
        )

    async def escape_to_code_editor(self, index: int = 0) -> None:
        """Press Escape in the block editor; click region ``index`` if that did not open it."""
        cursor = self.screen.block_editor.cursor_offset
        opens_region = self.screen.controller.region_at(cursor) is not None
        await self.press("escape")
        if not opens_region:
            await self.click_code_block(index)
        await self.wait_for_mode(Mode.CODE_EDITING)

    async def escape_to_block_editor(self) -> None:
        """Press Escape in the code editor and wait for the flush-back."""
        await self.press("escape")
        await self.wait_for_mode(Mode.BLOCK_EDITING)

    def block_text(self) -> str:
        return self.screen.block_editor.text

    def code_editor_visible(self) -> bool:
        overlay = self.screen.overlay
        return overlay is not None and overlay.is_mounted and overlay.display

    def line_number(self) -> str:
        """Text of the overlay's line count label (the last gutter number)."""
        overlay = self.screen.overlay
        if overlay is None:
            raise LookupError("No code editor overlay is mounted")
        return str(overlay.query_one(".code-line-number", Label).content)

    def language_label(self, index: Optional[int] = None) -> str:
        """Language label of the overlay, or of rendered region ``index``."""
        if index is None:
            overlay = self.screen.overlay
            if overlay is None:
                raise LookupError("No code editor overlay is mounted")
            container = overlay
        else:
            container = self.screen.query_one(f"#code-block-{index}", CodeBlockView)
        return str(container.query_one(".code-lang", Label).content)


@asynccontextmanager
async def open_session(
    text: str = "",
    config: Optional[Config] = None,
    size: tuple[int, int] = (100, 40),
) -> AsyncIterator[EditorSession]:
    """Run a headless app on a fresh page and yield a session driving it.

    Args:
        text: Initial source of the page's only block
        config: Application configuration (defaults when None)
        size: Terminal size for the headless run
    """
    app = BlockfenceApp(page=Page(title="scratch", blocks=[Block(content=text)]), config=config)
    async with app.run_test(size=size) as pilot:
        session = EditorSession(app, pilot)
        await session.wait_for_mode(Mode.BLOCK_EDITING)
        yield session

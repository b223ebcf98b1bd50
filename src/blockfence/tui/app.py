"""Main Blockfence TUI application.

The app hosts a single ``BlockEditingScreen``. Its return value (set when
the user quits) is the page rendered as Logseq markdown bullets.
"""

from typing import Optional

from textual.app import App
from textual.binding import Binding
import structlog

from blockfence.models.block import Page
from blockfence.models.config import Config
from blockfence.tui.screens import BlockEditingScreen

logger = structlog.get_logger()


class BlockfenceApp(App[str]):
    """Block editor with fenced code editing."""

    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "finish", "Quit", show=True, priority=True),
    ]

    def __init__(self, page: Optional[Page] = None, config: Optional[Config] = None):
        """Initialize the Blockfence app.

        Args:
            page: Page to edit (a page with one empty block when None)
            config: Application configuration (defaults when None)
        """
        super().__init__()
        self.page = page or Page()
        self.config = config or Config()
        self.editing_screen = BlockEditingScreen(
            self.page,
            editor_config=self.config.editor,
            name="block_editing",
        )

        logger.info(
            "app_initialized",
            page_title=self.page.title,
            block_count=len(self.page.blocks),
        )

    def on_mount(self) -> None:
        self.push_screen(self.editing_screen)

    def action_finish(self) -> None:
        """Flush open editors and exit with the page text."""
        page = self.editing_screen.finish_editing()
        logger.info("app_finished", block_count=len(page.blocks))
        self.exit(page.render())

"""Block editing screen.

Shows the page's committed blocks, the raw block editor for the active
block, and one rendered view per fenced code region. Escape (with the
cursor at a region) or a click on a rendered region swaps that region's
view for a code editor overlay; Escape inside the overlay writes the
code back into the block.
"""

from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Footer, Label, Static, TextArea
from textual.widgets.text_area import Location
import structlog

from blockfence.logseq.fences import find_fenced_regions
from blockfence.models.block import Block, Mode, Page
from blockfence.models.config import EditorConfig
from blockfence.models.fence import FencedRegion
from blockfence.services.mode_controller import ModeTransitionController
from blockfence.tui.widgets.block_editor import BlockEditor
from blockfence.tui.widgets.code_block_view import CodeBlockView
from blockfence.tui.widgets.code_editor import CodeEditor, CodeEditorOverlay

logger = structlog.get_logger()


class ScreenOverlayHost:
    """Mounts code editor overlays into a block editing screen."""

    def __init__(self, screen: "BlockEditingScreen"):
        self.screen = screen
        self.next_cursor: Optional[Location] = None

    def mount(self, region: FencedRegion) -> CodeEditorOverlay:
        """Replace the region's rendered view with a code editor overlay."""
        overlay = CodeEditorOverlay(
            region,
            editor_config=self.screen.editor_config,
            cursor=self.next_cursor,
        )
        self.next_cursor = None

        container = self.screen.query_one("#code-blocks", VerticalScroll)
        views = [view for view in container.query(CodeBlockView) if view.fence_region.index == region.index]
        if views:
            views[0].display = False
            container.mount(overlay, after=views[0])
        else:
            container.mount(overlay)
        return overlay


class BlockEditingScreen(Screen):
    """Edit one block at a time, opening fenced regions in a code editor."""

    DEFAULT_CSS = """
    BlockEditingScreen {
        layout: vertical;
    }

    #block-editing-container {
        height: 1fr;
        layout: vertical;
    }

    #page-title {
        height: auto;
        padding: 0 1;
        text-style: bold;
    }

    #page-blocks {
        height: auto;
        max-height: 10;
        padding: 0 1;
        color: $text-muted;
    }

    BlockEditor {
        height: 1fr;
        min-height: 5;
    }

    #code-blocks {
        height: 1fr;
    }
    """

    mode = reactive(Mode.BLOCK_EDITING)

    def __init__(
        self,
        page: Page,
        editor_config: Optional[EditorConfig] = None,
        **kwargs
    ):
        """Initialize block editing screen.

        Args:
            page: Page whose blocks are edited (a block is created if empty)
            editor_config: Editor settings (defaults when None)
        """
        super().__init__(**kwargs)
        self.page = page
        if not self.page.blocks:
            self.page.add_block()
        self.active_block: Block = self.page.blocks[0]
        self.editor_config = editor_config or EditorConfig()
        self.overlay_host = ScreenOverlayHost(self)
        self.controller = ModeTransitionController(self.active_block, self.overlay_host)
        self._rendered_regions: Optional[list[tuple]] = None

    def compose(self) -> ComposeResult:
        with Container(id="block-editing-container"):
            yield Label(self.page.title, id="page-title")
            yield Static("", id="page-blocks")
            yield BlockEditor(self.active_block.content, auto_pair=self.editor_config.auto_pair)
            yield VerticalScroll(id="code-blocks", can_focus=False)
        yield Footer()

    async def on_mount(self) -> None:
        self._render_page_blocks()
        await self._render_code_blocks()
        editor = self.block_editor
        editor.move_cursor_to_offset(len(editor.text))
        editor.focus()

    @property
    def block_editor(self) -> BlockEditor:
        return self.query_one(BlockEditor)

    @property
    def overlay(self) -> Optional[CodeEditorOverlay]:
        """The mounted code editor overlay, if any."""
        overlays = self.query(CodeEditorOverlay)
        return overlays.first() if overlays else None

    def _render_page_blocks(self) -> None:
        """List the page's other blocks above the editor."""
        text = Text()
        for block in self.page.blocks:
            if block is self.active_block:
                continue
            first_line = block.content.split("\n", 1)[0]
            text.append(f"- {first_line}\n")
        self.query_one("#page-blocks", Static).update(text)

    async def _render_code_blocks(self, force: bool = False) -> None:
        """Rebuild the rendered region views when the regions changed."""
        regions = find_fenced_regions(self.active_block.content)
        signature = [(r.language, r.has_interior_lines, r.interior) for r in regions]
        if not force and signature == self._rendered_regions:
            return
        self._rendered_regions = signature

        container = self.query_one("#code-blocks", VerticalScroll)
        await container.remove_children()
        if regions:
            await container.mount_all([CodeBlockView(region) for region in regions])

    async def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Track block editor edits; region views follow the block text."""
        if not isinstance(event.text_area, BlockEditor):
            return
        self.active_block.content = event.text_area.text
        if self.mode == Mode.BLOCK_EDITING:
            await self._render_code_blocks()

    def _enter_code_editing(self) -> None:
        self.block_editor.read_only = True
        self.mode = self.controller.mode

    async def _leave_code_editing(self) -> None:
        """Flush the overlay back into the block and refocus the block editor."""
        region = self.controller.active_region
        overlay = self.controller.handle
        text = self.controller.deactivate()
        if overlay.removal is not None:
            await overlay.removal

        regions = find_fenced_regions(text)
        cursor = regions[region.index].fence_end if region.index < len(regions) else len(text)

        editor = self.block_editor
        editor.read_only = False
        editor.load_content(text, cursor=cursor)
        await self._render_code_blocks(force=True)
        editor.focus()
        self.mode = self.controller.mode

    async def on_block_editor_escaped(self, event: BlockEditor.Escaped) -> None:
        event.stop()
        if self.mode == Mode.CODE_EDITING:
            return
        self.active_block.content = self.block_editor.text
        if self.controller.escape(event.cursor) == Mode.CODE_EDITING:
            self._enter_code_editing()

    async def on_block_editor_fence_completed(self, event: BlockEditor.FenceCompleted) -> None:
        event.stop()
        self.active_block.content = self.block_editor.text
        await self._render_code_blocks()
        region = self.controller.region_at(event.cursor)
        if region is not None:
            self.controller.activate(region.index)
            self._enter_code_editing()

    async def on_code_block_view_selected(self, event: CodeBlockView.Selected) -> None:
        event.stop()
        if self.mode == Mode.CODE_EDITING:
            if self.controller.active_region.index == event.index:
                return
            await self._leave_code_editing()

        self.overlay_host.next_cursor = event.location
        self.controller.activate(event.index)
        self._enter_code_editing()

    async def on_code_editor_exited(self, event: CodeEditor.Exited) -> None:
        event.stop()
        if self.mode == Mode.CODE_EDITING:
            await self._leave_code_editing()

    async def on_block_editor_submitted(self, event: BlockEditor.Submitted) -> None:
        """Commit the active block and start a new one after it."""
        event.stop()
        committed = self.active_block
        committed.content = self.block_editor.text

        self.active_block = self.page.add_block(after=committed)
        self.controller = ModeTransitionController(self.active_block, self.overlay_host)
        logger.info(
            "block_committed",
            block_id=committed.block_id,
            new_block_id=self.active_block.block_id,
            block_count=len(self.page.blocks),
        )

        self.block_editor.load_content("")
        self._render_page_blocks()
        await self._render_code_blocks()

    def finish_editing(self) -> Page:
        """Flush any open overlay and return the page."""
        if self.controller.mode == Mode.CODE_EDITING:
            self.controller.deactivate()
            self.mode = self.controller.mode
        else:
            self.active_block.content = self.block_editor.text
        return self.page

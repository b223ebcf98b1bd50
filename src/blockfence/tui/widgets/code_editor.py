"""Code editor overlay for a single fenced region.

The overlay is mounted by the block editing screen in place of the
rendered region and satisfies the ``OverlayHandle`` protocol used by
``ModeTransitionController``:

    overlay.get_text()  -> current interior text
    overlay.unmount()   -> removes the widget, returns final interior text
"""

from typing import Optional

from textual import events
from textual.app import ComposeResult
from textual.await_remove import AwaitRemove
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Label, TextArea
from textual.widgets.text_area import LanguageDoesNotExist, Location
import structlog

from blockfence.models.config import EditorConfig
from blockfence.models.fence import FencedRegion
from blockfence.services import editing_rules

logger = structlog.get_logger()


class CodeEditor(TextArea):
    """TextArea with line numbers, auto-indent and bracket auto-closing."""

    class Exited(Message):
        """Posted when Escape is pressed inside the code editor."""

        def __init__(self, editor: "CodeEditor") -> None:
            super().__init__()
            self.editor = editor

        @property
        def control(self) -> "CodeEditor":
            return self.editor

    def __init__(
        self,
        text: str = "",
        language: str = "",
        editor_config: Optional[EditorConfig] = None,
        **kwargs
    ):
        """Initialize CodeEditor.

        Args:
            text: Interior text of the fenced region
            language: Language tag of the region ('' for none)
            editor_config: Editor settings (defaults when None)
        """
        config = editor_config or EditorConfig()
        super().__init__(
            text,
            tab_behavior="indent",
            soft_wrap=False,
            show_line_numbers=config.show_line_numbers,
            theme=config.theme,
            **kwargs
        )
        self.set_reactive(TextArea.indent_width, config.indent_width)
        self.fence_language = language
        self.auto_indent = config.auto_indent
        self.auto_pair = config.auto_pair
        self.syntax_highlighting = config.syntax_highlighting

    def on_mount(self) -> None:
        """Enable tree-sitter highlighting when configured and available."""
        language = self.fence_language.lower()
        if not self.syntax_highlighting or language not in self.available_languages:
            return
        try:
            self.language = language
        except LanguageDoesNotExist as e:
            logger.warning("highlight_language_unavailable", language=language, error=str(e))
            self.language = None

    async def _on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            event.stop()
            event.prevent_default()
            self.post_message(self.Exited(self))
            return

        if self.read_only:
            return

        if event.key == "enter":
            event.stop()
            event.prevent_default()
            self._insert_newline()
            return

        if self.auto_pair and event.character and self.selection.is_empty:
            self._type_with_pairing(event)

    def _insert_newline(self) -> None:
        top, bottom = sorted(self.selection)
        indent = ""
        if self.auto_indent:
            row, column = top
            line_before = self.document.get_line(row)[:column]
            text_before = self.get_text_range((0, 0), top)
            indent = editing_rules.newline_indent(line_before, text_before, self.fence_language)
            logger.debug("auto_indent", language=self.fence_language, indent_width=len(indent))
        self.replace("\n" + indent, top, bottom, maintain_selection_offset=False)

    def _type_with_pairing(self, event: events.Key) -> None:
        char = event.character
        row, column = self.cursor_location
        line = self.document.get_line(row)
        next_char = line[column] if column < len(line) else None

        action = editing_rules.bracket_action(char, next_char)
        if action == "insert":
            return

        event.stop()
        event.prevent_default()
        if action == "skip":
            self.move_cursor_relative(columns=1)
            return

        location = self.cursor_location
        self.replace(
            char + editing_rules.BRACKET_PAIRS[char],
            location,
            location,
            maintain_selection_offset=False,
        )
        self.move_cursor_relative(columns=-1)


class CodeEditorOverlay(Vertical):
    """Language label, line count and code editor for one fenced region."""

    DEFAULT_CSS = """
    CodeEditorOverlay {
        height: auto;
        max-height: 20;
        border: solid $accent;
    }

    CodeEditorOverlay .code-header {
        height: 1;
    }

    CodeEditorOverlay .code-lang {
        width: 1fr;
        color: $text-muted;
    }

    CodeEditorOverlay .code-line-number {
        width: auto;
        color: $text-muted;
    }

    CodeEditorOverlay CodeEditor {
        height: auto;
        max-height: 16;
        border: none;
    }
    """

    def __init__(
        self,
        region: FencedRegion,
        editor_config: Optional[EditorConfig] = None,
        cursor: Optional[Location] = None,
        **kwargs
    ):
        """Initialize CodeEditorOverlay.

        Args:
            region: Fenced region whose interior seeds the editor
            editor_config: Editor settings (defaults when None)
            cursor: Initial (row, column) of the cursor; None puts it at the end
        """
        super().__init__(id="code-editor", **kwargs)
        self.fence_region = region
        self.initial_cursor = cursor
        self.removal: Optional[AwaitRemove] = None
        self.editor = CodeEditor(
            region.interior,
            language=region.language,
            editor_config=editor_config,
        )

    def compose(self) -> ComposeResult:
        with Horizontal(classes="code-header"):
            yield Label(self.fence_region.language, classes="code-lang")
            yield Label(str(self.fence_region.line_count), classes="code-line-number")
        yield self.editor

    def on_mount(self) -> None:
        """Focus the editor and place its cursor."""
        if self.initial_cursor is None:
            self.editor.move_cursor(self.editor.document.end)
        else:
            self.editor.move_cursor(self.editor.clamp_visitable(self.initial_cursor))
        self.editor.focus()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Keep the line count label in step with the document."""
        self.query_one(".code-line-number", Label).update(str(self.line_count))

    @property
    def line_count(self) -> int:
        return self.editor.document.line_count

    def get_text(self) -> str:
        return self.editor.text

    def unmount(self) -> str:
        """Remove the overlay and hand back its text."""
        text = self.editor.text
        self.removal = self.remove()
        logger.debug("overlay_unmounted", region_index=self.fence_region.index)
        return text

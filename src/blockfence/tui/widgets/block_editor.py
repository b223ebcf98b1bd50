"""BlockEditor widget for a block's raw source.

Keys:
- escape: ask the screen to open the code editor for the region at the cursor
- shift+enter: insert a literal newline
- enter: complete an unclosed opening fence, otherwise commit the block
- `: auto-paired backtick (see editing_rules.backtick_action)
"""

from textual import events
from textual.message import Message
from textual.widgets import TextArea

from blockfence.logseq.fences import find_unclosed_fence, is_closing_fence, parse_opening_fence
from blockfence.services import editing_rules


class BlockEditor(TextArea):
    """Plain-text editor holding one block's raw markdown source."""

    class Escaped(Message):
        """Posted when Escape is pressed in the block editor."""

        def __init__(self, editor: "BlockEditor", cursor: int) -> None:
            super().__init__()
            self.editor = editor
            self.cursor = cursor

        @property
        def control(self) -> "BlockEditor":
            return self.editor

    class FenceCompleted(Message):
        """Posted after Enter turned an opening fence into an empty region."""

        def __init__(self, editor: "BlockEditor", cursor: int) -> None:
            super().__init__()
            self.editor = editor
            self.cursor = cursor

        @property
        def control(self) -> "BlockEditor":
            return self.editor

    class Submitted(Message):
        """Posted when Enter commits the block."""

        def __init__(self, editor: "BlockEditor") -> None:
            super().__init__()
            self.editor = editor

        @property
        def control(self) -> "BlockEditor":
            return self.editor

    def __init__(self, text: str = "", auto_pair: bool = True, **kwargs):
        """Initialize BlockEditor.

        Args:
            text: Initial block source
            auto_pair: Whether typed backticks are auto-paired
        """
        super().__init__(text, id="block-editor", soft_wrap=True, **kwargs)
        self.auto_pair = auto_pair
        self.show_line_numbers = False

    @property
    def cursor_offset(self) -> int:
        """Cursor position as a character offset into ``text``."""
        return self.document.get_index_from_location(self.cursor_location)

    def move_cursor_to_offset(self, offset: int) -> None:
        """Move the cursor to a character offset, clamped to the document."""
        offset = max(0, min(offset, len(self.text)))
        self.move_cursor(self.document.get_location_from_index(offset))

    def load_content(self, content: str, cursor: int | None = None) -> None:
        """Replace the block source, placing the cursor at ``cursor`` (default end)."""
        self.load_text(content)
        self.move_cursor_to_offset(len(content) if cursor is None else cursor)

    def get_content(self) -> str:
        return self.text

    async def _on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            event.stop()
            event.prevent_default()
            self.post_message(self.Escaped(self, self.cursor_offset))
            return

        if self.read_only:
            return

        if event.key == "shift+enter":
            event.stop()
            event.prevent_default()
            start, end = self.selection
            self.replace("\n", start, end, maintain_selection_offset=False)
            return

        if event.key == "enter":
            event.stop()
            event.prevent_default()
            if not self._complete_fence():
                self.post_message(self.Submitted(self))
            return

        if event.character == "`" and self.auto_pair:
            event.stop()
            event.prevent_default()
            self._type_backtick()

    def _type_backtick(self) -> None:
        start, end = self.selection
        row, column = end
        line = self.document.get_line(row)
        prev_char = line[column - 1] if column > 0 else None
        next_char = line[column] if column < len(line) else None

        if start == end and editing_rules.backtick_action(prev_char, next_char) == "skip":
            self.move_cursor_relative(columns=1)
            return

        self.replace("``", start, end, maintain_selection_offset=False)
        self.move_cursor_relative(columns=-1)

    def _complete_fence(self) -> bool:
        """Turn an unclosed opening fence at the cursor into an empty region.

        Returns:
            True if the fence was completed
        """
        if not self.selection.is_empty:
            return False

        row, column = self.cursor_location
        line = self.document.get_line(row)
        before, after = line[:column], line[column:]

        if parse_opening_fence(before) is None:
            return False
        if after.strip() and not is_closing_fence(after):
            return False
        # Only the unterminated fence is completed
        if not after.strip() and find_unclosed_fence(self.text) != row:
            return False

        indent = editing_rules.leading_whitespace(before)
        self.replace(
            f"{before}\n{indent}```",
            (row, 0),
            (row, len(line)),
            maintain_selection_offset=False,
        )
        self.post_message(self.FenceCompleted(self, self.cursor_offset))
        return True

"""Read-only rendering of a fenced region with a line-number gutter.

Clicking the code body asks the screen to open the code editor for this
region, with the cursor at the clicked line and column.
"""

from typing import Optional

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Label, Static

from blockfence.models.fence import FencedRegion


def render_code_body(region: FencedRegion) -> Text:
    """Render interior lines behind a right-aligned line-number gutter.

    Args:
        region: Region to render

    Returns:
        Rich Text with one row per interior line (at least one)
    """
    lines = region.interior.split("\n") if region.has_interior_lines else [""]
    digits = len(str(region.line_count))

    text = Text(no_wrap=True, end="")
    for number, line in enumerate(lines, start=1):
        if number > 1:
            text.append("\n")
        text.append(f"{number:>{digits}} ", style="dim")
        text.append(" ")
        text.append(line)
    return text


def gutter_width(region: FencedRegion) -> int:
    """Cells taken by the gutter (digits, a space, a separator space)."""
    return len(str(region.line_count)) + 2


class CodeBlockView(Vertical):
    """Language label above a line-numbered, read-only code body."""

    DEFAULT_CSS = """
    CodeBlockView {
        height: auto;
        border: round $primary-darken-2;
        margin: 0 0 1 0;
    }

    CodeBlockView .code-lang {
        height: 1;
        color: $text-muted;
    }

    CodeBlockView .code-body {
        height: auto;
    }
    """

    class Selected(Message):
        """Posted when the code body is clicked."""

        def __init__(
            self,
            view: "CodeBlockView",
            index: int,
            location: Optional[tuple[int, int]],
        ) -> None:
            super().__init__()
            self.view = view
            self.index = index
            self.location = location

        @property
        def control(self) -> "CodeBlockView":
            return self.view

    def __init__(self, region: FencedRegion, **kwargs):
        super().__init__(id=f"code-block-{region.index}", classes="code-block", **kwargs)
        self.fence_region = region

    def compose(self) -> ComposeResult:
        yield Label(self.fence_region.language, classes="code-lang")
        yield Static(render_code_body(self.fence_region), classes="code-body")

    def on_click(self, event: events.Click) -> None:
        """Translate the click into a (row, column) in the region's interior."""
        event.stop()
        body = self.query_one(".code-body", Static)
        location = None
        if body.region.contains(event.screen_x, event.screen_y):
            row = event.screen_y - body.region.y
            column = max(0, event.screen_x - body.region.x - gutter_width(self.fence_region))
            location = (row, column)
        self.post_message(self.Selected(self, self.fence_region.index, location))

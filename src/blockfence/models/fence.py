"""FencedRegion model for code regions inside a block's raw source."""

from pydantic import BaseModel, Field


class FencedRegion(BaseModel):
    """A triple-backtick code region located in a block's raw text.

    Offsets index into the block text the region was parsed from. The
    interior excludes both fence lines; when the closing fence directly
    follows the opening line the region has no interior lines at all.

    Example:
        For "```clojure\\n(+ 1 1)\\n```":
        - language == "clojure"
        - interior == "(+ 1 1)"
        - line_count == 1
    """

    index: int = Field(
        ...,
        ge=0,
        description="Position among the block's fenced regions (document order)"
    )

    language: str = Field(
        default="",
        description="Language tag from the opening fence ('' when absent)"
    )

    fence_start: int = Field(
        ...,
        ge=0,
        description="Offset of the first character of the opening fence line"
    )

    open_end: int = Field(
        ...,
        ge=0,
        description="Offset of the newline terminating the opening fence line"
    )

    close_start: int = Field(
        ...,
        ge=0,
        description="Offset of the first character of the closing fence line"
    )

    fence_end: int = Field(
        ...,
        ge=0,
        description="Offset just past the closing fence line (newline excluded)"
    )

    has_interior_lines: bool = Field(
        ...,
        description="False when the closing fence immediately follows the opening line"
    )

    interior: str = Field(
        default="",
        description="Text between the fence lines, without the fences themselves"
    )

    model_config = {"frozen": True}

    @property
    def line_count(self) -> int:
        """Number of interior lines, never less than 1."""
        if not self.has_interior_lines:
            return 1
        return self.interior.count("\n") + 1

    def contains(self, offset: int) -> bool:
        """Check whether an offset falls on the fence lines or inside them."""
        return self.fence_start <= offset <= self.fence_end

    def is_adjacent(self, offset: int) -> bool:
        """Check whether an offset sits one character outside the region."""
        return offset == self.fence_start - 1 or offset == self.fence_end + 1

    def replace_interior(self, text: str, interior: str) -> str:
        """Return ``text`` with this region's interior replaced.

        Fence lines and the language tag are left untouched. An empty
        ``interior`` produces the zero-line form (closing fence directly
        after the opening line).

        Args:
            text: Block text this region was parsed from
            interior: New interior text

        Returns:
            Updated block text
        """
        head = text[:self.open_end + 1]
        tail = text[self.close_start:]
        if interior == "":
            return head + tail
        return head + interior + "\n" + tail

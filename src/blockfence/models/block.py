"""Block and Page models for the block editor."""

from enum import Enum

from pydantic import BaseModel, Field

from blockfence.utils.ids import generate_random_uuid


class Mode(str, Enum):
    """Active editing surface for the focused block."""

    BLOCK_EDITING = "block_editing"
    CODE_EDITING = "code_editing"


class Block(BaseModel):
    """A single outline block holding raw markdown-like source."""

    block_id: str = Field(
        default_factory=generate_random_uuid,
        description="Identifier for the block within the editing session"
    )

    content: str = Field(
        default="",
        description="Raw block source, fenced code regions included"
    )

    model_config = {"frozen": False}  # Mutated by edits and overlay flush-back


class Page(BaseModel):
    """An ordered list of blocks being edited together."""

    title: str = Field(
        default="untitled",
        description="Page title shown in the editor header"
    )

    blocks: list[Block] = Field(
        default_factory=list,
        description="Blocks in document order"
    )

    model_config = {"frozen": False}

    def add_block(self, content: str = "", after: Block | None = None) -> Block:
        """Create a new block and insert it into the page.

        Args:
            content: Initial raw text for the block
            after: Existing block to insert after (None = append to end)

        Returns:
            The created block
        """
        block = Block(content=content)
        if after is None:
            self.blocks.append(block)
        else:
            position = self.blocks.index(after) + 1
            self.blocks.insert(position, block)
        return block

    def render(self) -> str:
        """Render the page as Logseq markdown bullets.

        Continuation lines are indented by two spaces so they stay attached
        to their bullet.
        """
        lines = []
        for block in self.blocks:
            first, *rest = block.content.split("\n")
            lines.append(f"- {first}")
            lines.extend(f"  {line}" for line in rest)
        return "\n".join(lines)

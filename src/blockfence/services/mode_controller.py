"""Mode transition controller for block and code editing.

The controller decides which surface is active for a block: the plain
block editor, or a code editor overlay bound to one fenced region. It
never talks to a widget directly; overlays are created through the
``OverlayHost`` capability so the same state machine drives the Textual
screen and the in-memory ``ScratchOverlay`` used in tests.

Transitions:

    BLOCK_EDITING --escape (cursor at region)--> CODE_EDITING
    BLOCK_EDITING --activate(index)-----------> CODE_EDITING
    CODE_EDITING  --escape / deactivate-------> BLOCK_EDITING  (flush back)
"""

from typing import Optional, Protocol

import structlog

from blockfence.logseq.fences import find_fenced_regions
from blockfence.models.block import Block, Mode
from blockfence.models.fence import FencedRegion
from blockfence.services import editing_rules
from blockfence.services.exceptions import ModeTransitionError, RegionNotFoundError

logger = structlog.get_logger()


class OverlayHandle(Protocol):
    """A mounted code editor bound to one fenced region."""

    def get_text(self) -> str:
        """Current interior text held by the overlay."""
        ...

    def unmount(self) -> str:
        """Tear the overlay down and return its final text."""
        ...


class OverlayHost(Protocol):
    """Something that can mount code editor overlays."""

    def mount(self, region: FencedRegion) -> OverlayHandle:
        """Mount an overlay seeded with ``region.interior``."""
        ...


class ModeTransitionController:
    """State machine switching a block between block and code editing.

    Example:
        >>> controller = ModeTransitionController(Block(content="```\\n```"), ScratchHost())
        >>> controller.escape(cursor=7)
        <Mode.CODE_EDITING: 'code_editing'>
    """

    def __init__(self, block: Block, host: OverlayHost):
        """Initialize controller.

        Args:
            block: Block whose raw text holds the fenced regions
            host: Overlay factory (Textual screen or in-memory host)
        """
        self.block = block
        self.host = host
        self.mode = Mode.BLOCK_EDITING
        self.active_region: Optional[FencedRegion] = None
        self.handle: Optional[OverlayHandle] = None

    @property
    def regions(self) -> list[FencedRegion]:
        """Fenced regions of the block's current text."""
        return find_fenced_regions(self.block.content)

    def region_at(self, cursor: int) -> Optional[FencedRegion]:
        """Find the region containing or immediately adjacent to a cursor offset.

        Containment wins over adjacency so a cursor between two regions
        resolves to the one it actually sits on.

        Args:
            cursor: Character offset into the block text

        Returns:
            Matching region or None
        """
        regions = self.regions
        for region in regions:
            if region.contains(cursor):
                return region
        for region in regions:
            if region.is_adjacent(cursor):
                return region
        return None

    def escape(self, cursor: Optional[int] = None) -> Mode:
        """Handle the Escape key for whichever surface is active.

        Args:
            cursor: Block-editor cursor offset (ignored in code editing)

        Returns:
            Mode after handling the key
        """
        if self.mode == Mode.CODE_EDITING:
            self.deactivate()
            return self.mode

        if cursor is None:
            cursor = len(self.block.content)

        region = self.region_at(cursor)
        if region is None:
            logger.debug("escape_no_region", block_id=self.block.block_id, cursor=cursor)
            return self.mode

        self.activate(region.index)
        return self.mode

    def activate(self, index: int) -> OverlayHandle:
        """Open the code editor overlay for a region.

        Args:
            index: Region index in document order

        Returns:
            Handle of the mounted overlay

        Raises:
            ModeTransitionError: If an overlay is already active
            RegionNotFoundError: If the block has no region at ``index``
        """
        if self.mode == Mode.CODE_EDITING:
            raise ModeTransitionError(
                f"Region {self.active_region.index} is already being edited"
            )

        regions = self.regions
        if not 0 <= index < len(regions):
            raise RegionNotFoundError(index, len(regions))

        region = regions[index]
        self.handle = self.host.mount(region)
        self.active_region = region
        self.mode = Mode.CODE_EDITING

        logger.info(
            "mode_activated",
            block_id=self.block.block_id,
            region_index=index,
            language=region.language,
            line_count=region.line_count,
        )
        return self.handle

    def deactivate(self) -> str:
        """Close the overlay and write its text back into the block.

        The region is looked up again by index so offsets reflect the
        block's current text. Unchanged overlay text leaves the block
        byte-identical.

        Returns:
            Block text after the flush

        Raises:
            ModeTransitionError: If no overlay is active
        """
        if self.mode != Mode.CODE_EDITING:
            raise ModeTransitionError("No code editor overlay is active")

        text = self.handle.unmount()
        index = self.active_region.index
        regions = self.regions

        if index < len(regions):
            region = regions[index]
            if text != region.interior:
                self.block.content = region.replace_interior(self.block.content, text)
                logger.info(
                    "region_flushed",
                    block_id=self.block.block_id,
                    region_index=index,
                    line_count=text.count("\n") + 1,
                )
        else:
            logger.warning(
                "region_vanished",
                block_id=self.block.block_id,
                region_index=index,
                region_count=len(regions),
            )

        self.mode = Mode.BLOCK_EDITING
        self.active_region = None
        self.handle = None
        return self.block.content


class ScratchOverlay:
    """In-memory overlay that applies the same keystroke rules as the TUI.

    Used wherever a widget would be overkill: controller tests and
    conformance scenarios that do not need a terminal.
    """

    def __init__(
        self,
        region: FencedRegion,
        auto_indent: bool = True,
        auto_pair: bool = True,
    ):
        self.language = region.language
        self.text = region.interior
        self.cursor = len(self.text)
        self.auto_indent = auto_indent
        self.auto_pair = auto_pair
        self.mounted = True

    @property
    def line_count(self) -> int:
        return self.text.count("\n") + 1

    def move_cursor(self, row: int, column: int = 0) -> None:
        """Place the cursor at a (row, column) location, clamped to the text."""
        lines = self.text.split("\n")
        row = max(0, min(row, len(lines) - 1))
        column = max(0, min(column, len(lines[row])))
        self.cursor = sum(len(line) + 1 for line in lines[:row]) + column

    def _insert(self, value: str) -> None:
        self.text = self.text[:self.cursor] + value + self.text[self.cursor:]
        self.cursor += len(value)

    def type(self, keys: str) -> None:
        """Type characters at the cursor as a user would."""
        for char in keys:
            before = self.text[:self.cursor]
            next_char = self.text[self.cursor] if self.cursor < len(self.text) else None

            if char == "\n":
                indent = ""
                if self.auto_indent:
                    line_before = before.rsplit("\n", 1)[-1]
                    indent = editing_rules.newline_indent(line_before, before, self.language)
                self._insert("\n" + indent)
                continue

            action = editing_rules.bracket_action(char, next_char) if self.auto_pair else "insert"
            if action == "skip":
                self.cursor += 1
            elif action == "pair":
                self._insert(char + editing_rules.BRACKET_PAIRS[char])
                self.cursor -= 1
            else:
                self._insert(char)

    def get_text(self) -> str:
        return self.text

    def unmount(self) -> str:
        self.mounted = False
        return self.text


class ScratchHost:
    """``OverlayHost`` producing ``ScratchOverlay`` instances."""

    def __init__(self, auto_indent: bool = True, auto_pair: bool = True):
        self.auto_indent = auto_indent
        self.auto_pair = auto_pair
        self.overlays: list[ScratchOverlay] = []

    def mount(self, region: FencedRegion) -> ScratchOverlay:
        overlay = ScratchOverlay(region, auto_indent=self.auto_indent, auto_pair=self.auto_pair)
        self.overlays.append(overlay)
        return overlay

"""Textual screens."""

from blockfence.tui.screens.block_editing import BlockEditingScreen

__all__ = [
    "BlockEditingScreen",
]

"""Textual widget components."""

from blockfence.tui.widgets.block_editor import BlockEditor
from blockfence.tui.widgets.code_block_view import CodeBlockView
from blockfence.tui.widgets.code_editor import CodeEditor, CodeEditorOverlay

__all__ = [
    "BlockEditor",
    "CodeBlockView",
    "CodeEditor",
    "CodeEditorOverlay",
]

"""Blockfence - Logseq-style block editor with fenced code editing."""

__version__ = "0.1.0"

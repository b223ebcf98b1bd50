"""Textual user interface for Blockfence."""

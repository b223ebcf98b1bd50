"""Editing services for Blockfence."""

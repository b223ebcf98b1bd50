"""Data models for Blockfence."""

"""Logseq block source handling."""

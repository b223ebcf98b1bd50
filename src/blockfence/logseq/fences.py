"""Fenced code region detection for Logseq block source.

A block's raw text may hold any number of triple-backtick regions:

    Heading
    ```clojure
    (+ 1 1)
    ```
    Footer

Regions are returned in document order. An opening fence with no closing
fence is not a region, and nothing after it is scanned (the rest of the
block is inside the unterminated fence).
"""

from typing import Optional

from blockfence.models.fence import FencedRegion


FENCE = "```"


def _split_lines(text: str) -> list[tuple[int, str]]:
    """Split text into (start offset, line) pairs without dropping empty lines."""
    lines = []
    offset = 0
    for line in text.split("\n"):
        lines.append((offset, line))
        offset += len(line) + 1
    return lines


def parse_opening_fence(line: str) -> Optional[str]:
    """Return the language tag if ``line`` opens a fence, else None.

    The info string after the backticks may not contain a backtick. A bare
    run of six or more backticks ("``````", an auto-paired fence that has
    not been split yet) is not an opening fence either.

    Args:
        line: Single line of block text

    Returns:
        Language tag ('' when absent) or None if the line is not a fence
    """
    stripped = line.strip()
    if not stripped.startswith(FENCE):
        return None

    info = stripped.lstrip("`")
    ticks = len(stripped) - len(info)
    if ticks < len(FENCE) or "`" in info:
        return None
    if not info and ticks >= 2 * len(FENCE):
        return None

    words = info.split()
    return words[0] if words else ""


def is_closing_fence(line: str) -> bool:
    """Check whether ``line`` is a closing fence (three or more backticks only)."""
    stripped = line.strip()
    return len(stripped) >= 3 and set(stripped) == {"`"}


def find_fenced_regions(text: str) -> list[FencedRegion]:
    """Find all well-formed fenced code regions in block text.

    Args:
        text: Raw block source

    Returns:
        Regions in document order, indexed from 0
    """
    regions: list[FencedRegion] = []
    lines = _split_lines(text)
    i = 0

    while i < len(lines):
        start, line = lines[i]
        language = parse_opening_fence(line)
        if language is None:
            i += 1
            continue

        close = next(
            (j for j in range(i + 1, len(lines)) if is_closing_fence(lines[j][1])),
            None,
        )
        if close is None:
            break

        open_end = start + len(line)
        close_start, close_line = lines[close]
        has_interior_lines = close > i + 1
        interior = text[open_end + 1:close_start - 1] if has_interior_lines else ""

        regions.append(FencedRegion(
            index=len(regions),
            language=language,
            fence_start=start,
            open_end=open_end,
            close_start=close_start,
            fence_end=close_start + len(close_line),
            has_interior_lines=has_interior_lines,
            interior=interior,
        ))
        i = close + 1

    return regions


def find_unclosed_fence(text: str) -> Optional[int]:
    """Return the line index of an opening fence that is never closed.

    Args:
        text: Raw block source

    Returns:
        Zero-based line number of the unterminated opening fence, or None
    """
    lines = [line for _, line in _split_lines(text)]
    i = 0
    while i < len(lines):
        if parse_opening_fence(lines[i]) is None:
            i += 1
            continue
        close = next(
            (j for j in range(i + 1, len(lines)) if is_closing_fence(lines[j])),
            None,
        )
        if close is None:
            return i
        i = close + 1
    return None

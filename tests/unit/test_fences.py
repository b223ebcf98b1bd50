"""Unit tests for fenced code region detection."""

import pytest

from blockfence.logseq.fences import (
    find_fenced_regions,
    find_unclosed_fence,
    is_closing_fence,
    parse_opening_fence,
)


class TestParseOpeningFence:
    """Test opening fence recognition."""

    @pytest.mark.parametrize("line,expected", [
        ("```", ""),
        ("```clojure", "clojure"),
        ("```python title=demo", "python"),
        ("  ```js", "js"),
        ("````", ""),
    ])
    def test_opening_fences(self, line, expected):
        assert parse_opening_fence(line) == expected

    @pytest.mark.parametrize("line", [
        "",
        "text",
        "``",
        "``````",
        "```inline` code",
        "not ```",
    ])
    def test_not_opening_fences(self, line):
        assert parse_opening_fence(line) is None


class TestIsClosingFence:
    """Test closing fence recognition."""

    def test_plain_closing_fence(self):
        assert is_closing_fence("```")

    def test_longer_and_indented(self):
        assert is_closing_fence("````")
        assert is_closing_fence("  ```")

    def test_rejects_info_string(self):
        """A fence with a language tag opens a region, it never closes one."""
        assert not is_closing_fence("```clojure")

    def test_rejects_short(self):
        assert not is_closing_fence("``")
        assert not is_closing_fence("")


class TestFindFencedRegions:
    """Test region extraction from block text."""

    def test_no_regions(self):
        assert find_fenced_regions("") == []
        assert find_fenced_regions("just a bullet") == []

    def test_zero_line_region(self):
        """Closing fence right after the opening line has no interior lines."""
        (region,) = find_fenced_regions("```clojure\n```")

        assert region.index == 0
        assert region.language == "clojure"
        assert region.fence_start == 0
        assert region.open_end == 10
        assert region.close_start == 11
        assert region.fence_end == 14
        assert region.has_interior_lines is False
        assert region.interior == ""
        assert region.line_count == 1

    def test_single_empty_interior_line(self):
        """One blank interior line differs from the zero-line form."""
        (region,) = find_fenced_regions("```\n\n```")

        assert region.has_interior_lines is True
        assert region.interior == ""
        assert region.line_count == 1

    def test_two_empty_interior_lines(self):
        (region,) = find_fenced_regions("```\n\n\n```")

        assert region.interior == "\n"
        assert region.line_count == 2

    def test_interior_whitespace_preserved(self):
        (region,) = find_fenced_regions("```\n  indented\nsecond line\n\n```")

        assert region.interior == "  indented\nsecond line\n"
        assert region.line_count == 3

    def test_text_around_region(self):
        text = "Heading\n```\n```\nFooter"
        (region,) = find_fenced_regions(text)

        assert region.fence_start == 8
        assert region.fence_end == 15
        assert text[region.fence_start:region.fence_end] == "```\n```"

    def test_multiple_regions_in_order(self):
        text = "```clojure\n```\n\n```clojure\n```"
        regions = find_fenced_regions(text)

        assert [r.index for r in regions] == [0, 1]
        assert regions[1].fence_start == 16
        assert all(r.language == "clojure" for r in regions)

    def test_unclosed_fence_is_not_a_region(self):
        assert find_fenced_regions("```clojure\n(+ 1 1)") == []

    def test_unclosed_fence_stops_scan(self):
        """Everything after an unterminated fence belongs to it."""
        text = "```\na\n```\n```python\nb"
        regions = find_fenced_regions(text)

        assert len(regions) == 1
        assert regions[0].interior == "a"

    def test_closing_fence_with_trailing_newline(self):
        (region,) = find_fenced_regions("```\ncode\n```\n")

        assert region.interior == "code"
        assert region.fence_end == 12


class TestFindUnclosedFence:
    """Test unterminated fence detection."""

    def test_all_closed(self):
        assert find_unclosed_fence("```\n```") is None
        assert find_unclosed_fence("no fences") is None

    def test_unclosed_line_index(self):
        assert find_unclosed_fence("intro\n```clojure\n(+ 1 1)") == 1

    def test_unclosed_after_closed_region(self):
        assert find_unclosed_fence("```\na\n```\n```python") == 3

"""Keystroke rules shared by the Textual editors and the in-memory overlay.

These functions decide what a keystroke inserts; they never touch a widget.
"""

from typing import Literal, Optional


LISP_LANGUAGES = frozenset({
    "clojure",
    "clojurescript",
    "edn",
    "lisp",
    "scheme",
    "racket",
    "fennel",
})

BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}", '"': '"'}
CLOSERS = frozenset(BRACKET_PAIRS.values())


def leading_whitespace(text: str) -> str:
    """Return the whitespace prefix of ``text`` exactly as written."""
    return text[:len(text) - len(text.lstrip(" \t"))]


def _lisp_indent(text_before_cursor: str) -> str:
    """Compute indentation from unclosed brackets in Lisp-like source.

    Strings and ``;`` comments are skipped. Top-level positions get no
    indentation; inside a list the new line lines up two columns past the
    open paren, inside a vector or map one column past the bracket.
    """
    stack: list[tuple[str, int]] = []
    column = 0
    in_string = False
    in_comment = False
    escaped = False

    for char in text_before_cursor:
        if char == "\n":
            column = 0
            in_comment = False
            continue

        if in_comment:
            pass
        elif in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == ";":
            in_comment = True
        elif char == '"':
            in_string = True
        elif char in "([{":
            stack.append((char, column))
        elif char in ")]}" and stack:
            stack.pop()

        column += 1

    if not stack:
        return ""

    bracket, bracket_column = stack[-1]
    offset = 2 if bracket == "(" else 1
    return " " * (bracket_column + offset)


def newline_indent(line_before_cursor: str, text_before_cursor: str, language: str = "") -> str:
    """Indentation to seed a new line with when Enter is pressed.

    Args:
        line_before_cursor: Current line's text up to the cursor
        text_before_cursor: Whole document up to the cursor
        language: Language tag of the code region ('' for plain text)

    Returns:
        Whitespace to insert after the newline
    """
    if language.lower() in LISP_LANGUAGES:
        return _lisp_indent(text_before_cursor)
    return leading_whitespace(line_before_cursor)


def bracket_action(
    char: str,
    next_char: Optional[str],
) -> Literal["pair", "skip", "insert"]:
    """Decide how a typed character interacts with bracket auto-closing.

    Args:
        char: Character being typed
        next_char: Character right after the cursor (None at end of line)

    Returns:
        "pair" to insert the character with its closer, "skip" to step over
        an identical closer, or "insert" for a plain insertion
    """
    if char in CLOSERS and next_char == char:
        return "skip"
    if char in BRACKET_PAIRS:
        return "pair"
    return "insert"


def backtick_action(
    prev_char: Optional[str],
    next_char: Optional[str],
) -> Literal["pair", "skip"]:
    """Decide how a typed backtick is handled in the block editor.

    A closing backtick of inline code steps over the paired one; while a
    fence is being typed (previous character is also a backtick) the pair
    keeps growing, so three backticks give "```|```".

    Args:
        prev_char: Character before the cursor (None at start of line)
        next_char: Character after the cursor (None at end of line)

    Returns:
        "pair" to insert two backticks with the cursor between, or "skip"
    """
    if next_char == "`" and prev_char != "`":
        return "skip"
    return "pair"

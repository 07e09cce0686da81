"""
Text processing utilities shared by the LaTeX helpers and HTML passes.
"""

import re
from typing import Tuple

WHITESPACE_RUN = re.compile(r"\s+")


def extract_balanced_delimiters(
    text: str,
    start_pos: int,
    open_char: str = '{',
    close_char: str = '}',
    escape_char: str = '\\'
) -> Tuple[str, int]:
    """
    Extract content between balanced delimiters, handling escaped characters.

    Assumes start_pos is just AFTER an opening delimiter. Counts nested delimiters
    to find the matching closing delimiter, skipping escaped characters.

    Args:
        text: Text containing delimited content
        start_pos: Position just after the opening delimiter
        open_char: Opening delimiter character (default: '{')
        close_char: Closing delimiter character (default: '}')
        escape_char: Character used for escaping (default: '\\')

    Returns:
        (content, end_pos) where:
        - content: Text between the delimiters (excluding delimiters themselves)
        - end_pos: Position after the closing delimiter

    Raises:
        ValueError: If delimiters are unmatched

    Example:
        >>> text = "foo {bar {nested} baz} qux"
        >>> content, end = extract_balanced_delimiters(text, 5)
        >>> content
        'bar {nested} baz'
        >>> text2 = "code [list [1, 2] more] end"
        >>> content2, end2 = extract_balanced_delimiters(text2, 6, '[', ']')
        >>> content2
        'list [1, 2] more'
    """
    depth = 1  # Already inside opening delimiter
    pos = start_pos

    while pos < len(text) and depth > 0:
        if text[pos] == escape_char:
            pos += 2
            continue
        elif text[pos] == open_char:
            depth += 1
        elif text[pos] == close_char:
            depth -= 1
        pos += 1

    if depth != 0:
        raise ValueError(
            f"Unmatched {open_char}{close_char} delimiters starting at position {start_pos}"
        )

    content = text[start_pos:pos - 1]
    return content, pos


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and strip the ends."""
    return WHITESPACE_RUN.sub(" ", text).strip()


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display, adding ellipsis if needed.

    Args:
        text: Text to truncate
        max_len: Maximum length (including the ellipsis)

    Returns:
        Truncated text with "..." if it was longer than max_len
    """
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."

"""
Document metadata extraction from raw LaTeX source.

Title, author and date are conventionally flat text, so a single-level
brace capture is enough here (no nesting support on purpose).
"""

import re
from dataclasses import asdict, dataclass
from typing import Optional

from vitae.utils.latex_parsing_tools import LaTeXPatterns, extract_environment_content
from vitae.utils.text_processing import collapse_whitespace
from vitae.utils.timestamp import today

DEFAULT_TITLE = "Untitled Document"
DEFAULT_AUTHOR = "Unknown Author"


@dataclass(frozen=True)
class DocumentMetadata:
    """Title, author and date of one document."""

    title: str = DEFAULT_TITLE
    author: str = DEFAULT_AUTHOR
    date: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


def _first_command_argument(latex: str, command: str) -> Optional[str]:
    match = re.search(LaTeXPatterns.COMMAND_WITH_BRACES.format(command=command), latex)
    return match.group(1) if match else None


def extract_metadata(latex: str) -> DocumentMetadata:
    """
    Extract \\title, \\author and \\date from LaTeX source.

    Missing commands fall back to "Untitled Document", "Unknown Author" and
    today's date (YYYY-MM-DD).

    Example:
        >>> extract_metadata(r"\\title{Jane Doe}\\author{J. Doe}")
        DocumentMetadata(title='Jane Doe', author='J. Doe', date='2025-11-14')
    """
    return DocumentMetadata(
        title=_first_command_argument(latex, "title") or DEFAULT_TITLE,
        author=_first_command_argument(latex, "author") or DEFAULT_AUTHOR,
        date=_first_command_argument(latex, "date") or today(),
    )


def extract_abstract(latex: str) -> Optional[str]:
    """Return the whitespace-collapsed abstract environment body, or None if absent."""
    try:
        content, _, _ = extract_environment_content(latex, "abstract")
    except ValueError:
        return None

    abstract = collapse_whitespace(content)
    return abstract or None

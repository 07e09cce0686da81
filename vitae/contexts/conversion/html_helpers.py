"""
HTML transformation helpers shared by several passes.
"""

import html
import re
from dataclasses import dataclass
from typing import Optional

from vitae.contexts.conversion.html_patterns import (
    ANCHOR_TARGET,
    DEFAULT_ICON_CLASS,
    ICON_MAP,
    LINEBREAK,
    SEPARATOR,
    HtmlPatterns,
)
from vitae.utils.latex_parsing_tools import replace_command, unescape_latex_text
from vitae.utils.text_processing import collapse_whitespace, extract_balanced_delimiters

HREF_OPENING = "\\href{"
UNDERLINE_COMMANDS = ("uline", "underline")

# Inline formatting commands allowed in macro arguments, outermost tag first
INLINE_COMMAND_TAGS = (
    ("textbf", "<strong>", "</strong>"),
    ("textit", "<em>", "</em>"),
    ("emph", "<em>", "</em>"),
    ("texttt", "<code>", "</code>"),
    ("underline", "<u>", "</u>"),
    ("uline", "", ""),
)
INLINE_MATH = re.compile(r"(?<!\\)\$(.*?)(?<!\\)\$", re.DOTALL)
LATEX_LINEBREAK = re.compile(r"\\\\(?:\[[^\]]*\])?")
UNESCAPED_TIE = re.compile(r"(?<!\\)~")


@dataclass(frozen=True)
class HrefCommand:
    """URL and cleaned display text of a \\href{url}{text} command."""

    url: str
    text: str


def replace_icon_macros(fragment: str) -> str:
    """
    Replace Font Awesome icon markers with <i> elements.

    Unknown icon names fall back to a generic bullet class. Idempotent: the
    marker pattern no longer exists after the first run.
    """
    return re.sub(
        HtmlPatterns.ICON_MARKER,
        lambda match: f'<i class="{ICON_MAP.get(match.group(1), DEFAULT_ICON_CLASS)}"></i>',
        fragment,
    )


def clean_text(fragment: str) -> str:
    """Flatten line breaks, restyle math pipes and drop renderer href classes."""
    fragment = fragment.replace(LINEBREAK, " ")
    fragment = re.sub(HtmlPatterns.MATH_PIPE, SEPARATOR, fragment)
    fragment = re.sub(HtmlPatterns.HREF_CLASS, "", fragment)
    return fragment.strip()

def render_inline_latex(latex: str) -> str:
    """
    Render the inline LaTeX of a raw macro argument as an HTML snippet.

    Formatting commands become tags, `$|$` becomes the field separator,
    other inline math is wrapped for MathJax, and escaped characters are
    unescaped.

    Example:
        >>> render_inline_latex(r"\\emph{Python $|$ Go}")
        '<em>Python <span class="sep">·</span> Go</em>'
    """
    text = latex
    for command, opening, closing in INLINE_COMMAND_TAGS:
        text = replace_command(text, command, opening, closing)

    text = INLINE_MATH.sub(
        lambda match: SEPARATOR
        if match.group(1).strip() == "|"
        else f'<span class="inline-math">{match.group(1).strip()}</span>',
        text,
    )
    text = LATEX_LINEBREAK.sub(" ", text)
    text = text.replace("---", "—").replace("--", "–")
    text = UNESCAPED_TIE.sub(" ", text)
    return collapse_whitespace(unescape_latex_text(text))



def parse_href_command(latex: str) -> Optional[HrefCommand]:
    """
    Extract URL and display text from the first \\href command in an argument.

    Both arguments are read with brace matching, so display text may nest
    commands. Underline commands are unwrapped (an unterminated one keeps its text).

    Returns:
        HrefCommand, or None if the command cannot be matched

    Example:
        >>> parse_href_command(r"\\href{https://x.com}{\\uline{Link}}")
        HrefCommand(url='https://x.com', text='Link')
    """
    start = latex.find(HREF_OPENING)
    if start == -1:
        return None

    try:
        url, end = extract_balanced_delimiters(latex, start + len(HREF_OPENING))
    except ValueError:
        return None

    if end >= len(latex) or latex[end] != "{":
        return None

    try:
        text, _ = extract_balanced_delimiters(latex, end + 1)
    except ValueError:
        # Display text runs to the end of the argument
        text = latex[end + 1:]

    for command in UNDERLINE_COMMANDS:
        text = replace_command(text, command)

    return HrefCommand(url=url.strip(), text=render_inline_latex(text))


def href_to_anchor(latex: str, make_bold: bool = False) -> str:
    """
    Convert an argument holding a \\href command into an anchor element.

    Arguments without a matchable \\href are returned as inline text
    (optionally bolded) instead of raising.
    """
    parsed = parse_href_command(latex)
    if parsed is None:
        text = render_inline_latex(latex)
        return f"<strong>{text}</strong>" if make_bold else text

    content = f"<strong>{parsed.text}</strong>" if make_bold else parsed.text
    return f'<a href="{html.escape(parsed.url)}" {ANCHOR_TARGET}>{content}</a>'


def normalize_date_range(dates: str) -> str:
    """
    Normalize a LaTeX date range for display.

    Example:
        >>> normalize_date_range("Sep. 2019 --   Jun. 2023")
        'Sep. 2019 – Jun. 2023'
    """
    return collapse_whitespace(re.sub(r"\s*--\s*", " – ", dates))

"""
HTML markup patterns shared by the conversion passes.

Every regex the passes anchor on lives here, next to the marker and icon
tables, so the renderer output contract and the rewrites stay in one view.
"""

from dataclasses import dataclass


def marker(macro_name: str) -> str:
    """Inert placeholder the renderer emits for a macro it has no rule for."""
    return f'<span class="macro macro-{macro_name}"></span>'


@dataclass(frozen=True)
class ListMarkers:
    """Paired list-boundary markers (these carry no arguments)."""

    start: str = marker("resumeItemListStart")
    end: str = marker("resumeItemListEnd")
    item: str = marker("resumeItem")
    heading_start: str = marker("resumeHeadingListStart")
    heading_end: str = marker("resumeHeadingListEnd")


LIST_MARKERS = ListMarkers()

ICON_MAP = {
    "faLinkedin": "fab fa-linkedin",
    "faGithub": "fab fa-github",
    "faEnvelope": "fas fa-envelope",
    "faMobile": "fas fa-mobile",
}
DEFAULT_ICON_CLASS = "fas fa-circle"

# Rendered text for a literal & (alignment or unescaped ampersand)
AMPERSAND_ENTITY = "&#x26;"
LINEBREAK = '<br class="linebreak">'
SEPARATOR = '<span class="sep">·</span>'
ANCHOR_TARGET = 'target="_blank" rel="noopener noreferrer"'

# Text that may follow a macro marker and still belong to its arguments:
# whole anchors, inline formatting tags, field separators, inline math,
# stray underline markers, plain text.
_MARKER_REGION = (
    r"(?:<a\b[^>]*>.*?</a>"
    r"|</?(?:strong|em|u|code)>"
    r'|<span class="sep">·</span>'
    r'|<span class="inline-math">[^<]*</span>'
    r'|<span class="macro macro-uline"></span>'
    r"|[^<])*"
)


@dataclass(frozen=True)
class HtmlPatterns:
    """Regex sources for the conversion passes (compile with re.DOTALL where noted)."""

    MAKETITLE_PARAGRAPH: str = r'<p>\s*<span class="macro macro-maketitle"></span>\s*</p>'

    # Heading promotion: h3 -> h2 and h4 -> h3 in one simultaneous pass
    PROMOTABLE_HEADING_TAG: str = r"<(/?)h([34])(\b[^>]*)>"

    ABSTRACT_BLOCK: str = r'(<div class="environment abstract">)'
    MATH_PIPE: str = r'<span class="inline-math">\|</span>'

    # Contact header (DOTALL): a tabular block with no nested divs
    CONTACT_BLOCK: str = r'<div class="environment tabular[*x]?">((?:(?!<div\b).)*?)</div>'
    COLUMN_SPEC_ARTIFACT: str = r"^(?:\s*[Xlcrp@{}|]+(?=\s|<))+"
    VSPACE_SPAN: str = r'<span class="vspace"[^>]*></span>'
    ULINE_MARKER: str = r'<span class="macro macro-uline"></span>'
    NAME_SPAN_OPENING: str = r'<span class="textsize-(?:Huge|huge|LARGE|Large)">'
    SPAN_TAG: str = r"<span\b[^>]*>|</span>"
    UP_TO_FIRST_LINEBREAK: str = r'^.*?<br class="linebreak">\s*'
    MOBILE_ICON_NUMBER: str = (
        r'(<i class="fas fa-(?:mobile|mobile-alt|phone)"></i>)\s*([+\d][+\d\s\-]*\d)'
    )
    LEADING_PUNCTUATION: str = r"^\s*[;:,\-–]\s*"

    # Argument-bearing macro markers followed by their rendered arguments (DOTALL)
    TRIO_REGION: str = marker("resumeTrioHeading") + _MARKER_REGION
    QUAD_DETAILS_REGION: str = marker("resumeQuadHeadingDetails") + _MARKER_REGION
    QUAD_HEADING_REGION: str = r'<span class="macro macro-resumeQuadHeading"></span>(' + _MARKER_REGION + ")"

    # Date-range repair: a date ending in a dash whose closing token leaked into the role
    SPLIT_DATE_RANGE: str = (
        r'(<div class="quad-details">\s*<div class="row"><div class="left">(?:(?!</div>).)*</div>'
        r'<div class="right"><span class="date">)([^<]*?–)\s*'
        r'(</span></div></div>\s*<div class="row"><div class="left"><em>)\s*'
        r"(Present|[A-Z][a-z]{2}\.?\s\d{4})\b\s*([^<]*)(</em>)"
    )

    # Technical skills region: heading up to the next h2 or end of fragment (DOTALL)
    TECHNICAL_SKILLS_REGION: str = r"<h2>Technical Skills</h2>.*?(?=<h2>|\Z)"

    # Education heuristics on already-rendered text
    DEGREE_LINE: str = (
        r"((?:Bachelor|Master|Doctor|Associate)\s+of\b.*?|Ph\.\s?D\.?.*?|B\.\s?S\..*?|M\.\s?S\..*?)"
    )
    DATE_TOKEN: str = r"(?:[A-Z][a-z]{2,9}\.?\s\d{4}|\d{4})"
    CITY_COUNTRY: str = r"^(.*?),\s*([A-Za-z'’\- ]+,\s*[A-Za-z'’\- ]+)$"
    GLUED_INSTITUTION: str = (
        r"^(.*?(?:University|College|Institute|School|Academy))\s*"
        r"([A-Z][A-Za-z'’\- ]+,\s*[A-Za-z'’\- ]+)$"
    )

    # Paragraph tags wrapped around block markup introduced by the passes
    OPEN_P_BEFORE_BLOCK: str = (
        r'<p>\s*(<ul class="resume-items">'
        r'|<div class="(?:resume-heading-list|contact(?: dual| centered)?|trio|quad|quad-details|skill-row)">)'
    )
    CLOSE_P_AFTER_BLOCK: str = r"(</ul>|</div>)\s*</p>"
    CLOSE_P_BEFORE_TRIO: str = r'</p>\s*(<div class="trio">)'
    EMPTY_PARAGRAPH: str = r"<p>\s*</p>"

    ICON_MARKER: str = r'<span class="macro macro-(fa\w+)"></span>'

    # Final cleanup
    PERCENT_BEFORE_LETTER: str = r"(\d+)%([a-zA-Z])"
    HREF_CLASS: str = r'\s*class="href"'
    DOUBLE_SPACE_ANCHOR: str = r"<a\s{2,}href="
    ABSOLUTE_ANCHOR_WITHOUT_TARGET: str = r'<a href="(https?://[^"]+)"(?![^>]*\btarget=)'

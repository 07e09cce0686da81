"""
HTML Transformation Passes

Each pass is a pure function from an HTML fragment (plus auxiliary data) to a
new fragment. Passes rewrite one class of macro marker or rendering artifact
into final résumé markup and run in the fixed order declared in pipeline.py.

Markers without a matching invocation tuple are left untouched, so a
source/render desync degrades to unstyled text instead of an error.
"""

import html
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from vitae.contexts.conversion.html_helpers import (
    clean_text,
    href_to_anchor,
    normalize_date_range,
    render_inline_latex,
    replace_icon_macros,
)
from vitae.contexts.conversion.html_patterns import (
    AMPERSAND_ENTITY,
    ANCHOR_TARGET,
    LIST_MARKERS,
    SEPARATOR,
    HtmlPatterns,
)
from vitae.contexts.extraction.macro_parser import (
    MacroCursor,
    MacroInvocation,
    QuadHeading,
    QuadHeadingDetails,
    SectionType,
    TrioHeading,
)
from vitae.contexts.extraction.metadata import DocumentMetadata
from vitae.utils.text_processing import collapse_whitespace

TRIO_REGION = re.compile(HtmlPatterns.TRIO_REGION, re.DOTALL)
QUAD_DETAILS_REGION = re.compile(HtmlPatterns.QUAD_DETAILS_REGION, re.DOTALL)
QUAD_HEADING_REGION = re.compile(HtmlPatterns.QUAD_HEADING_REGION, re.DOTALL)
CONTACT_BLOCK = re.compile(HtmlPatterns.CONTACT_BLOCK, re.DOTALL)
SPLIT_DATE_RANGE = re.compile(HtmlPatterns.SPLIT_DATE_RANGE, re.DOTALL)
TECHNICAL_SKILLS_REGION = re.compile(HtmlPatterns.TECHNICAL_SKILLS_REGION, re.DOTALL)

HEURISTIC_EDUCATION = re.compile(
    r"^\s*(?P<pre>.*?)\s*"
    + HtmlPatterns.DEGREE_LINE
    + r"\s*(?P<dates>"
    + HtmlPatterns.DATE_TOKEN
    + r"\s*[–-]+\s*(?:"
    + HtmlPatterns.DATE_TOKEN
    + r"|Present))\s*$",
    re.DOTALL,
)
TAG = re.compile(r"<[^>]+>")


# ============================================================================
# Title, headings, abstract, math pipes
# ============================================================================


def process_title_block(fragment: str, metadata: DocumentMetadata) -> str:
    """Replace the \\maketitle marker paragraph with a title/author/date block."""
    title_block = (
        f'\n<h1 class="title">{html.escape(metadata.title)}</h1>'
        f'\n<div class="author">{html.escape(metadata.author)}</div>'
        f'\n<div class="date">{html.escape(metadata.date)}</div>\n'
    )
    return re.sub(HtmlPatterns.MAKETITLE_PARAGRAPH, lambda _: title_block, fragment, count=1)


def promote_headings(fragment: str) -> str:
    """
    Promote heading levels by one: h3 -> h2 and h4 -> h3.

    Both levels are rewritten in one substitution, so an original h4 is never
    promoted twice and an original h3 never reaches h1.
    """
    return re.sub(
        HtmlPatterns.PROMOTABLE_HEADING_TAG,
        lambda match: f"<{match.group(1)}h{int(match.group(2)) - 1}{match.group(3)}>",
        fragment,
    )


def process_abstract(fragment: str) -> str:
    """Insert an "Abstract" heading before the abstract block."""
    return re.sub(HtmlPatterns.ABSTRACT_BLOCK, r"<h2>Abstract</h2>\1", fragment, count=1)


def replace_math_pipes(fragment: str) -> str:
    """Render $|$ field separators as a middle dot instead of math."""
    return re.sub(HtmlPatterns.MATH_PIPE, SEPARATOR, fragment)


# ============================================================================
# Contact header
# ============================================================================


def _clean_contact_block(inner: str) -> str:
    inner = inner.replace("\n", " ")
    inner = re.sub(HtmlPatterns.COLUMN_SPEC_ARTIFACT, " ", inner)
    inner = re.sub(HtmlPatterns.VSPACE_SPAN, " ", inner)
    inner = re.sub(HtmlPatterns.ULINE_MARKER, "", inner)
    inner = re.sub(r"\s{2,}", " ", inner).strip()
    return replace_icon_macros(inner)


def _find_name_span(block: str):
    """Locate the large-text name span, matching nested spans by depth."""
    opening = re.search(HtmlPatterns.NAME_SPAN_OPENING, block)
    if not opening:
        return None

    depth = 1
    for tag in re.finditer(HtmlPatterns.SPAN_TAG, block[opening.end():]):
        depth += -1 if tag.group(0) == "</span>" else 1
        if depth == 0:
            inner = block[opening.end(): opening.end() + tag.start()]
            return opening.start(), opening.end() + tag.end(), inner
    return None


def _split_name(block: str):
    name_span = _find_name_span(block)
    name = name_span[2].strip() if name_span else ""

    if re.search(HtmlPatterns.UP_TO_FIRST_LINEBREAK, block, re.DOTALL):
        details = re.sub(HtmlPatterns.UP_TO_FIRST_LINEBREAK, "", block, count=1, flags=re.DOTALL)
    elif name_span:
        details = (block[: name_span[0]] + block[name_span[1]:]).strip()
    else:
        details = block

    # Drop emphasis tags left dangling around the removed name
    details = re.sub(r"^(?:\s*</?(?:strong|em)>)+", "", details).strip()
    return name, details


def _wrap_mobile_numbers(text: str) -> str:
    return re.sub(
        HtmlPatterns.MOBILE_ICON_NUMBER,
        lambda match: f'<span class="contact-mobile">{match.group(1)} {match.group(2).strip()}</span>',
        text,
    )


def process_contact_header(fragment: str) -> str:
    """
    Restructure the tabular contact block before the first section heading.

    The block is split into the name (large-text span) and the contact details
    after the first line break. Details are split at the first ampersand into a
    primary and a secondary group, giving a two-column layout; without an
    ampersand the layout is a single centered column.
    """
    match = CONTACT_BLOCK.search(fragment)
    if not match:
        return fragment

    first_heading = fragment.find("<h2>")
    if first_heading != -1 and match.start() > first_heading:
        return fragment

    block = _clean_contact_block(match.group(1))
    name, details = _split_name(block)

    primary, secondary = details, ""
    split_at = details.find(AMPERSAND_ENTITY)
    if split_at != -1:
        primary = details[:split_at].strip()
        secondary = details[split_at + len(AMPERSAND_ENTITY):].strip()

    primary_clean = _wrap_mobile_numbers(clean_text(primary))
    secondary_clean = re.sub(HtmlPatterns.LEADING_PUNCTUATION, "", clean_text(secondary))

    layout = "contact dual" if secondary_clean else "contact centered"
    right_column = f'\n  <div class="contact-right">{secondary_clean}</div>' if secondary_clean else ""

    contact = (
        f'\n<div class="{layout}">'
        f'\n  <div class="contact-left">'
        f'\n    <div class="contact-name">{name}</div>'
        f'\n    <div class="contact-links">{primary_clean}</div>'
        f"\n  </div>{right_column}"
        f"\n</div>"
    )
    return fragment[: match.start()] + contact + fragment[match.end():]


# ============================================================================
# Argument-bearing headings
# ============================================================================


def _render_trio(trio: TrioHeading) -> str:
    return (
        '\n<div class="trio">'
        f'\n  <div class="trio-title"><strong>{render_inline_latex(trio.title)}</strong></div>'
        f'\n  <div class="trio-tech"><em>{render_inline_latex(trio.tech)}</em></div>'
        f'\n  <div class="trio-link">{href_to_anchor(trio.link)}</div>'
        "\n</div>"
    )


def process_trio_headings(fragment: str, invocations: Sequence[MacroInvocation]) -> str:
    """Replace each trio marker (and its rendered arguments) with a three-column row."""
    cursor = MacroCursor(invocations)

    def replace(match):
        invocation = cursor.next()
        if invocation is None:
            return match.group(0)
        return _render_trio(TrioHeading.from_invocation(invocation))

    return TRIO_REGION.sub(replace, fragment)


def _render_quad_details(details: QuadHeadingDetails) -> str:
    role = render_inline_latex(details.role)
    return (
        '\n<div class="quad-details">'
        f'\n  <div class="row"><div class="left">{href_to_anchor(details.link, make_bold=True)}</div>'
        f'<div class="right"><span class="date">{normalize_date_range(details.dates)}</span></div></div>'
        f'\n  <div class="row"><div class="left"><em>{role}</em></div><div class="right"></div></div>'
        "\n</div>"
    )


def process_quad_details(fragment: str, invocations: Sequence[MacroInvocation]) -> str:
    """Replace each experience marker with a link/date row over an italic role row."""
    cursor = MacroCursor(invocations)

    def replace(match):
        invocation = cursor.next()
        if invocation is None:
            return match.group(0)
        return _render_quad_details(QuadHeadingDetails.from_invocation(invocation))

    return QUAD_DETAILS_REGION.sub(replace, fragment)


def merge_date_ranges(fragment: str) -> str:
    """
    Move a date range's closing token back from the role row into the date span.

    Repairs "Oct 2023 –" / "Present Engineer" into "Oct 2023 – Present" / "Engineer".
    """
    return SPLIT_DATE_RANGE.sub(r"\1\2 \4\3\5\6", fragment)


# ============================================================================
# Technical skills
# ============================================================================


def _render_skill_row(skill: SectionType) -> str:
    return (
        '\n<div class="skill-row">'
        f'\n  <div class="skill-label"><strong>{render_inline_latex(skill.label)}</strong></div>'
        f'\n  <div class="skill-sep">{skill.separator}</div>'
        f'\n  <div class="skill-content">{render_inline_latex(skill.content)}</div>'
        "\n</div>"
    )


def process_technical_skills(fragment: str, invocations: Sequence[MacroInvocation]) -> str:
    """
    Replace the Technical Skills section body with one row per skill tuple.

    The section runs from its heading to the next h2 (or the end of the
    fragment). Without any tuples the section is left as rendered.
    """
    if not invocations:
        return fragment

    rows = "".join(
        _render_skill_row(SectionType.from_invocation(invocation)) for invocation in invocations
    )
    section = f'<h2>Technical Skills</h2><div class="resume-heading-list">{rows}</div>\n'
    return TECHNICAL_SKILLS_REGION.sub(lambda _: section, fragment, count=1)


# ============================================================================
# Education
# ============================================================================


class EntryOrigin(Enum):
    """Where an education entry's fields came from."""

    STRUCTURED = "structured"
    HEURISTIC = "heuristic"


@dataclass(frozen=True)
class EducationEntry:
    institution: str
    location: str
    degree: str
    dates: str
    origin: EntryOrigin


def _split_institution_location(text: str):
    for pattern in (HtmlPatterns.CITY_COUNTRY, HtmlPatterns.GLUED_INSTITUTION):
        match = re.match(pattern, text)
        if match:
            return match.group(1).strip(), match.group(2).strip()
    return text, ""


def parse_education_entry(
    rendered_region: str, invocation: Optional[MacroInvocation]
) -> Optional[EducationEntry]:
    """
    Build an education entry from its invocation tuple, or from rendered text.

    The heuristic branch only runs without a tuple: it needs a degree line and a
    month-based date range in the rendered text, then splits the text before the
    degree into institution and "City, Country".

    Returns:
        EducationEntry tagged with its origin, or None if neither branch applies
    """
    if invocation is not None:
        quad = QuadHeading.from_invocation(invocation)
        return EducationEntry(
            institution=render_inline_latex(quad.institution),
            location=render_inline_latex(quad.location),
            degree=render_inline_latex(quad.degree),
            dates=normalize_date_range(quad.dates),
            origin=EntryOrigin.STRUCTURED,
        )

    text = collapse_whitespace(html.unescape(TAG.sub(" ", rendered_region)))
    match = HEURISTIC_EDUCATION.match(text)
    if not match:
        return None

    institution, location = _split_institution_location(collapse_whitespace(match.group("pre")))
    return EducationEntry(
        institution=institution,
        location=location,
        degree=collapse_whitespace(match.group(2)),
        dates=normalize_date_range(match.group("dates").replace("–", "--")),
        origin=EntryOrigin.HEURISTIC,
    )


def _render_education(entry: EducationEntry) -> str:
    return (
        '\n<div class="quad">'
        f'\n  <div class="row"><div class="left"><strong>{entry.institution}</strong></div>'
        f'<div class="right">{entry.location}</div></div>'
        f'\n  <div class="row"><div class="left"><em>{entry.degree}</em></div>'
        f'<div class="right"><em>{entry.dates}</em></div></div>'
        "\n</div>"
    )


def process_quad_headings(fragment: str, invocations: Sequence[MacroInvocation]) -> str:
    """Replace each education marker with an institution/location over degree/dates block."""
    cursor = MacroCursor(invocations)

    def replace(match):
        entry = parse_education_entry(match.group(1), cursor.next())
        if entry is None:
            return match.group(0)
        return _render_education(entry)

    return QUAD_HEADING_REGION.sub(replace, fragment)


# ============================================================================
# Lists and wrappers
# ============================================================================


def process_list_macros(fragment: str) -> str:
    """
    Convert item-list start/item/end markers into <ul> lists.

    Each start marker pairs with the first end marker after it (no nesting).
    Empty segments between item markers are dropped. A start marker without a
    closing end marker stops processing and is left in place.
    """
    result = fragment
    search_start = 0

    while True:
        start = result.find(LIST_MARKERS.start, search_start)
        if start == -1:
            break

        end = result.find(LIST_MARKERS.end, start)
        if end == -1:
            break

        inner = result[start + len(LIST_MARKERS.start): end]
        items = "".join(
            f"<li>{part.strip()}</li>" for part in inner.split(LIST_MARKERS.item) if part.strip()
        )
        list_html = f'<ul class="resume-items">{items}</ul>'

        result = result[:start] + list_html + result[end + len(LIST_MARKERS.end):]
        search_start = start + len(list_html)

    return result


def process_heading_list_macros(fragment: str) -> str:
    """Turn heading-list start/end markers into a container div."""
    return fragment.replace(
        LIST_MARKERS.heading_start, '<div class="resume-heading-list">'
    ).replace(LIST_MARKERS.heading_end, "</div>")


def cleanup_paragraph_wrappers(fragment: str) -> str:
    """Remove <p> tags the renderer wrapped around block markup built by earlier passes."""
    fragment = re.sub(HtmlPatterns.OPEN_P_BEFORE_BLOCK, r"\1", fragment)
    fragment = re.sub(HtmlPatterns.CLOSE_P_AFTER_BLOCK, r"\1", fragment)
    fragment = re.sub(HtmlPatterns.CLOSE_P_BEFORE_TRIO, r"\1", fragment)
    return re.sub(HtmlPatterns.EMPTY_PARAGRAPH, "", fragment)


# ============================================================================
# Final cleanup
# ============================================================================


def apply_final_cleanups(fragment: str) -> str:
    """
    Cosmetic fixes: spacing after percentages, stray artifacts, link targets.

    Absolute-URL anchors get target="_blank" and a noopener rel unless they
    already carry a target, so running this twice changes nothing.
    """
    fragment = re.sub(HtmlPatterns.PERCENT_BEFORE_LETTER, r"\1% \2", fragment)
    fragment = re.sub(HtmlPatterns.ULINE_MARKER, "", fragment)
    fragment = re.sub(HtmlPatterns.HREF_CLASS, "", fragment)
    fragment = re.sub(HtmlPatterns.DOUBLE_SPACE_ANCHOR, "<a href=", fragment)
    return re.sub(
        HtmlPatterns.ABSOLUTE_ANCHOR_WITHOUT_TARGET,
        lambda match: f'<a href="{match.group(1)}" {ANCHOR_TARGET}',
        fragment,
    )

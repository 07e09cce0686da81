"""
Resume Macro Argument Extraction

Scans raw LaTeX source for invocations of the custom resume macros and extracts
their brace-delimited arguments in source order. Arguments may contain nested
brace groups (e.g. \\href{url}{\\uline{text}}), so extraction walks brace depth
instead of relying on a flat regex.

The rendered HTML only carries empty marker spans for these macros; the
invocation tuples produced here are what the conversion passes consume, one
per marker, in the same order.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from vitae.contexts.extraction.logger import _log_warning, log_macro_counts
from vitae.utils.latex_parsing_tools import LaTeXPatterns, extract_sequential_params
from vitae.utils.text_processing import truncate_display


@dataclass(frozen=True)
class MacroSpec:
    """Name and fixed arity of a custom resume macro."""

    name: str
    num_args: int


TRIO_HEADING = MacroSpec("resumeTrioHeading", 3)
QUAD_HEADING_DETAILS = MacroSpec("resumeQuadHeadingDetails", 3)
QUAD_HEADING = MacroSpec("resumeQuadHeading", 4)
SECTION_TYPE = MacroSpec("resumeSectionType", 3)

ARGUMENT_MACROS = (TRIO_HEADING, QUAD_HEADING_DETAILS, QUAD_HEADING, SECTION_TYPE)


@dataclass(frozen=True)
class MacroInvocation:
    """
    One occurrence of a custom macro in the source.

    Attributes:
        name: Macro name without backslash
        full_match: Source text from the backslash to the last closing brace
        args: Trimmed argument strings, raw LaTeX
    """

    name: str
    full_match: str
    args: Tuple[str, ...]

    def as_tuple(self) -> Tuple[str, ...]:
        """Return (full_match, arg1, ..., argN)."""
        return (self.full_match,) + self.args


@dataclass(frozen=True)
class TrioHeading:
    """Project entry: title, technology stack, link."""

    title: str
    tech: str
    link: str

    @classmethod
    def from_invocation(cls, invocation: MacroInvocation) -> "TrioHeading":
        return cls(*invocation.args)


@dataclass(frozen=True)
class QuadHeadingDetails:
    """Experience entry: linked organisation, date range, role."""

    link: str
    dates: str
    role: str

    @classmethod
    def from_invocation(cls, invocation: MacroInvocation) -> "QuadHeadingDetails":
        return cls(*invocation.args)


@dataclass(frozen=True)
class QuadHeading:
    """Education entry: institution, location, degree, date range."""

    institution: str
    location: str
    degree: str
    dates: str

    @classmethod
    def from_invocation(cls, invocation: MacroInvocation) -> "QuadHeading":
        return cls(*invocation.args)


@dataclass(frozen=True)
class SectionType:
    """Skill row: label, separator glyph, content."""

    label: str
    separator: str
    content: str

    @classmethod
    def from_invocation(cls, invocation: MacroInvocation) -> "SectionType":
        return cls(*invocation.args)


@dataclass(frozen=True)
class ResumeMacros:
    """Invocation tuples for every argument-bearing resume macro, in source order."""

    trio: Tuple[MacroInvocation, ...] = ()
    quad_details: Tuple[MacroInvocation, ...] = ()
    quad_heading: Tuple[MacroInvocation, ...] = ()
    section_type: Tuple[MacroInvocation, ...] = ()

    def counts(self) -> dict:
        return {
            TRIO_HEADING.name: len(self.trio),
            QUAD_HEADING_DETAILS.name: len(self.quad_details),
            QUAD_HEADING.name: len(self.quad_heading),
            SECTION_TYPE.name: len(self.section_type),
        }


class MacroCursor:
    """
    Positional consumer over one macro's invocations.

    Each pass builds its own cursor, so no index is shared between passes or calls.

    Example:
        >>> cursor = MacroCursor(macros.trio)
        >>> first = cursor.next()
    """

    def __init__(self, invocations: Iterable[MacroInvocation]):
        self._invocations = list(invocations)
        self._position = 0

    def next(self) -> Optional[MacroInvocation]:
        """Return the next unconsumed invocation, or None when exhausted."""
        if self._position >= len(self._invocations):
            return None
        invocation = self._invocations[self._position]
        self._position += 1
        return invocation

    @property
    def remaining(self) -> int:
        return len(self._invocations) - self._position


def extract_macro_invocations(latex: str, name: str, num_args: int) -> List[MacroInvocation]:
    """
    Find every \\name{...}{...} invocation and extract its arguments.

    Scanning is strictly left to right. Each occurrence of the literal text
    "\\name{" starts an invocation; a brace-depth walk collects up to num_args
    arguments, skipping any non-brace characters between them. Invocations whose
    source ends before all arguments close are dropped and logged.

    Args:
        latex: Raw LaTeX source
        name: Macro name without backslash
        num_args: Fixed arity of the macro

    Returns:
        Invocations in source order

    Example:
        >>> extract_macro_invocations(r"\\resumeTrioHeading{A}{B {x}}{C}", "resumeTrioHeading", 3)[0].args
        ('A', 'B {x}', 'C')
    """
    opening = re.compile(LaTeXPatterns.COMMAND_OPENING.format(command=re.escape(name)))
    invocations = []

    for match in opening.finditer(latex):
        # Start AT the opening brace so it's picked up as the first parameter
        params, end_pos = extract_sequential_params(latex, match.end() - 1, num_args)

        if len(params) < num_args:
            snippet = truncate_display(latex[match.start():].replace("\n", " "), 80)
            _log_warning(
                f"Dropped \\{name}: found {len(params)} of {num_args} arguments near '{snippet}'"
            )
            continue

        invocations.append(
            MacroInvocation(
                name=name,
                full_match=latex[match.start():end_pos],
                args=tuple(param.strip() for param in params),
            )
        )

    return invocations


def extract_resume_macros(latex: str) -> ResumeMacros:
    """
    Extract invocation tuples for all argument-bearing resume macros.

    Args:
        latex: Raw LaTeX source

    Returns:
        ResumeMacros with one ordered tuple of invocations per macro
    """
    found = {
        spec.name: tuple(extract_macro_invocations(latex, spec.name, spec.num_args))
        for spec in ARGUMENT_MACROS
    }
    macros = ResumeMacros(
        trio=found[TRIO_HEADING.name],
        quad_details=found[QUAD_HEADING_DETAILS.name],
        quad_heading=found[QUAD_HEADING.name],
        section_type=found[SECTION_TYPE.name],
    )
    log_macro_counts(macros.counts())
    return macros

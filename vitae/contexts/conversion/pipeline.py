"""
Transformation Pipeline

Declares the fixed pass order and folds an HTML fragment through it.

Ordering constraints:
    - Contact, heading, skills and list passes run before paragraph cleanup,
      which needs the final block markup in place
    - Trio/quad-details restructuring runs before the date-range repair
    - The global icon pass runs after the contact pass (which substitutes the
      icons in its own block first; the global pass is idempotent)
"""

from dataclasses import dataclass, field
from functools import partial, reduce
from typing import Callable, List, Tuple

from vitae.contexts.conversion.html_helpers import replace_icon_macros
from vitae.contexts.conversion.html_patterns import marker
from vitae.contexts.conversion.logger import _log_debug
from vitae.contexts.conversion.transformers import (
    apply_final_cleanups,
    cleanup_paragraph_wrappers,
    merge_date_ranges,
    process_abstract,
    process_contact_header,
    process_heading_list_macros,
    process_list_macros,
    process_quad_details,
    process_quad_headings,
    process_technical_skills,
    process_title_block,
    process_trio_headings,
    promote_headings,
    replace_math_pipes,
)
from vitae.contexts.extraction.macro_parser import (
    QUAD_HEADING,
    QUAD_HEADING_DETAILS,
    SECTION_TYPE,
    TRIO_HEADING,
    ResumeMacros,
)
from vitae.contexts.extraction.metadata import DocumentMetadata


@dataclass(frozen=True)
class PipelineContext:
    """Auxiliary data every pass may read: document metadata and invocation tuples."""

    metadata: DocumentMetadata
    macros: ResumeMacros = field(default_factory=ResumeMacros)


Pass = Callable[[str, PipelineContext], str]


def _fragment_only(transform: Callable[[str], str]) -> Pass:
    return lambda fragment, context: transform(fragment)


PIPELINE_PASSES: Tuple[Tuple[str, Pass], ...] = (
    ("title_block", lambda fragment, context: process_title_block(fragment, context.metadata)),
    ("promote_headings", _fragment_only(promote_headings)),
    ("abstract", _fragment_only(process_abstract)),
    ("math_pipes", _fragment_only(replace_math_pipes)),
    ("contact_header", _fragment_only(process_contact_header)),
    ("trio_headings", lambda fragment, context: process_trio_headings(fragment, context.macros.trio)),
    (
        "quad_details",
        lambda fragment, context: process_quad_details(fragment, context.macros.quad_details),
    ),
    ("merge_date_ranges", _fragment_only(merge_date_ranges)),
    (
        "technical_skills",
        lambda fragment, context: process_technical_skills(fragment, context.macros.section_type),
    ),
    (
        "quad_headings",
        lambda fragment, context: process_quad_headings(fragment, context.macros.quad_heading),
    ),
    ("list_macros", _fragment_only(process_list_macros)),
    ("heading_list_macros", _fragment_only(process_heading_list_macros)),
    ("paragraph_wrappers", _fragment_only(cleanup_paragraph_wrappers)),
    ("icon_macros", _fragment_only(replace_icon_macros)),
    ("final_cleanups", _fragment_only(apply_final_cleanups)),
)


def _apply_pass(context: PipelineContext, fragment: str, named_pass: Tuple[str, Pass]) -> str:
    name, transform = named_pass
    result = transform(fragment, context)
    _log_debug(f"  pass {name}: {len(fragment)} -> {len(result)} chars")
    return result


def run_pipeline(fragment: str, context: PipelineContext, passes=PIPELINE_PASSES) -> str:
    """
    Fold the fragment through the passes left to right.

    Args:
        fragment: Generic renderer output
        context: Metadata and invocation tuples for this document
        passes: Ordered (name, pass) pairs (defaults to the full pipeline)

    Returns:
        Transformed fragment
    """
    return reduce(partial(_apply_pass, context), passes, fragment)


def find_macro_desyncs(fragment: str, macros: ResumeMacros) -> List[str]:
    """
    Compare marker counts in rendered HTML with extracted invocation counts.

    A mismatch usually means an invocation with unbalanced braces was dropped
    by the extractor; the affected markers will be left unstyled.

    Returns:
        One warning message per macro whose counts differ
    """
    warnings = []
    for spec, invocations in (
        (TRIO_HEADING, macros.trio),
        (QUAD_HEADING_DETAILS, macros.quad_details),
        (QUAD_HEADING, macros.quad_heading),
        (SECTION_TYPE, macros.section_type),
    ):
        marker_count = fragment.count(marker(spec.name))
        if marker_count != len(invocations):
            warnings.append(
                f"\\{spec.name}: {marker_count} rendered markers but "
                f"{len(invocations)} extracted invocations"
            )
    return warnings

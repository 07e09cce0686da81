"""
Extraction Context

Responsibilities:
- Scans raw LaTeX source for custom resume macro invocations
- Extracts brace-delimited macro arguments with nesting support
- Extracts document metadata (title, author, date) and the abstract

Owns: Raw-source reading, invocation tuples, document metadata
Never: Produces or rewrites HTML
"""

from vitae.contexts.extraction.macro_parser import (
    MacroCursor,
    MacroInvocation,
    ResumeMacros,
    extract_macro_invocations,
    extract_resume_macros,
)
from vitae.contexts.extraction.metadata import (
    DocumentMetadata,
    extract_abstract,
    extract_metadata,
)

__all__ = [
    "DocumentMetadata",
    "MacroCursor",
    "MacroInvocation",
    "ResumeMacros",
    "extract_abstract",
    "extract_macro_invocations",
    "extract_metadata",
    "extract_resume_macros",
]

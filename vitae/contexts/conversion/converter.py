"""
Single-document LaTeX to HTML conversion.

Entry point of the conversion core: extracts metadata and macro invocations
from the source, renders it, runs the transformation pipeline and wraps the
result in the page template. Failures never escape; they come back as an
unsuccessful ConversionResult.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from vitae.contexts.conversion.exceptions import LatexRenderError
from vitae.contexts.conversion.latex_renderer import render_latex_to_html
from vitae.contexts.conversion.logger import _log_debug, log_conversion_result
from vitae.contexts.conversion.pipeline import PipelineContext, find_macro_desyncs, run_pipeline
from vitae.contexts.conversion.template import wrap_in_html_template
from vitae.contexts.extraction import DocumentMetadata, extract_metadata, extract_resume_macros


@dataclass
class ConversionResult:
    """
    Result of converting one document.

    Attributes:
        success: Whether conversion succeeded
        html: Complete HTML document (None if failed)
        metadata: Extracted document metadata (None if failed)
        error: Error message (None if succeeded)
        time_s: Conversion time in seconds
        warnings: Non-fatal diagnostics (e.g. marker/invocation desyncs)
    """

    success: bool
    html: Optional[str] = None
    metadata: Optional[DocumentMetadata] = None
    error: Optional[str] = None
    time_s: float = 0.0
    warnings: List[str] = field(default_factory=list)


def convert_latex_to_html(latex_content: str, filename: str) -> ConversionResult:
    """
    Convert LaTeX source to a styled standalone HTML document.

    Args:
        latex_content: Raw LaTeX source of one document
        filename: Document identifier used in log messages

    Returns:
        ConversionResult; on failure html and metadata are None and error is set
    """
    start_time = time.time()

    try:
        metadata = extract_metadata(latex_content)
        macros = extract_resume_macros(latex_content)

        rendered = render_latex_to_html(latex_content)
        _log_debug(f"{filename}: rendered {len(rendered)} chars of generic HTML")

        warnings = find_macro_desyncs(rendered, macros)
        fragment = run_pipeline(rendered, PipelineContext(metadata=metadata, macros=macros))
        document = wrap_in_html_template(fragment, metadata)

        result = ConversionResult(
            success=True,
            html=document,
            metadata=metadata,
            time_s=time.time() - start_time,
            warnings=warnings,
        )
    except LatexRenderError as e:
        result = ConversionResult(success=False, error=e.message, time_s=time.time() - start_time)
    except Exception as e:
        result = ConversionResult(
            success=False, error=f"{type(e).__name__}: {e}", time_s=time.time() - start_time
        )

    log_conversion_result(filename, result)
    return result

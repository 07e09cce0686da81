"""
Conversion Context

Responsibilities:
- Renders LaTeX to generic HTML with inert markers for custom macros
- Rewrites markers into résumé markup through an ordered pass pipeline
- Wraps the result in a standalone, styled HTML document

Owns: Rendering, transformation passes, page template
Never: Writes output files
"""

from vitae.contexts.conversion.converter import ConversionResult, convert_latex_to_html

__all__ = ["ConversionResult", "convert_latex_to_html"]

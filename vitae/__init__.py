"""
VITAE - Vita Into Typeset-free Accessible Exports

Converts LaTeX resume sources into standalone, responsive HTML pages.

Architecture:
- Extraction Context: Macro argument and document metadata extraction from raw LaTeX
- Conversion Context: Generic rendering, ordered HTML rewriting passes, page template
- Publishing Context: Batch conversion, manifest, audit database, site index
"""

__version__ = "0.1.0"

"""
HTML document template wrapper.

Embeds a transformed fragment in a standalone page: embedded style sheet,
math/icon/web-font references and the attribution footer.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from jinja2 import Environment, FileSystemLoader

from vitae.contexts.extraction.metadata import DocumentMetadata
from vitae.utils.config import load_converter_config

TEMPLATES_PATH = Path(__file__).resolve().parent / "templates"
DOCUMENT_TEMPLATE = "document.html.jinja"

ASSETS = {
    "mathjax": "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js",
    "web_font": (
        "https://fonts.googleapis.com/css2?family=Source+Sans+3:ital,wght@0,300..900;1,300..900"
        "&display=swap"
    ),
    "icon_font": "https://use.fontawesome.com/releases/v6.5.2/css/all.css",
    "icon_font_integrity": "sha384-B4dIYHKNBt8Bc12p+WXckhzcICo0wtJAoU8YZTY5qE0Id1GSseTk6S+L3BlXeVIU",
    "icon_font_fallback": "https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.5.2/css/all.min.css",
}

_environment = Environment(
    loader=FileSystemLoader(str(TEMPLATES_PATH)),
    autoescape=True,
    keep_trailing_newline=False,
)


def wrap_in_html_template(
    content: str,
    metadata: DocumentMetadata,
    footer: Optional[Dict[str, str]] = None,
    year: Optional[int] = None,
) -> str:
    """
    Wrap a transformed fragment in the full HTML document.

    Args:
        content: Final HTML fragment (inserted without escaping)
        metadata: Document metadata (title goes in <title>)
        footer: Attribution settings (defaults to the "footer" config section)
        year: Copyright year (defaults to the current year)

    Returns:
        Complete HTML document
    """
    if footer is None:
        footer = load_converter_config()["footer"]

    template = _environment.get_template(DOCUMENT_TEMPLATE)
    return template.render(
        content=content,
        metadata=metadata,
        footer=footer,
        assets=ASSETS,
        year=year or datetime.now().year,
    )

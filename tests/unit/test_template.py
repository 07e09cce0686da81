"""Unit tests for the HTML document template wrapper."""

import pytest

from vitae.contexts.conversion.template import wrap_in_html_template
from vitae.contexts.extraction import DocumentMetadata

FOOTER = {
    "generator_name": "LaTeX to HTML Converter",
    "generator_url": "https://example.com/converter",
    "copyright_holder": "Jane Doe",
    "license_name": "MIT License",
    "license_url": "https://example.com/LICENSE",
}


@pytest.mark.unit
def test_document_structure():
    metadata = DocumentMetadata(title="Jane Doe Resume", author="Jane Doe", date="2025-01-15")
    html = wrap_in_html_template("<h2>Experience</h2>", metadata, footer=FOOTER, year=2025)

    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Jane Doe Resume</title>" in html
    assert "<h2>Experience</h2>" in html
    assert "mathjax" in html.lower()
    assert "font-awesome" in html or "fontawesome" in html
    assert "© 2025 Jane Doe" in html
    assert 'href="https://example.com/LICENSE"' in html


@pytest.mark.unit
def test_style_sheet_embedded():
    html = wrap_in_html_template("", DocumentMetadata(), footer=FOOTER, year=2025)

    assert "<style>" in html
    assert ".quad-details" in html
    assert ".contact-name" in html


@pytest.mark.unit
def test_title_is_escaped_but_content_is_not():
    metadata = DocumentMetadata(title="R&D <Lead>")
    html = wrap_in_html_template("<p>R&amp;D</p>", metadata, footer=FOOTER, year=2025)

    assert "<title>R&amp;D &lt;Lead&gt;</title>" in html
    assert "<p>R&amp;D</p>" in html


@pytest.mark.unit
def test_footer_defaults_from_config():
    html = wrap_in_html_template("", DocumentMetadata())
    assert "Tsou, Dong-You" in html

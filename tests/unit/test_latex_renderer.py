"""Unit tests for the generic LaTeX-to-HTML renderer."""

import pytest

from vitae.contexts.conversion.exceptions import LatexRenderError
from vitae.contexts.conversion.html_patterns import marker
from vitae.contexts.conversion.latex_renderer import escape_text, render_latex_to_html


@pytest.mark.unit
def test_renders_document_body_only():
    latex = r"\title{Ignored}\begin{document}Hello \textbf{world}\end{document}"
    assert render_latex_to_html(latex) == "<p>Hello <strong>world</strong></p>"


@pytest.mark.unit
def test_paragraphs_split_on_blank_lines():
    assert render_latex_to_html("First\n\nSecond") == "<p>First</p>\n<p>Second</p>"


@pytest.mark.unit
def test_section_heading_level():
    assert render_latex_to_html(r"\section{Experience}") == "<h3>Experience</h3>"


@pytest.mark.unit
def test_unknown_macro_becomes_marker():
    """Macros without a rendering rule leave a marker followed by their arguments."""
    result = render_latex_to_html(r"\resumeItem{Did things}")
    assert result == f"<p>{marker('resumeItem')}Did things</p>"


@pytest.mark.unit
def test_itemize_list():
    result = render_latex_to_html(r"\begin{itemize}\item One \item Two\end{itemize}")
    assert result == "<ul><li>One</li><li>Two</li></ul>"


@pytest.mark.unit
def test_size_switch_wraps_rest_of_group():
    assert render_latex_to_html(r"{\Huge Jane Doe}") == (
        '<p><span class="textsize-Huge">Jane Doe</span></p>'
    )


@pytest.mark.unit
def test_inline_math_and_linebreak():
    result = render_latex_to_html(r"a $|$ b \\ c")
    assert '<span class="inline-math">|</span>' in result
    assert '<br class="linebreak">' in result


@pytest.mark.unit
def test_href_rendering():
    result = render_latex_to_html(r"\href{https://x.com}{Site}")
    assert result == '<p><a class="href" href="https://x.com">Site</a></p>'


@pytest.mark.unit
def test_escaped_and_alignment_ampersands_differ():
    r"""\& renders as &amp; so it is never mistaken for an alignment split."""
    result = render_latex_to_html(r"\begin{tabular}{ll}R\&D & Ops\end{tabular}")

    assert "&amp;" in result
    assert "&#x26;" in result
    assert 'class="environment tabular"' in result
    assert "ll" not in result


@pytest.mark.unit
def test_dashes():
    assert render_latex_to_html("2019 -- 2023") == "<p>2019 – 2023</p>"


@pytest.mark.unit
def test_escape_text():
    assert escape_text("a & b < c") == "a &#x26; b &#x3C; c"


@pytest.mark.unit
def test_parse_failure_raises_render_error():
    with pytest.raises(LatexRenderError):
        render_latex_to_html(r"\begin{itemize}\item never closed")

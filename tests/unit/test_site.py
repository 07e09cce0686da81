"""Unit tests for the static site index page."""

import pytest

from vitae.contexts.publishing.site import render_site_index, write_site_index

ENTRIES = [
    {
        "id": "resume",
        "filename": "resume.tex",
        "title": "Jane Doe Resume",
        "author": "Jane Doe",
        "date": "2025-01-15",
        "htmlPath": "converted-docs/resume.html",
        "lastConverted": "2025-01-15T10:00:00",
    }
]


@pytest.mark.unit
def test_iframe_embeds_first_document():
    html = render_site_index(ENTRIES)

    assert '<iframe class="document-frame" src="converted-docs/resume.html"' in html
    assert "download-button" not in html.split("</style>")[1]


@pytest.mark.unit
def test_download_button_with_drive_link():
    html = render_site_index(ENTRIES, "https://drive.google.com/file/d/abc123/view")

    assert 'href="https://drive.google.com/uc?export=download&amp;id=abc123"' in html
    assert "Download PDF" in html


@pytest.mark.unit
def test_unrecognised_drive_link_omits_button():
    html = render_site_index(ENTRIES, "https://example.com/file.pdf")
    assert '<a class="download-button"' not in html


@pytest.mark.unit
def test_empty_manifest():
    html = render_site_index([])

    assert "<iframe" not in html
    assert "No converted documents available." in html


@pytest.mark.unit
def test_write_site_index(tmp_path):
    index_file = tmp_path / "public" / "index.html"
    write_site_index(index_file, ENTRIES, page_title="CV")

    assert "<title>CV</title>" in index_file.read_text(encoding="utf-8")

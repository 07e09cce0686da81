"""
Static site index page.

Embeds the first converted document in a full-viewport iframe and, when a
Drive share link is configured, adds a download button for the original PDF.
"""

from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader

from vitae.contexts.publishing.drive_links import convert_to_direct_download_link
from vitae.contexts.publishing.logger import _log_info, _log_warning

TEMPLATES_PATH = Path(__file__).resolve().parent / "templates"
INDEX_TEMPLATE = "index.html.jinja"

_environment = Environment(loader=FileSystemLoader(str(TEMPLATES_PATH)), autoescape=True)


def render_site_index(
    manifest_entries: List[dict],
    drive_link: Optional[str] = None,
    page_title: str = "Resume",
    download_label: str = "Download PDF",
) -> str:
    """
    Render the site index page.

    Args:
        manifest_entries: Manifest records (the first one is embedded)
        drive_link: Drive share link or bare file id (button omitted if unusable)
        page_title: Page <title>
        download_label: Download button text

    Returns:
        Complete HTML page
    """
    document = manifest_entries[0] if manifest_entries else None
    download_url = convert_to_direct_download_link(drive_link) if drive_link else None

    if drive_link and download_url is None:
        _log_warning(f"Unrecognised Drive link, download button omitted: {drive_link}")

    template = _environment.get_template(INDEX_TEMPLATE)
    return template.render(
        document=document,
        download_url=download_url,
        page_title=page_title,
        download_label=download_label,
    )


def write_site_index(
    index_file: Path,
    manifest_entries: List[dict],
    drive_link: Optional[str] = None,
    page_title: str = "Resume",
    download_label: str = "Download PDF",
) -> Path:
    """Render the index page and write it to index_file."""
    html = render_site_index(manifest_entries, drive_link, page_title, download_label)
    index_file.parent.mkdir(parents=True, exist_ok=True)
    index_file.write_text(html, encoding="utf-8")
    _log_info(f"Site index written to: {index_file}")
    return index_file

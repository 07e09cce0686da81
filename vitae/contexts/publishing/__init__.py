"""
Publishing Context

Turns a directory of LaTeX sources into a deployable set of HTML pages:
batch conversion with a fail-closed policy, the JSON document manifest,
the SQLite conversion audit log, and the static site index.
"""

from vitae.contexts.publishing.audit_database import ConversionAuditDatabase
from vitae.contexts.publishing.batch import BatchResult, convert_directory, convert_file
from vitae.contexts.publishing.drive_links import (
    convert_to_direct_download_link,
    extract_google_drive_file_id,
)
from vitae.contexts.publishing.site import render_site_index, write_site_index

__all__ = [
    "BatchResult",
    "ConversionAuditDatabase",
    "convert_directory",
    "convert_file",
    "convert_to_direct_download_link",
    "extract_google_drive_file_id",
    "render_site_index",
    "write_site_index",
]

"""
Batch conversion of a LaTeX directory.

Converts every .tex file, writes one HTML file per document and a JSON
manifest describing the converted set. Fail-closed: a single failed document
marks the whole run as failed so a partial output set is never deployed.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from vitae.contexts.conversion import ConversionResult, convert_latex_to_html
from vitae.contexts.extraction import extract_abstract
from vitae.contexts.publishing.audit_database import ConversionAuditDatabase
from vitae.contexts.publishing.logger import _log_error, _log_info, log_batch_result
from vitae.utils.timestamp import now_exact

DEFAULT_HTML_PATH_PREFIX = "converted-docs"


@dataclass
class BatchResult:
    """
    Result of a batch conversion run.

    Attributes:
        manifest_file: Path of the written manifest
        converted: Manifest entries of successfully converted documents
        failed: Mapping of source filename to error message
    """

    manifest_file: Path
    converted: List[dict] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failed


def build_manifest_entry(
    tex_file: Path, result: ConversionResult, html_path_prefix: str = DEFAULT_HTML_PATH_PREFIX
) -> dict:
    """Manifest record for one converted document (relative htmlPath for any base URL)."""
    return {
        "id": tex_file.stem,
        "filename": tex_file.name,
        "title": result.metadata.title,
        "author": result.metadata.author,
        "date": result.metadata.date,
        "htmlPath": f"{html_path_prefix}/{tex_file.stem}.html",
        "lastConverted": now_exact(),
    }


def write_manifest(manifest_file: Path, entries: List[dict]) -> None:
    manifest_file.parent.mkdir(parents=True, exist_ok=True)
    manifest_file.write_text(json.dumps(entries, indent=2, ensure_ascii=False), encoding="utf-8")


def convert_file(
    tex_file: Path,
    output_dir: Path,
    database: Optional[ConversionAuditDatabase] = None,
) -> ConversionResult:
    """
    Convert one .tex file and write <output_dir>/<stem>.html on success.

    When a database is given, the attempt is recorded as in_progress first and
    closed with its final status, error and duration. A failed HTML write is
    recorded as a failure before the OSError propagates.
    """
    latex_content = tex_file.read_text(encoding="utf-8")
    output_path = output_dir / f"{tex_file.stem}.html"

    log_id = None
    if database is not None:
        document_id = database.upsert_document(tex_file.name)
        log_id = database.start_conversion(document_id)

    start_time = time.time()
    result = convert_latex_to_html(latex_content, tex_file.stem)

    if result.success:
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            output_path.write_text(result.html, encoding="utf-8")
        except OSError as e:
            if database is not None:
                database.finish_conversion(
                    log_id,
                    "failure",
                    error_message=str(e),
                    duration_ms=int((time.time() - start_time) * 1000),
                )
            raise

    if database is not None:
        duration_ms = int((time.time() - start_time) * 1000)
        if result.success:
            database.upsert_document(
                tex_file.name,
                title=result.metadata.title,
                author=result.metadata.author,
                abstract=extract_abstract(latex_content),
            )
            database.finish_conversion(
                log_id, "success", html_output_path=str(output_path), duration_ms=duration_ms
            )
        else:
            database.finish_conversion(
                log_id, "failure", error_message=result.error, duration_ms=duration_ms
            )

    return result


def convert_directory(
    latex_dir: Path,
    output_dir: Path,
    manifest_file: Path,
    database: Optional[ConversionAuditDatabase] = None,
    html_path_prefix: str = DEFAULT_HTML_PATH_PREFIX,
) -> BatchResult:
    """
    Convert every .tex file in latex_dir and write the manifest.

    Args:
        latex_dir: Directory of LaTeX sources
        output_dir: Directory for generated HTML files
        manifest_file: JSON manifest path
        database: Optional audit database to record attempts in
        html_path_prefix: Prefix of each manifest entry's htmlPath

    Returns:
        BatchResult (success is False if any document failed)

    Raises:
        FileNotFoundError: If latex_dir doesn't exist
    """
    if not latex_dir.is_dir():
        raise FileNotFoundError(f"LaTeX directory not found: {latex_dir}")

    output_dir.mkdir(parents=True, exist_ok=True)
    tex_files = sorted(latex_dir.glob("*.tex"))
    result = BatchResult(manifest_file=manifest_file)

    if not tex_files:
        _log_info("No LaTeX files found in the latex directory.")
        write_manifest(manifest_file, [])
        return result

    _log_info(f"Found {len(tex_files)} LaTeX file(s) to convert.")

    for tex_file in tex_files:
        _log_info(f"Converting: {tex_file.name}")
        try:
            conversion = convert_file(tex_file, output_dir, database)
        except (OSError, UnicodeDecodeError) as e:
            _log_error(f"Error processing {tex_file.name}: {e}")
            result.failed[tex_file.name] = str(e)
            continue

        if conversion.success:
            result.converted.append(build_manifest_entry(tex_file, conversion, html_path_prefix))
        else:
            result.failed[tex_file.name] = conversion.error

    write_manifest(manifest_file, result.converted)
    log_batch_result(result)
    return result

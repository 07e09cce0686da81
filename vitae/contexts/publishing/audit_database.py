"""
Persistent SQLite audit log of document conversions.

Mirrors the hosted schema: one row per document (identity and metadata) and
one row per conversion attempt with its status, error and duration.
"""

import sqlite3
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from vitae.contexts.extraction.metadata import DEFAULT_AUTHOR, DEFAULT_TITLE
from vitae.utils.timestamp import now_exact

CONVERSION_STATUSES = ("success", "failure", "in_progress")

SCHEMA = f"""
    CREATE TABLE IF NOT EXISTS documents (
        id TEXT PRIMARY KEY,
        filename TEXT UNIQUE NOT NULL,
        title TEXT NOT NULL DEFAULT '{DEFAULT_TITLE}',
        author TEXT NOT NULL DEFAULT '{DEFAULT_AUTHOR}',
        abstract TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS conversion_logs (
        id TEXT PRIMARY KEY,
        document_id TEXT NOT NULL REFERENCES documents(id) ON DELETE CASCADE,
        status TEXT NOT NULL DEFAULT 'in_progress',
        error_message TEXT,
        html_output_path TEXT,
        conversion_duration_ms INTEGER,
        created_at TEXT NOT NULL,
        CONSTRAINT valid_status CHECK (status IN ('success', 'failure', 'in_progress'))
    );

    CREATE INDEX IF NOT EXISTS idx_documents_filename ON documents(filename);
    CREATE INDEX IF NOT EXISTS idx_conversion_logs_document_id ON conversion_logs(document_id);
    CREATE INDEX IF NOT EXISTS idx_conversion_logs_status ON conversion_logs(status);
    CREATE INDEX IF NOT EXISTS idx_conversion_logs_created_at ON conversion_logs(created_at DESC);
"""


class ConversionAuditDatabase:
    """
    SQLite database recording documents and their conversion attempts.

    The database is persistent - create once with create(), then load later by
    instantiating with the db_path (or use open_or_create()).
    """

    def __init__(self, db_path: Path):
        """
        Load an existing database from disk.

        To create a new database, use ConversionAuditDatabase.create() instead.

        Args:
            db_path: Path to existing SQLite database file

        Raises:
            FileNotFoundError: If database file doesn't exist
        """
        self.db_path = db_path

        if not db_path.exists():
            raise FileNotFoundError(
                f"Database not found: {db_path}\n"
                f"To create a new database, use ConversionAuditDatabase.create()"
            )

        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")

    @classmethod
    def create(cls, db_path: Path) -> "ConversionAuditDatabase":
        """
        Create the schema at db_path (existing tables and rows are kept).

        Args:
            db_path: Path where database will be created

        Returns:
            ConversionAuditDatabase connected to the new file
        """
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(db_path))
        conn.executescript(SCHEMA)
        conn.commit()
        conn.close()

        return cls(db_path)

    @classmethod
    def open_or_create(cls, db_path: Path) -> "ConversionAuditDatabase":
        """Open db_path, creating the schema first if the file doesn't exist yet."""
        if db_path.exists():
            return cls(db_path)
        return cls.create(db_path)

    def query(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """
        Execute SQL query and return results as list of dicts.

        Args:
            sql: SQL query string
            params: Query parameters (for parameterized queries)

        Returns:
            List of dicts with column names as keys
        """
        cursor = self.conn.execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]

    def upsert_document(
        self,
        filename: str,
        title: str = DEFAULT_TITLE,
        author: str = DEFAULT_AUTHOR,
        abstract: Optional[str] = None,
    ) -> str:
        """
        Insert a document row, or update title/author/abstract if filename exists.

        Returns:
            Document id
        """
        timestamp = now_exact()
        existing = self.get_document(filename)

        if existing:
            self.conn.execute(
                "UPDATE documents SET title = ?, author = ?, abstract = ?, updated_at = ? "
                "WHERE id = ?",
                (title, author, abstract, timestamp, existing["id"]),
            )
            self.conn.commit()
            return existing["id"]

        document_id = str(uuid.uuid4())
        self.conn.execute(
            "INSERT INTO documents (id, filename, title, author, abstract, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (document_id, filename, title, author, abstract, timestamp, timestamp),
        )
        self.conn.commit()
        return document_id

    def get_document(self, filename: str) -> Optional[Dict[str, Any]]:
        rows = self.query("SELECT * FROM documents WHERE filename = ?", (filename,))
        return rows[0] if rows else None

    def start_conversion(self, document_id: str) -> str:
        """
        Record a new in-progress conversion attempt.

        Returns:
            Conversion log id
        """
        log_id = str(uuid.uuid4())
        self.conn.execute(
            "INSERT INTO conversion_logs (id, document_id, status, created_at) VALUES (?, ?, ?, ?)",
            (log_id, document_id, "in_progress", now_exact()),
        )
        self.conn.commit()
        return log_id

    def finish_conversion(
        self,
        log_id: str,
        status: str,
        error_message: Optional[str] = None,
        html_output_path: Optional[str] = None,
        duration_ms: Optional[int] = None,
    ) -> None:
        """
        Close a conversion attempt with its final status.

        Raises:
            ValueError: If status is not "success" or "failure"
        """
        if status not in CONVERSION_STATUSES or status == "in_progress":
            raise ValueError(f"Invalid final conversion status: {status}")

        self.conn.execute(
            "UPDATE conversion_logs SET status = ?, error_message = ?, html_output_path = ?, "
            "conversion_duration_ms = ? WHERE id = ?",
            (status, error_message, html_output_path, duration_ms, log_id),
        )
        self.conn.commit()

    def get_conversion_logs(self, filename: str, limit: int = 20) -> List[Dict[str, Any]]:
        """Most recent conversion attempts for a document, newest first."""
        return self.query(
            "SELECT conversion_logs.* FROM conversion_logs "
            "JOIN documents ON documents.id = conversion_logs.document_id "
            "WHERE documents.filename = ? "
            "ORDER BY conversion_logs.created_at DESC LIMIT ?",
            (filename, limit),
        )

    def delete_document(self, filename: str) -> None:
        """Delete a document; its conversion logs cascade."""
        self.conn.execute("DELETE FROM documents WHERE filename = ?", (filename,))
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

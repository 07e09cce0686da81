"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """
    Compact local timestamp for directory and file names.

    Returns:
        Timestamp like "20251114_123456"
    """
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """
    ISO 8601 local timestamp with microseconds, for database rows and manifests.

    Returns:
        Timestamp like "2025-11-14T12:34:56.789012"
    """
    return datetime.now().isoformat()


def today() -> str:
    """Current local date as YYYY-MM-DD."""
    return datetime.now().strftime("%Y-%m-%d")

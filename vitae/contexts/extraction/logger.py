"""
Extraction context logger.

Provides logging interface for extraction context with automatic [extract] prefix.
All extraction modules should import from this module, not from loguru directly.
Sinks are configured by whichever context drives the run.
"""

from loguru import logger

CONTEXT_PREFIX = "[extract]"


def _log_warning(message: str) -> None:
    """Log warning message with [extract] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [extract] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_macro_counts(counts: dict) -> None:
    """Log how many invocations were found per macro name."""
    summary = ", ".join(f"{name}={count}" for name, count in counts.items())
    _log_debug(f"Macro invocations: {summary}")

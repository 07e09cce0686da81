"""
Publishing context logger.

Provides logging interface for publishing context with automatic [publish] prefix.
All publishing modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from vitae.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[publish]"


def setup_publishing_logger(log_dir: Path, latex_dir: Path = None) -> Path:
    """
    Setup logger for publishing context.

    Args:
        log_dir: Directory for this batch session
        latex_dir: Source directory (recorded in the provenance header)

    Returns:
        Path to log file
    """
    extra = {"Source directory": latex_dir} if latex_dir else None
    return _setup_logger(context_name="publish", log_dir=log_dir, extra_provenance=extra)


# Wrapper functions with automatic [publish] prefix


def _log_info(message: str) -> None:
    """Log info message with [publish] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [publish] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [publish] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [publish] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


# High-level publishing-specific logging helpers


def log_batch_result(result) -> None:
    """
    Log a BatchResult summary.

    Args:
        result: BatchResult from convert_directory()
    """
    total = len(result.converted) + len(result.failed)
    _log_info(f"Manifest written to: {result.manifest_file}")
    _log_info(f"Successfully converted: {len(result.converted)}/{total} files")

    if result.success:
        _log_success("All LaTeX files converted successfully")
    else:
        for filename, error in result.failed.items():
            _log_error(f"  {filename}: {error}")
        _log_error("Some files failed to convert. Fix errors before deployment.")

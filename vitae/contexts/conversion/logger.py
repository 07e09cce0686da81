"""
Conversion context logger.

Provides logging interface for conversion context with automatic [convert] prefix.
All conversion modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from vitae.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[convert]"


def setup_conversion_logger(log_dir: Path, source_file: Path = None) -> Path:
    """
    Setup logger for conversion context.

    Args:
        log_dir: Directory for this conversion session
        source_file: LaTeX file being converted (recorded in the provenance header)

    Returns:
        Path to log file
    """
    extra = {"Source file": source_file} if source_file else None
    return _setup_logger(context_name="convert", log_dir=log_dir, extra_provenance=extra)


# Wrapper functions with automatic [convert] prefix


def _log_info(message: str) -> None:
    """Log info message with [convert] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [convert] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [convert] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [convert] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [convert] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level conversion-specific logging helpers


def log_conversion_result(filename: str, result) -> None:
    """
    Log a ConversionResult with its warnings.

    Args:
        filename: Document identifier
        result: ConversionResult from convert_latex_to_html()
    """
    if result.success:
        _log_success(f"{filename}: converted ({result.time_s:.2f}s)")
    else:
        _log_error(f"{filename}: conversion failed ({result.time_s:.2f}s)")
        _log_error(f"  {result.error}")

    for warning in result.warnings:
        _log_warning(f"{filename}: {warning}")

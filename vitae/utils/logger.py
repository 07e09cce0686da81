"""
Loguru setup shared by the conversion and publishing contexts.

Each run writes one log file per context next to a console sink; the
context-prefixed wrappers live in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "<level>{level: <7}</level> | {message}"
RULE = "-" * 72


def setup_logger(context_name: str, log_dir: Path, extra_provenance: Optional[dict] = None) -> Path:
    """
    Route loguru output to <log_dir>/<context_name>.log and the console.

    The file sink keeps DEBUG and above; the console shows INFO and above.
    A provenance header (command line, working directory, Python version and
    any extra_provenance entries) opens every log.

    Returns:
        Path to the log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_provenance(extra_provenance)
    return log_file


def collect_provenance(extra: Optional[dict] = None) -> dict:
    provenance = {
        "Command": " ".join(sys.argv),
        "Working directory": str(Path.cwd()),
        "Python": sys.version.split()[0],
    }
    provenance.update(extra or {})
    return provenance


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """Log the run's provenance header between two rules."""
    logger.info(RULE)
    for key, value in collect_provenance(extra_context).items():
        logger.info(f"{key}: {value}")
    logger.info(RULE)

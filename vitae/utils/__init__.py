"""
Shared utilities for VITAE.

Common functionality used across contexts:
- Balanced delimiter and LaTeX helpers
- Logger setup
- Configuration loading
- Timestamps
"""

from vitae.utils.timestamp import now, now_exact, today

__all__ = ["now", "now_exact", "today"]

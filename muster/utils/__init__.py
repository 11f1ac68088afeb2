"""
Shared utilities for MUSTER.

Common functionality used across contexts:
- Environment configuration
- Logging (loguru session logs, JSON Lines pipeline events)
- Timestamps
"""

from muster.utils.timestamp import format_timestamp, now, now_exact, today

__all__ = ["format_timestamp", "now", "now_exact", "today"]

"""
Pipeline context logger.

Provides logging interface for the pipeline context with automatic [pipeline] prefix.
All pipeline modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[pipeline]"


def _log_info(message: str) -> None:
    """Log info message with [pipeline] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [pipeline] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_stage_transition(name: str, old_stage: str, new_stage: str) -> None:
    _log_info(f"{name}: {old_stage} -> {new_stage}")


def log_body_comp(name: str, status: str, message: str) -> None:
    """Log an evaluation written back to an applicant."""
    _log_info(f"{name}: body composition {status}")
    _log_debug(f"  {message}")

"""
State context logger.

Provides logging interface for the state context with automatic [store] prefix.
All state modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from muster.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[store]"


def setup_state_logger(log_dir: Path, storage: str) -> Path:
    """
    Setup logger for the state context.

    Args:
        log_dir: Directory for this session
        storage: Store location recorded in the session header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="store",
        log_dir=log_dir,
        storage=storage,
    )


def _log_info(message: str) -> None:
    """Log info message with [store] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [store] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [store] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [store] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_persist_failure(key: str, error: Exception) -> None:
    """Log a failed write; the in-memory state change still stands."""
    _log_error(f"Could not persist '{key}': {error.__class__.__name__}: {error}")
    _log_warning("Continuing with in-memory state only")


def log_load_fallback(key: str, reason: str) -> None:
    """Log why persisted data was discarded in favour of seed data."""
    _log_warning(f"Falling back to seed data for '{key}': {reason}")


def log_migration(from_version: int, to_version: int) -> None:
    if from_version == to_version:
        _log_debug(f"State already at schema version {to_version}")
    else:
        _log_info(f"Migrated state from schema version {from_version} to {to_version}")

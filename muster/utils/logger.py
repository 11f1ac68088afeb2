"""
Session log setup for MUSTER (Tier 1, detailed logging).

Each CLI invocation gets its own session directory (outs/logs/cli_<timestamp>)
holding one log file per context. Every file opens with a header that records
which MUSTER build ran which command against which store, so a log can be
matched to the state file it describes.

Context-specific wrappers live in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

# stderr colors; the CLI prints its own results, so stderr only sees problems
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)


def setup_logger(
    context_name: str,
    log_dir: Path,
    storage: Optional[str] = None,
    extra_header: Optional[dict] = None,
) -> Path:
    """
    Point loguru at a session log file and write the session header.

    The file sink keeps everything from DEBUG up. stderr only receives
    warnings and errors (failed writes, corrupt state, subscriber errors).

    Args:
        context_name: Context identifier, used as the file name ("store", "pipeline")
        log_dir: Session directory, created if missing
        storage: Where the store lives (directory or "memory"), recorded in the header
        extra_header: Further key-value lines for the header

    Returns:
        Path to the log file

    Example:
        log_file = setup_logger(
            "store", Path("outs/logs/cli_20261018_093000"), storage="outs/state"
        )
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level="WARNING", colorize=True)

    header = session_header(storage)
    header.update(extra_header or {})
    log_session_header(header)

    return log_file


def session_header(storage: Optional[str] = None) -> dict:
    """Key-value lines identifying a MUSTER session."""
    from muster import __version__
    from muster.contexts.state.defaults import CURRENT_SCHEMA_VERSION

    header = {
        "MUSTER": __version__,
        "Schema version": CURRENT_SCHEMA_VERSION,
        "Command": " ".join(["muster"] + sys.argv[1:]),
        "Working directory": Path.cwd(),
        "Python": sys.version.split()[0],
    }
    if storage is not None:
        header["Storage"] = storage
    return header


def log_session_header(header: dict) -> None:
    logger.debug("=" * 80)
    for key, value in header.items():
        logger.debug(f"{key}: {value}")
    logger.debug("=" * 80)

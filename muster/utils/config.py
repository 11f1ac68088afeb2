"""
Environment configuration for MUSTER.

Paths are read from the environment (optionally via a .env file in the working
directory). Every variable has a default so the package imports cleanly
without a .env file.

Variables:
    MUSTER_DATA_PATH: Directory holding the file-backed store (default: outs/state)
    LOGS_PATH: Directory for Tier 1 session logs (default: outs/logs)
    PIPELINE_EVENTS_FILE: JSON Lines event log; unset disables Tier 2 logging
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DATA_PATH = Path(os.getenv("MUSTER_DATA_PATH", "outs/state"))
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


def pipeline_events_file() -> Optional[Path]:
    """Path of the JSON Lines event log, or None when event logging is disabled."""
    value = os.getenv("PIPELINE_EVENTS_FILE")
    return Path(value) if value else None

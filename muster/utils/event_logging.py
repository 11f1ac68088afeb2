"""
Pipeline event logging utilities for MUSTER (Tier 2 logging).

Appends applicant pipeline events to a JSON Lines file so that stage
progressions can be audited independently of the persisted store.
Logging is disabled unless PIPELINE_EVENTS_FILE is set.

For detailed within-context logging (Tier 1), use muster.utils.logger instead.

Usage:
    from muster.utils.event_logging import log_stage_change, log_pipeline_event

    log_stage_change(
        applicant_id="5c1f...",
        old_stage="Screening",
        new_stage="Interview",
        source="cli"
    )
"""

import json
from typing import List, Optional

from muster.utils.config import pipeline_events_file
from muster.utils.timestamp import now_exact

# Event types that change an applicant's pipeline position
MUTATIVE_EVENTS = {"registration", "stage_change", "removal"}


def log_pipeline_event(event_type: str, applicant_id: str, source: str, **extra_fields) -> None:
    """
    Log an event to the pipeline event log.

    Events are appended in JSON Lines format (one JSON object per line).
    Does nothing when PIPELINE_EVENTS_FILE is not configured.

    Args:
        event_type: Type of event (e.g., "registration", "stage_change", "import")
        applicant_id: Applicant identifier ("*" for store-wide events)
        source: Event source (e.g., "cli", "pipeline", "import")
        **extra_fields: Additional event-specific fields
    """
    events_file = pipeline_events_file()
    if events_file is None:
        return

    events_file.parent.mkdir(parents=True, exist_ok=True)

    event = {
        "timestamp": now_exact(),
        "event_type": event_type,
        "applicant_id": applicant_id,
        "source": source,
        **extra_fields,
    }

    with open(events_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(event) + "\n")


def log_stage_change(
    applicant_id: str, old_stage: str, new_stage: str, source: str, **extra_fields
) -> None:
    """
    Log stage change event.

    Pure logging function - does NOT touch the store.
    Called by pipeline functions after the mutation has completed.
    """
    log_pipeline_event(
        event_type="stage_change",
        applicant_id=applicant_id,
        old_stage=old_stage,
        new_stage=new_stage,
        source=source,
        **extra_fields,
    )


def get_recent_events(
    n: int = 10, applicant_id: Optional[str] = None, event_type: Optional[str] = None
) -> List[dict]:
    """
    Get the last n events from the pipeline log, optionally filtered.

    Args:
        n: Number of recent events to return (default: 10)
        applicant_id: Filter to only events for this applicant (optional)
        event_type: Filter to only events of this type (optional)

    Returns:
        List of event dicts (most recent last)
    """
    events = _read_events()

    if applicant_id:
        events = [e for e in events if e.get("applicant_id") == applicant_id]

    if event_type:
        events = [e for e in events if e.get("event_type") == event_type]

    return events[-n:] if len(events) > n else events


def deduce_stages_from_events() -> dict:
    """
    Rebuild each applicant's latest stage from the event log.

    Returns:
        Dict mapping applicant_id -> latest stage, excluding removed applicants
    """
    stages = {}
    for event in _read_events():
        if event.get("event_type") not in MUTATIVE_EVENTS:
            continue
        applicant_id = event.get("applicant_id")
        if event["event_type"] == "removal":
            stages.pop(applicant_id, None)
        elif event["event_type"] == "registration":
            stages[applicant_id] = event.get("stage")
        else:
            stages[applicant_id] = event.get("new_stage")
    return stages


def _read_events() -> List[dict]:
    """Read every event from the log, skipping malformed lines."""
    events_file = pipeline_events_file()
    if events_file is None or not events_file.exists():
        return []

    events = []
    with open(events_file, "r", encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line.strip()))
            except json.JSONDecodeError:
                continue
    return events

"""
Default values and seed data for the MUSTER store.

Provides shared defaults used by:
- migrations.py (inject missing sub-objects when upgrading old records)
- store.py (seed state when nothing usable is persisted)
- pipeline operations (new applicant/event records)

Every getter returns a fresh object so callers never share nested references.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from muster.utils.timestamp import now_exact, today

CURRENT_SCHEMA_VERSION = 3

STAGES = (
    "Application Received",
    "Screening",
    "Interview",
    "Background Check",
    "Medical",
    "Training",
    "Enlisted",
)
FINAL_STAGE = STAGES[-1]

EVENT_CATEGORIES = (
    "Appointment",
    "Interview",
    "Processing",
    "Ship Date",
    "Follow-up",
    "Other",
)

DEFAULT_SETTINGS = {
    "recruiterName": "",
    "accentTheme": "navy",
    "annualGoal": 40,
    "agingWarningDays": 14,
    "agingCriticalDays": 30,
    "reminderLeadMinutes": 60,
    "calendar": "google",
}

DEFAULT_SNIPPETS = (
    {
        "id": "snippet-intro",
        "title": "Introduction",
        "body": "Thanks for your interest in serving. When is a good time to talk this week?",
    },
    {
        "id": "snippet-docs",
        "title": "Document reminder",
        "body": "Please bring your birth certificate, social security card, and diploma.",
    },
    {
        "id": "snippet-followup",
        "title": "Follow-up",
        "body": "Checking in on your next steps. Let me know if anything is holding you up.",
    },
)


def new_id() -> str:
    """Globally unique record identifier."""
    return str(uuid.uuid4())


def get_default_settings() -> Dict[str, Any]:
    return dict(DEFAULT_SETTINGS)


def get_default_workstation() -> Dict[str, Any]:
    """Empty drills and packing list plus the stock message snippets."""
    return {
        "drills": [],
        "snippets": [dict(snippet) for snippet in DEFAULT_SNIPPETS],
        "packingList": [],
    }


def get_default_notifications() -> Dict[str, Any]:
    return {"enabled": False, "scheduled": {}}


def new_applicant(
    name: str = "New Applicant",
    stage: str = STAGES[0],
    moment: Optional[datetime] = None,
    **fields,
) -> Dict[str, Any]:
    """
    Build a fresh applicant record.

    Args:
        name: Display name
        stage: Starting pipeline stage
        moment: Creation time (defaults to now)
        **fields: Extra record fields (measurements, notes, profile fields)

    Returns:
        Applicant dict with a one-entry stage history
    """
    timestamp = now_exact(moment)
    applicant = {
        "id": new_id(),
        "name": name,
        "stage": stage,
        "createdAt": timestamp,
        "touchedAt": timestamp,
        "stageChangedAt": timestamp,
        "notes": "",
        "bodyComp": None,
        "stageHistory": [{"stage": stage, "at": timestamp}],
        "checklist": [],
    }
    applicant.update(fields)
    return applicant


def new_event(
    title: str,
    date: str,
    category: str = "Appointment",
    time: Optional[str] = None,
    applicant_id: Optional[str] = None,
    template_id: Optional[str] = None,
    notes: str = "",
) -> Dict[str, Any]:
    return {
        "id": new_id(),
        "title": title,
        "date": date,
        "time": time,
        "category": category,
        "applicantId": applicant_id,
        "templateId": template_id,
        "notes": notes,
    }


def get_seed_applicants(moment: Optional[datetime] = None) -> List[Dict[str, Any]]:
    return [
        new_applicant("Alex Johnson", "Interview", moment, notes="Strong candidate."),
        new_applicant("Maria Garcia", "Screening", moment, notes="Follow up on references."),
    ]


def seed_state(moment: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Build a complete, current-version state for first run.

    Seeds two applicants and an initial screening call for today linked to the
    first applicant.
    """
    applicants = get_seed_applicants(moment)
    events = [
        new_event(
            "Initial Screening Call",
            today(moment),
            category="Appointment",
            applicant_id=applicants[0]["id"],
        )
    ]
    return {
        "schemaVersion": CURRENT_SCHEMA_VERSION,
        "applicants": applicants,
        "events": events,
        "checklist": [],
        "workstation": get_default_workstation(),
        "settings": get_default_settings(),
        "notifications": get_default_notifications(),
    }

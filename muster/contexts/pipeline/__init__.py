"""
Pipeline Context

Responsibilities:
- Applicant lifecycle: intake, field edits, stage progression, removal
- Writes body composition results back to applicants
- Calendar events with weak applicant references
- Checklist documents and OCR label suggestions
- Dashboard figures and keyed reminder timers

Owns: Recruiting workflow operations on top of the store
Never: Touches persisted bytes directly (always via Store.set_state)
"""

from muster.contexts.pipeline.applicants import (
    EDITABLE_FIELDS,
    add_applicant,
    add_checklist_label,
    aging_status,
    change_stage,
    evaluate_applicant,
    find_applicant,
    remove_applicant,
    update_applicant,
)
from muster.contexts.pipeline.dashboard import GoalProgress, goal_progress, summary
from muster.contexts.pipeline.documents import (
    add_document,
    apply_ocr_suggestions,
    mark_document_received,
    suggest_checklist_labels,
)
from muster.contexts.pipeline.events import (
    delete_event,
    resolve_applicant,
    save_event,
    sorted_events,
    upcoming_count,
)
from muster.contexts.pipeline.reminders import ReminderScheduler

__all__ = [
    # Applicants
    "add_applicant",
    "remove_applicant",
    "update_applicant",
    "change_stage",
    "evaluate_applicant",
    "add_checklist_label",
    "find_applicant",
    "aging_status",
    "EDITABLE_FIELDS",
    # Events
    "save_event",
    "delete_event",
    "resolve_applicant",
    "sorted_events",
    "upcoming_count",
    # Documents
    "add_document",
    "mark_document_received",
    "suggest_checklist_labels",
    "apply_ocr_suggestions",
    # Dashboard
    "GoalProgress",
    "goal_progress",
    "summary",
    # Reminders
    "ReminderScheduler",
]

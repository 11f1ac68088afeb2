"""
Applicant operations.

Every change goes through Store.set_state so the store can persist and
notify. Record invariants maintained here:
- stageHistory is append-only and its last entry matches stage
- touchedAt is refreshed on every field mutation
- id never changes
- bodyComp is recomputed whenever a measurement changes
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from muster.contexts.pipeline.logger import _log_info, log_body_comp, log_stage_transition
from muster.contexts.screening import BodyCompResult, evaluate
from muster.contexts.state.defaults import FINAL_STAGE, STAGES, new_applicant
from muster.contexts.state.exceptions import RecordNotFoundError
from muster.utils.event_logging import log_pipeline_event, log_stage_change
from muster.utils.timestamp import now_exact, parse_timestamp

MEASUREMENT_FIELDS = ("height", "weight", "age", "gender", "neck", "waist", "hip")
PROFILE_FIELDS = (
    "health",
    "priorService",
    "legalIssues",
    "education",
    "maritalStatus",
    "dependents",
    "tattoos",
)
EDITABLE_FIELDS = ("name", "stage", "notes") + MEASUREMENT_FIELDS + PROFILE_FIELDS

FRESH = "fresh"
WARNING = "warning"
CRITICAL = "critical"


def find_applicant(state: Dict[str, Any], applicant_id: str) -> Optional[Dict[str, Any]]:
    """Look up an applicant by id; None when absent."""
    for applicant in state.get("applicants", []):
        if applicant.get("id") == applicant_id:
            return applicant
    return None


def require_applicant(state: Dict[str, Any], applicant_id: str) -> Dict[str, Any]:
    applicant = find_applicant(state, applicant_id)
    if applicant is None:
        raise RecordNotFoundError("Applicant", applicant_id)
    return applicant


def _check_stage(stage: str) -> None:
    if stage not in STAGES:
        raise ValueError(f"Unknown stage '{stage}'. Stages: {list(STAGES)}")


def _check_fields(fields, allowed) -> None:
    unknown = sorted(set(fields) - set(allowed))
    if unknown:
        raise ValueError(f"Fields not editable: {unknown}. Editable: {list(allowed)}")


def _apply_stage(applicant: Dict[str, Any], stage: str, timestamp: str) -> bool:
    """
    Move an applicant to a stage in-place.

    Returns:
        True if the stage changed (history appended), False if already there
    """
    history = applicant.setdefault("stageHistory", [])
    if applicant.get("stage") == stage and history and history[-1].get("stage") == stage:
        return False

    applicant["stage"] = stage
    applicant["stageChangedAt"] = timestamp
    history.append({"stage": stage, "at": timestamp})
    return True


def _refresh_body_comp(applicant: Dict[str, Any]) -> BodyCompResult:
    result = evaluate(applicant)
    applicant["bodyComp"] = result.to_dict()
    return result


def add_applicant(
    store,
    name: str = "New Applicant",
    stage: str = STAGES[0],
    now: Optional[datetime] = None,
    source: str = "pipeline",
    **fields,
) -> str:
    """
    Create an applicant and return its id.

    Measurements passed in **fields are evaluated immediately.

    Raises:
        ValueError: On an unknown stage or non-editable field
    """
    _check_stage(stage)
    _check_fields(fields, set(EDITABLE_FIELDS) - {"name", "stage"})

    record = new_applicant(name, stage, now, **fields)
    if any(key in fields for key in MEASUREMENT_FIELDS):
        _refresh_body_comp(record)

    store.set_state(lambda state: state["applicants"].append(record))

    _log_info(f"Added applicant {name} ({record['id']}) at {stage}")
    log_pipeline_event("registration", record["id"], source, name=name, stage=stage)
    return record["id"]


def remove_applicant(store, applicant_id: str, source: str = "pipeline") -> None:
    """
    Remove an applicant.

    Events and checklist documents that reference the id are kept; lookups on
    them resolve to "not found".

    Raises:
        RecordNotFoundError: If the id is unknown
    """
    removed = {}

    def remove(state):
        removed.update(require_applicant(state, applicant_id))
        state["applicants"] = [a for a in state["applicants"] if a.get("id") != applicant_id]

    store.set_state(remove)

    _log_info(f"Removed applicant {removed.get('name')} ({applicant_id})")
    log_pipeline_event("removal", applicant_id, source, stage=removed.get("stage"))


def change_stage(
    store,
    applicant_id: str,
    stage: str,
    now: Optional[datetime] = None,
    source: str = "pipeline",
) -> bool:
    """
    Move an applicant to a pipeline stage.

    Returns:
        True if the stage changed, False if the applicant was already there
    """
    _, changed = _update(store, applicant_id, {"stage": stage}, now, source)
    return changed


def update_applicant(
    store,
    applicant_id: str,
    changes: Dict[str, Any],
    now: Optional[datetime] = None,
    source: str = "pipeline",
) -> Dict[str, Any]:
    """
    Apply field changes to an applicant.

    Args:
        store: Store to mutate
        applicant_id: Target applicant
        changes: Mapping of editable field -> new value
        now: Mutation time (defaults to now)
        source: Event source for the pipeline log

    Returns:
        Updated applicant snapshot

    Raises:
        ValueError: On non-editable fields (including id) or an unknown stage
        RecordNotFoundError: If the id is unknown
    """
    applicant, _ = _update(store, applicant_id, changes, now, source)
    return applicant


def _update(store, applicant_id, changes, now, source):
    _check_fields(changes, EDITABLE_FIELDS)
    if "stage" in changes:
        _check_stage(changes["stage"])

    timestamp = now_exact(now)
    outcome: Dict[str, Any] = {"stage_changed": False}

    def apply(state):
        applicant = require_applicant(state, applicant_id)
        outcome["old_stage"] = applicant.get("stage")

        for key, value in changes.items():
            if key != "stage":
                applicant[key] = value

        if "stage" in changes:
            outcome["stage_changed"] = _apply_stage(applicant, changes["stage"], timestamp)

        if any(key in changes for key in MEASUREMENT_FIELDS):
            outcome["result"] = _refresh_body_comp(applicant)

        applicant["touchedAt"] = timestamp

    snapshot = store.set_state(apply)
    applicant = find_applicant(snapshot, applicant_id)

    if outcome["stage_changed"]:
        log_stage_transition(applicant["name"], outcome["old_stage"], applicant["stage"])
        log_stage_change(applicant_id, outcome["old_stage"], applicant["stage"], source)
    if "result" in outcome:
        log_body_comp(applicant["name"], outcome["result"].status, outcome["result"].message)

    return applicant, outcome["stage_changed"]


def evaluate_applicant(
    store, applicant_id: str, now: Optional[datetime] = None
) -> BodyCompResult:
    """Re-run the body composition evaluation and write the result back."""
    timestamp = now_exact(now)
    outcome = {}

    def apply(state):
        applicant = require_applicant(state, applicant_id)
        outcome["result"] = _refresh_body_comp(applicant)
        outcome["name"] = applicant.get("name")
        applicant["touchedAt"] = timestamp

    store.set_state(apply)
    log_body_comp(outcome["name"], outcome["result"].status, outcome["result"].message)
    return outcome["result"]


def add_checklist_label(
    store, applicant_id: str, label: str, now: Optional[datetime] = None
) -> bool:
    """
    Add a requirement label to an applicant's checklist.

    Returns:
        True if added, False if the label was already present

    Raises:
        ValueError: If the label is blank
    """
    return add_checklist_labels(store, applicant_id, [label], now=now) == [label.strip()]


def add_checklist_labels(
    store, applicant_id: str, labels: List[str], now: Optional[datetime] = None
) -> List[str]:
    """
    Add several labels in one mutation, skipping duplicates.

    Returns:
        Labels actually added, in input order
    """
    cleaned = [label.strip() for label in labels if isinstance(label, str)]
    if len(cleaned) != len(labels) or not all(cleaned):
        raise ValueError("Checklist labels must be non-blank strings")

    timestamp = now_exact(now)
    added: List[str] = []

    def apply(state):
        applicant = require_applicant(state, applicant_id)
        checklist = applicant.setdefault("checklist", [])
        for label in cleaned:
            if label not in checklist:
                checklist.append(label)
                added.append(label)
        if added:
            applicant["touchedAt"] = timestamp

    store.set_state(apply)
    return added


def days_in_stage(applicant: Dict[str, Any], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days since the last stage change (falls back to createdAt)."""
    changed = parse_timestamp(applicant.get("stageChangedAt") or applicant.get("createdAt"))
    if changed is None:
        return None
    return max(0, ((now or datetime.now()) - changed).days)


def aging_status(
    applicant: Dict[str, Any], settings: Dict[str, Any], now: Optional[datetime] = None
) -> str:
    """
    Classify how long an applicant has sat in their current stage.

    Uses settings agingWarningDays / agingCriticalDays (inclusive). Enlisted
    applicants and applicants without timestamps are always "fresh".
    """
    if applicant.get("stage") == FINAL_STAGE:
        return FRESH

    days = days_in_stage(applicant, now)
    if days is None:
        return FRESH

    if days >= settings.get("agingCriticalDays", 30):
        return CRITICAL
    if days >= settings.get("agingWarningDays", 14):
        return WARNING
    return FRESH

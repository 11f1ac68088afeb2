"""
Schema migration for persisted store records.

Any prior version of the persisted record is upgraded to CURRENT_SCHEMA_VERSION
by folding over MIGRATIONS, an ordered list of (target_version, step) pairs.
Each step takes a record at version N-1 and returns it at version N.

Schema history:
    1: applicants + events (+ legacy top-level annualGoal); no version tag
    2: adds settings
    3: adds workstation, checklist, notifications

Rules:
- Migration is additive: fields are added when missing, never removed.
- Existing values always win over defaults.
- A malformed collection (wrong type) is reset to its default; the original
  value is kept under _malformed_<key>.
- Migrating a current record is a no-op apart from the version tag.

Adding a version means appending one step to MIGRATIONS and bumping
CURRENT_SCHEMA_VERSION in defaults.py.
"""

import copy
import json
from typing import Any, Callable, Dict, List, Optional, Tuple

from muster.contexts.state.defaults import (
    CURRENT_SCHEMA_VERSION,
    get_default_notifications,
    get_default_settings,
    get_default_workstation,
    seed_state,
)
from muster.contexts.state.logger import _log_warning, log_migration

# Keys used by the legacy per-collection layout (schema version 1)
LEGACY_KEYS = {
    "applicants": "recruitment-applicants-v1",
    "events": "recruitment-events-v1",
    "annualGoal": "recruitment-annual-goal-v1",
}

State = Dict[str, Any]


def detect_version(record: State) -> int:
    """Schema version of a record; a missing or non-integer tag means version 1."""
    version = record.get("schemaVersion")
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        return 1
    return version


def _set_aside(record: State, key: str) -> None:
    """Copy a malformed value to _malformed_<key> before it is replaced."""
    value = record[key]
    record[f"_malformed_{key}"] = value
    _log_warning(
        f"Malformed '{key}' ({type(value).__name__}) kept as '_malformed_{key}', "
        "replaced with defaults"
    )


def _ensure_list(record: State, key: str) -> None:
    if key not in record:
        record[key] = []
    elif not isinstance(record[key], list):
        _set_aside(record, key)
        record[key] = []


def _ensure_dict(record: State, key: str, defaults: Dict[str, Any]) -> None:
    """Shallow-merge defaults under record[key]; existing values win."""
    existing = record.get(key)
    if existing is None:
        record[key] = defaults
    elif isinstance(existing, dict):
        record[key] = {**defaults, **existing}
    else:
        _set_aside(record, key)
        record[key] = defaults


def migrate_v1_to_v2(record: State) -> State:
    """
    Add settings.

    A legacy top-level annualGoal seeds settings.annualGoal unless settings
    already carries one. The top-level field itself is kept.
    """
    defaults = get_default_settings()
    legacy_goal = record.get("annualGoal")
    if isinstance(legacy_goal, (int, float)) and not isinstance(legacy_goal, bool):
        defaults["annualGoal"] = legacy_goal

    _ensure_dict(record, "settings", defaults)
    _ensure_list(record, "applicants")
    _ensure_list(record, "events")
    return record


def migrate_v2_to_v3(record: State) -> State:
    """Add workstation, checklist documents and notification schedule."""
    _ensure_dict(record, "workstation", get_default_workstation())
    _ensure_list(record, "checklist")
    if "notifications" not in record:
        record["notifications"] = get_default_notifications()
    return record


MIGRATIONS: List[Tuple[int, Callable[[State], State]]] = [
    (2, migrate_v1_to_v2),
    (3, migrate_v2_to_v3),
]


def migrate(raw: Any) -> State:
    """
    Upgrade a persisted record of any version to the current schema.

    Total function: None or any non-dict input yields a freshly seeded state.
    The input is never mutated.

    Args:
        raw: Parsed persisted record (any JSON value) or None

    Returns:
        Record at CURRENT_SCHEMA_VERSION

    Examples:
        >>> migrate({"foo": 1, "schemaVersion": 1})["foo"]
        1
        >>> migrate(None)["schemaVersion"] == CURRENT_SCHEMA_VERSION
        True
    """
    if not isinstance(raw, dict):
        if raw is not None:
            _log_warning(f"Discarding non-object record ({type(raw).__name__})")
        return seed_state()

    record = copy.deepcopy(raw)
    start = version = detect_version(record)

    for target, step in MIGRATIONS:
        if version < target:
            record = step(record)
            record["schemaVersion"] = target
            version = target

    record["schemaVersion"] = CURRENT_SCHEMA_VERSION
    log_migration(start, CURRENT_SCHEMA_VERSION)
    return record


def assemble_legacy_record(storage) -> Optional[State]:
    """
    Rebuild a version 1 record from the legacy per-collection storage keys.

    Args:
        storage: Persistence medium with get(key)

    Returns:
        Version 1 record, or None if no legacy key holds data
    """
    record: State = {}
    for field, key in LEGACY_KEYS.items():
        raw = storage.get(key)
        if raw is None:
            continue
        try:
            record[field] = json.loads(raw)
        except (TypeError, ValueError) as e:
            _log_warning(f"Ignoring unreadable legacy key '{key}': {e}")

    if not record:
        return None

    record["schemaVersion"] = 1
    return record

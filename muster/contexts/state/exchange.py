"""
Import/export boundary for store state.

Export serializes the full state (or the weekly subset) to the persisted JSON
shape. Import parses untrusted JSON, validates it completely, and only then
merges it into a state. Merges are per collection and keyed by record id:
incoming fields overwrite existing fields of the same record, records missing
from the payload are kept, and new records are appended in payload order.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from muster.contexts.state.exceptions import ImportPayloadError
from muster.contexts.state.settings import check_aging_thresholds, validate_settings

MERGE_COLLECTIONS = ("applicants", "events", "checklist")
WEEKLY_KEYS = ("schemaVersion", "applicants", "events", "checklist")
EXPORT_SCOPES = ("full", "weekly")


@dataclass
class ImportSummary:
    """
    Outcome of merging an import payload.

    Attributes:
        added: New record count per collection
        updated: Overwritten record count per collection
        settings_updated: Whether a settings object was merged
    """

    added: Dict[str, int] = field(default_factory=dict)
    updated: Dict[str, int] = field(default_factory=dict)
    settings_updated: bool = False

    @property
    def total(self) -> int:
        return sum(self.added.values()) + sum(self.updated.values())


def export_state(state: Dict[str, Any], scope: str = "full", indent: int = 2) -> str:
    """
    Serialize state for export.

    Args:
        state: Store snapshot
        scope: "full" for the whole state, "weekly" for applicants/events/checklist
        indent: JSON indentation

    Returns:
        JSON text in the persisted shape

    Raises:
        ValueError: If scope is unknown
    """
    if scope not in EXPORT_SCOPES:
        raise ValueError(f"scope must be one of {EXPORT_SCOPES}, got: {scope}")

    if scope == "weekly":
        state = {key: state[key] for key in WEEKLY_KEYS if key in state}

    return json.dumps(state, indent=indent)


def _valid_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        return bool(value)
    return isinstance(value, int)


def parse_import_payload(text: str) -> Dict[str, Any]:
    """
    Parse and validate an untrusted import payload.

    Raises:
        ImportPayloadError: If the text is not JSON, is not an object, has a
            collection that is not a list of records with ids, or has nothing
            to merge
    """
    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ImportPayloadError(f"Import file is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ImportPayloadError(
            f"Import payload must be a JSON object, got {type(payload).__name__}"
        )

    present = [name for name in MERGE_COLLECTIONS if name in payload]

    for name in present:
        records = payload[name]
        if not isinstance(records, list):
            raise ImportPayloadError(f"'{name}' must be a list", collection=name)
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise ImportPayloadError("Record must be an object", collection=name, index=index)
            if not _valid_id(record.get("id")):
                raise ImportPayloadError(
                    "Record is missing a usable 'id'", collection=name, index=index
                )

    if "settings" in payload:
        if not isinstance(payload["settings"], dict):
            raise ImportPayloadError("'settings' must be an object", collection="settings")
        try:
            validate_settings(payload["settings"])
        except ValueError as e:
            raise ImportPayloadError(str(e), collection="settings") from e

    if not present and "settings" not in payload:
        raise ImportPayloadError(
            "Import payload has nothing to merge "
            "(expected applicants, events, checklist or settings)"
        )

    return payload


def merge_records(existing: List[dict], incoming: List[dict]) -> tuple:
    """
    Merge two record lists by id.

    Returns:
        (merged list, added count, updated count). Order is existing records
        first, then new ids in the order they first appear in incoming.
    """
    merged = [dict(record) if isinstance(record, dict) else record for record in existing]
    positions = {}
    for position, record in enumerate(merged):
        if isinstance(record, dict) and "id" in record:
            positions.setdefault(record["id"], position)

    added = updated = 0
    for record in incoming:
        record_id = record["id"]
        if record_id in positions:
            position = positions[record_id]
            merged[position] = {**merged[position], **record}
            updated += 1
        else:
            positions[record_id] = len(merged)
            merged.append(dict(record))
            added += 1

    return merged, added, updated


def merge_import(state: Dict[str, Any], payload: Dict[str, Any]) -> ImportSummary:
    """
    Merge a validated payload into state in-place.

    Intended to run inside Store.set_state on the working copy.
    """
    summary = ImportSummary()

    for name in MERGE_COLLECTIONS:
        if name not in payload:
            continue
        merged, added, updated = merge_records(state.get(name, []), payload[name])
        state[name] = merged
        summary.added[name] = added
        summary.updated[name] = updated

    if "settings" in payload:
        merged = {**state.get("settings", {}), **payload["settings"]}
        try:
            check_aging_thresholds(merged)
        except ValueError as e:
            raise ImportPayloadError(str(e), collection="settings") from e
        state["settings"] = merged
        summary.settings_updated = True

    return summary

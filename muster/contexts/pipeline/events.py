"""
Calendar event operations.

Events point at applicants by id only (applicantId). An id whose applicant
has been removed is a normal state: resolve_applicant() returns None and
consumers show the event as a general event.
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from muster.contexts.pipeline.applicants import find_applicant
from muster.contexts.pipeline.logger import _log_info
from muster.contexts.state.defaults import EVENT_CATEGORIES, new_event
from muster.contexts.state.exceptions import RecordNotFoundError

EVENT_FIELDS = ("id", "title", "date", "time", "category", "applicantId", "templateId", "notes")
UPCOMING_WINDOW_DAYS = 30


def find_event(state: Dict[str, Any], event_id: str) -> Optional[Dict[str, Any]]:
    for event in state.get("events", []):
        if event.get("id") == event_id:
            return event
    return None


def _validate_event(data: Dict[str, Any]) -> None:
    """
    Check event fields that are present.

    Raises:
        ValueError: On unknown fields, a blank title, a non-ISO date,
            a time not in HH:MM, or an unknown category
    """
    unknown = sorted(set(data) - set(EVENT_FIELDS))
    if unknown:
        raise ValueError(f"Unknown event fields: {unknown}")

    if "title" in data and not str(data["title"] or "").strip():
        raise ValueError("Event title cannot be blank")

    if "date" in data:
        try:
            date.fromisoformat(data["date"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Event date must be YYYY-MM-DD, got: {data['date']!r}") from e

    if data.get("time"):
        try:
            datetime.strptime(data["time"], "%H:%M")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Event time must be HH:MM, got: {data['time']!r}") from e

    if "category" in data and data["category"] not in EVENT_CATEGORIES:
        raise ValueError(
            f"Unknown category '{data['category']}'. Categories: {list(EVENT_CATEGORIES)}"
        )


def save_event(store, data: Dict[str, Any]) -> str:
    """
    Create or update an event.

    With an "id" that exists, the given fields are merged over the stored
    event. Without an id, a new event is created (title and date required).

    Returns:
        The event id

    Raises:
        ValueError: On invalid fields
        RecordNotFoundError: If an id is given but no such event exists
    """
    _validate_event(data)
    event_id = data.get("id")

    if event_id:

        def update(state):
            event = find_event(state, event_id)
            if event is None:
                raise RecordNotFoundError("Event", event_id)
            event.update(data)

        store.set_state(update)
        _log_info(f"Updated event {event_id}")
        return event_id

    if "title" not in data or "date" not in data:
        raise ValueError("New events need a title and a date")

    event = new_event(
        data["title"],
        data["date"],
        category=data.get("category", EVENT_CATEGORIES[0]),
        time=data.get("time") or None,
        applicant_id=data.get("applicantId") or None,
        template_id=data.get("templateId") or None,
        notes=data.get("notes", ""),
    )
    store.set_state(lambda state: state["events"].append(event))
    _log_info(f"Scheduled '{event['title']}' on {event['date']} ({event['id']})")
    return event["id"]


def delete_event(store, event_id: str) -> None:
    """
    Raises:
        RecordNotFoundError: If the id is unknown
    """

    def remove(state):
        if find_event(state, event_id) is None:
            raise RecordNotFoundError("Event", event_id)
        state["events"] = [e for e in state["events"] if e.get("id") != event_id]

    store.set_state(remove)
    _log_info(f"Deleted event {event_id}")


def resolve_applicant(state: Dict[str, Any], event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Applicant an event refers to, or None for general or dangling references."""
    applicant_id = event.get("applicantId")
    if not applicant_id:
        return None
    return find_applicant(state, applicant_id)


def _sort_key(event: Dict[str, Any]) -> tuple:
    return (str(event.get("date") or ""), str(event.get("time") or ""))


def sorted_events(state: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Events ordered by date, then time (untimed events first on a day)."""
    return sorted(state.get("events", []), key=_sort_key)


def events_on(state: Dict[str, Any], day: date) -> List[Dict[str, Any]]:
    return [e for e in sorted_events(state) if e.get("date") == day.isoformat()]


def events_for_applicant(state: Dict[str, Any], applicant_id: str) -> List[Dict[str, Any]]:
    return [e for e in sorted_events(state) if e.get("applicantId") == applicant_id]


def upcoming_events(
    state: Dict[str, Any], today: date, days: int = UPCOMING_WINDOW_DAYS
) -> List[Dict[str, Any]]:
    """
    Events after today and up to `days` days ahead.

    Today's events are not "upcoming"; they are listed by events_on().
    Events with an unparseable date are skipped.
    """
    horizon = today + timedelta(days=days)
    upcoming = []
    for event in sorted_events(state):
        try:
            event_day = date.fromisoformat(event.get("date") or "")
        except (TypeError, ValueError):
            continue
        if today < event_day <= horizon:
            upcoming.append(event)
    return upcoming


def upcoming_count(state: Dict[str, Any], today: date, days: int = UPCOMING_WINDOW_DAYS) -> int:
    return len(upcoming_events(state, today, days))


def format_event_meta(event: Dict[str, Any], applicant_name: Optional[str] = None) -> str:
    """
    One-line event description.

    Example:
        "October 18, 2026 at 09:30 • Alex Johnson"
    """
    try:
        day = date.fromisoformat(event.get("date") or "")
        meta = f"{day:%B} {day.day}, {day.year}"
    except (TypeError, ValueError):
        meta = str(event.get("date") or "Undated")

    if event.get("time"):
        meta += f" at {event['time']}"
    if applicant_name:
        meta += f" • {applicant_name}"
    return meta

"""Unit tests for calendar event operations."""

from datetime import date

import pytest

from muster.contexts.pipeline import delete_event, save_event, sorted_events
from muster.contexts.pipeline.events import (
    events_for_applicant,
    events_on,
    find_event,
    format_event_meta,
    upcoming_count,
    upcoming_events,
)
from muster.contexts.state import RecordNotFoundError

TODAY = date(2026, 10, 18)


def state_with(*events):
    return {"applicants": [], "events": [dict(event) for event in events]}


class TestSaveEvent:
    """Create and update through save_event."""

    @pytest.mark.unit
    def test_create(self, empty_store):
        event_id = save_event(empty_store, {"title": "MEPS", "date": "2026-10-25"})
        event = find_event(empty_store.get_state(), event_id)

        assert event["title"] == "MEPS"
        assert event["category"] == "Appointment"
        assert event["time"] is None
        assert event["applicantId"] is None

    @pytest.mark.unit
    def test_update_merges_fields(self, empty_store):
        event_id = save_event(
            empty_store, {"title": "MEPS", "date": "2026-10-25", "time": "06:00"}
        )
        assert save_event(empty_store, {"id": event_id, "notes": "Bring ID"}) == event_id

        event = find_event(empty_store.get_state(), event_id)
        assert event["title"] == "MEPS"
        assert event["time"] == "06:00"
        assert event["notes"] == "Bring ID"
        assert len(empty_store.get_state()["events"]) == 1

    @pytest.mark.unit
    def test_update_unknown_id(self, empty_store):
        with pytest.raises(RecordNotFoundError):
            save_event(empty_store, {"id": "missing", "title": "x"})

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "data",
        [
            {"title": "MEPS"},
            {"date": "2026-10-25"},
            {"title": "  ", "date": "2026-10-25"},
            {"title": "MEPS", "date": "10/25/2026"},
            {"title": "MEPS", "date": "2026-10-25", "time": "6am"},
            {"title": "MEPS", "date": "2026-10-25", "category": "Party"},
            {"title": "MEPS", "date": "2026-10-25", "location": "Fort"},
        ],
    )
    def test_invalid(self, empty_store, data):
        with pytest.raises(ValueError):
            save_event(empty_store, data)
        assert empty_store.get_state()["events"] == []


@pytest.mark.unit
def test_delete_event(store):
    event_id = store.get_state()["events"][0]["id"]
    delete_event(store, event_id)
    assert store.get_state()["events"] == []

    with pytest.raises(RecordNotFoundError):
        delete_event(store, event_id)


@pytest.mark.unit
def test_sorted_by_date_then_time():
    state = state_with(
        {"id": "c", "date": "2026-10-20", "time": "13:00"},
        {"id": "a", "date": "2026-10-19", "time": "09:00"},
        {"id": "b", "date": "2026-10-20", "time": None},
        {"id": "d", "date": "2026-10-20", "time": "08:30"},
    )
    assert [event["id"] for event in sorted_events(state)] == ["a", "b", "d", "c"]


@pytest.mark.unit
def test_events_on_and_for_applicant():
    state = state_with(
        {"id": "a", "date": "2026-10-18", "applicantId": "p1"},
        {"id": "b", "date": "2026-10-19", "applicantId": "p1"},
        {"id": "c", "date": "2026-10-18", "applicantId": None},
    )
    assert [event["id"] for event in events_on(state, TODAY)] == ["a", "c"]
    assert [event["id"] for event in events_for_applicant(state, "p1")] == ["a", "b"]


class TestUpcoming:
    """The upcoming window runs from tomorrow through today + days."""

    @pytest.mark.unit
    def test_window(self):
        state = state_with(
            {"id": "past", "date": "2026-10-17"},
            {"id": "today", "date": "2026-10-18"},
            {"id": "tomorrow", "date": "2026-10-19"},
            {"id": "edge", "date": "2026-11-17"},
            {"id": "beyond", "date": "2026-11-18"},
            {"id": "broken", "date": "soon"},
        )
        assert [event["id"] for event in upcoming_events(state, TODAY)] == ["tomorrow", "edge"]
        assert upcoming_count(state, TODAY) == 2

    @pytest.mark.unit
    def test_custom_window(self):
        state = state_with({"id": "a", "date": "2026-10-25"})
        assert upcoming_count(state, TODAY, days=7) == 1
        assert upcoming_count(state, TODAY, days=6) == 0


class TestFormatEventMeta:
    """One-line event descriptions."""

    @pytest.mark.unit
    def test_full(self):
        event = {"date": "2026-10-18", "time": "09:30"}
        expected = "October 18, 2026 at 09:30 • Alex Johnson"
        assert format_event_meta(event, "Alex Johnson") == expected

    @pytest.mark.unit
    def test_untimed_general(self):
        assert format_event_meta({"date": "2026-11-02"}) == "November 2, 2026"

    @pytest.mark.unit
    def test_unparseable_date(self):
        assert format_event_meta({"date": "soon"}) == "soon"
        assert format_event_meta({}) == "Undated"

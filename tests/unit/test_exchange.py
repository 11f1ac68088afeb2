"""Unit tests for import/export of store state."""

import json

import pytest

from muster.contexts.state import ImportPayloadError, export_state, merge_import
from muster.contexts.state.defaults import seed_state
from muster.contexts.state.exchange import merge_records, parse_import_payload


class TestMergeRecords:
    """Tests for id-keyed collection merging."""

    @pytest.mark.unit
    def test_overwrite_and_append(self):
        merged, added, updated = merge_records(
            [{"id": 1, "name": "A"}],
            [{"id": 1, "name": "B"}, {"id": 2, "name": "C"}],
        )
        assert merged == [{"id": 1, "name": "B"}, {"id": 2, "name": "C"}]
        assert (added, updated) == (1, 1)

    @pytest.mark.unit
    def test_field_level_overwrite(self):
        merged, _, _ = merge_records(
            [{"id": "a", "name": "A", "notes": "keep"}], [{"id": "a", "name": "B"}]
        )
        assert merged == [{"id": "a", "name": "B", "notes": "keep"}]

    @pytest.mark.unit
    def test_records_missing_from_payload_kept(self):
        existing = [{"id": "a"}, {"id": "b"}, {"id": "c"}]
        merged, _, _ = merge_records(existing, [{"id": "d"}, {"id": "b", "x": 1}])
        assert [record["id"] for record in merged] == ["a", "b", "c", "d"]

    @pytest.mark.unit
    def test_repeated_incoming_id(self):
        merged, added, updated = merge_records([], [{"id": 3, "a": 1}, {"id": 3, "b": 2}])
        assert merged == [{"id": 3, "a": 1, "b": 2}]
        assert (added, updated) == (1, 1)

    @pytest.mark.unit
    def test_existing_not_mutated(self):
        existing = [{"id": 1, "name": "A"}]
        merge_records(existing, [{"id": 1, "name": "B"}])
        assert existing == [{"id": 1, "name": "A"}]


class TestParseImportPayload:
    """Validation of untrusted payloads."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[]",
            '"text"',
            "{}",
            '{"unrelated": 1}',
            '{"applicants": {}}',
            '{"applicants": ["x"]}',
            '{"applicants": [{"name": "no id"}]}',
            '{"applicants": [{"id": ""}]}',
            '{"events": [{"id": true}]}',
            '{"checklist": [{"id": null}]}',
            '{"settings": []}',
        ],
    )
    def test_rejects_malformed(self, text):
        with pytest.raises(ImportPayloadError):
            parse_import_payload(text)

    @pytest.mark.unit
    def test_error_names_location(self):
        with pytest.raises(ImportPayloadError) as exc_info:
            parse_import_payload('{"events": [{"id": "e1"}, {"title": "x"}]}')

        error = exc_info.value
        assert error.collection == "events"
        assert error.index == 1
        assert "Location: events[1]" in str(error)

    @pytest.mark.unit
    def test_accepts_settings_only(self):
        assert parse_import_payload('{"settings": {"annualGoal": 50}}') == {
            "settings": {"annualGoal": 50}
        }

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "settings",
        [
            {"agingCriticalDays": "30"},
            {"favoriteColor": "blue"},
            {"annualGoal": -5},
            {"agingWarningDays": 40, "agingCriticalDays": 30},
            {"calendar": "fax"},
        ],
    )
    def test_rejects_invalid_settings(self, settings):
        with pytest.raises(ImportPayloadError) as exc_info:
            parse_import_payload(json.dumps({"settings": settings}))

        assert exc_info.value.collection == "settings"
        assert "Location: settings" in str(exc_info.value)


class TestMergeImport:
    """Merging a validated payload into a state."""

    @pytest.mark.unit
    def test_merge_example(self):
        state = {"applicants": [{"id": 1, "name": "A"}], "events": []}
        summary = merge_import(
            state, {"applicants": [{"id": 1, "name": "B"}, {"id": 2, "name": "C"}]}
        )

        assert state["applicants"] == [{"id": 1, "name": "B"}, {"id": 2, "name": "C"}]
        assert summary.added == {"applicants": 1}
        assert summary.updated == {"applicants": 1}
        assert not summary.settings_updated

    @pytest.mark.unit
    def test_settings_merge_shallowly(self):
        state = seed_state()
        summary = merge_import(state, {"settings": {"annualGoal": 50}})

        assert summary.settings_updated
        assert state["settings"]["annualGoal"] == 50
        assert state["settings"]["accentTheme"] == "navy"

    @pytest.mark.unit
    def test_merged_thresholds_checked(self):
        state = seed_state()
        before = dict(state["settings"])

        # valid alone, but above the stored critical threshold of 30
        with pytest.raises(ImportPayloadError, match="cannot exceed") as exc_info:
            merge_import(state, {"settings": {"agingWarningDays": 50}})

        assert exc_info.value.collection == "settings"
        assert state["settings"] == before

    @pytest.mark.unit
    def test_missing_collection_created(self):
        state = {"applicants": []}
        merge_import(state, {"checklist": [{"id": "d1", "label": "Passport"}]})
        assert state["checklist"] == [{"id": "d1", "label": "Passport"}]


class TestExport:
    """Tests for export_state."""

    @pytest.mark.unit
    def test_full_export(self):
        state = seed_state()
        assert json.loads(export_state(state)) == state

    @pytest.mark.unit
    def test_weekly_export(self):
        state = seed_state()
        exported = json.loads(export_state(state, scope="weekly"))
        assert set(exported) == {"schemaVersion", "applicants", "events", "checklist"}

    @pytest.mark.unit
    def test_unknown_scope(self):
        with pytest.raises(ValueError):
            export_state(seed_state(), scope="monthly")

"""Unit tests for recruiter settings resolution."""

import pytest

from muster.contexts.state.settings import apply_settings, load_settings_file, validate_settings


@pytest.mark.unit
def test_load_settings_file(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text(
        "recruiterName: SSG Rivera\n"
        "annualGoal: 48\n"
        "agingWarningDays: 10\n"
        "agingCriticalDays: ${agingWarningDays}\n"
    )
    assert load_settings_file(config) == {
        "recruiterName": "SSG Rivera",
        "annualGoal": 48,
        "agingWarningDays": 10,
        "agingCriticalDays": 10,
    }


@pytest.mark.unit
def test_load_settings_file_rejects_list(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text("- annualGoal\n- 48\n")
    with pytest.raises(ValueError, match="mapping"):
        load_settings_file(config)


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"favoriteColor": "blue"}, "Unknown settings"),
        ({"annualGoal": -1}, "non-negative"),
        ({"annualGoal": "forty"}, "non-negative"),
        ({"reminderLeadMinutes": True}, "non-negative"),
        ({"agingWarningDays": 40, "agingCriticalDays": 30}, "cannot exceed"),
        ({"calendar": "lotus"}, "calendar"),
    ],
)
def test_validate_settings_rejects(overrides, message):
    with pytest.raises(ValueError, match=message):
        validate_settings(overrides)


@pytest.mark.unit
def test_apply_settings_merges(store):
    settings = apply_settings(store, {"annualGoal": 60, "calendar": "ics"})

    assert settings["annualGoal"] == 60
    assert settings["calendar"] == "ics"
    assert settings["accentTheme"] == "navy"
    assert store.get_state()["settings"] == settings


@pytest.mark.unit
def test_apply_settings_invalid_leaves_store(store):
    before = store.get_state()
    with pytest.raises(ValueError):
        apply_settings(store, {"annualGoal": -5})
    assert store.get_state() == before


@pytest.mark.unit
def test_apply_settings_checks_merged_thresholds(store):
    before = store.get_state()

    # stored critical threshold is 30
    with pytest.raises(ValueError, match="cannot exceed"):
        apply_settings(store, {"agingWarningDays": 50})
    assert store.get_state() == before

    settings = apply_settings(store, {"agingWarningDays": 50, "agingCriticalDays": 60})
    assert (settings["agingWarningDays"], settings["agingCriticalDays"]) == (50, 60)

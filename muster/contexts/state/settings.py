"""
Recruiter settings resolution.

Settings live in the store under state["settings"]. Overrides can come from a
YAML file (loaded with OmegaConf so interpolation works) or from keyword
arguments, and are validated against DEFAULT_SETTINGS before being applied.

Example settings.yaml:
    recruiterName: SSG Rivera
    annualGoal: 48
    agingWarningDays: 10
    agingCriticalDays: 21
"""

from pathlib import Path
from typing import Any, Dict

from omegaconf import OmegaConf

from muster.contexts.state.defaults import DEFAULT_SETTINGS

NUMERIC_SETTINGS = ("annualGoal", "agingWarningDays", "agingCriticalDays", "reminderLeadMinutes")
CALENDARS = ("google", "outlook", "ics")


def load_settings_file(config_path: Path) -> Dict[str, Any]:
    """
    Load settings overrides from a YAML file.

    Raises:
        ValueError: If the file is not a mapping or has invalid keys/values
    """
    loaded = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    if not isinstance(loaded, dict):
        raise ValueError(f"Settings file must contain a mapping: {config_path}")
    return validate_settings(loaded)


def validate_settings(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check override keys and value types.

    Raises:
        ValueError: On unknown keys, non-numeric thresholds, a warning threshold
            above the critical one, or an unsupported calendar
    """
    unknown = sorted(set(overrides) - set(DEFAULT_SETTINGS))
    if unknown:
        raise ValueError(f"Unknown settings: {unknown}. Available: {sorted(DEFAULT_SETTINGS)}")

    for key in NUMERIC_SETTINGS:
        if key in overrides:
            value = overrides[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ValueError(f"'{key}' must be a non-negative number, got: {value!r}")

    check_aging_thresholds(overrides)

    if "calendar" in overrides and overrides["calendar"] not in CALENDARS:
        raise ValueError(f"calendar must be one of {CALENDARS}, got: {overrides['calendar']!r}")

    return dict(overrides)


def check_aging_thresholds(settings: Dict[str, Any]) -> None:
    """
    Raises:
        ValueError: If agingWarningDays exceeds agingCriticalDays (when both are numbers)
    """
    warning = settings.get("agingWarningDays")
    critical = settings.get("agingCriticalDays")
    numbers = all(
        isinstance(value, (int, float)) and not isinstance(value, bool)
        for value in (warning, critical)
    )
    if numbers and warning > critical:
        raise ValueError(
            f"agingWarningDays ({warning}) cannot exceed agingCriticalDays ({critical})"
        )


def apply_settings(store, overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and merge overrides into the store's settings.

    Returns:
        The resulting settings dict

    Raises:
        ValueError: On invalid overrides, or thresholds that conflict once merged
    """
    overrides = validate_settings(overrides)

    def merge(state):
        merged = {**state.get("settings", {}), **overrides}
        check_aging_thresholds(merged)
        state["settings"] = merged

    return store.set_state(merge)["settings"]

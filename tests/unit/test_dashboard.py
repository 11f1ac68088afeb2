"""Unit tests for dashboard figures."""

from datetime import datetime

import pytest

from muster.contexts.pipeline import goal_progress, summary
from muster.contexts.pipeline.dashboard import aging_counts, stage_counts
from muster.contexts.state.defaults import STAGES, seed_state


def state_with(stages, goal=4):
    return {
        "applicants": [{"id": str(n), "stage": stage} for n, stage in enumerate(stages)],
        "events": [],
        "settings": {"annualGoal": goal},
    }


class TestGoalProgress:
    """Progress toward the annual enlistment goal."""

    @pytest.mark.unit
    def test_partial(self):
        progress = goal_progress(state_with(["Enlisted", "Screening", "Medical"]))

        assert progress.enlisted == 1
        assert progress.remaining == 3
        assert progress.percent == 25.0
        assert not progress.reached
        assert progress.label == "3 remaining"

    @pytest.mark.unit
    def test_goal_exceeded_is_capped(self):
        progress = goal_progress(state_with(["Enlisted"] * 6))
        assert progress.percent == 100.0
        assert progress.remaining == 0
        assert progress.label == "Goal reached!"

    @pytest.mark.unit
    @pytest.mark.parametrize("goal", [0, -5, "abc", None])
    def test_non_positive_goal(self, goal):
        progress = goal_progress(state_with(["Enlisted"], goal=goal))
        assert progress.percent == 0.0

    @pytest.mark.unit
    def test_missing_settings_use_default_goal(self):
        progress = goal_progress({"applicants": []})
        assert progress.goal == 40


@pytest.mark.unit
def test_stage_counts_in_pipeline_order():
    counts = stage_counts(state_with(["Medical", "Screening", "Medical", "Retired"]))

    assert list(counts)[: len(STAGES)] == list(STAGES)
    assert counts["Medical"] == 2
    assert counts["Screening"] == 1
    assert counts["Enlisted"] == 0
    assert counts["Retired"] == 1


@pytest.mark.unit
def test_aging_counts():
    now = datetime(2026, 10, 18, 9, 30)
    state = {
        "applicants": [
            {"stage": "Screening", "stageChangedAt": "2026-10-01T09:00:00"},
            {"stage": "Screening", "stageChangedAt": "2026-09-01T09:00:00"},
            {"stage": "Enlisted", "stageChangedAt": "2026-01-01T09:00:00"},
            {"stage": "Medical", "stageChangedAt": "2026-10-17T09:00:00"},
        ],
        "settings": {"agingWarningDays": 14, "agingCriticalDays": 30},
    }
    assert aging_counts(state, now) == {"warning": 1, "critical": 1}


@pytest.mark.unit
def test_summary_figures():
    now = datetime(2026, 10, 18, 9, 30)
    figures = summary(seed_state(now), now)

    assert figures["applicants"] == 2
    assert figures["enlisted"] == 0
    assert figures["today"] == 1
    assert figures["upcoming"] == 0
    assert figures["goal"].goal == 40
    assert figures["by_stage"]["Interview"] == 1
    assert figures["aging"] == {"warning": 0, "critical": 0}

"""
Summary statistics derived from a store snapshot.

Read-only: nothing here mutates state.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from muster.contexts.pipeline.applicants import CRITICAL, WARNING, aging_status
from muster.contexts.pipeline.events import events_on, upcoming_count
from muster.contexts.screening.tables import to_number
from muster.contexts.state.defaults import DEFAULT_SETTINGS, FINAL_STAGE, STAGES


@dataclass(frozen=True)
class GoalProgress:
    """
    Progress toward the annual enlistment goal.

    Attributes:
        goal: Annual goal from settings
        enlisted: Applicants currently in the final stage
        remaining: Enlistments still needed (never negative)
        percent: Completion percentage, capped at 100 (0 when goal <= 0)
    """

    goal: float
    enlisted: int
    remaining: float
    percent: float

    @property
    def reached(self) -> bool:
        return self.remaining <= 0

    @property
    def label(self) -> str:
        return "Goal reached!" if self.reached else f"{self.remaining:g} remaining"


def enlisted_count(state: Dict[str, Any]) -> int:
    return sum(1 for a in state.get("applicants", []) if a.get("stage") == FINAL_STAGE)


def goal_progress(state: Dict[str, Any]) -> GoalProgress:
    goal = to_number(state.get("settings", {}).get("annualGoal", DEFAULT_SETTINGS["annualGoal"]))
    goal = goal if goal is not None else 0
    enlisted = enlisted_count(state)
    remaining = max(0, goal - enlisted)
    percent = min(100.0, enlisted / goal * 100) if goal > 0 else 0.0
    return GoalProgress(goal=goal, enlisted=enlisted, remaining=remaining, percent=percent)


def stage_counts(state: Dict[str, Any]) -> Dict[str, int]:
    """Applicant count per stage, in pipeline order (unknown stages last)."""
    counts = Counter(a.get("stage") for a in state.get("applicants", []))
    ordered = {stage: counts.pop(stage, 0) for stage in STAGES}
    ordered.update(counts)
    return ordered


def aging_counts(state: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, int]:
    settings = state.get("settings", {})
    statuses = Counter(aging_status(a, settings, now) for a in state.get("applicants", []))
    return {WARNING: statuses[WARNING], CRITICAL: statuses[CRITICAL]}


def summary(state: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Dashboard figures for one snapshot.

    Returns:
        Dict with applicants, enlisted, upcoming, today, goal, by_stage, aging
    """
    now = now or datetime.now()
    return {
        "applicants": len(state.get("applicants", [])),
        "enlisted": enlisted_count(state),
        "upcoming": upcoming_count(state, now.date()),
        "today": len(events_on(state, now.date())),
        "goal": goal_progress(state),
        "by_stage": stage_counts(state),
        "aging": aging_counts(state, now),
    }

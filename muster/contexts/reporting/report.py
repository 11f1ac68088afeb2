"""
Plain-text reports rendered from store snapshots.

Templates live in muster/contexts/reporting/templates/*.md.jinja and are
rendered with StrictUndefined so a missing field fails loudly instead of
printing blanks.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound

from muster.contexts.pipeline.applicants import (
    MEASUREMENT_FIELDS,
    PROFILE_FIELDS,
    aging_status,
    days_in_stage,
)
from muster.contexts.pipeline.dashboard import summary
from muster.contexts.pipeline.documents import documents_for
from muster.contexts.pipeline.events import (
    events_for_applicant,
    format_event_meta,
    resolve_applicant,
    upcoming_events,
)
from muster.utils.timestamp import format_timestamp

TEMPLATES_PATH = Path(__file__).parent / "templates"


class ReportTemplates:
    """Loads and caches report templates."""

    def __init__(self, templates_path: Path = TEMPLATES_PATH):
        self.templates_path = templates_path
        self._cache: Dict[str, Template] = {}
        self.env = Environment(
            loader=FileSystemLoader(str(templates_path)),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["timestamp"] = format_timestamp

    def get_template(self, name: str) -> Template:
        """
        Raises:
            TemplateNotFound: If templates/<name>.md.jinja does not exist
        """
        if name in self._cache:
            return self._cache[name]

        try:
            template = self.env.get_template(f"{name}.md.jinja")
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Report template '{name}' not found in {self.templates_path}"
            ) from e

        self._cache[name] = template
        return template


_templates = ReportTemplates()


def _present(applicant: Dict[str, Any], fields) -> Dict[str, Any]:
    return {
        key: applicant[key] for key in fields if applicant.get(key) not in (None, "")
    }


def render_applicant_report(
    applicant: Dict[str, Any], state: Dict[str, Any], now: Optional[datetime] = None
) -> str:
    """
    Markdown report for one applicant.

    Args:
        applicant: Applicant record from a snapshot
        state: Snapshot the applicant came from (for events and documents)
        now: Reference time for stage aging
    """
    return _templates.get_template("applicant_report").render(
        applicant=applicant,
        measurements=_present(applicant, MEASUREMENT_FIELDS),
        profile=_present(applicant, PROFILE_FIELDS),
        body_comp=applicant.get("bodyComp"),
        history=applicant.get("stageHistory", []),
        checklist=applicant.get("checklist", []),
        documents=documents_for(state, applicant["id"]),
        events=[
            f"{e.get('title', 'Untitled')}: {format_event_meta(e)}"
            for e in events_for_applicant(state, applicant["id"])
        ],
        days_in_stage=days_in_stage(applicant, now),
        aging=aging_status(applicant, state.get("settings", {}), now),
    )


def render_weekly_summary(state: Dict[str, Any], now: Optional[datetime] = None) -> str:
    """Markdown summary: goal, pipeline counts, next 7 days of events."""
    now = now or datetime.now()
    figures = summary(state, now)

    week = []
    for event in upcoming_events(state, now.date(), days=7):
        applicant = resolve_applicant(state, event)
        week.append(
            {
                "title": event.get("title", "Untitled"),
                "meta": format_event_meta(event, applicant["name"] if applicant else None),
            }
        )

    return _templates.get_template("weekly_summary").render(
        generated=now.strftime("%Y-%m-%d %H:%M"),
        recruiter=state.get("settings", {}).get("recruiterName") or "Recruiter",
        figures=figures,
        goal=figures["goal"],
        week=week,
    )

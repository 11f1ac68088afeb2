"""Integration tests for Markdown report rendering."""

from datetime import datetime

import pytest
from jinja2 import TemplateNotFound

from muster.contexts.pipeline import (
    add_applicant,
    add_checklist_label,
    add_document,
    change_stage,
    find_applicant,
    mark_document_received,
    save_event,
)
from muster.contexts.reporting import render_applicant_report, render_weekly_summary
from muster.contexts.reporting.report import ReportTemplates

NOW = datetime(2026, 10, 18, 9, 30)


@pytest.fixture
def jordan(empty_store):
    applicant_id = add_applicant(
        empty_store,
        "Jordan Lee",
        "Screening",
        now=datetime(2026, 10, 1, 8, 0),
        height=68,
        weight=175,
        gender="male",
        education="High School Diploma",
        notes="Prefers evening calls.",
    )
    add_checklist_label(empty_store, applicant_id, "Birth Certificate")
    add_checklist_label(empty_store, applicant_id, "Transcripts")
    document_id = add_document(empty_store, applicant_id, "Birth Certificate")
    mark_document_received(empty_store, document_id)
    save_event(
        empty_store,
        {"title": "MEPS", "date": "2026-10-21", "time": "06:00", "applicantId": applicant_id},
    )
    return applicant_id


@pytest.mark.integration
def test_applicant_report(empty_store, jordan):
    state = empty_store.get_state()
    report = render_applicant_report(find_applicant(state, jordan), state, now=NOW)

    assert report.startswith("# Applicant Report: Jordan Lee")
    assert "- Stage: Screening (17 days, warning)" in report
    assert "**WITHIN**" in report
    assert "| height | 68 |" in report
    assert "- education: High School Diploma" in report
    assert "- [x] Birth Certificate" in report
    assert "- [ ] Transcripts" in report
    assert "- MEPS: October 21, 2026 at 06:00" in report
    assert "Prefers evening calls." in report


@pytest.mark.integration
def test_applicant_report_minimal_record(empty_store):
    applicant_id = add_applicant(empty_store, "Casey Park")
    state = empty_store.get_state()
    report = render_applicant_report(find_applicant(state, applicant_id), state)

    assert "Not evaluated." in report
    assert "No requirements recorded." in report
    assert "## Events" not in report
    assert "## Notes" not in report


@pytest.mark.integration
def test_stage_history_listed_in_order(empty_store, jordan):
    change_stage(empty_store, jordan, "Interview", now=NOW)
    state = empty_store.get_state()
    report = render_applicant_report(find_applicant(state, jordan), state, now=NOW)

    assert "1. Screening (2026-10-01 08:00:00)" in report
    assert "2. Interview (2026-10-18 09:30:00)" in report


@pytest.mark.integration
def test_weekly_summary(empty_store, jordan):
    empty_store.set_state(lambda state: state["settings"].update(recruiterName="SSG Rivera"))
    save_event(empty_store, {"title": "Far off", "date": "2026-12-01"})

    report = render_weekly_summary(empty_store.get_state(), now=NOW)

    assert report.startswith("# Weekly Summary (SSG Rivera)")
    assert "0 of 40 enlisted (0%). 40 remaining" in report
    assert "| Screening | 1 |" in report
    assert "Aging: 1 warning, 0 critical" in report
    assert "- MEPS: October 21, 2026 at 06:00 • Jordan Lee" in report
    assert "Far off" not in report


@pytest.mark.integration
def test_weekly_summary_without_events(empty_store):
    report = render_weekly_summary(empty_store.get_state(), now=NOW)
    assert "# Weekly Summary (Recruiter)" in report
    assert "No events scheduled." in report


@pytest.mark.integration
def test_template_caching():
    templates = ReportTemplates()
    assert templates.get_template("weekly_summary") is templates.get_template("weekly_summary")

    with pytest.raises(TemplateNotFound):
        templates.get_template("monthly_summary")

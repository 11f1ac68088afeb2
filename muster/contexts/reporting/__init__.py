"""
Reporting Context

Responsibilities:
- Renders Markdown reports from store snapshots (per applicant, weekly)

Owns: Report templates
Never: Mutates state
"""

from muster.contexts.reporting.report import render_applicant_report, render_weekly_summary

__all__ = ["render_applicant_report", "render_weekly_summary"]

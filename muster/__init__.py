"""
MUSTER - Manage Unit Screening, Tracking, Enlistment & Reminders

A recruiting-workflow tracker built around a versioned state store and a
body composition eligibility evaluator.

Architecture:
- Screening Context: Body composition tables and evaluation cascade
- State Context: Versioned store, schema migration, persistence, import/export
- Pipeline Context: Applicant/event operations, dashboard figures, reminders
- Reporting Context: Markdown reports from store snapshots
"""

__version__ = "0.1.0"

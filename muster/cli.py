"""
Command-line interface for the MUSTER recruiting tracker.

State is kept in a file-backed store under MUSTER_DATA_PATH (default
outs/state). Applicant and event ids can be abbreviated to any unique prefix.

Commands:
    init      - Seed a fresh store (or reset an existing one with --force)
    add       - Add an applicant
    list      - List applicants (optionally filter by stage)
    stage     - Move an applicant to a pipeline stage
    measure   - Record measurements and evaluate body composition
    event     - Schedule an event
    events    - List events
    stats     - Show dashboard figures
    export    - Export state as JSON
    import    - Merge a JSON export into the store
    configure - Apply settings from a YAML file
    report    - Print an applicant report or the weekly summary
    recent    - Show recent pipeline events from the event log
"""

from datetime import date as date_type
from pathlib import Path
from typing import Optional

import typer

from muster.contexts.pipeline import (
    add_applicant,
    aging_status,
    change_stage,
    save_event,
    sorted_events,
    summary,
    update_applicant,
)
from muster.contexts.pipeline.events import events_on, format_event_meta, resolve_applicant
from muster.contexts.reporting import render_applicant_report, render_weekly_summary
from muster.contexts.state import (
    EVENT_CATEGORIES,
    STAGES,
    STORAGE_KEY,
    ImportPayloadError,
    JsonFileStorage,
    Store,
)
from muster.contexts.state.logger import setup_state_logger
from muster.contexts.state.settings import apply_settings, load_settings_file
from muster.utils.config import DATA_PATH, LOGS_PATH
from muster.utils.event_logging import get_recent_events
from muster.utils.timestamp import format_timestamp, now

app = typer.Typer(
    add_completion=False,
    help="Track applicants, events and enlistment goals",
    invoke_without_command=True,
)

STATUS_COLORS = {
    "within": typer.colors.GREEN,
    "tape": typer.colors.YELLOW,
    "over": typer.colors.RED,
    "incomplete": typer.colors.WHITE,
}
AGING_MARKS = {"fresh": "", "warning": " ⚠", "critical": " ‼"}


class _Session:
    data_path: Path = DATA_PATH
    store: Optional[Store] = None


session = _Session()


@app.callback()
def main(
    ctx: typer.Context,
    data: Path = typer.Option(DATA_PATH, "--data", "-d", help="Directory holding the store"),
):
    """Show help by default when no command is provided."""
    session.data_path = data
    session.store = None
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    setup_state_logger(LOGS_PATH / f"cli_{now()}", storage=str(data))


def _store() -> Store:
    if session.store is None:
        session.store = Store(JsonFileStorage(session.data_path))
    return session.store


def _resolve_id(collection: str, prefix: str) -> str:
    """Expand a unique id prefix within a collection, or exit with code 2."""
    records = _store().get_state().get(collection, [])
    matches = [r["id"] for r in records if str(r.get("id", "")).startswith(prefix)]
    if len(matches) == 1:
        return matches[0]

    problem = "No" if not matches else "Ambiguous"
    typer.secho(
        f"✗ {problem} {collection[:-1]} id matching '{prefix}'", fg=typer.colors.RED, err=True
    )
    raise typer.Exit(code=2)


def _check_choice(value: str, choices, label: str) -> None:
    if value not in choices:
        typer.secho(
            f"✗ Unknown {label} '{value}'. Choose from: {', '.join(choices)}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=2)


@app.command("init")
def init_command(
    force: bool = typer.Option(False, "--force", "-f", help="Replace existing data with seed data"),
):
    """
    Create the store with seed data.

    Examples:\n

        $ muster init            # First run

        $ muster init --force    # Wipe and reseed
    """
    storage = JsonFileStorage(session.data_path)
    if storage.get(STORAGE_KEY) is not None and not force:
        typer.secho(
            f"Store already exists at {storage.path_for(STORAGE_KEY)} (use --force to reset)",
            fg=typer.colors.YELLOW,
        )
        raise typer.Exit(code=1)

    state = _store().reset()
    typer.secho(
        f"✓ Seeded {len(state['applicants'])} applicant(s) and {len(state['events'])} event(s)",
        fg=typer.colors.GREEN,
    )


@app.command("add")
def add_command(
    name: str = typer.Argument(..., help="Applicant display name"),
    stage: str = typer.Option(STAGES[0], "--stage", "-s", help="Starting stage"),
    notes: str = typer.Option("", "--notes", help="Free-text notes"),
):
    """Add an applicant."""
    _check_choice(stage, STAGES, "stage")
    applicant_id = add_applicant(_store(), name=name, stage=stage, notes=notes, source="cli")
    typer.secho(f"✓ {name} → {stage} ({applicant_id[:8]})", fg=typer.colors.GREEN)


@app.command("list")
def list_command(
    stage: Optional[str] = typer.Option(None, "--stage", "-s", help="Only this stage"),
):
    """List applicants with body composition status and stage aging."""
    state = _store().get_state()
    applicants = state["applicants"]
    if stage:
        _check_choice(stage, STAGES, "stage")
        applicants = [a for a in applicants if a.get("stage") == stage]

    if not applicants:
        typer.echo("No applicants yet. Add one to get started.")
        return

    for applicant in applicants:
        body_comp = (applicant.get("bodyComp") or {}).get("status", "-")
        mark = AGING_MARKS[aging_status(applicant, state["settings"])]
        line = f"{applicant['id'][:8]}  {applicant['name']:<24} {applicant['stage']:<20}"
        typer.echo(line, nl=False)
        typer.secho(f"{body_comp}{mark}", fg=STATUS_COLORS.get(body_comp))


@app.command("stage")
def stage_command(
    applicant: str = typer.Argument(..., help="Applicant id (or unique prefix)"),
    stage: str = typer.Argument(..., help="New stage"),
):
    """Move an applicant to a pipeline stage."""
    _check_choice(stage, STAGES, "stage")
    applicant_id = _resolve_id("applicants", applicant)
    if change_stage(_store(), applicant_id, stage, source="cli"):
        typer.secho(f"⟳ {applicant_id[:8]} → {stage}", fg=typer.colors.YELLOW)
    else:
        typer.echo(f"⊘ {applicant_id[:8]} already at {stage}")


@app.command("measure")
def measure_command(
    applicant: str = typer.Argument(..., help="Applicant id (or unique prefix)"),
    height: Optional[float] = typer.Option(None, help="Height (inches)"),
    weight: Optional[float] = typer.Option(None, help="Weight (pounds)"),
    age: Optional[int] = typer.Option(None, help="Age (years)"),
    gender: Optional[str] = typer.Option(None, help="male or female"),
    neck: Optional[float] = typer.Option(None, help="Neck circumference (inches)"),
    waist: Optional[float] = typer.Option(None, help="Waist circumference (inches)"),
    hip: Optional[float] = typer.Option(None, help="Hip circumference (inches)"),
):
    """
    Record measurements and evaluate body composition.

    Examples:\n

        $ muster measure 5c1f --height 68 --weight 175 --gender male
    """
    changes = {
        key: value
        for key, value in {
            "height": height,
            "weight": weight,
            "age": age,
            "gender": gender,
            "neck": neck,
            "waist": waist,
            "hip": hip,
        }.items()
        if value is not None
    }
    if not changes:
        typer.secho("✗ Provide at least one measurement", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    applicant_id = _resolve_id("applicants", applicant)
    record = update_applicant(_store(), applicant_id, changes, source="cli")
    result = record["bodyComp"]
    typer.secho(
        f"{result['status'].upper()}: {result['message']}", fg=STATUS_COLORS[result["status"]]
    )


@app.command("event")
def event_command(
    title: str = typer.Argument(..., help="Event title"),
    date: str = typer.Argument(..., help="Date (YYYY-MM-DD)"),
    time: Optional[str] = typer.Option(None, "--time", "-t", help="Start time (HH:MM)"),
    category: str = typer.Option(EVENT_CATEGORIES[0], "--category", "-c", help="Event category"),
    applicant: Optional[str] = typer.Option(None, "--applicant", "-a", help="Applicant id prefix"),
    notes: str = typer.Option("", "--notes", help="Free-text notes"),
):
    """Schedule an event, optionally linked to an applicant."""
    data = {"title": title, "date": date, "category": category, "notes": notes}
    if time:
        data["time"] = time
    if applicant:
        data["applicantId"] = _resolve_id("applicants", applicant)

    try:
        event_id = save_event(_store(), data)
    except ValueError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    typer.secho(f"✓ {title} on {date} ({event_id[:8]})", fg=typer.colors.GREEN)


@app.command("events")
def events_command(
    today_only: bool = typer.Option(False, "--today", help="Only today's events"),
):
    """List events in date order."""
    state = _store().get_state()
    events = events_on(state, date_type.today()) if today_only else sorted_events(state)
    if not events:
        typer.echo("No events for today." if today_only else "No events scheduled.")
        return

    for event in events:
        applicant = resolve_applicant(state, event)
        meta = format_event_meta(event, applicant["name"] if applicant else None)
        typer.echo(f"{event['id'][:8]}  {event.get('title', 'Untitled')}  ({meta})")


@app.command("stats")
def stats_command():
    """Show enlistment goal progress and pipeline counts."""
    figures = summary(_store().get_state())
    goal = figures["goal"]

    typer.echo("=" * 80)
    typer.echo(f"Applicants: {figures['applicants']}")
    typer.echo(f"Enlisted:   {goal.enlisted} / {goal.goal:g} ({goal.percent:.0f}%) {goal.label}")
    typer.echo(f"Upcoming:   {figures['upcoming']} event(s) in the next 30 days")
    typer.echo(f"Today:      {figures['today']} event(s)")
    typer.echo("\nBy stage:")
    for stage, count in figures["by_stage"].items():
        typer.echo(f"  {stage:<22} {count}")
    aging = figures["aging"]
    if aging["warning"] or aging["critical"]:
        typer.secho(
            f"\nAging: {aging['warning']} warning, {aging['critical']} critical",
            fg=typer.colors.YELLOW,
        )


@app.command("export")
def export_command(
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write to file instead of stdout"),
    weekly: bool = typer.Option(False, "--weekly", help="Only applicants, events and checklist"),
):
    """Export state as JSON."""
    payload = _store().export_payload(scope="weekly" if weekly else "full")
    if out is None:
        typer.echo(payload)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(payload, encoding="utf-8")
    typer.secho(f"✓ Exported to {out}", fg=typer.colors.GREEN)


@app.command("import")
def import_command(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON export to merge"),
):
    """Merge a JSON export into the store (records matched by id)."""
    try:
        result = _store().import_payload(source.read_text(encoding="utf-8"))
    except ImportPayloadError as e:
        typer.secho(f"✗ Import failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    for collection in result.added:
        typer.echo(
            f"  {collection:<11} +{result.added[collection]} new, "
            f"{result.updated[collection]} updated"
        )
    if result.settings_updated:
        typer.echo("  settings    merged")
    typer.secho(f"✓ Imported {result.total} record(s)", fg=typer.colors.GREEN)


@app.command("configure")
def configure_command(
    settings_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML settings"),
):
    """Apply recruiter settings from a YAML file."""
    try:
        settings = apply_settings(_store(), load_settings_file(settings_file))
    except ValueError as e:
        typer.secho(f"✗ {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    for key, value in settings.items():
        typer.echo(f"  {key:<20} {value}")


@app.command("report")
def report_command(
    applicant: Optional[str] = typer.Argument(None, help="Applicant id prefix (omit for weekly)"),
):
    """Print an applicant report, or the weekly summary when no applicant is given."""
    state = _store().get_state()
    if applicant is None:
        typer.echo(render_weekly_summary(state))
        return

    applicant_id = _resolve_id("applicants", applicant)
    record = next(a for a in state["applicants"] if a["id"] == applicant_id)
    typer.echo(render_applicant_report(record, state))


@app.command("recent")
def recent_command(
    n: int = typer.Option(10, "-n", help="Number of events"),
    applicant: Optional[str] = typer.Option(None, "--applicant", "-a", help="Full applicant id"),
):
    """Show recent pipeline events (requires PIPELINE_EVENTS_FILE)."""
    events = get_recent_events(n, applicant_id=applicant)
    if not events:
        typer.echo("No pipeline events logged.")
        return
    for event in events:
        details = {
            k: v
            for k, v in event.items()
            if k not in ("timestamp", "event_type", "applicant_id", "source")
        }
        typer.echo(
            f"{format_timestamp(event['timestamp'])}  {event['event_type']:<13} "
            f"{str(event['applicant_id'])[:8]}  {details}"
        )


if __name__ == "__main__":
    app()

"""dayplan CLI - Personal daily planner."""

import json
import logging
import sys
from datetime import date

import click
import requests

from .adapters.http_client import HttpPlannerClient
from .adapters.json_file_store import JsonFileStateStore
from .config import load_config
from .core.categories import CATEGORY_KEYS, CategoryState
from .core.summary import DaySummary, month_dates, parse_iso_date, week_dates
from .core.tasks import Task
from .core.timeutil import format_duration_human, format_time_12h
from .errors import PlannerError
from .ports.planner import Planner
from .service import PlannerService

CLIENT_ERRORS = (PlannerError, requests.RequestException)


@click.group()
@click.version_option()
@click.option("--server", envvar="DAYPLAN_SERVER", help="URL of a running dayplan server")
@click.pass_context
def main(ctx, server: str | None):
    """dayplan - Personal daily planner CLI."""
    ctx.ensure_object(dict)
    ctx.obj.setdefault("server", server)


def _planner(ctx: click.Context) -> Planner:
    """Resolve the planner: injected, remote server, or the local state file."""
    obj = ctx.ensure_object(dict)
    if "planner" not in obj:
        config = load_config()
        url = obj.get("server") or config.server_url
        if url:
            obj["planner"] = HttpPlannerClient(url, timeout=config.request_timeout)
        else:
            obj["planner"] = PlannerService(JsonFileStateStore(config.state_path), clock=config.now)
    return obj["planner"]


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _resolve_date(value: str | None) -> str:
    """Validate a yyyy-mm-dd argument, defaulting to today."""
    if not value:
        return load_config().now().date().isoformat()
    return parse_iso_date(value).isoformat()


def _resolve_task_id(planner: Planner, date_iso: str, prefix: str) -> str:
    """Expand a unique id prefix to the full task id."""
    matches = [t.id for t in planner.list_tasks(date_iso) if t.id.startswith(prefix)]
    if not matches:
        raise click.ClickException(f"No task matching '{prefix}' on {date_iso}")
    if len(matches) > 1:
        raise click.ClickException(f"Task id '{prefix}' is ambiguous on {date_iso}")
    return matches[0]


def format_task_line(task: Task) -> str:
    """Single-line task rendering for terminal output."""
    mark = "x" if task.completed else " "
    window = f"{format_time_12h(task.start_time)} - {format_time_12h(task.approx_end_time)}"
    line = f"[{mark}] {task.id[:8]}  {window:19}  {task.description}"

    details = []
    if task.actual_end_time:
        details.append(f"ended {format_time_12h(task.actual_end_time)}")
    if task.duration_seconds is not None:
        details.append(format_duration_human(task.duration_seconds))
    status = task.completion.format()
    if status:
        details.append(status)
    if details:
        line += f"  ({', '.join(details)})"
    return line


def _show_tasks(tasks: list[Task], as_json: bool, empty_msg: str = "No tasks.") -> None:
    """Shared task display logic."""
    if as_json:
        click.echo(json.dumps([t.to_dict() for t in tasks], indent=2))
        return

    if not tasks:
        click.echo(empty_msg)
        return

    for task in tasks:
        click.echo(format_task_line(task))


def _show_categories(categories: CategoryState) -> None:
    for key in CATEGORY_KEYS:
        mark = "x" if getattr(categories, key) else " "
        click.echo(f"[{mark}] {key}")


def _show_summary(days: list[DaySummary]) -> None:
    total = sum(d.total for d in days)
    completed = sum(d.completed for d in days)
    for day in days:
        habits = " ".join(k for k in CATEGORY_KEYS if getattr(day.categories, k))
        tasks = f"{day.completed}/{day.total}" if day.total else "-"
        click.echo(f"{day.date.strftime('%a %b %d')}  {tasks:>5}  {habits}")
    if total:
        click.echo(f"\n{completed}/{total} tasks completed ({completed / total:.0%})")


# ============== Server ==============


@main.command()
@click.option("--host", default=None, help="Bind address (default from config)")
@click.option("--port", type=int, default=None, help="Port (default from config)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def serve(host: str | None, port: int | None, debug: bool):
    """Run the HTTP API server."""
    import uvicorn

    from .api import create_app

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )

    config = load_config()
    service = PlannerService(JsonFileStateStore(config.state_path), clock=config.now)
    app = create_app(service)

    click.echo(f"Serving {config.state_path} on http://{host or config.host}:{port or config.port}")
    uvicorn.run(
        app,
        host=host or config.host,
        port=port or config.port,
        log_level="debug" if debug else "info",
    )


# ============== Tasks ==============


@main.command()
@click.argument("day", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def tasks(ctx, day: str | None, as_json: bool):
    """List tasks for a date (default today)."""
    try:
        date_iso = _resolve_date(day)
        day_tasks = _planner(ctx).list_tasks(date_iso)
    except CLIENT_ERRORS as e:
        _fail(e)

    if not as_json:
        click.echo(f"### {date.fromisoformat(date_iso).strftime('%A, %B %d')}")
    _show_tasks(day_tasks, as_json, "No tasks for this day.")


@main.command("all")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def all_tasks(ctx, as_json: bool):
    """List every date's tasks."""
    try:
        by_date = _planner(ctx).all_tasks()
    except CLIENT_ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(
            json.dumps({d: [t.to_dict() for t in ts] for d, ts in by_date.items()}, indent=2)
        )
        return

    if not by_date:
        click.echo("No tasks.")
        return

    for i, date_iso in enumerate(sorted(by_date)):
        if i:
            click.echo()
        click.echo(f"### {date_iso}")
        _show_tasks(by_date[date_iso], as_json=False)


@main.command()
@click.argument("start")
@click.argument("approx_end")
@click.argument("description", nargs=-1, required=True)
@click.option("--date", "day", help="Date (yyyy-mm-dd, default today)")
@click.pass_context
def add(ctx, start: str, approx_end: str, description: tuple[str, ...], day: str | None):
    """Add a task: START APPROX_END DESCRIPTION..."""
    try:
        date_iso = _resolve_date(day)
        task = _planner(ctx).create_task(
            date_iso,
            {"startTime": start, "approxEndTime": approx_end, "description": " ".join(description)},
        )
    except CLIENT_ERRORS as e:
        _fail(e)
    click.echo(format_task_line(task))


def _patch(ctx: click.Context, day: str | None, task_id: str, fields: dict) -> None:
    """Resolve a task id prefix, apply a patch and print the result."""
    planner = _planner(ctx)
    try:
        date_iso = _resolve_date(day)
        full_id = _resolve_task_id(planner, date_iso, task_id)
        task = planner.patch_task(date_iso, {"id": full_id, **fields})
    except CLIENT_ERRORS as e:
        _fail(e)
    click.echo(format_task_line(task))


@main.command()
@click.argument("task_id")
@click.option("--at", "end_time", help="Actual end time (HH:MM[:SS], default now)")
@click.option("--date", "day", help="Date (yyyy-mm-dd, default today)")
@click.pass_context
def done(ctx, task_id: str, end_time: str | None, day: str | None):
    """Mark a task completed."""
    fields: dict = {"completed": True}
    if end_time:
        fields["actualEndTime"] = end_time
    _patch(ctx, day, task_id, fields)


@main.command()
@click.argument("task_id")
@click.option("--date", "day", help="Date (yyyy-mm-dd, default today)")
@click.pass_context
def undo(ctx, task_id: str, day: str | None):
    """Mark a task incomplete, clearing its actual end time."""
    _patch(ctx, day, task_id, {"completed": False})


@main.command()
@click.argument("task_id")
@click.argument("end_time", required=False)
@click.option("--clear", is_flag=True, help="Clear the actual end time")
@click.option("--date", "day", help="Date (yyyy-mm-dd, default today)")
@click.pass_context
def end(ctx, task_id: str, end_time: str | None, clear: bool, day: str | None):
    """Set a task's actual end time without changing completion."""
    if not end_time and not clear:
        raise click.UsageError("Give an END_TIME or --clear")
    _patch(ctx, day, task_id, {"actualEndTime": None if clear else end_time})


@main.command()
@click.argument("task_id")
@click.option("--start", "start_time", help="New start time")
@click.option("--approx", "approx_end", help="New approximate end time")
@click.option("--description", help="New description")
@click.option("--date", "day", help="Date (yyyy-mm-dd, default today)")
@click.pass_context
def edit(
    ctx,
    task_id: str,
    start_time: str | None,
    approx_end: str | None,
    description: str | None,
    day: str | None,
):
    """Edit a task's times or description."""
    fields = {}
    if start_time is not None:
        fields["startTime"] = start_time
    if approx_end is not None:
        fields["approxEndTime"] = approx_end
    if description is not None:
        fields["description"] = description
    if not fields:
        raise click.UsageError("Nothing to change")
    _patch(ctx, day, task_id, fields)


@main.command()
@click.argument("task_id")
@click.option("--date", "day", help="Date (yyyy-mm-dd, default today)")
@click.pass_context
def rm(ctx, task_id: str, day: str | None):
    """Delete a task."""
    planner = _planner(ctx)
    try:
        date_iso = _resolve_date(day)
        full_id = _resolve_task_id(planner, date_iso, task_id)
        ok = planner.delete_task(date_iso, full_id)
    except CLIENT_ERRORS as e:
        _fail(e)

    if not ok:
        _fail(PlannerError(f"Task {task_id} not found on {date_iso}"))
    click.echo(f"Deleted {full_id[:8]}")


# ============== Habits ==============


@main.command()
@click.argument("day", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def habits(ctx, day: str | None, as_json: bool):
    """Show habit flags for a date (default today)."""
    try:
        categories = _planner(ctx).get_categories(_resolve_date(day))
    except CLIENT_ERRORS as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(categories.to_dict(), indent=2))
    else:
        _show_categories(categories)


@main.command()
@click.argument("key", type=click.Choice(CATEGORY_KEYS))
@click.argument("state", type=click.Choice(["on", "off"]))
@click.option("--date", "day", help="Date (yyyy-mm-dd, default today)")
@click.pass_context
def habit(ctx, key: str, state: str, day: str | None):
    """Turn a habit flag on or off."""
    try:
        _, categories = _planner(ctx).set_category(
            _resolve_date(day), {"key": key, "value": state == "on"}
        )
    except CLIENT_ERRORS as e:
        _fail(e)
    _show_categories(categories)


# ============== Summaries ==============


@main.command()
@click.argument("day", required=False)
@click.pass_context
def week(ctx, day: str | None):
    """Show the Monday-to-Sunday week containing DAY."""
    try:
        days = week_dates(date.fromisoformat(_resolve_date(day)))
        summaries = _planner(ctx).summarize(days[0], days[-1])
    except CLIENT_ERRORS as e:
        _fail(e)
    _show_summary(summaries)


@main.command()
@click.argument("month_str", metavar="YYYY-MM", required=False)
@click.pass_context
def month(ctx, month_str: str | None):
    """Show a month's completion summary."""
    try:
        if month_str:
            first = parse_iso_date(f"{month_str}-01")
        else:
            first = date.fromisoformat(_resolve_date(None))
        days = month_dates(first.year, first.month)
        summaries = _planner(ctx).summarize(days[0], days[-1])
    except CLIENT_ERRORS as e:
        _fail(e)
    _show_summary(summaries)


if __name__ == "__main__":
    main()

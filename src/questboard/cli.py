"""Quest Board CLI - homework and chores board."""

import json
import logging
import sys
import time
import uuid
from datetime import date, datetime

import click

from .adapters.errors import StoreError
from .config import load_config, load_schedule
from .core.evaluator import LabeledTask, Partition
from .core.rules import ContainerLabel, compile_rules
from .core.schedule import Weekday, describe_next_class, next_occurrence
from .core.tasks import MalformedTaskError, TaskType
from .watcher import BoardWatcher
from .workflows import (
    add_task,
    archive_stale,
    complete_task,
    context_for,
    evaluate_board,
    get_clock,
    get_repository,
    reopen_task,
)

BUCKET_TITLES = {
    ContainerLabel.TOMORROW: "Tomorrow",
    ContainerLabel.EXAM: "Exams",
    ContainerLabel.FUTURE: "Future",
    ContainerLabel.ARCHIVE: "Archive",
}


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )


def _parse_date_option(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}")


def format_task_line(entry: LabeledTask, as_of: date) -> str:
    """Format a single labeled task for display."""
    task = entry.task
    parts = []

    days = task.days_until_due(as_of)
    if days is not None:
        if days < 0:
            parts.append(f"OVERDUE by {-days}d")
        elif days == 0:
            parts.append("due TODAY")
        else:
            parts.append(f"due in {days}d")

    if entry.next_class is not None and entry.label is not ContainerLabel.ARCHIVE:
        parts.append(f"next class: {describe_next_class(entry.next_class)}")

    subject = f"[{task.subject}] " if task.subject else ""
    details = f" ({', '.join(parts)})" if parts else ""
    check = "x" if task.completed else " "
    return f"- [{check}] {subject}{task.description or task.id}{details}"


def _partition_json(partition: Partition) -> dict:
    data = partition.to_dict()
    data["tasks"] = [
        {
            "id": e.task.id,
            "description": e.task.description,
            "subject": e.task.subject,
            "type": e.task.type.value,
            "container": e.label.value,
            "due_date": e.task.due_date.isoformat() if e.task.due_date else None,
            "next_class": (
                {
                    "days_until": e.next_class.days_until,
                    "weekday": int(e.next_class.next_weekday),
                    "day_name": e.next_class.day_name,
                }
                if e.next_class and e.next_class.found
                else None
            ),
        }
        for e in partition.entries
    ]
    return data


def _show_board(partition: Partition, title: str, empty_msg: str, as_of: date) -> None:
    sections = [(ContainerLabel.TODAY, title, empty_msg)] + [
        (label, name, "Nothing here.") for label, name in BUCKET_TITLES.items()
    ]
    for i, (label, heading, empty) in enumerate(sections):
        if i:
            click.echo()
        entries = partition.tasks_in(label)
        click.echo(f"### {heading} ({len(entries)})")
        if not entries:
            click.echo(f"  {empty}")
            continue
        for entry in entries:
            click.echo(f"  {format_task_line(entry, as_of)}")

    if partition.skipped:
        click.echo()
        click.echo(f"Skipped {len(partition.skipped)} malformed record(s):", err=True)
        for s in partition.skipped:
            click.echo(f"  #{s.index} ({s.record_id or 'no id'}): {s.reason}", err=True)


@click.group()
@click.version_option(package_name="questboard")
def main():
    """Quest Board - homework and chores, sorted for today."""
    pass


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--at", "at", default=None, help="Evaluate at this time (ISO datetime)")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def board(as_json: bool, at: str | None, debug: bool):
    """Show tasks sorted into Today, Tomorrow, Exams, Future and Archive."""
    _setup_logging(debug)
    config = load_config()
    schedule = load_schedule(config)

    try:
        now = datetime.fromisoformat(at) if at else get_clock(config).now()
    except ValueError:
        click.echo(f"Error: invalid --at value {at!r}", err=True)
        sys.exit(1)

    ctx = context_for(config, schedule, now)
    try:
        partition = evaluate_board(get_repository(config), schedule, ctx)
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(_partition_json(partition), indent=2))
        return

    rules = compile_rules(ctx)
    click.echo(f"Board for {now.strftime('%A, %b %d %H:%M')} ({ctx.time_of_day.value})\n")
    _show_board(partition, rules.title, rules.empty_message, ctx.today)


@main.command("next")
@click.argument("subject")
@click.option("--on", "on", default=None, help="Count from this date (YYYY-MM-DD)")
def next_class(subject: str, on: str | None):
    """When does SUBJECT meet next?"""
    config = load_config()
    schedule = load_schedule(config)
    target = _parse_date_option(on) or get_clock(config).now().date()

    occurrence = next_occurrence(subject, schedule, Weekday.from_date(target))
    click.echo(f"{subject}: {describe_next_class(occurrence)}")
    if not occurrence.found:
        sys.exit(1)


@main.command("schedule")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show_schedule(as_json: bool):
    """Show the weekly subject schedule."""
    schedule = load_schedule(load_config())

    if as_json:
        click.echo(json.dumps(schedule.to_dict(), indent=2))
        return

    for day in Weekday:
        names = [s for s in schedule.subjects() if day in schedule.weekdays_for(s)]
        click.echo(f"{day.day_name:10} {', '.join(names) or '-'}")


@main.command()
@click.argument("description")
@click.option(
    "--type",
    "task_type",
    type=click.Choice([t.value for t in TaskType]),
    default=TaskType.HOMEWORK.value,
    show_default=True,
)
@click.option("--subject", default=None, help="Subject name")
@click.option("--due", default=None, help="Due date (YYYY-MM-DD); homework defaults to the next class")
@click.option("--id", "task_id", default=None, help="Task id (generated when omitted)")
def add(description: str, task_type: str, subject: str | None, due: str | None, task_id: str | None):
    """Add a task."""
    config = load_config()
    schedule = load_schedule(config)
    today = get_clock(config).now().date()

    try:
        record = add_task(
            get_repository(config),
            schedule,
            task_id=task_id or uuid.uuid4().hex[:12],
            description=description,
            task_type=TaskType(task_type),
            subject=subject,
            due_date=_parse_date_option(due),
            added=today,
        )
    except (StoreError, MalformedTaskError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    due_text = f", due {record['dueDate']}" if record["dueDate"] else ""
    click.echo(f"Added {record['id']}{due_text}")


@main.command()
@click.argument("task_id")
def complete(task_id: str):
    """Mark a task as completed."""
    config = load_config()
    today = get_clock(config).now().date()

    try:
        complete_task(get_repository(config), task_id, today)
    except (StoreError, MalformedTaskError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Completed {task_id}")


@main.command()
@click.argument("task_id")
def reopen(task_id: str):
    """Put a completed task back on the board."""
    config = load_config()

    try:
        task = reopen_task(get_repository(config), task_id)
    except (StoreError, MalformedTaskError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Reopened {task.id}")


@main.command("archive-stale")
@click.option("--dry-run", is_flag=True, help="List stale tasks without changing them")
def archive_stale_cmd(dry_run: bool):
    """Complete tasks older than the archive threshold."""
    config = load_config()
    schedule = load_schedule(config)
    ctx = context_for(config, schedule, get_clock(config).now())

    try:
        stale_ids = archive_stale(get_repository(config), ctx, dry_run=dry_run)
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not stale_ids:
        click.echo("No stale tasks.")
        return

    verb = "Would archive" if dry_run else "Archived"
    click.echo(f"{verb} {len(stale_ids)} task(s) older than {config.archive_threshold_days} days:")
    for task_id in stale_ids:
        click.echo(f"  {task_id}")


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def watch(debug: bool):
    """Keep the board up to date, reprinting counts on every refresh."""
    _setup_logging(debug)
    config = load_config()

    def publish(partition: Partition) -> None:
        counts = partition.counts()
        stamp = datetime.now().strftime("%H:%M")
        summary = ", ".join(f"{label.value}: {counts[label.value]}" for label in ContainerLabel)
        click.echo(f"[{stamp}] {summary}")

    try:
        watcher = BoardWatcher(
            repo=get_repository(config),
            schedule=load_schedule(config),
            clock=get_clock(config),
            publish=publish,
            archive_threshold_days=config.archive_threshold_days,
            refresh_minutes=config.refresh_minutes,
        )
        watcher.start()
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Watching for changes every {config.refresh_minutes} min. Press Ctrl+C to stop")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        watcher.stop()
        click.echo("\nWatcher stopped.")


if __name__ == "__main__":
    main()

"""wtdcal CLI - render a public calendar from a weekly journal."""

import json
import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

import click

from .adapters.file_journal import FileJournalSource, JournalReadError
from .config import load_config
from .core.builder import Calendar, filter_calendar, parse_journal
from .core.render import render_calendar
from .core.tags import TAG_RULES
from .ports.journal_source import JournalSource

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 14


def _load_calendar(source: JournalSource) -> Calendar:
    """Read and parse the journal, exiting with an error if it can't be read."""
    try:
        text = source.read()
    except JournalReadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    calendar = parse_journal(text)
    if calendar.skipped:
        logger.info(f"Skipped {len(calendar.skipped)} task(s) outside any day")
    return calendar


@click.group(invoke_without_command=True)
@click.version_option(package_name="wtdcal")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """wtdcal - public calendar view of a weekly journal."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )
    if ctx.invoked_subcommand is None:
        ctx.invoke(render)


@main.command()
@click.option("--input", "-i", "input_path", default=None, help="Journal file, or '-' for stdin")
@click.option("--output", "-o", "output_path", default=None, help="Write HTML here instead of stdout")
@click.option("--days", type=int, default=None, help="Only render this many days")
@click.option(
    "--from",
    "from_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="First day of the window (YYYY-MM-DD, default today)",
)
@click.option("--grid/--no-grid", default=None, help="Include the busy grid")
@click.option("--stylesheet-href", default=None, help="Link this stylesheet instead of embedding one")
@click.option("--title", default=None, help="Document title")
def render(
    input_path: str | None,
    output_path: str | None,
    days: int | None,
    from_date: datetime | None,
    grid: bool | None,
    stylesheet_href: str | None,
    title: str | None,
):
    """Render the public calendar as HTML."""
    config = load_config()
    calendar = _load_calendar(FileJournalSource(input_path or config.input_file))

    window_days = days if days is not None else config.window_days
    if from_date is not None and not window_days:
        window_days = DEFAULT_WINDOW_DAYS
    if window_days and window_days > 0:
        start = from_date.date() if from_date else date.today()
        calendar = filter_calendar(calendar, start, start + timedelta(days=window_days))

    html = render_calendar(
        calendar,
        TAG_RULES,
        title=title or config.title,
        placeholder=config.placeholder,
        stylesheet_href=stylesheet_href or config.stylesheet_href or None,
        show_grid=config.show_grid if grid is None else grid,
        slot_minutes=config.slot_minutes,
    )

    if output_path:
        try:
            Path(output_path).write_text(html, encoding="utf-8")
        except OSError as e:
            click.echo(f"Error: Couldn't write {output_path}: {e}", err=True)
            sys.exit(1)
        click.echo(f"Calendar saved to {output_path}", err=True)
    else:
        click.echo(html, nl=False)


@main.command()
@click.option("--input", "-i", "input_path", default=None, help="Journal file, or '-' for stdin")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def events(input_path: str | None, as_json: bool):
    """List every parsed event, unredacted."""
    config = load_config()
    calendar = _load_calendar(FileJournalSource(input_path or config.input_file))

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "week": w.label,
                        "day": d.label,
                        "date": d.resolved_date.isoformat() if d.resolved_date else None,
                        "description": e.description,
                        "completed": e.completed,
                        "tags": sorted(e.tags),
                        "start": e.time.start.strftime("%H:%M") if e.time else None,
                        "end": e.time.end.strftime("%H:%M") if e.time else None,
                    }
                    for w, d, e in calendar.events()
                ],
                indent=2,
            )
        )
        return

    if not calendar.events():
        click.echo("No events.")
        return

    for week in calendar.weeks:
        click.echo(f"# {week.label}")
        for day in week.days:
            click.echo(f"## {day.label}")
            for event in day.events:
                check = "x" if event.completed else " "
                tags = "".join(f" +{t}" for t in sorted(event.tags))
                click.echo(f"  [{check}] {event.format_time():20} {event.description}{tags}")


@main.command()
def tags():
    """List the registered tags and how they are disclosed."""
    for name, rule in sorted(TAG_RULES.items()):
        visibility = "public" if rule.public else "label"
        click.echo(f"{name:12} {visibility:7} {rule.label or ''}")

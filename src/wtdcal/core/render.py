"""Public calendar rendering - pure HTML generation, no I/O.

Event descriptions are only shown when a tag with a public rule is present.
Registered tags are always shown by name and label; unregistered tags never
appear in the output.
"""

from dataclasses import dataclass, field
from datetime import time
from html import escape

from .builder import Calendar, Day, Week
from .events import Event, format_clock
from .tags import TAG_RULES, TagRule, is_public, registered_tags, rule_for

DEFAULT_TITLE = "Calendar"
DEFAULT_PLACEHOLDER = "busy"
DEFAULT_SLOT_MINUTES = 15

_TAG_COLORS = ["#f4cccc", "#fce5cd", "#fff2cc", "#d9ead3", "#cfe2f3", "#d9d2e9", "#ead1dc"]

_BASE_STYLESHEET = """\
body { font-family: sans-serif; margin: 1em 2em; }
section.week { margin-bottom: 2em; }
ul.events { list-style: none; padding-left: 0; }
li.event { margin: 0.4em 0; padding: 0.2em 0.5em; border-left: 4px solid #999; }
li.event.all-day { border-left-style: dashed; background: #f3f3f3; }
li.event.timed { border-left-style: solid; }
li.event.completed .description, li.event.completed .placeholder { text-decoration: line-through; }
li.event.incomplete { font-weight: normal; }
.time { font-weight: bold; margin-right: 0.5em; }
.placeholder { font-style: italic; color: #666; }
ul.tags { font-size: 0.9em; margin: 0.2em 0; }
table.grid { border-collapse: collapse; margin: 1em 0; }
table.grid th, table.grid td { border: 1px solid #ccc; padding: 0 0.4em; font-size: 0.8em; }
table.grid td.has-task { background: #ddd; vertical-align: top; }
"""


def build_stylesheet(rules: dict[str, TagRule] | None = None) -> str:
    """Stylesheet with the generic event classes plus one class per tag style."""
    rules = TAG_RULES if rules is None else rules
    lines = [_BASE_STYLESHEET.rstrip("\n")]
    styled = sorted({r.css_class for r in rules.values() if r.css_class})
    for i, css_class in enumerate(styled):
        color = _TAG_COLORS[i % len(_TAG_COLORS)]
        lines.append(f".{css_class} {{ background: {color}; }}")
    return "\n".join(lines) + "\n"


@dataclass
class GridCell:
    """One slot of one day in the busy grid."""

    event_index: int | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class WeekGrid:
    """Busy grid for a week: rows are time slots, columns are days."""

    slot_minutes: int
    slots: list[int]  # Slot start, minutes since midnight
    rows: list[list[GridCell]]

    def rowspan(self, row: int, col: int) -> int:
        """Length of the run of the same event starting at (row, col)."""
        index = self.rows[row][col].event_index
        span = 1
        while row + span < len(self.rows) and self.rows[row + span][col].event_index == index:
            span += 1
        return span

    def starts_run(self, row: int, col: int) -> bool:
        index = self.rows[row][col].event_index
        return row == 0 or self.rows[row - 1][col].event_index != index


def build_week_grid(
    week: Week,
    rules: dict[str, TagRule] | None = None,
    slot_minutes: int = DEFAULT_SLOT_MINUTES,
) -> WeekGrid:
    """
    Lay out a week's timed events on a slot grid.

    Rows cover the whole hours holding timed events. Each cell holds the
    overlapping event that ends first, plus the registered tags of every
    event overlapping the slot.
    Pure function - no I/O.
    """
    rules = TAG_RULES if rules is None else rules
    spans = [e.time for d in week.days for e in d.events if e.time is not None]
    if not spans:
        return WeekGrid(slot_minutes=slot_minutes, slots=[], rows=[])

    first = min(s.start_minute for s in spans) // 60 * 60
    last = min(-(-max(s.end_minute for s in spans) // 60) * 60, 24 * 60)
    slots = list(range(first, last, slot_minutes))

    rows = []
    for slot_start in slots:
        slot_end = slot_start + slot_minutes
        row = []
        for day in week.days:
            overlapping = [
                (i, e)
                for i, e in enumerate(day.events)
                if e.time is not None and e.time.overlaps(slot_start, slot_end)
            ]
            if not overlapping:
                row.append(GridCell())
                continue
            first_ending, _ = min(overlapping, key=lambda pair: pair[1].time.end_minute)
            tags = set()
            for _, e in overlapping:
                tags.update(registered_tags(e.tags, rules))
            row.append(GridCell(event_index=first_ending, tags=sorted(tags)))
        rows.append(row)

    return WeekGrid(slot_minutes=slot_minutes, slots=slots, rows=rows)


def _event_classes(event: Event, rules: dict[str, TagRule]) -> str:
    classes = ["event", "all-day" if event.all_day else "timed"]
    classes.append("completed" if event.completed else "incomplete")
    for tag in registered_tags(event.tags, rules):
        css_class = rules[tag].css_class
        if css_class:
            classes.append(css_class)
    return " ".join(classes)


def render_event(
    event: Event,
    anchor: str,
    rules: dict[str, TagRule] | None = None,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> list[str]:
    """Render one event as a list item. The description is redacted unless public."""
    rules = TAG_RULES if rules is None else rules
    lines = [f'<li id="{escape(anchor)}" class="{escape(_event_classes(event, rules))}">']
    lines.append(f'<span class="time">{escape(event.format_time())}</span>')

    if is_public(event.tags, rules):
        if event.description:
            lines.append(f'<span class="description">{escape(event.description)}</span>')
    else:
        lines.append(f'<span class="placeholder">{escape(placeholder)}</span>')

    labelled = [t for t in registered_tags(event.tags, rules) if rules[t].label]
    if labelled:
        lines.append('<ul class="tags">')
        for tag in labelled:
            rule = rule_for(tag, rules)
            css = f' class="{escape(rule.css_class)}"' if rule.css_class else ""
            lines.append(f"<li{css}>Tagged <b>{escape(tag)}:</b> {escape(rule.label)}</li>")
        lines.append("</ul>")

    lines.append("</li>")
    return lines


def render_grid(
    grid: WeekGrid,
    week: Week,
    anchors: dict[tuple[int, int], str],
    rules: dict[str, TagRule] | None = None,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> list[str]:
    """Render a week's busy grid as a table. Cells link to the event entries."""
    rules = TAG_RULES if rules is None else rules
    if not grid.rows:
        return []

    lines = ['<table class="grid">']
    header = "".join(f"<th>{escape(_day_heading(d))}</th>" for d in week.days)
    lines.append(f"<tr><th>Time</th>{header}</tr>")

    for r, slot_start in enumerate(grid.slots):
        slot = time(slot_start // 60, slot_start % 60)
        cells = [f'<td class="slot"><b>{format_clock(slot)}</b></td>']
        for c, cell in enumerate(grid.rows[r]):
            if cell.event_index is None:
                cells.append("<td></td>")
                continue
            if not grid.starts_run(r, c):
                continue
            styles = [rules[t].css_class for t in cell.tags if rules[t].css_class]
            classes = " ".join(["has-task", *styles])
            text = ", ".join(cell.tags) if cell.tags else placeholder
            anchor = anchors[(c, cell.event_index)]
            cells.append(
                f'<td class="{escape(classes)}" rowspan="{grid.rowspan(r, c)}">'
                f'<a href="#{escape(anchor)}">{escape(text)}</a></td>'
            )
        lines.append(f"<tr>{''.join(cells)}</tr>")

    lines.append("</table>")
    return lines


def _day_heading(day: Day) -> str:
    if day.resolved_date is None:
        return day.label
    return f"{day.label} {day.resolved_date.month}/{day.resolved_date.day}/{day.resolved_date:%y}"


def render_calendar(
    calendar: Calendar,
    rules: dict[str, TagRule] | None = None,
    *,
    title: str = DEFAULT_TITLE,
    placeholder: str = DEFAULT_PLACEHOLDER,
    stylesheet_href: str | None = None,
    show_grid: bool = True,
    slot_minutes: int = DEFAULT_SLOT_MINUTES,
) -> str:
    """
    Render the public, redacted view of a calendar as a static HTML document.

    Weeks, days and events appear in source order. Pure function - no I/O.
    """
    rules = TAG_RULES if rules is None else rules

    lines = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="UTF-8">',
        f"<title>{escape(title)}</title>",
    ]
    if stylesheet_href:
        lines.append(f'<link rel="stylesheet" href="{escape(stylesheet_href)}">')
    else:
        lines.append("<style>")
        lines.append(build_stylesheet(rules).rstrip("\n"))
        lines.append("</style>")
    lines.append("</head>")
    lines.append("<body>")
    lines.append(f"<h1>{escape(title)}</h1>")

    if not calendar.weeks:
        lines.append('<p class="empty">No events.</p>')

    counter = 0
    for week in calendar.weeks:
        anchors = {}
        for d, day in enumerate(week.days):
            for e in range(len(day.events)):
                anchors[(d, e)] = f"event-{counter}"
                counter += 1

        lines.append('<section class="week">')
        lines.append(f"<h2>{escape(week.label)}</h2>")
        if show_grid:
            grid = build_week_grid(week, rules, slot_minutes)
            lines.extend(render_grid(grid, week, anchors, rules, placeholder))

        for d, day in enumerate(week.days):
            lines.append('<section class="day">')
            lines.append(f"<h3>{escape(_day_heading(day))}</h3>")
            if day.events:
                lines.append('<ul class="events">')
                for e, event in enumerate(day.events):
                    lines.extend(render_event(event, anchors[(d, e)], rules, placeholder))
                lines.append("</ul>")
            else:
                lines.append('<p class="empty">No events.</p>')
            lines.append("</section>")

        lines.append("</section>")

    lines.append("</body>")
    lines.append("</html>")
    return "\n".join(lines) + "\n"

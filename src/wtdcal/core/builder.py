"""Calendar building - folds classified journal lines into weeks and days."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable

from .events import Event, parse_event
from .lines import (
    Continuation,
    DayHeading,
    Ignored,
    LineKind,
    TaskItem,
    WeekHeading,
    classify_line,
)

logger = logging.getLogger(__name__)

_WEEK_DATE_FORMATS = ("%m/%d/%y", "%Y-%m-%d")
_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


@dataclass
class Day:
    """A day heading and the events listed under it, in source order."""

    label: str
    resolved_date: date | None = None
    events: list[Event] = field(default_factory=list)


@dataclass
class Week:
    """A week heading and its days, in source order."""

    label: str
    start_date: date | None = None
    days: list[Day] = field(default_factory=list)


@dataclass
class Calendar:
    """All weeks in the journal, in source order."""

    weeks: list[Week] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def events(self) -> list[tuple[Week, Day, Event]]:
        """Flatten to (week, day, event) triples in source order."""
        return [(w, d, e) for w in self.weeks for d in w.days for e in d.events]


class BuilderState(Enum):
    """Where the builder is in the week/day structure."""

    NO_WEEK = "no_week"
    IN_WEEK = "in_week"  # Week open, no day yet
    IN_DAY = "in_day"


def parse_week_date(label: str) -> date | None:
    """Find the first date token ('12/27/21' or '2021-12-27') in a week label."""
    for token in label.split():
        for fmt in _WEEK_DATE_FORMATS:
            try:
                return datetime.strptime(token, fmt).date()
            except ValueError:
                continue
    return None


def parse_weekday(label: str) -> int | None:
    """Weekday number (Monday=0) for a day label like 'Monday' or 'tue'."""
    words = label.split()
    if not words:
        return None
    word = words[0].strip(",.:").lower()
    if len(word) < 3:
        return None
    for i, name in enumerate(_WEEKDAYS):
        if word == name or (len(word) == 3 and name.startswith(word)):
            return i
    return None


def resolve_day_date(week_start: date | None, label: str) -> date | None:
    """First date on or after week_start whose weekday matches the day label."""
    weekday = parse_weekday(label)
    if week_start is None or weekday is None:
        return None
    return week_start + timedelta(days=(weekday - week_start.weekday()) % 7)


class CalendarBuilder:
    """
    State machine that accumulates classified lines into a Calendar.

    Tasks outside a day (before any week or day heading) are skipped and
    recorded in Calendar.skipped.
    """

    def __init__(self):
        self.calendar = Calendar()
        self.state = BuilderState.NO_WEEK
        self._last_raw: str | None = None

    @property
    def current_week(self) -> Week | None:
        if self.state is BuilderState.NO_WEEK:
            return None
        return self.calendar.weeks[-1]

    @property
    def current_day(self) -> Day | None:
        if self.state is not BuilderState.IN_DAY:
            return None
        return self.calendar.weeks[-1].days[-1]

    def feed(self, kind: LineKind) -> None:
        """Apply one classified line."""
        match kind:
            case WeekHeading(label=label):
                self.calendar.weeks.append(Week(label=label, start_date=parse_week_date(label)))
                self.state = BuilderState.IN_WEEK
                self._last_raw = None
            case DayHeading(label=label):
                week = self.current_week
                if week is None:
                    logger.info(f"Skipping day heading before any week: {label}")
                    return
                resolved = resolve_day_date(week.start_date, label)
                week.days.append(Day(label=label, resolved_date=resolved))
                self.state = BuilderState.IN_DAY
                self._last_raw = None
            case TaskItem(raw_text=raw, completed=completed):
                day = self.current_day
                if day is None:
                    logger.info(f"Skipping task outside any day: {raw}")
                    self.calendar.skipped.append(raw)
                    return
                day.events.append(parse_event(raw, completed))
                self._last_raw = raw
            case Continuation(text=text):
                day = self.current_day
                if day is None or not day.events or self._last_raw is None:
                    logger.debug(f"Ignoring continuation without a task: {text}")
                    return
                self._last_raw = f"{self._last_raw} {text}"
                day.events[-1] = parse_event(self._last_raw, day.events[-1].completed)
            case Ignored(line=line):
                if line.strip():
                    logger.debug(f"Ignoring line: {line}")

    def feed_line(self, line: str) -> None:
        self.feed(classify_line(line))


def build_calendar(lines: Iterable[str]) -> Calendar:
    """
    Build a Calendar from journal lines.

    Pure function - no I/O.
    """
    builder = CalendarBuilder()
    for line in lines:
        builder.feed_line(line)
    return builder.calendar


def parse_journal(text: str) -> Calendar:
    """Build a Calendar from the full journal text."""
    return build_calendar(text.splitlines())


def filter_calendar(calendar: Calendar, start: date, end: date) -> Calendar:
    """
    Keep only days whose resolved date is within [start, end).

    Days without a resolvable date are dropped, as are weeks left empty.
    Pure function - no I/O.
    """
    weeks = []
    for week in calendar.weeks:
        days = [
            d for d in week.days if d.resolved_date is not None and start <= d.resolved_date < end
        ]
        if days:
            weeks.append(Week(label=week.label, start_date=week.start_date, days=days))
    return Calendar(weeks=weeks, skipped=list(calendar.skipped))

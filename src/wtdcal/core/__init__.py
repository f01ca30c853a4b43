"""Functional core - pure parsing and rendering with no I/O."""

from .tags import TAG_RULES, TagRule, is_public, registered_tags
from .lines import Continuation, DayHeading, Ignored, TaskItem, WeekHeading, classify_line
from .events import Event, TimeSpan, extract_tags, parse_event, parse_time_span
from .builder import (
    BuilderState,
    Calendar,
    CalendarBuilder,
    Day,
    Week,
    build_calendar,
    filter_calendar,
    parse_journal,
)
from .render import build_stylesheet, build_week_grid, render_calendar

__all__ = [
    # Tags
    "TAG_RULES",
    "TagRule",
    "is_public",
    "registered_tags",
    # Lines
    "WeekHeading",
    "DayHeading",
    "TaskItem",
    "Continuation",
    "Ignored",
    "classify_line",
    # Events
    "Event",
    "TimeSpan",
    "extract_tags",
    "parse_event",
    "parse_time_span",
    # Builder
    "BuilderState",
    "Calendar",
    "CalendarBuilder",
    "Day",
    "Week",
    "build_calendar",
    "filter_calendar",
    "parse_journal",
    # Render
    "build_stylesheet",
    "build_week_grid",
    "render_calendar",
]

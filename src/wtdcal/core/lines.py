"""Line classification for the weekly journal format.

Each line of the journal is one of:

    # 12/27/21            week heading
    ## Monday             day heading
    - [ ] Call mom @6PM+30m +self
    - [x] Done already    task item (checked)
          wraps onto here continuation of the previous task
    anything else         ignored
"""

import re
from dataclasses import dataclass

_WEEK_PATTERN = re.compile(r"^#\s+(.*\S)\s*$")
_DAY_PATTERN = re.compile(r"^##\s+(.*\S)\s*$")
_TASK_PATTERN = re.compile(r"^\s*[-*+]\s+\[([ xX])\](.*)$")


@dataclass(frozen=True)
class WeekHeading:
    label: str


@dataclass(frozen=True)
class DayHeading:
    label: str


@dataclass(frozen=True)
class TaskItem:
    raw_text: str
    completed: bool = False


@dataclass(frozen=True)
class Continuation:
    """Indented text extending the previous task item."""

    text: str


@dataclass(frozen=True)
class Ignored:
    line: str = ""


LineKind = WeekHeading | DayHeading | TaskItem | Continuation | Ignored


def classify_line(line: str) -> LineKind:
    """
    Classify a single journal line.

    Pure function - never raises. Unrecognized lines are Ignored.
    """
    line = line.rstrip("\r\n")

    if m := _DAY_PATTERN.match(line):
        return DayHeading(m.group(1))
    if m := _WEEK_PATTERN.match(line):
        return WeekHeading(m.group(1))
    if m := _TASK_PATTERN.match(line):
        return TaskItem(raw_text=m.group(2).strip(), completed=m.group(1) in "xX")
    if line[:1].isspace() and line.strip():
        return Continuation(line.strip())
    return Ignored(line)

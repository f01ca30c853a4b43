"""Pure event parsing - turns a task line into an Event."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

TIME_MARKER = "@"
TAG_MARKER = "+"
DURATION_SEP = "+"
RANGE_SEP = "--"

_TIME_PATTERN = re.compile(r"^(\d{1,2})(?::(\d{2}))?([AaPp][Mm])?$")
_DURATION_PATTERN = re.compile(r"^(?:(\d+)[Hh])?(?:(\d+)[Mm])?$")
# A tag starts a token or follows an opening bracket, and ends the token or
# runs into trailing punctuation: "+busy,", "(+public)". "a+b" and "C++" are text.
_TAG_PATTERN = re.compile(
    rf"(?<![^(\[{{]){re.escape(TAG_MARKER)}([A-Za-z0-9-]+)(?=$|[,.;:!?)\]}}])"
)
_OPENERS = "([{"
_CLOSER_FOR = {"(": ")", "[": "]", "{": "}"}
_TRAILING = set(",.;:!?)]}")

# Bare hours before this are read as afternoon: "@3--4" means 3 PM to 4 PM.
_AFTERNOON_CUTOFF = 6


@dataclass(frozen=True)
class TimeSpan:
    """A wall-clock span within a single day."""

    start: time
    end: time

    @classmethod
    def from_duration(cls, start: time, duration: timedelta) -> "TimeSpan | None":
        """Span of `duration` from `start`, or None if it runs past midnight."""
        start_dt = datetime.combine(date.min, start)
        end_dt = start_dt + duration
        if end_dt.date() != start_dt.date():
            return None
        return cls(start=start, end=end_dt.time())

    @property
    def start_minute(self) -> int:
        """Minutes since midnight at the start."""
        return self.start.hour * 60 + self.start.minute

    @property
    def end_minute(self) -> int:
        return self.end.hour * 60 + self.end.minute

    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    def overlaps(self, start_minute: int, end_minute: int) -> bool:
        """Check if this span overlaps the half-open minute range [start, end)."""
        return self.start_minute < end_minute and start_minute < self.end_minute

    def format(self) -> str:
        return f"{format_clock(self.start)} – {format_clock(self.end)}"


@dataclass(frozen=True)
class Event:
    """A task or event from the journal. Immutable once parsed."""

    description: str
    completed: bool = False
    tags: frozenset[str] = field(default_factory=frozenset)
    time: TimeSpan | None = None

    @property
    def all_day(self) -> bool:
        return self.time is None

    def format_time(self) -> str:
        """Format the event time for display."""
        if self.time is None:
            return "All day"
        return self.time.format()


def format_clock(t: time) -> str:
    """Format a wall-clock time as '9:30 AM'."""
    hour = t.hour % 12 or 12
    suffix = "AM" if t.hour < 12 else "PM"
    return f"{hour}:{t.minute:02d} {suffix}"


def parse_time(s: str) -> time | None:
    """
    Parse a clock time like '10AM', '9:30pm', '14:00' or '3'.

    Returns None if the string is not a valid time.
    """
    m = _TIME_PATTERN.match(s)
    if not m:
        return None

    hour = int(m.group(1))
    minute = int(m.group(2)) if m.group(2) else 0
    suffix = m.group(3)
    if minute > 59:
        return None

    if suffix:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12
        if suffix.upper() == "PM":
            hour += 12
    else:
        if hour > 23:
            return None
        if hour < _AFTERNOON_CUTOFF:
            hour += 12

    return time(hour, minute)


def parse_duration(s: str) -> timedelta | None:
    """Parse a duration like '1h', '30m' or '1h30m'. None if invalid."""
    m = _DURATION_PATTERN.match(s)
    if not m or not (m.group(1) or m.group(2)):
        return None
    hours = int(m.group(1) or 0)
    minutes = int(m.group(2) or 0)
    return timedelta(hours=hours, minutes=minutes)


def is_time_annotation(token: str) -> bool:
    """True if a token has the shape of a time annotation ('@...+...' or '@...--...')."""
    if not token.startswith(TIME_MARKER):
        return False
    body = token[len(TIME_MARKER) :]
    return DURATION_SEP in body or RANGE_SEP in body


def parse_time_span(token: str) -> TimeSpan | None:
    """
    Parse a time annotation token: '@START+DURATION' or '@START--END'.

    Returns None when the token is malformed, runs backwards, or crosses
    midnight.
    """
    if not is_time_annotation(token):
        return None
    body = token[len(TIME_MARKER) :]

    if RANGE_SEP in body:
        start_str, _, end_str = body.partition(RANGE_SEP)
        start = parse_time(start_str)
        end = parse_time(end_str)
        if start is None or end is None or end < start:
            return None
        return TimeSpan(start=start, end=end)

    start_str, _, duration_str = body.partition(DURATION_SEP)
    start = parse_time(start_str)
    duration = parse_duration(duration_str)
    if start is None or duration is None:
        return None
    return TimeSpan.from_duration(start, duration)


def extract_tags(text: str) -> tuple[str, frozenset[str]]:
    """
    Split tag tokens out of text.

    Returns (remaining text with whitespace collapsed, tags). Punctuation
    around a tag is kept: "Sam +busy," leaves "Sam,". Brackets left empty by
    removing tags are dropped, so "house (+public)" leaves "house". Tokens
    starting with the time marker are never touched. Running this again on
    the remaining text finds no further tags.
    """
    tags = set()
    kept = []
    opener = ""  # Opening brackets left behind by a removed tag

    for token in text.split():
        if token.startswith(TIME_MARKER) or not _TAG_PATTERN.search(token):
            if token.startswith(TIME_MARKER) and opener:
                kept.append(opener)
                opener = ""
            kept.append(opener + token)
            opener = ""
            continue

        tags.update(_TAG_PATTERN.findall(token))
        rest = _TAG_PATTERN.sub("", token)

        if opener and rest[:1] == _CLOSER_FOR[opener[-1]]:
            opener = opener[:-1]
            rest = rest[1:]
        if rest in ("", "()", "[]", "{}"):
            continue
        if all(c in _OPENERS for c in rest):
            opener += rest
        elif kept and all(c in _TRAILING for c in rest):
            kept[-1] += rest
        else:
            kept.append(opener + rest)
            opener = ""

    if opener:
        kept.append(opener)
    return " ".join(kept), frozenset(tags)


def parse_event(raw_text: str, completed: bool = False) -> Event:
    """
    Parse a task item's text into an Event.

    Pure function - never raises. The first time-annotation-shaped token is
    the only one considered; if it doesn't parse it stays in the description
    verbatim, as do any later ones.
    """
    tokens = raw_text.split()
    span = None

    for i, token in enumerate(tokens):
        if is_time_annotation(token):
            span = parse_time_span(token)
            if span is not None:
                tokens = tokens[:i] + tokens[i + 1 :]
            break

    description, tags = extract_tags(" ".join(tokens))
    return Event(description=description, completed=completed, tags=tags, time=span)

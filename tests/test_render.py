"""Tests for public calendar rendering."""

from datetime import time
from html.parser import HTMLParser
from itertools import combinations

import pytest

from wtdcal.core.builder import Calendar, Day, Week, parse_journal
from wtdcal.core.events import Event, TimeSpan, parse_event
from wtdcal.core.render import (
    build_stylesheet,
    build_week_grid,
    render_calendar,
    render_event,
)
from wtdcal.core.tags import TAG_RULES, TagRule


class _TagBalanceChecker(HTMLParser):
    """Checks that every non-void element is closed in order."""

    VOID = {"meta", "link", "br"}

    def __init__(self):
        super().__init__()
        self.stack = []
        self.errors = []

    def handle_starttag(self, tag, attrs):
        if tag not in self.VOID:
            self.stack.append(tag)

    def handle_endtag(self, tag):
        if not self.stack or self.stack.pop() != tag:
            self.errors.append(tag)


def _calendar_with(*events: Event) -> Calendar:
    return Calendar(weeks=[Week(label="12/27/21", days=[Day(label="Monday", events=list(events))])])


@pytest.fixture
def journal_calendar():
    return parse_journal(
        "# 12/27/21\n"
        "## Monday\n"
        "- [ ] Some task... @10AM+1h +self\n"
        "- [ ] Etc. @9:30AM+30m +busy +public +join-me\n"
        "## Tuesday\n"
        "- [x] Secret errand +private-thing\n"
    )


class TestRedaction:
    def test_private_description_replaced(self, journal_calendar):
        html = render_calendar(journal_calendar)
        assert "Some task..." not in html
        assert '<span class="placeholder">busy</span>' in html

    def test_public_description_shown(self, journal_calendar):
        html = render_calendar(journal_calendar)
        assert '<span class="description">Etc.</span>' in html

    def test_labels_rendered_for_registered_tags(self, journal_calendar):
        html = render_calendar(journal_calendar)
        assert f"Tagged <b>busy:</b> {TAG_RULES['busy'].label}" in html
        assert "Tagged <b>join-me:</b>" in html
        assert "Tagged <b>self:</b>" in html

    def test_unregistered_tags_never_shown(self, journal_calendar):
        html = render_calendar(journal_calendar)
        assert "private-thing" not in html
        assert "Secret errand" not in html

    def test_bracketed_public_tag(self):
        calendar = parse_journal("# 12/27/21\n## Monday\n- [ ] Open house (+public) +join-me\n")
        html = render_calendar(calendar)
        assert '<span class="description">Open house</span>' in html
        assert "Tagged <b>join-me:</b>" in html

    def test_punctuated_tag_labelled(self):
        calendar = parse_journal("# 12/27/21\n## Monday\n- [ ] Lunch with Sam +busy, then walk\n")
        html = render_calendar(calendar)
        assert "Lunch with Sam" not in html
        assert f"Tagged <b>busy:</b> {TAG_RULES['busy'].label}" in html

    def test_custom_placeholder(self):
        html = render_calendar(_calendar_with(parse_event("Hidden")), placeholder="unavailable")
        assert '<span class="placeholder">unavailable</span>' in html
        assert "Hidden" not in html

    @pytest.mark.parametrize(
        "tags",
        [
            frozenset(combo)
            for n in range(4)
            for combo in combinations(["busy", "rough", "tentative", "join-me", "self", "zzz"], n)
        ],
    )
    def test_no_leak_without_public_tag(self, tags):
        event = Event(description="TOPSECRET", tags=tags, time=TimeSpan(time(9, 0), time(10, 0)))
        assert "TOPSECRET" not in render_calendar(_calendar_with(event))

    def test_custom_rules(self):
        rules = {"open": TagRule(public=True, label="Open to all", css_class="tag-open")}
        event = parse_event("Party +open")
        html = render_calendar(_calendar_with(event), rules)
        assert "Party" in html
        assert "Tagged <b>open:</b> Open to all" in html
        assert ".tag-open {" in html

    def test_description_is_escaped(self):
        event = parse_event("<script>alert(1)</script> & co +public")
        html = render_calendar(_calendar_with(event))
        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt; &amp; co" in html


class TestRenderEvent:
    def test_timed_classes(self):
        lines = render_event(parse_event("x @10AM+1h +busy"), "event-0")
        assert lines[0] == '<li id="event-0" class="event timed incomplete tag-busy">'
        assert '<span class="time">10:00 AM – 11:00 AM</span>' in lines

    def test_all_day_and_completed(self):
        lines = render_event(parse_event("x", completed=True), "event-3")
        assert lines[0] == '<li id="event-3" class="event all-day completed">'
        assert '<span class="time">All day</span>' in lines

    def test_public_tag_without_label_adds_no_tag_list(self):
        lines = render_event(parse_event("x +public"), "event-0")
        assert '<ul class="tags">' not in lines

    def test_empty_public_description_omitted(self):
        lines = render_event(parse_event("+public"), "event-0")
        assert not any("description" in line for line in lines)


class TestDocument:
    def test_well_formed(self, journal_calendar):
        checker = _TagBalanceChecker()
        checker.feed(render_calendar(journal_calendar))
        assert checker.errors == []
        assert checker.stack == []

    def test_no_scripting(self, journal_calendar):
        assert "<script" not in render_calendar(journal_calendar)

    def test_source_order(self, journal_calendar):
        html = render_calendar(journal_calendar, show_grid=False)
        assert html.index("Monday") < html.index("Tuesday")
        assert html.index('id="event-0"') < html.index('id="event-1"') < html.index('id="event-2"')

    def test_embedded_stylesheet(self, journal_calendar):
        html = render_calendar(journal_calendar)
        assert "<style>" in html
        assert "li.event.all-day" in html

    def test_linked_stylesheet(self, journal_calendar):
        html = render_calendar(journal_calendar, stylesheet_href="stylesheet.css")
        assert '<link rel="stylesheet" href="stylesheet.css">' in html
        assert "<style>" not in html

    def test_title(self):
        html = render_calendar(Calendar(), title="Alex's week")
        assert "<title>Alex&#x27;s week</title>" in html
        assert '<p class="empty">No events.</p>' in html

    def test_day_heading_includes_date(self, journal_calendar):
        assert "<h3>Monday 12/27/21</h3>" in render_calendar(journal_calendar)

    def test_empty_day(self):
        calendar = Calendar(weeks=[Week(label="w", days=[Day(label="Friday")])])
        assert '<p class="empty">No events.</p>' in render_calendar(calendar)


class TestStylesheet:
    def test_one_class_per_tag_style(self):
        css = build_stylesheet()
        for rule in TAG_RULES.values():
            if rule.css_class:
                assert f".{rule.css_class} {{" in css

    def test_generic_classes(self):
        css = build_stylesheet()
        for name in ("timed", "all-day", "completed", "incomplete", "placeholder"):
            assert name in css


class TestWeekGrid:
    def test_no_timed_events(self):
        week = Week(label="w", days=[Day(label="Monday", events=[parse_event("x")])])
        grid = build_week_grid(week)
        assert grid.rows == []

    def test_rows_cover_whole_hours(self, journal_calendar):
        grid = build_week_grid(journal_calendar.weeks[0])
        assert grid.slots[0] == 9 * 60
        assert grid.slots[-1] == 10 * 60 + 45
        assert len(grid.slots) == 8

    def test_cells(self, journal_calendar):
        grid = build_week_grid(journal_calendar.weeks[0])
        monday = [row[0] for row in grid.rows]
        tuesday = [row[1] for row in grid.rows]
        assert [c.event_index for c in monday] == [None, None, 1, 1, 0, 0, 0, 0]
        assert all(c.event_index is None for c in tuesday)
        assert monday[2].tags == ["busy", "join-me", "public"]
        assert monday[4].tags == ["self"]

    def test_first_ending_event_wins(self):
        day = Day(
            label="Monday",
            events=[parse_event("long @9AM+2h +busy"), parse_event("short @9:30AM+30m +self")],
        )
        grid = build_week_grid(Week(label="w", days=[day]))
        indexes = [row[0].event_index for row in grid.rows]
        assert indexes == [0, 0, 1, 1, 0, 0, 0, 0]
        assert grid.rows[2][0].tags == ["busy", "self"]

    def test_rowspan(self, journal_calendar):
        grid = build_week_grid(journal_calendar.weeks[0])
        assert grid.starts_run(2, 0) is True
        assert grid.starts_run(3, 0) is False
        assert grid.rowspan(2, 0) == 2
        assert grid.rowspan(4, 0) == 4

    def test_grid_rendered_with_links(self, journal_calendar):
        html = render_calendar(journal_calendar)
        assert '<table class="grid">' in html
        assert '<td class="has-task tag-self" rowspan="4"><a href="#event-0">self</a></td>' in html
        assert "<td class=\"slot\"><b>9:00 AM</b></td>" in html

    def test_grid_can_be_disabled(self, journal_calendar):
        assert '<table class="grid">' not in render_calendar(journal_calendar, show_grid=False)

    def test_grid_never_shows_private_tags(self):
        event = parse_event("x @9+1h +secret-project")
        html = render_calendar(_calendar_with(event))
        assert "secret-project" not in html
        assert '<a href="#event-0">busy</a>' in html

"""Tests that parse the calendar files under testdata."""

from __future__ import annotations

import pathlib

import pytest

from caltools.calendar_parser import CalendarParser
from caltools.parsing.const import ParseMode

TESTDATA = pathlib.Path(__file__).parent / "testdata"
VALID_FILES = sorted((TESTDATA / "valid").glob("*.ics"))


def parse_file(path: pathlib.Path, mode: ParseMode) -> CalendarParser:
    parser = CalendarParser(mode)
    with path.open(newline="") as ics_file:
        parser.parse(ics_file)
    return parser


@pytest.mark.parametrize("path", VALID_FILES, ids=lambda path: path.name)
def test_valid_files(path: pathlib.Path) -> None:
    """Test each valid file parses without errors and re-encodes cleanly."""
    parser = parse_file(path, ParseMode.STRICT)
    assert parser.errors == []

    reparsed = CalendarParser(ParseMode.STRICT)
    assert reparsed.parse(parser.store.ics())
    assert reparsed.store.events == parser.store.events
    assert reparsed.store.todos == parser.store.todos
    assert reparsed.store.journals == parser.store.journals
    assert reparsed.store.freebusy == parser.store.freebusy
    assert reparsed.store.timezones == parser.store.timezones


def test_meeting() -> None:
    parser = parse_file(TESTDATA / "valid" / "meeting.ics", ParseMode.STRICT)
    assert parser.method == "PUBLISH"
    assert len(parser.store.timezones) == 1
    (event,) = parser.store.events
    assert event.dtstart
    assert event.dtstart.tzid == "America/New_York"
    assert [attendee.uri for attendee in event.attendees] == [
        "mailto:employee-A@example.com"
    ]
    assert event.attendees[0].rsvp is True
    assert [value.ics() for value in event.recurrences()] == [
        "19980319T083000",
        "19980326T083000",
        "19980402T083000",
    ]
    assert len(event.alarms) == 1


def test_todo_journal_freebusy() -> None:
    parser = parse_file(TESTDATA / "valid" / "todo.ics", ParseMode.STRICT)
    (todo,) = parser.store.todos
    assert todo.sequence == 2
    assert todo.summary == "Submit Income Taxes"
    (journal,) = parser.store.journals
    assert journal.categories == ["Project Report", "XYZ", "Weekly Meeting"]
    assert journal.description
    assert journal.description.startswith("Project xyz Review Meeting Minutes\n")
    (freebusy,) = parser.store.freebusy
    assert len(freebusy.freebusy) == 3
    assert freebusy.freebusy[1].free_busy_type == "BUSY-TENTATIVE"


def test_malformed_file() -> None:
    """Test a damaged file reports errors and keeps what it can."""
    path = TESTDATA / "invalid" / "malformed.ics"
    parser = parse_file(path, ParseMode.STRICT)
    line_numbers = {error.line_no for error in parser.errors}
    assert {1, 2, 6, 9, 13} <= line_numbers
    assert [event.uid for event in parser.store.events] == [
        "bad-1@example.com",
        "bad-2@example.com",
    ]
    assert all(event.dtstart is None for event in parser.store.events)

    parser = parse_file(path, ParseMode.LOOSE)
    assert {error.line_no for error in parser.errors} == {6, 9, 13}
    assert len(parser.store.events) == 2

"""Tests for Event component."""

from __future__ import annotations

import pytest

from caltools.event import Event
from caltools.exceptions import RecurrenceError
from caltools.types import (
    CalAddress,
    Classification,
    DateValue,
    Duration,
    Period,
    Recur,
    Transparency,
)

SUMMARY = "test summary"


def test_defaults() -> None:
    """Test the uid and dtstamp are populated automatically."""
    event = Event(summary=SUMMARY)
    assert event.uid == "mock-uid-1"
    assert event.dtstamp == DateValue.of_datetime(2024, 1, 1, 12, utc=True)
    assert event.dtstamp.utc
    assert event.sequence == 0
    assert event.is_valid()
    assert Event().uid == "mock-uid-2"


def test_aliased_fields() -> None:
    """Test fields with names that differ from the property name."""
    event = Event(
        classification=Classification.PRIVATE,
        transparency=Transparency.TRANSPARENT,
        attendees=[CalAddress(uri="mailto:a@example.com")],
    )
    ics = event.ics()
    assert "CLASS:PRIVATE\r\n" in ics
    assert "TRANSP:TRANSPARENT\r\n" in ics
    assert "ATTENDEE:mailto:a@example.com\r\n" in ics


def test_end_and_duration() -> None:
    """Test an event may not have both an end and a duration."""
    event = Event(
        dtstart=DateValue.parse("20240101T090000"),
        dtend=DateValue.parse("20240101T100000"),
        duration=Duration(3600),
    )
    assert not event.is_valid()
    assert event.validation_errors() == [
        "DTEND and DURATION must not both be specified"
    ]


def test_recurrences() -> None:
    """Test the recurrence set of a repeating event."""
    event = Event(
        dtstart=DateValue.parse("20240101T090000"),
        rrule=Recur.from_rrule("FREQ=DAILY;COUNT=4"),
        exdate=[DateValue.parse("20240103T090000")],
        rdate=[
            DateValue.parse("20240110T090000"),
            Period.parse("20240120T090000/PT1H"),
        ],
    )
    assert [value.ics() for value in event.recurrences()] == [
        "20240102T090000",
        "20240104T090000",
        "20240110T090000",
        "20240120T090000",
    ]


def test_recurrences_single_instance() -> None:
    """Test an event that does not repeat."""
    assert Event(dtstart=DateValue.parse("20240101")).recurrences() == []


def test_recurrences_without_start() -> None:
    """Test a recurrence rule can't be expanded without a start."""
    event = Event(
        rrule=Recur.from_rrule("FREQ=DAILY"),
        rdate=[DateValue.parse("20240101")],
    )
    with pytest.raises(RecurrenceError):
        event.recurrences()

    event = Event(rdate=[DateValue.parse("20240201"), DateValue.parse("20240101")])
    assert [value.ics() for value in event.recurrences()] == ["20240101", "20240201"]

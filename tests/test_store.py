"""Tests for the calendar store sink."""

from __future__ import annotations

from caltools.event import Event
from caltools.freebusy import FreeBusy
from caltools.journal import Journal
from caltools.parsing.property import Property
from caltools.store import CalendarStore
from caltools.timezone import Timezone
from caltools.todo import Todo
from caltools.types import DateValue


def test_empty_store() -> None:
    """Test encoding a store with no components."""
    store = CalendarStore()
    assert store.ics() == (
        "BEGIN:VCALENDAR\r\n"
        "PRODID:-//example//1.2.3\r\n"
        "VERSION:2.0\r\n"
        "END:VCALENDAR\r\n"
    )


def test_store_components() -> None:
    """Test components are kept in the order received."""
    store = CalendarStore()
    store.store_event(Event(summary="first", dtstart=DateValue.parse("20240102")))
    store.store_event(Event(summary="second", dtstart=DateValue.parse("20240101")))
    store.store_todo(Todo(summary="todo"))
    store.store_journal(Journal(summary="journal"))
    store.store_timezone(Timezone(tz_id="Europe/Berlin"))
    store.store_freebusy(FreeBusy(uid="fb-1"))
    assert [event.summary for event in store.events] == ["first", "second"]
    assert len(store.todos) == 1
    assert len(store.journals) == 1
    assert len(store.timezones) == 1
    assert len(store.freebusy) == 1

    ics = store.ics()
    assert ics.index("BEGIN:VTIMEZONE") < ics.index("BEGIN:VEVENT")
    assert ics.index("SUMMARY:first") < ics.index("SUMMARY:second")
    assert "BEGIN:VTODO\r\n" in ics
    assert "BEGIN:VJOURNAL\r\n" in ics
    assert "BEGIN:VFREEBUSY\r\n" in ics

    store.clear()
    assert not store.events
    assert not store.todos
    assert not store.journals
    assert not store.timezones
    assert not store.freebusy


def test_calendar_properties() -> None:
    """Test the calendar level properties are encoded."""
    store = CalendarStore(
        prodid="-//Test//EN",
        method="PUBLISH",
        calscale="GREGORIAN",
        calendar_address="mailto:team@example.com",
        name="Team, Work",
        extras=[Property("X-WR-CALNAME", "Work")],
    )
    assert store.ics() == (
        "BEGIN:VCALENDAR\r\n"
        "PRODID:-//Test//EN\r\n"
        "VERSION:2.0\r\n"
        "CALSCALE:GREGORIAN\r\n"
        "METHOD:PUBLISH\r\n"
        "NAME:Team\\, Work\r\n"
        "CALENDAR-ADDRESS:mailto:team@example.com\r\n"
        "X-WR-CALNAME:Work\r\n"
        "END:VCALENDAR\r\n"
    )


def test_reset_properties() -> None:
    """Test the calendar level properties are cleared and components kept."""
    store = CalendarStore(
        method="PUBLISH",
        calscale="GREGORIAN",
        name="Work",
        calendar_address="mailto:team@example.com",
        extras=[Property("X-WR-CALNAME", "Work")],
    )
    store.store_event(Event(summary="first"))
    store.reset_properties()
    assert store.method is None
    assert store.calscale is None
    assert store.name is None
    assert store.calendar_address is None
    assert store.extras == []
    assert len(store.events) == 1

"""Tests for building components from content lines."""

from __future__ import annotations

import pytest

from caltools.component import ComponentModel, parse_marker
from caltools.errors import ErrorReporter
from caltools.event import Event
from caltools.exceptions import CalendarParseError
from caltools.parsing.const import ParseMode
from caltools.parsing.lines import unfold
from caltools.parsing.property import Property
from caltools.types import AlarmAction, DateValue, Duration, EventStatus


def build(
    text: str, mode: ParseMode = ParseMode.LOOSE
) -> tuple[Event | None, ErrorReporter]:
    report = ErrorReporter()
    event = Event.from_lines(list(unfold(text)), mode, report)
    assert event is None or isinstance(event, Event)
    return event, report


@pytest.mark.parametrize(
    "text,expected",
    [
        ("BEGIN:VEVENT", ("BEGIN", "VEVENT")),
        ("end:vevent", ("END", "VEVENT")),
        ("BEGIN:VALARM  ", ("BEGIN", "VALARM")),
        ("SUMMARY:BEGIN:VEVENT", None),
        ("BEGIN:", None),
    ],
)
def test_parse_marker(text: str, expected: tuple[str, str] | None) -> None:
    """Test recognizing component boundaries."""
    assert parse_marker(text) == expected


def test_from_lines() -> None:
    """Test decoding the properties of a component."""
    event, report = build(
        "\r\n".join(
            [
                "BEGIN:VEVENT",
                "UID:event-1",
                "DTSTAMP:20240101T120000Z",
                "DTSTART;TZID=America/New_York:20240105T090000",
                "DURATION:PT1H",
                "SUMMARY:Planning\\, Q1",
                "STATUS:confirmed",
                "PRIORITY:1",
                "CATEGORIES:WORK,PLANNING",
                "CATEGORIES:MEETING",
                "END:VEVENT",
            ]
        ),
        ParseMode.STRICT,
    )
    assert not report.errors
    assert event
    assert event.uid == "event-1"
    assert event.dtstamp == DateValue.parse("20240101T120000Z")
    assert event.dtstart
    assert event.dtstart.tzid == "America/New_York"
    assert event.duration == Duration(3600)
    assert event.summary == "Planning, Q1"
    assert event.status == EventStatus.CONFIRMED
    assert event.priority == 1
    assert event.categories == ["WORK", "PLANNING", "MEETING"]


def test_lines_without_markers() -> None:
    """Test the enclosing BEGIN and END lines are optional."""
    event, report = build("UID:event-1\r\nSUMMARY:Lunch\r\n")
    assert not report.errors
    assert event
    assert event.summary == "Lunch"


def test_bad_property_is_omitted() -> None:
    """Test a malformed value is reported and the rest of the component is kept."""
    event, report = build(
        "BEGIN:VEVENT\r\nUID:event-1\r\nDTSTART:2024\r\nSUMMARY:Lunch\r\nEND:VEVENT\r\n"
    )
    assert event
    assert event.dtstart is None
    assert event.summary == "Lunch"
    assert len(report.errors) == 1
    error = report.errors[0]
    assert error.line_no == 3
    assert error.input_data == "DTSTART:2024"
    assert "DTSTART" in error.message


def test_malformed_line_is_omitted() -> None:
    """Test a line that is not a property is reported."""
    event, report = build("BEGIN:VEVENT\r\nNOT A PROPERTY\r\nEND:VEVENT\r\n")
    assert event
    assert [error.line_no for error in report.errors] == [2]


def test_unknown_property() -> None:
    """Test unknown properties are kept in loose mode and reported in strict."""
    text = "BEGIN:VEVENT\r\nUID:1\r\nX-COLOR;X-PARAM=a:red\r\nEND:VEVENT\r\n"
    event, report = build(text, ParseMode.LOOSE)
    assert event
    assert not report.errors
    assert event.extras == [Property.from_ics("X-COLOR;X-PARAM=a:red")]
    assert 'X-COLOR;X-PARAM="a":red\r\n' in event.ics()

    event, report = build(text, ParseMode.STRICT)
    assert event
    assert event.extras == []
    assert [error.line_no for error in report.errors] == [3]


def test_unknown_enum_value() -> None:
    """Test a value outside of an enumeration."""
    text = "BEGIN:VEVENT\r\nSTATUS:POSTPONED\r\nEND:VEVENT\r\n"
    event, report = build(text, ParseMode.LOOSE)
    assert event
    assert event.status is None
    assert event.extras == [Property("STATUS", "POSTPONED")]
    assert not report.errors

    event, report = build(text, ParseMode.STRICT)
    assert event
    assert event.status is None
    assert len(report.errors) == 1


def test_repeated_property() -> None:
    """Test a property that may only appear once."""
    text = "BEGIN:VEVENT\r\nSUMMARY:First\r\nSUMMARY:Second\r\nEND:VEVENT\r\n"
    event, report = build(text, ParseMode.LOOSE)
    assert event
    assert event.summary == "Second"
    assert not report.errors

    event, report = build(text, ParseMode.STRICT)
    assert event
    assert event.summary == "First"
    assert [error.message for error in report.errors] == ["Only one SUMMARY allowed"]


def test_sub_components() -> None:
    """Test nested alarm components are attached to their parent."""
    event, report = build(
        "\r\n".join(
            [
                "BEGIN:VEVENT",
                "UID:1",
                "BEGIN:VALARM",
                "ACTION:DISPLAY",
                "TRIGGER:-PT15M",
                "DESCRIPTION:Reminder",
                "END:VALARM",
                "BEGIN:X-WIDGET",
                "BEGIN:X-WIDGET",
                "END:X-WIDGET",
                "END:X-WIDGET",
                "SUMMARY:After",
                "END:VEVENT",
            ]
        ),
        ParseMode.LOOSE,
    )
    assert not report.errors
    assert event
    assert event.summary == "After"
    assert len(event.alarms) == 1
    alarm = event.alarms[0]
    assert alarm.action == AlarmAction.DISPLAY
    assert alarm.trigger == Duration(-900)
    assert alarm.description == "Reminder"


@pytest.mark.parametrize(
    "mode,error_lines",
    [
        (ParseMode.LOOSE, [5]),
        (ParseMode.STRICT, [5, 3]),
    ],
)
def test_invalid_sub_component_dropped(
    mode: ParseMode, error_lines: list[int]
) -> None:
    """Test a nested alarm missing its trigger is not attached to the event."""
    event, report = build(
        "\r\n".join(
            [
                "BEGIN:VEVENT",
                "UID:1",
                "BEGIN:VALARM",
                "ACTION:DISPLAY",
                "TRIGGER:PT0S",
                "END:VALARM",
                "END:VEVENT",
            ]
        ),
        mode,
    )
    assert event
    assert event.alarms == []
    assert [error.line_no for error in report.errors] == error_lines


def test_attachments() -> None:
    """Test uri and inline attachments keep their parameters."""
    event, report = build(
        "\r\n".join(
            [
                "BEGIN:VEVENT",
                "UID:1",
                "ATTACH:http://example.com/a.pdf",
                "ATTACH;FMTTYPE=text/plain;ENCODING=BASE64;VALUE=BINARY:aGVsbG8=",
                "END:VEVENT",
            ]
        ),
        ParseMode.STRICT,
    )
    assert not report.errors
    assert event
    assert [attach.value for attach in event.attachments] == [
        "http://example.com/a.pdf",
        "aGVsbG8=",
    ]
    assert not event.attachments[0].binary
    inline = event.attachments[1]
    assert inline.binary
    assert inline.fmttype == "text/plain"
    assert inline.encoding == "BASE64"

    ics = event.ics()
    assert "ATTACH:http://example.com/a.pdf\r\n" in ics
    assert (
        'ATTACH;FMTTYPE="text/plain";ENCODING="BASE64";VALUE="BINARY":aGVsbG8=\r\n'
        in ics
    )


def test_attachment_missing_encoding_strict() -> None:
    """Test inline data without an ENCODING is reported in strict mode."""
    event, report = build(
        "BEGIN:VEVENT\r\nUID:1\r\nATTACH;VALUE=BINARY:aGVsbG8=\r\nEND:VEVENT\r\n",
        ParseMode.STRICT,
    )
    assert event
    assert event.attachments == []
    assert [error.line_no for error in report.errors] == [3]


def test_unknown_sub_component_strict() -> None:
    """Test an unknown nested component is reported in strict mode."""
    event, report = build(
        "BEGIN:VEVENT\r\nBEGIN:X-WIDGET\r\nEND:X-WIDGET\r\nEND:VEVENT\r\n",
        ParseMode.STRICT,
    )
    assert event
    assert [error.line_no for error in report.errors] == [2]


def test_validation_error_wrapped() -> None:
    """Test pydantic validation errors are raised as parse errors."""
    with pytest.raises(CalendarParseError, match="EVENT"):
        Event(sequence="not a number")


def test_encode() -> None:
    """Test encoding a component back to ics."""
    event = Event(
        uid="event-1",
        dtstart=DateValue.parse("20240105"),
        summary="Lunch, with team",
        categories=["A", "B"],
    )
    assert event.ics() == "".join(
        [
            "BEGIN:VEVENT\r\n",
            'DTSTAMP;VALUE="DATE-TIME":20240101T120000Z\r\n',
            "UID:event-1\r\n",
            'DTSTART;VALUE="DATE":20240105\r\n',
            "SUMMARY:Lunch\\, with team\r\n",
            "CATEGORIES:A,B\r\n",
            "SEQUENCE:0\r\n",
            "END:VEVENT\r\n",
        ]
    )


def test_encode_parses_back() -> None:
    """Test an encoded component reads back to the same values."""
    event, _ = build(
        "\r\n".join(
            [
                "BEGIN:VEVENT",
                "UID:event-1",
                "DTSTAMP:20240101T120000Z",
                "DTSTART;TZID=Europe/Berlin:20240105T090000",
                "RRULE:FREQ=WEEKLY;COUNT=3;BYDAY=FR",
                "EXDATE:20240112T090000,20240119T090000",
                "ATTENDEE;CN=Jane;ROLE=CHAIR:mailto:jane@example.com",
                "DESCRIPTION:Line one\\nLine two",
                "END:VEVENT",
            ]
        )
    )
    assert event
    parsed, report = build(event.ics(), ParseMode.STRICT)
    assert not report.errors
    assert parsed == event


class Widget(ComponentModel):
    """A component with no required properties."""

    component_name = "X-WIDGET"


def test_empty_component() -> None:
    """Test a component with nothing in it."""
    widget = Widget.from_lines(list(unfold("BEGIN:X-WIDGET\r\nEND:X-WIDGET\r\n")))
    assert widget == Widget()
    assert widget.is_valid()
    assert Widget().ics() == "BEGIN:X-WIDGET\r\nEND:X-WIDGET\r\n"

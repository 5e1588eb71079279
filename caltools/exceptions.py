"""Exceptions raised by caltools."""


class CalendarError(Exception):
    """Base exception for all caltools errors."""


class CalendarParseError(CalendarError):
    """A value or content line does not have the expected shape.

    `message` describes the problem and `detailed_error`, when set, holds the
    offending text.
    """

    def __init__(self, message: str, *, detailed_error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detailed_error = detailed_error


class CalendarDataError(CalendarParseError):
    """A value has the right shape but describes something impossible.

    "20230230" looks like a DATE, but there is no February 30th. A field that
    accepts several value types stops at this error instead of trying the
    next type, since the text clearly was meant as this one.
    """


class RecurrenceError(CalendarError):
    """A recurrence rule could not be evaluated against its anchor."""

"""Library for reporting errors found while parsing a calendar.

Errors found while parsing are not raised to the caller. Each malformed line
is recorded as a `ParseError` that holds the line number and the offending
text, and parsing continues with the next line. Listeners may be registered to
be notified as errors are found:

```python
from caltools.calendar_parser import CalendarParser
from caltools.parsing.const import ParseMode

parser = CalendarParser(ParseMode.STRICT)
parser.add_error_listener(print)
parser.parse(ics)
```
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "ParseError",
    "ParseErrorListener",
    "ErrorReporter",
]

UNKNOWN_INPUT = "[unknown]"


@dataclass(frozen=True)
class ParseError:
    """A structured error found at a specific line of calendar input."""

    line_no: int
    """The 1-based line number where the error was found."""

    message: str
    """A human readable description of the problem."""

    input_data: str = UNKNOWN_INPUT
    """The offending text, when known."""

    def format(self, indent: int = 0) -> str:
        """Return a multi-line description of the error."""
        prefix = " " * indent
        return "\n".join(
            [
                f"{prefix}Error  : {self.message}",
                f"{prefix}Line No: {self.line_no}",
                f"{prefix}Input  : {self.input_data}",
            ]
        )

    def __str__(self) -> str:
        return self.format()


ParseErrorListener = Callable[[ParseError], None]
"""A callback invoked once for every reported error, in line order."""


class ErrorReporter:
    """Accumulates parse errors and notifies listeners."""

    def __init__(self) -> None:
        """Initialize ErrorReporter."""
        self._errors: list[ParseError] = []
        self._listeners: list[ParseErrorListener] = []

    def add_listener(self, listener: ParseErrorListener) -> None:
        """Register a listener that is notified of every new error."""
        self._listeners.append(listener)

    def report(self, error: ParseError) -> None:
        """Record the error and notify all listeners in registration order."""
        _LOGGER.debug("Parse error on line %d: %s", error.line_no, error.message)
        self._errors.append(error)
        for listener in self._listeners:
            listener(error)

    def clear(self) -> None:
        """Discard all previously reported errors."""
        self._errors.clear()

    @property
    def errors(self) -> list[ParseError]:
        """Return all errors reported so far."""
        return list(self._errors)

"""The core, a streaming parser that turns calendar text into components.

The parser walks the unfolded lines of a calendar as a state machine. Lines of
each top level component (VEVENT, VTODO, VJOURNAL, VTIMEZONE, VFREEBUSY) are
buffered until the matching END line, then the component is built and handed
to every registered sink. Problems found along the way are reported as
`ParseError` records rather than raised, so a single bad line never stops the
rest of the calendar from being read.

This is an example of parsing an ics file and printing the events:
```python
from pathlib import Path
from caltools.calendar_parser import CalendarParser
from caltools.parsing.const import ParseMode

parser = CalendarParser(ParseMode.STRICT)
parser.add_error_listener(lambda error: print(error.format(indent=2)))
with Path("example/calendar.ics").open(newline="") as ics_file:
    valid = parser.parse(ics_file)
for event in parser.store.events:
    print(event.summary)
```

You can encode the parsed components back as ics content by calling the
`ics()` method on the `CalendarStore`.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable

from .component import ComponentModel, parse_marker
from .errors import ErrorReporter, ParseError, ParseErrorListener
from .event import Event
from .exceptions import CalendarParseError
from .freebusy import FreeBusy
from .journal import Journal
from .parsing.const import ATTR_BEGIN, ATTR_END, ParseMode
from .parsing.lines import LogicalLine, unfold
from .parsing.property import Property
from .store import CalendarStore, ComponentSink
from .types.data_types import DATA_TYPE
from .timezone import Timezone
from .todo import Todo

_LOGGER = logging.getLogger(__name__)

__all__ = ["CalendarParser"]

VCALENDAR = "VCALENDAR"
COMPONENT_TYPES: dict[str, type[ComponentModel]] = {
    "VEVENT": Event,
    "VTODO": Todo,
    "VJOURNAL": Journal,
    "VTIMEZONE": Timezone,
    "VFREEBUSY": FreeBusy,
}
SINK_METHODS = {
    "VEVENT": "store_event",
    "VTODO": "store_todo",
    "VJOURNAL": "store_journal",
    "VTIMEZONE": "store_timezone",
    "VFREEBUSY": "store_freebusy",
}
ITIP_METHODS = {
    "PUBLISH",
    "REQUEST",
    "REPLY",
    "ADD",
    "CANCEL",
    "REFRESH",
    "COUNTER",
    "DECLINECOUNTER",
}
PROP_VERSION = "VERSION"
PROP_PRODID = "PRODID"
PROP_CALSCALE = "CALSCALE"
PROP_METHOD = "METHOD"
PROP_NAME = "NAME"
PROP_CALENDAR_ADDRESS = "CALENDAR-ADDRESS"
EXTENSION_PREFIX = "X-"


class _State(enum.Enum):
    """The position of the parser in the calendar structure."""

    NONE = "none"
    VCALENDAR = "vcalendar"
    COMPONENT = "component"
    SKIP = "skip"
    DONE = "done"


class CalendarParser:
    """A parser for iCalendar text that delivers components to sinks."""

    def __init__(self, mode: ParseMode = ParseMode.LOOSE) -> None:
        """Initialize CalendarParser with the validation strictness."""
        self._mode = mode
        self._store = CalendarStore()
        self._sinks: list[ComponentSink] = [self._store]
        self._reporter = ErrorReporter()
        self._state = _State.NONE
        self._buffer: list[LogicalLine] = []
        self._component_name = ""
        self._depth = 0
        self._calendar_line: LogicalLine | None = None
        self._last_line_no = 0
        self._version: str | None = None
        self._prodid: str | None = None
        self._method: str | None = None
        self._calscale: str | None = None
        self._name: str | None = None
        self._calendar_address: str | None = None
        self._extras: list[Property] = []

    @property
    def mode(self) -> ParseMode:
        """Return the validation strictness of this parser."""
        return self._mode

    @property
    def store(self) -> CalendarStore:
        """Return the default in-memory sink, which is always registered."""
        return self._store

    @property
    def errors(self) -> list[ParseError]:
        """Return the errors reported by the most recent parse."""
        return self._reporter.errors

    @property
    def version(self) -> str | None:
        """Return the VERSION of the most recently parsed calendar."""
        return self._version

    @property
    def prodid(self) -> str | None:
        """Return the PRODID of the most recently parsed calendar."""
        return self._prodid

    @property
    def method(self) -> str | None:
        """Return the iTIP METHOD of the most recently parsed calendar."""
        return self._method

    @property
    def calscale(self) -> str | None:
        """Return the CALSCALE of the most recently parsed calendar."""
        return self._calscale

    @property
    def name(self) -> str | None:
        """Return the NAME of the most recently parsed calendar."""
        return self._name

    @property
    def calendar_address(self) -> str | None:
        """Return the CALENDAR-ADDRESS of the most recently parsed calendar."""
        return self._calendar_address

    @property
    def extras(self) -> list[Property]:
        """Return the extension properties of the most recently parsed calendar."""
        return list(self._extras)

    def add_sink(self, sink: ComponentSink) -> None:
        """Register an additional sink that receives every valid component."""
        self._sinks.append(sink)

    def add_error_listener(self, listener: ParseErrorListener) -> None:
        """Register a listener that is called for every reported error."""
        self._reporter.add_listener(listener)

    def parse(self, source: str | Iterable[str]) -> bool:
        """Parse calendar text, returning True when no errors were reported.

        The source is either the full text or an iterable of lines such as an
        open file. Components are delivered to the sinks as soon as each one
        is complete.
        """
        self._reset()
        for line in unfold(source, self._mode, self._reporter):
            self._last_line_no = line.line_no
            self._feed(line)
        self._finish()
        return not self._reporter.errors

    def _reset(self) -> None:
        self._reporter.clear()
        self._state = _State.NONE
        self._buffer = []
        self._component_name = ""
        self._depth = 0
        self._calendar_line = None
        self._last_line_no = 0
        self._version = None
        self._prodid = None
        self._method = None
        self._calscale = None
        self._name = None
        self._calendar_address = None
        self._extras = []
        self._store.reset_properties()

    def _error(self, line: LogicalLine, message: str) -> None:
        """Report a structural problem, which only counts in strict mode."""
        if self._mode.strict:
            self._reporter.report(ParseError(line.line_no, message, line.text))
        else:
            _LOGGER.debug("Ignoring line %d: %s", line.line_no, message)

    def _error_at_end(self, message: str) -> None:
        """Report a structural problem found at the end of input."""
        if self._mode.strict:
            self._reporter.report(ParseError(self._last_line_no, message))
        else:
            _LOGGER.debug("Ignoring at end of input: %s", message)

    def _feed(self, line: LogicalLine) -> None:
        marker = parse_marker(line.text)
        if self._state is _State.COMPONENT:
            if marker == (ATTR_END, VCALENDAR):
                self._error(
                    self._buffer[0], f"Missing {ATTR_END}:{self._component_name}"
                )
                self._build_component()
                self._state = _State.DONE
                return
            self._buffer.append(line)
            if marker == (ATTR_END, self._component_name):
                self._build_component()
            return
        if not line.text.strip():
            return
        if self._state is _State.NONE:
            if marker == (ATTR_BEGIN, VCALENDAR):
                _LOGGER.debug("Found %s on line %d", VCALENDAR, line.line_no)
                self._state = _State.VCALENDAR
                self._calendar_line = line
            else:
                self._error(line, "Data found outside VCALENDAR block")
        elif self._state is _State.VCALENDAR:
            if marker is None:
                self._calendar_property(line)
            elif marker[0] == ATTR_BEGIN:
                self._begin_component(line, marker[1])
            elif marker[1] == VCALENDAR:
                self._state = _State.DONE
            else:
                self._error(line, f"Unexpected {ATTR_END}:{marker[1]}")
        elif self._state is _State.SKIP:
            if marker is not None and marker[1] == self._component_name:
                self._depth += 1 if marker[0] == ATTR_BEGIN else -1
                if self._depth == 0:
                    self._state = _State.VCALENDAR
        else:
            self._error(line, "Data found outside VCALENDAR block")

    def _begin_component(self, line: LogicalLine, name: str) -> None:
        self._component_name = name
        if name in COMPONENT_TYPES:
            self._state = _State.COMPONENT
            self._buffer = [line]
            return
        self._error(line, f"Unknown component {name} in VCALENDAR block")
        self._state = _State.SKIP
        self._depth = 1

    def _calendar_property(self, line: LogicalLine) -> None:
        """Record a property of the VCALENDAR itself."""
        try:
            prop = Property.from_ics(line.text, self._mode)
        except CalendarParseError as err:
            self._reporter.report(ParseError(line.line_no, err.message, line.text))
            return
        if prop.name == PROP_VERSION:
            if self._version is not None:
                self._error(line, "Only one VERSION token allowed")
                return
            self._version = prop.value
        elif prop.name == PROP_PRODID:
            if self._prodid is not None:
                self._error(line, "Only one PRODID token allowed")
                return
            self._prodid = prop.value
        elif prop.name == PROP_CALSCALE:
            self._calscale = prop.value
            self._store.calscale = prop.value
        elif prop.name == PROP_METHOD:
            if prop.value.upper() not in ITIP_METHODS and self._mode.strict:
                self._error(line, f"Invalid METHOD '{prop.value}'")
                return
            self._method = prop.value
            self._store.method = prop.value
        elif prop.name == PROP_NAME:
            if self._name is not None:
                self._error(line, "Only one NAME allowed")
                return
            self._name = DATA_TYPE.parse_property_value[str](prop, self._mode)
            self._store.name = self._name
        elif prop.name == PROP_CALENDAR_ADDRESS:
            if self._calendar_address is not None:
                self._error(line, "Only one CALENDAR-ADDRESS allowed")
                return
            self._calendar_address = prop.value
            self._store.calendar_address = prop.value
        elif prop.name.startswith(EXTENSION_PREFIX):
            self._extras.append(prop)
            self._store.extras.append(prop)
        else:
            self._error(line, "Unrecognized data found in VCALENDAR block")

    def _build_component(self) -> None:
        """Build the buffered component and dispatch it to every sink."""
        name = self._component_name
        lines = self._buffer
        self._buffer = []
        self._state = _State.VCALENDAR
        component_type = COMPONENT_TYPES[name]
        component = component_type.from_lines(lines, self._mode, self._reporter)
        if component is None:
            return
        if not component.is_valid():
            errors = ", ".join(component.validation_errors())
            self._error(lines[0], f"Invalid {name} component: {errors}")
            return
        method = SINK_METHODS[name]
        _LOGGER.debug("Dispatching %s from line %d", name, lines[0].line_no)
        for sink in self._sinks:
            getattr(sink, method)(component)

    def _finish(self) -> None:
        """Handle the end of input, reporting anything left incomplete."""
        if self._state is _State.COMPONENT:
            self._error(
                self._buffer[0], f"Missing {ATTR_END}:{self._component_name}"
            )
            self._build_component()
        if self._calendar_line is None:
            self._error_at_end("No VCALENDAR block found")
            return
        if self._state is not _State.DONE:
            self._error_at_end(f"Missing {ATTR_END}:{VCALENDAR}")
        if self._version is None:
            self._error(self._calendar_line, "No VERSION found in VCALENDAR block")
        if self._prodid is None:
            self._error(self._calendar_line, "No PRODID found in VCALENDAR block")

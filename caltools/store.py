"""Library for receiving the components found while parsing a calendar.

A sink is any object that implements the `ComponentSink` protocol. The parser
hands every valid component to each registered sink, in the order the sinks
were registered. The `CalendarStore` is a sink that keeps every component in
memory and can encode them back to a calendar:

```python
from caltools.calendar_parser import CalendarParser

parser = CalendarParser()
parser.parse(ics)
for event in parser.store.events:
    print(event.summary)
print(parser.store.ics())
```
"""

# pylint: disable=unnecessary-lambda

from __future__ import annotations

import logging
from typing import Optional, Protocol

from pydantic import Field

from .component import ComponentModel
from .event import Event
from .freebusy import FreeBusy
from .journal import Journal
from .timezone import Timezone
from .todo import Todo
from .util import prodid_factory

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "CalendarStore",
    "ComponentSink",
]

VERSION = "2.0"


class ComponentSink(Protocol):
    """Receives the components of a calendar as they are parsed."""

    def store_timezone(self, timezone: Timezone) -> None:
        """Receive a parsed VTIMEZONE."""

    def store_event(self, event: Event) -> None:
        """Receive a parsed VEVENT."""

    def store_todo(self, todo: Todo) -> None:
        """Receive a parsed VTODO."""

    def store_journal(self, journal: Journal) -> None:
        """Receive a parsed VJOURNAL."""

    def store_freebusy(self, freebusy: FreeBusy) -> None:
        """Receive a parsed VFREEBUSY."""


class CalendarStore(ComponentModel):
    """An in-memory sink holding every component of a calendar."""

    component_name = "VCALENDAR"

    prodid: str = Field(default_factory=lambda: prodid_factory())
    """The product that created the calendar."""

    version: str = VERSION
    """The iCalendar specification version of the calendar."""

    calscale: Optional[str] = None
    """The calendar scale, which is GREGORIAN when not specified."""

    method: Optional[str] = None
    """The iTIP method associated with the calendar."""

    name: Optional[str] = None
    """Display name of the calendar."""

    calendar_address: Optional[str] = Field(alias="calendar-address", default=None)
    """The calendar user address that owns the calendar."""

    timezones: list[Timezone] = Field(alias="vtimezone", default_factory=list)
    events: list[Event] = Field(alias="vevent", default_factory=list)
    todos: list[Todo] = Field(alias="vtodo", default_factory=list)
    journals: list[Journal] = Field(alias="vjournal", default_factory=list)
    freebusy: list[FreeBusy] = Field(alias="vfreebusy", default_factory=list)

    def store_timezone(self, timezone: Timezone) -> None:
        """Add a time zone to the store."""
        self.timezones.append(timezone)

    def store_event(self, event: Event) -> None:
        """Add an event to the store."""
        self.events.append(event)

    def store_todo(self, todo: Todo) -> None:
        """Add a todo to the store."""
        self.todos.append(todo)

    def store_journal(self, journal: Journal) -> None:
        """Add a journal entry to the store."""
        self.journals.append(journal)

    def store_freebusy(self, freebusy: FreeBusy) -> None:
        """Add a free/busy component to the store."""
        self.freebusy.append(freebusy)

    def reset_properties(self) -> None:
        """Forget the calendar level properties, keeping the components."""
        self.calscale = None
        self.method = None
        self.name = None
        self.calendar_address = None
        self.extras = []

    def clear(self) -> None:
        """Remove all stored components."""
        _LOGGER.debug("Clearing calendar store")
        self.timezones.clear()
        self.events.clear()
        self.todos.clear()
        self.journals.clear()
        self.freebusy.clear()

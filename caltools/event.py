"""The VEVENT calendar component.

A VEVENT describes something that happens on the calendar: a meeting at a
given time, or a whole day such as a birthday. Unless TRANSP says otherwise
it occupies that time in free/busy searches.

The extra start dates of a repeating event come from `Event.recurrences()`,
which expands the RRULE and then applies RDATE and EXDATE.
"""

# pylint: disable=unnecessary-lambda

from __future__ import annotations

import logging
from typing import Optional, Union

from pydantic import Field

from .alarm import Alarm
from .component import ComponentModel, component_recurrences
from .types import (
    Attachment,
    CalAddress,
    Classification,
    DateValue,
    Duration,
    EventStatus,
    Period,
    Recur,
    Transparency,
)
from .util import dtstamp_factory, uid_factory

_LOGGER = logging.getLogger(__name__)

__all__ = ["Event"]


class Event(ComponentModel):
    """A VEVENT, either timed or spanning whole days.

    A missing UID or DTSTAMP is filled in from `uid_factory` and
    `dtstamp_factory`. Both are looked up at call time so tests can patch them.

    Example:
    ```python
    from caltools.event import Event
    from caltools.types import DateValue, Duration

    event = Event(
        dtstart=DateValue.of_datetime(2022, 7, 3, 9, 0, 0),
        duration=Duration.parse("PT1H"),
        summary="Team sync",
    )
    print(event.ics())
    ```
    """

    component_name = "VEVENT"

    dtstamp: DateValue = Field(
        default_factory=lambda: DateValue.from_datetime(dtstamp_factory())
    )
    """When this copy of the event was written out."""

    uid: str = Field(default_factory=lambda: uid_factory())

    dtstart: Optional[DateValue] = None
    """First (or only) start of the event. A date-only value means all day."""

    dtend: Optional[DateValue] = None
    """Exclusive end of the event. Mutually exclusive with `duration`."""

    duration: Optional[Duration] = None

    summary: Optional[str] = None
    """One line title of the event."""

    attachments: list[Attachment] = Field(alias="attach", default_factory=list)
    attendees: list[CalAddress] = Field(alias="attendee", default_factory=list)

    categories: list[str] = Field(default_factory=list)
    """Free form tags, one entry per comma separated value."""

    classification: Optional[Classification] = Field(alias="class", default=None)
    """PUBLIC, PRIVATE or CONFIDENTIAL."""

    comment: list[str] = Field(default_factory=list)

    contacts: list[str] = Field(alias="contact", default_factory=list)

    created: Optional[DateValue] = None

    description: Optional[str] = None
    """Longer text about the event. May span several lines."""

    last_modified: Optional[DateValue] = Field(alias="last-modified", default=None)

    location: Optional[str] = None

    organizer: Optional[CalAddress] = None

    priority: Optional[int] = None
    """0 is undefined, then 1 (highest) through 9 (lowest)."""

    recurrence_id: Optional[DateValue] = Field(alias="recurrence-id", default=None)
    """Identifies which instance of a repeating event this component overrides."""

    related_to: list[str] = Field(alias="related-to", default_factory=list)

    resources: list[str] = Field(default_factory=list)

    rrule: Optional[Recur] = None
    """The repeat rule, expanded from `dtstart` by `recurrences()`."""

    rdate: list[Union[DateValue, Period]] = Field(default_factory=list)
    """Extra start dates added on top of the rule."""

    exdate: list[DateValue] = Field(default_factory=list)
    """Start dates removed from the rule and RDATE results."""

    sequence: int = 0
    """Revision counter, bumped by the organizer on significant changes."""

    status: Optional[EventStatus] = None

    transparency: Optional[Transparency] = Field(alias="transp", default=None)
    """TRANSPARENT events do not block time as busy."""

    url: Optional[str] = None

    alarms: list[Alarm] = Field(alias="valarm", default_factory=list)

    def validation_errors(self) -> list[str]:
        """Return the reasons this event is invalid."""
        errors = []
        if self.dtend is not None and self.duration is not None:
            errors.append("DTEND and DURATION must not both be specified")
        return errors

    def recurrences(self) -> list[DateValue]:
        """Return the additional start dates of a recurring event, in order."""
        return component_recurrences(
            self.dtstart, self.rrule, self.rdate, self.exdate
        )

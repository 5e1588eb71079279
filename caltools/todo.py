"""The VTODO component.

A todo is a unit of work, optionally with a due date and a completion
percentage. It may carry alarms and repeat like an event.
"""

# pylint: disable=unnecessary-lambda

from __future__ import annotations

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
    Period,
    Recur,
    TodoStatus,
)
from .util import dtstamp_factory, uid_factory

__all__ = ["Todo"]


class Todo(ComponentModel):
    """An action item such as "file the expense report"."""

    component_name = "VTODO"

    dtstamp: DateValue = Field(
        default_factory=lambda: DateValue.from_datetime(dtstamp_factory())
    )
    """Specifies the date and time the item was created."""

    uid: str = Field(default_factory=lambda: uid_factory())
    """A globally unique identifier for the item."""

    attachments: list[Attachment] = Field(alias="attach", default_factory=list)
    attendees: list[CalAddress] = Field(alias="attendee", default_factory=list)
    categories: list[str] = Field(default_factory=list)
    classification: Optional[Classification] = Field(alias="class", default=None)
    comment: list[str] = Field(default_factory=list)

    completed: Optional[DateValue] = None
    """The date and time that a to-do was actually completed."""

    contacts: list[str] = Field(alias="contact", default_factory=list)
    created: Optional[DateValue] = None

    description: Optional[str] = None
    """A more complete description of the item than provided by the summary."""

    dtstart: Optional[DateValue] = None
    """The start date of the item."""

    due: Optional[DateValue] = None
    """The date and time that a to-do is expected to be completed."""

    duration: Optional[Duration] = None
    """The duration of the item as an alternative to an explicit due date."""

    last_modified: Optional[DateValue] = Field(alias="last-modified", default=None)
    location: Optional[str] = None
    organizer: Optional[CalAddress] = None

    percent: Optional[int] = Field(alias="percent-complete", default=None)
    """The percentage of completion for the to-do, between 0 and 100."""

    priority: Optional[int] = None
    recurrence_id: Optional[DateValue] = Field(alias="recurrence-id", default=None)
    related_to: list[str] = Field(alias="related-to", default_factory=list)
    resources: list[str] = Field(default_factory=list)

    rrule: Optional[Recur] = None
    rdate: list[Union[DateValue, Period]] = Field(default_factory=list)
    exdate: list[DateValue] = Field(default_factory=list)

    sequence: int = 0
    """The revision sequence number of the item."""

    status: Optional[TodoStatus] = None

    summary: Optional[str] = None
    """A short summary or subject for the item."""

    url: Optional[str] = None

    alarms: list[Alarm] = Field(alias="valarm", default_factory=list)
    """A grouping of reminder alarms for the todo."""

    def validation_errors(self) -> list[str]:
        """Return the reasons this todo is invalid."""
        errors = []
        if not self.summary and not self.description:
            errors.append("SUMMARY or DESCRIPTION is required")
        if self.due is not None and self.duration is not None:
            errors.append("DUE and DURATION must not both be specified")
        if self.percent is not None and not 0 <= self.percent <= 100:
            errors.append("PERCENT-COMPLETE must be between 0 and 100")
        return errors

    def recurrences(self) -> list[DateValue]:
        """Return the additional start dates of a recurring todo, in order."""
        return component_recurrences(
            self.dtstart, self.rrule, self.rdate, self.exdate
        )

"""The VJOURNAL component."""

# pylint: disable=unnecessary-lambda

from __future__ import annotations

import logging
from typing import Optional, Union

from pydantic import Field

from .component import ComponentModel, component_recurrences
from .types import (
    Attachment,
    CalAddress,
    Classification,
    DateValue,
    JournalStatus,
    Period,
    Recur,
)
from .util import dtstamp_factory, uid_factory

_LOGGER = logging.getLogger(__name__)

__all__ = ["Journal"]


class Journal(ComponentModel):
    """Notes attached to a calendar date, such as meeting minutes.

    Unlike an event a journal entry takes no time on the calendar, and it has
    no required properties beyond the generated UID and DTSTAMP.
    """

    component_name = "VJOURNAL"

    dtstamp: DateValue = Field(
        default_factory=lambda: DateValue.from_datetime(dtstamp_factory())
    )
    uid: str = Field(default_factory=lambda: uid_factory())
    attachments: list[Attachment] = Field(alias="attach", default_factory=list)
    attendees: list[CalAddress] = Field(alias="attendee", default_factory=list)
    categories: list[str] = Field(default_factory=list)
    classification: Optional[Classification] = Field(alias="class", default=None)
    comment: list[str] = Field(default_factory=list)
    contacts: list[str] = Field(alias="contact", default_factory=list)
    created: Optional[DateValue] = None
    description: Optional[str] = None

    dtstart: Optional[DateValue] = None
    """The date the entry is filed under."""

    last_modified: Optional[DateValue] = Field(alias="last-modified", default=None)
    organizer: Optional[CalAddress] = None
    recurrence_id: Optional[DateValue] = Field(alias="recurrence-id", default=None)
    related_to: list[str] = Field(alias="related-to", default_factory=list)
    rrule: Optional[Recur] = None
    rdate: list[Union[DateValue, Period]] = Field(default_factory=list)
    exdate: list[DateValue] = Field(default_factory=list)
    sequence: int = 0
    status: Optional[JournalStatus] = None
    summary: Optional[str] = None
    url: Optional[str] = None

    def recurrences(self) -> list[DateValue]:
        """Return the additional start dates of a recurring entry, in order."""
        return component_recurrences(
            self.dtstart, self.rrule, self.rdate, self.exdate
        )

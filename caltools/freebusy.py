"""The VFREEBUSY component."""

# pylint: disable=unnecessary-lambda

from __future__ import annotations

import logging
from typing import Optional

from pydantic import Field

from .component import ComponentModel
from .types import CalAddress, DateValue, Period
from .util import dtstamp_factory, uid_factory

_LOGGER = logging.getLogger(__name__)

__all__ = ["FreeBusy"]


class FreeBusy(ComponentModel):
    """A free/busy request, reply or published busy time list."""

    component_name = "VFREEBUSY"

    dtstamp: DateValue = Field(
        default_factory=lambda: DateValue.from_datetime(dtstamp_factory())
    )
    uid: str = Field(default_factory=lambda: uid_factory())
    attendees: list[CalAddress] = Field(alias="attendee", default_factory=list)
    comment: list[str] = Field(default_factory=list)
    contacts: list[str] = Field(alias="contact", default_factory=list)

    dtstart: Optional[DateValue] = None
    """Start of the window the busy times were collected for."""

    dtend: Optional[DateValue] = None

    freebusy: list[Period] = Field(default_factory=list)
    """Busy (or free) intervals, typed by each period's FBTYPE."""

    organizer: Optional[CalAddress] = None
    url: Optional[str] = None

    def validation_errors(self) -> list[str]:
        """Return the reasons this component is invalid."""
        errors = []
        if not self.uid:
            errors.append("UID is required")
        if self.dtstart and self.dtend and self.dtend < self.dtstart:
            errors.append("DTEND must not be before DTSTART")
        return errors

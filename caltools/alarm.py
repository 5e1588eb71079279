"""The VALARM sub-component of events and todos."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import Field

from .component import ComponentModel
from .types import AlarmAction, Attachment, CalAddress, DateValue, Duration

__all__ = ["Alarm"]


class Alarm(ComponentModel):
    """A reminder nested inside a VEVENT or VTODO.

    Which of the optional properties matter depends on the ACTION: DISPLAY
    shows the description, EMAIL sends the summary and description to the
    attendees, AUDIO plays a sound.
    """

    component_name = "VALARM"

    action: Optional[AlarmAction] = None

    trigger: Optional[Union[DateValue, Duration]] = None
    """An offset from the parent's start (or end), or an absolute UTC time."""

    # DURATION and REPEAT only make sense as a pair
    duration: Optional[Duration] = None
    repeat: Optional[int] = None

    description: Optional[str] = None
    summary: Optional[str] = None
    attendees: list[CalAddress] = Field(alias="attendee", default_factory=list)
    attachments: list[Attachment] = Field(alias="attach", default_factory=list)
    """Sound to play for AUDIO, or documents sent with an EMAIL alarm."""

    def validation_errors(self) -> list[str]:
        """Return the reasons this alarm is incomplete."""
        errors = []
        if self.action is None:
            errors.append("ACTION is required")
        if self.trigger is None:
            errors.append("TRIGGER is required")
        if (self.duration is None) != (self.repeat is None):
            errors.append("DURATION and REPEAT must be specified together")
        return errors

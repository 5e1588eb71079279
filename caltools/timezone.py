"""The VTIMEZONE component and its STANDARD and DAYLIGHT observances.

The time zone component is stored as it appears in the calendar: the TZID and
its STANDARD and DAYLIGHT observances with their offsets. Historical offsets
are not resolved against a time zone database.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from pydantic import Field

from .component import ComponentModel, component_recurrences
from .types import DateValue, Period, Recur, UtcOffset

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "Observance",
    "Timezone",
]


class Observance(ComponentModel):
    """One STANDARD or DAYLIGHT block of a time zone.

    The same model is used for both STANDARD and DAYLIGHT sub-components, and
    the name is taken from the field that holds it when encoding.
    """

    dtstart: Optional[DateValue] = None
    """The first onset of the observance."""

    tz_offset_to: Optional[UtcOffset] = Field(alias="tzoffsetto", default=None)
    """Offset from UTC while this observance is in effect."""

    tz_offset_from: Optional[UtcOffset] = Field(alias="tzoffsetfrom", default=None)
    """Offset in effect just before each onset. DTSTART is local to this offset."""

    rrule: Optional[Recur] = None
    """Yearly rule for later onsets, e.g. the second Sunday in March."""

    rdate: list[Union[DateValue, Period]] = Field(default_factory=list)

    tz_name: list[str] = Field(alias="tzname", default_factory=list)
    """Abbreviations such as EST or CEST."""

    comment: list[str] = Field(default_factory=list)

    def validation_errors(self) -> list[str]:
        """Return the reasons this observance is incomplete."""
        errors = []
        if self.dtstart is None:
            errors.append("DTSTART is required")
        if self.tz_offset_to is None:
            errors.append("TZOFFSETTO is required")
        if self.tz_offset_from is None:
            errors.append("TZOFFSETFROM is required")
        return errors

    def recurrences(self) -> list[DateValue]:
        """Return the onsets of this observance after the first."""
        return component_recurrences(self.dtstart, self.rrule, self.rdate, [])


class Timezone(ComponentModel):
    """A time zone definition referenced by TZID from other components.

    The STANDARD and DAYLIGHT sub-components describe the offsets in effect,
    though only the TZID is needed for components to refer to the time zone.
    """

    component_name = "VTIMEZONE"

    tz_id: Optional[str] = Field(alias="tzid", default=None)
    """The name other components use in their TZID parameter."""

    standard: list[Observance] = Field(default_factory=list)
    daylight: list[Observance] = Field(default_factory=list)
    tz_url: Optional[str] = Field(alias="tzurl", default=None)
    last_modified: Optional[DateValue] = Field(alias="last-modified", default=None)

    def validation_errors(self) -> list[str]:
        """Return the reasons this time zone is invalid."""
        errors = []
        if not self.tz_id:
            errors.append("TZID is required")
        return errors

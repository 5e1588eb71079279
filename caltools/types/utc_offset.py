"""UTC-OFFSET values used by TZOFFSETFROM and TZOFFSETTO."""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass

from caltools.exceptions import CalendarDataError, CalendarParseError
from caltools.parsing.const import ParseMode
from caltools.parsing.property import Property

from .data_types import DATA_TYPE

UTC_OFFSET_REGEX = re.compile(r"^([-+]?)([0-9]{2})([0-9]{2})([0-9]{2})?$")


@DATA_TYPE.register("UTC-OFFSET")
@dataclass(frozen=True)
class UtcOffset:
    """Signed difference between local time and UTC, e.g. `-0500`."""

    offset: datetime.timedelta

    @classmethod
    def parse(cls, value: str) -> UtcOffset:
        """Parse `[+-]HHMM[SS]`."""
        if not (match := UTC_OFFSET_REGEX.fullmatch(value.strip())):
            raise CalendarParseError(
                f"Expected value to match UTC-OFFSET pattern: {value}"
            )
        sign, hours, minutes, seconds = match.groups()
        if int(hours) > 23 or int(minutes) > 59 or int(seconds or 0) > 59:
            raise CalendarDataError(f"UTC-OFFSET out of range: {value}")
        result = datetime.timedelta(
            hours=int(hours),
            minutes=int(minutes),
            seconds=int(seconds or 0),
        )
        if sign == "-":
            result = -result
        return UtcOffset(result)

    @classmethod
    def __parse_property_value__(cls, prop: Property, mode: ParseMode) -> UtcOffset:
        return cls.parse(prop.value)

    @classmethod
    def __encode_property_value__(cls, value: UtcOffset) -> str:
        duration = value.offset
        parts = []
        if duration < datetime.timedelta(days=0):
            parts.append("-")
            duration = -duration
        else:
            parts.append("+")
        seconds = int(duration.total_seconds())
        hours, seconds = divmod(seconds, 3600)
        minutes, seconds = divmod(seconds, 60)
        parts.append(f"{hours:02}{minutes:02}")
        if seconds:
            parts.append(f"{seconds:02}")
        return "".join(parts)

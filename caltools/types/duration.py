"""DURATION values such as `PT15M` or `-P1W`."""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass

from caltools.exceptions import CalendarParseError
from caltools.parsing.const import ParseMode
from caltools.parsing.property import Property

from .data_types import DATA_TYPE

_LOGGER = logging.getLogger(__name__)

__all__ = ["Duration", "parse_duration"]

_DIGITS = "0123456789"
_UNIT_SECONDS = {
    "W": 7 * 24 * 60 * 60,
    "D": 24 * 60 * 60,
    "H": 60 * 60,
    "M": 60,
    "S": 1,
}
_TIME_SEPARATOR = "T"
_PREFIX = "P"


def parse_duration(text: str) -> int:
    """Parse an rfc5545 DURATION into a signed number of seconds.

    Each run of digits must be terminated by a unit letter. A duration with no
    units or a total length of zero is rejected.
    """
    value = text.strip()
    sign = 1
    pos = 0
    if value[:1] in ("+", "-"):
        sign = -1 if value[0] == "-" else 1
        pos = 1
    if value[pos : pos + 1] != _PREFIX:
        raise CalendarParseError(
            f"Expected duration to start with '{_PREFIX}'", detailed_error=text
        )
    total = 0
    digits = ""
    for char in value[pos + 1 :]:
        if char in _DIGITS:
            digits += char
        elif char == _TIME_SEPARATOR:
            if digits:
                raise CalendarParseError(
                    f"Unexpected '{_TIME_SEPARATOR}' after digits '{digits}'",
                    detailed_error=text,
                )
        elif (multiplier := _UNIT_SECONDS.get(char)) is not None:
            if not digits:
                raise CalendarParseError(
                    f"Missing number before unit '{char}'", detailed_error=text
                )
            total += int(digits) * multiplier
            digits = ""
        else:
            raise CalendarParseError(
                f"Invalid character in duration: '{char}'", detailed_error=text
            )
    if digits:
        raise CalendarParseError(
            f"Duration has trailing digits without a unit: '{digits}'",
            detailed_error=text,
        )
    if total == 0:
        raise CalendarParseError("Duration must not be zero", detailed_error=text)
    return sign * total


@DATA_TYPE.register("DURATION")
@dataclass(frozen=True)
class Duration:
    """A signed length of time measured in seconds."""

    seconds: int

    @classmethod
    def parse(cls, text: str) -> Duration:
        """Parse an rfc5545 DURATION string."""
        return cls(parse_duration(text))

    def as_timedelta(self) -> datetime.timedelta:
        """Return the duration as a python timedelta."""
        return datetime.timedelta(seconds=self.seconds)

    def ics(self) -> str:
        """Serialize as an rfc5545 DURATION value."""
        parts = []
        seconds = self.seconds
        if seconds < 0:
            parts.append("-")
            seconds = -seconds
        parts.append(_PREFIX)
        if seconds and seconds % _UNIT_SECONDS["W"] == 0:
            parts.append(f"{seconds // _UNIT_SECONDS['W']}W")
            return "".join(parts)
        days, seconds = divmod(seconds, _UNIT_SECONDS["D"])
        if days:
            parts.append(f"{days}D")
        if seconds:
            parts.append(_TIME_SEPARATOR)
            hours, seconds = divmod(seconds, _UNIT_SECONDS["H"])
            minutes, seconds = divmod(seconds, _UNIT_SECONDS["M"])
            if hours:
                parts.append(f"{hours}H")
            if minutes:
                parts.append(f"{minutes}M")
            if seconds:
                parts.append(f"{seconds}S")
        return "".join(parts)

    @classmethod
    def __parse_property_value__(cls, prop: Property, mode: ParseMode) -> Duration:
        """Parse a rfc5545 property into a Duration."""
        return cls.parse(prop.value)

    @classmethod
    def __encode_property_value__(cls, value: Duration) -> str:
        return value.ics()

    def __str__(self) -> str:
        return self.ics()

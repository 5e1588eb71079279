"""The RECUR value type behind RRULE properties.

This module only turns rule strings into a `Recur` model and back again.
Expanding a rule into dates lives in `caltools.iter`:

```python
from caltools.iter import expand
from caltools.types.date import DateValue
from caltools.types.recur import Recur

rule = Recur.from_rrule("FREQ=WEEKLY;COUNT=3")
print(expand(rule, DateValue.of_datetime(2022, 8, 29, 9, 0, 0)))
```

which prints the two starts that follow the anchor:
```
[DateValue('20220905T090000', tzid=None), DateValue('20220912T090000', tzid=None)]
```
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from caltools.exceptions import CalendarDataError, CalendarParseError
from caltools.parsing.const import ParseMode
from caltools.parsing.property import Property

from .data_types import DATA_TYPE
from .date import DateValue

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "Frequency",
    "Recur",
    "Weekday",
    "WeekdayValue",
]


class Weekday(str, enum.Enum):
    """Two letter day codes used by BYDAY and WKST."""

    SUNDAY = "SU"
    MONDAY = "MO"
    TUESDAY = "TU"
    WEDNESDAY = "WE"
    THURSDAY = "TH"
    FRIDAY = "FR"
    SATURDAY = "SA"

    @property
    def python_weekday(self) -> int:
        """Return the day number as used by `datetime.date.weekday()`."""
        return _PYTHON_WEEKDAY[self]

    def __str__(self) -> str:
        return self.value


_PYTHON_WEEKDAY = {
    Weekday.MONDAY: 0,
    Weekday.TUESDAY: 1,
    Weekday.WEDNESDAY: 2,
    Weekday.THURSDAY: 3,
    Weekday.FRIDAY: 4,
    Weekday.SATURDAY: 5,
    Weekday.SUNDAY: 6,
}


@dataclass
class WeekdayValue:
    """One BYDAY entry such as `MO`, `2TU` or `-1FR`."""

    weekday: Weekday

    occurrence: Optional[int] = None
    """Which match within the month or year, counting from the end when negative."""

    def __str__(self) -> str:
        return f"{self.occurrence or ''}{self.weekday}"


class Frequency(str, enum.Enum):
    """The FREQ of a rule, i.e. the size of each period it steps through."""

    SECONDLY = "SECONDLY"
    MINUTELY = "MINUTELY"
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


WEEKDAY_REGEX = re.compile(r"([-+]?[0-9]{1,2})?([A-Z]{2})")
MAX_WEEKDAY_OCCURRENCE = 53

# Allowed (minimum, maximum, allow negative) for the numeric BY* rule parts
_INT_LIST_RANGES: dict[str, tuple[int, int, bool]] = {
    "BYSECOND": (0, 59, False),
    "BYMINUTE": (0, 59, False),
    "BYHOUR": (0, 23, False),
    "BYMONTHDAY": (1, 31, True),
    "BYYEARDAY": (1, 366, True),
    "BYMONTH": (1, 12, False),
    "BYSETPOS": (1, 366, True),
}
_INT_LIST_FIELDS = {
    "BYSECOND": "by_second",
    "BYMINUTE": "by_minute",
    "BYHOUR": "by_hour",
    "BYMONTHDAY": "by_month_day",
    "BYYEARDAY": "by_year_day",
    "BYMONTH": "by_month",
    "BYSETPOS": "by_setpos",
}
# Rule parts this library recognizes but does not evaluate
_UNSUPPORTED_PARTS = {"BYWEEKNO"}


def _parse_int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as err:
        raise CalendarParseError(
            f"Expected integer value for {key} in RRULE: '{value}'"
        ) from err


def _parse_int_list(key: str, value: str) -> list[int]:
    minimum, maximum, allow_negative = _INT_LIST_RANGES[key]
    result = []
    for item in value.split(","):
        number = _parse_int(key, item.strip())
        magnitude = abs(number) if allow_negative else number
        if not minimum <= magnitude <= maximum:
            raise CalendarDataError(
                f"Value {number} out of range for {key} in RRULE", detailed_error=value
            )
        result.append(number)
    return result


def _parse_weekdays(value: str) -> list[WeekdayValue]:
    result = []
    for item in value.split(","):
        if not (match := WEEKDAY_REGEX.fullmatch(item.strip().upper())):
            raise CalendarParseError(
                f"Expected value to match BYDAY pattern: '{item}'", detailed_error=value
            )
        occurrence, weekday = match.groups()
        try:
            weekday_value = Weekday(weekday)
        except ValueError as err:
            raise CalendarParseError(
                f"Unknown weekday in BYDAY: '{weekday}'", detailed_error=value
            ) from err
        ordinal: int | None = None
        if occurrence:
            ordinal = int(occurrence)
            if ordinal == 0 or abs(ordinal) > MAX_WEEKDAY_OCCURRENCE:
                raise CalendarDataError(
                    f"Invalid BYDAY ordinal {ordinal} in RRULE", detailed_error=value
                )
        result.append(WeekdayValue(weekday_value, ordinal))
    return result


@DATA_TYPE.register("RECUR")
class Recur(BaseModel):
    """A parsed RRULE.

    Each BY* list either adds candidates to a period or filters them out,
    depending on how it relates to `freq`.
    """

    freq: Frequency

    until: Optional[DateValue] = None
    """Last allowed start, inclusive."""

    count: Optional[int] = None

    interval: int = 1

    by_second: list[int] = Field(alias="bysecond", default_factory=list)
    """Seconds within a minute between 0 and 59."""

    by_minute: list[int] = Field(alias="byminute", default_factory=list)
    """Minutes within an hour between 0 and 59."""

    by_hour: list[int] = Field(alias="byhour", default_factory=list)
    """Hours of the day between 0 and 23."""

    by_weekday: list[WeekdayValue] = Field(alias="byday", default_factory=list)
    """Days of the week, with an optional nth occurrence."""

    by_month_day: list[int] = Field(alias="bymonthday", default_factory=list)
    """Days of the month between 1 to 31, negative values count from the end."""

    by_year_day: list[int] = Field(alias="byyearday", default_factory=list)
    """Days of the year between 1 to 366, negative values count from the end."""

    by_month: list[int] = Field(alias="bymonth", default_factory=list)

    by_setpos: list[int] = Field(alias="bysetpos", default_factory=list)
    """Positions to keep from the sorted candidates of each period."""

    wkst: Optional[Weekday] = None
    """The day on which the work week starts, used for weekly expansion."""

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    def as_rrule_str(self) -> str:
        """Regenerate the rule text from the fields."""
        result = [f"FREQ={self.freq.value}"]
        if self.count is not None:
            result.append(f"COUNT={self.count}")
        if self.interval > 1:
            result.append(f"INTERVAL={self.interval}")
        if self.until is not None:
            result.append(f"UNTIL={self.until.ics()}")
        for key, values in (
            ("BYSECOND", self.by_second),
            ("BYMINUTE", self.by_minute),
            ("BYHOUR", self.by_hour),
            ("BYMONTHDAY", self.by_month_day),
            ("BYYEARDAY", self.by_year_day),
            ("BYDAY", self.by_weekday),
            ("BYMONTH", self.by_month),
            ("BYSETPOS", self.by_setpos),
        ):
            if values:
                result.append(f"{key}={','.join(str(value) for value in values)}")
        if self.wkst is not None:
            result.append(f"WKST={self.wkst.value}")
        return ";".join(result)

    @classmethod
    def from_rrule(cls, rrule_str: str, mode: ParseMode = ParseMode.LOOSE) -> Recur:
        """Create a Recur object from an RRULE string.

        An input rule like 'FREQ=YEARLY;BYMONTH=4' is parsed into the model
        fields. Malformed parts raise a CalendarParseError and well formed but
        invalid values, such as an out of range month, raise CalendarDataError.
        """
        result: dict[str, Any] = {}
        seen: set[str] = set()
        for part in rrule_str.split(";"):
            if not part.strip():
                continue
            if "=" not in part:
                raise CalendarParseError(
                    f"Recurrence rule had unexpected format missing '=': {part}",
                    detailed_error=rrule_str,
                )
            key, value = part.split("=", 1)
            key = key.strip().upper()
            value = value.strip()
            if key in seen:
                if key == "FREQ":
                    raise CalendarDataError(
                        "Only one FREQ allowed in RRULE", detailed_error=rrule_str
                    )
                if mode.strict:
                    raise CalendarParseError(
                        f"Duplicate {key} in RRULE", detailed_error=rrule_str
                    )
            seen.add(key)
            if key == "FREQ":
                try:
                    result["freq"] = Frequency(value.upper())
                except ValueError as err:
                    raise CalendarDataError(
                        f"Invalid FREQ in RRULE: '{value}'", detailed_error=rrule_str
                    ) from err
            elif key == "UNTIL":
                result["until"] = DateValue.parse(value)
            elif key in ("COUNT", "INTERVAL"):
                number = _parse_int(key, value)
                if number < 1:
                    raise CalendarDataError(
                        f"{key} must be positive in RRULE", detailed_error=rrule_str
                    )
                result[key.lower()] = number
            elif key in _INT_LIST_FIELDS:
                result[_INT_LIST_FIELDS[key]] = _parse_int_list(key, value)
            elif key == "BYDAY":
                result["by_weekday"] = _parse_weekdays(value)
            elif key == "WKST":
                try:
                    result["wkst"] = Weekday(value.upper())
                except ValueError as err:
                    raise CalendarDataError(
                        f"Invalid WKST in RRULE: '{value}'", detailed_error=rrule_str
                    ) from err
            elif mode.strict:
                raise CalendarParseError(
                    f"Unsupported key '{key}' in RRULE", detailed_error=rrule_str
                )
            elif key in _UNSUPPORTED_PARTS:
                _LOGGER.debug("Ignoring unsupported RRULE part %s", key)
            else:
                _LOGGER.debug("Ignoring unknown RRULE part %s", key)
        if "freq" not in result:
            raise CalendarDataError(
                "No FREQ attribute found in RRULE", detailed_error=rrule_str
            )
        return cls(**result)

    @classmethod
    def __parse_property_value__(cls, prop: Property, mode: ParseMode) -> Recur:
        """Parse the recurrence rule from a property."""
        if prop.attributes and mode.strict:
            raise CalendarParseError(
                f"Unexpected attributes on {prop.name}",
                detailed_error=prop.contentline(),
            )
        return cls.from_rrule(prop.value, mode)

    @classmethod
    def __encode_property_value__(cls, value: Recur) -> str:
        return value.as_rrule_str()

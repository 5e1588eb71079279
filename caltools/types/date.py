"""Library for parsing and encoding DATE and DATE-TIME values.

A `DateValue` holds either a calendar date (`VALUE=DATE`) or a date with a
time of day (`VALUE=DATE-TIME`). A date-time may be in UTC (a trailing `Z`),
attached to a named time zone with a `TZID` attribute, or "floating" meaning it
is the same wall clock time in any time zone. Time zone identifiers are kept as
opaque strings and are not resolved.

Values are ordered by their calendar fields. On the same day a date-only value
sorts before any value with a time.
"""

from __future__ import annotations

import calendar
import datetime
import functools
import logging
import re
from typing import Any

from caltools.exceptions import CalendarDataError, CalendarParseError
from caltools.parsing.const import ATTR_VALUE, ParseMode
from caltools.parsing.property import Attribute, Property

from .data_types import DATA_TYPE

_LOGGER = logging.getLogger(__name__)

__all__ = ["DateValue"]

DATE_REGEX = re.compile(
    r"^([0-9]{4})([0-9]{2})([0-9]{2})(?:T([0-9]{2})([0-9]{2})([0-9]{2})(Z)?)?$"
)
ATTR_TZID = "TZID"
VALUE_DATE = "DATE"
VALUE_DATE_TIME = "DATE-TIME"


def _days_in_month(year: int, month: int) -> int:
    if month == 2 and calendar.isleap(year):
        return 29
    return calendar.mdays[month]


def _validate(
    year: int, month: int, day: int, hour: int, minute: int, second: int
) -> None:
    """Raise a CalendarDataError if the fields do not form a real date."""
    if not 1 <= year <= 9999:
        raise CalendarDataError(f"Year out of range: {year}")
    if not 1 <= month <= 12:
        raise CalendarDataError(f"Month out of range: {month}")
    if not 1 <= day <= _days_in_month(year, month):
        raise CalendarDataError(f"Day out of range for {year}-{month:02}: {day}")
    if not 0 <= hour <= 23:
        raise CalendarDataError(f"Hour out of range: {hour}")
    if not 0 <= minute <= 59:
        raise CalendarDataError(f"Minute out of range: {minute}")
    if not 0 <= second <= 59:
        raise CalendarDataError(f"Second out of range: {second}")


@DATA_TYPE.register(VALUE_DATE, VALUE_DATE_TIME, parse_order=1)
@functools.total_ordering
class DateValue:
    """A DATE or DATE-TIME value."""

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        date_only: bool = False,
        utc: bool = False,
        tzid: str | None = None,
    ) -> None:
        """Initialize DateValue, raising CalendarDataError when out of range."""
        if date_only:
            hour = minute = second = 0
            utc = False
            tzid = None
        _validate(year, month, day, hour, minute, second)
        self.year = year
        self.month = month
        self.day = day
        self.hour = hour
        self.minute = minute
        self.second = second
        self._date_only = date_only
        self.utc = utc
        self.tzid = tzid

    @classmethod
    def of_date(cls, year: int, month: int, day: int) -> DateValue:
        """Create a date-only value."""
        return cls(year, month, day, date_only=True)

    @classmethod
    def of_datetime(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        utc: bool = False,
        tzid: str | None = None,
    ) -> DateValue:
        """Create a value with a time of day."""
        return cls(year, month, day, hour, minute, second, utc=utc, tzid=tzid)

    @classmethod
    def from_datetime(
        cls, value: datetime.date | datetime.datetime, tzid: str | None = None
    ) -> DateValue:
        """Create a value from a python date or datetime."""
        if not isinstance(value, datetime.datetime):
            return cls.of_date(value.year, value.month, value.day)
        utc = value.utcoffset() == datetime.timedelta(0) and tzid is None
        return cls.of_datetime(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
            utc=utc,
            tzid=tzid,
        )

    @classmethod
    def parse(cls, value: str, tzid: str | None = None) -> DateValue:
        """Parse a DATE or DATE-TIME string.

        A CalendarParseError is raised when the text does not have the shape of
        a date and a CalendarDataError when the fields are out of range.
        """
        if not (match := DATE_REGEX.fullmatch(value.strip())):
            raise CalendarParseError(
                f"Expected value to match DATE or DATE-TIME pattern: '{value}'"
            )
        year, month, day, hour, minute, second, zulu = match.groups()
        if hour is None:
            return cls.of_date(int(year), int(month), int(day))
        return cls.of_datetime(
            int(year),
            int(month),
            int(day),
            int(hour),
            int(minute),
            int(second),
            utc=zulu is not None,
            tzid=tzid,
        )

    @classmethod
    def from_property(
        cls, prop: Property, mode: ParseMode = ParseMode.LOOSE
    ) -> DateValue:
        """Parse the value of a property, consulting the VALUE and TZID attributes."""
        value_type = prop.get_attribute_value(ATTR_VALUE)
        if value_type is not None:
            value_type = value_type.upper()
        if value_type not in (None, VALUE_DATE, VALUE_DATE_TIME):
            if mode.strict:
                raise CalendarParseError(
                    f"Unexpected VALUE '{value_type}' for date property {prop.name}",
                    detailed_error=prop.value,
                )
            _LOGGER.debug("Ignoring VALUE '%s' for %s", value_type, prop.name)
            value_type = None
        tzid = prop.get_attribute_value(ATTR_TZID) or None
        result = cls.parse(prop.value, tzid=tzid)
        if mode.strict:
            if value_type == VALUE_DATE and not result.date_only:
                raise CalendarParseError(
                    f"Property {prop.name} has VALUE=DATE but a time was specified",
                    detailed_error=prop.value,
                )
            if value_type == VALUE_DATE_TIME and result.date_only:
                raise CalendarParseError(
                    f"Property {prop.name} has VALUE=DATE-TIME but no time",
                    detailed_error=prop.value,
                )
            if result.utc and tzid:
                raise CalendarDataError(
                    f"Property {prop.name} has a TZID and a UTC value",
                    detailed_error=prop.value,
                )
        if result.utc and result.tzid:
            result.tzid = None
        if tzid and result.date_only:
            _LOGGER.debug("Ignoring TZID '%s' on date value %s", tzid, prop.name)
        return result

    @property
    def date_only(self) -> bool:
        """Return True if this value has no time of day."""
        return self._date_only

    @date_only.setter
    def date_only(self, value: bool) -> None:
        """Switch between a DATE and DATE-TIME value."""
        self._date_only = value
        if value:
            self.hour = self.minute = self.second = 0
            self.utc = False
            self.tzid = None

    @property
    def floating(self) -> bool:
        """Return True for a local time not bound to UTC or a time zone."""
        return not self._date_only and not self.utc and self.tzid is None

    def _sort_key(self) -> tuple[int, ...]:
        return (
            self.year,
            self.month,
            self.day,
            0 if self._date_only else 1,
            self.hour,
            self.minute,
            self.second,
        )

    def compare(self, other: DateValue) -> int:
        """Return -1, 0 or 1 if this value is before, equal or after the other."""
        mine = self._sort_key()
        theirs = other._sort_key()
        return (mine > theirs) - (mine < theirs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def as_date(self) -> datetime.date:
        """Return the calendar date portion as a python date."""
        return datetime.date(self.year, self.month, self.day)

    def as_datetime(self) -> datetime.datetime:
        """Return a python datetime, aware only when the value is in UTC."""
        return datetime.datetime(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            tzinfo=datetime.UTC if self.utc else None,
        )

    def ics(self) -> str:
        """Encode the value as rfc5545 text."""
        result = f"{self.year:04}{self.month:02}{self.day:02}"
        if self._date_only:
            return result
        result += f"T{self.hour:02}{self.minute:02}{self.second:02}"
        if self.utc:
            result += "Z"
        return result

    def attributes(self) -> list[Attribute]:
        """Return the VALUE and TZID attributes describing this value."""
        result = [
            Attribute(ATTR_VALUE, VALUE_DATE if self._date_only else VALUE_DATE_TIME)
        ]
        if self.tzid and not self._date_only:
            result.append(Attribute(ATTR_TZID, self.tzid))
        return result

    def to_property(self, name: str) -> Property:
        """Create a property holding this value."""
        return Property(name, self.ics(), self.attributes())

    def copy(self) -> DateValue:
        """Return a copy of this value."""
        return DateValue(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            date_only=self._date_only,
            utc=self.utc,
            tzid=self.tzid,
        )

    @classmethod
    def __parse_property_value__(cls, prop: Property, mode: ParseMode) -> DateValue:
        return cls.from_property(prop, mode)

    @classmethod
    def __encode_property_value__(cls, value: DateValue) -> str:
        return value.ics()

    @classmethod
    def __encode_property_params__(cls, value: Any) -> list[Attribute]:
        return value.attributes()

    def __str__(self) -> str:
        return self.ics()

    def __repr__(self) -> str:
        return f"DateValue({self.ics()!r}, tzid={self.tzid!r})"

"""Library for expanding recurrence rules into concrete dates.

A recurrence rule plus a start date (the "anchor") describes a possibly
unbounded series of instances. This library walks the periods of the rule
frequency starting at the anchor, applies the BY* rule parts within each
period, and yields the resulting dates in order. The anchor itself is never
returned, only the additional instances that follow it.

Expansion is always bounded. Iteration stops after `MAX_INSTANCES` values or
once an instance would fall `MAX_YEARS` past the current year, whichever comes
first. Both are treated as normal termination and not as errors.

Time zones are not resolved. Values are compared by their wall clock fields
and returned with the same UTC, TZID and date-only flags as the anchor.
"""

from __future__ import annotations

import calendar
import datetime
import itertools
import logging
import math
from collections.abc import Iterable, Iterator, Sequence

from .exceptions import RecurrenceError
from .types.date import DateValue
from .types.recur import Frequency, Recur, Weekday, WeekdayValue

__all__ = [
    "MAX_INSTANCES",
    "MAX_YEARS",
    "RecurIterable",
    "expand",
    "recurrence_set",
]

_LOGGER = logging.getLogger(__name__)

MAX_INSTANCES = 10000
MAX_YEARS = 100

_SUB_DAILY = {Frequency.HOURLY, Frequency.MINUTELY, Frequency.SECONDLY}
_SCOPE_MONTH = "month"
_SCOPE_YEAR = "year"
_END_OF_DAY = datetime.time(23, 59, 59)
_SECONDS_PER_DAY = 86400


def _days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def _match_month_day(day: datetime.date, values: Sequence[int]) -> bool:
    from_end = day.day - _days_in_month(day.year, day.month) - 1
    return day.day in values or from_end in values


def _match_year_day(day: datetime.date, values: Sequence[int]) -> bool:
    year_day = day.timetuple().tm_yday
    from_end = year_day - _days_in_year(day.year) - 1
    return year_day in values or from_end in values


def _match_weekday(
    day: datetime.date, values: Sequence[WeekdayValue], scope: str | None
) -> bool:
    """Return True if the day matches any weekday, respecting nth occurrences."""
    for value in values:
        if value.weekday.python_weekday != day.weekday():
            continue
        if value.occurrence is None or scope is None:
            return True
        if scope == _SCOPE_MONTH:
            position = day.day
            total = _days_in_month(day.year, day.month)
        else:
            position = day.timetuple().tm_yday
            total = _days_in_year(day.year)
        if value.occurrence > 0 and (position - 1) // 7 + 1 == value.occurrence:
            return True
        if value.occurrence < 0 and (total - position) // 7 + 1 == -value.occurrence:
            return True
    return False


def _apply_setpos(
    values: list[datetime.datetime], positions: Sequence[int]
) -> list[datetime.datetime]:
    """Select the nth values of the sorted period, negative from the end."""
    result = set()
    for pos in positions:
        index = pos - 1 if pos > 0 else len(values) + pos
        if 0 <= index < len(values):
            result.add(values[index])
    return sorted(result)


class RecurIterable(Iterable[DateValue]):
    """An iterable that lazily expands a recurrence rule from an anchor date.

    The iterable may be consumed multiple times and each iteration starts over
    from the anchor. Callers can stop early by abandoning the iterator.
    """

    def __init__(
        self,
        rule: Recur,
        anchor: DateValue,
        *,
        max_instances: int = MAX_INSTANCES,
        max_years: int = MAX_YEARS,
    ) -> None:
        """Initialize RecurIterable."""
        if anchor.date_only and rule.freq in _SUB_DAILY:
            raise RecurrenceError(
                f"Frequency {rule.freq.value} requires a start with a time of day"
            )
        self._rule = rule
        self._anchor = anchor
        self._max_instances = max_instances
        self._max_years = max_years
        self._start = datetime.datetime(
            anchor.year,
            anchor.month,
            anchor.day,
            anchor.hour,
            anchor.minute,
            anchor.second,
        )

    def _until(self) -> datetime.datetime | None:
        if (until := self._rule.until) is None:
            return None
        if until.date_only and not self._anchor.date_only:
            return datetime.datetime.combine(until.as_date(), _END_OF_DAY)
        return datetime.datetime(
            until.year, until.month, until.day, until.hour, until.minute, until.second
        )

    def _times(self) -> list[datetime.time]:
        """Return the times of day for day level frequencies."""
        if self._anchor.date_only:
            return [datetime.time()]
        rule = self._rule
        hours = rule.by_hour or [self._start.hour]
        minutes = rule.by_minute or [self._start.minute]
        seconds = rule.by_second or [self._start.second]
        return sorted(
            datetime.time(hour, minute, second)
            for hour, minute, second in itertools.product(hours, minutes, seconds)
        )

    def _has_day_filters(self) -> bool:
        rule = self._rule
        return bool(rule.by_month_day or rule.by_year_day or rule.by_weekday)

    def _day_matches(self, day: datetime.date, scope: str | None) -> bool:
        rule = self._rule
        if rule.by_month and day.month not in rule.by_month:
            return False
        if rule.by_year_day and not _match_year_day(day, rule.by_year_day):
            return False
        if rule.by_month_day and not _match_month_day(day, rule.by_month_day):
            return False
        if rule.by_weekday and not _match_weekday(day, rule.by_weekday, scope):
            return False
        return True

    def _month_days(self, year: int, month: int) -> list[datetime.date]:
        return [
            datetime.date(year, month, day)
            for day in range(1, _days_in_month(year, month) + 1)
        ]

    def _anchor_day(self, year: int, month: int) -> list[datetime.date]:
        """Return the anchor day of month, if the month has that day."""
        if self._start.day > _days_in_month(year, month):
            return []
        return [datetime.date(year, month, self._start.day)]

    def _yearly_days(self, year: int) -> list[datetime.date]:
        rule = self._rule
        if not self._has_day_filters():
            months = rule.by_month or [self._start.month]
            return [day for month in months for day in self._anchor_day(year, month)]
        months = rule.by_month or list(range(1, 13))
        scope = _SCOPE_MONTH if rule.by_month else _SCOPE_YEAR
        return [
            day
            for month in months
            for day in self._month_days(year, month)
            if self._day_matches(day, scope)
        ]

    def _monthly_days(self, year: int, month: int) -> list[datetime.date]:
        rule = self._rule
        if rule.by_month and month not in rule.by_month:
            return []
        if not self._has_day_filters():
            return self._anchor_day(year, month)
        return [
            day
            for day in self._month_days(year, month)
            if self._day_matches(day, _SCOPE_MONTH)
        ]

    def _weekly_days(self, week_start: datetime.date) -> list[datetime.date]:
        rule = self._rule
        result = []
        for offset in range(7):
            day = week_start + datetime.timedelta(days=offset)
            if not rule.by_weekday and day.weekday() != self._start.weekday():
                continue
            if self._day_matches(day, None):
                result.append(day)
        return result

    def _day_periods(self) -> Iterator[tuple[int, list[datetime.date]]]:
        """Yield the year and candidate days of each day level period."""
        rule = self._rule
        start = self._start.date()
        interval = rule.interval
        if rule.freq == Frequency.YEARLY:
            for year in itertools.count(start.year, interval):
                yield year, self._yearly_days(year)
        elif rule.freq == Frequency.MONTHLY:
            for index in itertools.count(start.year * 12 + start.month - 1, interval):
                year, month = divmod(index, 12)
                yield year, self._monthly_days(year, month + 1)
        elif rule.freq == Frequency.WEEKLY:
            wkst = (rule.wkst or Weekday.MONDAY).python_weekday
            day = start - datetime.timedelta(days=(start.weekday() - wkst) % 7)
            step = datetime.timedelta(weeks=interval)
            while True:
                yield day.year, self._weekly_days(day)
                day += step
        else:
            day = start
            step = datetime.timedelta(days=interval)
            while True:
                yield day.year, [day] if self._day_matches(day, None) else []
                day += step

    def _sub_daily_start(self) -> tuple[datetime.datetime, datetime.timedelta]:
        """Return the first period start and the period length."""
        rule = self._rule
        start = self._start
        if rule.freq == Frequency.HOURLY:
            return start.replace(minute=0, second=0), datetime.timedelta(
                hours=rule.interval
            )
        if rule.freq == Frequency.MINUTELY:
            return start.replace(second=0), datetime.timedelta(minutes=rule.interval)
        return start, datetime.timedelta(seconds=rule.interval)

    def _time_matches(self, hour: int, minute: int, second: int) -> bool:
        """Return True if a period starting at this time of day passes the filters."""
        rule = self._rule
        if rule.by_hour and hour not in rule.by_hour:
            return False
        if rule.freq == Frequency.HOURLY:
            return True
        if rule.by_minute and minute not in rule.by_minute:
            return False
        if rule.freq == Frequency.MINUTELY:
            return True
        return not rule.by_second or second in rule.by_second

    def _can_match(self, first: datetime.datetime, step: datetime.timedelta) -> bool:
        """Return False if no period start can ever pass the time of day filters.

        Period starts repeat the same times of day modulo the gcd of the step and
        a day, so only those times need to be checked.
        """
        gap = math.gcd(int(step.total_seconds()), _SECONDS_PER_DAY)
        offset = (first.hour * 3600 + first.minute * 60 + first.second) % gap
        return any(
            self._time_matches(seconds // 3600, seconds // 60 % 60, seconds % 60)
            for seconds in range(offset, _SECONDS_PER_DAY, gap)
        )

    def _next_period(
        self, current: datetime.datetime, step: datetime.timedelta
    ) -> datetime.datetime:
        """Return the next period start that is not rejected for the same reason.

        A day rejected by the day level filters is skipped as a whole, and
        likewise an hour or minute rejected by BYHOUR or BYMINUTE.
        """
        rule = self._rule
        if not self._day_matches(current.date(), None):
            boundary = datetime.datetime.combine(
                current.date() + datetime.timedelta(days=1), datetime.time()
            )
        elif rule.by_hour and current.hour not in rule.by_hour:
            boundary = current.replace(minute=0, second=0) + datetime.timedelta(
                hours=1
            )
        elif (
            rule.freq != Frequency.HOURLY
            and rule.by_minute
            and current.minute not in rule.by_minute
        ):
            boundary = current.replace(second=0) + datetime.timedelta(minutes=1)
        else:
            return current + step
        steps = -((current - boundary) // step)
        return current + max(steps, 1) * step

    def _sub_daily_periods(self) -> Iterator[tuple[int, list[datetime.datetime]]]:
        """Yield the candidates of each period for HOURLY and finer rules."""
        rule = self._rule
        start = self._start
        current, step = self._sub_daily_start()
        if not self._can_match(current, step):
            _LOGGER.debug("Recurrence rule '%s' can never match", rule.as_rrule_str())
            return
        while True:
            if not self._day_matches(current.date(), None) or not self._time_matches(
                current.hour, current.minute, current.second
            ):
                yield current.year, []
                current = self._next_period(current, step)
                continue
            if rule.freq == Frequency.HOURLY:
                minutes = rule.by_minute or [start.minute]
                seconds = rule.by_second or [start.second]
                values = [
                    current.replace(minute=minute, second=second)
                    for minute, second in itertools.product(minutes, seconds)
                ]
            elif rule.freq == Frequency.MINUTELY:
                seconds = rule.by_second or [start.second]
                values = [current.replace(second=second) for second in seconds]
            else:
                values = [current]
            yield current.year, values
            current += step

    def _periods(self) -> Iterator[tuple[int, list[datetime.datetime]]]:
        if self._rule.freq in _SUB_DAILY:
            yield from self._sub_daily_periods()
            return
        times = self._times()
        for year, days in self._day_periods():
            yield year, [
                datetime.datetime.combine(day, time) for day in days for time in times
            ]

    def _to_date_value(self, value: datetime.datetime) -> DateValue:
        anchor = self._anchor
        if anchor.date_only:
            return DateValue.of_date(value.year, value.month, value.day)
        return DateValue.of_datetime(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
            utc=anchor.utc,
            tzid=anchor.tzid,
        )

    def __iter__(self) -> Iterator[DateValue]:
        """Return an iterator over the instances that follow the anchor."""
        rule = self._rule
        start = self._start
        until = self._until()
        limit_year = min(
            datetime.date.today().year + self._max_years, datetime.MAXYEAR
        )
        emitted = 0
        counted = 0
        for period_year, candidates in self._periods():
            if period_year >= limit_year:
                return
            candidates = sorted(set(candidates))
            if rule.by_setpos:
                candidates = _apply_setpos(candidates, rule.by_setpos)
            for value in candidates:
                if value.year >= limit_year:
                    return
                if value < start:
                    continue
                if until is not None and value > until:
                    return
                counted += 1
                if rule.count is not None and counted > rule.count:
                    return
                if value == start:
                    continue
                yield self._to_date_value(value)
                emitted += 1
                if emitted >= self._max_instances:
                    return

    def __repr__(self) -> str:
        rule = self._rule.as_rrule_str()
        return f"RecurIterable(rule={rule!r}, anchor={self._anchor})"


def expand(
    rule: Recur,
    anchor: DateValue,
    *,
    max_instances: int = MAX_INSTANCES,
    max_years: int = MAX_YEARS,
) -> list[DateValue]:
    """Return the ordered instances of the rule that follow the anchor."""
    return list(
        RecurIterable(
            rule, anchor, max_instances=max_instances, max_years=max_years
        )
    )


def recurrence_set(
    anchor: DateValue,
    rule: Recur | None = None,
    rdates: Iterable[DateValue] = (),
    exdates: Iterable[DateValue] = (),
    *,
    max_instances: int = MAX_INSTANCES,
    max_years: int = MAX_YEARS,
) -> list[DateValue]:
    """Combine a rule expansion with explicit RDATE additions and EXDATE exclusions.

    The result is sorted and does not include the anchor unless it was added
    as an RDATE.
    """
    excluded = set(exdates)
    result: list[DateValue] = []
    if rule is not None:
        result = [
            value
            for value in RecurIterable(
                rule, anchor, max_instances=max_instances, max_years=max_years
            )
            if value not in excluded
        ]
    seen = set(result)
    for rdate in rdates:
        if rdate in seen or rdate in excluded:
            continue
        seen.add(rdate)
        result.append(rdate)
    result.sort()
    return result

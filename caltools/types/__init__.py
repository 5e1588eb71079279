"""Library for parsing rfc5545 Property Value Data Types and Properties."""

# Import all types for the registry
from . import integer, text  # noqa: F401
from .attachment import Attachment
from .cal_address import CalAddress, CalendarUserType, ParticipationStatus, Role
from .const import (
    AlarmAction,
    Classification,
    EventStatus,
    JournalStatus,
    TodoStatus,
    Transparency,
)
from .date import DateValue
from .duration import Duration, parse_duration
from .period import FreeBusyType, Period
from .recur import Frequency, Recur, Weekday, WeekdayValue
from .utc_offset import UtcOffset

__all__ = [
    "AlarmAction",
    "Attachment",
    "CalAddress",
    "CalendarUserType",
    "Classification",
    "DateValue",
    "Duration",
    "EventStatus",
    "Frequency",
    "FreeBusyType",
    "JournalStatus",
    "ParticipationStatus",
    "Period",
    "Recur",
    "Role",
    "TodoStatus",
    "Transparency",
    "UtcOffset",
    "Weekday",
    "WeekdayValue",
    "parse_duration",
]

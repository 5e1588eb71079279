"""Constants and enums representing rfc5545 values.

Enumerated property values are parsed case-insensitively. Values not known to
this library are rejected in strict mode and otherwise preserved as unknown
properties on the component.
"""

import enum


class Classification(str, enum.Enum):
    """Defines the access classification for a calendar component."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    CONFIDENTIAL = "CONFIDENTIAL"


class EventStatus(str, enum.Enum):
    """Status or confirmation of the event."""

    CONFIRMED = "CONFIRMED"
    TENTATIVE = "TENTATIVE"
    CANCELLED = "CANCELLED"


class TodoStatus(str, enum.Enum):
    """Status or confirmation of the to-do."""

    NEEDS_ACTION = "NEEDS-ACTION"
    COMPLETED = "COMPLETED"
    IN_PROCESS = "IN-PROCESS"
    CANCELLED = "CANCELLED"


class JournalStatus(str, enum.Enum):
    """Status or confirmation of the journal entry."""

    DRAFT = "DRAFT"
    FINAL = "FINAL"
    CANCELLED = "CANCELLED"


class Transparency(str, enum.Enum):
    """Whether an event is transparent to busy time searches."""

    OPAQUE = "OPAQUE"
    TRANSPARENT = "TRANSPARENT"


class AlarmAction(str, enum.Enum):
    """Action invoked when an alarm is triggered."""

    AUDIO = "AUDIO"
    DISPLAY = "DISPLAY"
    EMAIL = "EMAIL"

"""A library for reading and writing iCalendar (rfc5545) data.

The `calendar_parser` module reads calendar text into typed components such as
events, to-dos and journal entries, reporting problems as structured errors
under a strict or loose validation mode. Recurring components are expanded
into concrete dates with the `iter` module.
"""

__all__ = [
    "alarm",
    "calendar_parser",
    "component",
    "errors",
    "event",
    "exceptions",
    "freebusy",
    "iter",
    "journal",
    "parsing",
    "store",
    "timezone",
    "todo",
    "types",
    "util",
]

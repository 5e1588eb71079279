"""Helpers shared by the component models.

The factories are looked up at call time so tests can patch them.
"""

from __future__ import annotations

from collections.abc import Sequence
import datetime
from importlib import metadata
from types import NoneType, UnionType
from typing import Any, Union, get_args, get_origin
import uuid

__all__ = [
    "dtstamp_factory",
    "uid_factory",
    "prodid_factory",
]


PRODID = "caltools"
VERSION = metadata.version("caltools")


def dtstamp_factory() -> datetime.datetime:
    """Return the current time for DTSTAMP."""
    return datetime.datetime.now(tz=datetime.UTC)


def uid_factory() -> str:
    """Return a new random UID."""
    return str(uuid.uuid1())


def prodid_factory() -> str:
    """Return the PRODID written by `CalendarStore`."""
    return f"-//{PRODID}//{VERSION}//EN"


def get_field_type(annotation: Any) -> Any:
    """Strip `Optional` from an annotation: `Optional[int]` becomes `int`."""
    if get_origin(annotation) in (Union, UnionType):
        args: Sequence[Any] = get_args(annotation)
        if len(args) == 2:
            args = [arg for arg in args if arg is not NoneType]
            if len(args) == 1:
                return args[0]
    return annotation

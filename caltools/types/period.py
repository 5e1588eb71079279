"""PERIOD values, as used by FREEBUSY and RDATE."""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from caltools.exceptions import CalendarParseError
from caltools.parsing.const import ParseMode
from caltools.parsing.property import Attribute, Property

from .data_types import DATA_TYPE
from .date import DateValue
from .duration import Duration

_LOGGER = logging.getLogger(__name__)

ATTR_FBTYPE = "FBTYPE"


class FreeBusyType(str, enum.Enum):
    """Known FBTYPE values."""

    FREE = "FREE"
    BUSY = "BUSY"
    BUSY_UNAVAILABLE = "BUSY-UNAVAILABLE"
    BUSY_TENTATIVE = "BUSY-TENTATIVE"


@DATA_TYPE.register("PERIOD")
class Period(BaseModel):
    """A start plus either an explicit end or a duration."""

    start: DateValue
    end: Optional[DateValue] = None
    duration: Optional[Duration] = None

    free_busy_type: Optional[str] = Field(alias="FBTYPE", default=None)
    """FBTYPE kept as text so values outside `FreeBusyType` survive."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )

    @classmethod
    def parse(cls, value: str, free_busy_type: str | None = None) -> Period:
        """Parse a rfc5545 `start/end` or `start/duration` period."""
        parts = value.split("/")
        if len(parts) != 2:
            raise CalendarParseError(
                f"Period did not have two time values: {value}", detailed_error=value
            )
        start = DateValue.parse(parts[0])
        if parts[1].lstrip("+-").startswith("P"):
            return cls(
                start=start,
                duration=Duration.parse(parts[1]),
                free_busy_type=free_busy_type,
            )
        return cls(
            start=start, end=DateValue.parse(parts[1]), free_busy_type=free_busy_type
        )

    @property
    def end_value(self) -> DateValue:
        """A computed end value based on either the end or the duration."""
        if self.end:
            return self.end
        if not self.duration:
            raise ValueError("Invalid period missing both end and duration")
        end = self.start.as_datetime() + self.duration.as_timedelta()
        return DateValue.from_datetime(end)

    @classmethod
    def __parse_property_value__(cls, prop: Property, mode: ParseMode) -> Period:
        """Convert the property into a Period."""
        return cls.parse(prop.value, prop.get_attribute_value(ATTR_FBTYPE))

    @classmethod
    def __encode_property_value__(cls, value: Period) -> str:
        """Encode property value."""
        if value.end:
            return "/".join([value.start.ics(), value.end.ics()])
        if value.duration:
            return "/".join([value.start.ics(), value.duration.ics()])
        raise ValueError(f"Invalid period missing both end and duration: {value}")

    @classmethod
    def __encode_property_params__(cls, value: Any) -> list[Attribute]:
        if value.free_busy_type:
            return [Attribute(ATTR_FBTYPE, value.free_busy_type)]
        return []

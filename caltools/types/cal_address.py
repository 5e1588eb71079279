"""CAL-ADDRESS values used by ORGANIZER and ATTENDEE."""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from caltools.parsing.const import ParseMode
from caltools.parsing.property import Attribute, Property

from .data_types import DATA_TYPE

_LOGGER = logging.getLogger(__name__)


class CalendarUserType(str, enum.Enum):
    """Known CUTYPE values."""

    INDIVIDUAL = "INDIVIDUAL"
    GROUP = "GROUP"
    RESOURCE = "RESOURCE"
    ROOM = "ROOM"
    UNKNOWN = "UNKNOWN"


class ParticipationStatus(str, enum.Enum):
    """Known PARTSTAT values."""

    NEEDS_ACTION = "NEEDS-ACTION"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    # events and todos only
    TENTATIVE = "TENTATIVE"
    DELEGATED = "DELEGATED"
    # todos only
    COMPLETED = "COMPLETED"


class Role(str, enum.Enum):
    """Known ROLE values."""

    CHAIR = "CHAIR"
    REQUIRED = "REQ-PARTICIPANT"
    OPTIONAL = "OPT-PARTICIPANT"
    NON_PARTICIPANT = "NON-PARTICIPANT"


@DATA_TYPE.register("CAL-ADDRESS")
class CalAddress(BaseModel):
    """An address (usually a `mailto:` uri) plus the parameters describing it.

    The CUTYPE, PARTSTAT and ROLE parameters are kept as plain strings so
    values outside the enums above survive a parse and encode.
    """

    uri: str = Field(alias="value")

    common_name: Optional[str] = Field(alias="CN", default=None)
    """Display name, e.g. `John Smith`."""

    user_type: Optional[str] = Field(alias="CUTYPE", default=None)
    delegator: Optional[str] = Field(alias="DELEGATED-FROM", default=None)
    delegate: Optional[str] = Field(alias="DELEGATED-TO", default=None)
    directory_entry: Optional[str] = Field(alias="DIR", default=None)
    member: Optional[str] = Field(alias="MEMBER", default=None)
    status: Optional[str] = Field(alias="PARTSTAT", default=None)
    role: Optional[str] = Field(alias="ROLE", default=None)

    rsvp: Optional[bool] = Field(alias="RSVP", default=None)
    """Parsed from `RSVP=TRUE` / `RSVP=FALSE`."""

    sent_by: Optional[str] = Field(alias="SENT-BY", default=None)
    language: Optional[str] = Field(alias="LANGUAGE", default=None)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def __parse_property_value__(cls, prop: Property, mode: ParseMode) -> CalAddress:
        """Build the address from the property value and its attributes."""
        known = {
            field.alias for field in cls.model_fields.values() if field.alias
        }
        data: dict[str, Any] = {"value": prop.value}
        for attribute in prop.attributes:
            if attribute.name not in known:
                _LOGGER.debug("Ignoring CAL-ADDRESS attribute %s", attribute.name)
                continue
            if attribute.name in data:
                continue
            if attribute.name == "RSVP":
                data["RSVP"] = attribute.value.upper() == "TRUE"
            else:
                data[attribute.name] = attribute.value
        return cls(**data)

    @classmethod
    def __encode_property_value__(cls, value: CalAddress) -> str:
        return value.uri

    @classmethod
    def __encode_property_params__(cls, value: Any) -> list[Attribute]:
        result = []
        for name, field in cls.model_fields.items():
            if field.alias == "value" or (attr := getattr(value, name)) is None:
                continue
            if isinstance(attr, bool):
                attr = "TRUE" if attr else "FALSE"
            result.append(Attribute(str(field.alias), attr))
        return result

"""Values of the ATTACH property.

An attachment is either a uri reference or inline data, in which case the
property carries `ENCODING=BASE64` and `VALUE=BINARY`. The data is kept as
the encoded text and is not decoded.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from caltools.exceptions import CalendarParseError
from caltools.parsing.const import ATTR_VALUE, ParseMode
from caltools.parsing.property import Attribute, Property

from .data_types import DATA_TYPE

_LOGGER = logging.getLogger(__name__)

ATTR_FMTTYPE = "FMTTYPE"
ATTR_ENCODING = "ENCODING"
VALUE_BINARY = "BINARY"
ENCODING_BASE64 = "BASE64"


@DATA_TYPE.register(VALUE_BINARY)
class Attachment(BaseModel):
    """A uri or inline BASE64 document attached to a component."""

    value: str

    fmttype: Optional[str] = Field(alias=ATTR_FMTTYPE, default=None)
    """Media type of the document, e.g. `application/pdf`."""

    encoding: Optional[str] = Field(alias=ATTR_ENCODING, default=None)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def binary(self) -> bool:
        """Return True if the value is inline data rather than a uri."""
        return self.encoding is not None

    @classmethod
    def __parse_property_value__(cls, prop: Property, mode: ParseMode) -> Attachment:
        data: dict[str, Any] = {"value": prop.value}
        for attribute in prop.attributes:
            name = attribute.name
            if name in (ATTR_FMTTYPE, ATTR_ENCODING):
                data[name] = attribute.value
            elif name != ATTR_VALUE:
                _LOGGER.debug("Ignoring ATTACH attribute %s", name)
        # Inline data needs both ENCODING=BASE64 and VALUE=BINARY
        encoded = (data.get(ATTR_ENCODING) or "").upper() == ENCODING_BASE64
        binary = (prop.get_attribute_value(ATTR_VALUE) or "").upper() == VALUE_BINARY
        if mode.strict and (encoded != binary or ATTR_ENCODING in data and not encoded):
            raise CalendarParseError(
                f"{prop.name} inline data requires ENCODING=BASE64 and VALUE=BINARY",
                detailed_error=prop.contentline(),
            )
        return cls(**data)

    @classmethod
    def __encode_property_value__(cls, value: Attachment) -> str:
        return value.value

    @classmethod
    def __encode_property_params__(cls, value: Attachment) -> list[Attribute]:
        result = []
        if value.fmttype is not None:
            result.append(Attribute(ATTR_FMTTYPE, value.fmttype))
        if value.encoding is not None:
            result.append(Attribute(ATTR_ENCODING, value.encoding))
            result.append(Attribute(ATTR_VALUE, VALUE_BINARY))
        return result

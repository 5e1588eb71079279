"""Library for handling rfc5545 properties and attributes.

A property is the definition of an individual attribute describing a
calendar object or a calendar component. Every content line has the shape
`NAME;ATTR=VAL;ATTR="VAL":VALUE`. This is a very simple parser that breaks a
logical line into those parts, and does not attempt to interpret the meaning
of the property or its value.

For example, given a content line of:

  DUE;VALUE=DATE:20070501

This library would create a Property object with this structure:

  Property(
    name='DUE',
    value='20070501',
    attributes=[Attribute(name='VALUE', value='DATE')],
  )

Attribute values may be quoted so that they can contain the characters `;`,
`:` and `,` which are otherwise delimiters. Attribute values are always quoted
when encoded.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from caltools.exceptions import CalendarParseError
from .const import ParseMode
from .lines import fold

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "Attribute",
    "Property",
]

_RE_NAME = re.compile("[A-Z0-9-]+")
_QUOTE = '"'
_VALUE_DELIMITER = ":"
_ATTR_DELIMITER = ";"
_LIST_DELIMITER = ","


@dataclass(frozen=True)
class Attribute:
    """An rfc5545 property attribute (parameter)."""

    name: str
    value: str


def _find_unquoted(line: str, char: str, start: int = 0) -> int | None:
    """Find the first occurrence of the character outside of double quotes."""
    in_quote = False
    for pos in range(start, len(line)):
        if line[pos] == _QUOTE:
            in_quote = not in_quote
        elif line[pos] == char and not in_quote:
            return pos
    return None


def _split_unquoted(text: str, char: str) -> list[str]:
    """Split the text on the character when it appears outside double quotes."""
    parts = []
    start = 0
    while (pos := _find_unquoted(text, char, start)) is not None:
        parts.append(text[start:pos])
        start = pos + 1
    parts.append(text[start:])
    return parts


def _parse_attribute(text: str, mode: ParseMode, line: str) -> Attribute:
    if (eq_pos := text.find("=")) == -1:
        if mode.strict:
            raise CalendarParseError(
                f"Attribute '{text}' is missing '='", detailed_error=line
            )
        _LOGGER.debug("Attribute '%s' has no value", text)
        return Attribute(text.strip().upper(), "")
    name = text[:eq_pos].strip().upper()
    value = text[eq_pos + 1 :].strip()
    if mode.strict:
        if not name:
            raise CalendarParseError("Attribute name is empty", detailed_error=line)
        if _find_unquoted(value, _LIST_DELIMITER) is not None:
            raise CalendarParseError(
                f"Attribute '{name}' value contains an unquoted ','",
                detailed_error=line,
            )
    return Attribute(name, value.replace(_QUOTE, ""))


class Property:
    """An rfc5545 property made of a name, attributes and a raw value."""

    def __init__(
        self,
        name: str,
        value: str = "",
        attributes: list[Attribute] | None = None,
    ) -> None:
        """Initialize Property."""
        if not name or not name.strip():
            raise CalendarParseError("Property name must not be empty")
        self._name = name.strip().upper()
        self.value = value
        self.attributes: list[Attribute] = list(attributes or [])

    @property
    def name(self) -> str:
        """Return the upper case property name."""
        return self._name

    def get_attribute(self, name: str) -> Attribute | None:
        """Return the first attribute with the specified name."""
        name = name.upper()
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def get_attribute_value(self, name: str) -> str | None:
        """Return the value of the first attribute with the specified name."""
        if (attribute := self.get_attribute(name)) is None:
            return None
        return attribute.value

    def set_attribute(self, name: str, value: str) -> None:
        """Replace the first attribute with the name, or append a new one."""
        attribute = Attribute(name.upper(), value)
        for index, existing in enumerate(self.attributes):
            if existing.name == attribute.name:
                self.attributes[index] = attribute
                return
        self.attributes.append(attribute)

    def remove_attribute(self, name: str) -> None:
        """Remove all attributes with the specified name."""
        name = name.upper()
        self.attributes = [attr for attr in self.attributes if attr.name != name]

    def contentline(self) -> str:
        """Encode the property as a single unfolded content line."""
        result = [self.name]
        for attribute in self.attributes:
            result.append(f'{_ATTR_DELIMITER}{attribute.name}="{attribute.value}"')
        result.append(_VALUE_DELIMITER)
        result.append(self.value)
        return "".join(result)

    def ics(self) -> str:
        """Encode the property into folded CRLF terminated rfc5545 text."""
        return fold(self.contentline())

    @classmethod
    def from_ics(cls, line: str, mode: ParseMode = ParseMode.LOOSE) -> Property:
        """Decode a Property from an unfolded rfc5545 content line.

        Will raise a CalendarParseError on failure.
        """
        if (value_pos := _find_unquoted(line, _VALUE_DELIMITER)) is None:
            raise CalendarParseError(
                "Invalid property line, expected ':' after property name",
                detailed_error=line,
            )
        head = line[:value_pos]
        value = line[value_pos + 1 :]
        name, *attribute_parts = _split_unquoted(head, _ATTR_DELIMITER)
        name = name.strip().upper()
        if not name:
            raise CalendarParseError("Property name is empty", detailed_error=line)
        if mode.strict and not _RE_NAME.fullmatch(name):
            raise CalendarParseError(
                f"Invalid property name '{name}'", detailed_error=line
            )
        attributes = [
            _parse_attribute(part, mode, line)
            for part in attribute_parts
            if part.strip() or mode.strict
        ]
        return cls(name, value, attributes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Property):
            return NotImplemented
        return (self.name, self.value, self.attributes) == (
            other.name,
            other.value,
            other.attributes,
        )

    def __repr__(self) -> str:
        return (
            f"Property(name={self.name!r}, value={self.value!r}, "
            f"attributes={self.attributes!r})"
        )

"""Registry that maps property value types to their codec hooks.

Each value class registered with `DATA_TYPE.register` may define any of these
class methods:

- `__property_type__()`: the python type a model field is annotated with, when
  that differs from the class being registered (e.g. `str` for TEXT).
- `__parse_property_value__(prop, mode)`: build the value from a `Property`.
- `__encode_property_value__(value)`: the ics text for a value.
- `__encode_property_params__(value)`: the attributes written alongside it.

The component models look the hooks up by the annotated field type. When a
property carries a `VALUE=` attribute the decoder is found by that name.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from caltools.parsing.const import ParseMode
from caltools.parsing.property import Attribute, Property

_LOGGER = logging.getLogger(__name__)

T_TYPE = TypeVar("T_TYPE", bound=type)

PropertyDecoder = Callable[[Property, ParseMode], Any]
ValueEncoder = Callable[[Any], "str | None"]
ParamsEncoder = Callable[[Any], list[Attribute]]


class Registry:
    """Lookup tables for the value types known to the component models."""

    def __init__(self) -> None:
        self.items: dict[str, type] = {}
        """VALUE type names to the class registered for them."""

        self.parse_property_value: dict[type, PropertyDecoder] = {}
        self.parse_parameter_by_name: dict[str, PropertyDecoder] = {}
        self.encode_property_value: dict[type, ValueEncoder] = {}
        self.encode_property_params: dict[type, ParamsEncoder] = {}

        self.parse_order: dict[type, int] = {}
        """Sort key used when a field accepts a union of value types."""

    def register(
        self, *names: str, parse_order: int | None = None
    ) -> Callable[[T_TYPE], T_TYPE]:
        """Class decorator that records the hooks of a value type.

        `names` are the VALUE type names (e.g. `DATE-TIME`) the class decodes.
        """

        def decorator(cls: T_TYPE) -> T_TYPE:
            key = cls
            if property_type := getattr(cls, "__property_type__", None):
                key = property_type()
            for name in names:
                self.items[name] = cls
            if decoder := getattr(cls, "__parse_property_value__", None):
                self.parse_property_value[key] = decoder
                self.parse_parameter_by_name.update({name: decoder for name in names})
            if encoder := getattr(cls, "__encode_property_value__", None):
                self.encode_property_value[key] = encoder
            if params := getattr(cls, "__encode_property_params__", None):
                self.encode_property_params[key] = params
            if parse_order:
                self.parse_order[key] = parse_order
            _LOGGER.debug("Registered value type %s as %s", cls.__name__, names)
            return cls

        return decorator


DATA_TYPE = Registry()

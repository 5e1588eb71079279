"""Pydantic models for calendar components and their property codecs.

A component arrives as the list of logical lines between its BEGIN and END
markers. `ComponentModel.from_lines` walks those lines, matches each property
to a model field by name and decodes the value with the hooks registered in
`DATA_TYPE`. A property that fails to decode is reported with its line number
and left out; the rest of the component is still built. Nested components
(VALARM, STANDARD, DAYLIGHT) are built recursively.

`ComponentModel.ics()` walks the fields the other way to produce CRLF
terminated text.
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Iterable, Sequence
from typing import Any, ClassVar, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ErrorReporter, ParseError
from .exceptions import CalendarDataError, CalendarParseError, RecurrenceError
from .iter import recurrence_set
from .parsing.const import ATTR_BEGIN, ATTR_END, ATTR_VALUE, ParseMode
from .parsing.lines import LogicalLine, fold
from .parsing.property import Property
from .types.data_types import DATA_TYPE
from .types.date import DateValue
from .types.period import Period
from .types.recur import Recur
from .util import get_field_type

_LOGGER = logging.getLogger(__name__)

__all__ = ["ComponentModel"]

# List fields whose property may hold several comma separated values
EXPAND_REPEATED_VALUES = {
    "categories",
    "exdate",
    "rdate",
    "resources",
    "freebusy",
}
# Written back as one comma separated property
JOIN_REPEATED_VALUES = {"categories", "resources"}

MARKER_RE = re.compile(r"^(BEGIN|END):(\S+)\s*$", re.IGNORECASE)
_UNESCAPED_COMMA_RE = re.compile(r"(?<!\\),")


def parse_marker(text: str) -> tuple[str, str] | None:
    """Return the upper case marker and component name of a BEGIN/END line."""
    if not (match := MARKER_RE.match(text.strip())):
        return None
    return match.group(1).upper(), match.group(2).upper()


def _report(
    report: ErrorReporter | None, line: LogicalLine, message: str
) -> None:
    if report is None:
        _LOGGER.debug("Line %d: %s", line.line_no, message)
        return
    report.report(ParseError(line.line_no, message, line.text))


class ComponentModel(BaseModel):
    """Base class for the typed calendar components."""

    component_name: ClassVar[str] = ""
    """The upper case name used in the BEGIN and END lines."""

    extras: list[Property] = Field(default_factory=list)
    """Properties not known by this library, preserved for encoding."""

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as err:
            _LOGGER.debug("Failed to parse component %s", err)
            message = [
                f"Failed to parse calendar {self.__class__.__name__.upper()} component"
            ]
            for error in err.errors():
                if msg := error.get("msg"):
                    message.append(msg)
            error_str = ": ".join(message)
            raise CalendarParseError(error_str, detailed_error=str(err)) from err

    def validation_errors(self) -> list[str]:
        """Return the reasons this component does not have its required properties."""
        return []

    def is_valid(self) -> bool:
        """Return True if the component has all of its required properties."""
        return not self.validation_errors()

    @classmethod
    def from_lines(
        cls,
        lines: Sequence[LogicalLine],
        mode: ParseMode = ParseMode.LOOSE,
        report: ErrorReporter | None = None,
    ) -> ComponentModel | None:
        """Build a component from its content lines.

        The lines may optionally include the enclosing BEGIN and END lines,
        and may contain nested sub-components. Errors are reported and the
        offending property is omitted. None is returned only when the
        component could not be built at all.
        """
        body = list(lines)
        if body and (marker := parse_marker(body[0].text)) and marker[0] == ATTR_BEGIN:
            body = body[1:]
            if body and (end := parse_marker(body[-1].text)) and end == (
                ATTR_END,
                marker[1],
            ):
                body = body[:-1]

        fields = cls._property_fields()
        data: dict[str, Any] = {}
        extras: list[Property] = []
        index = 0
        while index < len(body):
            line = body[index]
            index += 1
            if not line.text.strip():
                continue
            if (marker := parse_marker(line.text)) is not None:
                if marker[0] == ATTR_END:
                    _report(report, line, f"Unexpected {ATTR_END}:{marker[1]}")
                    continue
                index = cls._parse_sub_component(
                    body, index, marker[1], fields, data, mode, report
                )
                continue
            try:
                prop = Property.from_ics(line.text, mode)
            except CalendarParseError as err:
                _report(report, line, err.message)
                continue
            cls._parse_line(line, prop, fields, data, extras, mode, report)

        if extras:
            data["extras"] = extras
        try:
            return cls(**data)
        except CalendarParseError as err:
            first = lines[0] if lines else LogicalLine(0, "")
            _report(report, first, err.message)
            return None

    @classmethod
    def _parse_line(
        cls,
        line: LogicalLine,
        prop: Property,
        fields: dict[str, tuple[str, bool, Any]],
        data: dict[str, Any],
        extras: list[Property],
        mode: ParseMode,
        report: ErrorReporter | None,
    ) -> None:
        """Decode a single property into the pending component data."""
        key = prop.name.lower()
        if (field := fields.get(key)) is None:
            if mode.strict:
                _report(
                    report,
                    line,
                    f"Unknown property {prop.name} in {cls.component_name}",
                )
                return
            _LOGGER.debug("Keeping unknown property %s as extra", prop.name)
            extras.append(prop)
            return
        field_name, repeated, field_type = field
        props = [prop]
        if key in EXPAND_REPEATED_VALUES:
            props = cls._expand_repeated_property(prop)
        field_types = cls._get_field_types(field_type)
        values = []
        for sub_prop in props:
            try:
                value = cls._parse_property(field_types, sub_prop, mode)
            except CalendarParseError as err:
                _report(report, line, err.message)
                return
            if value is None:
                _LOGGER.debug("Keeping unrecognized value of %s as extra", prop.name)
                extras.append(prop)
                return
            values.append(value)
        if repeated:
            data.setdefault(field_name, []).extend(values)
            return
        if field_name in data or len(values) > 1:
            if mode.strict:
                _report(report, line, f"Only one {prop.name} allowed")
                return
            _LOGGER.debug("Replacing repeated value for %s", prop.name)
        data[field_name] = values[-1]

    @classmethod
    def _parse_sub_component(
        cls,
        body: list[LogicalLine],
        index: int,
        name: str,
        fields: dict[str, tuple[str, bool, Any]],
        data: dict[str, Any],
        mode: ParseMode,
        report: ErrorReporter | None,
    ) -> int:
        """Consume a nested BEGIN/END block, returning the index after it."""
        begin = body[index - 1]
        depth = 1
        end = index
        while end < len(body):
            if (marker := parse_marker(body[end].text)) is not None and marker[
                1
            ] == name:
                depth += 1 if marker[0] == ATTR_BEGIN else -1
                if depth == 0:
                    break
            end += 1
        block = body[index - 1 : end + 1]
        if end >= len(body) and mode.strict:
            _report(report, begin, f"Missing {ATTR_END}:{name}")
        field = fields.get(name.lower())
        if field is None or not _is_component_type(field[2]):
            if mode.strict:
                _report(
                    report, begin, f"Unknown component {name} in {cls.component_name}"
                )
            else:
                _LOGGER.debug("Skipping unknown component %s", name)
            return end + 1
        field_name, _, component_type = field
        if (component := component_type.from_lines(block, mode, report)) is None:
            return end + 1
        if not component.is_valid():
            message = f"Invalid {name} component: " + ", ".join(
                component.validation_errors()
            )
            if mode.strict:
                _report(report, begin, message)
            else:
                _LOGGER.debug(message)
            return end + 1
        data.setdefault(field_name, []).append(component)
        return end + 1

    @classmethod
    def _property_fields(cls) -> dict[str, tuple[str, bool, Any]]:
        """Return the lower case property name to (field name, repeated, type)."""
        result = {}
        for field_name, field in cls.model_fields.items():
            if field_name == "extras":
                continue
            annotation = get_field_type(field.annotation)
            repeated = get_origin(annotation) is list
            if repeated:
                annotation = get_args(annotation)[0]
            info = (field_name, repeated, annotation)
            result[field_name.replace("_", "-")] = info
            if field.alias:
                result[field.alias.lower()] = info
        return result

    @classmethod
    def _parse_property(
        cls, field_types: list[type], prop: Property, mode: ParseMode
    ) -> Any:
        """Decode the property with the first of the candidate types that accepts it."""
        _LOGGER.debug(
            "Parsing field '%s' with value '%s' as types %s",
            prop.name,
            prop.value,
            field_types,
        )
        errors = []
        for sub_type in field_types:
            try:
                return cls._parse_single_property(sub_type, prop, mode)
            except CalendarDataError:
                raise
            except CalendarParseError as err:
                _LOGGER.debug(
                    "Unable to parse property value as type %s: %s", sub_type, err
                )
                errors.append(str(err))
                continue
        raise CalendarParseError(
            f"Failed to parse property {prop.name}: {'; '.join(errors)}",
            detailed_error=prop.value,
        )

    @classmethod
    def _parse_single_property(
        cls, field_type: type, prop: Property, mode: ParseMode
    ) -> Any:
        """Decode the property as one specific value type."""
        if isinstance(field_type, type) and issubclass(field_type, enum.Enum):
            try:
                return field_type(prop.value.strip().upper())
            except ValueError as err:
                if mode.strict:
                    raise CalendarDataError(
                        f"Unrecognized value for {prop.name}: '{prop.value}'"
                    ) from err
                return None

        result: Any
        if (value_type := prop.get_attribute_value(ATTR_VALUE)) and (
            func := DATA_TYPE.parse_parameter_by_name.get(value_type.upper())
        ):
            _LOGGER.debug("Parsing %s as value type '%s'", prop.name, value_type)
            result = func(prop, mode)
        elif value_type and mode.strict:
            raise CalendarParseError(
                f"Property attribute specified unsupported type: {value_type}"
            )
        elif decoder := DATA_TYPE.parse_property_value.get(field_type):
            _LOGGER.debug("Decoding '%s' as type '%s'", prop.name, field_type)
            result = decoder(prop, mode)
        else:
            _LOGGER.debug("Using '%s' bare property value '%s'", prop.name, prop.value)
            result = prop.value
        if not isinstance(result, field_type):
            raise CalendarParseError(
                f"Property {prop.name} is not a {field_type.__name__} value",
                detailed_error=prop.value,
            )
        return result

    @classmethod
    def _expand_repeated_property(cls, prop: Property) -> list[Property]:
        """Expand a property with repeated values into separate properties."""
        if "," not in prop.value:
            return [prop]
        return [
            Property(prop.name, sub_value, prop.attributes)
            for sub_value in _UNESCAPED_COMMA_RE.split(prop.value)
        ]

    @classmethod
    def _get_field_types(cls, field_type: Any) -> list[type]:
        """Return the candidate value types of a field annotation, in parse order."""
        if get_origin(field_type) in (Union, type(int | str)):
            if not (args := get_args(field_type)):
                raise ValueError(f"Unable to determine args of type: {field_type}")

            # ordered by the registry parse_order, None excluded
            sortable_args = [
                (DATA_TYPE.parse_order.get(arg, 0), index, arg)
                for index, arg in enumerate(args)
                if arg is not type(None)  # noqa: E721
            ]
            sortable_args.sort(key=lambda item: (-item[0], item[1]))
            return [arg for (_, _, arg) in sortable_args]
        return [field_type]

    def ics(self, name: str | None = None) -> str:
        """Encode the component as CRLF terminated rfc5545 text."""
        name = (name or self.component_name).upper()
        result = [fold(f"{ATTR_BEGIN}:{name}")]
        for field_name, field in type(self).model_fields.items():
            if field_name == "extras":
                continue
            if (values := getattr(self, field_name)) is None:
                continue
            if not isinstance(values, list):
                values = [values]
            if not values:
                continue
            key = (field.alias or field_name.replace("_", "-")).upper()
            if key.lower() in JOIN_REPEATED_VALUES:
                encoded = [self._encode_property(key, value).value for value in values]
                result.append(Property(key, ",".join(encoded)).ics())
                continue
            for value in values:
                if isinstance(value, ComponentModel):
                    result.append(value.ics(key))
                else:
                    result.append(self._encode_property(key, value).ics())
        result.extend(prop.ics() for prop in self.extras)
        result.append(fold(f"{ATTR_END}:{name}"))
        return "".join(result)

    @classmethod
    def _encode_property(cls, key: str, value: Any) -> Property:
        """Return the encoded content lines for one field value."""
        if isinstance(value, enum.Enum):
            return Property(key, str(value.value))
        for value_type in type(value).__mro__:
            if value_encoder := DATA_TYPE.encode_property_value.get(value_type):
                prop = Property(key, value_encoder(value) or "")
                if params_encoder := DATA_TYPE.encode_property_params.get(value_type):
                    prop.attributes = params_encoder(value)
                return prop
        return Property(key, str(value))


def _is_component_type(value: Any) -> bool:
    return isinstance(value, type) and issubclass(value, ComponentModel)


def component_recurrences(
    dtstart: DateValue | None,
    rrule: Recur | None,
    rdate: Iterable[DateValue | Period],
    exdate: Iterable[DateValue],
) -> list[DateValue]:
    """Return the sorted recurrence set of a component.

    The RRULE expansion is combined with the RDATE additions and EXDATE
    exclusions. The start date itself is not included.
    """
    rdates = [value.start if isinstance(value, Period) else value for value in rdate]
    if dtstart is None:
        if rrule is not None:
            raise RecurrenceError("Unable to expand RRULE without a DTSTART")
        excluded = set(exdate)
        return sorted({value for value in rdates if value not in excluded})
    return recurrence_set(dtstart, rrule, rdates, exdate)

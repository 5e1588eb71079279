"""Library for parsing and encoding INTEGER values."""

from caltools.exceptions import CalendarParseError
from caltools.parsing.const import ParseMode
from caltools.parsing.property import Property

from .data_types import DATA_TYPE


@DATA_TYPE.register("INTEGER")
class IntEncoder:
    """Encode an int ICS value."""

    @classmethod
    def __property_type__(cls) -> type:
        return int

    @classmethod
    def __parse_property_value__(cls, prop: Property, mode: ParseMode) -> int:
        """Parse a rfc5545 int value."""
        try:
            return int(prop.value.strip())
        except ValueError as err:
            raise CalendarParseError(
                f"Expected an integer value for {prop.name}",
                detailed_error=prop.value,
            ) from err

    @classmethod
    def __encode_property_value__(cls, value: int) -> str:
        return str(value)

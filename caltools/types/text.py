"""TEXT values.

Line breaks are already converted by the line framer, so only the escaped
backslash, semicolon and comma are handled here.
"""

import re

from caltools.parsing.const import ParseMode
from caltools.parsing.property import Property

from .data_types import DATA_TYPE

UNESCAPE_RE = re.compile(r"\\([\\;,])")
ESCAPE_RE = re.compile(r"([\\;,])")


@DATA_TYPE.register("TEXT")
class TextEncoder:
    """Codec for TEXT, the type of plain `str` fields."""

    @classmethod
    def __property_type__(cls) -> type:
        return str

    @classmethod
    def __parse_property_value__(cls, prop: Property, mode: ParseMode) -> str:
        return UNESCAPE_RE.sub(r"\1", prop.value)

    @classmethod
    def __encode_property_value__(cls, value: str) -> str:
        return ESCAPE_RE.sub(r"\\\1", value)

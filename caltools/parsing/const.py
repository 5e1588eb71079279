"""Constants for caltools parsing library."""

import enum

# Related to rfc5545 text parsing
CRLF = "\r\n"
FOLD_LEN = 75
FOLD_INDENT = " "
WSP = (" ", "\t")
ATTR_BEGIN = "BEGIN"
ATTR_END = "END"
ATTR_VALUE = "VALUE"


class ParseMode(str, enum.Enum):
    """Validation strictness used by every parser in the library."""

    STRICT = "strict"
    """Every violation of the rfc5545 grammar or structure is reported."""

    LOOSE = "loose"
    """Non-conforming input is tolerated when it can be recovered."""

    @property
    def strict(self) -> bool:
        """Return True when the mode is strict."""
        return self is ParseMode.STRICT

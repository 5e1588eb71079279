"""Tests for PERIOD data types."""

import pytest

from caltools.exceptions import CalendarParseError
from caltools.parsing.const import ParseMode
from caltools.parsing.property import Attribute, Property
from caltools.types import DateValue, Duration, FreeBusyType, Period
from caltools.types.data_types import DATA_TYPE


def test_period_with_end() -> None:
    """Test a period with an explicit end."""
    period = Period.parse("19970101T180000Z/19970102T070000Z")
    assert period.start == DateValue.of_datetime(1997, 1, 1, 18, utc=True)
    assert period.end == DateValue.of_datetime(1997, 1, 2, 7, utc=True)
    assert period.duration is None
    assert period.end_value == period.end


def test_period_with_duration() -> None:
    """Test a period with a duration computes the end."""
    period = Period.parse("19970101T180000Z/PT5H30M")
    assert period.end is None
    assert period.duration == Duration(5 * 3600 + 30 * 60)
    assert period.end_value == DateValue.of_datetime(1997, 1, 1, 23, 30, utc=True)


def test_free_busy_type() -> None:
    """Test the FBTYPE attribute is decoded and encoded."""
    prop = Property.from_ics(
        "FREEBUSY;FBTYPE=BUSY-TENTATIVE:19970308T160000Z/PT3H"
    )
    period = DATA_TYPE.parse_parameter_by_name["PERIOD"](prop, ParseMode.STRICT)
    assert period.free_busy_type == FreeBusyType.BUSY_TENTATIVE
    assert DATA_TYPE.encode_property_value[Period](period) == "19970308T160000Z/PT3H"
    assert DATA_TYPE.encode_property_params[Period](period) == [
        Attribute("FBTYPE", "BUSY-TENTATIVE")
    ]


@pytest.mark.parametrize(
    "value",
    [
        "19970101T180000Z",
        "19970101T180000Z/PT5H/PT1H",
        "19970101T180000Z/bogus",
    ],
)
def test_invalid_period(value: str) -> None:
    """Test malformed periods."""
    with pytest.raises(CalendarParseError):
        Period.parse(value)

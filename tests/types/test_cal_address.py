"""Tests for CAL-ADDRESS data types."""

from caltools.parsing.const import ParseMode
from caltools.parsing.property import Attribute, Property
from caltools.types import CalAddress, ParticipationStatus, Role
from caltools.types.data_types import DATA_TYPE


def test_attendee() -> None:
    """Test decoding a calendar user address with parameters."""
    prop = Property.from_ics(
        'ATTENDEE;CN="Doe, Jane";ROLE=REQ-PARTICIPANT;PARTSTAT=ACCEPTED;'
        "RSVP=TRUE;X-CUSTOM=1:mailto:jane@example.com"
    )
    address = DATA_TYPE.parse_property_value[CalAddress](prop, ParseMode.LOOSE)
    assert address.uri == "mailto:jane@example.com"
    assert address.common_name == "Doe, Jane"
    assert address.role == Role.REQUIRED
    assert address.status == ParticipationStatus.ACCEPTED
    assert address.rsvp is True
    assert address.sent_by is None


def test_encode_attendee() -> None:
    """Test the address parameters are encoded as attributes."""
    address = CalAddress(uri="mailto:a@example.com", common_name="A", rsvp=False)
    assert DATA_TYPE.encode_property_value[CalAddress](address) == (
        "mailto:a@example.com"
    )
    assert DATA_TYPE.encode_property_params[CalAddress](address) == [
        Attribute("CN", "A"),
        Attribute("RSVP", "FALSE"),
    ]

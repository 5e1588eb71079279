"""Test fixtures."""

from collections.abc import Generator
import datetime
from unittest.mock import patch

import pytest

PRODID = "-//example//1.2.3"
DTSTAMP = datetime.datetime(2024, 1, 1, 12, 0, 0, tzinfo=datetime.UTC)


@pytest.fixture(autouse=True)
def mock_prodid() -> Generator[None, None, None]:
    """Mock out the prodid used in tests."""
    with patch("caltools.store.prodid_factory", return_value=PRODID):
        yield


@pytest.fixture(autouse=True)
def mock_dtstamp() -> Generator[None, None, None]:
    """Mock out the dtstamp used in tests."""
    with patch("caltools.event.dtstamp_factory", return_value=DTSTAMP), patch(
        "caltools.todo.dtstamp_factory", return_value=DTSTAMP
    ), patch("caltools.journal.dtstamp_factory", return_value=DTSTAMP), patch(
        "caltools.freebusy.dtstamp_factory", return_value=DTSTAMP
    ):
        yield


@pytest.fixture(name="_uid", autouse=True)
def mock_uid() -> Generator[None, None, None]:
    """Patch out uuid creation with a fixed value."""
    counter = 0

    def func() -> str:
        nonlocal counter
        counter += 1
        return f"mock-uid-{counter}"

    with patch("caltools.event.uid_factory", new=func), patch(
        "caltools.todo.uid_factory", new=func
    ), patch("caltools.journal.uid_factory", new=func):
        yield

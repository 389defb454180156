import pytest
from finid_core.clock import ManualClock
from finid_core.storage import InMemoryStorage


@pytest.fixture
def clock():
    return ManualClock(100)


@pytest.fixture
def store():
    return InMemoryStorage()

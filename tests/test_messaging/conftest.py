import itertools

import pytest

from bandconnect.messaging.quick_responses import QuickResponseRegistry
from bandconnect.messaging.store import MessageStore


@pytest.fixture
def clock():
    """Deterministic clock: 1000, 2000, 3000, ... ms."""
    ticks = itertools.count(start=1000, step=1000)
    return lambda: next(ticks)


@pytest.fixture
def store(clock):
    return MessageStore(clock=clock)


@pytest.fixture
def registry():
    return QuickResponseRegistry()

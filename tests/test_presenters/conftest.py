import itertools

import pytest

from bandconnect.container import AppContainer
from bandconnect.messaging.models import now_ms
from bandconnect.users.models import User


@pytest.fixture
def container():
    ticks = itertools.count(start=now_ms(), step=1000)
    app = AppContainer.with_sample_data(clock=lambda: next(ticks))
    app.users.add_user(User("fan", "fan@example.com", "A Fan", id="fan1"))
    return app

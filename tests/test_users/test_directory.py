"""Tests for the user directory."""

import pytest

from bandconnect.exceptions import UserNotFoundError
from bandconnect.users.directory import UserDirectory, sample_band_members
from bandconnect.users.models import User, UserRole


@pytest.fixture
def directory():
    return UserDirectory([
        User("fan1", "fan@example.com", "Fan One", id="f1"),
        User("drummer", "drums@example.com", "Drummer", id="b1", role=UserRole.BAND_MEMBER),
    ])


def test_band_members_filter(directory):
    members = directory.get_band_members().value
    assert [u.id for u in members] == ["b1"]


def test_get_band_member_by_id_live(directory):
    view = directory.get_band_member_by_id("b2")
    assert view.value is None
    directory.add_user(User("singer", "sing@example.com", "Singer", id="b2", role=UserRole.BAND_MEMBER))
    assert view.value.name == "Singer"


def test_add_user_replaces_by_id(directory):
    directory.add_user(User("fan1", "fan@example.com", "Renamed", id="f1"))
    assert directory.get_user("f1").name == "Renamed"
    assert len(directory.users.value) == 2


def test_set_current_user(directory):
    user = directory.set_current_user("f1")
    assert directory.current_user.value == user
    directory.set_current_user(None)
    assert directory.current_user.value is None


def test_set_current_user_unknown(directory):
    with pytest.raises(UserNotFoundError):
        directory.set_current_user("nobody")


def test_current_user_refreshed_on_update(directory):
    directory.set_current_user("f1")
    directory.add_user(User("fan1", "fan@example.com", "New Name", id="f1"))
    assert directory.current_user.value.name == "New Name"


def test_is_online_window():
    directory = UserDirectory(online_window_seconds=300)
    user = User("x", "x@example.com", "X", last_active=1_000_000)
    assert directory.is_online(user, now=1_000_000 + 299_000)
    assert not directory.is_online(user, now=1_000_000 + 300_000)


def test_online_window_from_env(monkeypatch):
    import importlib
    import bandconnect.users.directory as directory_module

    monkeypatch.setenv("BANDCONNECT_ONLINE_WINDOW_SECONDS", "60")
    reloaded = importlib.reload(directory_module)
    try:
        assert reloaded.ONLINE_WINDOW_SECONDS == 60
        assert reloaded.UserDirectory().online_window_seconds == 60
    finally:
        monkeypatch.delenv("BANDCONNECT_ONLINE_WINDOW_SECONDS")
        importlib.reload(directory_module)


def test_touch_updates_last_active(directory):
    directory.touch("b1", now=123)
    assert directory.get_user("b1").last_active == 123
    with pytest.raises(UserNotFoundError):
        directory.touch("nobody")


def test_sample_band_members():
    members = sample_band_members()
    assert [u.id for u in members] == ["user1", "user2", "user3", "user4"]
    assert all(u.is_band_member for u in members)

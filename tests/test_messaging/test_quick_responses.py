"""Tests for the quick response registry."""

import asyncio

import pytest

from bandconnect.exceptions import InvalidInputError
from bandconnect.messaging.quick_responses import QuickResponseRegistry, sample_quick_responses


def test_add_then_fetch_then_delete(registry):
    response = registry.add_quick_response("u1", "Thanks!", "General")
    view = registry.get_quick_responses_for_band_member("u1")
    assert view.value == [response]
    assert response.content == "Thanks!"
    assert response.category == "General"

    registry.delete_quick_response(response.id)
    assert view.value == []


@pytest.mark.parametrize("content", ["", "   "])
def test_blank_content_rejected(registry, content):
    with pytest.raises(InvalidInputError):
        registry.add_quick_response("u1", content, "General")
    assert registry.responses.value == ()


def test_delete_unknown_is_noop(registry):
    registry.add_quick_response("u1", "Hi", "General")
    before = registry.responses.value
    registry.delete_quick_response("missing")
    registry.delete_quick_response("missing")
    assert registry.responses.value is before


def test_view_is_scoped_and_live(registry):
    received = []
    registry.get_quick_responses_for_band_member("u2").subscribe(
        lambda responses: received.append([r.content for r in responses])
    )
    registry.add_quick_response("u1", "not mine", "General")
    registry.add_quick_response("u2", "mine", "Music")
    assert received == [[], [], ["mine"]]


def test_sample_seed():
    registry = QuickResponseRegistry(sample_quick_responses())
    assert len(registry.get_quick_responses_for_band_member("user1").value) == 2
    assert len(registry.responses.value) == 5


def test_async_wrappers(registry):
    async def run():
        response = await registry.aadd_quick_response("u1", "Rock on", "Feedback")
        await registry.adelete_quick_response(response.id)

    asyncio.run(run())
    assert registry.responses.value == ()

"""Canned replies owned by band members."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from bandconnect.exceptions import InvalidInputError
from bandconnect.messaging.models import QuickResponse
from bandconnect.streams import DerivedStream, StateStream

logger = logging.getLogger(__name__)


def sample_quick_responses() -> list[QuickResponse]:
    """Demo replies for the seeded band members."""
    return [
        QuickResponse("user1", "Thanks for reaching out! I appreciate your support.", "General"),
        QuickResponse("user1", "We'll be in your city soon! Keep an eye on our tour dates.", "Events"),
        QuickResponse("user2", "I'm glad you enjoyed our latest album!", "Music"),
        QuickResponse("user3", "That's awesome to hear! Rock on!", "Feedback"),
        QuickResponse("user4", "I'm working on new music right now - can't wait to share it!", "Updates"),
    ]


class QuickResponseRegistry:
    """Create, delete and observe quick responses."""

    def __init__(self, responses: Iterable[QuickResponse] = ()):
        self._responses: StateStream[tuple[QuickResponse, ...]] = StateStream(tuple(responses))

    @property
    def responses(self) -> StateStream[tuple[QuickResponse, ...]]:
        return self._responses

    def get_quick_responses_for_band_member(self, band_member_id: str) -> DerivedStream[list[QuickResponse]]:
        return self._responses.map(
            lambda responses: [r for r in responses if r.band_member_id == band_member_id]
        )

    def add_quick_response(self, band_member_id: str, content: str, category: str) -> QuickResponse:
        """Register a reply. Blank content is rejected and nothing is stored."""
        if not content or not content.strip():
            raise InvalidInputError("Quick response content must not be blank")
        if not band_member_id:
            raise InvalidInputError("band_member_id is required")

        response = QuickResponse(band_member_id=band_member_id, content=content, category=category)
        self._responses.update(lambda responses: responses + (response,))
        return response

    def delete_quick_response(self, response_id: str) -> None:
        """Remove a reply by id. Unknown ids are ignored."""
        if not any(r.id == response_id for r in self._responses.value):
            logger.debug(f"delete_quick_response: no response {response_id}")
            return
        self._responses.update(
            lambda responses: tuple(r for r in responses if r.id != response_id)
        )

    # ---- Async wrappers (asyncio.to_thread) ----

    async def aadd_quick_response(self, band_member_id: str, content: str, category: str) -> QuickResponse:
        """Async version of add_quick_response."""
        return await asyncio.to_thread(self.add_quick_response, band_member_id, content, category)

    async def adelete_quick_response(self, response_id: str) -> None:
        """Async version of delete_quick_response."""
        return await asyncio.to_thread(self.delete_quick_response, response_id)

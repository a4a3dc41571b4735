"""Abstract base class for the AI ranking tier.

The AI tier is optional.  When no language model is configured the
application injects :class:`~src.services.ai_ranker.NullConcertRanker`
instead of checking an "AI enabled" flag throughout the core.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.event import Event
from src.models.recommendation import Recommendation
from src.models.taste import ArtistProfile


class IConcertRanker(ABC):
    """Contract for ranking candidate events against a listener's taste."""

    @abstractmethod
    async def rank(
        self,
        top_artists: list[ArtistProfile],
        events: list[Event],
    ) -> list[Recommendation]:
        """Return ``ai_match`` recommendations for *events*.

        Must never raise; any failure yields an empty list.
        """

    @abstractmethod
    def is_enabled(self) -> bool:
        """Return ``True`` if this ranker can actually produce matches."""

"""Recommendation models for the concert-matching pipeline.

A :class:`Recommendation` is a tagged union over the three matching
strategies.  Every variant carries the same ``confidence`` field, so the
merger can rank them without knowing which strategy produced them:

    direct_match      -- a top artist is on the lineup (0.95)
    ai_match          -- the language model picked the event (model-assigned)
    similarity_match  -- a similar artist of a top artist is on the lineup (0.7)

``event`` holds the same :class:`~src.models.event.Event` instance that
the aggregator produced; pydantic does not revalidate model instances, so
the reference is shared rather than copied.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.models.event import AggregationResult, Event
from src.models.taste import ArtistProfile


class RecommendationType(str, Enum):
    """Which matching strategy produced a recommendation."""

    DIRECT_MATCH = "direct_match"
    AI_MATCH = "ai_match"
    SIMILARITY_MATCH = "similarity_match"


class Recommendation(BaseModel):
    """A single concert recommendation with provenance."""

    model_config = ConfigDict(frozen=True)

    type: RecommendationType
    event: Event
    reason: str
    confidence: float = Field(ge=0.0, le=1.0)
    # The listened (or similar) artist found on the lineup.
    match_artist: str | None = None
    # For similarity matches: the top artist the similar artist came from.
    based_on: str | None = None


class SearchOutcome(str, Enum):
    """Lets the caller tell "nothing on" apart from "nothing for you"."""

    MATCHES_FOUND = "matches_found"
    NO_MATCHES = "no_matches"
    NO_EVENTS = "no_events"


class ConcertRecommendationReport(BaseModel):
    """Everything the HTTP layer needs to answer one recommendation request."""

    model_config = ConfigDict(frozen=True)

    location: str
    start_date: str
    end_date: str
    recommendations: list[Recommendation] = Field(default_factory=list)
    user_top_artists: list[ArtistProfile] = Field(default_factory=list)
    ai_enabled: bool = False
    aggregation: AggregationResult

    @property
    def total_concerts_found(self) -> int:
        return len(self.aggregation.events)

    @property
    def outcome(self) -> SearchOutcome:
        if self.recommendations:
            return SearchOutcome.MATCHES_FOUND
        if self.aggregation.events:
            return SearchOutcome.NO_MATCHES
        return SearchOutcome.NO_EVENTS

"""gigScout domain models — re-exports all public model classes.

The models are organized across three submodules by domain concern:
    - event.py          — Canonical Event, provider run results, aggregation output
    - taste.py          — Listener taste profile (top artists, similar artists)
    - recommendation.py — Recommendation tagged union and the per-request report
"""

from __future__ import annotations

from src.models.event import (
    AggregationResult,
    Event,
    EventCategory,
    ProviderFetchResult,
    ProviderRunResult,
)
from src.models.recommendation import (
    ConcertRecommendationReport,
    Recommendation,
    RecommendationType,
    SearchOutcome,
)
from src.models.taste import ArtistProfile, SimilarArtist

__all__ = [
    # event
    "AggregationResult",
    "Event",
    "EventCategory",
    "ProviderFetchResult",
    "ProviderRunResult",
    # taste
    "ArtistProfile",
    "SimilarArtist",
    # recommendation
    "ConcertRecommendationReport",
    "Recommendation",
    "RecommendationType",
    "SearchOutcome",
]

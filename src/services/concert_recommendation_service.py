"""Top-level recommendation pipeline for one search request.

    validate input
        -> top artists          (taste profile; failure fails the request)
        -> event aggregation    (all providers, partial failure tolerated)
        -> direct matches
        -> AI ranking  ||  similarity matching   (run concurrently)
        -> merge, dedupe, rank, cap

Every step after the top-artist lookup degrades instead of raising, so a
request that gets past validation and the taste lookup always produces a
report, possibly with zero recommendations.
"""

from __future__ import annotations

import datetime as dt

from src.interfaces.concert_ranker import IConcertRanker
from src.interfaces.event_provider import IEventProvider
from src.interfaces.taste_profile_provider import ITasteProfileProvider
from src.models.event import AggregationResult
from src.models.recommendation import ConcertRecommendationReport
from src.services.event_aggregator import EventAggregator
from src.services.recommendation_merger import MAX_RECOMMENDATIONS, merge_recommendations
from src.services.similarity_matcher import SimilarityMatcher
from src.services.taste_matcher import direct_matches
from src.utils.concurrency import gather_settled
from src.utils.errors import InvalidSearchError
from src.utils.logging import bind_search_context, clear_search_context, get_logger

_TOP_ARTIST_FETCH_LIMIT = 20


def parse_search_date(value: str, field_name: str) -> dt.date:
    """Parse a ``YYYY-MM-DD`` search bound, raising InvalidSearchError otherwise."""
    try:
        return dt.date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as exc:
        raise InvalidSearchError(
            message=f"{field_name} must be a date in YYYY-MM-DD format, got {value!r}"
        ) from exc


def validate_search(location: str, start_date: str, end_date: str) -> tuple[str, str, str]:
    """Normalize and check search parameters before any provider is contacted.

    Returns the stripped location and the ISO-formatted dates.
    """
    if not location or not location.strip():
        raise InvalidSearchError(message="location is required")
    start = parse_search_date(start_date, "startDate")
    end = parse_search_date(end_date, "endDate")
    if start > end:
        raise InvalidSearchError(message="startDate must not be after endDate")
    return location.strip(), start.isoformat(), end.isoformat()


class ConcertRecommendationService:
    """Runs the full recommendation pipeline for a user and a trip."""

    def __init__(
        self,
        aggregator: EventAggregator,
        taste_provider: ITasteProfileProvider,
        ranker: IConcertRanker,
        similarity_matcher: SimilarityMatcher,
        max_recommendations: int = MAX_RECOMMENDATIONS,
        display_top_artists: int = 5,
    ) -> None:
        self._aggregator = aggregator
        self._taste = taste_provider
        self._ranker = ranker
        self._similarity = similarity_matcher
        self._max_recommendations = max_recommendations
        self._display_top_artists = display_top_artists
        self._logger = get_logger(__name__)

    @property
    def ai_enabled(self) -> bool:
        return self._ranker.is_enabled()

    @property
    def event_providers(self) -> list[IEventProvider]:
        return self._aggregator.providers

    async def search_events(
        self,
        location: str,
        start_date: str,
        end_date: str,
    ) -> AggregationResult:
        """Aggregate events for a trip without any taste matching."""
        location, start_date, end_date = validate_search(location, start_date, end_date)
        return await self._aggregator.search(location, start_date, end_date)

    async def find_concerts(
        self,
        user_id: str,
        location: str,
        start_date: str,
        end_date: str,
    ) -> ConcertRecommendationReport:
        """Produce personalized concert recommendations for *user_id*.

        Raises
        ------
        InvalidSearchError
            If the user id, location or dates are unusable.
        src.utils.errors.TasteProfileError
            If the user's top artists cannot be fetched (including
            :class:`~src.utils.errors.UserNotAuthenticatedError`).
        """
        if not user_id or not user_id.strip():
            raise InvalidSearchError(message="userId is required")
        location, start_date, end_date = validate_search(location, start_date, end_date)

        bind_search_context(user_id=user_id, location=location)
        try:
            return await self._run(user_id, location, start_date, end_date)
        finally:
            clear_search_context()

    async def _run(
        self,
        user_id: str,
        location: str,
        start_date: str,
        end_date: str,
    ) -> ConcertRecommendationReport:
        top_artists = await self._taste.get_top_artists(user_id, limit=_TOP_ARTIST_FETCH_LIMIT)
        aggregation = await self._aggregator.search(location, start_date, end_date)
        events = aggregation.events

        direct = direct_matches(top_artists, events)
        matched_names = {rec.event.name for rec in direct}

        ai, similar = await gather_settled(
            [
                self._ranker.rank(top_artists, events),
                self._similarity.match(user_id, top_artists, events, matched_names),
            ],
            fallback=lambda idx, exc: [],
            logger=self._logger,
            error_msg="matching_tier_failed",
        )

        recommendations = merge_recommendations(
            direct, ai, similar, limit=self._max_recommendations
        )

        self._logger.info(
            "concert_search_complete",
            top_artists=len(top_artists),
            events=len(events),
            direct=len(direct),
            ai=len(ai),
            similarity=len(similar),
            recommendations=len(recommendations),
        )
        return ConcertRecommendationReport(
            location=location,
            start_date=start_date,
            end_date=end_date,
            recommendations=recommendations,
            user_top_artists=top_artists[: self._display_top_artists],
            ai_enabled=self._ranker.is_enabled(),
            aggregation=aggregation,
        )

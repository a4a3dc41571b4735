"""Unit tests for ConcertRecommendationService, the end-to-end pipeline."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from src.models.recommendation import RecommendationType, SearchOutcome
from src.services.ai_ranker import LLMConcertRanker, NullConcertRanker
from src.services.concert_recommendation_service import (
    ConcertRecommendationService,
    parse_search_date,
    validate_search,
)
from src.services.event_aggregator import EventAggregator
from src.services.similarity_matcher import SimilarityMatcher
from src.utils.errors import InvalidSearchError, TasteProfileError, UserNotAuthenticatedError
from tests.conftest import FakeEventProvider, make_event, make_similar

START, END = "2025-06-01", "2025-06-07"


def _service(providers, taste, ranker=None) -> ConcertRecommendationService:
    return ConcertRecommendationService(
        aggregator=EventAggregator(providers),
        taste_provider=taste,
        ranker=ranker or NullConcertRanker(),
        similarity_matcher=SimilarityMatcher(taste),
    )


class TestValidation:
    def test_strips_location_and_normalizes_dates(self) -> None:
        assert validate_search("  Berlin ", " 2025-06-01", "2025-06-07 ") == (
            "Berlin",
            "2025-06-01",
            "2025-06-07",
        )

    def test_single_day_trip_is_valid(self) -> None:
        assert validate_search("Berlin", START, START)[1:] == (START, START)

    @pytest.mark.parametrize("location", ["", "   "])
    def test_blank_location(self, location: str) -> None:
        with pytest.raises(InvalidSearchError, match="location is required"):
            validate_search(location, START, END)

    def test_malformed_date(self) -> None:
        with pytest.raises(InvalidSearchError, match="startDate"):
            validate_search("Berlin", "06/01/2025", END)

    def test_start_after_end(self) -> None:
        with pytest.raises(InvalidSearchError, match="must not be after"):
            validate_search("Berlin", END, START)

    def test_parse_search_date_rejects_impossible_date(self) -> None:
        with pytest.raises(InvalidSearchError):
            parse_search_date("2025-02-30", "endDate")


class TestFindConcerts:
    @pytest.mark.asyncio
    async def test_direct_and_similarity_matches(self, mock_taste) -> None:
        mock_taste.get_similar_artists = AsyncMock(return_value=make_similar("Arca"))
        provider = FakeEventProvider(
            "ticketmaster",
            [
                make_event(name="Radiohead Live", artists=["Radiohead"], date="2025-06-03"),
                make_event(name="Arca DJ", artists=["Arca"], date="2025-06-02"),
                make_event(name="Polka Night", artists=["Polka Band"], date="2025-06-04"),
            ],
        )

        report = await _service([provider], mock_taste).find_concerts(
            "alice", "Berlin", START, END
        )

        assert [r.type for r in report.recommendations] == [
            RecommendationType.DIRECT_MATCH,
            RecommendationType.SIMILARITY_MATCH,
        ]
        assert report.recommendations[0].event.name == "Radiohead Live"
        assert report.total_concerts_found == 3
        assert report.outcome == SearchOutcome.MATCHES_FOUND
        assert len(report.user_top_artists) == 5
        assert report.ai_enabled is False
        mock_taste.get_top_artists.assert_awaited_once_with("alice", limit=20)

    @pytest.mark.asyncio
    async def test_direct_match_excludes_event_from_similarity(self, mock_taste) -> None:
        mock_taste.get_similar_artists = AsyncMock(return_value=make_similar("Thom Yorke"))
        provider = FakeEventProvider(
            "ticketmaster",
            [make_event(name="Radiohead + Thom Yorke", artists=["Radiohead", "Thom Yorke"])],
        )

        report = await _service([provider], mock_taste).find_concerts(
            "alice", "Berlin", START, END
        )

        (rec,) = report.recommendations
        assert rec.type == RecommendationType.DIRECT_MATCH

    @pytest.mark.asyncio
    async def test_ai_tier_included_when_enabled(self, mock_taste, mock_llm) -> None:
        mock_llm.complete = AsyncMock(
            return_value=json.dumps(
                [{"concertName": "Jazz Brunch", "reason": "Warm and moody.", "confidence": 0.8}]
            )
        )
        provider = FakeEventProvider(
            "bandsintown", [make_event(name="Jazz Brunch", artists=["Trio"])]
        )

        report = await _service(
            [provider], mock_taste, ranker=LLMConcertRanker(mock_llm)
        ).find_concerts("alice", "Berlin", START, END)

        (rec,) = report.recommendations
        assert rec.type == RecommendationType.AI_MATCH
        assert report.ai_enabled is True

    @pytest.mark.asyncio
    async def test_no_events_outcome(self, mock_taste) -> None:
        report = await _service([FakeEventProvider("nts")], mock_taste).find_concerts(
            "alice", "Berlin", START, END
        )

        assert report.recommendations == []
        assert report.outcome == SearchOutcome.NO_EVENTS

    @pytest.mark.asyncio
    async def test_no_matches_outcome(self, mock_taste) -> None:
        provider = FakeEventProvider("nts", [make_event(name="Polka Night", artists=["Polka Band"])])

        report = await _service([provider], mock_taste).find_concerts(
            "alice", "Berlin", START, END
        )

        assert report.outcome == SearchOutcome.NO_MATCHES
        assert report.total_concerts_found == 1

    @pytest.mark.asyncio
    async def test_crashing_tier_degrades_to_empty(self, mock_taste, mock_llm) -> None:
        mock_llm.complete = AsyncMock(side_effect=RuntimeError("unexpected"))
        provider = FakeEventProvider("tm", [make_event(name="Burial", artists=["Burial"])])

        report = await _service(
            [provider], mock_taste, ranker=LLMConcertRanker(mock_llm)
        ).find_concerts("alice", "Berlin", START, END)

        assert [r.type for r in report.recommendations] == [RecommendationType.DIRECT_MATCH]

    @pytest.mark.asyncio
    async def test_unauthenticated_user_propagates(self, mock_taste) -> None:
        mock_taste.get_top_artists = AsyncMock(side_effect=UserNotAuthenticatedError())
        provider = FakeEventProvider("tm")

        with pytest.raises(UserNotAuthenticatedError):
            await _service([provider], mock_taste).find_concerts("bob", "Berlin", START, END)
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_taste_failure_propagates(self, mock_taste) -> None:
        mock_taste.get_top_artists = AsyncMock(side_effect=TasteProfileError("HTTP 503"))

        with pytest.raises(TasteProfileError):
            await _service([FakeEventProvider("tm")], mock_taste).find_concerts(
                "bob", "Berlin", START, END
            )

    @pytest.mark.asyncio
    async def test_invalid_input_contacts_nobody(self, mock_taste) -> None:
        provider = FakeEventProvider("tm")

        with pytest.raises(InvalidSearchError):
            await _service([provider], mock_taste).find_concerts("alice", "Berlin", END, START)
        with pytest.raises(InvalidSearchError, match="userId"):
            await _service([provider], mock_taste).find_concerts("", "Berlin", START, END)

        mock_taste.get_top_artists.assert_not_called()
        assert provider.calls == []


class TestSearchEvents:
    @pytest.mark.asyncio
    async def test_returns_aggregation(self, mock_taste) -> None:
        provider = FakeEventProvider("tm", [make_event(name="A"), make_event(name="a")])

        result = await _service([provider], mock_taste).search_events(" Berlin ", START, END)

        assert len(result.events) == 1
        assert provider.calls == [("Berlin", START, END)]
        mock_taste.get_top_artists.assert_not_called()

    def test_exposes_providers_and_ai_flag(self, mock_taste) -> None:
        service = _service([FakeEventProvider("tm")], mock_taste)

        assert [p.get_provider_name() for p in service.event_providers] == ["tm"]
        assert service.ai_enabled is False

"""Pydantic request/response schemas for the gigScout API.

Defines the public contract for the REST endpoints: personalized concert
search, plain event search, health and provider listing.

# ─── HOW SCHEMAS WORK ─────────────────────────────────────────────────
#
# Field names are snake_case in Python and camelCase on the wire
# (``start_date`` <-> ``startDate``) through ``alias_generator``.
# ``populate_by_name`` lets code build instances with the Python names,
# and FastAPI serializes responses by alias.
#
# Convention: Request schemas end with "Request", response schemas
# end with "Response".  The ``from_*`` classmethods translate domain
# models into wire schemas so routes stay thin.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.models.event import AggregationResult, Event, ProviderRunResult
from src.models.recommendation import ConcertRecommendationReport, Recommendation
from src.models.taste import ArtistProfile


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class FindConcertsRequest(_CamelModel):
    """Trip details for a personalized concert search.

    Dates are validated by the service (ISO ``YYYY-MM-DD``, start not after
    end) so the CLI and the API reject the same inputs the same way.
    """

    user_id: str = Field(min_length=1, description="Id of a user with a stored access token.")
    location: str = Field(min_length=1, description="City to search, e.g. 'Berlin'.")
    start_date: str = Field(min_length=1, description="First day of the trip, YYYY-MM-DD.")
    end_date: str = Field(min_length=1, description="Last day of the trip, YYYY-MM-DD.")


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------


class ConcertSchema(_CamelModel):
    name: str
    date: str
    venue: str
    city: str
    artists: list[str]
    source: str
    url: str | None = None
    category: str | None = None

    @classmethod
    def from_event(cls, event: Event) -> ConcertSchema:
        return cls(
            name=event.name,
            date=event.date.isoformat(),
            venue=event.venue,
            city=event.city,
            artists=list(event.artists),
            source=event.source,
            url=event.url,
            category=event.category.value if event.category else None,
        )


class RecommendationSchema(_CamelModel):
    type: str
    concert: ConcertSchema
    reason: str
    confidence: float
    match_artist: str | None = None
    based_on: str | None = None

    @classmethod
    def from_recommendation(cls, rec: Recommendation) -> RecommendationSchema:
        return cls(
            type=rec.type.value,
            concert=ConcertSchema.from_event(rec.event),
            reason=rec.reason,
            confidence=rec.confidence,
            match_artist=rec.match_artist,
            based_on=rec.based_on,
        )


class ArtistSchema(_CamelModel):
    name: str
    genres: list[str] = Field(default_factory=list)
    popularity: int = 0

    @classmethod
    def from_profile(cls, artist: ArtistProfile) -> ArtistSchema:
        return cls(name=artist.name, genres=list(artist.genres), popularity=artist.popularity)


class DateRange(_CamelModel):
    start: str
    end: str


class ProviderResultSchema(_CamelModel):
    """One provider's entry in the diagnostics map."""

    success: bool
    count: int
    error: str | None = None

    @classmethod
    def from_result(cls, result: ProviderRunResult) -> ProviderResultSchema:
        return cls(success=result.success, count=result.count, error=result.error)


class SearchParams(_CamelModel):
    location: str
    start_date: str
    end_date: str


class DebugInfo(_CamelModel):
    """Per-provider diagnostics; returned only when requested."""

    search_params: SearchParams
    api_results: dict[str, ProviderResultSchema]
    total_found: int
    after_dedup: int

    @classmethod
    def from_aggregation(
        cls,
        aggregation: AggregationResult,
        location: str,
        start_date: str,
        end_date: str,
    ) -> DebugInfo:
        return cls(
            search_params=SearchParams(location=location, start_date=start_date, end_date=end_date),
            api_results={
                name: ProviderResultSchema.from_result(result)
                for name, result in aggregation.diagnostics.items()
            },
            total_found=aggregation.total_found,
            after_dedup=len(aggregation.events),
        )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class FindConcertsResponse(_CamelModel):
    """Personalized recommendations for one trip."""

    location: str
    date_range: DateRange
    total_concerts_found: int
    recommendations: list[RecommendationSchema] = Field(default_factory=list)
    user_top_artists: list[ArtistSchema] = Field(default_factory=list)
    ai_enabled: bool
    outcome: str
    debug: DebugInfo | None = None

    @classmethod
    def from_report(
        cls,
        report: ConcertRecommendationReport,
        include_debug: bool = False,
    ) -> FindConcertsResponse:
        debug = None
        if include_debug:
            debug = DebugInfo.from_aggregation(
                report.aggregation, report.location, report.start_date, report.end_date
            )
        return cls(
            location=report.location,
            date_range=DateRange(start=report.start_date, end=report.end_date),
            total_concerts_found=report.total_concerts_found,
            recommendations=[
                RecommendationSchema.from_recommendation(r) for r in report.recommendations
            ],
            user_top_artists=[ArtistSchema.from_profile(a) for a in report.user_top_artists],
            ai_enabled=report.ai_enabled,
            outcome=report.outcome.value,
            debug=debug,
        )


class EventSearchResponse(_CamelModel):
    """Aggregated events for a trip, without taste matching."""

    location: str
    date_range: DateRange
    total_concerts_found: int
    concerts: list[ConcertSchema] = Field(default_factory=list)
    api_results: dict[str, ProviderResultSchema] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ProvidersResponse(BaseModel):
    """List of configured service providers and their availability."""

    providers: list[dict[str, Any]]

"""FastAPI API routes for gigScout.

Service dependencies are resolved from ``app.state`` via FastAPI's
``Depends`` using the ``Annotated`` pattern; ``app.state`` is populated at
startup by ``_build_all`` in ``src/main.py``.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                   Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/concerts/find      POST    Personalized recommendations for a trip
# /api/v1/concerts/search    GET     Aggregated events for a trip, no matching
# /api/v1/health             GET     Health check + provider status
# /api/v1/providers          GET     List all configured providers
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.api.schemas import (
    ConcertSchema,
    DateRange,
    ErrorResponse,
    EventSearchResponse,
    FindConcertsRequest,
    FindConcertsResponse,
    HealthResponse,
    ProviderResultSchema,
    ProvidersResponse,
)
from src.config.settings import Settings
from src.services.concert_recommendation_service import ConcertRecommendationService
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _get_recommendation_service(request: Request) -> ConcertRecommendationService:
    return request.app.state.recommendation_service


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings


RecommendationServiceDep = Annotated[
    ConcertRecommendationService, Depends(_get_recommendation_service)
]
SettingsDep = Annotated[Settings, Depends(_get_settings)]


async def _within_deadline(awaitable: Any, settings: Settings, operation: str) -> Any:
    """Bound a whole request by ``request_deadline``; 504 when it runs out."""
    try:
        return await asyncio.wait_for(awaitable, timeout=settings.request_deadline)
    except asyncio.TimeoutError:
        _logger.error(
            "request_deadline_exceeded",
            operation=operation,
            deadline_s=settings.request_deadline,
        )
        raise HTTPException(
            status_code=504,
            detail=f"Search did not finish within {settings.request_deadline:g}s",
        ) from None


# ---------------------------------------------------------------------------
# Concert endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/concerts/find",
    response_model=FindConcertsResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
    summary="Find concerts matching the user's taste",
)
async def find_concerts(
    body: FindConcertsRequest,
    service: RecommendationServiceDep,
    settings: SettingsDep,
    debug: Annotated[bool, Query(description="Include per-provider diagnostics")] = False,
) -> FindConcertsResponse:
    """Return up to ten ranked concert recommendations for a trip.

    An empty ``recommendations`` list is a normal answer; ``outcome``
    says whether no events were found at all or none matched.
    """
    report = await _within_deadline(
        service.find_concerts(
            user_id=body.user_id,
            location=body.location,
            start_date=body.start_date,
            end_date=body.end_date,
        ),
        settings,
        "find_concerts",
    )
    return FindConcertsResponse.from_report(
        report,
        include_debug=debug or settings.expose_diagnostics,
    )


@router.get(
    "/concerts/search",
    response_model=EventSearchResponse,
    responses={400: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
    summary="List all events for a trip",
)
async def search_concerts(
    service: RecommendationServiceDep,
    settings: SettingsDep,
    location: Annotated[str, Query(min_length=1)],
    start_date: Annotated[str, Query(alias="startDate", min_length=1)],
    end_date: Annotated[str, Query(alias="endDate", min_length=1)],
) -> EventSearchResponse:
    """Aggregate every provider's events for a trip, deduplicated and date-sorted."""
    aggregation = await _within_deadline(
        service.search_events(location, start_date, end_date),
        settings,
        "search_concerts",
    )
    return EventSearchResponse(
        location=location.strip(),
        date_range=DateRange(start=start_date.strip(), end=end_date.strip()),
        total_concerts_found=len(aggregation.events),
        concerts=[ConcertSchema.from_event(e) for e in aggregation.events],
        api_results={
            name: ProviderResultSchema.from_result(result)
            for name, result in aggregation.diagnostics.items()
        },
    )


# ---------------------------------------------------------------------------
# Status endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability.

    The service is ``healthy`` when the taste profile and at least one
    event source are usable, ``degraded`` when no event source is.
    """
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    any_events = any(providers.get("event_sources", {}).values())
    status = "healthy" if any_events else "degraded"

    return HealthResponse(
        status=status,
        version=getattr(request.app.state, "version", "0.1.0"),
        providers=providers,
    )


@router.get(
    "/providers",
    response_model=ProvidersResponse,
    summary="List configured providers",
)
async def list_providers(request: Request) -> ProvidersResponse:
    """List all configured providers, their types, and availability status."""
    providers: list[dict[str, Any]] = []
    if hasattr(request.app.state, "provider_list"):
        providers = request.app.state.provider_list

    return ProvidersResponse(providers=providers)

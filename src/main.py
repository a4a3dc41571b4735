"""gigScout FastAPI application entry point.

Wires together all providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging.  ``build_service`` exposes the same wiring to the CLI.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.interfaces.concert_ranker import IConcertRanker
from src.interfaces.event_provider import IEventProvider
from src.interfaces.llm_provider import ILLMProvider
from src.providers.event import (
    BandsintownProvider,
    DiceProvider,
    EventbriteProvider,
    NTSProvider,
    ResidentAdvisorProvider,
    TicketmasterProvider,
)
from src.providers.llm.anthropic_provider import AnthropicLLMProvider
from src.providers.llm.openai_provider import OpenAILLMProvider
from src.providers.taste.spotify_provider import SpotifyTasteProfileProvider
from src.services.ai_ranker import LLMConcertRanker, NullConcertRanker
from src.services.concert_recommendation_service import ConcertRecommendationService
from src.services.event_aggregator import EventAggregator
from src.services.similarity_matcher import SimilarityMatcher
from src.utils.errors import ConfigurationError
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
    app_env=settings.app_env,
)
_logger: structlog.BoundLogger = get_logger(__name__)

# Adapter classes by the name used in EVENT_PROVIDERS.
EVENT_PROVIDER_CLASSES: dict[str, type] = {
    "ticketmaster": TicketmasterProvider,
    "bandsintown": BandsintownProvider,
    "eventbrite": EventbriteProvider,
    "resident_advisor": ResidentAdvisorProvider,
    "dice": DiceProvider,
    "nts": NTSProvider,
}


# ---------------------------------------------------------------------------
# Provider factories
# ---------------------------------------------------------------------------


def _build_event_providers(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
) -> list[IEventProvider]:
    """Instantiate the enabled event adapters in EVENT_PROVIDERS order.

    Adapters without their credential are still built; they report
    "API key not configured" in the diagnostics instead of disappearing.
    """
    providers: list[IEventProvider] = []
    for name in app_settings.event_providers:
        provider_cls = EVENT_PROVIDER_CLASSES.get(name)
        if provider_cls is None:
            raise ConfigurationError(
                message=f"Unknown event provider {name!r}; "
                f"expected one of {sorted(EVENT_PROVIDER_CLASSES)}",
            )
        providers.append(provider_cls(http_client=http_client, settings=app_settings))
    return providers


def _build_llm_provider(app_settings: Settings) -> ILLMProvider | None:
    """Select the first configured LLM provider.

    Priority order: OpenAI -> Anthropic.  Returns ``None`` when neither
    key is set.
    """
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    return None


def _build_concert_ranker(app_settings: Settings, matching: dict[str, Any]) -> IConcertRanker:
    """Return an LLM-backed ranker, or the no-op ranker when no LLM is configured."""
    llm = _build_llm_provider(app_settings)
    if llm is None:
        return NullConcertRanker()
    return LLMConcertRanker(
        llm_provider=llm,
        prompt_artists=matching["ai_prompt_artists"],
        prompt_events=matching["ai_prompt_events"],
        max_results=matching["ai_max_results"],
        min_confidence=matching["ai_min_confidence"],
    )


def build_service(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
    matching: dict[str, Any] | None = None,
) -> ConcertRecommendationService:
    """Assemble the recommendation service around a shared HTTP client."""
    matching = matching or load_config(settings=app_settings)["matching"]

    taste_provider = SpotifyTasteProfileProvider(
        http_client=http_client,
        settings=app_settings,
        token_resolver=app_settings.spotify_access_tokens.get,
    )
    return ConcertRecommendationService(
        aggregator=EventAggregator(_build_event_providers(app_settings, http_client)),
        taste_provider=taste_provider,
        ranker=_build_concert_ranker(app_settings, matching),
        similarity_matcher=SimilarityMatcher(
            taste_provider=taste_provider,
            seed_artists=matching["similarity_seed_artists"],
            similar_per_seed=matching["similar_artists_per_seed"],
        ),
        max_recommendations=matching["max_recommendations"],
        display_top_artists=matching["display_top_artists"],
    )


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    http_client = httpx.AsyncClient(timeout=app_settings.request_deadline)
    service = build_service(app_settings, http_client, app_config["matching"])
    event_providers = service.event_providers

    llm_names = app_settings.get_available_llm_providers()

    # -- Provider registry for /health --
    provider_registry: dict[str, Any] = {
        "event_sources": {p.get_provider_name(): p.is_available() for p in event_providers},
        "taste_profile": True,
        "llm": bool(llm_names),
    }

    # -- Provider list for /providers --
    provider_list: list[dict[str, Any]] = [
        {"name": p.get_provider_name(), "type": "event", "available": p.is_available()}
        for p in event_providers
    ]
    provider_list.append({"name": "spotify", "type": "taste_profile", "available": True})
    for name in llm_names:
        provider_list.append({"name": name, "type": "llm", "available": True})

    return {
        "http_client": http_client,
        "settings": app_settings,
        "recommendation_service": service,
        "provider_registry": provider_registry,
        "provider_list": provider_list,
        "version": app_config.get("app", {}).get("version", "0.1.0"),
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=components["version"],
        environment=settings.app_env,
        event_providers=list(components["provider_registry"]["event_sources"]),
        ai_enabled=components["recommendation_service"].ai_enabled,
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="gigScout API",
        version=config.get("app", {}).get("version", "0.1.0"),
        description=(
            "Find concerts on your trip that match your listening taste: "
            "events from several ticketing and listing sources, matched "
            "against your top artists, similar artists and an optional "
            "AI ranking pass."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )

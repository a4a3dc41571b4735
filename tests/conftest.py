"""Shared pytest fixtures for the gigScout test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.config.settings import Settings
from src.interfaces.event_provider import IEventProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.taste_profile_provider import ITasteProfileProvider
from src.models.event import Event, EventCategory, ProviderFetchResult, ProviderRunResult
from src.models.taste import ArtistProfile, SimilarArtist

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_settings(**overrides: Any) -> Settings:
    """Build Settings with no credentials, ignoring any local ``.env`` file."""
    defaults: dict[str, Any] = {
        "ticketmaster_api_key": "",
        "eventbrite_api_key": "",
        "dice_api_key": "",
        "openai_api_key": "",
        "openai_base_url": "",
        "openai_text_model": "",
        "anthropic_api_key": "",
        "anthropic_model": "",
        "spotify_access_tokens": {},
        "expose_diagnostics": False,
        "app_env": "test",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def make_event(
    name: str = "Warehouse Night",
    date: str = "2025-06-01",
    venue: str = "Tresor",
    artists: list[str] | None = None,
    city: str = "Berlin",
    source: str = "Ticketmaster",
    category: EventCategory | None = None,
) -> Event:
    return Event(
        name=name,
        date=date,
        venue=venue,
        city=city,
        artists=artists if artists is not None else [name],
        source=source,
        category=category,
    )


def make_similar(*names: str) -> list[SimilarArtist]:
    return [SimilarArtist(name=n, popularity=50) for n in names]


def json_response(payload: Any, status_code: int = 200, url: str = "https://example.test") -> httpx.Response:
    """An ``httpx.Response`` whose ``raise_for_status`` and ``json`` behave for real."""
    return httpx.Response(status_code, json=payload, request=httpx.Request("GET", url))


class FakeEventProvider(IEventProvider):
    """In-memory event source returning canned events or a canned failure."""

    def __init__(
        self,
        name: str,
        events: list[Event] | None = None,
        error: str | None = None,
        raises: BaseException | None = None,
    ) -> None:
        self._name = name
        self._events = events or []
        self._error = error
        self._raises = raises
        self.calls: list[tuple[str, str, str]] = []

    async def fetch(self, location: str, start_date: str, end_date: str) -> ProviderFetchResult:
        self.calls.append((location, start_date, end_date))
        if self._raises is not None:
            raise self._raises
        if self._error is not None:
            return ProviderFetchResult(
                provider=self._name,
                events=[],
                result=ProviderRunResult(success=False, count=0, error=self._error),
            )
        return ProviderFetchResult(
            provider=self._name,
            events=list(self._events),
            result=ProviderRunResult(success=True, count=len(self._events)),
        )

    def get_provider_name(self) -> str:
        return self._name

    def is_available(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def top_artists() -> list[ArtistProfile]:
    return [
        ArtistProfile(name="Björk", genres=["art pop"], popularity=72),
        ArtistProfile(name="Radiohead", genres=["alternative rock"], popularity=81),
        ArtistProfile(name="Aphex Twin", genres=["idm"], popularity=65),
        ArtistProfile(name="Burial", genres=["dubstep"], popularity=60),
        ArtistProfile(name="Four Tet", genres=["electronica"], popularity=63),
        ArtistProfile(name="Caribou", genres=["electronica"], popularity=62),
    ]


@pytest.fixture
def mock_llm() -> MagicMock:
    llm = MagicMock(spec=ILLMProvider)
    llm.complete = AsyncMock(return_value="[]")
    llm.get_provider_name.return_value = "openai"
    llm.is_available.return_value = True
    return llm


@pytest.fixture
def mock_taste(top_artists: list[ArtistProfile]) -> MagicMock:
    taste = MagicMock(spec=ITasteProfileProvider)
    taste.get_top_artists = AsyncMock(return_value=top_artists)
    taste.get_similar_artists = AsyncMock(return_value=[])
    taste.get_provider_name.return_value = "spotify"
    return taste

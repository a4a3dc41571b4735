"""Eventbrite adapter (general events, filtered to the Music category).

Eventbrite listings have no notion of a lineup, so the event title is the
only performer.  Venue details are requested inline via ``expand=venue``.
"""

from __future__ import annotations

from typing import Any

import httpx

from src.config.settings import Settings
from src.models.event import EventCategory
from src.providers.event.base import DEFAULT_VENUE, BaseEventProvider, dig, iso_date_part
from src.utils.errors import ProviderUnavailableError

_EVENTBRITE_API = "https://www.eventbriteapi.com/v3"
_MUSIC_CATEGORY_ID = "103"


class EventbriteProvider(BaseEventProvider):
    """Event source backed by Eventbrite event search (requires an API token)."""

    name = "eventbrite"
    category = EventCategory.DEFAULT
    requires_credential = True

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        super().__init__(http_client, settings, credential=settings.eventbrite_api_key)

    @property
    def display_name(self) -> str:
        return "Eventbrite"

    async def _request(self, location: str, start_date: str, end_date: str) -> Any:
        return await self._get_json(
            f"{_EVENTBRITE_API}/events/search/",
            params={
                "token": self._credential,
                "location.address": location,
                "start_date.range_start": f"{start_date}T00:00:00Z",
                "start_date.range_end": f"{end_date}T23:59:59Z",
                "categories": _MUSIC_CATEGORY_ID,
                "expand": "venue",
            },
        )

    def _extract_items(self, payload: Any) -> list[Any]:
        if not isinstance(payload, dict):
            raise ProviderUnavailableError(
                message="unexpected payload shape", provider_name=self.name
            )
        events = payload.get("events")
        return events if isinstance(events, list) else []

    def _map_item(self, item: Any, location: str, start_date: str) -> dict[str, Any] | None:
        title = dig(item, "name", "text")
        venue = item.get("venue") if isinstance(item.get("venue"), dict) else {}

        return {
            "name": title,
            "date": iso_date_part(dig(item, "start", "local")),
            "venue": venue.get("name") or DEFAULT_VENUE,
            "city": dig(venue, "address", "city") or location,
            "artists": [title] if title else [],
            "url": item.get("url"),
        }

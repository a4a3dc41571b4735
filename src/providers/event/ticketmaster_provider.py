"""Ticketmaster Discovery API adapter.

Queries ``/discovery/v2/events.json`` for music events in a city between
two dates.  Performers come from ``_embedded.attractions``; when a listing
has none, the event name stands in as the only performer.

Native shape (abridged)::

    {"_embedded": {"events": [
        {"name": ..., "url": ...,
         "dates": {"start": {"localDate": "2025-06-01"}},
         "_embedded": {"venues": [{"name": ..., "city": {"name": ...}}],
                       "attractions": [{"name": ...}]}}
    ]}}

A response without ``_embedded`` simply means no events matched.
"""

from __future__ import annotations

from typing import Any

import httpx

from src.config.settings import Settings
from src.models.event import EventCategory
from src.providers.event.base import DEFAULT_VENUE, BaseEventProvider, dig
from src.utils.errors import ProviderUnavailableError

_TICKETMASTER_API = "https://app.ticketmaster.com/discovery/v2"
_PAGE_SIZE = 50


class TicketmasterProvider(BaseEventProvider):
    """Event source backed by the Ticketmaster Discovery API (requires an API key)."""

    name = "ticketmaster"
    category = EventCategory.DEFAULT
    requires_credential = True

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        super().__init__(http_client, settings, credential=settings.ticketmaster_api_key)

    @property
    def display_name(self) -> str:
        return "Ticketmaster"

    async def _request(self, location: str, start_date: str, end_date: str) -> Any:
        return await self._get_json(
            f"{_TICKETMASTER_API}/events.json",
            params={
                "apikey": self._credential,
                "city": location,
                "startDateTime": f"{start_date}T00:00:00Z",
                "endDateTime": f"{end_date}T23:59:59Z",
                "classificationName": "music",
                "size": _PAGE_SIZE,
            },
        )

    def _extract_items(self, payload: Any) -> list[Any]:
        if not isinstance(payload, dict):
            raise ProviderUnavailableError(
                message="unexpected payload shape", provider_name=self.name
            )
        events = dig(payload, "_embedded", "events")
        return events if isinstance(events, list) else []

    def _map_item(self, item: Any, location: str, start_date: str) -> dict[str, Any] | None:
        venues = dig(item, "_embedded", "venues") or []
        venue = venues[0] if venues and isinstance(venues[0], dict) else {}
        attractions = dig(item, "_embedded", "attractions") or []

        return {
            "name": item.get("name"),
            "date": dig(item, "dates", "start", "localDate"),
            "venue": venue.get("name") or DEFAULT_VENUE,
            "city": dig(venue, "city", "name") or location,
            "artists": [a.get("name") for a in attractions if isinstance(a, dict)],
            "url": item.get("url"),
        }

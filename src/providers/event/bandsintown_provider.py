"""Bandsintown REST adapter.

Bandsintown is keyed by a public ``app_id`` rather than a secret, so this
source is always available.  The response is a bare JSON array; each
record carries a ``lineup`` of performer names, an ISO ``datetime`` and an
optional nested ``venue``.

Field defaults when a record is incomplete:
    name   -> title, then description, then "Concert Event"
    date   -> the query's start date
    venue  -> "TBD"
    city   -> the queried location
"""

from __future__ import annotations

from typing import Any

import httpx

from src.config.settings import Settings
from src.models.event import EventCategory
from src.providers.event.base import DEFAULT_VENUE, BaseEventProvider, dig, iso_date_part
from src.utils.errors import ProviderUnavailableError

_BANDSINTOWN_API = "https://rest.bandsintown.com"


class BandsintownProvider(BaseEventProvider):
    """Event source backed by the Bandsintown events endpoint."""

    name = "bandsintown"
    category = EventCategory.DEFAULT

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        super().__init__(http_client, settings, credential=settings.bandsintown_app_id)

    @property
    def display_name(self) -> str:
        return "Bandsintown"

    async def _request(self, location: str, start_date: str, end_date: str) -> Any:
        return await self._get_json(
            f"{_BANDSINTOWN_API}/events",
            params={
                "app_id": self._credential,
                "location": location,
                "date": f"{start_date},{end_date}",
            },
        )

    def _extract_items(self, payload: Any) -> list[Any]:
        # An empty body decodes to None on some endpoints.
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ProviderUnavailableError(
                message="unexpected payload shape", provider_name=self.name
            )
        return payload

    def _map_item(self, item: Any, location: str, start_date: str) -> dict[str, Any] | None:
        venue = item.get("venue") if isinstance(item.get("venue"), dict) else {}
        lineup = [a for a in (item.get("lineup") or []) if isinstance(a, str)]
        if not lineup and dig(item, "artist", "name"):
            lineup = [item["artist"]["name"]]

        return {
            "name": item.get("title") or item.get("description") or "Concert Event",
            "date": iso_date_part(item.get("datetime")) or start_date,
            "venue": venue.get("name") or DEFAULT_VENUE,
            "city": venue.get("city") or location,
            "artists": lineup,
            "url": item.get("url") or item.get("facebook_rsvp_url"),
        }

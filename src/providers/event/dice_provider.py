"""DICE adapter for independent-venue listings.

DICE's partner API is keyed with an ``x-api-key`` header.  Records carry
either a flat ``artists`` list of names or a ``lineup`` of
``{"details": name}`` slots; the flat list wins when both are present.
"""

from __future__ import annotations

from typing import Any

import httpx

from src.config.settings import Settings
from src.models.event import EventCategory
from src.providers.event.base import DEFAULT_VENUE, BaseEventProvider, dig, iso_date_part
from src.utils.errors import ProviderUnavailableError

_DICE_API = "https://api.dice.fm/v1"
_PAGE_SIZE = 50


class DiceProvider(BaseEventProvider):
    """Event source backed by the DICE events endpoint (requires an API key)."""

    name = "dice"
    category = EventCategory.INDEPENDENT
    requires_credential = True

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        super().__init__(http_client, settings, credential=settings.dice_api_key)

    @property
    def display_name(self) -> str:
        return "DICE"

    async def _request(self, location: str, start_date: str, end_date: str) -> Any:
        return await self._get_json(
            f"{_DICE_API}/events",
            params={
                "filter[city]": location,
                "filter[date_from]": f"{start_date}T00:00:00Z",
                "filter[date_to]": f"{end_date}T23:59:59Z",
                "page[size]": _PAGE_SIZE,
            },
            headers={"x-api-key": self._credential, "Accept": "application/json"},
        )

    def _extract_items(self, payload: Any) -> list[Any]:
        if not isinstance(payload, dict):
            raise ProviderUnavailableError(
                message="unexpected payload shape", provider_name=self.name
            )
        events = payload.get("data")
        return events if isinstance(events, list) else []

    def _map_item(self, item: Any, location: str, start_date: str) -> dict[str, Any] | None:
        artists = [a for a in (item.get("artists") or []) if isinstance(a, str)]
        if not artists:
            artists = [
                slot.get("details")
                for slot in (item.get("lineup") or [])
                if isinstance(slot, dict) and isinstance(slot.get("details"), str)
            ]

        venue = item.get("venue")
        if isinstance(venue, dict):
            venue = venue.get("name")

        return {
            "name": item.get("name"),
            "date": iso_date_part(item.get("date")),
            "venue": venue or DEFAULT_VENUE,
            "city": dig(item, "location", "city") or location,
            "artists": artists,
            "url": item.get("url"),
        }

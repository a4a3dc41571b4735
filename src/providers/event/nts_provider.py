"""NTS Radio adapter for radio-hosted live events.

NTS lists the club nights and live broadcasts its hosts play in a city.
No credential is needed.  Each record holds its performers as
``{"name": ...}`` objects and an optional ``location`` block; the listing
URL comes from the first ``links`` entry when ``url`` is absent.
"""

from __future__ import annotations

from typing import Any

import httpx

from src.config.settings import Settings
from src.models.event import EventCategory
from src.providers.event.base import DEFAULT_VENUE, BaseEventProvider, dig, iso_date_part
from src.utils.errors import ProviderUnavailableError

_NTS_API = "https://www.nts.live/api/v2"


class NTSProvider(BaseEventProvider):
    """Event source backed by the NTS Radio events listing."""

    name = "nts"
    category = EventCategory.RADIO

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        super().__init__(http_client, settings)

    @property
    def display_name(self) -> str:
        return "NTS Radio"

    async def _request(self, location: str, start_date: str, end_date: str) -> Any:
        return await self._get_json(
            f"{_NTS_API}/events",
            params={"location": location, "start": start_date, "end": end_date},
        )

    def _extract_items(self, payload: Any) -> list[Any]:
        if not isinstance(payload, dict):
            raise ProviderUnavailableError(
                message="unexpected payload shape", provider_name=self.name
            )
        results = payload.get("results")
        return results if isinstance(results, list) else []

    def _map_item(self, item: Any, location: str, start_date: str) -> dict[str, Any] | None:
        links = item.get("links") or []
        first_link = links[0] if links and isinstance(links[0], dict) else {}

        return {
            "name": item.get("title"),
            "date": iso_date_part(item.get("start_date")),
            "venue": dig(item, "location", "venue") or DEFAULT_VENUE,
            "city": dig(item, "location", "city") or location,
            "artists": [
                a.get("name") for a in (item.get("artists") or []) if isinstance(a, dict)
            ],
            "url": item.get("url") or first_link.get("href"),
        }

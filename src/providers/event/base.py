"""Shared fetch/normalize skeleton for event-provider adapters.

Every concrete adapter only knows two things about its source: how to
issue the request (:meth:`BaseEventProvider._request`) and how to turn one
native record into the keyword arguments of an
:class:`~src.models.event.Event` (:meth:`BaseEventProvider._map_item`).
Everything else lives here and is identical for all sources:

    1. Credential check -- a missing key short-circuits to a failure result
       without any network call.
    2. Bounded request -- the whole request runs under the provider's own
       timeout so a hung source cannot stall the aggregation.
    3. Error capture -- transport errors, HTTP error statuses, timeouts,
       invalid JSON and unexpected payload shapes all become
       ``ProviderRunResult(success=False, error=...)``.
    4. Per-record normalization -- a record that fails Event validation
       (no name, no parseable date) is skipped, not fatal.

Adapters are constructed with an injected ``httpx.AsyncClient`` for
connection pooling and testability.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

import httpx
from pydantic import ValidationError

from src.config.settings import Settings
from src.interfaces.event_provider import IEventProvider
from src.models.event import Event, EventCategory, ProviderFetchResult, ProviderRunResult
from src.utils.concurrency import with_timeout
from src.utils.errors import ProviderUnavailableError
from src.utils.logging import get_logger

# Substituted when a source does not say where an event takes place.
DEFAULT_VENUE = "TBD"

_NO_EVENTS = "No events found"


def iso_date_part(value: Any) -> str | None:
    """Return the ``YYYY-MM-DD`` part of an ISO date or datetime string."""
    if not isinstance(value, str) or not value:
        return None
    candidate = value.split("T", 1)[0].strip()
    try:
        return dt.date.fromisoformat(candidate).isoformat()
    except ValueError:
        return None


def dig(payload: Any, *path: str) -> Any:
    """Walk nested dicts, returning ``None`` as soon as a level is missing."""
    current = payload
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


class BaseEventProvider(IEventProvider):
    """Template for a single-request event source.

    Subclasses set :attr:`name` and :attr:`category`, and implement
    :meth:`_request`, :meth:`_extract_items` and :meth:`_map_item`.
    Sources that need a credential set :attr:`requires_credential` and
    pass it as ``credential``.
    """

    name: str = "base"
    category: EventCategory = EventCategory.DEFAULT
    requires_credential: bool = False

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        credential: str = "",
    ) -> None:
        self._http = http_client
        self._settings = settings
        self._credential = credential
        self._timeout = settings.provider_timeout(self.name)
        self._logger = get_logger(__name__).bind(provider=self.name)

    # ------------------------------------------------------------------
    # Source-specific hooks
    # ------------------------------------------------------------------

    async def _request(self, location: str, start_date: str, end_date: str) -> Any:
        """Issue the source's query and return its decoded JSON payload."""
        raise NotImplementedError

    def _extract_items(self, payload: Any) -> list[Any]:
        """Return the list of native event records inside *payload*.

        Raise :class:`ProviderUnavailableError` when the top-level shape is
        wrong; return an empty list when the records are merely absent.
        """
        raise NotImplementedError

    def _map_item(self, item: Any, location: str, start_date: str) -> dict[str, Any] | None:
        """Map one native record to Event keyword arguments, or ``None`` to skip it."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Shared plumbing
    # ------------------------------------------------------------------

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._http.get(
            url, params=params, headers=headers, timeout=self._timeout
        )
        response.raise_for_status()
        return response.json()

    async def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._http.post(
            url, json=payload, headers=headers, timeout=self._timeout
        )
        response.raise_for_status()
        return response.json()

    def _failure(self, error: str) -> ProviderFetchResult:
        self._logger.warning("provider_fetch_failed", error=error)
        return ProviderFetchResult(
            provider=self.name,
            events=[],
            result=ProviderRunResult(success=False, count=0, error=error),
        )

    def _normalize(self, items: list[Any], location: str, start_date: str) -> list[Event]:
        events: list[Event] = []
        for item in items:
            try:
                fields = self._map_item(item, location, start_date)
                if fields is None:
                    continue
                events.append(
                    Event(**fields, source=self.display_name, category=self.category)
                )
            except (ValidationError, KeyError, IndexError, TypeError, AttributeError) as exc:
                self._logger.debug(
                    "provider_record_skipped",
                    error=str(exc).splitlines()[0],
                    record=str(item)[:200],
                )
        return events

    # ------------------------------------------------------------------
    # IEventProvider implementation
    # ------------------------------------------------------------------

    async def fetch(
        self,
        location: str,
        start_date: str,
        end_date: str,
    ) -> ProviderFetchResult:
        """Fetch the source's events for the query; never raises."""
        if self.requires_credential and not self.is_available():
            return self._failure(f"{self.display_name} API key not configured")

        try:
            payload = await with_timeout(
                self._request(location, start_date, end_date),
                self._timeout,
                self.name,
            )
            items = self._extract_items(payload)
        except ProviderUnavailableError as exc:
            return self._failure(exc.message)
        except httpx.HTTPStatusError as exc:
            return self._failure(f"HTTP {exc.response.status_code}")
        except httpx.TimeoutException:
            return self._failure(f"timed out after {self._timeout:g}s")
        except httpx.HTTPError as exc:
            return self._failure(str(exc) or type(exc).__name__)
        except ValueError:
            # response.json() raises json.JSONDecodeError, a ValueError.
            return self._failure("invalid JSON payload")

        events = self._normalize(items, location, start_date)
        if not events:
            self._logger.info("provider_fetch_empty", raw_records=len(items))
            return ProviderFetchResult(
                provider=self.name,
                events=[],
                result=ProviderRunResult(success=True, count=0, error=_NO_EVENTS),
            )

        self._logger.info(
            "provider_fetch_complete",
            events=len(events),
            skipped=len(items) - len(events),
        )
        return ProviderFetchResult(
            provider=self.name,
            events=events,
            result=ProviderRunResult(success=True, count=len(events)),
        )

    @property
    def display_name(self) -> str:
        """Human-readable source label stamped on every event."""
        return self.name

    def get_provider_name(self) -> str:
        return self.name

    def is_available(self) -> bool:
        """Sources without a credential are always available."""
        return bool(self._credential) or not self.requires_credential

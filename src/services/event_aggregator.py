"""Multi-source event aggregation.

Fans a ``(location, start_date, end_date)`` query out to every configured
event provider at once, waits for all of them to settle, and folds the
results into one deduplicated, chronologically ordered event list with a
per-provider diagnostics map.

A provider that fails, times out or is not configured contributes no
events and a ``success=False`` diagnostic; it never fails the search.
"""

from __future__ import annotations

from src.interfaces.event_provider import IEventProvider
from src.models.event import AggregationResult, Event, ProviderFetchResult, ProviderRunResult
from src.utils.concurrency import gather_settled
from src.utils.logging import get_logger


def deduplicate_events(events: list[Event]) -> list[Event]:
    """Drop repeated events, keeping the first occurrence.

    Two records are the same event when their names match ignoring case,
    their dates are equal and their venues match ignoring case.  Running
    this twice gives the same result as running it once.
    """
    seen: set[tuple] = set()
    unique: list[Event] = []
    for event in events:
        key = event.identity_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(event)
    return unique


def sort_events_by_date(events: list[Event]) -> list[Event]:
    """Return *events* in ascending date order; same-day events keep their order."""
    return sorted(events, key=lambda event: event.date)


class EventAggregator:
    """Runs every event provider concurrently and merges what comes back.

    Providers are invoked in the order given; that order decides which
    record survives when two sources list the same event.
    """

    def __init__(self, providers: list[IEventProvider]) -> None:
        self._providers = list(providers)
        self._logger = get_logger(__name__)

    @property
    def providers(self) -> list[IEventProvider]:
        return list(self._providers)

    def _crashed(self, idx: int, exc: BaseException) -> ProviderFetchResult:
        # Adapters report their own failures; this only covers a bug that
        # escaped one, so the other sources still count.
        return ProviderFetchResult(
            provider=self._providers[idx].get_provider_name(),
            events=[],
            result=ProviderRunResult(success=False, count=0, error=str(exc) or type(exc).__name__),
        )

    async def search(self, location: str, start_date: str, end_date: str) -> AggregationResult:
        """Query all providers and return deduplicated, date-sorted events plus diagnostics."""
        if not self._providers:
            self._logger.warning("event_search_no_providers", location=location)
            return AggregationResult(events=[], diagnostics={}, total_found=0)

        self._logger.info(
            "event_search_started",
            location=location,
            start_date=start_date,
            end_date=end_date,
            providers=[p.get_provider_name() for p in self._providers],
        )

        fetched = await gather_settled(
            [p.fetch(location, start_date, end_date) for p in self._providers],
            fallback=self._crashed,
            logger=self._logger,
            error_msg="event_provider_crashed",
        )

        all_events: list[Event] = []
        diagnostics: dict[str, ProviderRunResult] = {}
        for outcome in fetched:
            all_events.extend(outcome.events)
            diagnostics[outcome.provider] = outcome.result

        unique = sort_events_by_date(deduplicate_events(all_events))

        self._logger.info(
            "event_search_complete",
            total_found=len(all_events),
            after_dedup=len(unique),
            failed=[name for name, result in diagnostics.items() if not result.success],
        )
        return AggregationResult(
            events=unique,
            diagnostics=diagnostics,
            total_found=len(all_events),
        )

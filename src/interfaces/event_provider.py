"""Abstract base class for concert-listing providers.

Defines the single capability every event source implements: fetch the
events for a location and date range, normalized into canonical
:class:`~src.models.event.Event` records.  New sources are added by
implementing this interface and registering the adapter in ``src/main.py``;
the aggregator never branches on provider identity.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.event import ProviderFetchResult


# Concrete implementations: TicketmasterProvider, BandsintownProvider,
# EventbriteProvider, ResidentAdvisorProvider, DiceProvider, NTSProvider
# Located in: src/providers/event/
class IEventProvider(ABC):
    """Contract for event sources queried by the aggregator."""

    @abstractmethod
    async def fetch(
        self,
        location: str,
        start_date: str,
        end_date: str,
    ) -> ProviderFetchResult:
        """Fetch and normalize the events a source lists for the query.

        Parameters
        ----------
        location:
            Free-text city / location, passed to the source as-is.
        start_date:
            ISO date ``YYYY-MM-DD`` (inclusive).
        end_date:
            ISO date ``YYYY-MM-DD`` (inclusive).

        Returns
        -------
        ProviderFetchResult
            The normalized events and a run result.  Implementations must
            never raise: transport errors, timeouts, missing credentials
            and unexpected payloads become ``result.success = False`` with
            an empty event list.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the identifier used as the diagnostics key, e.g. ``"ticketmaster"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider's required credential is configured."""

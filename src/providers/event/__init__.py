"""Event-provider adapters, one per listing source."""

from src.providers.event.bandsintown_provider import BandsintownProvider
from src.providers.event.base import BaseEventProvider
from src.providers.event.dice_provider import DiceProvider
from src.providers.event.eventbrite_provider import EventbriteProvider
from src.providers.event.nts_provider import NTSProvider
from src.providers.event.resident_advisor_provider import ResidentAdvisorProvider
from src.providers.event.ticketmaster_provider import TicketmasterProvider

__all__ = [
    "BandsintownProvider",
    "BaseEventProvider",
    "DiceProvider",
    "EventbriteProvider",
    "NTSProvider",
    "ResidentAdvisorProvider",
    "TicketmasterProvider",
]

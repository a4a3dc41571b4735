"""Public interface definitions for all external collaborators.

Every event source, taste-profile backend and language model is accessed
through the abstract base classes defined here.  Concrete adapters live in
``src/providers/`` and are wired together in ``src/main.py``, so unit
tests can inject fakes without touching the network.

CONCRETE PROVIDER MAP:
    Interface              ->  Concrete implementations
    -----------------------------------------------------------------
    IEventProvider         ->  TicketmasterProvider, BandsintownProvider,
                               EventbriteProvider, ResidentAdvisorProvider,
                               DiceProvider, NTSProvider
    ITasteProfileProvider  ->  SpotifyTasteProfileProvider
    ILLMProvider           ->  OpenAILLMProvider, AnthropicLLMProvider
    IConcertRanker         ->  LLMConcertRanker, NullConcertRanker
"""

from src.interfaces.concert_ranker import IConcertRanker
from src.interfaces.event_provider import IEventProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.taste_profile_provider import ITasteProfileProvider

__all__ = [
    "IConcertRanker",
    "IEventProvider",
    "ILLMProvider",
    "ITasteProfileProvider",
]

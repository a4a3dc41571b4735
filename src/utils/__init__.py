"""Utility modules for gigScout.

- **errors** -- Exception hierarchy rooted at GigScoutError; adapters
  raise their own subclass so callers can handle failures granularly.
- **concurrency** -- per-call timeouts and the "wait for all, fail none"
  fan-out used by the aggregator and the similarity tier.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **artist_matching** -- the bidirectional substring rule shared by the
  direct and similarity matching tiers.
"""

from src.utils.artist_matching import matches_any_performer, names_overlap
from src.utils.concurrency import gather_settled, with_timeout
from src.utils.errors import (
    ConfigurationError,
    GigScoutError,
    InvalidSearchError,
    LLMError,
    ProviderUnavailableError,
    TasteProfileError,
    UserNotAuthenticatedError,
)
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "GigScoutError",
    "InvalidSearchError",
    "LLMError",
    "ProviderUnavailableError",
    "TasteProfileError",
    "UserNotAuthenticatedError",
    "configure_logging",
    "gather_settled",
    "get_logger",
    "matches_any_performer",
    "names_overlap",
    "with_timeout",
]

"""Custom exception hierarchy for gigScout.

All application exceptions inherit from :class:`GigScoutError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "ticketmaster", "spotify", "openai") caused the
failure.

    GigScoutError  (base -- catch-all for any gigScout error)
    +-- ProviderUnavailableError  (event source down / timed out / bad payload)
    +-- LLMError                  (any LLM API call failure)
    +-- TasteProfileError         (top-artist / similar-artist lookup failed)
    |   +-- UserNotAuthenticatedError (no usable token for the user)
    +-- InvalidSearchError        (caller supplied unusable search parameters)
    +-- ConfigurationError        (startup / missing config)

Only :class:`TasteProfileError` and :class:`InvalidSearchError` ever reach
the HTTP boundary.  Provider and LLM errors are caught inside the adapters
and surface as diagnostics or an empty AI tier.
"""


class GigScoutError(Exception):
    """Base exception for all gigScout errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[ticketmaster] HTTP 401``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# External service / provider errors
# ---------------------------------------------------------------------------

class ProviderUnavailableError(GigScoutError):
    """Raised inside an event adapter when its source cannot be used.

    Covers missing credentials, transport errors, timeouts and payloads
    that do not have the expected shape.  The adapter base class converts
    it into a failed :class:`~src.models.event.ProviderRunResult`.
    """

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(GigScoutError):
    """Raised when an LLM API call fails or returns an unparseable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class TasteProfileError(GigScoutError):
    """Raised when the taste-profile provider cannot answer a lookup."""

    def __init__(
        self,
        message: str = "Taste profile lookup failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UserNotAuthenticatedError(TasteProfileError):
    """Raised when no access token is known for the requesting user."""

    def __init__(
        self,
        message: str = "User not authenticated",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Caller / configuration errors
# ---------------------------------------------------------------------------

class InvalidSearchError(GigScoutError):
    """Raised when a search request is rejected before any provider is contacted."""

    def __init__(
        self,
        message: str = "Invalid search parameters",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(GigScoutError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)

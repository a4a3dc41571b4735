"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are resolved from TWO sources (in priority order):
#
#   1. **Environment variables** — e.g., TICKETMASTER_API_KEY=abc123
#   2. **.env file** — key=value lines in the project root .env file
#
# Field name `ticketmaster_api_key` maps to env var `TICKETMASTER_API_KEY`.
# An empty string means "not configured": event providers without their
# credential report a failure in diagnostics instead of calling out, and
# the AI ranker falls back to a no-op when no LLM key is present.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """gigScout application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Event providers ===
    ticketmaster_api_key: str = ""
    eventbrite_api_key: str = ""
    bandsintown_app_id: str = "spotify-travel-concerts"  # public app id, always set
    dice_api_key: str = ""

    # Adapters invoked on every search, in this order.  Order matters:
    # deduplication keeps the first record seen.
    event_providers: list[str] = [
        "ticketmaster",
        "bandsintown",
        "eventbrite",
        "resident_advisor",
        "dice",
        "nts",
    ]

    # Per-provider timeouts in seconds.  Each must stay below request_deadline.
    ticketmaster_timeout: float = 10.0
    bandsintown_timeout: float = 8.0
    eventbrite_timeout: float = 8.0
    resident_advisor_timeout: float = 10.0
    dice_timeout: float = 8.0
    nts_timeout: float = 8.0
    request_deadline: float = 25.0

    # === Taste profile (Spotify Web API) ===
    spotify_api_base: str = "https://api.spotify.com/v1"
    spotify_timeout: float = 10.0
    # User id -> OAuth access token, as JSON: SPOTIFY_ACCESS_TOKENS='{"alice": "BQD..."}'
    # The OAuth flow that obtains these tokens runs outside this service.
    spotify_access_tokens: dict[str, str] = {}

    # === LLM Providers (AI ranking tier) ===
    openai_api_key: str = ""
    openai_base_url: str = ""  # Custom base URL for OpenAI-compatible APIs
    openai_text_model: str = ""  # Override text model (default gpt-4o-mini)
    anthropic_api_key: str = ""
    anthropic_model: str = ""  # Override Claude model (default claude-3-5-haiku-latest)
    llm_timeout: float = 15.0

    # === Diagnostics ===
    # When True, every /concerts/find response carries the per-provider
    # debug block, not only requests made with ?debug=true.
    expose_diagnostics: bool = False

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 3001
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_llm_providers(self) -> list[str]:
        """Return a list of LLM provider names that have non-empty API keys configured."""
        providers: list[str] = []
        if self.openai_api_key:
            providers.append("openai")
        if self.anthropic_api_key:
            providers.append("anthropic")
        return providers

    def provider_timeout(self, provider_name: str) -> float:
        """Return the configured timeout for *provider_name*, capped at the request deadline."""
        timeout = getattr(self, f"{provider_name}_timeout", self.request_deadline)
        return min(float(timeout), self.request_deadline)

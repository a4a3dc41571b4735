"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  — Static defaults checked into the repo
#   2. .env file           — Local developer overrides (not committed)
#   3. Environment vars    — Set at deploy time
#
# The YAML file holds the tunable matching limits (how many artists go
# into the AI prompt, how many seeds the similarity fallback expands, the
# final result cap).  Credentials and timeouts always come from Settings.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from src.config.settings import Settings

_DEFAULT_MATCHING = {
    "max_recommendations": 10,
    "display_top_artists": 5,
    "similarity_seed_artists": 3,
    "similar_artists_per_seed": 5,
    "ai_prompt_artists": 10,
    "ai_prompt_events": 20,
    "ai_max_results": 5,
    "ai_min_confidence": 0.6,
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Optional pre-built Settings; a fresh one is read otherwise.

    Returns:
        Fully resolved configuration dictionary.  The ``matching`` section
        is always present, filled from built-in defaults where the file is
        silent.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    base: dict = {"matching": dict(_DEFAULT_MATCHING)}
    _deep_merge(base, yaml_config)

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "providers": {
            "enabled": list(settings.event_providers),
            "request_deadline": settings.request_deadline,
        },
        "llm": {
            "available_providers": settings.get_available_llm_providers(),
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(base, env_overrides)
    return base


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value

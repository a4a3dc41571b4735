"""Configuration package — Settings (env / .env) and the YAML-backed load_config()."""

from src.config.loader import load_config
from src.config.settings import Settings

__all__ = ["Settings", "load_config"]

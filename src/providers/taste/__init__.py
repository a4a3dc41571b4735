"""Taste-profile adapters."""

from src.providers.taste.spotify_provider import SpotifyTasteProfileProvider

__all__ = ["SpotifyTasteProfileProvider"]

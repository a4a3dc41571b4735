"""Taste-profile models produced by the taste-profile provider.

These are read-only inputs to the matching tiers.  ``genres`` is kept as
a list in lineup order from the source; it is never used for matching.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ArtistProfile(BaseModel):
    """One of the listener's top artists, in the provider's ranked order."""

    model_config = ConfigDict(frozen=True)

    name: str
    genres: list[str] = Field(default_factory=list)
    popularity: int = Field(default=0, ge=0, le=100)


class SimilarArtist(BaseModel):
    """An artist the taste-profile provider considers similar to a seed artist."""

    model_config = ConfigDict(frozen=True)

    name: str
    popularity: int = 0

"""Pydantic v2 models for canonical concert events.

All models use frozen config (immutable).  Every provider adapter maps its
native payload into :class:`Event`; matching logic never sees a
provider-specific shape.  A record that cannot supply a name, a date and a
venue fails validation and is dropped by the adapter that produced it.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class EventCategory(str, Enum):
    """Coarse listing category, derived from the source that supplied the event."""

    DEFAULT = "default"
    ELECTRONIC = "electronic"
    INDEPENDENT = "independent"
    RADIO = "radio"


class Event(BaseModel):
    """A single concert / live-music event, normalized across providers."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Event title as listed.")
    date: dt.date = Field(description="Calendar date of the event (YYYY-MM-DD).")
    venue: str = Field(min_length=1, description="Venue name, 'TBD' when unknown.")
    city: str = Field(default="", description="City; falls back to the queried location.")
    artists: list[str] = Field(
        min_length=1,
        description="Performers in lineup order; [name] when the source cannot separate them.",
    )
    source: str = Field(description="Identifier of the provider that supplied the record.")
    url: str | None = Field(default=None, description="Ticket / listing URL.")
    category: EventCategory | None = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def _default_artists_to_name(cls, data: Any) -> Any:
        if isinstance(data, dict):
            artists = [a for a in (data.get("artists") or []) if isinstance(a, str) and a.strip()]
            if not artists and data.get("name"):
                artists = [data["name"]]
            data = {**data, "artists": artists}
        return data

    @field_validator("name", "venue", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    def identity_key(self) -> tuple[str, dt.date, str]:
        """Key under which two records are considered the same event.

        Name and venue compare case-insensitively; the date compares
        exactly.
        """
        return (self.name.lower(), self.date, self.venue.lower())


class ProviderRunResult(BaseModel):
    """Outcome of one provider fetch, reported in the aggregation diagnostics."""

    model_config = ConfigDict(frozen=True)

    success: bool
    count: int = Field(default=0, ge=0)
    error: str | None = None


class ProviderFetchResult(BaseModel):
    """Events returned by one adapter together with its run result."""

    model_config = ConfigDict(frozen=True)

    provider: str
    events: list[Event] = Field(default_factory=list)
    result: ProviderRunResult


class AggregationResult(BaseModel):
    """Deduplicated, date-sorted events plus per-provider diagnostics."""

    model_config = ConfigDict(frozen=True)

    events: list[Event] = Field(default_factory=list)
    diagnostics: dict[str, ProviderRunResult] = Field(default_factory=dict)
    # Count before deduplication, for the debug block.
    total_found: int = 0

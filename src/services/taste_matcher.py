"""Direct matching of a listener's top artists against event lineups."""

from __future__ import annotations

from src.models.event import Event
from src.models.recommendation import Recommendation, RecommendationType
from src.models.taste import ArtistProfile
from src.utils.artist_matching import matches_any_performer

DIRECT_MATCH_CONFIDENCE = 0.95


def direct_matches(top_artists: list[ArtistProfile], events: list[Event]) -> list[Recommendation]:
    """Return one ``direct_match`` per (event, top artist) pair that overlaps.

    Output order follows the event list first, then the artist ranking.
    An event with two matching top artists yields two recommendations;
    the merger later keeps only the first.
    """
    matches: list[Recommendation] = []
    for event in events:
        for artist in top_artists:
            if not matches_any_performer(artist.name, event.artists):
                continue
            matches.append(
                Recommendation(
                    type=RecommendationType.DIRECT_MATCH,
                    event=event,
                    reason=f"Because you listen to {artist.name}, you might like this concert!",
                    confidence=DIRECT_MATCH_CONFIDENCE,
                    match_artist=artist.name,
                )
            )
    return matches

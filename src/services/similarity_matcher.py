"""Similarity fallback tier.

Expands the listener's first few top artists into artists the taste
profile considers similar, then looks for those similar artists on the
lineups of events that no direct match has claimed yet.
"""

from __future__ import annotations

from src.interfaces.taste_profile_provider import ITasteProfileProvider
from src.models.event import Event
from src.models.recommendation import Recommendation, RecommendationType
from src.models.taste import ArtistProfile, SimilarArtist
from src.utils.artist_matching import matches_any_performer
from src.utils.concurrency import gather_settled
from src.utils.logging import get_logger

SIMILARITY_MATCH_CONFIDENCE = 0.7


class SimilarityMatcher:
    """Produces ``similarity_match`` recommendations from similar artists.

    Parameters
    ----------
    taste_provider:
        Source of similar artists for a seed artist.
    seed_artists:
        How many of the top artists (in ranked order) are used as seeds.
    similar_per_seed:
        Maximum number of similar artists considered per seed.
    """

    def __init__(
        self,
        taste_provider: ITasteProfileProvider,
        seed_artists: int = 3,
        similar_per_seed: int = 5,
    ) -> None:
        self._taste = taste_provider
        self._seed_artists = seed_artists
        self._similar_per_seed = similar_per_seed
        self._logger = get_logger(__name__)

    async def match(
        self,
        user_id: str,
        top_artists: list[ArtistProfile],
        events: list[Event],
        already_matched_event_names: set[str],
    ) -> list[Recommendation]:
        """Return similarity matches for events outside *already_matched_event_names*.

        The exclusion set is read, never extended: two seeds may both
        match the same event, and the merger keeps the first.
        """
        seeds = top_artists[: self._seed_artists]
        if not seeds or not events:
            return []

        # A failed lookup empties that seed's contribution only.
        similar_by_seed: list[list[SimilarArtist]] = await gather_settled(
            [
                self._taste.get_similar_artists(user_id, seed.name, limit=self._similar_per_seed)
                for seed in seeds
            ],
            fallback=lambda idx, exc: [],
            logger=self._logger,
            error_msg="similar_artists_lookup_failed",
        )

        candidates = [e for e in events if e.name not in already_matched_event_names]

        matches: list[Recommendation] = []
        for seed, similar_artists in zip(seeds, similar_by_seed):
            similar_artists = similar_artists[: self._similar_per_seed]
            for event in candidates:
                for similar in similar_artists:
                    if not matches_any_performer(similar.name, event.artists):
                        continue
                    matches.append(
                        Recommendation(
                            type=RecommendationType.SIMILARITY_MATCH,
                            event=event,
                            reason=(
                                f"Because you listen to {seed.name}, you might like "
                                f"{similar.name} playing in {event.city}!"
                            ),
                            confidence=SIMILARITY_MATCH_CONFIDENCE,
                            match_artist=similar.name,
                            based_on=seed.name,
                        )
                    )
                    break

        self._logger.info(
            "similarity_matching_complete",
            seeds=[s.name for s in seeds],
            candidates=len(candidates),
            matches=len(matches),
        )
        return matches

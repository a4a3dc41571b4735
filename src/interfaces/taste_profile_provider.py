"""Abstract base class for taste-profile providers.

The recommendation core receives a listener's taste through this
interface instead of looking up credentials itself.  Token storage and
the OAuth flow belong to whoever constructs the concrete provider.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.taste import ArtistProfile, SimilarArtist


# Concrete implementation: SpotifyTasteProfileProvider
# Located in: src/providers/taste/
class ITasteProfileProvider(ABC):
    """Contract for resolving a user's listening taste."""

    @abstractmethod
    async def get_top_artists(self, user_id: str, limit: int = 20) -> list[ArtistProfile]:
        """Return the user's top artists in ranked order.

        Raises
        ------
        src.utils.errors.UserNotAuthenticatedError
            If no credentials are known for *user_id*.
        src.utils.errors.TasteProfileError
            If the upstream lookup fails.
        """

    @abstractmethod
    async def get_similar_artists(
        self,
        user_id: str,
        artist_name: str,
        limit: int = 5,
    ) -> list[SimilarArtist]:
        """Return up to *limit* artists similar to *artist_name*.

        An artist the provider cannot find yields an empty list.

        Raises
        ------
        src.utils.errors.TasteProfileError
            If the upstream lookup fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"spotify"``."""

"""Spotify Web API taste-profile adapter.

Top artists come from ``GET /me/top/artists``.  Spotify has no direct
"similar artists for a name" call usable with a user token, so similar
artists are derived in two steps: resolve the name to an artist id via
``GET /search``, then ask ``GET /recommendations`` for tracks seeded by
that id and take each track's first credited artist.

Access tokens are looked up per request through an injected resolver;
this adapter never stores or refreshes tokens.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx
from pydantic import ValidationError

from src.config.settings import Settings
from src.interfaces.taste_profile_provider import ITasteProfileProvider
from src.models.taste import ArtistProfile, SimilarArtist
from src.utils.errors import TasteProfileError, UserNotAuthenticatedError
from src.utils.logging import get_logger

_RECOMMENDATION_TRACKS = 10

TokenResolver = Callable[[str], Optional[str]]


class SpotifyTasteProfileProvider(ITasteProfileProvider):
    """Reads a listener's taste from the Spotify Web API.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient`` for connection pooling and testability.
    settings:
        Supplies the API base URL and request timeout.
    token_resolver:
        Maps a user id to that user's OAuth access token, or ``None`` when
        the user has not authorized the app.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        token_resolver: TokenResolver,
    ) -> None:
        self._http = http_client
        self._base_url = settings.spotify_api_base.rstrip("/")
        self._timeout = settings.spotify_timeout
        self._resolve_token = token_resolver
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _token_for(self, user_id: str) -> str:
        token = self._resolve_token(user_id)
        if not token:
            raise UserNotAuthenticatedError(provider_name=self.get_provider_name())
        return token

    async def _get(self, user_id: str, path: str, params: dict[str, Any]) -> dict[str, Any]:
        token = self._token_for(user_id)
        try:
            response = await self._http.get(
                f"{self._base_url}{path}",
                params=params,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 401:
                raise UserNotAuthenticatedError(
                    message="Spotify rejected the access token",
                    provider_name=self.get_provider_name(),
                ) from exc
            raise TasteProfileError(
                message=f"Spotify {path} returned HTTP {exc.response.status_code}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise TasteProfileError(
                message=f"Spotify {path} request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise TasteProfileError(
                message=f"Spotify {path} returned invalid JSON",
                provider_name=self.get_provider_name(),
            ) from exc

        if not isinstance(payload, dict):
            raise TasteProfileError(
                message=f"Spotify {path} returned an unexpected payload",
                provider_name=self.get_provider_name(),
            )
        return payload

    # ------------------------------------------------------------------
    # ITasteProfileProvider implementation
    # ------------------------------------------------------------------

    async def get_top_artists(self, user_id: str, limit: int = 20) -> list[ArtistProfile]:
        payload = await self._get(user_id, "/me/top/artists", {"limit": limit})

        artists: list[ArtistProfile] = []
        for item in payload.get("items") or []:
            if not isinstance(item, dict) or not item.get("name"):
                continue
            try:
                artists.append(
                    ArtistProfile(
                        name=item["name"],
                        genres=list(item.get("genres") or []),
                        popularity=item.get("popularity") or 0,
                    )
                )
            except (ValidationError, TypeError) as exc:
                self._logger.debug("spotify_record_skipped", error=str(exc).splitlines()[0])

        self._logger.info("spotify_top_artists", user_id=user_id, count=len(artists))
        return artists

    async def get_similar_artists(
        self,
        user_id: str,
        artist_name: str,
        limit: int = 5,
    ) -> list[SimilarArtist]:
        search = await self._get(
            user_id, "/search", {"q": artist_name, "type": "artist", "limit": 1}
        )
        matches = (search.get("artists") or {}).get("items") or []
        artist_id = matches[0].get("id") if matches and isinstance(matches[0], dict) else None
        if not artist_id:
            self._logger.debug("spotify_artist_not_found", artist=artist_name)
            return []

        recommendations = await self._get(
            user_id,
            "/recommendations",
            {"seed_artists": artist_id, "limit": _RECOMMENDATION_TRACKS},
        )

        # Several tracks may share an artist; keep the first occurrence.
        similar: list[SimilarArtist] = []
        seen: set[str] = set()
        for track in recommendations.get("tracks") or []:
            if not isinstance(track, dict):
                continue
            credited = track.get("artists") or []
            first = credited[0] if credited else None
            name = first.get("name") if isinstance(first, dict) else None
            if not name:
                continue
            if not isinstance(name, str) or name.lower() in seen:
                continue
            try:
                artist = SimilarArtist(name=name, popularity=track.get("popularity") or 0)
            except ValidationError as exc:
                self._logger.debug("spotify_record_skipped", error=str(exc).splitlines()[0])
                continue
            seen.add(name.lower())
            similar.append(artist)
            if len(similar) >= limit:
                break

        return similar

    def get_provider_name(self) -> str:
        return "spotify"

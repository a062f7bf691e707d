"""
Spotify API client for spot-tube.

Wraps spotipy with the client-credentials grant: the application
authenticates with its own client id and secret, no user interaction.
This is enough to read any public playlist.

Usage:
    client = SpotifyClient.from_credentials(
        client_id=config.spotify.client_id,
        client_secret=config.spotify.client_secret
    )
    tracks = client.playlist_tracks(config.spotify.playlist_id)
"""

from typing import Any

import spotipy
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOauthError

from spot_tube.core.exceptions import SpotifyError
from spot_tube.core.logger import get_logger
from spot_tube.spotify.models import Track, tracks_from_playlist_items

logger = get_logger(__name__)


# Spotify API limit for playlist_items
PAGE_SIZE = 100


class SpotifyClient:
    """
    Read-only Spotify client.

    Attributes:
        _spotify: The underlying spotipy.Spotify instance.

    Rate Limiting:
        spotipy retries 429 responses on its own. If it gives up, the
        error surfaces as SpotifyError with is_rate_limit=True.
    """

    def __init__(self, spotify_instance: spotipy.Spotify) -> None:
        self._spotify = spotify_instance

    @classmethod
    def from_credentials(cls, client_id: str, client_secret: str) -> "SpotifyClient":
        """
        Build a client using the client-credentials grant.

        The token is fetched lazily by spotipy on the first request.
        """
        auth_manager = SpotifyClientCredentials(
            client_id=client_id,
            client_secret=client_secret
        )
        return cls(spotipy.Spotify(auth_manager=auth_manager))

    def playlist_items(
        self,
        playlist_id: str,
        limit: int = PAGE_SIZE,
        offset: int = 0
    ) -> dict[str, Any]:
        """
        Get one page of playlist entries.

        Returns:
            Dictionary with 'items', 'total', 'next' (None on the last page).

        Raises:
            SpotifyError: If the playlist is not found, auth fails, or
                          a network error occurs.
        """
        try:
            result = self._spotify.playlist_items(
                playlist_id,
                limit=min(limit, PAGE_SIZE),
                offset=offset,
                additional_types=["track"]
            )
        except spotipy.SpotifyException as e:
            if e.http_status == 429:
                raise SpotifyError(
                    f"Rate limited while fetching playlist items: {playlist_id}",
                    details={"playlist_id": playlist_id, "http_status": 429},
                    is_rate_limit=True
                ) from e
            raise SpotifyError(
                f"Failed to fetch playlist items: {e}",
                details={"playlist_id": playlist_id, "original_error": str(e)},
                is_auth_error=e.http_status in (400, 401)
            ) from e
        except SpotifyOauthError as e:
            raise SpotifyError(
                f"Spotify authentication failed: {e}",
                details={"original_error": str(e)},
                is_auth_error=True
            ) from e

        if result is None:
            raise SpotifyError(
                f"Failed to fetch playlist items: {playlist_id}",
                details={"playlist_id": playlist_id}
            )
        return result

    def playlist_all_items(self, playlist_id: str) -> list[dict[str, Any]]:
        """Get every playlist entry, following pagination."""
        all_items: list[dict[str, Any]] = []
        offset = 0

        while True:
            response = self.playlist_items(playlist_id, limit=PAGE_SIZE, offset=offset)
            all_items.extend(response.get("items", []))

            if response.get("next") is None:
                break
            offset += PAGE_SIZE

        return all_items

    def playlist_tracks(self, playlist_id: str) -> list[Track]:
        """
        Get the playlist as Tracks, in playlist order.

        Raises:
            SpotifyError: If the playlist cannot be fetched.
        """
        items = self.playlist_all_items(playlist_id)
        tracks = tracks_from_playlist_items(items)
        skipped = len(items) - len(tracks)
        if skipped:
            logger.debug(f"Skipped {skipped} playlist entries without a usable track")
        return tracks

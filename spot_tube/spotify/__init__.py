"""
Spotify module for spot-tube.

    - client: SpotifyClient (client-credentials grant, playlist fetch)
    - models: Track
"""

from spot_tube.spotify.client import SpotifyClient
from spot_tube.spotify.models import Track, tracks_from_playlist_items

__all__ = [
    "SpotifyClient",
    "Track",
    "tracks_from_playlist_items",
]

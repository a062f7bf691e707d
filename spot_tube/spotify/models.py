"""
Data models for Spotify entities.

Only what the search pass needs is kept: a track's title and its primary
artist. Models are frozen so they can be passed between passes without
accidental modification.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Track:
    """
    Immutable representation of a playlist track.

    Attributes:
        title: Track title as it appears on Spotify.
               Example: "Imagine"
        artist: Primary artist name (first artist in the list).
                Example: "John Lennon"
    """
    title: str
    artist: str

    @classmethod
    def from_spotify_api(cls, track_data: dict[str, Any]) -> "Track":
        """
        Create a Track from a Spotify track object.

        Args:
            track_data: The 'track' field of a playlist_items entry.

        Raises:
            ValueError: If the track has no artists.
        """
        artists = track_data.get("artists") or []
        if not artists:
            raise ValueError(f"Track has no artists: {track_data.get('name', '')}")

        return cls(
            title=track_data.get("name", ""),
            artist=artists[0].get("name", ""),
        )

    @property
    def search_query(self) -> str:
        """
        Search string for YouTube.

        Example:
            Track("Imagine", "John Lennon").search_query  # "Imagine John Lennon"
        """
        return f"{self.title} {self.artist}"


def tracks_from_playlist_items(items: list[dict[str, Any] | None]) -> list[Track]:
    """
    Convert playlist_items entries to Tracks, preserving playlist order.

    Entries with no track (removed or unavailable) and entries without
    artists (podcast episodes, some local files) are skipped.
    """
    tracks: list[Track] = []
    for item in items:
        track_data = item.get("track") if item else None
        if not track_data or not track_data.get("artists"):
            continue
        tracks.append(Track.from_spotify_api(track_data))
    return tracks

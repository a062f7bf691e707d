"""Test Spotify models and client"""

from unittest.mock import Mock

import pytest
from spotipy import SpotifyException

from spot_tube.core.exceptions import SpotifyError
from spot_tube.spotify.client import PAGE_SIZE, SpotifyClient
from spot_tube.spotify.models import Track, tracks_from_playlist_items


class TestTrack:
    """Test the Track model"""

    def test_from_spotify_api_uses_first_artist(self):
        track = Track.from_spotify_api({
            "name": "Under Pressure",
            "artists": [{"name": "Queen"}, {"name": "David Bowie"}],
        })

        assert track == Track(title="Under Pressure", artist="Queen")

    def test_from_spotify_api_without_artists(self):
        with pytest.raises(ValueError):
            Track.from_spotify_api({"name": "Episode 1", "artists": []})

    def test_search_query(self):
        assert Track("Imagine", "John Lennon").search_query == "Imagine John Lennon"

    def test_tracks_from_playlist_items(self, sample_playlist_items):
        """Null tracks are skipped and order is kept"""
        tracks = tracks_from_playlist_items(sample_playlist_items)

        assert tracks == [
            Track("Imagine", "John Lennon"),
            Track("Under Pressure", "Queen"),
        ]

    def test_tracks_from_playlist_items_skips_artistless(self):
        items = [None, {"track": {"name": "Local file", "artists": []}}]
        assert tracks_from_playlist_items(items) == []


class TestSpotifyClient:
    """Test SpotifyClient with a mocked spotipy instance"""

    def test_playlist_tracks_follows_pagination(self, sample_playlist_items):
        spotify = Mock()
        spotify.playlist_items.side_effect = [
            {"items": sample_playlist_items[:2], "next": "https://api.spotify.com/next"},
            {"items": sample_playlist_items[2:], "next": None},
        ]

        tracks = SpotifyClient(spotify).playlist_tracks("playlist123")

        assert [t.title for t in tracks] == ["Imagine", "Under Pressure"]
        offsets = [c.kwargs["offset"] for c in spotify.playlist_items.call_args_list]
        assert offsets == [0, PAGE_SIZE]

    def test_rate_limit(self):
        spotify = Mock()
        spotify.playlist_items.side_effect = SpotifyException(429, -1, "Too many requests")

        with pytest.raises(SpotifyError) as exc_info:
            SpotifyClient(spotify).playlist_items("playlist123")

        assert exc_info.value.is_rate_limit
        assert not exc_info.value.is_auth_error

    def test_unauthorized(self):
        spotify = Mock()
        spotify.playlist_items.side_effect = SpotifyException(401, -1, "Invalid token")

        with pytest.raises(SpotifyError) as exc_info:
            SpotifyClient(spotify).playlist_items("playlist123")

        assert exc_info.value.is_auth_error

    def test_not_found(self):
        spotify = Mock()
        spotify.playlist_items.side_effect = SpotifyException(404, -1, "Not found")

        with pytest.raises(SpotifyError) as exc_info:
            SpotifyClient(spotify).playlist_tracks("missing")

        assert not exc_info.value.is_auth_error
        assert exc_info.value.details["playlist_id"] == "missing"

    def test_empty_response(self):
        spotify = Mock()
        spotify.playlist_items.return_value = None

        with pytest.raises(SpotifyError):
            SpotifyClient(spotify).playlist_items("playlist123")

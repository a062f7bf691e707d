"""Test configuration and fixtures"""

import json
import tempfile
from pathlib import Path

import pytest

from spot_tube.core.config import YouTubeConfig


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def client_config():
    """Google OAuth client JSON for a Desktop app"""
    return {
        "installed": {
            "client_id": "1234-abc.apps.googleusercontent.com",
            "project_id": "spot-tube-test",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "client_secret": "test-secret",
            "redirect_uris": ["http://localhost"],
        }
    }


@pytest.fixture
def youtube_config(client_config, temp_dir):
    """YouTube config section pointing at a temp token file"""
    return YouTubeConfig(client_config=client_config, token_file=temp_dir / "token.json")


@pytest.fixture
def base_env(client_config):
    """Minimal valid environment"""
    return {
        "SPOTIFY_CLIENT_ID": "spotify-id",
        "SPOTIFY_CLIENT_SECRET": "spotify-secret",
        "YOUTUBE_CREDENTIALS_JSON": json.dumps(client_config),
    }


@pytest.fixture
def sample_playlist_items():
    """Playlist items as returned by spotipy playlist_items()"""
    return [
        {
            "added_at": "2023-01-01T00:00:00Z",
            "track": {
                "id": "track1",
                "name": "Imagine",
                "artists": [{"id": "a1", "name": "John Lennon"}],
            },
        },
        {"added_at": "2023-01-02T00:00:00Z", "track": None},
        {
            "added_at": "2023-01-03T00:00:00Z",
            "track": {
                "id": "track2",
                "name": "Under Pressure",
                "artists": [
                    {"id": "a2", "name": "Queen"},
                    {"id": "a3", "name": "David Bowie"},
                ],
            },
        },
    ]

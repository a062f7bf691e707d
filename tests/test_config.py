"""Test configuration loading"""

import json
from pathlib import Path

import pytest

from spot_tube.core.config import (
    DEFAULT_PLAYLIST_ID,
    load_config,
    parse_client_config,
)
from spot_tube.core.exceptions import ConfigError


def _load(env, config_path=None):
    return load_config(config_path, environ=env, load_env_file=False)


class TestLoadConfig:
    """Test load_config()"""

    def test_defaults(self, base_env, temp_dir, monkeypatch):
        """Only required variables set: defaults fill the rest"""
        monkeypatch.chdir(temp_dir)
        config = _load(base_env)

        assert config.spotify.client_id == "spotify-id"
        assert config.spotify.client_secret == "spotify-secret"
        assert config.spotify.playlist_id == DEFAULT_PLAYLIST_ID
        assert config.youtube.token_file == Path("token.json")
        assert config.youtube.redirect_uri == "http://localhost"
        assert config.download.command == ("yt-dlp",)
        assert config.download.directory == Path(".")
        assert config.output.log_directory == Path("logs")

    @pytest.mark.parametrize(
        "missing",
        ["SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_SECRET", "YOUTUBE_CREDENTIALS_JSON"],
    )
    def test_missing_required_variable(self, base_env, temp_dir, monkeypatch, missing):
        """Each required variable halts with a message naming it"""
        monkeypatch.chdir(temp_dir)
        env = dict(base_env)
        env[missing] = "   "

        with pytest.raises(ConfigError) as exc_info:
            _load(env)
        assert missing in exc_info.value.message

    def test_yaml_settings(self, base_env, temp_dir, monkeypatch):
        """config.yaml in the working directory is picked up"""
        monkeypatch.chdir(temp_dir)
        (temp_dir / "config.yaml").write_text(
            "spotify:\n"
            "  playlist_id: fromyaml\n"
            "download:\n"
            "  command: yt-dlp -x --audio-format m4a\n"
            "  directory: music\n",
            encoding="utf-8",
        )

        config = _load(base_env)

        assert config.spotify.playlist_id == "fromyaml"
        assert config.download.command == ("yt-dlp", "-x", "--audio-format", "m4a")
        assert config.download.directory == Path("music")

    def test_env_overrides_yaml(self, base_env, temp_dir):
        """Environment wins over config.yaml"""
        config_file = temp_dir / "custom.yaml"
        config_file.write_text(
            "spotify:\n  playlist_id: fromyaml\nyoutube:\n  token_file: yaml_token.json\n",
            encoding="utf-8",
        )
        env = dict(base_env, SPOTIFY_PLAYLIST_ID="fromenv")

        config = _load(env, config_file)

        assert config.spotify.playlist_id == "fromenv"
        assert config.youtube.token_file == Path("yaml_token.json")

    def test_explicit_config_path_missing(self, base_env, temp_dir):
        with pytest.raises(ConfigError):
            _load(base_env, temp_dir / "nope.yaml")

    def test_invalid_yaml(self, base_env, temp_dir):
        config_file = temp_dir / "bad.yaml"
        config_file.write_text("spotify: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            _load(base_env, config_file)

    def test_section_must_be_mapping(self, base_env, temp_dir):
        config_file = temp_dir / "bad.yaml"
        config_file.write_text("download: yt-dlp\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            _load(base_env, config_file)

    def test_wrongly_typed_setting(self, base_env, temp_dir):
        config_file = temp_dir / "bad.yaml"
        config_file.write_text("spotify:\n  playlist_id: 42\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            _load(base_env, config_file)


class TestParseClientConfig:
    """Test YouTube client JSON validation"""

    def test_valid_installed(self, client_config):
        assert parse_client_config(json.dumps(client_config)) == client_config

    def test_valid_web(self, client_config):
        web = {"web": client_config["installed"]}
        assert parse_client_config(json.dumps(web)) == web

    def test_not_json(self):
        with pytest.raises(ConfigError):
            parse_client_config("{not json")

    def test_missing_section(self):
        with pytest.raises(ConfigError):
            parse_client_config(json.dumps({"client_id": "x"}))

    def test_missing_key(self, client_config):
        del client_config["installed"]["token_uri"]
        with pytest.raises(ConfigError) as exc_info:
            parse_client_config(json.dumps(client_config))
        assert exc_info.value.details["missing_field"] == "token_uri"

    def test_empty_redirect_uris(self, client_config):
        client_config["installed"]["redirect_uris"] = []
        with pytest.raises(ConfigError):
            parse_client_config(json.dumps(client_config))

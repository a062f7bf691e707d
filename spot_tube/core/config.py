"""
Configuration management for spot-tube.

This module builds the single, immutable Config object that is passed
explicitly to every component. Nothing else in the package reads the
environment.

Sources (highest precedence first):
    1. Process environment variables
    2. A .env file in the current working directory (via python-dotenv)
    3. An optional config.yaml (non-secret settings only)
    4. Built-in defaults

Required environment variables:
    SPOTIFY_CLIENT_ID         Spotify application client ID
    SPOTIFY_CLIENT_SECRET     Spotify application client secret
    YOUTUBE_CREDENTIALS_JSON  Google OAuth client JSON (as downloaded from
                              the Google Cloud console)

Optional overrides:
    SPOTIFY_PLAYLIST_ID       Playlist to process
    YOUTUBE_TOKEN_FILE        Token cache file path
    DOWNLOADER_COMMAND        Downloader executable (plus arguments)
    DOWNLOAD_DIRECTORY        Working directory for the downloader
    LOG_DIRECTORY             Directory for log files

Example config.yaml:
    spotify:
      playlist_id: "2nSHh0BiEoRjfOAF5HXLu9"

    youtube:
      token_file: "token.json"

    download:
      command: "yt-dlp -x --audio-format m4a"
      directory: "~/Music/SpotTube"

    output:
      log_directory: "logs"
"""

import json
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from spot_tube.core.exceptions import ConfigError


CONFIG_FILENAME = "config.yaml"

DEFAULT_PLAYLIST_ID = "2nSHh0BiEoRjfOAF5HXLu9"
DEFAULT_TOKEN_FILE = "token.json"
DEFAULT_DOWNLOADER_COMMAND = "yt-dlp"
DEFAULT_DOWNLOAD_DIRECTORY = "."
DEFAULT_LOG_DIRECTORY = "logs"

# Keys every Google OAuth client section must carry
_REQUIRED_CLIENT_KEYS = ("client_id", "client_secret", "auth_uri", "token_uri")


@dataclass(frozen=True)
class SpotifyConfig:
    """
    Spotify API credentials and the playlist to process.

    Attributes:
        client_id: The Spotify application client ID.
        client_secret: The Spotify application client secret.
        playlist_id: ID of the playlist whose tracks are downloaded.
    """
    client_id: str
    client_secret: str
    playlist_id: str


@dataclass(frozen=True)
class YouTubeConfig:
    """
    YouTube Data API OAuth client and token cache location.

    Attributes:
        client_config: The parsed Google OAuth client JSON, e.g.
                       {"installed": {"client_id": ..., "redirect_uris": [...]}}.
        token_file: Path of the cached OAuth token.
    """
    client_config: dict[str, Any]
    token_file: Path

    @property
    def client_section(self) -> dict[str, Any]:
        """The 'installed' or 'web' section of the client config."""
        return self.client_config.get("installed") or self.client_config["web"]

    @property
    def redirect_uri(self) -> str:
        """First registered redirect URI."""
        return self.client_section["redirect_uris"][0]


@dataclass(frozen=True)
class DownloadConfig:
    """
    External downloader configuration.

    Attributes:
        command: Executable and leading arguments, e.g. ("yt-dlp",).
                 The watch URL is appended as the last argument.
        directory: Working directory the downloader runs in.
    """
    command: tuple[str, ...]
    directory: Path


@dataclass(frozen=True)
class OutputConfig:
    """
    Attributes:
        log_directory: Directory where log files are written.
    """
    log_directory: Path


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created once by load_config() and passed explicitly to each
    component constructor.

    Example:
        config = load_config()
        print(f"Playlist: {config.spotify.playlist_id}")
        print(f"Token cache: {config.youtube.token_file}")
    """
    spotify: SpotifyConfig
    youtube: YouTubeConfig
    download: DownloadConfig
    output: OutputConfig


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    load_env_file: bool = True
) -> Config:
    """
    Load and validate the configuration.

    Args:
        config_path: Optional explicit path to a config.yaml. If None,
                     config.yaml in the current directory is used when present.
                     An explicit path that does not exist is an error.
        environ: Environment mapping to read. Defaults to os.environ.
        load_env_file: Whether to read .env into os.environ first.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If a required variable is missing, the YouTube client
                     JSON is invalid, or config.yaml cannot be parsed.
    """
    if load_env_file:
        load_dotenv()
    env = os.environ if environ is None else environ

    file_config = _read_config_file(config_path)
    spotify_section = _get_section(file_config, "spotify")
    youtube_section = _get_section(file_config, "youtube")
    download_section = _get_section(file_config, "download")
    output_section = _get_section(file_config, "output")

    client_id = _require_env(env, "SPOTIFY_CLIENT_ID")
    client_secret = _require_env(env, "SPOTIFY_CLIENT_SECRET")
    credentials_json = _require_env(env, "YOUTUBE_CREDENTIALS_JSON")

    playlist_id = _setting(
        env, "SPOTIFY_PLAYLIST_ID", spotify_section, "playlist_id", DEFAULT_PLAYLIST_ID
    )
    token_file = _setting(
        env, "YOUTUBE_TOKEN_FILE", youtube_section, "token_file", DEFAULT_TOKEN_FILE
    )
    command = _setting(
        env, "DOWNLOADER_COMMAND", download_section, "command", DEFAULT_DOWNLOADER_COMMAND
    )
    download_dir = _setting(
        env, "DOWNLOAD_DIRECTORY", download_section, "directory", DEFAULT_DOWNLOAD_DIRECTORY
    )
    log_dir = _setting(
        env, "LOG_DIRECTORY", output_section, "log_directory", DEFAULT_LOG_DIRECTORY
    )

    command_parts = tuple(shlex.split(command))
    if not command_parts:
        raise ConfigError(
            "Downloader command must not be empty",
            details={"field": "download.command"}
        )

    return Config(
        spotify=SpotifyConfig(
            client_id=client_id,
            client_secret=client_secret,
            playlist_id=playlist_id,
        ),
        youtube=YouTubeConfig(
            client_config=parse_client_config(credentials_json),
            token_file=Path(token_file).expanduser(),
        ),
        download=DownloadConfig(
            command=command_parts,
            directory=Path(download_dir).expanduser(),
        ),
        output=OutputConfig(log_directory=Path(log_dir).expanduser()),
    )


def parse_client_config(raw: str) -> dict[str, Any]:
    """
    Parse and validate a Google OAuth client JSON blob.

    Args:
        raw: JSON text with an 'installed' or 'web' section.

    Returns:
        The decoded client config dictionary.

    Raises:
        ConfigError: If the JSON is invalid or a required key is missing.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Error loading YouTube credentials: {e}",
            details={"variable": "YOUTUBE_CREDENTIALS_JSON", "original_error": str(e)}
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            "YouTube credentials must be a JSON object",
            details={"variable": "YOUTUBE_CREDENTIALS_JSON"}
        )

    section = data.get("installed") or data.get("web")
    if not isinstance(section, dict):
        raise ConfigError(
            "YouTube credentials must contain an 'installed' or 'web' section",
            details={"variable": "YOUTUBE_CREDENTIALS_JSON"}
        )

    for key in _REQUIRED_CLIENT_KEYS:
        value = section.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(
                f"YouTube credentials are missing '{key}'",
                details={"variable": "YOUTUBE_CREDENTIALS_JSON", "missing_field": key}
            )

    redirect_uris = section.get("redirect_uris")
    if not isinstance(redirect_uris, list) or not redirect_uris:
        raise ConfigError(
            "YouTube credentials must list at least one redirect URI",
            details={"variable": "YOUTUBE_CREDENTIALS_JSON", "missing_field": "redirect_uris"}
        )

    return data


def _read_config_file(config_path: Path | None) -> dict[str, Any]:
    """
    Read config.yaml if present.

    Returns an empty dict when no explicit path is given and the default
    file does not exist.
    """
    if config_path is None:
        path = Path.cwd() / CONFIG_FILENAME
        if not path.exists():
            return {}
    else:
        path = config_path
        if not path.exists():
            raise ConfigError(
                f"Configuration file not found: {path}",
                details={"file_path": str(path)}
            )

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in {path}: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e
    except OSError as e:
        raise ConfigError(
            f"Cannot read configuration file {path}: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(path)}
        )
    return raw_config


def _get_section(raw_config: dict[str, Any], section: str) -> dict[str, Any]:
    value = raw_config.get(section)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(
            f"Section '{section}' must be a dictionary",
            details={"section": section}
        )
    return value


def _require_env(env: Mapping[str, str], name: str) -> str:
    value = env.get(name, "")
    if not value.strip():
        raise ConfigError(
            f"Missing {name} environment variable",
            details={"variable": name}
        )
    return value.strip()


def _setting(
    env: Mapping[str, str],
    env_name: str,
    section: dict[str, Any],
    key: str,
    default: str
) -> str:
    """
    Resolve a non-secret string setting: env, then config.yaml, then default.

    Raises:
        ConfigError: If the config.yaml value is not a non-empty string.
    """
    env_value = env.get(env_name, "").strip()
    if env_value:
        return env_value

    if key not in section or section[key] is None:
        return default

    value = section[key]
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'{key}' must be a non-empty string",
            details={"field": key, "value": value}
        )
    return value.strip()

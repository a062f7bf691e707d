"""
Shared building blocks for spot-tube: configuration, the exception
tree and logging setup. Progress bars live in spot_tube.core.progress
and are imported from there directly.

    from spot_tube.core import load_config, setup_logging, SpotTubeError
"""

from spot_tube.core.config import (
    Config,
    DownloadConfig,
    OutputConfig,
    SpotifyConfig,
    YouTubeConfig,
    load_config,
)
from spot_tube.core.exceptions import (
    AuthorizationError,
    ConfigError,
    CredentialDecodeError,
    CredentialError,
    CredentialNotFoundError,
    CredentialWriteError,
    DownloadError,
    MissingAuthCodeError,
    SpotifyError,
    SpotTubeError,
    TokenExchangeError,
    YouTubeError,
)
from spot_tube.core.logger import (
    get_logger,
    log_search_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "SpotifyConfig",
    "YouTubeConfig",
    "DownloadConfig",
    "OutputConfig",
    "load_config",
    # Exceptions
    "SpotTubeError",
    "ConfigError",
    "CredentialError",
    "CredentialNotFoundError",
    "CredentialDecodeError",
    "CredentialWriteError",
    "AuthorizationError",
    "MissingAuthCodeError",
    "TokenExchangeError",
    "SpotifyError",
    "YouTubeError",
    "DownloadError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_search_failure",
    "shutdown_logging",
]

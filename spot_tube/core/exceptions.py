"""
Exception classes for spot-tube.

Every error carries a message for the operator and a details dict for
the log. Components raise; only the CLI decides whether to exit.

    SpotTubeError
        ConfigError               bad environment or config.yaml (fatal)
        CredentialError           token cache file
            CredentialNotFoundError   no cache yet (recovered)
            CredentialDecodeError     cache is not a token record (recovered)
            CredentialWriteError      cache could not be written (fatal)
        AuthorizationError        interactive OAuth flow (fatal)
            MissingAuthCodeError      pasted text has no 'code'
            TokenExchangeError        token endpoint refused the code
        SpotifyError              playlist fetch (fatal)
        YouTubeError              one track's search (recovered, track skipped)
        DownloadError             downloader run (fatal, rest skipped)
"""


class SpotTubeError(Exception):
    """
    Root of the spot-tube exception tree.

    Attributes:
        message: Text shown to the operator.
        details: Context for the log, e.g. 'path', 'url', 'original_error'.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(SpotTubeError):
    """
    Environment or config.yaml is missing something or malformed.

    Example:
        ConfigError(
            "Missing SPOTIFY_CLIENT_ID environment variable",
            details={"variable": "SPOTIFY_CLIENT_ID"}
        )
    """


class CredentialError(SpotTubeError):
    """Problem with the cached YouTube token file."""


class CredentialNotFoundError(CredentialError):
    pass


class CredentialDecodeError(CredentialError):
    """
    The cache file exists but does not hold a token record: invalid
    JSON, an empty access_token, or an unparseable expiry.
    """


class CredentialWriteError(CredentialError):
    """A newly issued token could not be written to the cache."""


class AuthorizationError(SpotTubeError):
    """The interactive authorization-code flow failed. Never re-prompted."""


class MissingAuthCodeError(AuthorizationError):
    pass


class TokenExchangeError(AuthorizationError):
    """details['original_error'] holds the OAuth or HTTP failure."""


class SpotifyError(SpotTubeError):
    """
    The playlist could not be read from the Spotify Web API.

    Attributes:
        is_auth_error: Client credentials were rejected.
        is_rate_limit: The API answered 429 and spotipy gave up retrying.
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        is_auth_error: bool = False,
        is_rate_limit: bool = False
    ) -> None:
        super().__init__(message, details)
        self.is_auth_error = is_auth_error
        self.is_rate_limit = is_rate_limit


class YouTubeError(SpotTubeError):
    """
    A single search returned nothing usable (API error, quota, zero
    results). details['search_query'] holds the query.
    """


class DownloadError(SpotTubeError):
    """
    The downloader could not be started or exited non-zero.

    details carries 'url' and, for a non-zero exit, 'returncode' and
    'output' (combined stdout and stderr).
    """

    @property
    def output(self) -> str:
        return self.details.get("output", "")

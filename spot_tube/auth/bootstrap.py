"""
OAuth2 bootstrap for the YouTube Data API.

The first run needs a human to approve access in a browser; every later
run reuses the token cached by CredentialStore. TokenBootstrapper drives
this:

    1. Attempt-Load: return the cached token if the cache file decodes.
       A missing file and a corrupt file are treated the same way.
    2. Interactive-Exchange: print the consent URL, read the redirect URL
       the operator pastes back, pull the 'code' out of it, exchange it
       for a token, cache the token.

Any failure in step 2 is fatal. There is no re-prompt.

Usage:
    store = CredentialStore(config.youtube.token_file)
    flow = AuthorizationFlow(config.youtube)
    token = TokenBootstrapper(store, flow).obtain()
    credentials = flow.to_credentials(token)
"""

from datetime import timezone
from typing import Callable
from urllib.parse import parse_qs, unquote_plus, urlparse

import requests
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from spot_tube.auth.store import CredentialStore, OAuthToken
from spot_tube.core.config import YouTubeConfig
from spot_tube.core.exceptions import (
    CredentialDecodeError,
    CredentialNotFoundError,
    MissingAuthCodeError,
    TokenExchangeError,
)
from spot_tube.core.logger import get_logger

logger = get_logger(__name__)


YOUTUBE_SCOPES = ["https://www.googleapis.com/auth/youtube"]

# Fixed state value sent with the consent request
AUTH_STATE = "state-token"

# Takes the consent URL, returns whatever the operator typed
PromptFn = Callable[[str], str]


def console_prompt(auth_url: str) -> str:
    """
    Show the consent URL and block until the operator pastes a line.

    There is no timeout.
    """
    print(
        "Go to the following link in your browser then paste the URL "
        f"you were redirected to:\n{auth_url}\n"
    )
    return input("> ")


def extract_auth_code(pasted: str) -> str:
    """
    Pull the authorization code out of a pasted redirect URL.

    The input is URL-decoded first, since browsers and terminals often
    hand back an escaped copy of the redirect. A raw query string
    ('code=...&state=...') is accepted as well as a full URL.

    Args:
        pasted: Text the operator pasted.

    Returns:
        The value of the 'code' query parameter.

    Raises:
        MissingAuthCodeError: If there is no non-empty 'code' parameter.

    Example:
        extract_auth_code("https://redirect.example/callback?state=state-token&code=ABC123")
        # Returns: "ABC123"
    """
    decoded = unquote_plus(pasted.strip())
    logger.debug(f"Decoded URL: {decoded}")

    query = urlparse(decoded).query
    if not query:
        query = decoded.lstrip("?")

    codes = parse_qs(query).get("code")
    if not codes or not codes[0]:
        raise MissingAuthCodeError(
            "Authorization code not found in URL",
            details={"input": decoded}
        )
    return codes[0]


class AuthorizationFlow:
    """
    Authorization-code grant against Google's OAuth endpoints.

    Thin wrapper around google_auth_oauthlib's Flow that speaks
    OAuthToken instead of google Credentials, so the rest of the
    bootstrap never touches the Google types.

    Attributes:
        config: YouTube section of the application config.
    """

    def __init__(self, config: YouTubeConfig, scopes: list[str] | None = None) -> None:
        self.config = config
        self.scopes = scopes or YOUTUBE_SCOPES
        self._flow = Flow.from_client_config(
            config.client_config,
            scopes=self.scopes,
            redirect_uri=config.redirect_uri,
        )

    def authorization_url(self) -> str:
        """Consent URL requesting offline access, so a refresh token is issued."""
        url, _ = self._flow.authorization_url(
            access_type="offline",
            state=AUTH_STATE,
        )
        return url

    def exchange(self, code: str) -> OAuthToken:
        """
        Exchange an authorization code for a token pair.

        Raises:
            TokenExchangeError: If the token endpoint call fails.
        """
        try:
            self._flow.fetch_token(code=code)
        except (OAuth2Error, requests.RequestException, ValueError, Warning) as e:
            # oauthlib raises a bare Warning when the granted scope differs
            raise TokenExchangeError(
                f"Unable to retrieve token from web: {e}",
                details={"original_error": str(e)}
            ) from e

        credentials = self._flow.credentials
        session_token = self._flow.oauth2session.token or {}
        token_type = session_token.get("token_type") or "Bearer"

        return OAuthToken(
            access_token=credentials.token,
            refresh_token=credentials.refresh_token or "",
            # google-auth keeps expiry as naive UTC
            expiry=credentials.expiry,
            token_type=token_type,
        )

    def to_credentials(self, token: OAuthToken) -> Credentials:
        """
        Build google Credentials that refresh themselves on expiry.

        The client id/secret and token URI come from the client config,
        so an expired cached token is refreshed by the HTTP layer on the
        first request.
        """
        section = self.config.client_section
        expiry = token.expiry
        if expiry is not None:
            expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)

        return Credentials(
            token=token.access_token,
            refresh_token=token.refresh_token or None,
            token_uri=section["token_uri"],
            client_id=section["client_id"],
            client_secret=section["client_secret"],
            scopes=self.scopes,
            expiry=expiry,
        )


class TokenBootstrapper:
    """
    Produces a usable OAuthToken, preferring the cached one.

    Attributes:
        store: Token cache.
        flow: Object with authorization_url() and exchange(code),
              normally an AuthorizationFlow.
        prompt: Callable that shows the consent URL and returns the
                operator's pasted text.
    """

    def __init__(
        self,
        store: CredentialStore,
        flow: AuthorizationFlow,
        prompt: PromptFn = console_prompt
    ) -> None:
        self.store = store
        self.flow = flow
        self.prompt = prompt

    def obtain(self) -> OAuthToken:
        """
        Return the cached token, or run the interactive exchange.

        Raises:
            MissingAuthCodeError: Pasted text has no authorization code.
            TokenExchangeError: Code could not be exchanged.
            CredentialWriteError: New token could not be cached.
        """
        try:
            return self.store.load()
        except CredentialNotFoundError:
            logger.debug("No cached YouTube token, starting authorization")
        except CredentialDecodeError as e:
            logger.debug(f"Cached YouTube token unusable ({e.message}), starting authorization")

        return self.authorize()

    def authorize(self) -> OAuthToken:
        """Run the interactive exchange and cache the new token."""
        auth_url = self.flow.authorization_url()
        try:
            pasted = self.prompt(auth_url)
        except EOFError as e:
            raise MissingAuthCodeError(
                "Unable to read authorization code: input closed"
            ) from e
        code = extract_auth_code(pasted)

        token = self.flow.exchange(code)
        self.store.save(token)
        logger.info("YouTube authorization complete")
        return token

"""
YouTube OAuth credential handling.

    - store: CredentialStore and OAuthToken (token cache file)
    - bootstrap: TokenBootstrapper, AuthorizationFlow, extract_auth_code
"""

from spot_tube.auth.bootstrap import (
    AuthorizationFlow,
    TokenBootstrapper,
    console_prompt,
    extract_auth_code,
)
from spot_tube.auth.store import CredentialStore, OAuthToken

__all__ = [
    "AuthorizationFlow",
    "CredentialStore",
    "OAuthToken",
    "TokenBootstrapper",
    "console_prompt",
    "extract_auth_code",
]

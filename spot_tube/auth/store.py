"""
Token cache for the YouTube OAuth credential.

The cache is a single JSON file holding the most recently obtained token:

    {
      "access_token": "ya29.a0Af...",
      "token_type": "Bearer",
      "refresh_token": "1//0g...",
      "expiry": "2026-10-17T14:03:11Z"
    }

'expiry' is omitted when the token endpoint did not report one. A token
read from the cache may already be expired; refreshing it is left to the
HTTP client built from it.
"""

import json
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from spot_tube.core.exceptions import (
    CredentialDecodeError,
    CredentialNotFoundError,
    CredentialWriteError,
)
from spot_tube.core.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OAuthToken:
    """
    OAuth2 token pair as persisted in the cache file.

    Attributes:
        access_token: Bearer token sent with API requests.
        refresh_token: Long-lived token used to mint new access tokens.
                       Empty if the server did not issue one.
        expiry: Expiry of access_token, or None if unknown. Stored as
                aware UTC; a naive value is taken to be UTC already.
        token_type: Usually "Bearer".
    """
    access_token: str
    refresh_token: str = ""
    expiry: datetime | None = None
    token_type: str = "Bearer"

    def __post_init__(self) -> None:
        if self.expiry is not None:
            object.__setattr__(self, "expiry", _as_utc(self.expiry))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "refresh_token": self.refresh_token,
        }
        if self.expiry is not None:
            data["expiry"] = _format_expiry(self.expiry)
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "OAuthToken":
        """
        Build a token from a decoded cache record.

        Raises:
            CredentialDecodeError: If the record is not a valid token.
        """
        if not isinstance(data, dict):
            raise CredentialDecodeError("Token record must be a JSON object")

        access_token = data.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise CredentialDecodeError("Token record has no access_token")

        refresh_token = data.get("refresh_token") or ""
        token_type = data.get("token_type") or "Bearer"
        if not isinstance(refresh_token, str) or not isinstance(token_type, str):
            raise CredentialDecodeError("Token record has non-string fields")

        raw_expiry = data.get("expiry")
        expiry = None
        if raw_expiry:
            if not isinstance(raw_expiry, str):
                raise CredentialDecodeError("Token expiry must be a string")
            try:
                expiry = _parse_expiry(raw_expiry)
            except ValueError as e:
                raise CredentialDecodeError(
                    f"Invalid token expiry: {raw_expiry}",
                    details={"original_error": str(e)}
                ) from e

        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            expiry=expiry,
            token_type=token_type,
        )


class CredentialStore:
    """
    Reads and writes one OAuthToken at a fixed path.

    Attributes:
        path: Location of the cache file.

    Example:
        store = CredentialStore(Path("token.json"))
        try:
            token = store.load()
        except (CredentialNotFoundError, CredentialDecodeError):
            token = authorize()
            store.save(token)
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> OAuthToken:
        """
        Load the cached token.

        Raises:
            CredentialNotFoundError: If the file does not exist.
            CredentialDecodeError: If the file is unreadable or not a token record.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CredentialNotFoundError(
                f"Token file not found: {self.path}",
                details={"path": str(self.path)}
            ) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CredentialDecodeError(
                f"Token file is not valid JSON: {self.path}",
                details={"path": str(self.path), "original_error": str(e)}
            ) from e
        except OSError as e:
            raise CredentialDecodeError(
                f"Cannot read token file {self.path}: {e}",
                details={"path": str(self.path), "original_error": str(e)}
            ) from e

        token = OAuthToken.from_dict(data)
        logger.debug(f"Loaded cached token from {self.path}")
        return token

    def save(self, token: OAuthToken) -> None:
        """
        Write the token, replacing the whole file.

        The record is written to a temporary file in the same directory
        and renamed over the target, so the cache never holds a partial
        record.

        Raises:
            CredentialWriteError: On any filesystem failure.
        """
        logger.info(f"Saving credential file to: {self.path}")
        tmp_name = None
        try:
            directory = self.path.parent
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(token.to_dict(), f, indent=2)
                f.write("\n")
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise CredentialWriteError(
                f"Unable to create token file: {e}",
                details={"path": str(self.path), "original_error": str(e)}
            ) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        try:
            # owner read/write only
            self.path.chmod(0o600)
        except OSError:
            logger.debug(f"Could not restrict permissions on {self.path}")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _format_expiry(expiry: datetime) -> str:
    return _as_utc(expiry).isoformat().replace("+00:00", "Z")


def _parse_expiry(raw: str) -> datetime:
    """Parse an RFC 3339 timestamp ('Z' or offset suffix) into aware UTC."""
    return _as_utc(datetime.fromisoformat(raw.replace("Z", "+00:00")))

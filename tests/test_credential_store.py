"""Test the YouTube token cache"""

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from spot_tube.auth.store import CredentialStore, OAuthToken
from spot_tube.core.exceptions import (
    CredentialDecodeError,
    CredentialNotFoundError,
    CredentialWriteError,
)


class TestOAuthToken:
    """Test OAuthToken serialization"""

    def test_to_dict_with_expiry(self):
        token = OAuthToken(
            access_token="ya29.abc",
            refresh_token="1//refresh",
            expiry=datetime(2026, 10, 17, 14, 3, 11, tzinfo=timezone.utc),
        )

        assert token.to_dict() == {
            "access_token": "ya29.abc",
            "token_type": "Bearer",
            "refresh_token": "1//refresh",
            "expiry": "2026-10-17T14:03:11Z",
        }

    def test_to_dict_omits_unknown_expiry(self):
        assert "expiry" not in OAuthToken(access_token="x").to_dict()

    def test_from_dict_offset_expiry_normalized_to_utc(self):
        token = OAuthToken.from_dict({
            "access_token": "x",
            "expiry": "2026-10-17T16:03:11+02:00",
        })

        assert token.expiry == datetime(2026, 10, 17, 14, 3, 11, tzinfo=timezone.utc)
        assert token.refresh_token == ""
        assert token.token_type == "Bearer"

    @pytest.mark.parametrize("data", [
        [],
        {},
        {"access_token": ""},
        {"access_token": 5},
        {"access_token": "x", "expiry": "tomorrow"},
        {"access_token": "x", "expiry": 12},
    ])
    def test_from_dict_rejects_bad_records(self, data):
        with pytest.raises(CredentialDecodeError):
            OAuthToken.from_dict(data)


class TestCredentialStore:
    """Test CredentialStore load/save"""

    def test_save_then_load(self, temp_dir):
        """A saved token loads back equal"""
        store = CredentialStore(temp_dir / "token.json")
        token = OAuthToken(
            access_token="ya29.abc",
            refresh_token="1//refresh",
            expiry=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )

        store.save(token)

        assert store.load() == token

    def test_naive_expiry_round_trips(self, temp_dir):
        """A naive expiry is taken as UTC and survives save/load"""
        store = CredentialStore(temp_dir / "token.json")
        token = OAuthToken(access_token="x", expiry=datetime(2026, 1, 1, 12, 30))

        store.save(token)

        assert token.expiry == datetime(2026, 1, 1, 12, 30, tzinfo=timezone.utc)
        assert store.load() == token

    def test_save_overwrites(self, temp_dir):
        store = CredentialStore(temp_dir / "token.json")
        store.save(OAuthToken(access_token="first", refresh_token="r1"))
        store.save(OAuthToken(access_token="second"))

        data = json.loads((temp_dir / "token.json").read_text(encoding="utf-8"))
        assert data["access_token"] == "second"
        assert data["refresh_token"] == ""

    def test_save_leaves_no_temp_files(self, temp_dir):
        store = CredentialStore(temp_dir / "token.json")
        store.save(OAuthToken(access_token="x"))

        assert [p.name for p in temp_dir.iterdir()] == ["token.json"]

    def test_save_creates_parent_directory(self, temp_dir):
        store = CredentialStore(temp_dir / "nested" / "token.json")
        store.save(OAuthToken(access_token="x"))

        assert store.load().access_token == "x"

    def test_load_missing_file(self, temp_dir):
        with pytest.raises(CredentialNotFoundError):
            CredentialStore(temp_dir / "token.json").load()

    def test_load_malformed_json(self, temp_dir):
        path = temp_dir / "token.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CredentialDecodeError):
            CredentialStore(path).load()

    def test_load_missing_access_token(self, temp_dir):
        path = temp_dir / "token.json"
        path.write_text(json.dumps({"refresh_token": "r"}), encoding="utf-8")

        with pytest.raises(CredentialDecodeError):
            CredentialStore(path).load()

    def test_save_failure_raises_write_error(self, temp_dir):
        store = CredentialStore(temp_dir / "token.json")

        with patch("spot_tube.auth.store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(CredentialWriteError) as exc_info:
                store.save(OAuthToken(access_token="x"))

        assert "disk full" in exc_info.value.message
        assert not (temp_dir / "token.json").exists()
        assert list(temp_dir.iterdir()) == []

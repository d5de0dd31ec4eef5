"""Tests for StorageConfig."""

import pytest

from networth.config import OAuthCredentials, StorageConfig
from networth.constants import DEFAULT_REDIRECT_URI, StorageMode


class TestStorageConfig:
    def test_default_is_local(self) -> None:
        assert StorageConfig().mode is StorageMode.LOCAL

    def test_remote_requires_credentials(self) -> None:
        with pytest.raises(ValueError, match="requires OAuth credentials"):
            StorageConfig(mode=StorageMode.REMOTE)

    def test_string_mode_is_coerced(self) -> None:
        config = StorageConfig(mode="remote", credentials=OAuthCredentials("id", "secret"))
        assert config.mode is StorageMode.REMOTE

    def test_frozen(self) -> None:
        config = StorageConfig.local()
        with pytest.raises(AttributeError):
            config.mode = StorageMode.REMOTE  # type: ignore[misc]


class TestFromEnv:
    def test_empty_env_is_local(self) -> None:
        assert StorageConfig.from_env({}) == StorageConfig.local()

    def test_client_id_implies_remote(self) -> None:
        config = StorageConfig.from_env({
            "GOOGLE_CLIENT_ID": "id", "GOOGLE_CLIENT_SECRET": "secret",
        })
        assert config.mode is StorageMode.REMOTE
        assert config.credentials == OAuthCredentials("id", "secret", DEFAULT_REDIRECT_URI)

    def test_explicit_local_wins(self) -> None:
        config = StorageConfig.from_env({
            "NETWORTH_STORAGE_MODE": "LOCAL", "GOOGLE_CLIENT_ID": "id",
        })
        assert config.mode is StorageMode.LOCAL

    def test_redirect_uri_override(self) -> None:
        config = StorageConfig.from_env({
            "NETWORTH_STORAGE_MODE": "remote",
            "GOOGLE_CLIENT_ID": "id",
            "GOOGLE_CLIENT_SECRET": "secret",
            "GOOGLE_REDIRECT_URI": "https://example.com/cb",
        })
        assert config.credentials.redirect_uri == "https://example.com/cb"

    def test_unknown_mode(self) -> None:
        with pytest.raises(ValueError):
            StorageConfig.from_env({"NETWORTH_STORAGE_MODE": "github"})

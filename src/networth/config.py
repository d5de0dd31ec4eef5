"""Storage configuration: storage mode plus Google OAuth client credentials.

The host application constructs this from its own settings and passes it
to ``PersistenceService.initialize()``. Nothing here is persisted; the
host re-supplies it at every process start.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from networth.constants import DEFAULT_REDIRECT_URI, StorageMode


@dataclass(frozen=True)
class OAuthCredentials:
    client_id: str
    client_secret: str
    redirect_uri: str = DEFAULT_REDIRECT_URI


@dataclass(frozen=True)
class StorageConfig:
    """Storage mode plus the OAuth client credentials remote mode needs."""

    mode: StorageMode = StorageMode.LOCAL
    credentials: OAuthCredentials | None = None

    def __post_init__(self) -> None:
        # Accept plain strings ("local" / "remote") from hosts.
        object.__setattr__(self, "mode", StorageMode(self.mode))
        if self.mode is StorageMode.REMOTE and self.credentials is None:
            raise ValueError("remote storage mode requires OAuth credentials")

    @classmethod
    def local(cls) -> StorageConfig:
        return cls(mode=StorageMode.LOCAL)

    @classmethod
    def remote(
        cls,
        client_id: str,
        client_secret: str,
        redirect_uri: str = DEFAULT_REDIRECT_URI,
    ) -> StorageConfig:
        return cls(
            mode=StorageMode.REMOTE,
            credentials=OAuthCredentials(client_id, client_secret, redirect_uri),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StorageConfig:
        """Build a config from ``NETWORTH_STORAGE_MODE`` and ``GOOGLE_*`` vars.

        Remote mode is selected explicitly, or implicitly when a Google
        client id is present and no mode is given.
        """
        env = os.environ if environ is None else environ
        client_id = env.get("GOOGLE_CLIENT_ID", "")
        raw_mode = env.get("NETWORTH_STORAGE_MODE", "").strip().lower()
        if not raw_mode:
            raw_mode = StorageMode.REMOTE.value if client_id else StorageMode.LOCAL.value

        mode = StorageMode(raw_mode)
        if mode is StorageMode.LOCAL:
            return cls.local()
        return cls.remote(
            client_id=client_id,
            client_secret=env.get("GOOGLE_CLIENT_SECRET", ""),
            redirect_uri=env.get("GOOGLE_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
        )

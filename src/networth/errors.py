"""Exception hierarchy for the persistence service."""

from __future__ import annotations


class PersistenceError(Exception):
    """Base exception for persistence operations."""


class NotConfigured(PersistenceError):
    """Remote credentials were required but never supplied via initialize()."""


# ---------------------------------------------------------------------------
# OAuth
# ---------------------------------------------------------------------------


class AuthError(PersistenceError):
    """Token endpoint rejected a grant or could not be reached."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class AuthExchangeFailed(AuthError):
    """Authorization-code exchange failed."""


class AuthRefreshFailed(AuthError):
    """Refresh-token grant failed, or no refresh token is available."""


# ---------------------------------------------------------------------------
# Remote document API
# ---------------------------------------------------------------------------


class RemoteApiError(PersistenceError):
    """Non-2xx response (or transport failure) from the document API."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RemoteConnectionError(RemoteApiError):
    """Network/DNS failure."""


class RemoteTimeoutError(RemoteApiError):
    """Request exceeded its deadline."""


class RemoteWriteFailed(RemoteApiError):
    """Content update failed. A best-effort local copy was written."""


class RemoteUnavailable(PersistenceError):
    """Remote document handle could not be resolved during a save."""


# ---------------------------------------------------------------------------
# Local store
# ---------------------------------------------------------------------------


class LocalWriteFailed(PersistenceError):
    """The local store raised while writing."""


class CorruptLocalData(PersistenceError):
    """The local store holds content that is not a valid document."""

"""PersistenceService — one JSON document, stored locally or in Google Drive.

The service decides per call which backend is active: Drive when the host
asked for remote storage *and* an OAuth token set is present, the local
store otherwise. Reads degrade to the local copy when Drive fails; writes
always leave a local copy behind when Drive fails and then raise, so the
caller knows the document did not sync.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from networth.config import StorageConfig
from networth.constants import (
    DOCUMENT_KEY,
    DRIVE_FILE_NAME,
    HTTP_TIMEOUT_SECS,
    TOKENS_KEY,
    Backend,
    ServiceState,
    StorageMode,
)
from networth.drive import DriveClient, DriveFile
from networth.errors import (
    AuthRefreshFailed,
    CorruptLocalData,
    LocalWriteFailed,
    NotConfigured,
    PersistenceError,
    RemoteApiError,
    RemoteUnavailable,
)
from networth.local_store import LocalStore
from networth.models import StoredDocument
from networth.oauth import GoogleOAuthClient
from networth.tokens import OAuthTokenSet

logger = logging.getLogger(__name__)


class PersistenceService:
    """Storage-mode selection, OAuth token lifecycle and document I/O.

    Construct once at process start and hand the instance to every caller.

    - ``initialize()`` sets the mode and restores a persisted token set.
    - ``get_authorization_url()`` / ``complete_authorization()`` run the
      consent flow.
    - ``save()`` / ``load()`` move the whole document.

    Saves are serialized through one lock, so overlapping saves from this
    process land in call order. Concurrent writers in other processes are
    still last-write-wins.
    """

    def __init__(
        self,
        local_store: LocalStore,
        *,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
        file_name: str = DRIVE_FILE_NAME,
    ) -> None:
        self._local = local_store
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(HTTP_TIMEOUT_SECS),
        )
        self._clock = clock
        self._file_name = file_name
        self._config: StorageConfig | None = None
        self._oauth: GoogleOAuthClient | None = None
        self._tokens: OAuthTokenSet | None = None
        self._drive = DriveClient(self._http, self._access_token)
        self._save_lock = asyncio.Lock()
        self._refresh_lock = asyncio.Lock()

    # -- configuration --------------------------------------------------------

    def initialize(self, config: StorageConfig) -> None:
        """Apply ``config``, replacing any earlier configuration.

        In remote mode, restores the token set persisted by an earlier
        process so the consent flow is not repeated. No network I/O.
        """
        self._config = config
        self._oauth = None
        self._tokens = None

        if config.mode is StorageMode.REMOTE and config.credentials is not None:
            self._oauth = GoogleOAuthClient(config.credentials, self._http)
            try:
                stored = self._local.get(TOKENS_KEY)
            except (OSError, ValueError) as exc:
                logger.warning("Could not read stored token set: %s", exc)
                stored = None
            if stored:
                self._tokens = OAuthTokenSet.from_json(stored)

        logger.info(
            "Persistence initialized: mode=%s, state=%s",
            config.mode.value, self.state.value,
        )

    @property
    def state(self) -> ServiceState:
        if self._config is None:
            return ServiceState.UNCONFIGURED
        if self._config.mode is StorageMode.LOCAL:
            return ServiceState.LOCAL_ONLY
        if self._tokens is None:
            return ServiceState.REMOTE_PENDING_AUTH
        return ServiceState.REMOTE_AUTHORIZED

    def resolve_active_backend(self) -> Backend:
        """Drive iff remote mode is configured and a token set is present."""
        if (
            self._config is not None
            and self._config.mode is StorageMode.REMOTE
            and self._tokens is not None
        ):
            return Backend.REMOTE
        return Backend.LOCAL

    def _require_oauth(self) -> GoogleOAuthClient:
        if self._oauth is None:
            raise NotConfigured("Google credentials not initialized")
        return self._oauth

    # -- OAuth ----------------------------------------------------------------

    def get_authorization_url(self) -> str:
        """Consent-page URL for the configured OAuth client."""
        return self._require_oauth().authorization_url()

    async def complete_authorization(self, code: str) -> None:
        """Exchange a one-time authorization code and persist the token set.

        Raises NotConfigured without remote credentials and
        AuthExchangeFailed when the token endpoint rejects the code.
        """
        oauth = self._require_oauth()
        response = await oauth.exchange_code(code)
        self._store_tokens(OAuthTokenSet.from_response(response, self._clock()))
        logger.info("Google Drive authorization completed.")

    def _store_tokens(self, tokens: OAuthTokenSet) -> None:
        self._tokens = tokens
        try:
            self._local.set(TOKENS_KEY, tokens.to_json())
        except Exception as exc:
            raise LocalWriteFailed(f"Failed to persist token set: {exc}") from exc

    async def _access_token(self) -> str:
        """Current access token, refreshed first if it has expired.

        Awaited by DriveClient before every request.
        """
        if self._tokens is None:
            raise NotConfigured("Not authenticated with Google Drive")
        if self._tokens.is_expired(self._clock()):
            async with self._refresh_lock:
                # Another request may have refreshed while we waited.
                if self._tokens.is_expired(self._clock()):
                    await self._refresh_tokens()
        return self._tokens.access_token

    async def _refresh_tokens(self) -> None:
        """Replace the token set via a refresh grant.

        The stored set is left untouched on failure, so the next remote
        call tries again.
        """
        oauth = self._require_oauth()
        previous = self._tokens
        if previous is None or not previous.refresh_token:
            raise AuthRefreshFailed("Cannot refresh tokens: no refresh token stored")

        response = await oauth.refresh(previous.refresh_token)
        self._store_tokens(
            OAuthTokenSet.from_response(response, self._clock(), previous=previous)
        )
        logger.info("Refreshed Google Drive access token.")

    # -- remote document ------------------------------------------------------

    async def _resolve_remote_document(self) -> DriveFile | None:
        """Find the document by name, creating an empty one if missing.

        Returns None when the search or create call fails. Auth errors
        propagate.
        """
        try:
            listing = await self._drive.find_files(self._file_name)
            if listing.files:
                return listing.files[0]

            created = await self._drive.create_file(self._file_name)
            logger.info("Created %s in Google Drive (id=%s).", self._file_name, created.id)
            return created
        except RemoteApiError as exc:
            logger.warning("Could not find or create %s: %s", self._file_name, exc)
            return None

    # -- local document -------------------------------------------------------

    def _write_local(self, payload: str) -> None:
        try:
            self._local.set(DOCUMENT_KEY, payload)
        except Exception as exc:
            raise LocalWriteFailed(f"Failed to write local document: {exc}") from exc

    def _write_local_best_effort(self, payload: str) -> None:
        try:
            self._write_local(payload)
        except LocalWriteFailed:
            logger.warning("Best-effort local write failed.", exc_info=True)
        else:
            logger.warning("Remote save failed; document written to local store.")

    def _read_local(self) -> StoredDocument:
        try:
            stored = self._local.get(DOCUMENT_KEY)
        except (OSError, ValueError) as exc:
            raise CorruptLocalData(f"Local store is unreadable: {exc}") from exc
        if stored is None:
            return StoredDocument.empty()
        try:
            return StoredDocument.from_json(stored)
        except ValueError as exc:
            raise CorruptLocalData(f"Local document is unreadable: {exc}") from exc

    def _read_local_fallback(self) -> StoredDocument:
        """Local copy for a failed remote load. Never raises."""
        try:
            return self._read_local()
        except CorruptLocalData:
            logger.warning("Local fallback copy is corrupt; returning empty document.")
            return StoredDocument.empty()

    # -- public I/O -----------------------------------------------------------

    async def save(self, document: StoredDocument | Mapping[str, Any]) -> None:
        """Persist ``document``, replacing whatever was stored before.

        Returning normally means the document is stored in the active
        backend. When Drive is active and fails, the document is written
        to the local store and the Drive error is raised
        (RemoteUnavailable, RemoteWriteFailed or AuthRefreshFailed).
        """
        payload = StoredDocument.from_dict(document).to_json()

        async with self._save_lock:
            backend = self.resolve_active_backend()
            logger.debug("Saving document using %s backend.", backend.value)

            if backend is Backend.LOCAL:
                self._write_local(payload)
                return

            try:
                handle = await self._resolve_remote_document()
                if handle is None:
                    raise RemoteUnavailable(
                        f"Could not find or create {self._file_name} in Google Drive"
                    )
                await self._drive.upload(handle.id, self._file_name, payload)
            except PersistenceError:
                self._write_local_best_effort(payload)
                raise

            logger.info("Saved document to Google Drive (id=%s).", handle.id)

    async def load(self) -> StoredDocument:
        """Return the stored document, or the empty document if none exists.

        Drive failures fall back to the local copy and are only logged.
        AuthRefreshFailed still propagates so the caller can ask the user
        to reconnect.
        """
        backend = self.resolve_active_backend()
        if backend is Backend.LOCAL:
            return self._read_local()

        handle = await self._resolve_remote_document()
        if handle is None:
            logger.warning("Google Drive unavailable; loading local copy.")
            return self._read_local_fallback()

        try:
            content = await self._drive.download(handle.id)
            return StoredDocument.from_json(content)
        except (RemoteApiError, ValueError) as exc:
            logger.warning("Error loading from Google Drive: %s; loading local copy.", exc)
            return self._read_local_fallback()

    # -- lifecycle ------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> PersistenceService:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

"""Async client for the Google Drive v3 files API.

Only the four calls the persistence service needs: name search, metadata
create, multipart content update, and media download. Every request goes
through ``_request``, which asks the token source for a bearer token first,
so pre-flight refresh lives in exactly one place.
"""

from __future__ import annotations

import json
import logging
import secrets
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from networth.constants import DOCUMENT_MIME_TYPE, DRIVE_API_URL, DRIVE_UPLOAD_URL
from networth.errors import (
    RemoteApiError,
    RemoteConnectionError,
    RemoteTimeoutError,
    RemoteWriteFailed,
)

logger = logging.getLogger(__name__)

AccessTokenSource = Callable[[], Awaitable[str]]


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DriveFile:
    """Handle of a file in the remote store."""

    id: str
    name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> DriveFile:
        if not isinstance(data, dict):
            raise ValueError("file resource is not a JSON object")
        file_id = data.get("id")
        if not isinstance(file_id, str) or not file_id:
            raise ValueError("file resource has no id")
        return cls(id=file_id, name=str(data.get("name", "")))


@dataclass(frozen=True)
class DriveFileList:
    files: list[DriveFile] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> DriveFileList:
        if not isinstance(data, dict):
            raise ValueError("file list is not a JSON object")
        raw_files = data.get("files") or []
        if not isinstance(raw_files, list):
            raise ValueError("file list 'files' is not a list")
        return cls(files=[DriveFile.from_dict(f) for f in raw_files])


# ---------------------------------------------------------------------------
# Multipart encoding
# ---------------------------------------------------------------------------


def encode_multipart(
    metadata: dict[str, Any], content: str, boundary: str | None = None,
) -> tuple[str, bytes]:
    """Encode a ``multipart/related`` body: JSON metadata part, then JSON content.

    Returns ``(content_type_header, body)``.
    """
    if boundary is None:
        boundary = "boundary" + secrets.token_hex(12)
    body = (
        f"--{boundary}\r\n"
        "Content-Type: application/json; charset=UTF-8\r\n\r\n"
        f"{json.dumps(metadata)}\r\n"
        f"--{boundary}\r\n"
        f"Content-Type: {DOCUMENT_MIME_TYPE}\r\n\r\n"
        f"{content}\r\n"
        f"--{boundary}--"
    )
    return f"multipart/related; boundary={boundary}", body.encode("utf-8")


def _name_query(name: str) -> str:
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"name = '{escaped}' and trashed = false"


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class DriveClient:
    """Bearer-authenticated Drive v3 calls.

    ``token_source`` is awaited before every request and must return a
    valid access token (refreshing it first if needed).
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token_source: AccessTokenSource,
        api_url: str = DRIVE_API_URL,
        upload_url: str = DRIVE_UPLOAD_URL,
    ) -> None:
        self._client = client
        self._token_source = token_source
        self._api_url = api_url.rstrip("/")
        self._upload_url = upload_url.rstrip("/")

    # -- internal request dispatcher -----------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json_data: dict[str, Any] | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send an authenticated request; map failures to RemoteApiError."""
        access_token = await self._token_source()
        request_headers = {"Authorization": f"Bearer {access_token}"}
        if headers:
            request_headers.update(headers)

        logger.debug("Drive %s %s params=%s", method, url, params)
        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                json=json_data,
                content=content,
                headers=request_headers,
            )
        except httpx.TimeoutException as exc:
            raise RemoteTimeoutError(str(exc)) from exc
        except httpx.TransportError as exc:
            raise RemoteConnectionError(str(exc)) from exc

        if not response.is_success:
            raise RemoteApiError(
                f"Drive API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteApiError(
                f"Drive API returned non-JSON body: {exc}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

    # -- public API methods ---------------------------------------------------

    async def find_files(self, name: str) -> DriveFileList:
        """GET /files — files with exactly this name, trashed files excluded."""
        response = await self._request(
            "GET",
            f"{self._api_url}/files",
            params={
                "q": _name_query(name),
                "spaces": "drive",
                "fields": "files(id, name)",
            },
        )
        try:
            return DriveFileList.from_dict(self._json(response))
        except ValueError as exc:
            raise RemoteApiError(
                f"Malformed file list: {exc}", response.status_code, response.text,
            ) from exc

    async def create_file(
        self, name: str, mime_type: str = DOCUMENT_MIME_TYPE,
    ) -> DriveFile:
        """POST /files — create an empty file with the given metadata."""
        response = await self._request(
            "POST",
            f"{self._api_url}/files",
            json_data={"name": name, "mimeType": mime_type},
        )
        try:
            return DriveFile.from_dict(self._json(response))
        except ValueError as exc:
            raise RemoteApiError(
                f"Malformed create response: {exc}", response.status_code, response.text,
            ) from exc

    async def download(self, file_id: str) -> str:
        """GET /files/{id}?alt=media — raw file content as text."""
        response = await self._request(
            "GET", f"{self._api_url}/files/{file_id}", params={"alt": "media"},
        )
        return response.text

    async def upload(
        self,
        file_id: str,
        name: str,
        content: str,
        mime_type: str = DOCUMENT_MIME_TYPE,
    ) -> None:
        """PATCH the upload endpoint with a multipart metadata+content body.

        Any failure, HTTP or transport, surfaces as RemoteWriteFailed.
        """
        content_type, body = encode_multipart(
            {"name": name, "mimeType": mime_type}, content,
        )
        try:
            await self._request(
                "PATCH",
                f"{self._upload_url}/files/{file_id}",
                params={"uploadType": "multipart"},
                content=body,
                headers={"Content-Type": content_type},
            )
        except RemoteApiError as exc:
            raise RemoteWriteFailed(
                f"Failed to update file {file_id}: {exc}",
                status_code=exc.status_code,
                body=exc.body,
            ) from exc

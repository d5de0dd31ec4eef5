"""Google OAuth 2.0 client: consent URL, code exchange, token refresh."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from networth.config import OAuthCredentials
from networth.constants import DRIVE_SCOPES, GOOGLE_AUTH_URL, GOOGLE_TOKEN_URL
from networth.errors import AuthError, AuthExchangeFailed, AuthRefreshFailed
from networth.tokens import TokenResponse

logger = logging.getLogger(__name__)


def build_authorization_url(credentials: OAuthCredentials) -> str:
    """Consent-page URL requesting offline access and forced re-consent.

    ``prompt=consent`` makes Google issue a refresh token on every consent,
    not only the first.
    """
    params = {
        "client_id": credentials.client_id,
        "redirect_uri": credentials.redirect_uri,
        "response_type": "code",
        "scope": " ".join(DRIVE_SCOPES),
        "access_type": "offline",
        "prompt": "consent",
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


class GoogleOAuthClient:
    """Token-endpoint grants for one OAuth client.

    Shares the caller's ``httpx.AsyncClient``; does not close it.
    """

    def __init__(
        self,
        credentials: OAuthCredentials,
        client: httpx.AsyncClient,
        token_url: str = GOOGLE_TOKEN_URL,
    ) -> None:
        self._credentials = credentials
        self._client = client
        self._token_url = token_url

    def authorization_url(self) -> str:
        return build_authorization_url(self._credentials)

    async def exchange_code(self, code: str) -> TokenResponse:
        """``authorization_code`` grant. Raises AuthExchangeFailed."""
        logger.info("Exchanging authorization code %s...", code[:5])
        return await self._grant(
            {
                "grant_type": "authorization_code",
                "code": code,
                "client_id": self._credentials.client_id,
                "client_secret": self._credentials.client_secret,
                "redirect_uri": self._credentials.redirect_uri,
            },
            AuthExchangeFailed,
        )

    async def refresh(self, refresh_token: str) -> TokenResponse:
        """``refresh_token`` grant. Raises AuthRefreshFailed."""
        return await self._grant(
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
                "client_id": self._credentials.client_id,
                "client_secret": self._credentials.client_secret,
            },
            AuthRefreshFailed,
        )

    async def _grant(
        self, form: dict[str, str], error_cls: type[AuthError],
    ) -> TokenResponse:
        """POST a form-encoded grant and validate the response body."""
        grant = form["grant_type"]
        try:
            response = await self._client.post(self._token_url, data=form)
        except httpx.HTTPError as exc:
            raise error_cls(f"{grant} grant failed: {exc}") from exc

        if not response.is_success:
            logger.warning(
                "Token endpoint rejected %s grant: %d %s",
                grant, response.status_code, response.text,
            )
            raise error_cls(
                f"{grant} grant rejected with HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            payload: Any = response.json()
            token = TokenResponse.from_dict(payload)
        except ValueError as exc:
            raise error_cls(
                f"{grant} grant returned an invalid body: {exc}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        logger.debug(
            "Received tokens: refresh_token %s, expires_in %s",
            "present" if token.refresh_token else "missing", token.expires_in,
        )
        return token

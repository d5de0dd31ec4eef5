"""OAuth token set and the token endpoint's response schema."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# TokenResponse
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TokenResponse:
    """Body of a successful token-endpoint response.

    ``refresh_token`` is routinely omitted on refresh grants.
    """

    access_token: str
    expires_in: int | None = None
    refresh_token: str | None = None
    token_type: str = "Bearer"
    scope: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> TokenResponse:
        """Validate a decoded response. Raises ValueError if it is unusable."""
        if not isinstance(data, dict):
            raise ValueError("token response is not a JSON object")
        access_token = data.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("token response has no access_token")
        raw_expires_in = data.get("expires_in")
        try:
            expires_in = int(raw_expires_in) if raw_expires_in is not None else None
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"token response has invalid expires_in: {raw_expires_in!r}"
            ) from exc
        return cls(
            access_token=access_token,
            expires_in=expires_in,
            refresh_token=data.get("refresh_token") or None,
            token_type=str(data.get("token_type", "Bearer")),
            scope=data.get("scope"),
        )


# ---------------------------------------------------------------------------
# OAuthTokenSet
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OAuthTokenSet:
    """Access/refresh credential pair plus absolute expiry (epoch seconds).

    ``expiry_timestamp`` is None when the provider gave no lifetime; such a
    token is never refreshed pre-emptively.
    """

    access_token: str
    refresh_token: str | None = None
    expiry_timestamp: float | None = None

    def is_expired(self, now: float) -> bool:
        return self.expiry_timestamp is not None and now >= self.expiry_timestamp

    @classmethod
    def from_response(
        cls,
        response: TokenResponse,
        now: float,
        previous: OAuthTokenSet | None = None,
    ) -> OAuthTokenSet:
        """Build the replacement token set for a grant response.

        Keeps ``previous.refresh_token`` when the response omits one.
        """
        refresh_token = response.refresh_token
        if refresh_token is None and previous is not None:
            refresh_token = previous.refresh_token
        expiry = now + response.expires_in if response.expires_in is not None else None
        return cls(
            access_token=response.access_token,
            refresh_token=refresh_token,
            expiry_timestamp=expiry,
        )

    # -- serialization --------------------------------------------------------

    def to_json(self) -> str:
        return json.dumps({
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expiry_timestamp": self.expiry_timestamp,
        })

    @classmethod
    def from_json(cls, data: str) -> OAuthTokenSet | None:
        """Deserialize a persisted token set. Returns None on corrupt data.

        Also reads raw provider payloads that carry ``expiry_date`` in
        milliseconds instead of ``expiry_timestamp``.
        """
        try:
            obj = json.loads(data)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Stored token set is corrupt; ignoring it.")
            return None

        if not isinstance(obj, dict) or not obj.get("access_token"):
            logger.warning("Stored token set has no access token; ignoring it.")
            return None

        expiry = obj.get("expiry_timestamp")
        if expiry is None and obj.get("expiry_date") is not None:
            expiry = float(obj["expiry_date"]) / 1000.0

        return cls(
            access_token=str(obj["access_token"]),
            refresh_token=obj.get("refresh_token") or None,
            expiry_timestamp=float(expiry) if expiry is not None else None,
        )

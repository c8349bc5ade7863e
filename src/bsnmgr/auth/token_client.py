"""OAuth2 client-credentials token handling for bsnmgr."""

from __future__ import annotations

import time
from typing import Any, Callable, Optional

import requests

from bsnmgr.config import BsnConfig
from bsnmgr.errors import AuthError
from bsnmgr.util.logging import get_logger

logger = get_logger(__name__)

# Tokens are refreshed this many seconds before they actually expire.
EXPIRY_MARGIN_SEC = 30.0


class TokenClient:
    """Obtain and cache a bearer token for the BSN.cloud APIs."""

    def __init__(
        self,
        config: BsnConfig,
        session: requests.Session,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config
        self._session = session
        self._clock = clock
        self._access_token: Optional[str] = None
        self._expires_at: float = 0.0

    @property
    def is_valid(self) -> bool:
        """True if a token is cached and not about to expire."""
        if not self._access_token:
            return False
        return self._expires_at - self._clock() > EXPIRY_MARGIN_SEC

    def get_token(self) -> str:
        """
        Return a valid access token, requesting a new one when needed.

        Raises:
            AuthError: if the token endpoint rejects the credentials or is
                unreachable.
        """
        if not self.is_valid:
            self.fetch()
        return self._access_token  # type: ignore[return-value]

    def fetch(self) -> None:
        """Request a new token from the token endpoint (client_credentials grant)."""
        endpoint = self._config.token_endpoint
        try:
            resp = self._session.post(
                endpoint,
                data={"grant_type": "client_credentials"},
                auth=(self._config.client_id, self._config.client_secret),
                timeout=self._config.timeout_sec,
            )
        except requests.RequestException as exc:
            raise AuthError(
                "Token endpoint is unreachable",
                details={"token_endpoint": endpoint},
                cause=exc,
            ) from exc

        if resp.status_code != 200:
            raise AuthError(
                "Failed to get access token",
                details={"token_endpoint": endpoint, "status_code": resp.status_code},
            )

        try:
            payload: dict[str, Any] = resp.json()
        except ValueError as exc:
            raise AuthError("Token response is not valid JSON", cause=exc) from exc

        token = payload.get("access_token")
        if not isinstance(token, str) or not token:
            raise AuthError("Token response did not include access_token")

        expires_in = payload.get("expires_in")
        if not isinstance(expires_in, (int, float)) or expires_in <= 0:
            expires_in = 3600

        self._access_token = token
        self._expires_at = self._clock() + float(expires_in)
        logger.debug("token_acquired", expires_in=expires_in)

    def invalidate(self) -> None:
        """Forget the cached token so the next call re-authenticates."""
        self._access_token = None
        self._expires_at = 0.0

"""Client settings for bsnmgr (BSN.cloud credentials, endpoints, HTTP policy)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from bsnmgr.errors import ConfigurationError

ENV_CLIENT_ID = "BS_CLIENT_ID"
ENV_SECRET = "BS_SECRET"
ENV_NETWORK = "BS_NETWORK"

DEFAULT_API_VERSION = "2022/06/REST"
DEFAULT_BSN_BASE_URL = "https://api.bsn.cloud"
DEFAULT_RDWS_BASE_URL = "https://ws.bsn.cloud/rest/v1"
DEFAULT_TOKEN_ENDPOINT = (
    "https://auth.bsn.cloud/realms/bsncloud/protocol/openid-connect/token"
)


@dataclass(slots=True, frozen=True)
class BsnConfig:
    """
    Settings for one BSN.cloud client.

    client_id/client_secret are OAuth2 client credentials from the BSN.cloud
    admin panel. network_name is only a resolution default; the active network
    is chosen by the session resolver.
    """

    client_id: str
    client_secret: str

    network_name: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION
    bsn_base_url: str = DEFAULT_BSN_BASE_URL
    rdws_base_url: str = DEFAULT_RDWS_BASE_URL
    token_endpoint: str = DEFAULT_TOKEN_ENDPOINT

    timeout_sec: float = 30.0
    retry_count: int = 3

    def __post_init__(self) -> None:
        if not isinstance(self.client_id, str) or not self.client_id.strip():
            raise ConfigurationError(
                "client_id is required",
                details={"field": "client_id", "hint": f"set {ENV_CLIENT_ID}"},
            )
        if not isinstance(self.client_secret, str) or not self.client_secret.strip():
            raise ConfigurationError(
                "client_secret is required",
                details={"field": "client_secret", "hint": f"set {ENV_SECRET}"},
            )

        for name in ("bsn_base_url", "rdws_base_url", "token_endpoint", "api_version"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(
                    f"{name} must be a non-empty string",
                    details={"field": name},
                )

        if self.timeout_sec <= 0:
            raise ConfigurationError("timeout_sec must be positive", details={"field": "timeout_sec"})
        if self.retry_count < 0:
            raise ConfigurationError("retry_count cannot be negative", details={"field": "retry_count"})

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "BsnConfig":
        """
        Build settings from BS_* environment variables.

        Keyword overrides that are not None take precedence over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "client_id": env.get(ENV_CLIENT_ID, "").strip(),
            "client_secret": env.get(ENV_SECRET, "").strip(),
            "network_name": env.get(ENV_NETWORK, "").strip() or None,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def bsn_url(self, path: str) -> str:
        """Return a BSN.cloud REST URL for `path` (e.g. 'Self/Networks')."""
        return f"{self.bsn_base_url.rstrip('/')}/{self.api_version}/{path.lstrip('/')}"

    def rdws_url(self, path: str) -> str:
        """Return an rDWS URL for `path` (e.g. 'diagnostics/')."""
        return f"{self.rdws_base_url.rstrip('/')}/{path.lstrip('/')}"

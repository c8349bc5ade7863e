"""Public config exports for bsnmgr."""

from __future__ import annotations

from .settings import ENV_CLIENT_ID, ENV_NETWORK, ENV_SECRET, BsnConfig

__all__ = ["BsnConfig", "ENV_CLIENT_ID", "ENV_SECRET", "ENV_NETWORK"]

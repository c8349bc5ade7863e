"""Public auth exports for bsnmgr."""

from __future__ import annotations

from .token_client import EXPIRY_MARGIN_SEC, TokenClient

__all__ = ["TokenClient", "EXPIRY_MARGIN_SEC"]

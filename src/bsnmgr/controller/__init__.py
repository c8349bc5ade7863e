"""Internal controller exports for bsnmgr."""

from __future__ import annotations

from .bsn_controller import BsnController

__all__ = ["BsnController"]

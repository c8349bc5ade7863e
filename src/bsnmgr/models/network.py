"""Data model for BSN.cloud networks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True, frozen=True)
class Network:
    """
    A network (tenant/workspace) the authenticated account can operate in.

    Only `network_id` and `name` take part in resolution; the remaining fields
    are informational.
    """

    network_id: int
    name: str

    subscription_level: Optional[str] = None
    is_locked_out: bool = False
    creation_date: Optional[datetime] = None

    def label(self) -> str:
        return f"{self.name} (ID: {self.network_id})"

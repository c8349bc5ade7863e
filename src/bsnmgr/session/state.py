"""Per-process session state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from bsnmgr.errors import InvalidStateError
from bsnmgr.models import Network


@dataclass(slots=True)
class SessionState:
    """
    Holds the active network for one process.

    The network is bound at most once; later resolutions read it back.
    """

    active_network: Optional[Network] = None

    @property
    def is_bound(self) -> bool:
        return self.active_network is not None

    def bind(self, network: Network) -> Network:
        if self.active_network is not None:
            raise InvalidStateError(
                "Active network is already bound",
                details={
                    "bound_network_id": self.active_network.network_id,
                    "requested_network_id": network.network_id,
                },
            )
        self.active_network = network
        return network

"""Active network resolution for a BSN.cloud session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from bsnmgr.errors import ResolutionError, ResolutionFailure
from bsnmgr.models import Network
from bsnmgr.util.logging import get_logger

from .console import Console
from .state import SessionState

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class ResolutionRequest:
    """
    What the operator asked for.

    Precedence: explicit_name > environment_name > single candidate >
    interactive prompt.
    """

    explicit_name: Optional[str] = None
    environment_name: Optional[str] = None
    interactive: bool = True

    def effective_name(self) -> Optional[str]:
        name = (self.explicit_name or "").strip()
        if not name:
            name = (self.environment_name or "").strip()
        return name or None


class NetworkResolver:
    """
    Determine the single active network for a session.

    Args:
        state: Session state; the resolved network is bound here once.
        bind_network: Collaborator call that activates a network by ID.
        console: Where the candidate list and the selection prompt go.
    """

    def __init__(
        self,
        state: SessionState,
        bind_network: Callable[[int], None],
        *,
        console: Console,
    ) -> None:
        self._state = state
        self._bind_network = bind_network
        self._console = console

    def resolve(
        self,
        request: ResolutionRequest,
        candidates: Callable[[], Sequence[Network]],
    ) -> Network:
        """
        Return the active network, binding one if needed.

        Raises:
            ResolutionError: FETCH_FAILED, NO_NETWORKS_AVAILABLE,
                INVALID_SELECTION, INPUT_UNAVAILABLE or BIND_FAILED.
        """
        if self._state.active_network is not None:
            return self._state.active_network

        requested = request.effective_name()
        try:
            networks = list(candidates())
        except Exception as exc:
            raise ResolutionError(
                "Failed to get networks",
                reason=ResolutionFailure.FETCH_FAILED,
                cause=exc,
            ) from exc
        if not networks:
            raise ResolutionError(
                "No networks available",
                reason=ResolutionFailure.NO_NETWORKS_AVAILABLE,
            )

        if requested is not None:
            match = _find_by_name(networks, requested)
            if match is not None:
                logger.info("network_matched", network_id=match.network_id, name=match.name)
                return self._bind(match)

            logger.warning("network_not_found", requested=requested)
            self._console.write(f"Network '{requested}' not found. Available networks:\n")
            self._write_candidates(networks)
        elif len(networks) == 1:
            logger.info("network_auto_selected", network_id=networks[0].network_id)
            return self._bind(networks[0])
        else:
            self._console.write("Available networks:\n")
            self._write_candidates(networks)

        return self._bind(self._prompt_selection(networks, request.interactive))

    # ----------------------------
    # Internals
    # ----------------------------
    def _prompt_selection(self, networks: list[Network], interactive: bool) -> Network:
        count = len(networks)
        if not interactive:
            raise ResolutionError(
                "Network selection requires interactive input",
                reason=ResolutionFailure.INPUT_UNAVAILABLE,
                details={"candidates": count},
            )

        self._console.write(f"Select network (1-{count}): ")
        line = self._console.read_line()
        if line is None:
            raise ResolutionError(
                "Failed to read network selection",
                reason=ResolutionFailure.INPUT_UNAVAILABLE,
            )

        try:
            index = int(line.strip())
        except ValueError:
            index = 0
        if index < 1 or index > count:
            raise ResolutionError(
                f"Invalid selection: must be between 1 and {count}",
                reason=ResolutionFailure.INVALID_SELECTION,
                details={"input": line},
            )

        selected = networks[index - 1]
        logger.info("network_selected", network_id=selected.network_id, name=selected.name)
        return selected

    def _bind(self, network: Network) -> Network:
        try:
            self._bind_network(network.network_id)
        except Exception as exc:
            raise ResolutionError(
                f"Failed to set network {network.label()}",
                reason=ResolutionFailure.BIND_FAILED,
                details={"network_id": network.network_id},
                cause=exc,
            ) from exc
        return self._state.bind(network)

    def _write_candidates(self, networks: list[Network]) -> None:
        for i, network in enumerate(networks, start=1):
            self._console.write(f"  {i}. {network.label()}\n")


def _find_by_name(networks: list[Network], name: str) -> Optional[Network]:
    wanted = name.casefold()
    for network in networks:
        if network.name.casefold() == wanted:
            return network
    return None

"""BsnManager: resolves the session network and runs guarded operations (v1)."""

from __future__ import annotations

import os
import posixpath
from typing import Optional

from bsnmgr.config import BsnConfig
from bsnmgr.controller import BsnController
from bsnmgr.errors import InvalidStateError, NotFoundError, ValidationError
from bsnmgr.models import (
    ContentFile,
    Device,
    DeviceOperation,
    DiagnosticsInfo,
    ExecutionReport,
    LocalDwsInfo,
    Network,
    PlayerFile,
)
from bsnmgr.session import (
    CommitKind,
    ConfirmationGate,
    Console,
    NetworkResolver,
    OperationExecutor,
    OperationSpec,
    PendingAction,
    ResolutionRequest,
    SessionState,
    StdConsole,
)
from bsnmgr.util.logging import get_logger

logger = get_logger(__name__)


class BsnManager:
    """High-level manager: open (authenticate + resolve network) -> operate."""

    def __init__(
        self,
        config: BsnConfig,
        *,
        console: Optional[Console] = None,
    ) -> None:
        self._setup(BsnController(config), console, config.network_name)

    @classmethod
    def from_controller(
        cls,
        controller: BsnController,
        *,
        console: Optional[Console] = None,
        environment_network: Optional[str] = None,
    ) -> "BsnManager":
        """Create manager with an injected controller (useful for tests)."""
        obj = cls.__new__(cls)
        obj._setup(controller, console, environment_network)
        return obj

    def _setup(
        self,
        controller: BsnController,
        console: Optional[Console],
        environment_network: Optional[str],
    ) -> None:
        self._controller = controller
        self._console: Console = console if console is not None else StdConsole()
        self._environment_network = environment_network
        self._state = SessionState()
        self._resolver = NetworkResolver(
            self._state,
            controller.set_network_by_id,
            console=self._console,
        )
        self._executor = OperationExecutor(ConfirmationGate(self._console))

    @property
    def network(self) -> Network:
        """Return the active network. Requires open() first."""
        if self._state.active_network is None:
            raise InvalidStateError("No network selected. Call open() first.")
        return self._state.active_network

    def open(
        self,
        *,
        network_name: Optional[str] = None,
        interactive: bool = True,
    ) -> Network:
        """
        Authenticate and resolve the active network.

        network_name takes precedence over the BS_NETWORK default.

        Raises:
            AuthError: if authentication fails.
            ResolutionError: if no network can be resolved.
        """
        if self._state.active_network is None:
            self._controller.authenticate()
        request = ResolutionRequest(
            explicit_name=network_name,
            environment_name=self._environment_network,
            interactive=interactive,
        )
        network = self._resolver.resolve(request, self._controller.list_networks)
        logger.info("network_active", network_id=network.network_id, name=network.name)
        return network

    def list_networks(self) -> list[Network]:
        return self._controller.list_networks()

    # ----------------------------
    # Lookups (read-only)
    # ----------------------------
    def list_content(self, filter_expr: Optional[str] = None) -> list[ContentFile]:
        self._require_network()
        return self._controller.list_content(filter_expr)

    def get_content(self, content_id: int) -> ContentFile:
        self._require_network()
        return self._controller.get_content(content_id)

    def get_device(
        self,
        *,
        serial: Optional[str] = None,
        device_id: Optional[int] = None,
    ) -> Device:
        self._require_network()
        _validate_target(serial, device_id)
        if serial:
            return self._controller.get_device(serial)
        return self._controller.get_device_by_id(device_id)  # type: ignore[arg-type]

    def device_operations(
        self,
        *,
        serial: Optional[str] = None,
        device_id: Optional[int] = None,
    ) -> tuple[Device, list[DeviceOperation]]:
        device = self.get_device(serial=serial, device_id=device_id)
        return device, self._controller.get_device_operations(device.device_id)

    def run_diagnostics(
        self,
        *,
        serial: Optional[str] = None,
        device_id: Optional[int] = None,
    ) -> DiagnosticsInfo:
        return self._controller.get_diagnostics(self._player_serial(serial, device_id))

    def get_local_dws(
        self,
        *,
        serial: Optional[str] = None,
        device_id: Optional[int] = None,
    ) -> LocalDwsInfo:
        return self._controller.get_local_dws(self._player_serial(serial, device_id))

    # ----------------------------
    # Guarded operations
    # ----------------------------
    def delete_content(
        self,
        filter_expr: str,
        *,
        dry_run: bool = False,
        force: bool = False,
        non_interactive: bool = False,
    ) -> ExecutionReport:
        """Delete all content files matching filter_expr (bulk, partial failures reported)."""
        self._require_network()
        if not filter_expr or not filter_expr.strip():
            raise ValidationError("filter is required")

        return self._executor.execute(
            OperationSpec(
                name="content delete",
                preview=lambda: self._controller.list_content(filter_expr),
                commit=lambda: self._controller.delete_content(filter_expr),
                action=PendingAction(
                    description="This will permanently delete the matching content files",
                    force_bypass=force,
                    non_interactive=non_interactive,
                ),
                kind=CommitKind.BULK,
                dry_run=dry_run,
            )
        )

    def delete_presentations(
        self,
        filter_expr: str,
        *,
        dry_run: bool = False,
        force: bool = False,
        non_interactive: bool = False,
    ) -> ExecutionReport:
        """Delete all presentations matching filter_expr (bulk, partial failures reported)."""
        self._require_network()
        if not filter_expr or not filter_expr.strip():
            raise ValidationError("filter is required")

        return self._executor.execute(
            OperationSpec(
                name="presentation delete",
                preview=lambda: self._controller.list_presentations(filter_expr),
                commit=lambda: self._controller.delete_presentations(filter_expr),
                action=PendingAction(
                    description="This will permanently delete the matching presentations",
                    force_bypass=force,
                    non_interactive=non_interactive,
                ),
                kind=CommitKind.BULK,
                dry_run=dry_run,
            )
        )

    def download_content(
        self,
        content_id: int,
        local_path: str,
        *,
        overwrite: bool = False,
        force: bool = False,
        non_interactive: bool = False,
    ) -> ExecutionReport:
        """
        Download a content file to local_path.

        Confirmation is only requested when local_path exists and overwrite
        is False.
        """
        self._require_network()
        needs_consent = os.path.exists(local_path) and not overwrite

        return self._executor.execute(
            OperationSpec(
                name="content download",
                preview=lambda: self._controller.get_content(content_id),
                commit=lambda: self._controller.download_content(
                    content_id,
                    local_path,
                    overwrite=True,
                ),
                action=PendingAction(
                    description=f"File '{local_path}' already exists and will be overwritten",
                    force_bypass=force or not needs_consent,
                    non_interactive=non_interactive,
                ),
            )
        )

    def delete_device(
        self,
        *,
        serial: Optional[str] = None,
        device_id: Optional[int] = None,
        dry_run: bool = False,
        force: bool = False,
        non_interactive: bool = False,
    ) -> ExecutionReport:
        """Remove a device from the active network."""
        self._require_network()
        _validate_target(serial, device_id)
        target: dict[str, Device] = {}

        def preview() -> Device:
            target["device"] = self.get_device(serial=serial, device_id=device_id)
            return target["device"]

        def commit() -> None:
            self._controller.delete_device(target["device"].device_id)

        return self._executor.execute(
            OperationSpec(
                name="device delete",
                preview=preview,
                commit=commit,
                action=PendingAction(
                    description=(
                        f"This will permanently delete the device from network '{self.network.name}'"
                    ),
                    force_bypass=force,
                    non_interactive=non_interactive,
                ),
                dry_run=dry_run,
            )
        )

    def delete_group(
        self,
        group_id: int,
        *,
        dry_run: bool = False,
        force: bool = False,
        non_interactive: bool = False,
    ) -> ExecutionReport:
        """Delete a device group. Its devices stay in the network, ungrouped."""
        self._require_network()
        if not isinstance(group_id, int) or group_id <= 0:
            raise ValidationError("Must specify a valid group ID (greater than 0)")

        return self._executor.execute(
            OperationSpec(
                name="group delete",
                preview=lambda: self._controller.get_group(group_id),
                commit=lambda: self._controller.delete_group(group_id),
                action=PendingAction(
                    description=(
                        "This will permanently delete the group; "
                        "its devices will NOT be deleted but will be ungrouped"
                    ),
                    force_bypass=force,
                    non_interactive=non_interactive,
                ),
                dry_run=dry_run,
            )
        )

    def set_local_dws(
        self,
        enabled: bool,
        *,
        serial: Optional[str] = None,
        device_id: Optional[int] = None,
        force: bool = False,
        non_interactive: bool = False,
    ) -> ExecutionReport:
        """Enable or disable the local Diagnostic Web Server on a player."""
        self._require_network()
        _validate_target(serial, device_id)
        target: dict[str, Device] = {}
        verb = "enable" if enabled else "disable"

        def preview() -> Device:
            target["device"] = self.get_device(serial=serial, device_id=device_id)
            return target["device"]

        return self._executor.execute(
            OperationSpec(
                name=f"local DWS {verb}",
                preview=preview,
                commit=lambda: self._controller.set_local_dws(target["device"].serial, enabled),
                action=PendingAction(
                    description=f"This will {verb} local DWS on the player",
                    force_bypass=force,
                    non_interactive=non_interactive,
                ),
                failure_message=f"Player did not confirm local DWS {verb}",
            )
        )

    def delete_player_file(
        self,
        path: str,
        *,
        serial: Optional[str] = None,
        device_id: Optional[int] = None,
        dry_run: bool = False,
        force: bool = False,
        non_interactive: bool = False,
    ) -> ExecutionReport:
        """Delete one file from a player's storage."""
        player = self._player_serial(serial, device_id)
        return self._executor.execute(
            OperationSpec(
                name="player file delete",
                preview=lambda: self._stat_player_file(player, path),
                commit=lambda: self._controller.delete_player_file(player, path),
                action=PendingAction(
                    description=f"This will permanently delete '{path}' from player {player}",
                    force_bypass=force,
                    non_interactive=non_interactive,
                ),
                dry_run=dry_run,
                failure_message="Player did not confirm the delete",
            )
        )

    def rename_player_file(
        self,
        path: str,
        new_name: str,
        *,
        serial: Optional[str] = None,
        device_id: Optional[int] = None,
        dry_run: bool = False,
        force: bool = False,
        non_interactive: bool = False,
    ) -> ExecutionReport:
        """Rename one file on a player's storage."""
        if not new_name or "/" in new_name:
            raise ValidationError("new name must be a plain file name", details={"new_name": new_name})
        player = self._player_serial(serial, device_id)
        return self._executor.execute(
            OperationSpec(
                name="player file rename",
                preview=lambda: self._stat_player_file(player, path),
                commit=lambda: self._controller.rename_player_file(player, path, new_name),
                action=PendingAction(
                    description=f"This will rename '{path}' to '{new_name}' on player {player}",
                    force_bypass=force,
                    non_interactive=non_interactive,
                ),
                dry_run=dry_run,
                failure_message="Player did not confirm the rename",
            )
        )

    # ----------------------------
    # Internals
    # ----------------------------
    def _require_network(self) -> None:
        if self._state.active_network is None:
            raise InvalidStateError("No network selected. Call open() first.")

    def _player_serial(self, serial: Optional[str], device_id: Optional[int]) -> str:
        self._require_network()
        _validate_target(serial, device_id)
        if serial:
            return serial
        return self._controller.get_device_by_id(device_id).serial  # type: ignore[arg-type]

    def _stat_player_file(self, serial: str, path: str) -> PlayerFile:
        clean = path.strip().strip("/")
        parent, name = posixpath.split(clean)
        if not parent or not name:
            raise ValidationError(
                "path must include a storage volume and a file name (e.g. sd/file.txt)",
                details={"path": path},
            )

        for entry in self._controller.list_player_files(serial, parent):
            if entry.name == name:
                if not entry.path:
                    entry.path = clean
                return entry

        raise NotFoundError("File not found on player", details={"serial": serial, "path": path})


def _validate_target(serial: Optional[str], device_id: Optional[int]) -> None:
    if serial and device_id:
        raise ValidationError("Cannot specify both serial and device ID")
    if not serial and not device_id:
        raise ValidationError("Must specify either serial or device ID")

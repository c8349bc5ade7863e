"""Entry points for the bsn-* console tools."""

from __future__ import annotations

import argparse
import os
from typing import Optional, Sequence

from bsnmgr.manager import BsnManager
from bsnmgr.models import Device
from bsnmgr.util.format import format_file_size, format_timestamp

from .common import ManagerFactory, build_parser, run_tool
from .render import RULE, Presenter


# ----------------------------
# bsn-networks
# ----------------------------
def networks_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser("bsn-networks", "List networks available to the account")

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        active = manager.network
        networks = manager.list_networks()
        out.emit({"active": active, "networks": networks})
        out.line(f"\nNetworks ({len(networks)}):")
        for network in networks:
            marker = "*" if network.network_id == active.network_id else " "
            locked = " [locked out]" if network.is_locked_out else ""
            out.line(f" {marker} {network.label()}{locked}")
        return 0

    return run_tool(parser, body, argv, manager_factory=manager_factory)


# ----------------------------
# bsn-content-list
# ----------------------------
def content_list_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser("bsn-content-list", "List content files in the network")
    parser.add_argument("--filter", help="Filter expression (e.g. \"[Name] CONTAINS 'promo'\")")

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        files = manager.list_content(args.filter)
        out.emit(files)
        if not files:
            out.line("No content files found.")
            return 0

        out.line(f"\nContent files ({len(files)}):")
        out.line(RULE)
        out.items(f.to_item() for f in files)
        total = sum(f.file_size or 0 for f in files)
        out.line(f"\nTotal: {len(files)} files, {format_file_size(total)}")
        return 0

    return run_tool(parser, body, argv, manager_factory=manager_factory)


# ----------------------------
# bsn-content-delete
# ----------------------------
def content_delete_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser(
        "bsn-content-delete",
        "Delete content files matching a filter",
        confirm=True,
        dry_run=True,
    )
    parser.add_argument("--filter", required=True, help="Filter expression selecting files to delete")

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        report = manager.delete_content(
            args.filter,
            dry_run=args.dry_run,
            force=args.yes,
            non_interactive=args.json,
        )
        return out.report(report, noun="files")

    return run_tool(
        parser,
        body,
        argv,
        destructive=True,
        manager_factory=manager_factory,
    )


# ----------------------------
# bsn-content-download
# ----------------------------
def content_download_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser(
        "bsn-content-download",
        "Download a content file",
        confirm=True,
    )
    parser.add_argument("--id", dest="content_id", type=int, required=True, help="Content file ID")
    parser.add_argument("--output", help="Output file path (default: the file's name)")
    parser.add_argument("--overwrite", action="store_true", help="Replace an existing output file")
    parser.add_argument("--info-only", action="store_true", help="Show file info without downloading")

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        if args.info_only:
            content = manager.get_content(args.content_id)
            out.emit(content)
            out.line(f"\n{content.name} (ID: {content.content_id})")
            out.items([content.to_item()])
            return 0

        output = args.output
        if not output:
            output = os.path.basename(manager.get_content(args.content_id).name)

        report = manager.download_content(
            args.content_id,
            output,
            overwrite=args.overwrite,
            force=args.yes,
            non_interactive=args.json,
        )
        if report.committed and not out.json_mode:
            item = report.preview[0]
            out.line(f"Downloaded {item.name} to {output} ({format_file_size(item.size)})")
            return 0
        return out.report(report, noun="files")

    return run_tool(parser, body, argv, manager_factory=manager_factory)


# ----------------------------
# bsn-presentation-delete
# ----------------------------
def presentation_delete_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser(
        "bsn-presentation-delete",
        "Delete presentations matching a filter",
        confirm=True,
        dry_run=True,
    )
    parser.add_argument(
        "--filter",
        required=True,
        help="Filter expression selecting presentations to delete",
    )

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        report = manager.delete_presentations(
            args.filter,
            dry_run=args.dry_run,
            force=args.yes,
            non_interactive=args.json,
        )
        return out.report(report, noun="presentations")

    return run_tool(
        parser,
        body,
        argv,
        destructive=True,
        manager_factory=manager_factory,
    )


# ----------------------------
# bsn-device-info
# ----------------------------
def device_info_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser("bsn-device-info", "Show device details", device_target=True)

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        device = manager.get_device(serial=args.serial, device_id=args.device_id)
        out.emit(device)
        _print_device(out, device)
        return 0

    return run_tool(parser, body, argv, manager_factory=manager_factory)


# ----------------------------
# bsn-device-delete
# ----------------------------
def device_delete_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser(
        "bsn-device-delete",
        "Delete a device from the network",
        device_target=True,
        confirm=True,
        dry_run=True,
    )

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        report = manager.delete_device(
            serial=args.serial,
            device_id=args.device_id,
            dry_run=args.dry_run,
            force=args.yes,
            non_interactive=args.json,
        )
        return out.report(report, noun="devices")

    return run_tool(
        parser,
        body,
        argv,
        destructive=True,
        manager_factory=manager_factory,
    )


# ----------------------------
# bsn-group-delete
# ----------------------------
def group_delete_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser(
        "bsn-group-delete",
        "Delete a device group (devices in it are ungrouped, not deleted)",
        confirm=True,
        dry_run=True,
    )
    parser.add_argument("--id", dest="group_id", type=int, required=True, help="Group ID")

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        report = manager.delete_group(
            args.group_id,
            dry_run=args.dry_run,
            force=args.yes,
            non_interactive=args.json,
        )
        return out.report(report, noun="groups")

    return run_tool(
        parser,
        body,
        argv,
        destructive=True,
        manager_factory=manager_factory,
    )


# ----------------------------
# bsn-device-operations
# ----------------------------
def device_operations_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser(
        "bsn-device-operations",
        "List operations recorded for a device",
        device_target=True,
    )
    parser.add_argument("--status", help="Filter by status (pending, in_progress, completed, failed)")
    parser.add_argument("--type", dest="operation_type", help="Filter by operation type (reboot, update, ...)")

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        device, operations = manager.device_operations(serial=args.serial, device_id=args.device_id)
        if args.status:
            operations = [o for o in operations if o.status.lower() == args.status.lower()]
        if args.operation_type:
            wanted = args.operation_type.lower()
            operations = [o for o in operations if o.operation_type.lower() == wanted]

        out.emit({"device": device, "operations": operations})
        out.line(f"\nOperations for {device.display_name} ({device.serial}):")
        out.line(RULE)
        if not operations:
            out.line("No operations found.")
            return 0
        for op in operations:
            out.line(f"[{op.operation_id}] {op.operation_type}: {op.status}")
            out.line(f"    Created: {format_timestamp(op.created_at)}")
            if op.completed_at:
                out.line(f"    Completed: {format_timestamp(op.completed_at)}")
            if op.progress is not None:
                out.line(f"    Progress: {op.progress}%")
            if op.error:
                out.line(f"    Error: {op.error}")
        return 0

    return run_tool(parser, body, argv, manager_factory=manager_factory)


# ----------------------------
# bsn-local-dws
# ----------------------------
def local_dws_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser(
        "bsn-local-dws",
        "Show or change the local Diagnostic Web Server state of a player",
        device_target=True,
        confirm=True,
    )
    parser.add_argument(
        "-a",
        "--action",
        choices=("get", "enable", "disable"),
        default="get",
        help="Action to perform (default: get)",
    )

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        if args.action == "get":
            info = manager.get_local_dws(serial=args.serial, device_id=args.device_id)
            out.emit(info)
            out.line(f"Local DWS: {'enabled' if info.enabled else 'disabled'}")
            return 0

        report = manager.set_local_dws(
            args.action == "enable",
            serial=args.serial,
            device_id=args.device_id,
            force=args.yes,
            non_interactive=args.json,
        )
        return out.report(report, noun="devices")

    return run_tool(parser, body, argv, manager_factory=manager_factory)


# ----------------------------
# bsn-diagnostics
# ----------------------------
def diagnostics_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser(
        "bsn-diagnostics",
        "Run network diagnostics on a player",
        device_target=True,
    )

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        info = manager.run_diagnostics(serial=args.serial, device_id=args.device_id)
        out.emit(info)
        out.line("\nNetwork diagnostics:")
        out.line(RULE)
        out.line(f"Gateway:              {info.gateway or '-'}")
        out.line(f"DNS servers:          {', '.join(info.dns) or '-'}")
        out.line(f"Connected to router:  {_yes_no(info.connected_to_router)}")
        out.line(f"Connected to internet: {_yes_no(info.connected_to_internet)}")
        out.line(f"External IP:          {info.external_ip_address or '-'}")
        return 0

    return run_tool(parser, body, argv, manager_factory=manager_factory)


# ----------------------------
# bsn-files-delete / bsn-files-rename
# ----------------------------
def files_delete_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser(
        "bsn-files-delete",
        "Delete a file from player storage",
        device_target=True,
        confirm=True,
        dry_run=True,
    )
    parser.add_argument("--path", required=True, help="File path (e.g. 'sd/test.txt')")

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        report = manager.delete_player_file(
            args.path,
            serial=args.serial,
            device_id=args.device_id,
            dry_run=args.dry_run,
            force=args.yes,
            non_interactive=args.json,
        )
        return out.report(report, noun="files")

    return run_tool(
        parser,
        body,
        argv,
        destructive=True,
        manager_factory=manager_factory,
    )


def files_rename_main(
    argv: Optional[Sequence[str]] = None,
    *,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    parser = build_parser(
        "bsn-files-rename",
        "Rename a file on player storage",
        device_target=True,
        confirm=True,
        dry_run=True,
    )
    parser.add_argument("--path", required=True, help="File path (e.g. 'sd/test.txt')")
    parser.add_argument("--name", required=True, help="New file name")

    def body(manager: BsnManager, args: argparse.Namespace, out: Presenter) -> int:
        report = manager.rename_player_file(
            args.path,
            args.name,
            serial=args.serial,
            device_id=args.device_id,
            dry_run=args.dry_run,
            force=args.yes,
            non_interactive=args.json,
        )
        return out.report(report, noun="files")

    return run_tool(
        parser,
        body,
        argv,
        destructive=True,
        manager_factory=manager_factory,
    )


# ----------------------------
# Helpers
# ----------------------------
def _print_device(out: Presenter, device: Device) -> None:
    out.line(f"\nDevice {device.serial} (ID: {device.device_id})")
    out.line(RULE)
    out.line(f"Name:          {device.display_name}")
    out.line(f"Model:         {device.model or '-'}")
    if device.family:
        out.line(f"Family:        {device.family}")
    if device.description:
        out.line(f"Description:   {device.description}")
    out.line(f"Group:         {device.group_name or '-'}")
    out.line(f"Registered:    {format_timestamp(device.registration_date)}")
    out.line(f"Last modified: {format_timestamp(device.last_modified_date)}")


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"

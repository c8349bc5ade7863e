"""Shared argument parsing and run loop for the bsn-* console tools."""

from __future__ import annotations

import argparse
from typing import Callable, Optional, Sequence

from bsnmgr.config import BsnConfig
from bsnmgr.errors import BsnMgrError, ValidationError
from bsnmgr.manager import BsnManager
from bsnmgr.session import StdConsole
from bsnmgr.util.logging import get_logger, setup_logging

from .render import Presenter

logger = get_logger(__name__)

ManagerFactory = Callable[[BsnConfig], BsnManager]
ToolBody = Callable[[BsnManager, argparse.Namespace, Presenter], int]

_EPILOG = """\
Environment:
  BS_CLIENT_ID   API client ID (required)
  BS_SECRET      API client secret (required)
  BS_NETWORK     Default network name (overridden by --network)
  BS_LOG_LEVEL   Log level when --verbose is not given (default: WARNING)
  BS_LOG_FORMAT  Log format: console or json (default: console)
"""


def build_parser(
    prog: str,
    description: str,
    *,
    device_target: bool = False,
    confirm: bool = False,
    dry_run: bool = False,
) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description=description,
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-n",
        "--network",
        help="Network name to use (overrides BS_NETWORK)",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    if device_target:
        target = parser.add_mutually_exclusive_group()
        target.add_argument("--serial", help="Device serial number")
        target.add_argument("--id", dest="device_id", type=int, help="Device ID")

    if confirm:
        parser.add_argument(
            "-y",
            "--yes",
            "--force",
            dest="yes",
            action="store_true",
            help="Skip confirmation prompt",
        )

    if dry_run:
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be affected without changing anything",
        )

    return parser


def require_device_target(args: argparse.Namespace) -> None:
    if not getattr(args, "serial", None) and not getattr(args, "device_id", None):
        raise ValidationError("Must specify either --serial or --id")


def run_tool(
    parser: argparse.ArgumentParser,
    body: ToolBody,
    argv: Optional[Sequence[str]] = None,
    *,
    destructive: bool = False,
    manager_factory: Optional[ManagerFactory] = None,
) -> int:
    """
    Parse arguments, open a session and run `body`.

    Returns the process exit code: 0 on success (including cancelled and
    empty runs and bulk runs with partial failures), 1 on any failure.
    """
    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)
    out = Presenter(json_mode=args.json)

    if destructive and args.json and not getattr(args, "yes", False):
        out.error(ValidationError("--json requires --yes for this command (confirmation cannot be prompted)"))
        return 1

    try:
        if hasattr(args, "device_id"):
            require_device_target(args)
        config = BsnConfig.from_env(timeout_sec=args.timeout)
        if manager_factory is not None:
            manager = manager_factory(config)
        else:
            manager = BsnManager(config, console=StdConsole())

        network = manager.open(network_name=args.network)
        out.line(f"Using network: {network.label()}")
        return body(manager, args, out)
    except BsnMgrError as exc:
        logger.error(
            "command_failed",
            command=parser.prog,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        out.error(exc)
        return 1

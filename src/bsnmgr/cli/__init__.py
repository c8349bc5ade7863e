"""Console tools (bsn-*) built on BsnManager."""

from __future__ import annotations

from .common import build_parser, run_tool
from .render import Presenter
from .tools import (
    content_delete_main,
    content_download_main,
    content_list_main,
    device_delete_main,
    device_info_main,
    device_operations_main,
    diagnostics_main,
    files_delete_main,
    files_rename_main,
    group_delete_main,
    local_dws_main,
    networks_main,
    presentation_delete_main,
)

__all__ = [
    "build_parser",
    "run_tool",
    "Presenter",
    "networks_main",
    "content_list_main",
    "content_delete_main",
    "content_download_main",
    "presentation_delete_main",
    "device_info_main",
    "device_delete_main",
    "group_delete_main",
    "device_operations_main",
    "local_dws_main",
    "diagnostics_main",
    "files_delete_main",
    "files_rename_main",
]

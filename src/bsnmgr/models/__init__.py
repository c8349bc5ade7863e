"""Public model exports for bsnmgr."""

from __future__ import annotations

from .items import (
    ContentFile,
    Device,
    DeviceGroup,
    DeviceOperation,
    DiagnosticsInfo,
    Item,
    ItemRef,
    LocalDwsInfo,
    PlayerFile,
    Presentation,
)
from .network import Network
from .results import (
    BulkCommitResult,
    ExecutionReport,
    ItemFailure,
    ItemOutcome,
    OutcomeStatus,
    ReportStatus,
)

__all__ = [
    "Network",
    "Item",
    "ItemRef",
    "ContentFile",
    "Device",
    "DeviceGroup",
    "DeviceOperation",
    "DiagnosticsInfo",
    "PlayerFile",
    "LocalDwsInfo",
    "Presentation",
    "OutcomeStatus",
    "ReportStatus",
    "ItemFailure",
    "ItemOutcome",
    "BulkCommitResult",
    "ExecutionReport",
]

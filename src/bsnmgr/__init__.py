"""bsnmgr public API."""

from __future__ import annotations

from bsnmgr.auth import TokenClient
from bsnmgr.config import BsnConfig
from bsnmgr.controller import BsnController
from bsnmgr.errors import (
    ApiError,
    AuthError,
    BsnMgrError,
    ConfigurationError,
    ConflictError,
    ExecutorError,
    ExecutorFailure,
    GateError,
    GateFailure,
    HttpErrorInfo,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ResolutionError,
    ResolutionFailure,
    ValidationError,
    map_http_error,
)
from bsnmgr.manager import BsnManager
from bsnmgr.models import (
    BulkCommitResult,
    ContentFile,
    Device,
    DeviceGroup,
    DeviceOperation,
    DiagnosticsInfo,
    ExecutionReport,
    Item,
    ItemFailure,
    ItemOutcome,
    LocalDwsInfo,
    Network,
    PlayerFile,
    Presentation,
)
from bsnmgr.session import (
    CommitKind,
    ConfirmationGate,
    Console,
    GateDecision,
    NetworkResolver,
    NullConsole,
    OperationExecutor,
    OperationSpec,
    PendingAction,
    ResolutionRequest,
    SessionState,
    StdConsole,
)

__all__ = [
    # High-level
    "BsnManager",
    "BsnController",
    # Config / Auth
    "BsnConfig",
    "TokenClient",
    # Session workflow
    "Console",
    "StdConsole",
    "NullConsole",
    "SessionState",
    "ResolutionRequest",
    "NetworkResolver",
    "PendingAction",
    "GateDecision",
    "ConfirmationGate",
    "CommitKind",
    "OperationSpec",
    "OperationExecutor",
    # Models
    "Network",
    "Item",
    "ContentFile",
    "Device",
    "DeviceGroup",
    "DeviceOperation",
    "DiagnosticsInfo",
    "PlayerFile",
    "LocalDwsInfo",
    "Presentation",
    "ItemFailure",
    "ItemOutcome",
    "BulkCommitResult",
    "ExecutionReport",
    # Errors
    "BsnMgrError",
    "ResolutionError",
    "ResolutionFailure",
    "GateError",
    "GateFailure",
    "ExecutorError",
    "ExecutorFailure",
    "ConfigurationError",
    "ValidationError",
    "InvalidStateError",
    "AuthError",
    "PermissionError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
]

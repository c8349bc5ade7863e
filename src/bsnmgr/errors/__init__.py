"""Public error exports for bsnmgr."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
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

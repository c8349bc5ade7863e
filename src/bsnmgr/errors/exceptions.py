"""Exception hierarchy and HTTP error mapping for bsnmgr."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class BsnMgrError(Exception):
    """
    Base exception for bsnmgr.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


# ----------------------------
# Session workflow errors
# ----------------------------
class ResolutionFailure(str, Enum):
    """Why a network could not be resolved."""

    FETCH_FAILED = "FETCH_FAILED"
    NO_NETWORKS_AVAILABLE = "NO_NETWORKS_AVAILABLE"
    INVALID_SELECTION = "INVALID_SELECTION"
    INPUT_UNAVAILABLE = "INPUT_UNAVAILABLE"
    BIND_FAILED = "BIND_FAILED"


class GateFailure(str, Enum):
    """Why a confirmation could not be obtained."""

    INPUT_UNAVAILABLE = "INPUT_UNAVAILABLE"


class ExecutorFailure(str, Enum):
    """Which step of an operation failed fatally."""

    PREVIEW_FAILED = "PREVIEW_FAILED"
    COMMIT_FAILED = "COMMIT_FAILED"


class ResolutionError(BsnMgrError):
    """Raised when no active network can be established for the session."""

    def __init__(
        self,
        message: str,
        *,
        reason: ResolutionFailure,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, details=details, cause=cause)
        self.reason = reason


class GateError(BsnMgrError):
    """Raised when the confirmation prompt cannot be answered."""

    def __init__(
        self,
        message: str,
        *,
        reason: GateFailure = GateFailure.INPUT_UNAVAILABLE,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, details=details, cause=cause)
        self.reason = reason


class ExecutorError(BsnMgrError):
    """Raised when a preview or commit call fails before any result is available."""

    def __init__(
        self,
        message: str,
        *,
        reason: ExecutorFailure,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, details=details, cause=cause)
        self.reason = reason


# ----------------------------
# Client / API errors
# ----------------------------
class ConfigurationError(BsnMgrError):
    """Raised when required settings are missing or invalid."""


class ValidationError(BsnMgrError):
    """Raised when call arguments are invalid (or HTTP 400)."""


class InvalidStateError(BsnMgrError):
    """Raised when the library is used in an invalid state (e.g., open not called)."""


class AuthError(BsnMgrError):
    """Raised when token acquisition fails or a request is unauthorized (HTTP 401)."""


class PermissionError(BsnMgrError):
    """Raised when access is denied (HTTP 403)."""


class NotFoundError(BsnMgrError):
    """Raised when a resource is not found (HTTP 404)."""


class ConflictError(BsnMgrError):
    """Raised when a conflict occurs (HTTP 409/412)."""


class RateLimitError(BsnMgrError):
    """Raised when rate-limited (HTTP 429)."""


class NetworkError(BsnMgrError):
    """Raised when transport/timeout issues prevent the request."""


class ApiError(BsnMgrError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to bsnmgr exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> BsnMgrError:
    """
    Map an HTTP error to a bsnmgr exception.

    Policy:
        - 400 -> ValidationError
        - 401 -> AuthError
        - 403 -> PermissionError
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return ValidationError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)

"""Session workflow: network resolution, confirmation, and operation execution."""

from __future__ import annotations

from .console import Console, NullConsole, StdConsole
from .executor import CommitKind, OperationExecutor, OperationSpec
from .gate import ConfirmationGate, GateDecision, PendingAction
from .resolver import NetworkResolver, ResolutionRequest
from .state import SessionState

__all__ = [
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
]

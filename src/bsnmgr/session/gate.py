"""Operator confirmation for mutating/destructive actions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from bsnmgr.errors import GateError, GateFailure
from bsnmgr.util.logging import get_logger

from .console import Console

logger = get_logger(__name__)

_AFFIRMATIVE: frozenset[str] = frozenset({"yes", "y"})


class GateDecision(str, Enum):
    PROCEED = "PROCEED"
    CANCELLED = "CANCELLED"


@dataclass(slots=True, frozen=True)
class PendingAction:
    """
    An action awaiting consent.

    non_interactive marks machine-readable/automation runs. It suppresses the
    prompt but never grants consent; only force_bypass does.
    """

    description: str
    item_count: int = 1
    force_bypass: bool = False
    non_interactive: bool = False

    def with_item_count(self, item_count: int) -> "PendingAction":
        return PendingAction(
            description=self.description,
            item_count=item_count,
            force_bypass=self.force_bypass,
            non_interactive=self.non_interactive,
        )


class ConfirmationGate:
    """Ask the operator before a pending action is committed."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def confirm(self, action: PendingAction) -> GateDecision:
        """
        Decide whether `action` may proceed.

        Returns:
            PROCEED on bypass or an affirmative answer ("yes"/"y"),
            CANCELLED for any other answer.

        Raises:
            GateError: if consent cannot be asked (no input, or a
                non-interactive run without force_bypass).
        """
        if action.force_bypass:
            logger.debug("confirmation_bypassed", action=action.description)
            return GateDecision.PROCEED

        if action.non_interactive:
            raise GateError(
                "Confirmation required but running non-interactively; pass --yes to proceed",
                reason=GateFailure.INPUT_UNAVAILABLE,
                details={"action": action.description},
            )

        noun = "item" if action.item_count == 1 else "items"
        self._console.write(
            f"\nWARNING: {action.description} ({action.item_count} {noun}).\n"
            "Are you sure you want to continue? (yes/no): "
        )
        line = self._console.read_line()
        if line is None:
            raise GateError(
                "Failed to read confirmation",
                reason=GateFailure.INPUT_UNAVAILABLE,
                details={"action": action.description},
            )

        if line.strip().lower() in _AFFIRMATIVE:
            logger.info("confirmation_accepted", action=action.description)
            return GateDecision.PROCEED

        logger.info("confirmation_declined", action=action.description)
        return GateDecision.CANCELLED

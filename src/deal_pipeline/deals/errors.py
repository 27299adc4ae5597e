"""Exception taxonomy for stage validation and transitions.

Validators never raise these directly -- they return result models whose
``to_error()`` produces the matching exception. Only the mutator and the
surfaced-mode save check raise.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.deal_pipeline.deals.schemas import DealStage


def _stage_label(stage: DealStage) -> str:
    return getattr(stage, "value", str(stage))


class DealPipelineError(Exception):
    """Base class for all deal pipeline errors."""


class MissingRequiredFieldsError(DealPipelineError):
    """Raised when fields required by a stage are empty."""

    def __init__(self, stage: DealStage, fields: Iterable[str]) -> None:
        self.stage = stage
        self.fields = list(fields)
        super().__init__(
            f"Missing required fields for stage {_stage_label(stage)}: "
            f"{', '.join(self.fields)}"
        )


class DateOrderViolationError(DealPipelineError):
    """Raised when a populated date pair violates its ordering rule."""

    def __init__(self, rule: str, message: str) -> None:
        self.rule = rule
        self.message = message
        super().__init__(message)


class RevenueMismatchError(DealPipelineError):
    """Raised when quarterly revenue does not sum to the deal amount."""

    def __init__(self, amount: Decimal, total: Decimal) -> None:
        self.amount = amount
        self.total = total
        super().__init__(
            f"Quarterly revenue total ({total}) must equal the deal amount ({amount})"
        )


class IllegalTransitionError(DealPipelineError, ValueError):
    """Raised when a requested stage is not eligible from the current stage."""

    def __init__(
        self,
        current: DealStage,
        requested: DealStage,
        eligible: Iterable[DealStage],
    ) -> None:
        self.current = current
        self.requested = requested
        self.eligible = frozenset(eligible)
        allowed = sorted(_stage_label(s) for s in self.eligible)
        super().__init__(
            f"Invalid stage transition: {_stage_label(current)} -> "
            f"{_stage_label(requested)}. "
            f"Allowed transitions from {_stage_label(current)}: "
            f"{', '.join(allowed) or 'none'}"
        )

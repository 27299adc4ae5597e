"""Stage transition engine -- which stages a deal may move to right now.

Composes the stage sequence, the requirement catalog and the cross-field
validators into one decision:

- Backward moves (to any linear stage strictly earlier) are corrections and
  are always allowed.
- The forward move to the next linear stage is allowed once the current
  stage's required fields are filled in and the dates are consistent.
- From Offered, the same gate opens all three terminal stages at once.
  Revenue reconciliation is not part of that gate; it is enforced when a
  deal actually enters Won (see mutator.apply_transition).

The engine holds no state. Calling it twice on the same deal gives the same
answer.
"""

from __future__ import annotations

import structlog

from src.deal_pipeline.deals.errors import DealPipelineError
from src.deal_pipeline.deals.requirements import check_requirements, stage_completion
from src.deal_pipeline.deals.schemas import (
    Deal,
    DealStage,
    StageValidationReport,
)
from src.deal_pipeline.deals.stages import (
    ALL_STAGES,
    FINAL_DECISION_STAGE,
    TERMINAL_STAGES,
    next_stage,
    previous_stages,
)
from src.deal_pipeline.deals.validators import validate_date_logic, validate_revenue_sum

logger = structlog.get_logger(__name__)

GENERIC_PROGRESSION_MESSAGE = "Complete all required fields to enable stage progression"


class StageTransitionEngine:
    """Decides legal target stages for a deal from its current stage.

    Two modes share the same validators: the silent mode
    (``eligible_targets``, ``can_*``, ``validation_report``) only computes
    answers, while ``assert_can_save`` surfaces the first violation as an
    exception for display.
    """

    def eligible_targets(self, deal: Deal) -> frozenset[DealStage]:
        """Full set of stages the deal may legally move to right now."""
        current = deal.stage
        targets: set[DealStage] = set(previous_stages(current))

        gate_open = self._current_stage_passes(deal)

        forward = next_stage(current)
        # Won has no next stage, so the revenue clause never blocks here.
        if (
            forward is not None
            and gate_open
            and (current != DealStage.WON or validate_revenue_sum(deal).valid)
        ):
            targets.add(forward)

        if current == FINAL_DECISION_STAGE and gate_open:
            targets.update(TERMINAL_STAGES)

        return frozenset(targets)

    def ordered_targets(self, deal: Deal) -> list[DealStage]:
        """Eligible targets in display order: backward, forward, then terminal."""
        eligible = self.eligible_targets(deal)
        return [stage for stage in ALL_STAGES if stage in eligible]

    def can_move(self, deal: Deal, target: DealStage) -> bool:
        return target in self.eligible_targets(deal)

    def can_advance(self, deal: Deal) -> bool:
        """True if the next linear stage exists and is currently eligible."""
        forward = next_stage(deal.stage)
        return forward is not None and forward in self.eligible_targets(deal)

    def can_finalize(self, deal: Deal) -> bool:
        """True if the deal sits at Offered and may be closed as Won/Lost/Dropped."""
        return deal.stage == FINAL_DECISION_STAGE and self._current_stage_passes(deal)

    def can_save(self, deal: Deal) -> bool:
        """Required fields, dates and (at Won) revenue all check out."""
        return (
            self._current_stage_passes(deal)
            and validate_revenue_sum(deal).valid
        )

    def validation_report(self, deal: Deal) -> StageValidationReport:
        """Compute every check for the deal's current stage without raising."""
        requirements = check_requirements(deal, deal.stage)
        dates = validate_date_logic(deal)
        revenue = validate_revenue_sum(deal)

        can_save = requirements.satisfied and dates.valid and revenue.valid

        summary: str | None = None
        if not dates.valid:
            summary = dates.error
        elif not revenue.valid:
            summary = revenue.error
        elif not requirements.satisfied:
            summary = GENERIC_PROGRESSION_MESSAGE

        return StageValidationReport(
            stage=deal.stage,
            requirements=requirements,
            dates=dates,
            revenue=revenue,
            completion=stage_completion(deal),
            can_save=can_save,
            can_advance=self.can_advance(deal),
            summary=summary,
        )

    def assert_can_save(self, deal: Deal) -> None:
        """Raise the first violation blocking a save of the deal as it stands.

        Checks run in the order the save action reports them: date logic,
        then revenue (Won only), then required fields.

        Raises:
            DateOrderViolationError, RevenueMismatchError or
            MissingRequiredFieldsError.
        """
        error: DealPipelineError | None = (
            validate_date_logic(deal).to_error()
            or validate_revenue_sum(deal).to_error()
            or check_requirements(deal, deal.stage).to_error()
        )
        if error is not None:
            logger.info(
                "Deal save blocked",
                deal_id=deal.id,
                stage=deal.stage.value,
                reason=str(error),
            )
            raise error

    def _current_stage_passes(self, deal: Deal) -> bool:
        """Required fields of the current stage are set and dates are consistent."""
        requirements = check_requirements(deal, deal.stage)
        if not requirements.satisfied:
            return False

        dates = validate_date_logic(deal)
        if not dates.valid:
            logger.debug(
                "Forward move withheld",
                deal_id=deal.id,
                stage=deal.stage.value,
                rule=dates.details.get("rule"),
            )
            return False
        return True


# ── Module-level API ────────────────────────────────────────────────────────

_engine = StageTransitionEngine()


def eligible_targets(deal: Deal) -> frozenset[DealStage]:
    return _engine.eligible_targets(deal)


def can_move(deal: Deal, target: DealStage) -> bool:
    return _engine.can_move(deal, target)


def can_advance(deal: Deal) -> bool:
    return _engine.can_advance(deal)

"""Record mutator -- the only place a deal's stage is written.

Produces the next version of a deal after a transition or save has been
approved: new stage (transitions only), normalized deal name, and
modification stamps. The input deal is never modified; persisting the
returned value is the caller's job.

Decide and mutate must use the same snapshot: pass the exact deal that was
validated. If persisting fails, re-validate against the latest stored
version before trying again.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog

from src.deal_pipeline.config import get_settings
from src.deal_pipeline.deals.errors import IllegalTransitionError
from src.deal_pipeline.deals.requirements import is_empty
from src.deal_pipeline.deals.schemas import Deal, DealStage
from src.deal_pipeline.deals.transitions import StageTransitionEngine
from src.deal_pipeline.deals.validators import validate_revenue_sum

logger = structlog.get_logger(__name__)


def resolve_deal_name(deal: Deal) -> str:
    """Deal name, else project name, else the configured placeholder."""
    if not is_empty(deal.deal_name):
        return deal.deal_name.strip()
    if not is_empty(deal.project_name):
        return deal.project_name.strip()
    return get_settings().UNTITLED_DEAL_NAME


def _stamp(
    deal: Deal,
    acting_identity: str | None,
    now: datetime | None,
) -> dict:
    """Modification fields for the next version of ``deal``."""
    stamp = now or datetime.now(timezone.utc)
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    # modified_at never moves backwards across versions of the same deal.
    if deal.modified_at is not None and stamp < deal.modified_at:
        stamp = deal.modified_at
    return {
        "deal_name": resolve_deal_name(deal),
        "modified_at": stamp,
        "modified_by": acting_identity or deal.created_by,
    }


def apply_transition(
    deal: Deal,
    target: DealStage,
    acting_identity: str | None = None,
    *,
    engine: StageTransitionEngine | None = None,
    now: datetime | None = None,
) -> Deal:
    """Move ``deal`` to ``target`` and return the new version.

    Re-checks eligibility against the given snapshot and refuses anything
    the transition engine would not offer. Entering Won additionally
    requires the quarterly revenue to reconcile with the amount.

    Args:
        deal: The snapshot the caller validated.
        target: Requested stage.
        acting_identity: Who is making the change; falls back to the
            deal's creator.
        engine: Transition engine to consult (a fresh one by default).
        now: Clock override, mainly for tests.

    Returns:
        New Deal at ``target`` with refreshed deal name and audit stamps.

    Raises:
        IllegalTransitionError: ``target`` is not eligible from the
            current stage.
        RevenueMismatchError: ``target`` is Won and the quarterly revenue
            does not sum to the amount.
    """
    engine = engine or StageTransitionEngine()
    eligible = engine.eligible_targets(deal)
    if target not in eligible:
        logger.warning(
            "Illegal stage transition refused",
            deal_id=deal.id,
            from_stage=deal.stage.value,
            to_stage=target.value,
            eligible=sorted(s.value for s in eligible),
        )
        raise IllegalTransitionError(deal.stage, target, eligible)

    updated = deal.model_copy(
        update={"stage": target, **_stamp(deal, acting_identity, now)}
    )

    if target == DealStage.WON:
        revenue_error = validate_revenue_sum(updated).to_error()
        if revenue_error is not None:
            logger.warning(
                "Won transition refused on revenue mismatch",
                deal_id=deal.id,
                amount=str(revenue_error.amount),
                total=str(revenue_error.total),
            )
            raise revenue_error

    logger.info(
        "Deal stage transition applied",
        deal_id=deal.id,
        from_stage=deal.stage.value,
        to_stage=target.value,
        modified_by=updated.modified_by,
    )
    return updated


def apply_save(
    deal: Deal,
    acting_identity: str | None = None,
    *,
    engine: StageTransitionEngine | None = None,
    now: datetime | None = None,
) -> Deal:
    """Validate ``deal`` at its current stage and return the stamped version.

    Raises:
        DateOrderViolationError, RevenueMismatchError or
        MissingRequiredFieldsError from ``assert_can_save``.
    """
    engine = engine or StageTransitionEngine()
    engine.assert_can_save(deal)

    updated = deal.model_copy(update=_stamp(deal, acting_identity, now))
    logger.info(
        "Deal saved",
        deal_id=deal.id,
        stage=deal.stage.value,
        modified_by=updated.modified_by,
    )
    return updated

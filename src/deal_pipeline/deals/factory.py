"""Builders for brand-new deals.

Creating and persisting a deal belongs to the caller; these helpers only
fill in the defaults a fresh record needs (id, zeroed quarterly revenue,
default currency, audit stamps) so the result can be validated with
``StageTransitionEngine.assert_can_save`` before the first persist.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import structlog

from src.deal_pipeline.config import get_settings
from src.deal_pipeline.deals.schemas import Deal, DealStage

logger = structlog.get_logger(__name__)

# Stage a deal converted from a meeting starts in.
MEETING_CONVERSION_STAGE = DealStage.DISCUSSIONS


def new_deal(
    stage: DealStage = DealStage.LEAD,
    created_by: str | None = None,
    *,
    now: datetime | None = None,
    **fields: Any,
) -> Deal:
    """Create a deal at ``stage`` with creation defaults applied.

    Extra keyword arguments populate deal fields directly and override the
    defaults (e.g. ``currency_type="USD"``).
    """
    stamp = now or datetime.now(timezone.utc)
    data: dict[str, Any] = {
        "stage": stage,
        "currency_type": get_settings().DEFAULT_CURRENCY,
        "quarterly_revenue_q1": Decimal("0"),
        "quarterly_revenue_q2": Decimal("0"),
        "quarterly_revenue_q3": Decimal("0"),
        "quarterly_revenue_q4": Decimal("0"),
        "created_at": stamp,
        "created_by": created_by,
        "modified_at": stamp,
        "modified_by": created_by,
    }
    data.update(fields)
    deal = Deal(**data)
    logger.debug("New deal built", deal_id=deal.id, stage=deal.stage.value)
    return deal


def deal_from_meeting(
    meeting_id: str,
    title: str,
    created_by: str | None = None,
    *,
    lead_id: str | None = None,
    notes: str | None = None,
    now: datetime | None = None,
) -> Deal:
    """Create a deal linked to the meeting (and lead) it came out of."""
    return new_deal(
        MEETING_CONVERSION_STAGE,
        created_by,
        now=now,
        deal_name=title,
        related_meeting_id=meeting_id,
        related_lead_id=lead_id,
        description=notes,
    )

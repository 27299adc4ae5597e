"""Shared fixtures for deal pipeline tests.

Provides:
- A fresh StageTransitionEngine
- make_deal: builds a Deal at any stage with the required fields of chosen
  stages filled in with valid, consistent values
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

import pytest

from src.deal_pipeline.config import get_settings
from src.deal_pipeline.deals.schemas import Deal, DealStage
from src.deal_pipeline.deals.transitions import StageTransitionEngine

# Valid values for every required field, grouped by owning stage.
COMPLETE_FIELDS: dict[DealStage, dict[str, Any]] = {
    DealStage.LEAD: {
        "project_name": "Harbour Crane Retrofit",
        "lead_name": "Ines Duarte",
        "company_name": "Porto Logistics",
        "lead_owner": "user-owner",
    },
    DealStage.DISCUSSIONS: {
        "customer_need_identified": True,
        "need_summary": "Replace control systems on two cranes",
        "decision_maker_present": False,
        "customer_agreed_on_need": True,
    },
    DealStage.QUALIFIED: {
        "nda_signed": True,
        "budget_confirmed": True,
        "supplier_portal_access": False,
        "expected_deal_timeline_start": date(2024, 2, 1),
        "expected_deal_timeline_end": date(2024, 9, 30),
        "budget_holder": "CFO",
        "decision_makers": "CFO, Head of Operations",
        "timeline": "Board approval in Q2",
    },
    DealStage.RFQ: {
        "rfq_value": Decimal("120000"),
        "rfq_document_url": "https://example.com/rfq.pdf",
        "product_service_scope": "Controls retrofit and commissioning",
    },
    DealStage.OFFERED: {
        "proposal_sent_date": date(2024, 1, 5),
        "negotiation_status": "In review",
        "decision_expected_date": date(2024, 1, 10),
    },
    DealStage.WON: {"win_reason": "Best technical fit"},
    DealStage.LOST: {"loss_reason": "Price"},
    DealStage.DROPPED: {"drop_reason": "Project cancelled"},
}



@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings are cached process-wide; isolate tests that patch env vars."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def engine() -> StageTransitionEngine:
    """Fresh StageTransitionEngine instance."""
    return StageTransitionEngine()


@pytest.fixture
def make_deal() -> Callable[..., Deal]:
    """Factory building a Deal at ``stage`` with chosen stages filled in.

    ``complete`` lists the stages whose required fields get valid values;
    by default that is just the deal's own stage. Keyword overrides are
    applied last.
    """

    def _make(
        stage: DealStage = DealStage.LEAD,
        complete: Iterable[DealStage] | None = None,
        **overrides: Any,
    ) -> Deal:
        data: dict[str, Any] = {
            "id": "deal-1",
            "stage": stage,
            "created_by": "user-creator",
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "modified_at": datetime(2024, 1, 2, tzinfo=timezone.utc),
        }
        for filled in (complete if complete is not None else [stage]):
            data.update(COMPLETE_FIELDS[filled])
        data.update(overrides)
        return Deal(**data)

    return _make

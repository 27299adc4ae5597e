"""Field requirement catalog -- which fields each stage owns and requires.

A deal may not leave a stage until every field that stage requires holds a
value. Terminal stages have required fields too; they gate saving a deal
that sits in the terminal stage rather than a forward move.

Empty means None or an empty/blank string. False and 0 are real answers
("NDA not signed", "zero RFQ value") and count as populated.
"""

from __future__ import annotations

from typing import Any

import structlog

from src.deal_pipeline.deals.schemas import (
    Deal,
    DealStage,
    RequirementCheck,
    StageCompletion,
)

logger = structlog.get_logger(__name__)

# ── Stage Field Ownership ───────────────────────────────────────────────────

# Fields each stage's form section shows, in display order.
STAGE_FIELDS: dict[DealStage, tuple[str, ...]] = {
    DealStage.LEAD: (
        "project_name",
        "lead_name",
        "company_name",
        "lead_owner",
        "phone_no",
    ),
    DealStage.DISCUSSIONS: (
        "customer_need_identified",
        "need_summary",
        "decision_maker_present",
        "customer_agreed_on_need",
    ),
    DealStage.QUALIFIED: (
        "nda_signed",
        "budget_confirmed",
        "supplier_portal_access",
        "supplier_portal_required",
        "expected_deal_timeline_start",
        "expected_deal_timeline_end",
        "budget_holder",
        "decision_makers",
        "timeline",
    ),
    DealStage.RFQ: (
        "rfq_value",
        "rfq_document_url",
        "product_service_scope",
        "rfq_confirmation_note",
    ),
    DealStage.OFFERED: (
        "proposal_sent_date",
        "negotiation_status",
        "decision_expected_date",
        "negotiation_notes",
    ),
    DealStage.WON: (
        "win_reason",
        "execution_started",
        "begin_execution_date",
        "quarterly_revenue_q1",
        "quarterly_revenue_q2",
        "quarterly_revenue_q3",
        "quarterly_revenue_q4",
    ),
    DealStage.LOST: ("loss_reason",),
    DealStage.DROPPED: ("drop_reason",),
}

# Required subset of STAGE_FIELDS. Each field is required by exactly one stage.
STAGE_REQUIRED_FIELDS: dict[DealStage, frozenset[str]] = {
    DealStage.LEAD: frozenset({"project_name", "lead_name", "company_name", "lead_owner"}),
    DealStage.DISCUSSIONS: frozenset({
        "customer_need_identified",
        "need_summary",
        "decision_maker_present",
        "customer_agreed_on_need",
    }),
    DealStage.QUALIFIED: frozenset({
        "nda_signed",
        "budget_confirmed",
        "supplier_portal_access",
        "expected_deal_timeline_start",
        "expected_deal_timeline_end",
        "budget_holder",
        "decision_makers",
        "timeline",
    }),
    DealStage.RFQ: frozenset({"rfq_value", "rfq_document_url", "product_service_scope"}),
    DealStage.OFFERED: frozenset({
        "proposal_sent_date",
        "negotiation_status",
        "decision_expected_date",
    }),
    DealStage.WON: frozenset({"win_reason"}),
    DealStage.LOST: frozenset({"loss_reason"}),
    DealStage.DROPPED: frozenset({"drop_reason"}),
}

# Human-readable labels used in field error messages.
FIELD_LABELS: dict[str, str] = {
    "project_name": "Project Name",
    "lead_name": "Lead Name",
    "company_name": "Company Name",
    "lead_owner": "Lead Owner",
    "phone_no": "Phone",
    "customer_need_identified": "Customer Need Identified",
    "need_summary": "Need Summary",
    "decision_maker_present": "Decision Maker Present",
    "customer_agreed_on_need": "Customer Agreed on Need",
    "nda_signed": "NDA Signed",
    "budget_confirmed": "Budget Confirmed",
    "supplier_portal_access": "Supplier Portal Access",
    "supplier_portal_required": "Supplier Portal Required",
    "expected_deal_timeline_start": "Timeline Start",
    "expected_deal_timeline_end": "Timeline End",
    "budget_holder": "Budget Holder",
    "decision_makers": "Decision Makers",
    "timeline": "Timeline Notes",
    "rfq_value": "RFQ Value",
    "rfq_document_url": "RFQ Document URL",
    "product_service_scope": "Product/Service Scope",
    "rfq_confirmation_note": "RFQ Confirmation Note",
    "proposal_sent_date": "Proposal Sent Date",
    "negotiation_status": "Negotiation Status",
    "decision_expected_date": "Decision Expected Date",
    "negotiation_notes": "Negotiation Notes",
    "win_reason": "Win Reason",
    "loss_reason": "Loss Reason",
    "drop_reason": "Drop Reason",
    "execution_started": "Execution Started",
    "begin_execution_date": "Begin Execution Date",
    "quarterly_revenue_q1": "Q1 Revenue",
    "quarterly_revenue_q2": "Q2 Revenue",
    "quarterly_revenue_q3": "Q3 Revenue",
    "quarterly_revenue_q4": "Q4 Revenue",
}


# ── Lookups ─────────────────────────────────────────────────────────────────


def required_fields(stage: DealStage) -> frozenset[str]:
    """Field identifiers that must be populated before leaving ``stage``."""
    return STAGE_REQUIRED_FIELDS.get(stage, frozenset())


def stage_fields(stage: DealStage) -> tuple[str, ...]:
    """Field identifiers owned by ``stage``, in display order."""
    return STAGE_FIELDS.get(stage, ())


def field_label(field_name: str) -> str:
    return FIELD_LABELS.get(field_name, field_name.replace("_", " ").title())


def is_empty(value: Any) -> bool:
    """True for None and blank strings; False, 0 and Decimal("0") are values."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


# ── Checks ──────────────────────────────────────────────────────────────────


def missing_fields(deal: Deal, stage: DealStage) -> list[str]:
    """Required fields of ``stage`` that are empty on ``deal``, in display order."""
    required = required_fields(stage)
    ordered = [f for f in stage_fields(stage) if f in required]
    return [f for f in ordered if is_empty(getattr(deal, f))]


def check_requirements(deal: Deal, stage: DealStage) -> RequirementCheck:
    """Check whether every field ``stage`` requires is populated on ``deal``.

    Returns:
        RequirementCheck with the missing field identifiers and a message
        naming them (None when satisfied).
    """
    missing = missing_fields(deal, stage)
    if not missing:
        return RequirementCheck(stage=stage, satisfied=True)

    labels = ", ".join(field_label(f) for f in missing)
    logger.debug(
        "Required fields missing",
        deal_id=deal.id,
        stage=stage.value,
        missing=missing,
    )
    return RequirementCheck(
        stage=stage,
        satisfied=False,
        missing=missing,
        message=f"Please fill in all required fields for {stage.value}: {labels}",
    )


def is_satisfied(deal: Deal, stage: DealStage) -> tuple[bool, list[str]]:
    """Shortcut for gating: (satisfied, missing field identifiers)."""
    check = check_requirements(deal, stage)
    return check.satisfied, check.missing


def field_errors(deal: Deal, stage: DealStage) -> dict[str, str]:
    """Per-field error messages for highlighting inputs in a form."""
    return {
        f: f"{field_label(f)} is required"
        for f in missing_fields(deal, stage)
    }


def stage_completion(deal: Deal) -> StageCompletion:
    """How much of the deal's current stage's required fields are filled in."""
    required = required_fields(deal.stage)
    if not required:
        return StageCompletion.COMPLETE

    missing = len(missing_fields(deal, deal.stage))
    if missing == 0:
        return StageCompletion.COMPLETE
    if missing == len(required):
        return StageCompletion.INCOMPLETE
    return StageCompletion.PARTIAL

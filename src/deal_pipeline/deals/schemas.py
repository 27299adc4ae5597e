"""Pydantic schemas for the deal pipeline -- stages, the Deal record, results.

Defines all structured types used across stage progression:
- Enums: DealStage, StageCompletion, ViolationCode (CurrencyType lives in core.currency)
- Record: Deal (immutable; new versions are produced with model_copy)
- Results: ValidationResult, RequirementCheck, StageValidationReport

A Deal is a sparse record: every stage-scoped field is declared optional and
only populated once the deal has visited the stage that owns it. Which stage
owns which field lives in requirements.py, not here.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.deal_pipeline.core.currency import CurrencyType
from src.deal_pipeline.deals.errors import (
    DateOrderViolationError,
    DealPipelineError,
    MissingRequiredFieldsError,
    RevenueMismatchError,
)


# ── Enums ───────────────────────────────────────────────────────────────────


class DealStage(str, Enum):
    """Sales pipeline stage for a deal."""

    LEAD = "Lead"
    DISCUSSIONS = "Discussions"
    QUALIFIED = "Qualified"
    RFQ = "RFQ"
    OFFERED = "Offered"
    WON = "Won"
    LOST = "Lost"
    DROPPED = "Dropped"


class StageCompletion(str, Enum):
    """How much of the current stage's required fields are filled in."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    INCOMPLETE = "incomplete"


class ViolationCode(str, Enum):
    """Machine-readable category of a failed check."""

    DATE_ORDER_VIOLATION = "date_order_violation"
    REVENUE_MISMATCH = "revenue_mismatch"


# ── Deal Record ─────────────────────────────────────────────────────────────


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Deal(BaseModel):
    """A sales record moving through the pipeline.

    Frozen: the only way to change a deal is to produce a new version,
    which the mutator does after the transition engine approves it.
    """

    model_config = ConfigDict(frozen=True)

    # Identity and position
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    stage: DealStage = DealStage.LEAD
    deal_name: str | None = None

    # Commercials
    amount: Decimal | None = None
    currency_type: CurrencyType = CurrencyType.EUR
    probability: int | None = Field(default=None, ge=0, le=100)
    closing_date: date | None = None
    description: str | None = None
    internal_notes: str | None = None

    # Lead
    project_name: str | None = None
    lead_name: str | None = None
    company_name: str | None = None
    lead_owner: str | None = None
    phone_no: str | None = None

    # Discussions
    customer_need_identified: bool | None = None
    need_summary: str | None = None
    decision_maker_present: bool | None = None
    customer_agreed_on_need: bool | None = None

    # Qualified
    nda_signed: bool | None = None
    budget_confirmed: bool | None = None
    supplier_portal_access: bool | None = None
    supplier_portal_required: bool | None = None
    expected_deal_timeline_start: date | None = None
    expected_deal_timeline_end: date | None = None
    budget_holder: str | None = None
    decision_makers: str | None = None
    timeline: str | None = None

    # RFQ
    rfq_value: Decimal | None = None
    rfq_document_url: str | None = None
    product_service_scope: str | None = None
    rfq_confirmation_note: str | None = None

    # Offered
    proposal_sent_date: date | None = None
    negotiation_status: str | None = None
    decision_expected_date: date | None = None
    negotiation_notes: str | None = None

    # Won / Lost / Dropped
    win_reason: str | None = None
    loss_reason: str | None = None
    drop_reason: str | None = None
    execution_started: bool | None = None
    begin_execution_date: date | None = None
    quarterly_revenue_q1: Decimal = Decimal("0")
    quarterly_revenue_q2: Decimal = Decimal("0")
    quarterly_revenue_q3: Decimal = Decimal("0")
    quarterly_revenue_q4: Decimal = Decimal("0")

    # Linkage (read-only from the engine's point of view)
    related_lead_id: str | None = None
    related_meeting_id: str | None = None

    # Audit
    created_at: datetime = Field(default_factory=_utcnow)
    created_by: str | None = None
    modified_at: datetime | None = None
    modified_by: str | None = None

    @field_validator(
        "quarterly_revenue_q1",
        "quarterly_revenue_q2",
        "quarterly_revenue_q3",
        "quarterly_revenue_q4",
        mode="before",
    )
    @classmethod
    def _null_revenue_is_zero(cls, value: Any) -> Any:
        """Stored snapshots may hold null quarters; they reconcile as zero."""
        return Decimal("0") if value is None else value

    @field_validator("created_at", "modified_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        """Naive audit timestamps are read as UTC."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def quarterly_revenue_total(self) -> Decimal:
        """Sum of the four quarterly revenue components."""
        return (
            self.quarterly_revenue_q1
            + self.quarterly_revenue_q2
            + self.quarterly_revenue_q3
            + self.quarterly_revenue_q4
        )


# ── Results ─────────────────────────────────────────────────────────────────


class ValidationResult(BaseModel):
    """Outcome of a cross-field check.

    ``details`` carries the values needed to reproduce the message (the
    violated rule's fields, or the compared amounts) so callers never have
    to re-derive them.
    """

    valid: bool = True
    error: str | None = None
    code: ViolationCode | None = None
    details: dict[str, Any] = Field(default_factory=dict)

    def to_error(self) -> DealPipelineError | None:
        """Return the exception matching this failure, or None if valid."""
        if self.valid:
            return None
        if self.code == ViolationCode.REVENUE_MISMATCH:
            return RevenueMismatchError(
                amount=self.details["amount"], total=self.details["total"]
            )
        return DateOrderViolationError(
            rule=self.details.get("rule", ""), message=self.error or ""
        )


class RequirementCheck(BaseModel):
    """Outcome of checking a stage's required fields against a deal."""

    stage: DealStage
    satisfied: bool
    missing: list[str] = Field(default_factory=list)
    message: str | None = None

    def to_error(self) -> MissingRequiredFieldsError | None:
        """Return MissingRequiredFieldsError for the missing fields, or None."""
        if self.satisfied:
            return None
        return MissingRequiredFieldsError(self.stage, self.missing)


class StageValidationReport(BaseModel):
    """Everything the form needs to know about a deal at its current stage."""

    stage: DealStage
    requirements: RequirementCheck
    dates: ValidationResult
    revenue: ValidationResult
    completion: StageCompletion
    can_save: bool
    can_advance: bool
    summary: str | None = None

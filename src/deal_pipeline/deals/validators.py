"""Cross-field validators: date ordering and revenue reconciliation.

Invariants:
    - Pure functions of the deal: no IO, no mutation
    - Return a ValidationResult; never raise
    - Date rules run in declaration order -- first violation wins
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import NamedTuple

from src.deal_pipeline.deals.schemas import (
    Deal,
    DealStage,
    ValidationResult,
    ViolationCode,
)


class DateRule(NamedTuple):
    """``earlier`` must not fall after ``later`` when both are set."""

    name: str
    earlier: str
    later: str
    message: str


DATE_RULES: tuple[DateRule, ...] = (
    DateRule(
        name="timeline_start_before_end",
        earlier="expected_deal_timeline_start",
        later="expected_deal_timeline_end",
        message="Expected deal timeline end cannot be before the timeline start",
    ),
    DateRule(
        name="proposal_before_decision",
        earlier="proposal_sent_date",
        later="decision_expected_date",
        message="Decision expected date cannot be before the proposal sent date",
    ),
    DateRule(
        name="closing_before_execution",
        earlier="closing_date",
        later="begin_execution_date",
        message="Execution cannot begin before the deal was closed as Won",
    ),
)


def validate_date_logic(deal: Deal) -> ValidationResult:
    """Check every date rule whose two dates are both populated."""
    for rule in DATE_RULES:
        earlier: date | None = getattr(deal, rule.earlier)
        later: date | None = getattr(deal, rule.later)
        if earlier is None or later is None:
            continue
        if later < earlier:
            return ValidationResult(
                valid=False,
                error=rule.message,
                code=ViolationCode.DATE_ORDER_VIOLATION,
                details={
                    "rule": rule.name,
                    rule.earlier: earlier.isoformat(),
                    rule.later: later.isoformat(),
                },
            )
    return ValidationResult()


def validate_revenue_sum(deal: Deal) -> ValidationResult:
    """Quarterly revenue must sum exactly to the deal amount at Won.

    Outside Won the check does not apply and always passes. A missing
    amount reconciles as zero.
    """
    if deal.stage != DealStage.WON:
        return ValidationResult()

    amount = deal.amount if deal.amount is not None else Decimal("0")
    total = deal.quarterly_revenue_total
    if total == amount:
        return ValidationResult()

    return ValidationResult(
        valid=False,
        error=(
            f"Quarterly revenue total ({total}) must equal the deal amount ({amount})"
        ),
        code=ViolationCode.REVENUE_MISMATCH,
        details={"amount": amount, "total": total},
    )

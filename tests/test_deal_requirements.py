"""Unit tests for the field requirement catalog.

Tests cover:
- required_fields: per-stage lookup, ownership invariants
- is_empty: None/blank strings are empty, False and zero are not
- check_requirements / is_satisfied: missing field list and message
- field_errors: per-field messages for form highlighting
- stage_completion: complete / partial / incomplete
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from src.deal_pipeline.deals.errors import MissingRequiredFieldsError
from src.deal_pipeline.deals.requirements import (
    STAGE_FIELDS,
    STAGE_REQUIRED_FIELDS,
    check_requirements,
    field_errors,
    is_empty,
    is_satisfied,
    required_fields,
    stage_completion,
)
from src.deal_pipeline.deals.schemas import Deal, DealStage, StageCompletion


class TestCatalog:
    """Tests validating the STAGE_REQUIRED_FIELDS configuration."""

    def test_every_stage_has_requirements(self) -> None:
        assert set(STAGE_REQUIRED_FIELDS) == set(DealStage)

    def test_required_fields_are_owned_by_their_stage(self) -> None:
        for stage, required in STAGE_REQUIRED_FIELDS.items():
            assert required <= set(STAGE_FIELDS[stage]), stage

    def test_required_sets_are_disjoint(self) -> None:
        seen: set[str] = set()
        for required in STAGE_REQUIRED_FIELDS.values():
            assert not seen & required
            seen |= required

    def test_required_fields_exist_on_deal(self) -> None:
        for required in STAGE_REQUIRED_FIELDS.values():
            for field_name in required:
                assert field_name in Deal.model_fields

    def test_offered_requirements(self) -> None:
        assert required_fields(DealStage.OFFERED) == {
            "proposal_sent_date",
            "negotiation_status",
            "decision_expected_date",
        }


class TestIsEmpty:
    """Tests for is_empty."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_values(self, value) -> None:
        assert is_empty(value) is True

    @pytest.mark.parametrize("value", [False, 0, Decimal("0"), "x"])
    def test_populated_values(self, value) -> None:
        assert is_empty(value) is False


class TestCheckRequirements:
    """Tests for check_requirements and is_satisfied."""

    def test_all_met(self, make_deal) -> None:
        deal = make_deal(DealStage.DISCUSSIONS)
        check = check_requirements(deal, DealStage.DISCUSSIONS)
        assert check.satisfied is True
        assert check.missing == []
        assert check.message is None
        assert check.to_error() is None

    def test_false_booleans_count_as_answers(self, make_deal) -> None:
        deal = make_deal(
            DealStage.DISCUSSIONS,
            customer_need_identified=False,
            decision_maker_present=False,
            customer_agreed_on_need=False,
        )
        assert is_satisfied(deal, DealStage.DISCUSSIONS) == (True, [])

    def test_zero_rfq_value_counts_as_answer(self, make_deal) -> None:
        deal = make_deal(DealStage.RFQ, rfq_value=Decimal("0"))
        assert check_requirements(deal, DealStage.RFQ).satisfied is True

    def test_missing_fields_listed_in_display_order(self, make_deal) -> None:
        deal = make_deal(DealStage.LEAD, lead_owner=None, project_name="  ")
        check = check_requirements(deal, DealStage.LEAD)
        assert check.satisfied is False
        assert check.missing == ["project_name", "lead_owner"]
        assert "Project Name" in check.message
        assert "Lead Owner" in check.message

    def test_to_error_carries_fields(self, make_deal) -> None:
        deal = make_deal(DealStage.WON, win_reason=None)
        error = check_requirements(deal, DealStage.WON).to_error()
        assert isinstance(error, MissingRequiredFieldsError)
        assert error.stage == DealStage.WON
        assert error.fields == ["win_reason"]

    def test_checks_requested_stage_not_current(self, make_deal) -> None:
        """Requirements are looked up for the given stage, whatever the deal's stage."""
        deal = make_deal(DealStage.LEAD)
        satisfied, missing = is_satisfied(deal, DealStage.RFQ)
        assert satisfied is False
        assert missing == ["rfq_value", "rfq_document_url", "product_service_scope"]


class TestFieldErrors:
    """Tests for field_errors."""

    def test_no_errors_when_complete(self, make_deal) -> None:
        assert field_errors(make_deal(DealStage.OFFERED), DealStage.OFFERED) == {}

    def test_message_per_missing_field(self, make_deal) -> None:
        deal = make_deal(DealStage.OFFERED, negotiation_status=None)
        assert field_errors(deal, DealStage.OFFERED) == {
            "negotiation_status": "Negotiation Status is required",
        }


class TestStageCompletion:
    """Tests for stage_completion."""

    def test_complete(self, make_deal) -> None:
        assert stage_completion(make_deal(DealStage.RFQ)) == StageCompletion.COMPLETE

    def test_partial(self, make_deal) -> None:
        deal = make_deal(DealStage.RFQ, rfq_document_url=None)
        assert stage_completion(deal) == StageCompletion.PARTIAL

    def test_incomplete(self, make_deal) -> None:
        deal = make_deal(DealStage.RFQ, complete=[])
        assert stage_completion(deal) == StageCompletion.INCOMPLETE

"""Deal pipeline stage progression -- stage order, requirements, transitions.

Exports:
    StageTransitionEngine: Decides eligible target stages for a deal.
    apply_transition, apply_save: Produce the next version of a deal.
    new_deal, deal_from_meeting: Builders for fresh deals.
    Deal, DealStage, ValidationResult, RequirementCheck: Core schema types.
    validate_date_logic, validate_revenue_sum: Cross-field validators.
    check_requirements, is_satisfied, required_fields: Requirement catalog.
    DealPipelineError and subclasses: Error taxonomy.
    configure_structlog: Logging setup for the application embedding the engine;
        call once at startup before the first transition is evaluated.
"""

from src.deal_pipeline.core.logging import configure_structlog
from src.deal_pipeline.deals.errors import (
    DateOrderViolationError,
    DealPipelineError,
    IllegalTransitionError,
    MissingRequiredFieldsError,
    RevenueMismatchError,
)
from src.deal_pipeline.deals.factory import deal_from_meeting, new_deal
from src.deal_pipeline.deals.mutator import apply_save, apply_transition
from src.deal_pipeline.deals.requirements import (
    check_requirements,
    field_errors,
    is_satisfied,
    required_fields,
    stage_completion,
)
from src.deal_pipeline.deals.schemas import (
    CurrencyType,
    Deal,
    DealStage,
    RequirementCheck,
    StageCompletion,
    StageValidationReport,
    ValidationResult,
)
from src.deal_pipeline.deals.stages import (
    LINEAR_STAGES,
    TERMINAL_STAGES,
    next_stage,
    stage_index,
)
from src.deal_pipeline.deals.transitions import (
    StageTransitionEngine,
    can_advance,
    can_move,
    eligible_targets,
)
from src.deal_pipeline.deals.validators import validate_date_logic, validate_revenue_sum

__all__ = [
    "CurrencyType",
    "DateOrderViolationError",
    "Deal",
    "DealPipelineError",
    "DealStage",
    "IllegalTransitionError",
    "LINEAR_STAGES",
    "MissingRequiredFieldsError",
    "RequirementCheck",
    "RevenueMismatchError",
    "StageCompletion",
    "StageTransitionEngine",
    "StageValidationReport",
    "TERMINAL_STAGES",
    "ValidationResult",
    "apply_save",
    "apply_transition",
    "can_advance",
    "can_move",
    "check_requirements",
    "configure_structlog",
    "deal_from_meeting",
    "eligible_targets",
    "field_errors",
    "is_satisfied",
    "new_deal",
    "next_stage",
    "required_fields",
    "stage_completion",
    "stage_index",
    "validate_date_logic",
    "validate_revenue_sum",
]

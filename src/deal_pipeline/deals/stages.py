"""Stage sequence -- the single definition of pipeline order.

Linear stages have exactly one successor; the terminal stages (Won, Lost,
Dropped) have none and are entered only from Offered. Every other module
asks this one about order instead of keeping its own list.
"""

from __future__ import annotations

from src.deal_pipeline.deals.schemas import DealStage

# ── Stage Pipeline Order ────────────────────────────────────────────────────

LINEAR_STAGES: tuple[DealStage, ...] = (
    DealStage.LEAD,
    DealStage.DISCUSSIONS,
    DealStage.QUALIFIED,
    DealStage.RFQ,
    DealStage.OFFERED,
)

# Fixed order for display: Won, Lost, Dropped.
TERMINAL_STAGES: tuple[DealStage, ...] = (
    DealStage.WON,
    DealStage.LOST,
    DealStage.DROPPED,
)

ALL_STAGES: tuple[DealStage, ...] = LINEAR_STAGES + TERMINAL_STAGES

# The only stage from which terminal stages are reachable.
FINAL_DECISION_STAGE = DealStage.OFFERED


def stage_index(stage: DealStage) -> int | None:
    """Position of ``stage`` in the linear sequence, None for terminal stages."""
    try:
        return LINEAR_STAGES.index(stage)
    except ValueError:
        return None


def next_stage(stage: DealStage) -> DealStage | None:
    """The single following linear stage.

    Returns None for Offered (its forward moves are the terminal stages,
    which the transition engine handles) and for terminal stages.
    """
    idx = stage_index(stage)
    if idx is None or idx >= len(LINEAR_STAGES) - 1:
        return None
    return LINEAR_STAGES[idx + 1]


def previous_stages(stage: DealStage) -> tuple[DealStage, ...]:
    """Linear stages strictly before ``stage``, in sequence order.

    A terminal stage sits after the whole linear path, so every linear
    stage precedes it.
    """
    idx = stage_index(stage)
    if idx is None:
        return LINEAR_STAGES
    return LINEAR_STAGES[:idx]


def is_terminal(stage: DealStage) -> bool:
    return stage in TERMINAL_STAGES

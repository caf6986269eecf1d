"""
Milestone / Proposal — fund-release governance records

Milestone: PENDING → RELEASED (terminal), driven only by a proposal release.
Proposal: open (approvals=0, rejections=0) → released (terminal).

Votes are unweighted counters: one call is one vote, with no per-caller
deduplication.
"""

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class MilestoneStatus(str, Enum):
    """Lifecycle of a milestone."""

    PENDING = "pending"
    RELEASED = "released"


# =============================================================================
# MODELS
# =============================================================================


class Milestone(BaseModel):
    """Founder-defined funding ask scoped to one project."""

    id: str = Field(..., min_length=1)
    project_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str | None = Field(None)
    amount: float = Field(..., gt=0, description="Funds requested for this milestone")
    status: MilestoneStatus = Field(MilestoneStatus.PENDING)
    created_ts_utc_ms: int = Field(..., ge=0)

    model_config = {"frozen": True}


class Proposal(BaseModel):
    """Withdrawal request against a milestone, decided by vote counts."""

    id: str = Field(..., min_length=1)
    project_id: str = Field(..., min_length=1)
    milestone_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, description="Requested withdrawal (<= milestone amount)")
    approvals: int = Field(0, ge=0)
    rejections: int = Field(0, ge=0)
    released: bool = Field(False, description="Terminal once True")
    created_ts_utc_ms: int = Field(..., ge=0)

    model_config = {"frozen": True}

    @property
    def is_approved(self) -> bool:
        """At least one approval and strictly more approvals than rejections."""
        return self.approvals >= 1 and self.approvals > self.rejections

"""Governance — milestone definitions, proposal voting and fund release.

- Milestone: PENDING → RELEASED
- Proposal: open → released, gated on approvals >= 1 and approvals > rejections
"""

from .governor import (
    MilestoneGovernor,
    ReleaseResult,
)

__all__ = [
    "MilestoneGovernor",
    "ReleaseResult",
]

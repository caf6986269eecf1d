"""
Holding — token balance of one user in one project

Identity is the (user_id, project_id) pair. Created lazily on first credit and
never pruned: a zero balance is a valid holding. Only the Ledger produces new
Holding instances.
"""

from pydantic import BaseModel, Field


class Holding(BaseModel):
    """Token balance of a user for a project (balance >= 0)."""

    user_id: str = Field(..., min_length=1, description="Opaque caller id")
    project_id: str = Field(..., min_length=1, description="Project id")
    balance: int = Field(..., ge=0, description="Whole tokens held")

    model_config = {"frozen": True}

    @property
    def key(self) -> tuple[str, str]:
        return (self.user_id, self.project_id)

"""
Project — Project metadata and bonding-curve state

Immutable Pydantic model. Curve state (supply, reserve, cap_reached) only
changes through the registry (buy/sell) and the governor (release); every
change produces a new instance via model_copy.

Invariants:
- supply >= 0 (>= founder allocation right after creation)
- reserve >= 0 always
- cap_reached == (reserve >= funding_goal) after every buy and every release
"""

from pydantic import BaseModel, Field


# =============================================================================
# PROJECT MODEL
# =============================================================================


class Project(BaseModel):
    """
    Registered project with its embedded curve state.

    Display metadata is free-form; the founder id is the opaque caller id that
    submitted the project and is the only id allowed to manage milestones.
    """

    # Identification
    id: str = Field(..., min_length=1, description="Opaque project id")
    founder_id: str = Field(..., min_length=1, description="Caller id of the founder")

    # Display metadata
    name: str = Field(..., min_length=1, description="Project name")
    summary: str = Field(..., min_length=1, description="Short pitch")
    plan: str = Field(..., min_length=1, description="Roadmap / business plan")
    video_url: str | None = Field(None, description="Pitch video link")
    resumes_url: str | None = Field(None, description="Team resumes link")
    token_symbol: str | None = Field(None, description="Ticker shown next to balances")

    created_ts_utc_ms: int = Field(..., ge=0, description="Creation time (UTC, ms)")

    # Curve state
    supply: int = Field(..., ge=0, description="Tokens minted minus tokens burned")
    reserve: float = Field(..., ge=0, description="Net funds held by the project")
    funding_goal: float = Field(..., gt=0, description="Reserve level that closes primary buys")
    cap_reached: bool = Field(False, description="reserve >= funding_goal (see registry)")

    model_config = {"frozen": True}

    def is_founder(self, user_id: str) -> bool:
        """True if user_id submitted this project."""
        return self.founder_id == user_id


# =============================================================================
# READ MODELS
# =============================================================================


class PriceSnapshot(BaseModel):
    """Current marginal price together with the curve state it was read from."""

    project_id: str = Field(..., min_length=1)
    price: float = Field(..., gt=0, description="price(supply) for the next token")
    supply: int = Field(..., ge=0)
    reserve: float = Field(..., ge=0)
    cap_reached: bool

    model_config = {"frozen": True}

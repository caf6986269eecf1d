"""
Offer — peer-to-peer sell offer with escrowed tokens

While status is OPEN, `amount` tokens have already been debited from the seller
and belong to no holding: the offer itself escrows them until a buyer fills.
price_per_token is advisory only, no funds move on fill.
"""

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class OfferStatus(str, Enum):
    """Lifecycle of an offer."""

    OPEN = "open"
    FILLED = "filled"
    # Reserved: no operation produces it (offers cannot be withdrawn)
    CANCELLED = "cancelled"


# =============================================================================
# OFFER MODEL
# =============================================================================


class Offer(BaseModel):
    """Sell offer listed by a token holder."""

    id: str = Field(..., min_length=1, description="Opaque offer id")
    project_id: str = Field(..., min_length=1)
    seller_id: str = Field(..., min_length=1)
    price_per_token: float = Field(..., gt=0, description="Advisory asking price")
    amount: int = Field(..., ge=0, description="Tokens currently escrowed")
    status: OfferStatus = Field(OfferStatus.OPEN)
    created_ts_utc_ms: int = Field(..., ge=0)

    model_config = {"frozen": True}

    @property
    def is_open(self) -> bool:
        """Fillable: OPEN with tokens left in escrow."""
        return self.status == OfferStatus.OPEN and self.amount > 0

    @property
    def escrowed(self) -> int:
        """Tokens held by this offer (0 unless open)."""
        return self.amount if self.status == OfferStatus.OPEN else 0

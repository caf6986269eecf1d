"""
Errors — typed failures for every ledger-engine operation

Every operation either returns its result or raises exactly one of these
before any state is written. Errors are synchronous, local and never retried
by the engine.

Each error carries:
- code: stable machine-readable identifier
- http_status: status hint for an HTTP mapping layer
- details: optional structured context (ids, requested vs available amounts)
"""

from typing import Any


class TokenomicsError(Exception):
    """Base class for all ledger-engine failures."""

    code: str = "TOKENOMICS_ERROR"
    http_status: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict:
        """Error envelope for an outer API layer."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# VALIDATION
# =============================================================================


class InvalidAmountError(TokenomicsError):
    """A numeric argument failed a positivity/range/whole-token check."""

    code = "INVALID_AMOUNT"


class InvalidInputError(TokenomicsError):
    """Structural or referential input problem (empty title, foreign milestone...)."""

    code = "INVALID_INPUT"


# =============================================================================
# LOOKUP / AUTHORIZATION
# =============================================================================


class NotFoundError(TokenomicsError):
    """Referenced entity does not exist or belongs to another parent."""

    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            {"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ForbiddenError(TokenomicsError):
    """Caller is not the founder for a founder-only operation."""

    code = "FORBIDDEN"
    http_status = 403


# =============================================================================
# BUSINESS RULES
# =============================================================================


class InsufficientBalanceError(TokenomicsError):
    """Debit exceeds the holder's balance."""

    code = "INSUFFICIENT_BALANCE"

    def __init__(self, user_id: str, project_id: str, requested: int, available: int):
        super().__init__(
            f"insufficient balance: requested {requested}, available {available}",
            {
                "user_id": user_id,
                "project_id": project_id,
                "requested": requested,
                "available": available,
            },
        )
        self.requested = requested
        self.available = available


class CapReachedError(TokenomicsError):
    """Primary buy attempted after the funding goal was reached."""

    code = "CAP_REACHED"


class QuoteTooSmallError(TokenomicsError):
    """Funds cannot cover even one token at the current price."""

    code = "QUOTE_TOO_SMALL"


class OfferNotOpenError(TokenomicsError):
    """Fill attempted on a filled/cancelled/empty offer."""

    code = "OFFER_NOT_OPEN"


class AlreadyReleasedError(TokenomicsError):
    """Proposal funds were already released."""

    code = "ALREADY_RELEASED"


class NotApprovedError(TokenomicsError):
    """Proposal lacks approvals (needs >= 1 and more than rejections)."""

    code = "NOT_APPROVED"

"""
Domain models and error taxonomy.

Contains the immutable entities of the ledger engine: Project, Holding, Offer,
Milestone, Proposal, and the typed errors raised by its operations.
"""

from src.core.domain.errors import (
    AlreadyReleasedError,
    CapReachedError,
    ForbiddenError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidInputError,
    NotApprovedError,
    NotFoundError,
    OfferNotOpenError,
    QuoteTooSmallError,
    TokenomicsError,
)
from src.core.domain.governance import Milestone, MilestoneStatus, Proposal
from src.core.domain.holding import Holding
from src.core.domain.offer import Offer, OfferStatus
from src.core.domain.project import PriceSnapshot, Project

__all__ = [
    # Entities
    "Project",
    "PriceSnapshot",
    "Holding",
    "Offer",
    "OfferStatus",
    "Milestone",
    "MilestoneStatus",
    "Proposal",
    # Errors
    "TokenomicsError",
    "InvalidAmountError",
    "InvalidInputError",
    "NotFoundError",
    "ForbiddenError",
    "InsufficientBalanceError",
    "CapReachedError",
    "QuoteTooSmallError",
    "OfferNotOpenError",
    "AlreadyReleasedError",
    "NotApprovedError",
]

"""Project Registry — project metadata and bonding-curve buy/sell."""

from .project_registry import (
    BuyResult,
    ProjectRegistry,
    SellResult,
)

__all__ = [
    "ProjectRegistry",
    "BuyResult",
    "SellResult",
]

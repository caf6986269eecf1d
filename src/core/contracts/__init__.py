"""
Contract Validation Module

JSON Schema validation of payloads published by the ledger engine.
"""

from .validators import (
    ContractValidator,
    PriceSnapshotValidator,
    ProjectEventValidator,
    SchemaLoader,
)

__all__ = [
    "SchemaLoader",
    "ContractValidator",
    "ProjectEventValidator",
    "PriceSnapshotValidator",
]

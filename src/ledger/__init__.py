"""Ledger — per-user token balances, the only writer of Holding records."""

from .ledger import Ledger

__all__ = [
    "Ledger",
]

"""Offer Book — peer-to-peer sell offers with escrowed tokens."""

from .offer_book import FillResult, OfferBook

__all__ = [
    "OfferBook",
    "FillResult",
]

"""Offer Book — escrow-based secondary market for surplus tokens.

Create:
- seller balance is debited by `amount` up front; the offer escrows the tokens

Fill:
- take = min(offer.amount, max(0, requested)); buyer credited with take
- offer.amount -= take; status → FILLED when it reaches 0

No currency changes hands (price_per_token is advisory) and offers cannot be
withdrawn: escrowed tokens leave only through fills.

CRITICAL INVARIANTS:
1. Tokens are conserved: debit on create == credits on fills + remaining escrow
2. A filled offer never accepts another fill
"""

import logging
from dataclasses import dataclass

from src.core.domain.errors import InvalidAmountError, NotFoundError, OfferNotOpenError
from src.core.domain.holding import Holding
from src.core.domain.offer import Offer, OfferStatus
from src.core.domain.validation import (
    require_caller,
    require_positive_funds,
    require_positive_tokens,
)
from src.core.math.numerical_safeguards import clamp, is_whole_number
from src.core.store import TokenomicsStore
from src.ledger.ledger import Ledger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FillResult:
    """Outcome of a (possibly partial) fill."""

    offer: Offer
    taken: int
    holding: Holding


class OfferBook:
    """Per-project open sell offers."""

    def __init__(self, store: TokenomicsStore, ledger: Ledger):
        self._store = store
        self._ledger = ledger

    def list_offers(self, project_id: str) -> list[Offer]:
        """Open offers for a project, cheapest first.

        Raises:
            NotFoundError: unknown project
        """
        self._store.require_project(project_id)
        offers = [
            o for o in self._store.snapshot(self._store.offers)
            if o.project_id == project_id and o.status == OfferStatus.OPEN
        ]
        return sorted(offers, key=lambda o: o.price_per_token)

    def total_escrowed(self, project_id: str) -> int:
        """Tokens currently held by open offers of a project."""
        return sum(
            o.escrowed for o in self._store.snapshot(self._store.offers)
            if o.project_id == project_id
        )

    def create_offer(
        self,
        project_id: str,
        seller_id: str,
        price_per_token: float,
        amount: int,
    ) -> Offer:
        """List `amount` tokens for sale, moving them from the seller into escrow.

        Raises:
            NotFoundError: unknown project
            InvalidAmountError: price_per_token or amount not > 0
            InsufficientBalanceError: seller holds fewer than amount tokens
        """
        with self._store.project_lock(project_id):
            self._store.require_project(project_id)
            price_per_token = require_positive_funds(price_per_token, "pricePerToken")
            amount = require_positive_tokens(amount, "amount")
            seller_id = require_caller(seller_id)
            self._ledger.ensure_can_debit(seller_id, project_id, amount)

            offer = Offer(
                id=self._store.new_id(self._store.offers),
                project_id=project_id,
                seller_id=seller_id,
                price_per_token=price_per_token,
                amount=amount,
                status=OfferStatus.OPEN,
                created_ts_utc_ms=self._store.now_ms(),
            )
            self._ledger.debit(seller_id, project_id, amount)
            self._store.put(self._store.offers, offer.id, offer)

        logger.info(
            "offer listed: %d tokens at %.6f", amount, price_per_token,
            extra={"project_id": project_id, "user_id": seller_id, "offer_id": offer.id},
        )
        return offer

    def fill(
        self,
        project_id: str,
        offer_id: str,
        buyer_id: str,
        requested_amount: int,
    ) -> FillResult:
        """Take up to requested_amount tokens out of an open offer.

        Raises:
            NotFoundError: unknown project, or offer missing / in another project
            OfferNotOpenError: offer filled, cancelled or empty
            InvalidAmountError: requested amount not a whole number, or clamps to 0
        """
        with self._store.project_lock(project_id):
            self._store.require_project(project_id)
            offer = self._store.offers.get(offer_id)
            if offer is None or offer.project_id != project_id:
                raise NotFoundError("offer", offer_id)
            if not offer.is_open:
                raise OfferNotOpenError(
                    "offer not open",
                    {"offer_id": offer_id, "status": offer.status.value, "amount": offer.amount},
                )
            if not is_whole_number(requested_amount):
                raise InvalidAmountError(
                    "amount must be a whole number", {"amount": repr(requested_amount)}
                )
            take = int(clamp(requested_amount, min_value=0, max_value=offer.amount))
            if take <= 0:
                raise InvalidAmountError("amount > 0 required", {"amount": requested_amount})
            buyer_id = require_caller(buyer_id)

            remaining = offer.amount - take
            updated = offer.model_copy(update={
                "amount": remaining,
                "status": OfferStatus.FILLED if remaining == 0 else OfferStatus.OPEN,
            })
            holding = self._ledger.credit(buyer_id, project_id, take)
            self._store.put(self._store.offers, offer_id, updated)

        logger.info(
            "offer fill: %d tokens (remaining %d, status %s)",
            take, remaining, updated.status.value,
            extra={"project_id": project_id, "user_id": buyer_id, "offer_id": offer_id},
        )
        return FillResult(offer=updated, taken=take, holding=holding)

"""
Ledger — authoritative (user, project) → balance mapping

The only place balances change. Every other component moves tokens through
credit/debit.

CRITICAL INVARIANTS:
1. balance >= 0 at all times: a debit that would go negative raises instead
2. credit(n) followed by debit(n) leaves the balance unchanged
3. Holdings are created lazily on first credit and never removed
4. check + write of a debit happen under the project lock (atomic)
"""

import logging

from src.core.domain.errors import InsufficientBalanceError, InvalidAmountError
from src.core.domain.holding import Holding
from src.core.math.numerical_safeguards import is_whole_number
from src.core.store import TokenomicsStore

logger = logging.getLogger(__name__)


def _require_token_delta(tokens: int) -> int:
    if not is_whole_number(tokens) or tokens < 0:
        raise InvalidAmountError(
            "token amount must be a whole number >= 0", {"tokens": repr(tokens)}
        )
    return int(tokens)


class Ledger:
    """Per-user token balances backed by a TokenomicsStore."""

    def __init__(self, store: TokenomicsStore):
        self._store = store

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_holding(self, user_id: str, project_id: str) -> Holding | None:
        return self._store.holdings.get((user_id, project_id))

    def get_balance(self, user_id: str, project_id: str) -> int:
        """Balance, 0 when the holding does not exist yet."""
        holding = self.get_holding(user_id, project_id)
        return holding.balance if holding is not None else 0

    def list_by_user(self, user_id: str) -> list[Holding]:
        """All holdings of a user, in creation order."""
        return [
            h for h in self._store.snapshot(self._store.holdings) if h.user_id == user_id
        ]

    def list_by_project(self, project_id: str) -> list[Holding]:
        return [
            h for h in self._store.snapshot(self._store.holdings)
            if h.project_id == project_id
        ]

    def total_held(self, project_id: str) -> int:
        """Sum of all balances for a project (escrowed offer tokens excluded)."""
        return sum(h.balance for h in self.list_by_project(project_id))

    def ensure_can_debit(self, user_id: str, project_id: str, tokens: int) -> None:
        """Validate a debit without writing.

        Raises:
            InvalidAmountError: tokens is not a whole number >= 0
            InsufficientBalanceError: tokens > balance
        """
        tokens = _require_token_delta(tokens)
        available = self.get_balance(user_id, project_id)
        if tokens > available:
            raise InsufficientBalanceError(user_id, project_id, tokens, available)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def credit(self, user_id: str, project_id: str, tokens: int) -> Holding:
        """Add tokens to a holding, creating it if absent.

        Returns:
            The updated Holding
        """
        tokens = _require_token_delta(tokens)
        with self._store.project_lock(project_id):
            key = (user_id, project_id)
            current = self._store.holdings.get(key)
            if current is None:
                updated = Holding(user_id=user_id, project_id=project_id, balance=tokens)
            else:
                updated = current.model_copy(update={"balance": current.balance + tokens})
            self._store.put(self._store.holdings, key, updated)

        logger.debug(
            "credit %d tokens", tokens,
            extra={"user_id": user_id, "project_id": project_id},
        )
        return updated

    def debit(self, user_id: str, project_id: str, tokens: int) -> Holding:
        """Remove tokens from a holding.

        Returns:
            The updated Holding

        Raises:
            InsufficientBalanceError: tokens > balance (nothing is written)
        """
        tokens = _require_token_delta(tokens)
        with self._store.project_lock(project_id):
            self.ensure_can_debit(user_id, project_id, tokens)
            key = (user_id, project_id)
            current = self._store.holdings.get(key)
            if current is None:
                # Only reachable for tokens == 0
                current = Holding(user_id=user_id, project_id=project_id, balance=0)
            updated = current.model_copy(update={"balance": current.balance - tokens})
            self._store.put(self._store.holdings, key, updated)

        logger.debug(
            "debit %d tokens", tokens,
            extra={"user_id": user_id, "project_id": project_id},
        )
        return updated

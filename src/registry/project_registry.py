"""Project Registry — project creation and bonding-curve buy/sell transitions.

Buy:
- rejects on cap reached, funds <= 0, or funds too small for one token
- supply += tokens_out, reserve += funds_in (the whole amount, including the
  remainder the quote could not turn into a whole token)
- cap_reached = reserve >= funding_goal
- credits the caller with tokens_out

Sell:
- rejects on tokens <= 0 or tokens > caller balance
- supply -= tokens_in, reserve -= quote (both floored at zero)
- debits the caller; cap_reached is NOT re-evaluated (selling never reopens
  a launched project)

All validation happens before the first write; writes happen under the
project lock.
"""

import logging
from dataclasses import dataclass

from src.core.contracts.validators import PriceSnapshotValidator
from src.core.domain.errors import CapReachedError, QuoteTooSmallError
from src.core.domain.holding import Holding
from src.core.domain.project import PriceSnapshot, Project
from src.core.domain.validation import (
    optional_text,
    require_caller,
    require_positive_funds,
    require_positive_tokens,
    require_text,
)
from src.core.math.bonding_curve import (
    DEFAULT_CURVE,
    CurveConfig,
    buy_tokens_quote,
    price_at_supply,
    sell_tokens_quote,
)
from src.core.math.numerical_safeguards import is_positive_finite, subtract_non_negative
from src.core.store import TokenomicsStore
from src.ledger.ledger import Ledger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuyResult:
    """Outcome of a primary buy."""

    project: Project
    tokens_out: int
    holding: Holding

    # Reserve/supply deltas for read-model sync
    delta_reserve: float


@dataclass(frozen=True)
class SellResult:
    """Outcome of a sale back to the curve."""

    project: Project
    tokens_in: int
    amount_out: float
    holding: Holding

    # Reserve actually removed (amount_out clamped by the available reserve)
    delta_reserve: float


class ProjectRegistry:
    """Projects and their curve state (supply, reserve, cap_reached)."""

    def __init__(
        self,
        store: TokenomicsStore,
        ledger: Ledger,
        config: CurveConfig = DEFAULT_CURVE,
    ):
        self._store = store
        self._ledger = ledger
        self.config = config
        self._snapshot_validator = PriceSnapshotValidator()

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create_project(
        self,
        caller_id: str,
        name: str,
        summary: str,
        plan: str,
        video_url: str | None = None,
        resumes_url: str | None = None,
        token_symbol: str | None = None,
        funding_goal: float | None = None,
    ) -> Project:
        """Register a project and mint the founder allocation to the caller.

        funding_goal falls back to the configured default unless it is a finite
        positive number.

        Raises:
            InvalidInputError: name, summary or plan missing
        """
        caller_id = require_caller(caller_id)
        name = require_text(name, "name")
        summary = require_text(summary, "summary")
        plan = require_text(plan, "plan")
        goal = (
            float(funding_goal)
            if is_positive_finite(funding_goal)
            else self.config.default_funding_goal
        )

        project_id = self._store.new_id(self._store.projects)
        allocation = self.config.founder_allocation

        with self._store.project_lock(project_id):
            project = Project(
                id=project_id,
                founder_id=caller_id,
                name=name,
                summary=summary,
                plan=plan,
                video_url=optional_text(video_url),
                resumes_url=optional_text(resumes_url),
                token_symbol=optional_text(token_symbol),
                created_ts_utc_ms=self._store.now_ms(),
                supply=allocation,
                reserve=0.0,
                funding_goal=goal,
                cap_reached=False,
            )
            self._store.put(self._store.projects, project_id, project)
            self._ledger.credit(caller_id, project_id, allocation)

        logger.info(
            "project created: %s (founder allocation %d)", name, allocation,
            extra={"project_id": project_id, "user_id": caller_id},
        )
        return project

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_project(self, project_id: str) -> Project:
        """Raises NotFoundError for unknown ids."""
        return self._store.require_project(project_id)

    def list_projects(self) -> list[Project]:
        """All projects, newest first."""
        return sorted(
            self._store.snapshot(self._store.projects),
            key=lambda p: p.created_ts_utc_ms,
            reverse=True,
        )

    def list_launched(self) -> list[Project]:
        """Projects whose funding goal has been reached, newest first."""
        return [p for p in self.list_projects() if p.cap_reached]

    def get_price(self, project_id: str) -> PriceSnapshot:
        """Marginal price for the next token plus the curve state it derives from.

        The snapshot is checked against the price_snapshot contract before it
        is returned.

        Raises:
            NotFoundError: unknown project
            jsonschema.ValidationError: snapshot violates price_snapshot.json
        """
        project = self._store.require_project(project_id)
        snapshot = PriceSnapshot(
            project_id=project.id,
            price=price_at_supply(project.supply, self.config),
            supply=project.supply,
            reserve=project.reserve,
            cap_reached=project.cap_reached,
        )
        self._snapshot_validator.validate(snapshot.model_dump(mode="json"))
        return snapshot

    # -------------------------------------------------------------------------
    # Curve transitions
    # -------------------------------------------------------------------------

    def buy(self, project_id: str, caller_id: str, funds_in: float) -> BuyResult:
        """Buy tokens from the curve with funds_in.

        Raises:
            NotFoundError: unknown project
            CapReachedError: funding goal already reached
            InvalidAmountError: funds_in not a finite number > 0
            QuoteTooSmallError: funds_in below the price of the next token
        """
        with self._store.project_lock(project_id):
            project = self._store.require_project(project_id)
            if project.cap_reached:
                raise CapReachedError(
                    "funding cap reached",
                    {"project_id": project_id, "funding_goal": project.funding_goal},
                )
            funds_in = require_positive_funds(funds_in, "amount")
            caller_id = require_caller(caller_id)

            tokens_out = buy_tokens_quote(project.supply, funds_in, self.config)
            if tokens_out <= 0:
                raise QuoteTooSmallError(
                    "amount too small for current price",
                    {
                        "project_id": project_id,
                        "amount": funds_in,
                        "price": price_at_supply(project.supply, self.config),
                    },
                )

            reserve = project.reserve + funds_in
            updated = project.model_copy(update={
                "supply": project.supply + tokens_out,
                "reserve": reserve,
                "cap_reached": reserve >= project.funding_goal,
            })
            self._store.put(self._store.projects, project_id, updated)
            holding = self._ledger.credit(caller_id, project_id, tokens_out)

        logger.info(
            "buy: %d tokens for %.6f (supply=%d reserve=%.6f cap_reached=%s)",
            tokens_out, funds_in, updated.supply, updated.reserve, updated.cap_reached,
            extra={"project_id": project_id, "user_id": caller_id},
        )
        return BuyResult(
            project=updated,
            tokens_out=tokens_out,
            holding=holding,
            delta_reserve=funds_in,
        )

    def sell(self, project_id: str, caller_id: str, tokens_in: int) -> SellResult:
        """Sell tokens back to the curve.

        Raises:
            NotFoundError: unknown project
            InvalidAmountError: tokens_in not a whole number > 0
            InsufficientBalanceError: tokens_in exceeds the caller's balance
        """
        with self._store.project_lock(project_id):
            project = self._store.require_project(project_id)
            tokens_in = require_positive_tokens(tokens_in, "tokens")
            caller_id = require_caller(caller_id)
            self._ledger.ensure_can_debit(caller_id, project_id, tokens_in)

            amount_out = sell_tokens_quote(project.supply, tokens_in, self.config)
            reserve = subtract_non_negative(project.reserve, amount_out)
            updated = project.model_copy(update={
                "supply": max(0, project.supply - tokens_in),
                "reserve": reserve,
            })
            self._store.put(self._store.projects, project_id, updated)
            holding = self._ledger.debit(caller_id, project_id, tokens_in)

        logger.info(
            "sell: %d tokens for %.6f (supply=%d reserve=%.6f)",
            tokens_in, amount_out, updated.supply, updated.reserve,
            extra={"project_id": project_id, "user_id": caller_id},
        )
        return SellResult(
            project=updated,
            tokens_in=tokens_in,
            amount_out=amount_out,
            holding=holding,
            delta_reserve=project.reserve - reserve,
        )

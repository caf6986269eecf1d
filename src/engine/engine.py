"""TokenomicsEngine — single entry point for every ledger operation.

Wires one TokenomicsStore into the Ledger, ProjectRegistry, OfferBook and
MilestoneGovernor, and publishes change notifications after buy/sell/create.

Every operation takes the opaque caller id (not verified) plus typed
arguments and either returns its result or raises a TokenomicsError before
any write. Rejections are logged with their error code and re-raised.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from src.config import Settings, get_settings
from src.core.domain.errors import TokenomicsError
from src.core.domain.governance import Milestone, Proposal
from src.core.domain.holding import Holding
from src.core.domain.offer import Offer
from src.core.domain.project import PriceSnapshot, Project
from src.core.math.bonding_curve import DEFAULT_CURVE, CurveConfig
from src.core.store import TokenomicsStore
from src.engine.events import EventBus, EventType, build_event
from src.governance.governor import MilestoneGovernor, ReleaseResult
from src.ledger.ledger import Ledger
from src.market.offer_book import FillResult, OfferBook
from src.observability import setup_logging
from src.registry.project_registry import BuyResult, ProjectRegistry, SellResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SupplyAudit:
    """Token conservation check for one project.

    balanced: held + escrowed == supply
    """

    project_id: str
    supply: int
    held: int
    escrowed: int

    @property
    def balanced(self) -> bool:
        return self.held + self.escrowed == self.supply


class TokenomicsEngine:
    """Facade over registry, ledger, offer book and governor."""

    def __init__(
        self,
        store: TokenomicsStore | None = None,
        config: CurveConfig = DEFAULT_CURVE,
        events: EventBus | None = None,
    ):
        self.store = store or TokenomicsStore()
        self.config = config
        self.events = events or EventBus()

        self.ledger = Ledger(self.store)
        self.registry = ProjectRegistry(self.store, self.ledger, config)
        self.offer_book = OfferBook(self.store, self.ledger)
        self.governor = MilestoneGovernor(self.store)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        configure_logging: bool = True,
    ) -> "TokenomicsEngine":
        """Engine configured from environment settings."""
        settings = settings or get_settings()
        if configure_logging:
            setup_logging(settings.log_level, settings.log_format)
        return cls(config=CurveConfig.from_settings(settings))

    # -------------------------------------------------------------------------
    # Projects
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
        with self._rejections("create_project", user_id=caller_id):
            project = self.registry.create_project(
                caller_id, name, summary, plan,
                video_url=video_url,
                resumes_url=resumes_url,
                token_symbol=token_symbol,
                funding_goal=funding_goal,
            )
        self._publish(EventType.CREATED, project, project.supply, 0.0, caller_id)
        return project

    def list_projects(self) -> list[Project]:
        return self.registry.list_projects()

    def get_project(self, project_id: str) -> Project:
        return self.registry.get_project(project_id)

    def get_price(self, project_id: str) -> PriceSnapshot:
        return self.registry.get_price(project_id)

    def list_launched(self) -> list[Project]:
        return self.registry.list_launched()

    # -------------------------------------------------------------------------
    # Bonding curve
    # -------------------------------------------------------------------------

    def buy(self, project_id: str, caller_id: str, amount: float) -> BuyResult:
        with self._rejections("buy", project_id=project_id, user_id=caller_id):
            result = self.registry.buy(project_id, caller_id, amount)
        self._publish(
            EventType.BOUGHT, result.project, result.tokens_out, result.delta_reserve, caller_id,
        )
        return result

    def sell(self, project_id: str, caller_id: str, tokens: int) -> SellResult:
        with self._rejections("sell", project_id=project_id, user_id=caller_id):
            result = self.registry.sell(project_id, caller_id, tokens)
        self._publish(
            EventType.SOLD, result.project, -result.tokens_in, -result.delta_reserve, caller_id,
        )
        return result

    # -------------------------------------------------------------------------
    # Holdings
    # -------------------------------------------------------------------------

    def list_holdings(self, caller_id: str) -> list[Holding]:
        return self.ledger.list_by_user(caller_id)

    def get_balance(self, caller_id: str, project_id: str) -> int:
        return self.ledger.get_balance(caller_id, project_id)

    def audit_supply(self, project_id: str) -> SupplyAudit:
        """Compare held + escrowed tokens with the project's supply."""
        with self.store.project_lock(project_id):
            project = self.registry.get_project(project_id)
            return SupplyAudit(
                project_id=project_id,
                supply=project.supply,
                held=self.ledger.total_held(project_id),
                escrowed=self.offer_book.total_escrowed(project_id),
            )

    # -------------------------------------------------------------------------
    # Offers
    # -------------------------------------------------------------------------

    def list_offers(self, project_id: str) -> list[Offer]:
        return self.offer_book.list_offers(project_id)

    def create_offer(
        self,
        project_id: str,
        caller_id: str,
        price_per_token: float,
        amount: int,
    ) -> Offer:
        with self._rejections("create_offer", project_id=project_id, user_id=caller_id):
            return self.offer_book.create_offer(project_id, caller_id, price_per_token, amount)

    def fill_offer(
        self,
        project_id: str,
        offer_id: str,
        caller_id: str,
        amount: int,
    ) -> FillResult:
        with self._rejections(
            "fill_offer", project_id=project_id, user_id=caller_id, offer_id=offer_id,
        ):
            return self.offer_book.fill(project_id, offer_id, caller_id, amount)

    # -------------------------------------------------------------------------
    # Milestones & proposals
    # -------------------------------------------------------------------------

    def list_milestones(self, project_id: str) -> list[Milestone]:
        return self.governor.list_milestones(project_id)

    def create_milestone(
        self,
        project_id: str,
        caller_id: str,
        title: str,
        amount: float,
        description: str | None = None,
    ) -> Milestone:
        with self._rejections("create_milestone", project_id=project_id, user_id=caller_id):
            return self.governor.create_milestone(
                project_id, caller_id, title, amount, description=description,
            )

    def list_proposals(self, project_id: str) -> list[Proposal]:
        return self.governor.list_proposals(project_id)

    def create_proposal(
        self,
        project_id: str,
        caller_id: str,
        milestone_id: str,
        amount: float,
    ) -> Proposal:
        with self._rejections("create_proposal", project_id=project_id, user_id=caller_id):
            return self.governor.create_proposal(project_id, caller_id, milestone_id, amount)

    def vote(
        self,
        project_id: str,
        proposal_id: str,
        approve: bool,
        caller_id: str | None = None,
    ) -> Proposal:
        with self._rejections(
            "vote", project_id=project_id, user_id=caller_id, proposal_id=proposal_id,
        ):
            return self.governor.vote(project_id, proposal_id, bool(approve), caller_id)

    def release(self, project_id: str, caller_id: str, proposal_id: str) -> ReleaseResult:
        with self._rejections(
            "release", project_id=project_id, user_id=caller_id, proposal_id=proposal_id,
        ):
            return self.governor.release(project_id, caller_id, proposal_id)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @contextmanager
    def _rejections(self, operation: str, **ids: str | None) -> Iterator[None]:
        """Log typed rejections with their error code, then re-raise."""
        try:
            yield
        except TokenomicsError as exc:
            logger.info(
                "%s rejected: %s", operation, exc.message,
                extra={**ids, "error_code": exc.code},
            )
            raise

    def _publish(
        self,
        event_type: EventType,
        project: Project,
        delta_supply: int,
        delta_reserve: float,
        user_id: str | None,
    ) -> None:
        event = build_event(
            event_type, project, delta_supply, delta_reserve,
            ts_utc_ms=self.store.now_ms(),
            user_id=user_id,
        )
        self.events.publish(event)

"""
Tests for the TokenomicsEngine facade

Checks:
1. Change notifications for create/buy/sell (payloads, ordering, isolation)
2. Supply conservation across a mixed sequence of operations
3. Rejections are logged with their error code and re-raised
4. Demo seed idempotence
5. Construction from Settings
"""

import logging

import pytest
from jsonschema import ValidationError

from src.config import Settings
from src.core.domain.errors import CapReachedError, InsufficientBalanceError
from src.engine import EventBus, EventType, TokenomicsEngine, build_event, seed_demo
from src.engine.seed import DEMO_BACKERS, DEMO_FOUNDER_ID, DEMO_PROJECT_NAME
from tests.conftest import ALICE, BOB, CARA, FOUNDER


@pytest.fixture
def received(engine) -> list:
    events: list = []
    engine.events.subscribe(events.append)
    return events


# =============================================================================
# NOTIFICATIONS
# =============================================================================


class TestNotifications:
    """Events published by create/buy/sell"""

    def test_created_event(self, engine, received) -> None:
        project = engine.create_project(FOUNDER, name="P", summary="S", plan="Plan")

        assert len(received) == 1
        event = received[0]
        assert event["type"] == "created"
        assert event["project_id"] == project.id
        assert event["user_id"] == FOUNDER
        assert event["delta_supply"] == 100
        assert event["delta_reserve"] == 0.0
        assert event["supply"] == 100
        assert event["cap_reached"] is False

    def test_bought_event(self, engine, project, received) -> None:
        engine.buy(project.id, ALICE, 10.0)

        event = received[-1]
        assert event["type"] == "bought"
        assert event["delta_supply"] == 290
        assert event["delta_reserve"] == 10.0
        assert event["supply"] == 390
        assert event["reserve"] == pytest.approx(10.0)

    def test_sold_event_has_negative_deltas(self, engine, project, received) -> None:
        engine.buy(project.id, ALICE, 10.0)
        result = engine.sell(project.id, ALICE, 90)

        event = received[-1]
        assert event["type"] == "sold"
        assert event["delta_supply"] == -90
        assert event["delta_reserve"] == pytest.approx(-result.delta_reserve)
        assert event["supply"] == 300

    def test_timestamps_non_decreasing(self, engine, project, received) -> None:
        engine.buy(project.id, ALICE, 1.0)
        engine.buy(project.id, BOB, 1.0)
        engine.sell(project.id, ALICE, 5)
        stamps = [e["ts_utc_ms"] for e in received]
        assert stamps == sorted(stamps)

    def test_rejected_operation_publishes_nothing(self, engine, project, received) -> None:
        with pytest.raises(InsufficientBalanceError):
            engine.sell(project.id, BOB, 1)
        assert received == []

    def test_offers_and_governance_publish_nothing(self, engine, project, received) -> None:
        offer = engine.create_offer(project.id, FOUNDER, 0.05, 5)
        engine.fill_offer(project.id, offer.id, ALICE, 5)
        engine.create_milestone(project.id, FOUNDER, "M", 10.0)
        assert received == []

    def test_failing_subscriber_isolated(self, engine, project, received, caplog) -> None:
        def broken(event):
            raise RuntimeError("read model down")

        engine.events.subscribe(broken)
        with caplog.at_level(logging.WARNING, logger="src.engine.events"):
            result = engine.buy(project.id, ALICE, 1.0)

        assert result.tokens_out > 0
        assert received[-1]["type"] == "bought"
        assert any(r.message == "event subscriber failed" for r in caplog.records)

    def test_unsubscribe(self, engine, project, received) -> None:
        extra: list = []
        unsubscribe = engine.events.subscribe(extra.append)
        unsubscribe()
        unsubscribe()

        engine.buy(project.id, ALICE, 1.0)
        assert extra == []
        assert len(received) == 1


class TestEventBus:
    """EventBus used standalone"""

    def test_publish_returns_delivered_count(self, project) -> None:
        bus = EventBus()
        bus.subscribe(lambda e: None)
        bus.subscribe(lambda e: 1 / 0)
        event = build_event(EventType.CREATED, project, 100, 0.0, ts_utc_ms=1)

        assert bus.subscriber_count == 2
        assert bus.publish(event) == 1

    def test_invalid_payload_rejected(self, project) -> None:
        bus = EventBus()
        event = build_event(EventType.BOUGHT, project, 5, 1.0, ts_utc_ms=1)
        event["supply"] = -1
        with pytest.raises(ValidationError):
            bus.publish(event)


# =============================================================================
# CONSERVATION
# =============================================================================


class TestSupplyAudit:
    """held + escrowed == supply after every operation"""

    def test_balanced_through_mixed_operations(self, engine, project) -> None:
        steps = [
            lambda: engine.buy(project.id, ALICE, 5.0),
            lambda: engine.buy(project.id, BOB, 2.5),
            lambda: engine.create_offer(project.id, ALICE, 0.1, 30),
            lambda: engine.sell(project.id, BOB, 10),
            lambda: engine.fill_offer(
                project.id, engine.list_offers(project.id)[0].id, CARA, 12,
            ),
            lambda: engine.sell(project.id, FOUNDER, 100),
            lambda: engine.create_offer(project.id, CARA, 0.2, 12),
        ]
        for step in steps:
            step()
            audit = engine.audit_supply(project.id)
            assert audit.balanced, audit

    def test_holdings_listing(self, engine, project) -> None:
        other = engine.create_project(BOB, name="Other", summary="S", plan="Plan")
        engine.buy(project.id, ALICE, 1.0)
        engine.buy(other.id, ALICE, 1.0)
        assert {h.project_id for h in engine.list_holdings(ALICE)} == {project.id, other.id}


# =============================================================================
# REJECTION LOGGING
# =============================================================================


class TestRejectionLogging:
    """Typed errors are logged with their code and re-raised unchanged"""

    def test_cap_rejection_logged(self, engine, caplog) -> None:
        project = engine.create_project(FOUNDER, name="P", summary="S", plan="Plan", funding_goal=1)
        engine.buy(project.id, ALICE, 1.0)

        with caplog.at_level(logging.INFO, logger="src.engine.engine"):
            with pytest.raises(CapReachedError) as exc_info:
                engine.buy(project.id, BOB, 1.0)

        record = next(r for r in caplog.records if r.name == "src.engine.engine")
        assert record.error_code == "CAP_REACHED"
        assert record.project_id == project.id
        assert record.user_id == BOB
        assert exc_info.value.to_response()["error"]["code"] == "CAP_REACHED"


# =============================================================================
# DEMO SEED
# =============================================================================


class TestSeedDemo:
    """Tests for seed_demo"""

    def test_seed_creates_backed_project(self, engine) -> None:
        project, created = seed_demo(engine)

        assert created is True
        assert project.name == DEMO_PROJECT_NAME
        assert project.founder_id == DEMO_FOUNDER_ID
        assert project.reserve == pytest.approx(sum(a for _, a in DEMO_BACKERS))
        for user_id, _ in DEMO_BACKERS:
            assert engine.get_balance(user_id, project.id) > 0
        assert engine.audit_supply(project.id).balanced

    def test_seed_is_idempotent(self, engine) -> None:
        first, _ = seed_demo(engine)
        second, created = seed_demo(engine)

        assert created is False
        assert second == first
        assert len(engine.list_projects()) == 1


# =============================================================================
# SETTINGS
# =============================================================================


class TestFromSettings:
    """Tests for TokenomicsEngine.from_settings"""

    def test_curve_from_settings(self) -> None:
        settings = Settings(slope=0.0002, founder_allocation=10, default_funding_goal=50)
        engine = TokenomicsEngine.from_settings(settings, configure_logging=False)

        project = engine.create_project(FOUNDER, name="P", summary="S", plan="Plan")
        assert engine.config.slope == 0.0002
        assert project.supply == 10
        assert project.funding_goal == 50
        assert engine.get_price(project.id).price == pytest.approx(0.01 + 0.0002 * 10)

    def test_configures_logging(self) -> None:
        settings = Settings(log_level="WARNING", log_format="text")
        before = list(logging.root.handlers)
        level = logging.root.level
        try:
            TokenomicsEngine.from_settings(settings)
            assert logging.root.level == logging.WARNING
            assert len(logging.root.handlers) == len(before) + 1
        finally:
            for handler in logging.root.handlers[:]:
                if handler not in before:
                    logging.root.removeHandler(handler)
            logging.root.setLevel(level)

"""Shared fixtures: deterministic store, engine, and a funded project."""

import itertools

import pytest

from src.core.store import TokenomicsStore
from src.engine.engine import TokenomicsEngine

FOUNDER = "founder_1"
ALICE = "u_alice"
BOB = "u_bob"
CARA = "u_cara"


class StepClock:
    """Clock advancing 1000 ms per call, starting at 1_700_000_000_000."""

    def __init__(self, start_ms: int = 1_700_000_000_000, step_ms: int = 1000):
        self._ticks = itertools.count(start_ms, step_ms)

    def __call__(self) -> int:
        return next(self._ticks)


def sequential_ids(prefix: str = "id"):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter):04d}"


@pytest.fixture
def store() -> TokenomicsStore:
    return TokenomicsStore(clock=StepClock(), id_factory=sequential_ids())


@pytest.fixture
def engine(store) -> TokenomicsEngine:
    return TokenomicsEngine(store=store)


@pytest.fixture
def project(engine):
    """Fresh project created by FOUNDER with default settings."""
    return engine.create_project(
        FOUNDER,
        name="Test Project",
        summary="A project used in tests",
        plan="Build -> Ship",
        token_symbol="TST",
    )

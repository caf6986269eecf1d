"""Engine — facade over every ledger operation, change notifications, demo seed."""

from .engine import SupplyAudit, TokenomicsEngine
from .events import EventBus, EventType, build_event
from .seed import seed_demo

__all__ = [
    "TokenomicsEngine",
    "SupplyAudit",
    "EventBus",
    "EventType",
    "build_event",
    "seed_demo",
]

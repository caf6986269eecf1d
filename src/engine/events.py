"""Change notifications for external read-models.

Best-effort channel: at-most-once, synchronous, no replay, no ordering across
subscribers. Payloads are validated against the project_event contract before
delivery. A failing subscriber is logged and skipped; it never affects the
operation that produced the event.
"""

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import Any

from src.core.contracts.validators import ProjectEventValidator
from src.core.domain.project import Project

logger = logging.getLogger(__name__)

Subscriber = Callable[[dict[str, Any]], None]


class EventType(str, Enum):
    """Kinds of curve-state changes published."""

    CREATED = "created"
    BOUGHT = "bought"
    SOLD = "sold"


def build_event(
    event_type: EventType,
    project: Project,
    delta_supply: int,
    delta_reserve: float,
    ts_utc_ms: int,
    user_id: str | None = None,
) -> dict[str, Any]:
    """Event payload carrying the deltas and the post-change curve state."""
    return {
        "type": event_type.value,
        "project_id": project.id,
        "user_id": user_id,
        "delta_supply": delta_supply,
        "delta_reserve": delta_reserve,
        "supply": project.supply,
        "reserve": project.reserve,
        "cap_reached": project.cap_reached,
        "ts_utc_ms": ts_utc_ms,
    }


class EventBus:
    """Fan-out of project events to registered callbacks."""

    def __init__(self):
        self._validator = ProjectEventValidator()
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback.

        Returns:
            A function that removes the callback again (idempotent)
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event: dict[str, Any]) -> int:
        """Deliver an event to every current subscriber.

        Raises:
            jsonschema.ValidationError: payload violates project_event.json

        Returns:
            Number of subscribers that accepted the event without raising
        """
        self._validator.validate(event)
        with self._lock:
            subscribers = list(self._subscribers)

        delivered = 0
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.warning(
                    "event subscriber failed", exc_info=True,
                    extra={"project_id": event.get("project_id"), "event_type": event.get("type")},
                )
                continue
            delivered += 1
        return delivered

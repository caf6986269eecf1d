"""
TokenomicsStore — explicit owner of every in-memory collection

Replaces ambient module-level maps: one store instance is injected into the
ledger, registry, offer book and governor. State lives as long as the process.

Concurrency:
- one re-entrant lock per project id, created lazily under a guard lock
- every mutating operation runs inside the lock of the project it targets,
  which covers that project's curve state, holdings, offers, milestones
  and proposals
- inserts (put) and whole-collection reads (snapshot) are serialized by the
  guard lock, so listings never observe a collection mid-insert
"""

import threading
import time
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from src.core.domain.errors import NotFoundError
from src.core.domain.governance import Milestone, Proposal
from src.core.domain.holding import Holding
from src.core.domain.offer import Offer
from src.core.domain.project import Project


K = TypeVar("K")
V = TypeVar("V")


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


def _short_id() -> str:
    return uuid.uuid4().hex[:8]


class TokenomicsStore:
    """In-memory collections keyed by id, plus id/clock sources and project locks."""

    def __init__(
        self,
        clock: Callable[[], int] | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        """
        Args:
            clock: returns current UTC time in ms (default: wall clock)
            id_factory: returns a fresh opaque id (default: 8 hex chars of uuid4)
        """
        self._clock = clock or _wall_clock_ms
        self._id_factory = id_factory or _short_id
        self._last_ts_ms = 0
        self._issued_ids: set[str] = set()

        self.projects: dict[str, Project] = {}
        self.holdings: dict[tuple[str, str], Holding] = {}
        self.offers: dict[str, Offer] = {}
        self.milestones: dict[str, Milestone] = {}
        self.proposals: dict[str, Proposal] = {}

        self._guard = threading.Lock()
        self._project_locks: dict[str, threading.RLock] = {}

    # -------------------------------------------------------------------------
    # Ids and timestamps
    # -------------------------------------------------------------------------

    def now_ms(self) -> int:
        """Current timestamp, never moving backward within this store."""
        with self._guard:
            self._last_ts_ms = max(self._last_ts_ms, self._clock())
            return self._last_ts_ms

    def new_id(self, taken: dict) -> str:
        """Fresh id not present in the given collection.

        Issued ids are reserved immediately, so two concurrent creators never
        receive the same id even before either has inserted its entity.
        """
        with self._guard:
            while True:
                candidate = self._id_factory()
                if candidate not in taken and candidate not in self._issued_ids:
                    self._issued_ids.add(candidate)
                    return candidate

    # -------------------------------------------------------------------------
    # Collection access
    # -------------------------------------------------------------------------

    def put(self, collection: dict[K, V], key: K, value: V) -> None:
        """Insert or replace an entry; serialized with snapshot()."""
        with self._guard:
            collection[key] = value

    def snapshot(self, collection: dict[K, V]) -> list[V]:
        """Point-in-time copy of a collection's values, in insertion order."""
        with self._guard:
            return list(collection.values())

    # -------------------------------------------------------------------------
    # Locking
    # -------------------------------------------------------------------------

    def _lock_for(self, project_id: str) -> threading.RLock:
        with self._guard:
            lock = self._project_locks.get(project_id)
            if lock is None:
                lock = threading.RLock()
                self._project_locks[project_id] = lock
            return lock

    @contextmanager
    def project_lock(self, project_id: str) -> Iterator[None]:
        """Serialize all mutations of one project."""
        lock = self._lock_for(project_id)
        with lock:
            yield

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def require_project(self, project_id: str) -> Project:
        """Project by id.

        Raises:
            NotFoundError: unknown id
        """
        project = self.projects.get(project_id)
        if project is None:
            raise NotFoundError("project", project_id)
        return project

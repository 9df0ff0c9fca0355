"""In-memory deduplication for inbound events (core domain).

Telethon can redeliver the same update after a reconnect, and a handler that
is suspended on network I/O can overlap with a second delivery of the same
message. The store answers both cases:

- handled records suppress an identity for ``window_seconds`` after it was
  marked, per namespace
- the in-flight set drops a delivery while another one is still running

Every check-and-mark pair here runs without an ``await`` in between, which is
what keeps it atomic under asyncio's cooperative scheduling. Callers running
handlers on real threads must wrap the store in a lock.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator, Optional

from core.config import DedupConfig
from core.models import EventIdentity


class DedupNamespace(str, Enum):
    """What a handled record stands for."""

    EVENT = "event"
    REPLY = "reply"
    PIC2 = "pic2"


class DedupStore:
    """Time-windowed handled records plus an in-flight set."""

    def __init__(
        self,
        config: Optional[DedupConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or DedupConfig()
        self._clock = clock
        # dicts keep insertion order, which is what eviction relies on.
        self._handled: dict[tuple[DedupNamespace, EventIdentity], float] = {}
        self._in_flight: set[EventIdentity] = set()

    def __len__(self) -> int:
        return len(self._handled)

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    def is_handled(self, identity: EventIdentity, namespace: DedupNamespace = DedupNamespace.EVENT) -> bool:
        marked_at = self._handled.get((namespace, identity))
        if marked_at is None:
            return False
        return self._clock() - marked_at < self._config.window_seconds

    def is_in_flight(self, identity: EventIdentity) -> bool:
        return identity in self._in_flight

    def should_skip(self, identity: EventIdentity) -> bool:
        return self.is_handled(identity) or identity in self._in_flight

    def begin(self, identity: EventIdentity) -> bool:
        """Mark an identity in flight; False if it is already being handled."""

        if identity in self._in_flight:
            return False
        self._in_flight.add(identity)
        return True

    def finish(self, identity: EventIdentity) -> None:
        self._in_flight.discard(identity)

    @contextmanager
    def in_flight(self, identity: EventIdentity) -> Iterator[bool]:
        acquired = self.begin(identity)
        try:
            yield acquired
        finally:
            if acquired:
                self.finish(identity)

    def mark_handled(
        self,
        identity: EventIdentity,
        namespace: DedupNamespace = DedupNamespace.EVENT,
        timestamp: Optional[float] = None,
    ) -> None:
        self._handled[(namespace, identity)] = self._clock() if timestamp is None else timestamp

    def claim(self, identity: EventIdentity, namespace: DedupNamespace) -> bool:
        """Mark a namespace record unless one is still live; True if newly claimed."""

        if self.is_handled(identity, namespace):
            return False
        self.mark_handled(identity, namespace)
        return True

    def evict_if_oversize(self) -> int:
        """Drop the oldest-inserted records once the store exceeds its bound.

        Keeps the newest ``max_entries // 2`` records. Order is insertion
        order, not last access.
        """

        if len(self._handled) <= self._config.max_entries:
            return 0
        excess = len(self._handled) - self._config.max_entries // 2
        for key in list(self._handled)[:excess]:
            del self._handled[key]
        return excess

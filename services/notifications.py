"""
In-process change notifications.

Services publish a Change after every successful write so that interested
callers (a websocket relay, a cache) can refresh. The engine's own decisions
never rely on these; they always re-read the repositories.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    LEAD_CREATED = "lead_created"
    LEAD_UPDATED = "lead_updated"
    LEAD_REASSIGNED = "lead_reassigned"
    LEAD_DELETED = "lead_deleted"
    ROSTER_CHANGED = "roster_changed"
    APPOINTMENTS_CREATED = "appointments_created"


@dataclass(frozen=True, slots=True)
class Change:
    kind: ChangeKind
    entity_id: str


Subscriber = Callable[[Change], None]


class ChangeNotifier:
    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it."""

        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, change: Change) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(change)
            except Exception:
                # A broken subscriber must not fail the write that triggered it.
                logger.exception(
                    "Change subscriber failed",
                    extra={"change_kind": change.kind.value, "entity_id": change.entity_id},
                )


__all__ = ["Change", "ChangeKind", "ChangeNotifier"]

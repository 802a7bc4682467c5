from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CalculatorState(BaseModel):
    """Latest calculator inputs, shared with anything that wants to read them."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    principal: float = 0.0
    periodicContribution: float = 24_000.0
    annualRate: float = 7.0
    years: int = 5
    updatedAt: datetime = Field(default_factory=_utcnow)

    def inputs(self) -> Dict[str, float]:
        return self.model_dump(exclude={"updatedAt"})


Subscriber = Callable[[CalculatorState], None]


class CalculatorStateStore:
    """
    Holds the current CalculatorState and tells subscribers when it changes.

    Subscribers are called synchronously, in subscription order, with the new
    state. A subscriber that raises is logged and skipped.
    """

    def __init__(self, initial: Optional[CalculatorState] = None):
        self._state = initial or CalculatorState()
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def get(self) -> CalculatorState:
        return self._state

    def update(self, **changes) -> CalculatorState:
        with self._lock:
            current = self._state.inputs()
            merged = {**current, **changes}
            if merged == current:
                return self._state
            self._state = CalculatorState(**merged)
            state = self._state
            subscribers = list(self._subscribers)

        logger.debug("calculator state changed: %s", state.inputs())
        for callback in subscribers:
            try:
                callback(state)
            except Exception:
                logger.exception("calculator state subscriber %r failed", callback)
        return state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

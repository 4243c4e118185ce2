"""Bounded history of terminal delivery outcomes."""

from collections import deque
from typing import Deque, List, Union

from .models import Outcome, OutcomeStatus


class HistoryLog:
    """Newest-first record of terminal outcomes, capped at ``capacity``."""

    DEFAULT_CAPACITY = 20

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._entries: Deque[Outcome] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def record(self, event_type: str, result: Union[OutcomeStatus, str]) -> Outcome:
        """Insert an outcome at the front, evicting the oldest when full."""
        outcome = Outcome(event_type=event_type, result=OutcomeStatus(result))
        self._entries.appendleft(outcome)
        return outcome

    def recent(self, n: int) -> List[Outcome]:
        """Return up to ``n`` most recent outcomes, newest first."""
        if n <= 0:
            return []
        return [outcome for _, outcome in zip(range(n), self._entries)]

    def count(self) -> int:
        """Number of outcomes currently held."""
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

"""In-memory delivery queue."""

from typing import List, Optional

import structlog

from .exceptions import QueueFullError
from .models import Event, ItemView, QueueItem

logger = structlog.get_logger()


class DeliveryQueue:
    """FIFO queue of events awaiting delivery.

    Items are only removed at the end of a processing pass, when the
    processor hands back the items it wants to keep. Anything enqueued
    while the pass was running stays behind them in admission order.
    """

    def __init__(self, max_length: Optional[int] = None):
        self.max_length = max_length
        self._items: List[QueueItem] = []
        self._pass_size: Optional[int] = None

    def __len__(self) -> int:
        return len(self._items)

    def enqueue(self, event: Event) -> QueueItem:
        """Append a new pending item for ``event``."""
        if self.max_length is not None and len(self._items) >= self.max_length:
            raise QueueFullError(self.max_length)

        item = QueueItem(event=event)
        self._items.append(item)
        logger.debug(
            "Event enqueued",
            event_type=event.event_type,
            item_id=item.id,
            queue_length=len(self._items),
        )
        return item

    def snapshot(self) -> List[ItemView]:
        """Return a read-only view of the queued items."""
        return [ItemView(event_type=item.event_type, attempts=item.attempts) for item in self._items]

    def begin_pass(self) -> List[QueueItem]:
        """Capture the items present at the start of a pass."""
        if self._pass_size is not None:
            raise RuntimeError("A processing pass is already in progress")
        self._pass_size = len(self._items)
        return list(self._items)

    def finish_pass(self, retained: List[QueueItem]) -> None:
        """Replace the items visited by the current pass with ``retained``."""
        if self._pass_size is None:
            raise RuntimeError("No processing pass in progress")
        arrived = self._items[self._pass_size:]
        self._items = list(retained) + arrived
        self._pass_size = None

    def clear(self) -> int:
        """Drop every queued item and return how many were discarded."""
        count = len(self._items)
        self._items = []
        self._pass_size = None
        return count

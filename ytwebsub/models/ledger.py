"""Contains the deduplication ledger of recently notified videos."""

__all__ = ["DeduplicationLedger"]

import logging
from collections import OrderedDict
from threading import Lock


class DeduplicationLedger:
    """Represents a bounded, insertion-ordered record of recently notified video IDs.

    The hub delivers at least once, so the same entry can arrive more than once.
    An ID stays in the ledger until newer IDs push it out, and while it is there
    it will not be notified again.
    """

    def __init__(self, *, capacity: int = 50) -> None:
        """Create a new DeduplicationLedger instance.

        :param capacity: The number of IDs to remember. If the ledger is full, the
            oldest ID will be removed.
        :raises ValueError: If the capacity is not positive.
        """
        if capacity <= 0:
            raise ValueError(f"Capacity must be positive, got {capacity}")

        self._logger = logging.getLogger(self.__class__.__name__)
        self._ids: OrderedDict[str, None] = OrderedDict()
        self._capacity = capacity
        self._lock = Lock()

    @property
    def capacity(self) -> int:
        """Get the capacity of the ledger.

        :return: The capacity of the ledger.
        """
        with self._lock:
            return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        if value <= 0:
            raise ValueError(f"Capacity must be positive, got {value}")

        with self._lock:
            self._logger.debug("Setting capacity to %d", value)
            self._capacity = value
            self._evict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)

    def contains(self, video_id: str) -> bool:
        """Check if a video ID is in the ledger.

        :param video_id: The video ID to check.
        :return: True if the video ID is in the ledger, False otherwise.
        """
        with self._lock:
            return video_id in self._ids

    def record(self, video_id: str) -> None:
        """Add a video ID to the ledger, evicting the oldest ID once the capacity
        is exceeded. Recording an ID that is already present does nothing.

        :param video_id: The video ID to add.
        """
        self.add(video_id)

    def add(self, video_id: str) -> bool:
        """Add a video ID to the ledger unless it is already present.

        :param video_id: The video ID to add.
        :return: True if the ID was added, False if it was already present.
        """
        with self._lock:
            if video_id in self._ids:
                return False

            self._logger.debug("Adding video (%s) to ledger", video_id)
            self._ids[video_id] = None
            self._evict()

            return True

    def clear(self) -> None:
        """Remove every ID from the ledger."""
        with self._lock:
            self._ids.clear()

    def _evict(self) -> None:
        # Caller holds the lock
        while len(self._ids) > self._capacity:
            video_id, _ = self._ids.popitem(last=False)
            self._logger.debug("Evicted video (%s) from ledger", video_id)

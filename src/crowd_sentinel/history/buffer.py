"""
Snapshot History
================

Thread-safe bounded buffer of crowd snapshots.

This module provides the SnapshotHistory class, the shared state between
successive analysis cycles of one monitored venue.

Design Rules:
    - Fixed maximum size (drops oldest on overflow, FIFO)
    - Reads return copies; callers never observe later mutation
    - Append-then-read is atomic via add_and_get()
    - Ephemeral: nothing is persisted across restarts
"""

import logging
import threading
from collections import deque
from typing import Deque, List, Optional

from crowd_sentinel.models.snapshot import CrowdSnapshot


logger = logging.getLogger(__name__)


DEFAULT_HISTORY_SIZE = 60


class SnapshotHistory:
    """
    Bounded history of crowd snapshots.

    One instance belongs to one monitored venue. Uses a drop-oldest
    policy once `maxlen` snapshots are held.

    Attributes:
        maxlen: Maximum number of snapshots kept
        evicted_count: Number of snapshots dropped due to overflow

    Example:
        history = SnapshotHistory(maxlen=60)
        history.add(snapshot)
        recent = history.get()[-5:]
    """

    def __init__(self, maxlen: int = DEFAULT_HISTORY_SIZE) -> None:
        """
        Initialize snapshot history.

        Args:
            maxlen: Maximum snapshots to keep. Must be >= 1.
        """
        if maxlen < 1:
            raise ValueError("maxlen must be >= 1")

        self._maxlen = maxlen
        self._snapshots: Deque[CrowdSnapshot] = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._evicted_count: int = 0
        self._total_added: int = 0

    @property
    def maxlen(self) -> int:
        """Maximum history size."""
        return self._maxlen

    @property
    def evicted_count(self) -> int:
        """Number of snapshots dropped due to overflow."""
        return self._evicted_count

    @property
    def total_added(self) -> int:
        """Total snapshots ever added."""
        return self._total_added

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshots)

    def add(self, snapshot: CrowdSnapshot) -> None:
        """
        Append a snapshot, evicting the oldest if full.

        Args:
            snapshot: Snapshot to append
        """
        with self._lock:
            self._append(snapshot)

    def add_and_get(self, snapshot: CrowdSnapshot) -> List[CrowdSnapshot]:
        """
        Append a snapshot and return a copy of the resulting history.

        Both steps happen under one lock acquisition so concurrent
        producers cannot interleave between them.

        Args:
            snapshot: Snapshot to append

        Returns:
            Oldest-first copy of the history including `snapshot`
        """
        with self._lock:
            self._append(snapshot)
            return list(self._snapshots)

    def get(self) -> List[CrowdSnapshot]:
        """
        Get a copy of the history.

        Returns:
            Snapshots ordered oldest first
        """
        with self._lock:
            return list(self._snapshots)

    def latest(self) -> Optional[CrowdSnapshot]:
        """Most recent snapshot, or None if empty."""
        with self._lock:
            return self._snapshots[-1] if self._snapshots else None

    def clear(self) -> int:
        """
        Remove all snapshots.

        Returns:
            Number of snapshots cleared.
        """
        with self._lock:
            cleared = len(self._snapshots)
            self._snapshots.clear()
        logger.info(f"SnapshotHistory cleared ({cleared} snapshots)")
        return cleared

    def metrics(self) -> dict:
        """
        Get history metrics for observability.

        Returns:
            Dict with size, maxlen, evicted_count, total_added
        """
        with self._lock:
            size = len(self._snapshots)
        return {
            "size": size,
            "maxlen": self._maxlen,
            "evicted_count": self._evicted_count,
            "total_added": self._total_added,
        }

    def _append(self, snapshot: CrowdSnapshot) -> None:
        # Caller holds the lock
        if len(self._snapshots) == self._maxlen:
            self._evicted_count += 1
            logger.debug(
                f"History full, evicted oldest snapshot. "
                f"Total evicted: {self._evicted_count}"
            )
        self._snapshots.append(snapshot)
        self._total_added += 1

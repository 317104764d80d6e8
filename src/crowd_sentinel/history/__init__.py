"""
History Module
==============

Bounded, time-ordered snapshot history for trend analysis.
"""

from crowd_sentinel.history.buffer import DEFAULT_HISTORY_SIZE, SnapshotHistory

__all__ = [
    "DEFAULT_HISTORY_SIZE",
    "SnapshotHistory",
]

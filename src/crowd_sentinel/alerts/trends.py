"""
Trend Metrics
=============

Rates of change over the most recent snapshots.

All rates are computed between the first and last of the last five
snapshots (fewer if the history is shorter):

    growth_rate  = (last.count - first.count) / elapsed_minutes
    density_rate = ((last.density - first.density) / first.density * 100)
                   / elapsed_minutes

Both return 0.0 for fewer than two snapshots or zero elapsed time; the
density rate also returns 0.0 when the first density is 0.
"""

from typing import Optional, Sequence, Tuple

from crowd_sentinel.models.snapshot import CrowdSnapshot


TREND_WINDOW = 5
SECONDS_PER_MINUTE = 60.0


def _window_endpoints(
    snapshots: Sequence[CrowdSnapshot],
) -> Optional[Tuple[CrowdSnapshot, CrowdSnapshot, float]]:
    """First and last snapshot of the trend window, and minutes between them."""
    recent = list(snapshots)[-TREND_WINDOW:]
    if len(recent) < 2:
        return None
    first, last = recent[0], recent[-1]
    elapsed_minutes = (last.timestamp - first.timestamp) / SECONDS_PER_MINUTE
    if elapsed_minutes == 0:
        return None
    return first, last, elapsed_minutes


def calculate_growth_rate(snapshots: Sequence[CrowdSnapshot]) -> float:
    """People per minute over the trend window."""
    window = _window_endpoints(snapshots)
    if window is None:
        return 0.0
    first, last, elapsed_minutes = window
    return (last.people_count - first.people_count) / elapsed_minutes


def calculate_density_change_rate(snapshots: Sequence[CrowdSnapshot]) -> float:
    """Percent density change per minute over the trend window."""
    window = _window_endpoints(snapshots)
    if window is None:
        return 0.0
    first, last, elapsed_minutes = window
    if first.density == 0:
        return 0.0
    percent_change = (last.density - first.density) / first.density * 100
    return percent_change / elapsed_minutes


def predict_future_count(
    snapshots: Sequence[CrowdSnapshot],
    minutes_ahead: float,
) -> float:
    """
    Linear headcount projection.

    Returns:
        max(0, current_count + growth_rate * minutes_ahead), where the
        current count is the latest snapshot's (0 for no history)
    """
    current = snapshots[-1].people_count if snapshots else 0
    return max(0.0, current + calculate_growth_rate(snapshots) * minutes_ahead)

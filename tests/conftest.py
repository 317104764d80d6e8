"""
Test Configuration
==================

Pytest fixtures and test configuration for CrowdSentinel.
"""

import numpy as np
import pytest


def make_detection(cx, cy, size=10.0, score=0.9):
    """Detection whose box is centred on (cx, cy) in pixels."""
    from crowd_sentinel.models.detection import BoundingBox, Detection

    half = size / 2
    return Detection(
        score=score,
        box=BoundingBox(xmin=cx - half, ymin=cy - half, xmax=cx + half, ymax=cy + half),
    )


def make_snapshot(minute, count, density=None, hotspots=()):
    """Snapshot at `minute` minutes after t=0."""
    from crowd_sentinel.models.snapshot import CrowdSnapshot

    return CrowdSnapshot(
        timestamp=minute * 60.0,
        people_count=count,
        density=float(count) if density is None else density,
        hotspots=tuple(hotspots),
    )


@pytest.fixture
def rng():
    """Seeded random source for deterministic clustering."""
    return np.random.default_rng(42)


@pytest.fixture
def history():
    from crowd_sentinel.history import SnapshotHistory

    return SnapshotHistory()


@pytest.fixture
def engine(history):
    from crowd_sentinel.alerts import PredictiveAlertEngine

    return PredictiveAlertEngine(history, clock=lambda: 1000.0)


@pytest.fixture
def split_detections():
    """Ten detections: 7 at the top-left, 3 at the bottom-right of 1000x1000."""
    return (
        [make_detection(100, 100) for _ in range(7)]
        + [make_detection(900, 900) for _ in range(3)]
    )

"""
Crowd Monitor Tests
===================
"""

import numpy as np
import pytest

from crowd_sentinel.alerts import AlertThresholds
from crowd_sentinel.models.alert import AlertSeverity, AlertType
from crowd_sentinel.monitor import CrowdMonitor

from conftest import make_detection


@pytest.fixture
def monitor():
    return CrowdMonitor(estimated_capacity=100, rng=np.random.default_rng(0))


class TestCrowdMonitor:
    """Tests for the per-venue processing cycle."""

    def test_live_frame_without_heatmap(self, monitor, split_detections):
        output = monitor.process_frame(split_detections, 1000, 1000, use_heatmap=False)

        assert output.people_count == 10
        assert output.density == pytest.approx(0.1)
        assert output.hotspot_count == 0
        assert output.alerts == []
        assert output.zone_counts == {"Critical Zone 1": 7, "Dense Zone 2": 3}
        assert len(monitor.history) == 1
        assert monitor.last_output == output

    def test_static_frame_with_heatmap(self, monitor, split_detections):
        output = monitor.process_frame(split_detections, 1000, 1000)

        # 13 cells around the 7-person group, 1 cell for the 3-person group
        assert output.hotspot_count == 14
        assert [a.type for a in output.alerts] == [AlertType.HIGH_CONCENTRATION]
        assert output.alerts[0].severity == AlertSeverity.CRITICAL
        assert output.has_critical

    def test_repeat_alerts_are_deduplicated(self, monitor, split_detections):
        monitor.process_frame(split_detections, 1000, 1000)
        second = monitor.process_frame(split_detections, 1000, 1000)

        assert second.alerts == []
        assert len(monitor.feed.all()) == 1
        assert monitor.frames_processed == 2

    def test_growth_across_frames(self):
        monitor = CrowdMonitor(
            estimated_capacity=1000,
            thresholds=AlertThresholds(rapid_growth_rate=5),
            rng=np.random.default_rng(0),
        )
        for minute, count in enumerate([10, 15, 20, 25, 35]):
            detections = [make_detection(50 + 10 * i, 50) for i in range(count)]
            output = monitor.process_frame(
                detections, 1000, 1000, use_heatmap=False, timestamp=minute * 60.0
            )

        assert AlertType.RAPID_GROWTH in [a.type for a in output.alerts]

    def test_replayed_frames_use_snapshot_time(self, monitor):
        detections = [make_detection(50 + 10 * i, 50 + 10 * (i % 3)) for i in range(90)]
        outputs = [
            monitor.process_frame(detections, 1000, 1000, use_heatmap=False, timestamp=t)
            for t in (0.0, 120.0)
        ]

        for output, t in zip(outputs, (0.0, 120.0)):
            alert = next(a for a in output.alerts if a.type == AlertType.CAPACITY_WARNING)
            assert alert.timestamp == t
        assert len(monitor.feed.all()) == 2

    def test_empty_frame(self, monitor):
        output = monitor.process_frame([], 640, 480)
        assert output.people_count == 0
        assert output.zones == []
        assert output.alerts == []

    def test_reset(self, monitor, split_detections):
        monitor.process_frame(split_detections, 1000, 1000)
        monitor.reset()

        assert monitor.history.get() == []
        assert monitor.feed.all() == []
        assert monitor.last_output is None

    def test_metrics(self, monitor, split_detections):
        monitor.process_frame(split_detections, 1000, 1000)
        metrics = monitor.get_metrics()
        assert metrics["frames_processed"] == 1
        assert metrics["active_alerts"] == 1
        assert metrics["history"]["size"] == 1

    def test_invalid_max_zones(self):
        with pytest.raises(ValueError):
            CrowdMonitor(max_zones=0)

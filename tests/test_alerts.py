"""
Predictive Alert Engine Tests
=============================
"""

import pytest

from crowd_sentinel.alerts import AlertThresholds, PredictiveAlertEngine
from crowd_sentinel.alerts.engine import round_half_up
from crowd_sentinel.history import SnapshotHistory
from crowd_sentinel.models.alert import AlertSeverity, AlertType
from crowd_sentinel.models.snapshot import Hotspot

from conftest import make_snapshot


def _by_type(alerts, alert_type):
    matches = [a for a in alerts if a.type == alert_type]
    return matches[0] if matches else None


def _seed(history, points):
    for minute, count in points:
        history.add(make_snapshot(minute, count))


class TestThresholds:
    """Tests for the thresholds options structure."""

    def test_defaults(self):
        thresholds = AlertThresholds()
        assert thresholds.density_surge_rate == 15
        assert thresholds.rapid_growth_rate == 10
        assert thresholds.high_density_threshold == 0.7
        assert thresholds.capacity_warning_percent == 80
        assert thresholds.prediction_window_minutes == 6

    def test_merge_is_field_by_field(self):
        merged = AlertThresholds().merged(rapid_growth_rate=3)
        assert merged.rapid_growth_rate == 3
        assert merged.density_surge_rate == 15

    def test_unknown_override(self):
        with pytest.raises(ValueError):
            AlertThresholds().merged(bogus=1)

    def test_non_positive_rejected(self):
        with pytest.raises(ValueError):
            AlertThresholds(prediction_window_minutes=0)


class TestEngineBasics:
    """Tests for engine bookkeeping."""

    def test_appends_snapshot_to_history(self, engine, history):
        engine.analyze(make_snapshot(0, 5))
        assert len(history) == 1

    def test_quiet_scene_has_no_alerts(self, engine):
        assert engine.analyze(make_snapshot(0, 5)) == []

    def test_alert_ids_are_unique(self):
        history = SnapshotHistory()
        engine = PredictiveAlertEngine(history)
        ids = set()
        for _ in range(20):
            alerts = engine.analyze(make_snapshot(0, 99), estimated_capacity=100)
            ids.update(a.id for a in alerts)
        assert len(ids) == 20

    def test_timestamp_from_clock(self, engine):
        alerts = engine.analyze(make_snapshot(0, 90), estimated_capacity=100)
        assert alerts[0].timestamp == 1000.0
        assert engine.alerts_generated == 1

    def test_explicit_timestamp_overrides_clock(self, engine):
        alerts = engine.analyze(make_snapshot(2, 90), estimated_capacity=100, now=120.0)
        assert alerts[0].timestamp == 120.0

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(6.5) == 7
        assert round_half_up(37.5) == 38
        assert round_half_up(2.4999) == 2
        assert round_half_up(-0.5) == 0


class TestRapidGrowth:
    """Tests for the rapid growth rule."""

    def test_warning_below_double_threshold(self, engine, history):
        _seed(history, [(0, 10), (1, 15), (2, 20), (3, 25)])
        alerts = engine.analyze(make_snapshot(4, 35), thresholds={"rapid_growth_rate": 5})

        alert = _by_type(alerts, AlertType.RAPID_GROWTH)
        assert alert.severity == AlertSeverity.WARNING
        assert alert.message == "Crowd increasing at 6 people/minute"
        assert alert.prediction.endswith("in 6 minutes")
        assert alert.time_to_impact == 6

    def test_critical_at_double_threshold(self, engine, history):
        _seed(history, [(0, 10), (1, 15), (2, 20), (3, 25)])
        alerts = engine.analyze(make_snapshot(4, 35), thresholds={"rapid_growth_rate": 3})
        assert _by_type(alerts, AlertType.RAPID_GROWTH).severity == AlertSeverity.CRITICAL

    def test_not_fired_under_default_threshold(self, engine, history):
        _seed(history, [(0, 10), (1, 15), (2, 20), (3, 25)])
        alerts = engine.analyze(make_snapshot(4, 35))
        assert _by_type(alerts, AlertType.RAPID_GROWTH) is None

    def test_projection(self, engine, history):
        _seed(history, [(0, 10)])
        alerts = engine.analyze(make_snapshot(1, 30, density=1.0))
        alert = _by_type(alerts, AlertType.RAPID_GROWTH)
        # 30 + 20/min * 6 min
        assert alert.prediction == "Expected 150 people in 6 minutes"
        assert alert.severity == AlertSeverity.CRITICAL

    def test_half_rate_rounds_up_in_message(self, engine, history):
        history.add(make_snapshot(0, 10))
        alerts = engine.analyze(make_snapshot(2, 23), thresholds={"rapid_growth_rate": 5})

        alert = _by_type(alerts, AlertType.RAPID_GROWTH)
        assert alert.message == "Crowd increasing at 7 people/minute"
        # 23 + 6.5/min * 6 min
        assert alert.prediction == "Expected 62 people in 6 minutes"


class TestDensitySurge:
    """Tests for the density surge rule."""

    def test_warning(self, engine, history):
        history.add(make_snapshot(0, 10, density=1.0))
        alerts = engine.analyze(make_snapshot(1, 10, density=1.2))

        alert = _by_type(alerts, AlertType.DENSITY_SURGE)
        assert alert.severity == AlertSeverity.WARNING
        assert alert.message == "Density increasing 20% per minute"
        assert alert.time_to_impact == 5

    def test_critical_with_floor_on_impact(self, engine, history):
        history.add(make_snapshot(0, 10, density=1.0))
        alerts = engine.analyze(make_snapshot(1, 10, density=2.0))

        alert = _by_type(alerts, AlertType.DENSITY_SURGE)
        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.time_to_impact == 1

    def test_half_ratio_rounds_up(self, engine, history):
        history.add(make_snapshot(0, 10, density=1.0))
        alerts = engine.analyze(make_snapshot(1, 10, density=1.375))

        alert = _by_type(alerts, AlertType.DENSITY_SURGE)
        # 37.5% per minute is 2.5x the surge rate
        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.message == "Density increasing 38% per minute"
        assert alert.time_to_impact == 3

    def test_zero_initial_density(self, engine, history):
        history.add(make_snapshot(0, 0, density=0.0))
        alerts = engine.analyze(make_snapshot(1, 5, density=1.0))
        assert _by_type(alerts, AlertType.DENSITY_SURGE) is None


class TestHighConcentration:
    """Tests for the hotspot concentration rule."""

    def test_critical_cluster(self, engine):
        hotspots = [
            Hotspot(100, 100, 0.5),
            Hotspot(150, 100, 0.95),
            Hotspot(600, 600, 0.75),
        ]
        alerts = engine.analyze(make_snapshot(0, 5, hotspots=hotspots))

        alert = _by_type(alerts, AlertType.HIGH_CONCENTRATION)
        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.message == "2 high-density zones detected"
        assert alert.time_to_impact == 5
        assert (alert.zone.x, alert.zone.y, alert.zone.radius) == (125.0, 100.0, 50.0)

    def test_warning_cluster(self, engine):
        alerts = engine.analyze(make_snapshot(0, 5, hotspots=[Hotspot(10, 10, 0.8)]))
        alert = _by_type(alerts, AlertType.HIGH_CONCENTRATION)
        assert alert.severity == AlertSeverity.WARNING
        assert alert.message == "1 high-density zone detected"

    def test_below_threshold(self, engine):
        alerts = engine.analyze(make_snapshot(0, 5, hotspots=[Hotspot(10, 10, 0.6)]))
        assert _by_type(alerts, AlertType.HIGH_CONCENTRATION) is None


class TestCapacity:
    """Tests for the capacity warning rule."""

    def test_exhaustion_projection(self, engine, history):
        history.add(make_snapshot(0, 70))
        alerts = engine.analyze(make_snapshot(3, 85), estimated_capacity=100)

        alert = _by_type(alerts, AlertType.CAPACITY_WARNING)
        assert alert.severity == AlertSeverity.WARNING
        assert "85% capacity (85/100)" in alert.message
        assert alert.prediction == "Will exceed capacity in approximately 3 minutes"
        assert alert.time_to_impact == pytest.approx(3.0)

    def test_fractional_exhaustion_time(self, engine, history):
        history.add(make_snapshot(0, 76))
        alerts = engine.analyze(make_snapshot(2, 84), estimated_capacity=100)
        # 4 people/minute, 16 to go
        assert _by_type(alerts, AlertType.CAPACITY_WARNING).time_to_impact == pytest.approx(4.0)

        history.clear()
        history.add(make_snapshot(0, 78))
        alerts = engine.analyze(make_snapshot(2, 84), estimated_capacity=100)
        assert _by_type(alerts, AlertType.CAPACITY_WARNING).time_to_impact == pytest.approx(16 / 3)

    def test_flat_growth_projects_percentage(self, engine):
        alerts = engine.analyze(make_snapshot(0, 90), estimated_capacity=100)

        alert = _by_type(alerts, AlertType.CAPACITY_WARNING)
        assert alert.prediction == "Projected 90% in 6 minutes"
        assert alert.time_to_impact == 6

    def test_critical_near_full(self, engine):
        alerts = engine.analyze(make_snapshot(0, 96), estimated_capacity=100)
        assert _by_type(alerts, AlertType.CAPACITY_WARNING).severity == AlertSeverity.CRITICAL

    def test_over_capacity_clamps_to_now(self, engine, history):
        history.add(make_snapshot(0, 100))
        alerts = engine.analyze(make_snapshot(1, 110), estimated_capacity=100)
        assert _by_type(alerts, AlertType.CAPACITY_WARNING).time_to_impact == 0

    def test_large_capacity_formatting(self, engine):
        alerts = engine.analyze(make_snapshot(0, 900_000), estimated_capacity=1_000_000.0)
        alert = _by_type(alerts, AlertType.CAPACITY_WARNING)
        assert alert.message == "Currently at 90% capacity (900000/1000000)"

    def test_zero_capacity_is_ignored(self, engine):
        alerts = engine.analyze(make_snapshot(0, 50), estimated_capacity=0)
        assert _by_type(alerts, AlertType.CAPACITY_WARNING) is None


class TestBottleneck:
    """Tests for the bottleneck rule."""

    def test_aligned_clusters(self, engine):
        hotspots = [Hotspot(0, 50, 0.5), Hotspot(100, 52, 0.5), Hotspot(200, 48, 0.5)]
        alerts = engine.analyze(make_snapshot(0, 5, hotspots=hotspots))

        alert = _by_type(alerts, AlertType.BOTTLENECK)
        assert alert.severity == AlertSeverity.WARNING
        assert alert.time_to_impact == 6

    def test_scattered_clusters(self, engine):
        hotspots = [Hotspot(0, 0, 0.5), Hotspot(100, 500, 0.5), Hotspot(200, 1000, 0.5)]
        alerts = engine.analyze(make_snapshot(0, 5, hotspots=hotspots))
        assert _by_type(alerts, AlertType.BOTTLENECK) is None

    def test_needs_three_clusters(self, engine):
        hotspots = [Hotspot(0, 50, 0.5), Hotspot(300, 50, 0.5)]
        alerts = engine.analyze(make_snapshot(0, 5, hotspots=hotspots))
        assert _by_type(alerts, AlertType.BOTTLENECK) is None


class TestCombined:
    """Several rules can fire in one call."""

    def test_all_rules_fire(self, engine, history):
        history.add(make_snapshot(0, 40, density=1.0))
        hotspots = [Hotspot(0, 50, 0.95), Hotspot(150, 52, 0.5), Hotspot(300, 48, 0.5)]
        alerts = engine.analyze(
            make_snapshot(1, 90, density=3.0, hotspots=hotspots),
            estimated_capacity=100,
        )
        assert [a.type for a in alerts] == [
            AlertType.RAPID_GROWTH,
            AlertType.DENSITY_SURGE,
            AlertType.HIGH_CONCENTRATION,
            AlertType.CAPACITY_WARNING,
            AlertType.BOTTLENECK,
        ]

"""
Predictive Alert Engine
=======================

Derives typed alerts from the snapshot history and the current snapshot.

Each call to analyze() appends the current snapshot to the history, then
runs five independent rules. Any number of them may fire in one call:

    1. rapid_growth:       growth_rate >= rapid_growth_rate
    2. density_surge:      density_rate >= density_surge_rate
    3. high_concentration: a hotspot cluster with intensity
                           >= high_density_threshold
    4. capacity_warning:   count / capacity * 100 >= capacity_warning_percent
    5. bottleneck:         >= 3 hotspot clusters whose y-coordinates are
                           aligned (population variance < 1000)

Rules 1, 2 and 4 escalate to critical at 2x their threshold (rule 4 at
95% of capacity); rule 3 at a top intensity of 0.9; rule 5 is always a
warning.

The engine performs no I/O and raises nothing for degenerate input:
empty histories, zero elapsed time and zero capacity all short-circuit
to "no alert".
"""

import logging
import math
import time
import uuid
from typing import Callable, List, Mapping, Optional, Sequence, Union

from crowd_sentinel.alerts.hotspots import (
    HotspotCluster,
    find_hotspot_clusters,
    y_alignment_variance,
)
from crowd_sentinel.alerts.thresholds import AlertThresholds
from crowd_sentinel.alerts.trends import (
    calculate_density_change_rate,
    calculate_growth_rate,
    predict_future_count,
)
from crowd_sentinel.history.buffer import SnapshotHistory
from crowd_sentinel.models.alert import AlertSeverity, AlertType, AlertZone, CrowdAlert
from crowd_sentinel.models.snapshot import CrowdSnapshot


logger = logging.getLogger(__name__)


DEFAULT_CAPACITY = 100.0
CRITICAL_INTENSITY = 0.9
CRITICAL_CAPACITY_PERCENT = 95.0
CONCENTRATION_IMPACT_MINUTES = 5.0
BOTTLENECK_IMPACT_MINUTES = 6.0
BOTTLENECK_MIN_CLUSTERS = 3
BOTTLENECK_MAX_Y_VARIANCE = 1000.0
ALERT_ZONE_RADIUS = 50.0

ThresholdOverrides = Union[AlertThresholds, Mapping[str, float], None]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def _new_alert_id(alert_type: AlertType) -> str:
    return f"{alert_type.value}-{uuid.uuid4().hex}"


class PredictiveAlertEngine:
    """
    Rule-based predictive alerting over a snapshot history.

    Attributes:
        history: Snapshot history this engine appends to and reads
        thresholds: Default thresholds, overridable per call

    Example:
        engine = PredictiveAlertEngine(SnapshotHistory())

        for snapshot in snapshots:
            for alert in engine.analyze(snapshot, estimated_capacity=200):
                print(alert.severity.value, alert.message)
    """

    def __init__(
        self,
        history: SnapshotHistory,
        thresholds: Optional[AlertThresholds] = None,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[AlertType], str] = _new_alert_id,
    ) -> None:
        """
        Initialize the alert engine.

        Args:
            history: Snapshot history owned by the caller
            thresholds: Default thresholds (library defaults if None)
            clock: Source of alert creation timestamps
            id_factory: Builds a unique id for a new alert
        """
        self.history = history
        self.thresholds = thresholds or AlertThresholds()
        self._clock = clock
        self._id_factory = id_factory
        self._alerts_generated: int = 0

        logger.info(
            f"PredictiveAlertEngine initialized: "
            f"growth={self.thresholds.rapid_growth_rate}/min, "
            f"surge={self.thresholds.density_surge_rate}%/min, "
            f"window={self.thresholds.prediction_window_minutes}min"
        )

    @property
    def alerts_generated(self) -> int:
        """Total alerts produced by this engine."""
        return self._alerts_generated

    def resolve_thresholds(self, overrides: ThresholdOverrides = None) -> AlertThresholds:
        """Merge per-call overrides onto the engine defaults."""
        if overrides is None:
            return self.thresholds
        if isinstance(overrides, AlertThresholds):
            return overrides
        return self.thresholds.merged(**dict(overrides))

    def analyze(
        self,
        current_snapshot: CrowdSnapshot,
        estimated_capacity: float = DEFAULT_CAPACITY,
        thresholds: ThresholdOverrides = None,
        now: Optional[float] = None,
    ) -> List[CrowdAlert]:
        """
        Record a snapshot and evaluate every alert rule.

        The snapshot is appended to the history before analysis, so each
        snapshot must be submitted exactly once.

        Args:
            current_snapshot: Snapshot for this cycle
            estimated_capacity: Venue capacity (people)
            thresholds: Full thresholds or a partial override mapping
            now: Alert creation time (defaults to the engine clock); pass
                the snapshot time when replaying recorded frames

        Returns:
            Alerts fired this cycle, in rule order
        """
        config = self.resolve_thresholds(thresholds)
        created_at = now if now is not None else self._clock()
        history = self.history.add_and_get(current_snapshot)

        growth_rate = calculate_growth_rate(history)
        clusters = find_hotspot_clusters(current_snapshot.hotspots)

        alerts: List[CrowdAlert] = []
        for alert in (
            self._check_rapid_growth(history, growth_rate, config, created_at),
            self._check_density_surge(history, config, created_at),
            self._check_concentration(clusters, config, created_at),
            self._check_capacity(
                history, current_snapshot, growth_rate, estimated_capacity, config,
                created_at,
            ),
            self._check_bottleneck(clusters, created_at),
        ):
            if alert is not None:
                alerts.append(alert)

        self._alerts_generated += len(alerts)
        for alert in alerts:
            logger.info(
                f"Alert {alert.type.value} [{alert.severity.value}]: "
                f"{alert.message} (impact in {alert.time_to_impact:.1f}min)"
            )
        return alerts

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _check_rapid_growth(
        self,
        history: Sequence[CrowdSnapshot],
        growth_rate: float,
        config: AlertThresholds,
        created_at: float,
    ) -> Optional[CrowdAlert]:
        if growth_rate < config.rapid_growth_rate:
            return None

        window = config.prediction_window_minutes
        predicted = predict_future_count(history, window)
        return self._build(
            AlertType.RAPID_GROWTH,
            severity=self._escalate(growth_rate, config.rapid_growth_rate),
            title="Rapid Crowd Growth Detected",
            message=f"Crowd increasing at {round_half_up(growth_rate)} people/minute",
            prediction=f"Expected {round_half_up(predicted)} people in {window:g} minutes",
            time_to_impact=window,
            created_at=created_at,
        )

    def _check_density_surge(
        self,
        history: Sequence[CrowdSnapshot],
        config: AlertThresholds,
        created_at: float,
    ) -> Optional[CrowdAlert]:
        change_rate = calculate_density_change_rate(history)
        if change_rate < config.density_surge_rate:
            return None

        minutes = max(
            1.0,
            config.prediction_window_minutes
            - round_half_up(change_rate / config.density_surge_rate),
        )
        return self._build(
            AlertType.DENSITY_SURGE,
            severity=self._escalate(change_rate, config.density_surge_rate),
            title="Density Surge Alert",
            message=f"Density increasing {round_half_up(change_rate)}% per minute",
            prediction=f"Dangerous density levels expected in {minutes:g} minutes",
            time_to_impact=minutes,
            created_at=created_at,
        )

    def _check_concentration(
        self,
        clusters: Sequence[HotspotCluster],
        config: AlertThresholds,
        created_at: float,
    ) -> Optional[CrowdAlert]:
        dangerous = [c for c in clusters if c.intensity >= config.high_density_threshold]
        if not dangerous:
            return None

        top = dangerous[0]
        plural = "s" if len(dangerous) > 1 else ""
        return self._build(
            AlertType.HIGH_CONCENTRATION,
            severity=(
                AlertSeverity.CRITICAL
                if top.intensity >= CRITICAL_INTENSITY
                else AlertSeverity.WARNING
            ),
            title="High Crowd Concentration",
            message=f"{len(dangerous)} high-density zone{plural} detected",
            prediction="Risk of crowd crush if concentration continues",
            time_to_impact=CONCENTRATION_IMPACT_MINUTES,
            zone=AlertZone(x=top.x, y=top.y, radius=ALERT_ZONE_RADIUS),
            created_at=created_at,
        )

    def _check_capacity(
        self,
        history: Sequence[CrowdSnapshot],
        snapshot: CrowdSnapshot,
        growth_rate: float,
        capacity: float,
        config: AlertThresholds,
        created_at: float,
    ) -> Optional[CrowdAlert]:
        if capacity <= 0:
            return None

        count = snapshot.people_count
        capacity_percent = count / capacity * 100
        if capacity_percent < config.capacity_warning_percent:
            return None

        window = config.prediction_window_minutes
        predicted_percent = predict_future_count(history, window) / capacity * 100
        # Already over capacity means exhaustion is now
        minutes_to_full = (
            max(0.0, (capacity - count) / growth_rate) if growth_rate > 0 else None
        )

        if predicted_percent > 100 and minutes_to_full is not None:
            prediction = (
                f"Will exceed capacity in approximately "
                f"{round_half_up(minutes_to_full)} minutes"
            )
        else:
            prediction = f"Projected {round_half_up(predicted_percent)}% in {window:g} minutes"

        return self._build(
            AlertType.CAPACITY_WARNING,
            severity=(
                AlertSeverity.CRITICAL
                if capacity_percent >= CRITICAL_CAPACITY_PERCENT
                else AlertSeverity.WARNING
            ),
            title="Venue Capacity Warning",
            message=(
                f"Currently at {round_half_up(capacity_percent)}% capacity "
                f"({count}/{capacity:.15g})"
            ),
            prediction=prediction,
            time_to_impact=minutes_to_full if minutes_to_full is not None else window,
            created_at=created_at,
        )

    def _check_bottleneck(
        self,
        clusters: Sequence[HotspotCluster],
        created_at: float,
    ) -> Optional[CrowdAlert]:
        if len(clusters) < BOTTLENECK_MIN_CLUSTERS:
            return None
        if y_alignment_variance(clusters) >= BOTTLENECK_MAX_Y_VARIANCE:
            return None

        return self._build(
            AlertType.BOTTLENECK,
            severity=AlertSeverity.WARNING,
            title="Potential Bottleneck Detected",
            message="Linear crowd formation detected - possible exit/entry congestion",
            prediction="Flow restriction may cause backup in 5-7 minutes",
            time_to_impact=BOTTLENECK_IMPACT_MINUTES,
            created_at=created_at,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _escalate(value: float, threshold: float) -> AlertSeverity:
        return AlertSeverity.CRITICAL if value >= threshold * 2 else AlertSeverity.WARNING

    def _build(
        self,
        alert_type: AlertType,
        severity: AlertSeverity,
        title: str,
        message: str,
        prediction: str,
        time_to_impact: float,
        created_at: float,
        zone: Optional[AlertZone] = None,
    ) -> CrowdAlert:
        return CrowdAlert(
            id=self._id_factory(alert_type),
            type=alert_type,
            severity=severity,
            title=title,
            message=message,
            prediction=prediction,
            time_to_impact=time_to_impact,
            timestamp=created_at,
            zone=zone,
        )

    def get_metrics(self) -> dict:
        """Get engine metrics for observability."""
        return {
            "alerts_generated": self._alerts_generated,
            "history": self.history.metrics(),
            "thresholds": self.thresholds.to_dict(),
        }

"""
Crowd Monitor
=============

One monitored venue: snapshot history, alert engine, alert feed and
zone clustering, driven one detection batch at a time.

Processing cycle:
    detections -> (heatmap) -> snapshot -> alerts -> feed
               -> zones

A monitor owns its history. Separate venues use separate monitors.
Calls to process_frame() from one monitor are expected to come from a
single stream of detection cycles.
"""

import logging
from typing import Mapping, Optional, Sequence

import numpy as np

from crowd_sentinel.alerts import AlertFeed, AlertThresholds, PredictiveAlertEngine
from crowd_sentinel.history import DEFAULT_HISTORY_SIZE, SnapshotHistory
from crowd_sentinel.models.detection import Detection
from crowd_sentinel.models.output import MonitorOutput
from crowd_sentinel.signals import (
    DEFAULT_GRID_SIZE,
    generate_heatmap_data,
    generate_snapshot_from_detections,
)
from crowd_sentinel.zones import DEFAULT_MAX_ZONES, auto_detect_zones


logger = logging.getLogger(__name__)


class CrowdMonitor:
    """
    Per-venue crowd monitoring session.

    Attributes:
        estimated_capacity: Venue capacity (people)
        max_zones: Upper bound on zones per frame
        history: Snapshot history for this venue
        engine: Predictive alert engine
        feed: UI-facing alert list

    Example:
        monitor = CrowdMonitor(estimated_capacity=120)
        output = monitor.process_frame(detections, 1280, 720, use_heatmap=False)
        print(output.people_count, [z.name for z in output.zones])
    """

    def __init__(
        self,
        estimated_capacity: float = 100.0,
        thresholds: Optional[AlertThresholds] = None,
        max_zones: int = DEFAULT_MAX_ZONES,
        history_size: int = DEFAULT_HISTORY_SIZE,
        dedupe_seconds: float = 30.0,
        heatmap_grid_size: int = DEFAULT_GRID_SIZE,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """
        Initialize the monitor.

        Args:
            estimated_capacity: Venue capacity (people)
            thresholds: Alert thresholds (defaults if None)
            max_zones: Upper bound on zones per frame
            history_size: Snapshots kept for trend analysis
            dedupe_seconds: Per-type alert dedupe window
            heatmap_grid_size: Heatmap cell size (pixels)
            rng: Random source for zone clustering
        """
        if max_zones < 1:
            raise ValueError("max_zones must be >= 1")

        self.estimated_capacity = estimated_capacity
        self.max_zones = max_zones
        self.heatmap_grid_size = heatmap_grid_size
        self.history = SnapshotHistory(maxlen=history_size)
        self.engine = PredictiveAlertEngine(self.history, thresholds=thresholds)
        self.feed = AlertFeed(dedupe_seconds=dedupe_seconds)
        self._rng = rng if rng is not None else np.random.default_rng()
        self._frames_processed: int = 0
        self._last_output: Optional[MonitorOutput] = None

        logger.info(
            f"CrowdMonitor initialized: capacity={estimated_capacity}, "
            f"max_zones={max_zones}, history={history_size}"
        )

    @property
    def frames_processed(self) -> int:
        return self._frames_processed

    @property
    def last_output(self) -> Optional[MonitorOutput]:
        """Output of the most recent cycle, if any."""
        return self._last_output

    def process_frame(
        self,
        detections: Sequence[Detection],
        image_width: float,
        image_height: float,
        use_heatmap: bool = True,
        timestamp: Optional[float] = None,
        thresholds: Optional[Mapping[str, float]] = None,
    ) -> MonitorOutput:
        """
        Run one analysis cycle.

        Args:
            detections: Person detections for the frame
            image_width: Image width (pixels)
            image_height: Image height (pixels)
            use_heatmap: Derive hotspots from a detection heatmap
            timestamp: Snapshot time (defaults to now)
            thresholds: Per-call threshold overrides

        Returns:
            MonitorOutput with the alerts accepted into the feed
        """
        heatmap = None
        if use_heatmap:
            heatmap = generate_heatmap_data(
                detections, image_width, image_height, grid_size=self.heatmap_grid_size
            )

        snapshot = generate_snapshot_from_detections(
            len(detections), heatmap, image_width, image_height, timestamp=timestamp
        )
        alerts = self.engine.analyze(
            snapshot,
            estimated_capacity=self.estimated_capacity,
            thresholds=thresholds,
            now=timestamp,
        )
        accepted = self.feed.merge(alerts, now=timestamp)

        zones = auto_detect_zones(
            detections, image_width, image_height,
            max_zones=self.max_zones, rng=self._rng,
        )

        self._frames_processed += 1
        output = MonitorOutput(
            timestamp=snapshot.timestamp,
            people_count=snapshot.people_count,
            density=snapshot.density,
            hotspot_count=len(snapshot.hotspots),
            alerts=accepted,
            zones=zones,
            zone_counts={z.name: z.detection_count for z in zones},
        )
        self._last_output = output
        return output

    def reset(self) -> None:
        """Clear history, alerts and the last output."""
        self.history.clear()
        self.feed.clear()
        self._last_output = None
        logger.info("CrowdMonitor reset")

    def get_metrics(self) -> dict:
        """Get monitor metrics for observability."""
        return {
            "frames_processed": self._frames_processed,
            "estimated_capacity": self.estimated_capacity,
            "active_alerts": len(self.feed.active()),
            "suppressed_alerts": self.feed.suppressed_count,
            **self.engine.get_metrics(),
        }

"""
Output Models
=============

Contracts for the analysis service.

Request:
    {
        "detections": [{"score": 0.9, "box": {...}}, ...],
        "image_width": 1280,
        "image_height": 720,
        "use_heatmap": true
    }

Response (MonitorOutput):
    {
        "timestamp": 1770500938.284,
        "people_count": 42,
        "density": 0.4557,
        "alerts": [...],
        "zones": [...],
        "zone_counts": {"Critical Zone 1": 30, "Dense Zone 2": 12}
    }

Only NEW alerts (those that passed feed deduplication) are included in
the response; the full alert list is served separately.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from crowd_sentinel.models.alert import AlertSeverity, CrowdAlert
from crowd_sentinel.models.detection import Detection
from crowd_sentinel.models.zone import Zone


class AnalyzeRequest(BaseModel):
    """
    One detection batch submitted for analysis.

    Attributes:
        detections: Person detections for the frame
        image_width: Source image width (pixels)
        image_height: Source image height (pixels)
        use_heatmap: Derive hotspots from a detection heatmap
    """

    detections: List[Detection] = Field(default_factory=list)
    image_width: float = Field(..., gt=0, description="Image width (pixels)")
    image_height: float = Field(..., gt=0, description="Image height (pixels)")
    use_heatmap: bool = Field(
        default=True,
        description="Build hotspots from a heatmap (static analysis); "
        "live frames usually skip this",
    )


class MonitorOutput(BaseModel):
    """
    Result of one analysis cycle.

    Attributes:
        timestamp: Snapshot time (epoch seconds)
        people_count: People in the frame
        density: People per 100x100 pixel unit
        hotspot_count: Hotspots in the snapshot
        alerts: Alerts accepted into the feed this cycle
        zones: Density zones for the frame
        zone_counts: Zone name -> member count
    """

    timestamp: float
    people_count: int = Field(..., ge=0)
    density: float = Field(..., ge=0.0)
    hotspot_count: int = Field(default=0, ge=0)
    alerts: List[CrowdAlert] = Field(default_factory=list)
    zones: List[Zone] = Field(default_factory=list)
    zone_counts: Dict[str, int] = Field(default_factory=dict)

    @property
    def has_critical(self) -> bool:
        """True if any new alert is critical."""
        return any(a.severity == AlertSeverity.CRITICAL for a in self.alerts)

"""
Zone Models
===========

Results of clustering detections into density zones.

Zones are recomputed from scratch on every detection batch; there is no
zone identity across frames. All coordinates are NORMALIZED to [0, 1].

Density buckets (share of all detections in the batch):
    share < 15%  -> low
    share < 30%  -> medium
    share < 50%  -> high
    otherwise    -> critical
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ZoneDensity(str, Enum):
    """
    Density classification of a zone.

    Attributes:
        LOW: Fewer than 15% of detections
        MEDIUM: 15% to under 30%
        HIGH: 30% to under 50%
        CRITICAL: 50% or more
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def label(self) -> str:
        """Display label used in zone names."""
        return _DENSITY_LABELS[self]


_DENSITY_LABELS = {
    ZoneDensity.LOW: "Sparse",
    ZoneDensity.MEDIUM: "Moderate",
    ZoneDensity.HIGH: "Dense",
    ZoneDensity.CRITICAL: "Critical",
}


class ZoneCentroid(BaseModel):
    """Zone centre in normalized image coordinates."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="Normalized horizontal position")
    y: float = Field(..., description="Normalized vertical position")


class ZoneBounds(BaseModel):
    """
    Padded bounding rectangle of a zone, clamped to [0, 1].

    Attributes:
        xmin, ymin, xmax, ymax: Normalized rectangle edges
    """

    model_config = ConfigDict(frozen=True)

    xmin: float = Field(..., ge=0.0, le=1.0)
    ymin: float = Field(..., ge=0.0, le=1.0)
    xmax: float = Field(..., ge=0.0, le=1.0)
    ymax: float = Field(..., ge=0.0, le=1.0)

    def contains(self, x: float, y: float) -> bool:
        """Check if a normalized point lies within the bounds (inclusive)."""
        return self.xmin <= x <= self.xmax and self.ymin <= y <= self.ymax


class Zone(BaseModel):
    """
    A spatial cluster of detections with a density classification.

    Attributes:
        id: Zone identifier ("zone_<rank>")
        name: Display name, e.g. "Dense Zone 2"
        centroid: Cluster centre (normalized)
        bounds: Padded member bounding rectangle (normalized)
        detection_count: Number of member detections
        density: Density bucket from the member share
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Zone identifier")
    name: str = Field(..., description="Human-readable zone name")
    centroid: ZoneCentroid
    bounds: ZoneBounds
    detection_count: int = Field(..., ge=1, description="Member detections")
    density: ZoneDensity

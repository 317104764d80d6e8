"""
Snapshot Models
===============

Point-in-time crowd observations.

A CrowdSnapshot is created once per analysis cycle and never mutated.
Snapshots are appended to a bounded SnapshotHistory which feeds the
predictive alert engine.

Units:
    - timestamp: seconds since the epoch
    - density: people per 100x100 pixel unit
    - hotspot x/y: pixels, intensity: normalized [0, 1]
"""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Hotspot:
    """
    Heatmap-derived point of elevated crowd intensity.

    Attributes:
        x: Horizontal position (pixels)
        y: Vertical position (pixels)
        intensity: Normalized intensity in [0, 1]
    """

    x: float
    y: float
    intensity: float

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not 0.0 <= self.intensity <= 1.0:
            raise ValueError("intensity must be in [0, 1]")


@dataclass(frozen=True, slots=True)
class CrowdSnapshot:
    """
    One timestamped crowd observation.

    Attributes:
        timestamp: Observation time (epoch seconds)
        people_count: Number of people observed
        density: People per 100x100 pixel unit
        hotspots: Heatmap hotspots above the intensity cut-off
    """

    timestamp: float
    people_count: int
    density: float
    hotspots: Tuple[Hotspot, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.people_count < 0:
            raise ValueError("people_count must be non-negative")
        if self.density < 0:
            raise ValueError("density must be non-negative")

    def __repr__(self) -> str:
        return (
            f"CrowdSnapshot(count={self.people_count}, "
            f"density={self.density:.3f}, "
            f"hotspots={len(self.hotspots)}, "
            f"t={self.timestamp:.2f})"
        )

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "timestamp": round(self.timestamp, 3),
            "people_count": self.people_count,
            "density": round(self.density, 4),
            "hotspots": [
                {"x": h.x, "y": h.y, "intensity": round(h.intensity, 4)}
                for h in self.hotspots
            ],
        }

"""
Signals Module
==============

Turns raw detections into crowd signals: density heatmaps and snapshots.
"""

from crowd_sentinel.signals.heatmap import DEFAULT_GRID_SIZE, generate_heatmap_data
from crowd_sentinel.signals.snapshot_builder import (
    HOTSPOT_INTENSITY_CUTOFF,
    compute_density,
    extract_hotspots,
    generate_snapshot_from_detections,
)

__all__ = [
    "DEFAULT_GRID_SIZE",
    "generate_heatmap_data",
    "HOTSPOT_INTENSITY_CUTOFF",
    "compute_density",
    "extract_hotspots",
    "generate_snapshot_from_detections",
]

"""
Snapshot Builder
================

Constructs a CrowdSnapshot from one detection cycle.

Computes:
    - density = people_count / (image_area / 10_000)
      i.e. people per 100x100 pixel unit; 0 when the area is 0
    - hotspots = heatmap cells whose value, normalized against the
      grid maximum, exceeds 0.3, placed at the cell centre
"""

import logging
import time
from typing import List, Optional, Sequence, Union

import numpy as np

from crowd_sentinel.models.snapshot import CrowdSnapshot, Hotspot


logger = logging.getLogger(__name__)


HOTSPOT_INTENSITY_CUTOFF = 0.3
DENSITY_UNIT_AREA = 10_000.0

HeatmapLike = Union[np.ndarray, Sequence[Sequence[float]]]


def compute_density(people_count: int, image_width: float, image_height: float) -> float:
    """People per 100x100 pixel unit, 0.0 for an empty image area."""
    area = image_width * image_height
    if area <= 0:
        return 0.0
    return people_count / (area / DENSITY_UNIT_AREA)


def extract_hotspots(
    heatmap: HeatmapLike,
    image_width: float,
    image_height: float,
    cutoff: float = HOTSPOT_INTENSITY_CUTOFF,
) -> List[Hotspot]:
    """
    Extract hotspots from a 2-D heatmap grid.

    Args:
        heatmap: Non-negative grid (rows x cols)
        image_width: Image width the grid spans (pixels)
        image_height: Image height the grid spans (pixels)
        cutoff: Keep cells with normalized intensity strictly above this

    Returns:
        Hotspots in row-major order
    """
    grid = np.asarray(heatmap, dtype=float)
    if grid.ndim != 2 or grid.size == 0:
        return []

    max_value = float(grid.max())
    if max_value <= 0:
        return []

    rows, cols = grid.shape
    cell_width = image_width / cols
    cell_height = image_height / rows
    intensities = grid / max_value

    hotspots = []
    for row, col in zip(*np.nonzero(intensities > cutoff)):
        hotspots.append(
            Hotspot(
                x=float(col * cell_width + cell_width / 2),
                y=float(row * cell_height + cell_height / 2),
                intensity=float(intensities[row, col]),
            )
        )
    return hotspots


def generate_snapshot_from_detections(
    people_count: int,
    heatmap: Optional[HeatmapLike],
    image_width: float,
    image_height: float,
    timestamp: Optional[float] = None,
) -> CrowdSnapshot:
    """
    Build a snapshot for one analysis cycle.

    Args:
        people_count: Number of people detected
        heatmap: Optional density grid; no hotspots when None
        image_width: Image width in pixels
        image_height: Image height in pixels
        timestamp: Observation time (defaults to time.time())

    Returns:
        CrowdSnapshot for this cycle
    """
    if timestamp is None:
        timestamp = time.time()

    hotspots: List[Hotspot] = []
    if heatmap is not None:
        hotspots = extract_hotspots(heatmap, image_width, image_height)

    snapshot = CrowdSnapshot(
        timestamp=timestamp,
        people_count=people_count,
        density=compute_density(people_count, image_width, image_height),
        hotspots=tuple(hotspots),
    )
    logger.debug(f"Built {snapshot!r}")
    return snapshot

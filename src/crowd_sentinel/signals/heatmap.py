"""
Detection Heatmap
=================

Rasterizes person detections onto a coarse density grid.

Each detection centre deposits a 5x5 kernel around its grid cell:

    weight = max(0, 1 - d / 3)

where d is the Euclidean distance in cells from the centre cell. Kernel
cells falling outside the grid are dropped.
"""

import math
from typing import Sequence

import numpy as np

from crowd_sentinel.models.detection import Detection


DEFAULT_GRID_SIZE = 20

_KERNEL_RADIUS = 2
_offsets = np.arange(-_KERNEL_RADIUS, _KERNEL_RADIUS + 1)
_dy, _dx = np.meshgrid(_offsets, _offsets, indexing="ij")
_KERNEL = np.maximum(0.0, 1.0 - np.sqrt(_dx ** 2 + _dy ** 2) / 3.0)


def generate_heatmap_data(
    detections: Sequence[Detection],
    image_width: float,
    image_height: float,
    grid_size: int = DEFAULT_GRID_SIZE,
) -> np.ndarray:
    """
    Build a density grid from detections.

    Args:
        detections: Person detections (pixel coordinates)
        image_width: Image width in pixels
        image_height: Image height in pixels
        grid_size: Cell edge length in pixels

    Returns:
        Array of shape (ceil(h / grid), ceil(w / grid)); empty (0, 0)
        when either dimension is non-positive
    """
    if grid_size <= 0:
        raise ValueError("grid_size must be positive")

    cols = math.ceil(image_width / grid_size) if image_width > 0 else 0
    rows = math.ceil(image_height / grid_size) if image_height > 0 else 0
    grid = np.zeros((rows, cols), dtype=float)
    if rows == 0 or cols == 0:
        return grid

    for detection in detections:
        cx, cy = detection.box.center
        col = math.floor(cx / grid_size)
        row = math.floor(cy / grid_size)

        # Clip the kernel window to the grid
        r0, r1 = row - _KERNEL_RADIUS, row + _KERNEL_RADIUS + 1
        c0, c1 = col - _KERNEL_RADIUS, col + _KERNEL_RADIUS + 1
        gr0, gr1 = max(r0, 0), min(r1, rows)
        gc0, gc1 = max(c0, 0), min(c1, cols)
        if gr0 >= gr1 or gc0 >= gc1:
            continue

        grid[gr0:gr1, gc0:gc1] += _KERNEL[gr0 - r0:gr1 - r0, gc0 - c0:gc1 - c0]

    return grid

"""
Zone Clustering
===============

K-means grouping of detection centres into density zones.

Pipeline:
    1. Project each detection's box centre into [0, 1] x [0, 1]
    2. k = min(max_zones, max(1, ceil(n / 3)))
    3. K-means (random seeding from the points, <= 20 iterations,
       early stop when no point changes cluster)
    4. Per cluster: padded bounds, density bucket, name
    5. Zones sorted by descending member count

Seeding is random, so cluster membership is not reproducible unless a
seeded numpy Generator is passed in. Zones are descriptive groupings,
not an exact partition of the scene.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from crowd_sentinel.models.detection import Detection
from crowd_sentinel.models.zone import Zone, ZoneBounds, ZoneCentroid, ZoneDensity


logger = logging.getLogger(__name__)


DEFAULT_MAX_ZONES = 5
MAX_ITERATIONS = 20
DETECTIONS_PER_ZONE = 3
BOUNDS_PADDING = 0.08


@dataclass(frozen=True, slots=True)
class Cluster:
    """
    One k-means cluster.

    Attributes:
        centroid: Cluster centre, shape (2,)
        points: Member points, shape (m, 2)
    """

    centroid: np.ndarray
    points: np.ndarray

    @property
    def size(self) -> int:
        return int(self.points.shape[0])


def kmeans_clustering(
    points: np.ndarray,
    k: int,
    max_iterations: int = MAX_ITERATIONS,
    rng: Optional[np.random.Generator] = None,
) -> List[Cluster]:
    """
    Cluster 2-D points with Lloyd's k-means.

    Centroids are seeded from a random sample of the distinct points
    (all of them when there are at most k distinct points). Each point
    goes to the nearest centroid (Euclidean; ties go to the lower index).
    Iteration stops early when no assignment changes. Empty clusters
    keep their previous centroid and are dropped from the result;
    returned centroids are the mean of their final members.

    Args:
        points: Array of shape (n, 2)
        k: Number of clusters requested
        max_iterations: Upper bound on assignment rounds
        rng: Random source for seeding (defaults to a fresh Generator)

    Returns:
        Non-empty clusters, in centroid index order. When n <= k every
        point is returned as its own singleton cluster.
    """
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    n = points.shape[0]
    if n == 0 or k < 1:
        return []
    if n <= k:
        return [Cluster(centroid=p.copy(), points=p.reshape(1, 2)) for p in points]

    if rng is None:
        rng = np.random.default_rng()

    # Seed from distinct points; coincident detections must not share a centroid
    candidates = np.unique(points, axis=0)
    if len(candidates) > k:
        candidates = candidates[rng.permutation(len(candidates))[:k]]
    centroids = candidates.copy()
    k = len(centroids)
    assignments = np.zeros(n, dtype=int)
    iterations = 0

    for _ in range(max_iterations):
        iterations += 1
        # (n, k) distance matrix
        distances = np.linalg.norm(points[:, None, :] - centroids[None, :, :], axis=2)
        nearest = np.argmin(distances, axis=1)

        changed = bool(np.any(nearest != assignments))
        assignments = nearest
        if not changed:
            break

        for j in range(k):
            members = points[assignments == j]
            if len(members) > 0:
                centroids[j] = members.mean(axis=0)

    logger.debug(f"k-means finished: n={n}, k={k}, iterations={iterations}")

    clusters = []
    for j in range(k):
        members = points[assignments == j]
        if len(members) > 0:
            clusters.append(Cluster(centroid=members.mean(axis=0), points=members))
    return clusters


def classify_density(count: int, total: int) -> ZoneDensity:
    """
    Density bucket from a zone's share of all detections.

    Args:
        count: Detections in the zone
        total: Detections in the batch

    Returns:
        low (<15%), medium (<30%), high (<50%) or critical
    """
    percentage = (count / total) * 100 if total > 0 else 0.0
    if percentage < 15:
        return ZoneDensity.LOW
    if percentage < 30:
        return ZoneDensity.MEDIUM
    if percentage < 50:
        return ZoneDensity.HIGH
    return ZoneDensity.CRITICAL


def _padded_bounds(members: np.ndarray, padding: float = BOUNDS_PADDING) -> ZoneBounds:
    lo = np.clip(members.min(axis=0) - padding, 0.0, 1.0)
    hi = np.clip(members.max(axis=0) + padding, 0.0, 1.0)
    return ZoneBounds(
        xmin=float(lo[0]),
        ymin=float(lo[1]),
        xmax=float(hi[0]),
        ymax=float(hi[1]),
    )


def auto_detect_zones(
    detections: Sequence[Detection],
    image_width: float,
    image_height: float,
    max_zones: int = DEFAULT_MAX_ZONES,
    rng: Optional[np.random.Generator] = None,
) -> List[Zone]:
    """
    Cluster detections into named density zones.

    Args:
        detections: Person detections (pixel coordinates)
        image_width: Image width in pixels
        image_height: Image height in pixels
        max_zones: Upper bound on the number of zones
        rng: Random source for k-means seeding

    Returns:
        Zones sorted by descending detection count; empty for no input
    """
    if not detections:
        return []
    if max_zones < 1:
        raise ValueError("max_zones must be >= 1")

    points = np.array(
        [d.normalized_center(image_width, image_height) for d in detections],
        dtype=float,
    )
    total = len(detections)
    k = min(max_zones, max(1, math.ceil(total / DETECTIONS_PER_ZONE)))

    clusters = kmeans_clustering(points, k, rng=rng)
    # Stable sort keeps centroid order among equal-sized clusters
    clusters.sort(key=lambda c: c.size, reverse=True)

    zones = []
    for rank, cluster in enumerate(clusters):
        density = classify_density(cluster.size, total)
        zones.append(
            Zone(
                id=f"zone_{rank}",
                name=f"{density.label} Zone {rank + 1}",
                centroid=ZoneCentroid(
                    x=float(cluster.centroid[0]),
                    y=float(cluster.centroid[1]),
                ),
                bounds=_padded_bounds(cluster.points),
                detection_count=cluster.size,
                density=density,
            )
        )

    logger.debug(f"Detected {len(zones)} zones from {total} detections (k={k})")
    return zones


def get_detections_in_zone(
    detections: Sequence[Detection],
    zone: Zone,
    image_width: float,
    image_height: float,
) -> List[Detection]:
    """
    Detections whose normalized centre lies inside a zone's bounds.

    Zone bounds are padded, so a detection may fall in more than one zone.
    """
    return [
        d for d in detections
        if zone.bounds.contains(*d.normalized_center(image_width, image_height))
    ]

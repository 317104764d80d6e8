"""
Hotspot Clustering
==================

Greedy single-pass agglomeration of heatmap hotspots.

For each not-yet-clustered hotspot, in input order, every later
unclustered hotspot within MERGE_DISTANCE of the cluster's running
centroid is merged into it:

    centroid <- (centroid * count + point) / (count + 1)
    intensity <- max(intensity, point.intensity)

The centroid moves as points merge, so later comparisons use the
updated position. Clusters are returned by descending intensity.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from crowd_sentinel.models.snapshot import Hotspot


MERGE_DISTANCE = 100.0


@dataclass
class HotspotCluster:
    """
    Merged group of hotspots.

    Attributes:
        x: Running centroid x (pixels)
        y: Running centroid y (pixels)
        intensity: Max member intensity
        count: Number of merged hotspots
    """

    x: float
    y: float
    intensity: float
    count: int = 1

    def absorb(self, hotspot: Hotspot) -> None:
        self.x = (self.x * self.count + hotspot.x) / (self.count + 1)
        self.y = (self.y * self.count + hotspot.y) / (self.count + 1)
        self.intensity = max(self.intensity, hotspot.intensity)
        self.count += 1


def find_hotspot_clusters(
    hotspots: Sequence[Hotspot],
    merge_distance: float = MERGE_DISTANCE,
) -> List[HotspotCluster]:
    """
    Cluster hotspots greedily.

    Args:
        hotspots: Hotspots of one snapshot
        merge_distance: Merge points strictly closer than this (pixels)

    Returns:
        Clusters sorted by intensity, highest first
    """
    clusters: List[HotspotCluster] = []
    visited = [False] * len(hotspots)

    for i, seed in enumerate(hotspots):
        if visited[i]:
            continue
        visited[i] = True
        cluster = HotspotCluster(x=seed.x, y=seed.y, intensity=seed.intensity)

        for j in range(i + 1, len(hotspots)):
            if visited[j]:
                continue
            other = hotspots[j]
            if math.hypot(other.x - cluster.x, other.y - cluster.y) < merge_distance:
                cluster.absorb(other)
                visited[j] = True

        clusters.append(cluster)

    clusters.sort(key=lambda c: c.intensity, reverse=True)
    return clusters


def y_alignment_variance(clusters: Sequence[HotspotCluster]) -> float:
    """Population variance of cluster y-coordinates (0.0 when empty)."""
    if not clusters:
        return 0.0
    ordered = sorted(clusters, key=lambda c: c.x)
    mean_y = sum(c.y for c in ordered) / len(ordered)
    return sum((c.y - mean_y) ** 2 for c in ordered) / len(ordered)

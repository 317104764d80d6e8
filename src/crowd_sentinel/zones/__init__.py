"""
Zones Module
============

Groups detections into named density zones via k-means clustering.
"""

from crowd_sentinel.zones.clustering import (
    Cluster,
    DEFAULT_MAX_ZONES,
    auto_detect_zones,
    classify_density,
    get_detections_in_zone,
    kmeans_clustering,
)

__all__ = [
    "Cluster",
    "DEFAULT_MAX_ZONES",
    "auto_detect_zones",
    "classify_density",
    "get_detections_in_zone",
    "kmeans_clustering",
]

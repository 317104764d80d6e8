"""
Data Models
===========

Typed data for the CrowdSentinel pipeline.

This module re-exports all data models for convenient access.

Models:
    Input:
        - BoundingBox, Detection: One observed person from a detector

    Snapshot:
        - Hotspot: Heatmap-derived point of elevated intensity
        - CrowdSnapshot: One timestamped crowd observation

    Zone:
        - ZoneDensity: Density bucket (low, medium, high, critical)
        - Zone: Clustered group of detections

    Alert:
        - AlertType, AlertSeverity: Alert classification
        - CrowdAlert: Predictive warning with time-to-impact

    Output:
        - AnalyzeRequest: Body of the analysis endpoint
        - MonitorOutput: Result of one analysis cycle
"""

from crowd_sentinel.models.detection import BoundingBox, Detection
from crowd_sentinel.models.snapshot import CrowdSnapshot, Hotspot
from crowd_sentinel.models.zone import Zone, ZoneBounds, ZoneCentroid, ZoneDensity
from crowd_sentinel.models.alert import AlertSeverity, AlertType, AlertZone, CrowdAlert
from crowd_sentinel.models.output import AnalyzeRequest, MonitorOutput

__all__ = [
    # Input
    "BoundingBox",
    "Detection",
    # Snapshot
    "Hotspot",
    "CrowdSnapshot",
    # Zone
    "ZoneDensity",
    "ZoneBounds",
    "ZoneCentroid",
    "Zone",
    # Alert
    "AlertType",
    "AlertSeverity",
    "AlertZone",
    "CrowdAlert",
    # Output
    "AnalyzeRequest",
    "MonitorOutput",
]

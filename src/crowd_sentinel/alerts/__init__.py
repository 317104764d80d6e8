"""
Alerts Module
=============

Predictive crowd alerting.

This module provides:
    - AlertThresholds: Tunable rule thresholds
    - PredictiveAlertEngine: Derives alerts from the snapshot history
    - AlertFeed: UI-facing alert list with dedupe and dismissal

DESIGN RULES:
    - No I/O, no exceptions for degenerate input
    - History is injected, never module-global
"""

from crowd_sentinel.alerts.thresholds import AlertThresholds
from crowd_sentinel.alerts.engine import PredictiveAlertEngine
from crowd_sentinel.alerts.feed import AlertFeed
from crowd_sentinel.alerts.hotspots import HotspotCluster, find_hotspot_clusters
from crowd_sentinel.alerts.trends import (
    calculate_density_change_rate,
    calculate_growth_rate,
    predict_future_count,
)


__all__ = [
    "AlertThresholds",
    "PredictiveAlertEngine",
    "AlertFeed",
    "HotspotCluster",
    "find_hotspot_clusters",
    "calculate_density_change_rate",
    "calculate_growth_rate",
    "predict_future_count",
]

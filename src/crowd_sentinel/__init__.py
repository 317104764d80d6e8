"""
CrowdSentinel
=============

Predictive crowd alerting and zone clustering for person-detection feeds.

This package turns per-frame person detections into crowd snapshots,
keeps a bounded history of them, derives predictive alerts from the
recent trend, and groups detections into named density zones.

Components:
    - models: Detection, snapshot, zone and alert types
    - history: Bounded snapshot history buffer
    - signals: Heatmap generation and snapshot construction
    - zones: K-means zone clustering
    - alerts: Predictive alert engine and UI-facing alert feed
    - monitor: Per-venue session tying the above together

Example:
    from crowd_sentinel.monitor import CrowdMonitor

    monitor = CrowdMonitor(estimated_capacity=150)
    output = monitor.process_frame(detections, image_width=1280, image_height=720)
    for alert in output.alerts:
        print(alert.severity.value, alert.title)
"""

__version__ = "0.1.0"
__author__ = "CrowdSentinel Project"

__all__ = [
    "__version__",
]

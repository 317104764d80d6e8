"""
CrowdSentinel Main Application
==============================

FastAPI entry point for the crowd monitoring service.

A single CrowdMonitor (one venue) is created at startup from settings.
Detection batches are posted by an external detector; the service
answers with the snapshot summary, new alerts and density zones.

Endpoints:
    GET    /                        - Service information
    GET    /health                  - Liveness probe
    POST   /analyze                 - Analyze one detection batch
    GET    /output                  - Most recent analysis output
    GET    /alerts                  - Alert feed (active by default)
    POST   /alerts/{alert_id}/dismiss - Dismiss one alert
    POST   /alerts/dismiss-all      - Dismiss every alert
    GET    /history                 - Snapshot history
    DELETE /history                 - Reset history and alerts
    GET    /metrics                 - Monitor metrics
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from crowd_sentinel.config import settings
from crowd_sentinel.models.output import AnalyzeRequest
from crowd_sentinel.monitor import CrowdMonitor


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

_monitor: Optional[CrowdMonitor] = None
_startup_time: float = 0.0


def get_monitor() -> Optional[CrowdMonitor]:
    return _monitor


def create_monitor() -> CrowdMonitor:
    """Create the venue monitor from settings."""
    return CrowdMonitor(
        estimated_capacity=settings.monitor.estimated_capacity,
        thresholds=settings.thresholds.to_thresholds(),
        max_zones=settings.monitor.max_zones,
        history_size=settings.monitor.history_size,
        dedupe_seconds=settings.monitor.alert_dedupe_seconds,
        heatmap_grid_size=settings.monitor.heatmap_grid_size,
    )


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    global _monitor, _startup_time

    _startup_time = time.time()
    logger.info(f"Starting {settings.service.name} {settings.service.version}")

    _monitor = create_monitor()

    yield

    logger.info("Shutting down")
    _monitor = None


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="CrowdSentinel",
    description="Predictive crowd alerting and zone density analysis",
    version=settings.service.version,
    lifespan=lifespan,
)


def _not_ready() -> JSONResponse:
    return JSONResponse({"error": "Monitor not initialized"}, status_code=503)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "CrowdSentinel",
        "version": settings.service.version,
        "name": settings.service.name,
        "status": "running",
        "estimated_capacity": settings.monitor.estimated_capacity,
    })


@app.get("/health")
async def health() -> JSONResponse:
    """Liveness probe - always 200 while the process is running."""
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.post("/analyze")
async def analyze(request: AnalyzeRequest) -> JSONResponse:
    """Analyze one detection batch."""
    monitor = get_monitor()
    if monitor is None:
        return _not_ready()

    output = monitor.process_frame(
        request.detections,
        request.image_width,
        request.image_height,
        use_heatmap=request.use_heatmap,
    )

    return JSONResponse(output.model_dump(mode="json"))


@app.get("/output")
async def output() -> JSONResponse:
    """Most recent analysis output."""
    monitor = get_monitor()
    if monitor is None:
        return _not_ready()

    last = monitor.last_output
    if last is None:
        return JSONResponse({"error": "No output available yet"}, status_code=503)
    return JSONResponse(last.model_dump(mode="json"))


@app.get("/alerts")
async def alerts(include_dismissed: bool = False) -> JSONResponse:
    """Alert feed, oldest first."""
    monitor = get_monitor()
    if monitor is None:
        return _not_ready()

    items = monitor.feed.all() if include_dismissed else monitor.feed.active()
    return JSONResponse({
        "count": len(items),
        "has_active_critical": monitor.feed.has_active_critical(),
        "alerts": [a.model_dump(mode="json") for a in items],
    })


@app.post("/alerts/dismiss-all")
async def dismiss_all() -> JSONResponse:
    """Dismiss every alert."""
    monitor = get_monitor()
    if monitor is None:
        return _not_ready()

    return JSONResponse({"dismissed": monitor.feed.dismiss_all()})


@app.post("/alerts/{alert_id}/dismiss")
async def dismiss(alert_id: str) -> JSONResponse:
    """Dismiss one alert."""
    monitor = get_monitor()
    if monitor is None:
        return _not_ready()

    if not monitor.feed.dismiss(alert_id):
        return JSONResponse({"error": f"Unknown alert: {alert_id}"}, status_code=404)
    return JSONResponse({"dismissed": alert_id})


@app.get("/history")
async def history() -> JSONResponse:
    """Snapshot history, oldest first."""
    monitor = get_monitor()
    if monitor is None:
        return _not_ready()

    return JSONResponse({
        "snapshots": [s.to_dict() for s in monitor.history.get()],
        **monitor.history.metrics(),
    })


@app.delete("/history")
async def reset_history() -> JSONResponse:
    """Reset the monitor session."""
    monitor = get_monitor()
    if monitor is None:
        return _not_ready()

    monitor.reset()
    return JSONResponse({"status": "reset"})


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Detailed metrics for observability."""
    monitor = get_monitor()
    monitor_metrics = monitor.get_metrics() if monitor else {}

    return JSONResponse({
        "uptime_seconds": round(time.time() - _startup_time, 1),
        **monitor_metrics,
    })


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    # PORT overrides the configured port
    port = int(os.environ.get("PORT", settings.server.port))

    uvicorn.run(
        "crowd_sentinel.main:app",
        host=settings.server.host,
        port=port,
        reload=False,
    )

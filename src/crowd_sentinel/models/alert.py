"""
Alert Models
============

Predictive crowd warnings derived from the snapshot history.

Alerts are immutable once created. The only state change is dismissal,
performed by the consumer through AlertFeed, which replaces the alert with
a copy carrying dismissed=True.

Alert Types:
    - density_surge: Density rising faster than the surge rate
    - rapid_growth: Headcount rising faster than the growth rate
    - high_concentration: Hotspot cluster above the intensity threshold
    - capacity_warning: Headcount near the venue capacity
    - bottleneck: Hotspot clusters aligned in a line
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AlertType(str, Enum):
    """Kind of predictive alert."""

    DENSITY_SURGE = "density_surge"
    RAPID_GROWTH = "rapid_growth"
    HIGH_CONCENTRATION = "high_concentration"
    CAPACITY_WARNING = "capacity_warning"
    BOTTLENECK = "bottleneck"


class AlertSeverity(str, Enum):
    """
    Alert severity, ordered from least to most severe.

    Attributes:
        INFO: Informational only
        WARNING: Monitoring required
        CRITICAL: Intervention recommended
    """

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertZone(BaseModel):
    """Location an alert refers to (pixels)."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    radius: float = Field(default=50.0, gt=0)


class CrowdAlert(BaseModel):
    """
    A derived, severity-ranked predictive warning.

    Attributes:
        id: Unique alert identifier
        type: Alert kind
        severity: info, warning or critical
        title: Short headline
        message: What was observed
        prediction: What is expected to happen
        time_to_impact: Estimated minutes until impact
        timestamp: Creation time (epoch seconds)
        zone: Optional location reference
        dismissed: Set by the consumer via AlertFeed
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique alert identifier")
    type: AlertType
    severity: AlertSeverity
    title: str
    message: str
    prediction: str
    time_to_impact: float = Field(
        ...,
        ge=0.0,
        description="Estimated minutes until impact",
    )
    timestamp: float = Field(..., description="Creation time (epoch seconds)")
    zone: Optional[AlertZone] = None
    dismissed: bool = False

    def dismiss(self) -> "CrowdAlert":
        """Return a dismissed copy of this alert."""
        return self.model_copy(update={"dismissed": True})

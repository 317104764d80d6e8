"""
Alert Thresholds
================

Options structure for the predictive alert engine.

Overrides are merged field by field onto the defaults; fields not named
in an override keep their current value.
"""

from dataclasses import asdict, dataclass, fields, replace


@dataclass(frozen=True)
class AlertThresholds:
    """
    Thresholds for alert generation.

    Attributes:
        density_surge_rate: Density increase (% per minute) that triggers
            a density_surge alert
        rapid_growth_rate: Headcount increase (people per minute) that
            triggers a rapid_growth alert
        high_density_threshold: Hotspot intensity considered dangerous
        capacity_warning_percent: Share of capacity (%) that triggers a
            capacity_warning alert
        prediction_window_minutes: How far ahead projections look
    """

    density_surge_rate: float = 15.0
    rapid_growth_rate: float = 10.0
    high_density_threshold: float = 0.7
    capacity_warning_percent: float = 80.0
    prediction_window_minutes: float = 6.0

    def __post_init__(self) -> None:
        """Validate invariants."""
        for f in fields(self):
            if getattr(self, f.name) <= 0:
                raise ValueError(f"{f.name} must be positive")

    def merged(self, **overrides: float) -> "AlertThresholds":
        """
        Copy with the named fields replaced.

        Raises:
            ValueError: On an unknown field name or a non-positive value
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown threshold(s): {', '.join(sorted(unknown))}")
        return replace(self, **overrides)

    def to_dict(self) -> dict:
        return asdict(self)

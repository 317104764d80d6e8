"""
CrowdSentinel Configuration
===========================

This module handles configuration loading for the crowd monitoring service.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    CROWD_ESTIMATED_CAPACITY       -> monitor.estimated_capacity
    CROWD_MAX_ZONES                -> monitor.max_zones
    CROWD_HISTORY_SIZE             -> monitor.history_size
    CROWD_RAPID_GROWTH_RATE        -> thresholds.rapid_growth_rate
    CROWD_DENSITY_SURGE_RATE       -> thresholds.density_surge_rate
    CROWD_CAPACITY_WARNING_PERCENT -> thresholds.capacity_warning_percent
    CROWD_PREDICTION_WINDOW        -> thresholds.prediction_window_minutes
    CROWD_SERVER_PORT              -> server.port
    CROWD_LOG_LEVEL                -> logging.level
    PORT                           -> server.port (platform-assigned)

Example:
    from crowd_sentinel.config import settings

    print(settings.monitor.estimated_capacity)
    print(settings.thresholds.rapid_growth_rate)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from crowd_sentinel.alerts.thresholds import AlertThresholds


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class ServiceConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="crowd-sentinel", description="Service name")
    version: str = Field(default="v0.1.0", description="API version")


class MonitorConfig(BaseModel):
    """Venue monitoring configuration."""

    estimated_capacity: float = Field(
        default=100.0,
        gt=0,
        description="Estimated venue capacity (people)",
    )
    max_zones: int = Field(
        default=5,
        ge=1,
        description="Upper bound on density zones per frame",
    )
    history_size: int = Field(
        default=60,
        ge=2,
        description="Snapshots kept for trend analysis",
    )
    alert_dedupe_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Window in which repeat alerts of one type are skipped",
    )
    heatmap_grid_size: int = Field(
        default=20,
        ge=1,
        description="Heatmap cell size in pixels",
    )


class ThresholdsConfig(BaseModel):
    """Predictive alert thresholds, defaulting to the engine defaults."""

    density_surge_rate: float = Field(default=AlertThresholds.density_surge_rate, gt=0)
    rapid_growth_rate: float = Field(default=AlertThresholds.rapid_growth_rate, gt=0)
    high_density_threshold: float = Field(
        default=AlertThresholds.high_density_threshold, gt=0, le=1.0
    )
    capacity_warning_percent: float = Field(
        default=AlertThresholds.capacity_warning_percent, gt=0
    )
    prediction_window_minutes: float = Field(
        default=AlertThresholds.prediction_window_minutes, gt=0
    )

    def to_thresholds(self) -> AlertThresholds:
        return AlertThresholds(**self.model_dump())


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8002, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for CrowdSentinel.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    monitor: MonitorConfig = Field(default_factory=MonitorConfig)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Monitor settings
    if env_cap := os.environ.get("CROWD_ESTIMATED_CAPACITY"):
        config_data.setdefault("monitor", {})["estimated_capacity"] = float(env_cap)
    if env_zones := os.environ.get("CROWD_MAX_ZONES"):
        config_data.setdefault("monitor", {})["max_zones"] = int(env_zones)
    if env_hist := os.environ.get("CROWD_HISTORY_SIZE"):
        config_data.setdefault("monitor", {})["history_size"] = int(env_hist)

    # Threshold overrides
    if env_growth := os.environ.get("CROWD_RAPID_GROWTH_RATE"):
        config_data.setdefault("thresholds", {})["rapid_growth_rate"] = float(env_growth)
    if env_surge := os.environ.get("CROWD_DENSITY_SURGE_RATE"):
        config_data.setdefault("thresholds", {})["density_surge_rate"] = float(env_surge)
    if env_cw := os.environ.get("CROWD_CAPACITY_WARNING_PERCENT"):
        config_data.setdefault("thresholds", {})["capacity_warning_percent"] = float(env_cw)
    if env_window := os.environ.get("CROWD_PREDICTION_WINDOW"):
        config_data.setdefault("thresholds", {})["prediction_window_minutes"] = float(env_window)

    # Server settings (PORT takes precedence over CROWD_SERVER_PORT)
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("CROWD_SERVER_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Logging settings
    if env_log := os.environ.get("CROWD_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)

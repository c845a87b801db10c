"""
Configuration module for launchkit.

Exports the main components for convenient imports.
"""

from .loader import ConfigError, ensure_tracker_config, load_settings, load_tracker_config
from .presets import SAMPLE_TRACKER_CONFIG
from .schema import (
    AppSettings,
    CostsSettings,
    LoggingConfig,
    ManualPricing,
    Optimization,
    Project,
    Provider,
    SnippetsSettings,
    Threshold,
    TrackerConfig,
    Usage,
    WebPricing,
)

__all__ = [
    "load_settings",
    "load_tracker_config",
    "ensure_tracker_config",
    "ConfigError",
    "SAMPLE_TRACKER_CONFIG",
    "AppSettings",
    "CostsSettings",
    "LoggingConfig",
    "SnippetsSettings",
    "TrackerConfig",
    "Provider",
    "ManualPricing",
    "WebPricing",
    "Optimization",
    "Project",
    "Usage",
    "Threshold",
]

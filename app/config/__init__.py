"""
Configuration package for the Landmark Bangladesh client.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    LandmarkApiSettings,
    ImageSettings,
    LocationSettings,
    MapSettings,
    SandboxSettings,
    settings,
    get_settings,
    reload_settings,
)
from .loader import ConfigLoader, load_config_for_environment

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "LandmarkApiSettings",
    "ImageSettings",
    "LocationSettings",
    "MapSettings",
    "SandboxSettings",
    "settings",
    "get_settings",
    "reload_settings",
    "ConfigLoader",
    "load_config_for_environment",
]

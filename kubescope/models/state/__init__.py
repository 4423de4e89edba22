"""Settings and configuration state."""

from kubescope.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
)
from kubescope.models.state.config_manager import ConfigManager

__all__ = ["AppSettings", "ConfigError", "ConfigLoadError", "ConfigManager"]

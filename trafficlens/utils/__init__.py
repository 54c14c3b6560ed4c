# ==============================================================================
# Utilities
# ==============================================================================
"""
Configuration, retry and network-profile helpers.
"""

from trafficlens.utils.config import Settings, get_settings
from trafficlens.utils.network import (
    NetworkProfile,
    RequestConfig,
    get_refresh_interval,
    get_request_config,
    parse_range,
    window_for,
)

__all__ = [
    "NetworkProfile",
    "RequestConfig",
    "Settings",
    "get_refresh_interval",
    "get_request_config",
    "get_settings",
    "parse_range",
    "window_for",
]

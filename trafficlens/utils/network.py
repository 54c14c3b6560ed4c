# ==============================================================================
# Network Profiles
# ==============================================================================
"""
Network-aware request configuration.

The dashboard reports the client's connection class. Slower connections
get a shorter query window (smaller payloads), longer request timeouts and a
slower refresh cadence.
"""

import re
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum


class NetworkProfile(str, Enum):
    """Client connection classes."""

    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"
    OFFLINE = "offline"


@dataclass(frozen=True)
class RequestConfig:
    """Upstream request settings for one network profile."""

    timeout_seconds: float
    retries: int
    max_window_days: int
    refresh_interval_seconds: int


_REQUEST_CONFIGS: dict[NetworkProfile, RequestConfig] = {
    NetworkProfile.FAST: RequestConfig(
        timeout_seconds=10, retries=2, max_window_days=90, refresh_interval_seconds=60
    ),
    NetworkProfile.MEDIUM: RequestConfig(
        timeout_seconds=15, retries=3, max_window_days=90, refresh_interval_seconds=120
    ),
    NetworkProfile.SLOW: RequestConfig(
        timeout_seconds=30, retries=4, max_window_days=14, refresh_interval_seconds=300
    ),
    NetworkProfile.OFFLINE: RequestConfig(
        timeout_seconds=5, retries=1, max_window_days=7, refresh_interval_seconds=600
    ),
}

_RANGE_PATTERN = re.compile(r"^(\d+)([hd])$", re.IGNORECASE)


def get_request_config(profile: NetworkProfile) -> RequestConfig:
    """Get the request configuration for a network profile."""
    return _REQUEST_CONFIGS[NetworkProfile(profile)]


def get_refresh_interval(profile: NetworkProfile) -> int:
    """Get the dashboard refresh interval in seconds for a network profile."""
    return get_request_config(profile).refresh_interval_seconds


def parse_range(range_str: str) -> timedelta:
    """Parse a range string (e.g., '24h', '7d', '30d') to a timedelta.

    Args:
        range_str: Range with unit suffix (h=hours, d=days)

    Returns:
        Window length as a timedelta

    Raises:
        ValueError: If the format is invalid or the length is zero
    """
    match = _RANGE_PATTERN.match(range_str.strip())
    if not match:
        raise ValueError(f"Invalid range format: '{range_str}'. Use Nh or Nd (e.g., 24h, 7d)")
    value = int(match.group(1))
    if value <= 0:
        raise ValueError(f"Range must be positive: '{range_str}'")
    if match.group(2).lower() == "h":
        return timedelta(hours=value)
    return timedelta(days=value)


def window_for(range_str: str, profile: NetworkProfile) -> timedelta:
    """Resolve the effective query window, capped by the network profile."""
    requested = parse_range(range_str)
    cap = timedelta(days=get_request_config(profile).max_window_days)
    return min(requested, cap)

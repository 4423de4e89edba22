"""Default values for settings.

All default values used in AppSettings model and validation fallback values.
"""

from typing import Final

# ============================================================================
# Server defaults
# ============================================================================

HOST_DEFAULT: Final = "0.0.0.0"
PORT_DEFAULT: Final = 5000
LOG_LEVEL_DEFAULT: Final = "INFO"
KUBECTL_BINARY_DEFAULT: Final = "kubectl"

# ============================================================================
# Scan defaults
# ============================================================================

NAMESPACE_DEFAULT: Final = "default"
SCAN_NAMESPACE_DEFAULT: Final = "all"
RESOURCE_TYPE_DEFAULT: Final = "all"
TOP_PODS_LIMIT_DEFAULT: Final = 10

# ============================================================================
# Threshold defaults
# ============================================================================

EVENT_AGE_HOURS_DEFAULT: Final = 1.0
PENDING_WARNING_MINUTES_DEFAULT: Final = 10
HIGH_RESTART_THRESHOLD_DEFAULT: Final = 3

# ============================================================================
# Auth defaults
# ============================================================================

JWT_ALGORITHMS_DEFAULT: Final = ("HS256",)

__all__ = [
    "EVENT_AGE_HOURS_DEFAULT",
    "HIGH_RESTART_THRESHOLD_DEFAULT",
    "HOST_DEFAULT",
    "JWT_ALGORITHMS_DEFAULT",
    "KUBECTL_BINARY_DEFAULT",
    "LOG_LEVEL_DEFAULT",
    "NAMESPACE_DEFAULT",
    "PENDING_WARNING_MINUTES_DEFAULT",
    "PORT_DEFAULT",
    "RESOURCE_TYPE_DEFAULT",
    "SCAN_NAMESPACE_DEFAULT",
    "TOP_PODS_LIMIT_DEFAULT",
]

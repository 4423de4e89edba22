"""Timeout constants for kubescope.

All timeout and interval values for API requests, async operations, and refresh cycles.
"""

from typing import Final

# ============================================================================
# API/Cluster timeouts (string format for kubectl)
# ============================================================================

CLUSTER_REQUEST_TIMEOUT: Final = "30s"
EVENT_RETRY_REQUEST_TIMEOUT: Final = "45s"

# Process-level command timeouts (must be greater than request timeout)
KUBECTL_COMMAND_TIMEOUT: Final = 45

# ============================================================================
# Async operation timeouts (float, in seconds)
# ============================================================================

CLUSTER_CHECK_TIMEOUT: Final = 12.0
SEMAPHORE_ACQUIRE_TIMEOUT: Final = 60.0

# ============================================================================
# Streaming
# ============================================================================

STREAM_INTERVAL_SECONDS: Final = 5.0

__all__ = [
    "CLUSTER_CHECK_TIMEOUT",
    "CLUSTER_REQUEST_TIMEOUT",
    "EVENT_RETRY_REQUEST_TIMEOUT",
    "KUBECTL_COMMAND_TIMEOUT",
    "SEMAPHORE_ACQUIRE_TIMEOUT",
    "STREAM_INTERVAL_SECONDS",
]

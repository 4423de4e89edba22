"""Limit and threshold constants for kubescope.

All limit values, thresholds, and validation ranges.
"""

from typing import Final

# ============================================================================
# Display limits
# ============================================================================

MAX_EVENT_MESSAGE_LENGTH: Final = 160
MAX_LOG_TAIL_LINES: Final = 5000

# ============================================================================
# Validation limits
# ============================================================================

STREAM_INTERVAL_MIN: Final = 1.0
TOP_PODS_LIMIT_MAX: Final = 100

# ============================================================================
# Controller limits
# ============================================================================

MAX_CONCURRENT_REQUESTS: Final = 8
EVENT_CHUNK_SIZE: Final = 200

__all__ = [
    "EVENT_CHUNK_SIZE",
    "MAX_CONCURRENT_REQUESTS",
    "MAX_EVENT_MESSAGE_LENGTH",
    "MAX_LOG_TAIL_LINES",
    "STREAM_INTERVAL_MIN",
    "TOP_PODS_LIMIT_MAX",
]

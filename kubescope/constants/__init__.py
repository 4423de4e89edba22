"""Constants module for kubescope.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (strings, numbers with Final)
- timeouts.py: Timeout values (seconds)
- limits.py: Limit values (max/min)
- defaults.py: Default values for settings
"""

from kubescope.constants.defaults import (
    EVENT_AGE_HOURS_DEFAULT,
    HIGH_RESTART_THRESHOLD_DEFAULT,
    PENDING_WARNING_MINUTES_DEFAULT,
    TOP_PODS_LIMIT_DEFAULT,
)
from kubescope.constants.enums import (
    NodeStatus,
    ResourceKind,
    Role,
    Severity,
    StreamState,
)
from kubescope.constants.limits import (
    MAX_CONCURRENT_REQUESTS,
    STREAM_INTERVAL_MIN,
)
from kubescope.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
    STREAM_INTERVAL_SECONDS,
)
from kubescope.constants.values import (
    ALL_SENTINEL,
    APP_TITLE,
    SCAN_KIND_ORDER,
    STATUS_PLACEHOLDER,
)

__all__ = [
    # Application
    "ALL_SENTINEL",
    "APP_TITLE",
    # Timeouts
    "CLUSTER_REQUEST_TIMEOUT",
    "EVENT_AGE_HOURS_DEFAULT",
    "HIGH_RESTART_THRESHOLD_DEFAULT",
    "KUBECTL_COMMAND_TIMEOUT",
    "MAX_CONCURRENT_REQUESTS",
    "PENDING_WARNING_MINUTES_DEFAULT",
    # Scanner
    "SCAN_KIND_ORDER",
    "STATUS_PLACEHOLDER",
    "STREAM_INTERVAL_MIN",
    "STREAM_INTERVAL_SECONDS",
    "TOP_PODS_LIMIT_DEFAULT",
    # Enums
    "NodeStatus",
    "ResourceKind",
    "Role",
    "Severity",
    "StreamState",
]

"""Scalar constants for kubescope.

All application-level constants with proper type hints using Final.
"""

from typing import Final

from kubescope.constants.enums import ResourceKind

# ============================================================================
# Application
# ============================================================================

APP_TITLE: Final = "kubescope"
API_PREFIX: Final = "/api"

# ============================================================================
# Scanner
# ============================================================================

ALL_SENTINEL: Final = "all"
STATUS_PLACEHOLDER: Final = "—"
STATUS_UNKNOWN: Final = "Unknown"
AGE_UNKNOWN: Final = "Unknown"
UNKNOWN_KIND_RANK: Final = 999
EVENT_KIND_PREFIX: Final = "Event/"

# Workloads before networking before config before storage.
SCAN_KIND_ORDER: Final = (
    ResourceKind.POD,
    ResourceKind.DEPLOYMENT,
    ResourceKind.STATEFUL_SET,
    ResourceKind.DAEMON_SET,
    ResourceKind.JOB,
    ResourceKind.CRON_JOB,
    ResourceKind.SERVICE,
    ResourceKind.INGRESS,
    ResourceKind.CONFIG_MAP,
    ResourceKind.SECRET,
    ResourceKind.PERSISTENT_VOLUME_CLAIM,
)

# ============================================================================
# Streaming
# ============================================================================

SSE_EVENT_METRICS: Final = "metrics"
SSE_EVENT_ERROR: Final = "error"
SSE_HEADERS: Final = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

# ============================================================================
# Actions
# ============================================================================

RESTARTED_AT_ANNOTATION: Final = "kubectl.kubernetes.io/restartedAt"

__all__ = [
    "AGE_UNKNOWN",
    "ALL_SENTINEL",
    "API_PREFIX",
    "APP_TITLE",
    "EVENT_KIND_PREFIX",
    "RESTARTED_AT_ANNOTATION",
    "SCAN_KIND_ORDER",
    "SSE_EVENT_ERROR",
    "SSE_EVENT_METRICS",
    "SSE_HEADERS",
    "STATUS_PLACEHOLDER",
    "STATUS_UNKNOWN",
    "UNKNOWN_KIND_RANK",
]

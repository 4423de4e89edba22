"""All enum definitions for kubescope.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum

# =============================================================================
# Resource Enums
# =============================================================================

class ResourceKind(str, Enum):
    """Kubernetes kinds the scanner knows how to list and classify."""

    POD = "Pod"
    DEPLOYMENT = "Deployment"
    STATEFUL_SET = "StatefulSet"
    DAEMON_SET = "DaemonSet"
    JOB = "Job"
    CRON_JOB = "CronJob"
    SERVICE = "Service"
    INGRESS = "Ingress"
    CONFIG_MAP = "ConfigMap"
    SECRET = "Secret"
    PERSISTENT_VOLUME_CLAIM = "PersistentVolumeClaim"
    NODE = "Node"


class NodeStatus(Enum):
    """Node status values from Kubernetes API."""

    READY = "Ready"
    NOT_READY = "NotReady"
    UNKNOWN = "Unknown"


# =============================================================================
# Health Enums
# =============================================================================

class Severity(str, Enum):
    """Triage severity for a classified resource.

    Members are declared in rank order; use ``rank`` for sorting, never the
    string value.
    """

    OK = "ok"
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {member: index for index, member in enumerate(Severity)}


# =============================================================================
# Stream State Enums
# =============================================================================

class StreamState(Enum):
    """Lifecycle of one Server-Sent-Events connection."""

    CONNECTING = "connecting"
    STREAMING = "streaming"
    CLOSED = "closed"
    REJECTED = "rejected"


# =============================================================================
# Access Enums
# =============================================================================

class Role(str, Enum):
    """Dashboard roles, lowest privilege first."""

    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def allows(self, required: "Role") -> bool:
        """Return True when this role satisfies ``required``."""
        return self.rank >= required.rank


_ROLE_RANK = {member: index for index, member in enumerate(Role)}


__all__ = [
    "NodeStatus",
    "ResourceKind",
    "Role",
    "Severity",
    "StreamState",
]

"""Core data models for kubescope."""

from kubescope.models.core.cluster_snapshot import (
    ClusterOverview,
    ClusterSnapshot,
    ContainerMetric,
    DeploymentStatusInfo,
    NetworkOverview,
    NodeUsage,
    PodMetric,
    PodMetricsResult,
)
from kubescope.models.core.kind_views import (
    ContainerStateView,
    CronJobView,
    DaemonSetView,
    DeploymentView,
    EventView,
    GenericView,
    JobView,
    KindView,
    NodeView,
    ObjectMeta,
    PodView,
    ServiceView,
    StatefulSetView,
)
from kubescope.models.core.resource_row import (
    HEALTHY,
    Classification,
    FetchFailure,
    ResourceRow,
    ScanQuery,
    ScanReport,
)

__all__ = [
    "HEALTHY",
    "Classification",
    "ClusterOverview",
    "ClusterSnapshot",
    "ContainerMetric",
    "ContainerStateView",
    "CronJobView",
    "DaemonSetView",
    "DeploymentStatusInfo",
    "DeploymentView",
    "EventView",
    "FetchFailure",
    "GenericView",
    "JobView",
    "KindView",
    "NetworkOverview",
    "NodeUsage",
    "NodeView",
    "ObjectMeta",
    "PodMetric",
    "PodMetricsResult",
    "PodView",
    "ResourceRow",
    "ScanQuery",
    "ScanReport",
    "ServiceView",
    "StatefulSetView",
]

"""Cluster-level KPI models built by the metrics aggregator."""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from kubescope.constants.enums import Severity
from kubescope.models.core.resource_row import CamelModel


class ClusterSnapshot(CamelModel):
    """Point-in-time cluster totals. Never persisted."""

    node_count: int = 0
    ready_count: int = 0
    total_cpu_cores: float = 0.0
    total_memory_bytes: float = 0.0
    metrics_available: bool = False

    @model_validator(mode="after")
    def _ready_within_total(self) -> ClusterSnapshot:
        if self.ready_count > self.node_count:
            raise ValueError("ready_count cannot exceed node_count")
        return self


class NodeUsage(CamelModel):
    """Readiness plus live usage for one node. Usage is None without metrics."""

    name: str
    ready: bool
    cpu_cores: float | None = None
    memory_bytes: float | None = None
    timestamp: str | None = None


class ClusterOverview(CamelModel):
    """Snapshot and per-node rows, as served by /cluster/nodes and the stream."""

    cluster: ClusterSnapshot
    nodes: list[NodeUsage] = Field(default_factory=list)


class ContainerMetric(CamelModel):
    name: str
    cpu_cores: float
    memory_bytes: float


class PodMetric(CamelModel):
    """Summed container usage for one pod from the metrics API."""

    namespace: str
    name: str
    cpu_cores: float
    memory_bytes: float
    containers: list[ContainerMetric] = Field(default_factory=list)
    timestamp: str | None = None
    window: str | None = None


class PodMetricsResult(CamelModel):
    count: int
    items: list[PodMetric] = Field(default_factory=list)
    metrics_available: bool = True


class DeploymentStatusInfo(CamelModel):
    """Replica counts and classification for one deployment."""

    namespace: str
    name: str
    replicas: int = 0
    available_replicas: int = 0
    ready_replicas: int = 0
    updated_replicas: int = 0
    conditions: list[dict[str, Any]] = Field(default_factory=list)
    issue: str = ""
    severity: Severity = Severity.OK


class NetworkOverview(CamelModel):
    """Services and network policies; traffic figures need Prometheus."""

    metrics_available: bool = False
    summary: dict[str, int] = Field(default_factory=dict)
    services: list[dict[str, Any]] = Field(default_factory=list)
    policies: list[dict[str, Any]] = Field(default_factory=list)
    note: str = (
        "Network traffic/latency requires Prometheus/CNI metrics; "
        "showing topology objects instead."
    )

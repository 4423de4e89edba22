"""Typed per-kind projections of raw Kubernetes objects.

Classifiers only ever see these views. Projection happens once, in
``KindParser``, so malformed input is absorbed there and every field below
has a usable default.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from kubescope.constants.enums import ResourceKind


class ObjectMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str | None = None
    creation_timestamp: str | None = None


class KindView(BaseModel):
    """Fields shared by every projection."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    meta: ObjectMeta
    phase: str | None = None


class ContainerStateView(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    ready: bool = False
    restart_count: int = 0
    waiting_reason: str | None = None
    terminated_reason: str | None = None


class PodView(KindView):
    kind: ResourceKind = ResourceKind.POD
    ready_condition: str | None = None
    containers: tuple[ContainerStateView, ...] = ()
    node_name: str | None = None
    pod_ip: str | None = None

    @property
    def restart_count(self) -> int:
        return sum(container.restart_count for container in self.containers)


class DeploymentView(KindView):
    kind: ResourceKind = ResourceKind.DEPLOYMENT
    desired: int = 1
    available: int = 0
    ready: int = 0
    updated: int = 0


class StatefulSetView(KindView):
    kind: ResourceKind = ResourceKind.STATEFUL_SET
    desired: int = 1
    ready: int = 0


class DaemonSetView(KindView):
    kind: ResourceKind = ResourceKind.DAEMON_SET
    desired: int = 0
    available: int = 0


class JobView(KindView):
    kind: ResourceKind = ResourceKind.JOB
    active: int = 0
    succeeded: int = 0
    failed: int = 0


class CronJobView(KindView):
    kind: ResourceKind = ResourceKind.CRON_JOB
    schedule: str | None = None
    suspend: bool = False
    last_schedule_time: str | None = None


class ServiceView(KindView):
    kind: ResourceKind = ResourceKind.SERVICE
    service_type: str = "ClusterIP"
    cluster_ip: str | None = None
    has_selector: bool = False
    # Filled in by the problems scan from the matching Endpoints object.
    ready_addresses: int | None = None

    @property
    def expects_endpoints(self) -> bool:
        return self.has_selector and self.service_type != "ExternalName"


class NodeView(KindView):
    kind: ResourceKind = ResourceKind.NODE
    ready: bool = False
    unschedulable: bool = False


class GenericView(KindView):
    """Ingress, ConfigMap, Secret and PersistentVolumeClaim."""


class EventView(BaseModel):
    """One core/v1 Event reduced to what correlation needs."""

    model_config = ConfigDict(frozen=True)

    namespace: str | None = None
    involved_kind: str = ""
    involved_name: str = ""
    involved_namespace: str | None = None
    event_type: str = ""
    reason: str = ""
    message: str = ""
    timestamp: str | None = None
    count: int = Field(default=1, ge=1)


__all__ = [
    "ContainerStateView",
    "CronJobView",
    "DaemonSetView",
    "DeploymentView",
    "EventView",
    "GenericView",
    "JobView",
    "KindView",
    "NodeView",
    "ObjectMeta",
    "PodView",
    "ServiceView",
    "StatefulSetView",
]

"""Kind parser - projects raw API objects into typed per-kind views.

Projection never raises for a dict input: missing or mistyped fields fall
back to the view defaults so classification stays total.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from kubescope.constants.enums import ResourceKind
from kubescope.controllers.cluster.parsers.node_parser import NodeParser
from kubescope.models.core.kind_views import (
    ContainerStateView,
    CronJobView,
    DaemonSetView,
    DeploymentView,
    EventView,
    GenericView,
    JobView,
    KindView,
    ObjectMeta,
    PodView,
    ServiceView,
    StatefulSetView,
)
from kubescope.utils.payload import as_dict, as_list, as_str, coerce_int


class KindParser:
    """Parses raw objects of every scannable kind into ``KindView`` instances."""

    def __init__(self, node_parser: NodeParser | None = None) -> None:
        self._node_parser = node_parser or NodeParser()
        self._parsers: dict[ResourceKind, Callable[[dict[str, Any], ObjectMeta, str | None], KindView]] = {
            ResourceKind.POD: self._parse_pod,
            ResourceKind.DEPLOYMENT: self._parse_deployment,
            ResourceKind.STATEFUL_SET: self._parse_statefulset,
            ResourceKind.DAEMON_SET: self._parse_daemonset,
            ResourceKind.JOB: self._parse_job,
            ResourceKind.CRON_JOB: self._parse_cronjob,
            ResourceKind.SERVICE: self._parse_service,
            ResourceKind.NODE: self._parse_node,
        }

    @staticmethod
    def parse_meta(raw: dict[str, Any]) -> ObjectMeta:
        metadata = as_dict(raw.get("metadata"))
        return ObjectMeta(
            name=as_str(metadata.get("name")) or "",
            namespace=as_str(metadata.get("namespace")),
            creation_timestamp=as_str(metadata.get("creationTimestamp")),
        )

    def parse(self, kind: ResourceKind, raw: Any) -> KindView:
        """Project ``raw`` into the view for ``kind``."""
        raw = as_dict(raw)
        meta = self.parse_meta(raw)
        phase = as_str(as_dict(raw.get("status")).get("phase"))
        parser = self._parsers.get(kind)
        if parser is None:
            return GenericView(kind=kind, meta=meta, phase=phase)
        return parser(raw, meta, phase)

    # ------------------------------------------------------------------
    # Workloads
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_container_status(raw: Any) -> ContainerStateView:
        status = as_dict(raw)
        state = as_dict(status.get("state"))
        return ContainerStateView(
            name=as_str(status.get("name")) or "",
            ready=status.get("ready") is True,
            restart_count=max(0, coerce_int(status.get("restartCount"))),
            waiting_reason=as_str(as_dict(state.get("waiting")).get("reason")),
            terminated_reason=as_str(as_dict(state.get("terminated")).get("reason")),
        )

    def _parse_pod(self, raw: dict[str, Any], meta: ObjectMeta, phase: str | None) -> PodView:
        status = as_dict(raw.get("status"))
        spec = as_dict(raw.get("spec"))
        ready_condition = None
        for condition in as_list(status.get("conditions")):
            condition = as_dict(condition)
            if condition.get("type") == "Ready":
                ready_condition = as_str(condition.get("status")) or ""
                break
        containers = tuple(
            self._parse_container_status(item) for item in as_list(status.get("containerStatuses"))
        )
        return PodView(
            meta=meta,
            phase=phase,
            ready_condition=ready_condition,
            containers=containers,
            node_name=as_str(spec.get("nodeName")),
            pod_ip=as_str(status.get("podIP")),
        )

    @staticmethod
    def _desired_replicas(spec: dict[str, Any]) -> int:
        replicas = spec.get("replicas")
        return 1 if replicas is None else max(0, coerce_int(replicas, 1))

    def _parse_deployment(
        self, raw: dict[str, Any], meta: ObjectMeta, phase: str | None
    ) -> DeploymentView:
        spec = as_dict(raw.get("spec"))
        status = as_dict(raw.get("status"))
        return DeploymentView(
            meta=meta,
            phase=phase,
            desired=self._desired_replicas(spec),
            available=coerce_int(status.get("availableReplicas")),
            ready=coerce_int(status.get("readyReplicas")),
            updated=coerce_int(status.get("updatedReplicas")),
        )

    def _parse_statefulset(
        self, raw: dict[str, Any], meta: ObjectMeta, phase: str | None
    ) -> StatefulSetView:
        spec = as_dict(raw.get("spec"))
        status = as_dict(raw.get("status"))
        return StatefulSetView(
            meta=meta,
            phase=phase,
            desired=self._desired_replicas(spec),
            ready=coerce_int(status.get("readyReplicas")),
        )

    @staticmethod
    def _parse_daemonset(raw: dict[str, Any], meta: ObjectMeta, phase: str | None) -> DaemonSetView:
        status = as_dict(raw.get("status"))
        return DaemonSetView(
            meta=meta,
            phase=phase,
            desired=coerce_int(status.get("desiredNumberScheduled")),
            available=coerce_int(status.get("numberAvailable")),
        )

    @staticmethod
    def _parse_job(raw: dict[str, Any], meta: ObjectMeta, phase: str | None) -> JobView:
        status = as_dict(raw.get("status"))
        return JobView(
            meta=meta,
            phase=phase,
            active=coerce_int(status.get("active")),
            succeeded=coerce_int(status.get("succeeded")),
            failed=coerce_int(status.get("failed")),
        )

    @staticmethod
    def _parse_cronjob(raw: dict[str, Any], meta: ObjectMeta, phase: str | None) -> CronJobView:
        spec = as_dict(raw.get("spec"))
        status = as_dict(raw.get("status"))
        return CronJobView(
            meta=meta,
            phase=phase,
            schedule=as_str(spec.get("schedule")),
            suspend=spec.get("suspend") is True,
            last_schedule_time=as_str(status.get("lastScheduleTime")),
        )

    # ------------------------------------------------------------------
    # Networking / cluster
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_service(raw: dict[str, Any], meta: ObjectMeta, phase: str | None) -> ServiceView:
        spec = as_dict(raw.get("spec"))
        return ServiceView(
            meta=meta,
            phase=phase,
            service_type=as_str(spec.get("type")) or "ClusterIP",
            cluster_ip=as_str(spec.get("clusterIP")),
            has_selector=bool(as_dict(spec.get("selector"))),
        )

    def _parse_node(self, raw: dict[str, Any], meta: ObjectMeta, phase: str | None) -> KindView:
        return self._node_parser.parse_node_view(raw, meta)

    @staticmethod
    def count_ready_addresses(endpoints: Any) -> int:
        """Count ready addresses across the subsets of an Endpoints object."""
        return sum(
            len(as_list(as_dict(subset).get("addresses")))
            for subset in as_list(as_dict(endpoints).get("subsets"))
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @staticmethod
    def event_timestamp(raw: dict[str, Any]) -> str | None:
        """First non-null of lastTimestamp, eventTime, firstTimestamp."""
        for key in ("lastTimestamp", "eventTime", "firstTimestamp"):
            value = as_str(raw.get(key))
            if value:
                return value
        return None

    def parse_event(self, raw: Any) -> EventView:
        raw = as_dict(raw)
        metadata = as_dict(raw.get("metadata"))
        involved = as_dict(raw.get("involvedObject") or raw.get("regarding"))
        return EventView(
            namespace=as_str(metadata.get("namespace")),
            involved_kind=as_str(involved.get("kind")) or "",
            involved_name=as_str(involved.get("name")) or "",
            involved_namespace=as_str(involved.get("namespace")),
            event_type=as_str(raw.get("type")) or "",
            reason=as_str(raw.get("reason")) or "",
            message=as_str(raw.get("message") or raw.get("note")) or "",
            timestamp=self.event_timestamp(raw),
            count=max(1, coerce_int(raw.get("count"), 1)),
        )

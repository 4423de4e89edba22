"""Metrics aggregator - cluster KPIs, top pods and workload/network overviews.

Node inventory comes from the core API and is required. Usage comes from
metrics-server and is optional: when it is missing the snapshot reports
``metricsAvailable=false`` with zero totals instead of failing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, cast

from kubescope.constants.defaults import TOP_PODS_LIMIT_DEFAULT
from kubescope.constants.enums import ResourceKind
from kubescope.constants.values import ALL_SENTINEL
from kubescope.controllers.base.base_controller import BaseController, run_fetch
from kubescope.controllers.cluster.classifiers import (
    ClassifierContext,
    classify_deployment_problems,
)
from kubescope.controllers.cluster.fetchers.metrics_fetcher import MetricsFetcher
from kubescope.controllers.cluster.parsers.kind_parser import KindParser
from kubescope.controllers.cluster.parsers.node_parser import NodeParser
from kubescope.gateway.kubectl_gateway import KubectlGateway
from kubescope.models.core.cluster_snapshot import (
    ClusterOverview,
    ClusterSnapshot,
    DeploymentStatusInfo,
    NetworkOverview,
    NodeUsage,
    PodMetric,
    PodMetricsResult,
)
from kubescope.models.core.kind_views import DeploymentView
from kubescope.models.state.app_settings import AppSettings
from kubescope.utils.payload import as_dict, coerce_int, dict_items, object_name, object_namespace

logger = logging.getLogger(__name__)


class MetricsAggregator(BaseController):
    """Builds the analytics views served by /cluster/* and the SSE stream."""

    SOURCE_NODE_METRICS = "node_metrics"
    SOURCE_POD_METRICS = "pod_metrics"

    def __init__(
        self,
        gateway: KubectlGateway,
        settings: AppSettings | None = None,
        metrics_fetcher: MetricsFetcher | None = None,
        node_parser: NodeParser | None = None,
    ) -> None:
        super().__init__(gateway)
        self._settings = settings or AppSettings()
        self._metrics_fetcher = metrics_fetcher or MetricsFetcher(gateway)
        self._node_parser = node_parser or NodeParser()
        self._kind_parser = KindParser(self._node_parser)

    async def check_connection(self) -> bool:
        return await self._gateway.check_connection()

    async def get_cluster_snapshot(self) -> ClusterOverview:
        """Node readiness joined with node usage.

        Raises:
            KubectlError: When the node list itself cannot be fetched.
        """
        nodes, metrics_result = await asyncio.gather(
            self._gateway.list("nodes"),
            run_fetch(self.SOURCE_NODE_METRICS, self._metrics_fetcher.fetch_node_metrics()),
        )
        samples = metrics_result.data if metrics_result.success else None

        usages: list[NodeUsage] = []
        for node in nodes:
            name = object_name(node)
            sample = samples.get(name) if samples is not None and name else None
            usages.append(
                self._node_parser.parse_node_usage(
                    node,
                    cpu_cores=sample.cpu_cores if sample else None,
                    memory_bytes=sample.memory_bytes if sample else None,
                    timestamp=sample.timestamp if sample else None,
                )
            )

        cluster = ClusterSnapshot(
            node_count=len(usages),
            ready_count=sum(1 for usage in usages if usage.ready),
            total_cpu_cores=sum(usage.cpu_cores or 0.0 for usage in usages),
            total_memory_bytes=sum(usage.memory_bytes or 0.0 for usage in usages),
            metrics_available=samples is not None,
        )
        return ClusterOverview(cluster=cluster, nodes=usages)

    async def list_pod_metrics(self, namespace: str | None = None) -> PodMetricsResult:
        """Pod usage, optionally filtered to one namespace ("all" means no filter)."""
        scope = None if not namespace or namespace.lower() == ALL_SENTINEL else namespace
        result = await run_fetch(
            self.SOURCE_POD_METRICS,
            self._metrics_fetcher.fetch_pod_metrics(scope),
            namespace=scope,
        )
        if not result.success:
            return PodMetricsResult(count=0, items=[], metrics_available=False)
        items = result.data or []
        return PodMetricsResult(count=len(items), items=items, metrics_available=True)

    async def get_top_pods(self, limit: int | None = None) -> list[PodMetric]:
        """Heaviest pods by CPU across all namespaces. Empty when metrics are down."""
        if limit is None:
            limit = self._settings.top_pods_limit or TOP_PODS_LIMIT_DEFAULT
        if limit <= 0:
            return []
        result = await self.list_pod_metrics(None)
        ranked = sorted(
            result.items,
            key=lambda metric: (-metric.cpu_cores, metric.namespace, metric.name),
        )
        return ranked[:limit]

    async def list_deployment_status(self, namespace: str | None = None) -> list[DeploymentStatusInfo]:
        """Replica counts and rollout classification per deployment.

        Raises:
            KubectlError: When deployments cannot be listed.
        """
        items = await self._gateway.list("deployments", namespace)
        context = ClassifierContext()
        statuses: list[DeploymentStatusInfo] = []
        for raw in items:
            view = cast(DeploymentView, self._kind_parser.parse(ResourceKind.DEPLOYMENT, raw))
            classification = classify_deployment_problems(view, context)
            conditions = dict_items(as_dict(raw.get("status")).get("conditions"))
            statuses.append(
                DeploymentStatusInfo(
                    namespace=view.meta.namespace or "default",
                    name=view.meta.name,
                    replicas=self._declared_replicas(raw),
                    available_replicas=view.available,
                    ready_replicas=view.ready,
                    updated_replicas=view.updated,
                    conditions=conditions,
                    issue=classification.issue,
                    severity=classification.severity,
                )
            )
        statuses.sort(key=lambda status: (status.namespace, status.name))
        return statuses

    @staticmethod
    def _declared_replicas(raw: dict[str, Any]) -> int:
        """``spec.replicas`` as written, 0 when absent or not a number."""
        return max(0, coerce_int(as_dict(raw.get("spec")).get("replicas")))

    @staticmethod
    def _service_summary(item: dict[str, Any]) -> dict[str, Any]:
        spec = as_dict(item.get("spec"))
        return {
            "namespace": object_namespace(item),
            "name": object_name(item),
            "type": spec.get("type"),
            "clusterIP": spec.get("clusterIP"),
            "ports": spec.get("ports") or [],
        }

    @staticmethod
    def _policy_summary(item: dict[str, Any]) -> dict[str, Any]:
        spec = as_dict(item.get("spec"))
        return {
            "namespace": object_namespace(item),
            "name": object_name(item),
            "podSelector": spec.get("podSelector") or {},
            "policyTypes": spec.get("policyTypes") or [],
        }

    async def get_network_overview(self, namespace: str | None = None) -> NetworkOverview:
        """Services and network policies as a stand-in for traffic metrics.

        Raises:
            KubectlError: When either list fails.
        """
        services, policies = await asyncio.gather(
            self._gateway.list("services", namespace),
            self._gateway.list("networkpolicies", namespace),
        )
        service_rows = [self._service_summary(item) for item in services]
        policy_rows = [self._policy_summary(item) for item in policies]
        return NetworkOverview(
            metrics_available=False,
            summary={
                "totalServices": len(service_rows),
                "totalNetworkPolicies": len(policy_rows),
            },
            services=service_rows,
            policies=policy_rows,
        )

"""Metrics fetcher - reads live usage from the metrics.k8s.io API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from kubescope.gateway.kubectl_gateway import KubectlGateway
from kubescope.models.core.cluster_snapshot import ContainerMetric, PodMetric
from kubescope.utils.payload import as_dict, as_str, dict_items, object_name, object_namespace
from kubescope.utils.resource_parser import parse_quantity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeMetricSample:
    """Usage for one node as reported by the metrics API."""

    name: str
    cpu_cores: float
    memory_bytes: float
    timestamp: str | None = None


class MetricsFetcher:
    """Fetches node and pod usage from metrics-server."""

    def __init__(self, gateway: KubectlGateway) -> None:
        self._gateway = gateway

    async def fetch_node_metrics(self) -> dict[str, NodeMetricSample]:
        """Return usage keyed by node name.

        Raises:
            KubectlError: When the metrics API is unreachable.
        """
        items = await self._gateway.list_metrics("nodes")
        samples: dict[str, NodeMetricSample] = {}
        for item in items:
            name = object_name(item)
            if not name:
                continue
            usage = as_dict(item.get("usage"))
            samples[name] = NodeMetricSample(
                name=name,
                cpu_cores=parse_quantity(usage.get("cpu")),
                memory_bytes=parse_quantity(usage.get("memory")),
                timestamp=as_str(item.get("timestamp")),
            )
        return samples

    @staticmethod
    def parse_pod_metric(item: dict[str, Any]) -> PodMetric | None:
        """Sum container usage for one PodMetrics item.

        Returns None when the item carries no container with a usage block.
        """
        containers: list[ContainerMetric] = []
        for container in dict_items(item.get("containers")):
            usage = as_dict(container.get("usage"))
            if not usage:
                continue
            containers.append(
                ContainerMetric(
                    name=as_str(container.get("name")) or "",
                    cpu_cores=parse_quantity(usage.get("cpu")),
                    memory_bytes=parse_quantity(usage.get("memory")),
                )
            )
        if not containers:
            return None
        return PodMetric(
            namespace=object_namespace(item) or "default",
            name=object_name(item) or "",
            cpu_cores=sum(container.cpu_cores for container in containers),
            memory_bytes=sum(container.memory_bytes for container in containers),
            containers=containers,
            timestamp=as_str(item.get("timestamp")),
            window=as_str(item.get("window")),
        )

    async def fetch_pod_metrics(self, namespace: str | None = None) -> list[PodMetric]:
        """Return per-pod usage, dropping pods without usable container usage.

        Raises:
            KubectlError: When the metrics API is unreachable.
        """
        items = await self._gateway.list_metrics("pods", namespace)
        metrics: list[PodMetric] = []
        for item in items:
            metric = self.parse_pod_metric(item)
            if metric is None:
                logger.debug(
                    "Skipping pod metrics without container usage: %s",
                    object_name(item),
                )
                continue
            metrics.append(metric)
        return metrics

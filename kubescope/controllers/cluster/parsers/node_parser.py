"""Node parser - reads readiness, capacity and placement labels from nodes."""

from __future__ import annotations

from typing import Any

from kubescope.constants.enums import NodeStatus
from kubescope.models.core.cluster_snapshot import NodeUsage
from kubescope.models.core.kind_views import NodeView, ObjectMeta
from kubescope.utils.payload import as_dict, dict_items, object_name
from kubescope.utils.resource_parser import memory_str_to_bytes, parse_cpu


class NodeParser:
    """Parses node data into structured formats."""

    _INSTANCE_TYPE_LABELS = (
        "node.kubernetes.io/instance-type",
        "beta.kubernetes.io/instance-type",
    )
    _AZ_LABELS = (
        "topology.kubernetes.io/zone",
        "failure-domain.beta.kubernetes.io/zone",
    )
    _ROLE_LABEL_PREFIX = "node-role.kubernetes.io/"

    def _get_label_value(
        self, labels: dict[str, str], label_tuples: tuple[str, ...], default: str = "Unknown"
    ) -> str:
        """Extract label value from labels dict using ordered label tuples."""
        for label in label_tuples:
            value = labels.get(label)
            if value:
                return value
        return default

    @staticmethod
    def conditions(node: dict[str, Any]) -> dict[str, str]:
        return {
            c["type"]: c["status"]
            for c in dict_items(as_dict(node.get("status")).get("conditions"))
            if isinstance(c.get("type"), str) and isinstance(c.get("status"), str)
        }

    def is_ready(self, node: dict[str, Any]) -> bool:
        return self.conditions(node).get("Ready") == "True"

    def node_status(self, node: dict[str, Any]) -> NodeStatus:
        ready = self.conditions(node).get("Ready")
        if ready == "True":
            return NodeStatus.READY
        if ready == "False":
            return NodeStatus.NOT_READY
        return NodeStatus.UNKNOWN

    def parse_node_view(self, node: dict[str, Any], meta: ObjectMeta) -> NodeView:
        spec = as_dict(node.get("spec"))
        return NodeView(
            meta=meta,
            phase=self.node_status(node).value,
            ready=self.is_ready(node),
            unschedulable=spec.get("unschedulable") is True,
        )

    def parse_node_details(self, node: dict[str, Any]) -> dict[str, Any]:
        """Capacity and placement details shown on node rows.

        CPU is reported in cores and memory in bytes.
        """
        metadata = as_dict(node.get("metadata"))
        status = as_dict(node.get("status"))
        labels = as_dict(metadata.get("labels"))
        allocatable = as_dict(status.get("allocatable"))

        roles = sorted(
            label[len(self._ROLE_LABEL_PREFIX):]
            for label in labels
            if label.startswith(self._ROLE_LABEL_PREFIX)
        )
        return {
            "roles": roles,
            "instanceType": self._get_label_value(labels, self._INSTANCE_TYPE_LABELS),
            "zone": self._get_label_value(labels, self._AZ_LABELS),
            "kubeletVersion": as_dict(status.get("nodeInfo")).get("kubeletVersion", "Unknown"),
            "cpuAllocatable": parse_cpu(allocatable.get("cpu", "0")),
            "memoryAllocatable": memory_str_to_bytes(allocatable.get("memory", "0Ki")),
        }

    def parse_node_usage(
        self,
        node: dict[str, Any],
        cpu_cores: float | None = None,
        memory_bytes: float | None = None,
        timestamp: str | None = None,
    ) -> NodeUsage:
        """Pair a node's readiness with its usage sample (None when unavailable)."""
        return NodeUsage(
            name=object_name(node) or "Unknown",
            ready=self.is_ready(node),
            cpu_cores=cpu_cores,
            memory_bytes=memory_bytes,
            timestamp=timestamp,
        )

"""Registry of resource types reachable through the gateway.

Maps every spelling a client may send (plural, singular, Kind, short name) to
the kubectl resource name and, for scannable kinds, the ``ResourceKind``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from kubescope.constants.enums import ResourceKind
from kubescope.constants.values import ALL_SENTINEL, SCAN_KIND_ORDER, UNKNOWN_KIND_RANK
from kubescope.errors import BadRequestError


@dataclass(frozen=True)
class KindSpec:
    """How one resource type is addressed through kubectl."""

    resource: str
    kind: ResourceKind | None = None
    namespaced: bool = True
    aliases: tuple[str, ...] = field(default=())

    @property
    def scannable(self) -> bool:
        return self.kind is not None


_REGISTRY: tuple[KindSpec, ...] = (
    KindSpec("pods", ResourceKind.POD, aliases=("pod", "po")),
    KindSpec("deployments", ResourceKind.DEPLOYMENT, aliases=("deployment", "deploy")),
    KindSpec("statefulsets", ResourceKind.STATEFUL_SET, aliases=("statefulset", "sts")),
    KindSpec("daemonsets", ResourceKind.DAEMON_SET, aliases=("daemonset", "ds")),
    KindSpec("jobs", ResourceKind.JOB, aliases=("job",)),
    KindSpec("cronjobs", ResourceKind.CRON_JOB, aliases=("cronjob", "cj")),
    KindSpec("services", ResourceKind.SERVICE, aliases=("service", "svc")),
    KindSpec("ingresses", ResourceKind.INGRESS, aliases=("ingress", "ing")),
    KindSpec("configmaps", ResourceKind.CONFIG_MAP, aliases=("configmap", "cm")),
    KindSpec("secrets", ResourceKind.SECRET, aliases=("secret",)),
    KindSpec(
        "persistentvolumeclaims",
        ResourceKind.PERSISTENT_VOLUME_CLAIM,
        aliases=("persistentvolumeclaim", "pvc", "pvcs"),
    ),
    KindSpec("nodes", ResourceKind.NODE, namespaced=False, aliases=("node", "no")),
    # Addressable for details, delete and edit, but never scanned.
    KindSpec("replicasets", aliases=("replicaset", "rs")),
    KindSpec("endpoints", aliases=("endpoint", "ep")),
    KindSpec("events", aliases=("event", "ev")),
    KindSpec("networkpolicies", aliases=("networkpolicy", "netpol")),
    KindSpec(
        "sparkapplications.sparkoperator.k8s.io",
        aliases=("sparkapplications", "sparkapplication", "sparkapp"),
    ),
    KindSpec("namespaces", namespaced=False, aliases=("namespace", "ns")),
)


def _build_lookup() -> dict[str, KindSpec]:
    lookup: dict[str, KindSpec] = {}
    for spec in _REGISTRY:
        names = {spec.resource, *spec.aliases}
        if spec.kind is not None:
            names.add(spec.kind.value)
        for name in names:
            lookup[name.lower()] = spec
    return lookup


_LOOKUP = _build_lookup()
_BY_KIND = {spec.kind: spec for spec in _REGISTRY if spec.kind is not None}
_KIND_RANK = {kind.value: index for index, kind in enumerate(SCAN_KIND_ORDER)}
_KIND_RANK[ResourceKind.NODE.value] = len(SCAN_KIND_ORDER)
CLUSTER_SCOPED_RESOURCES = frozenset(spec.resource for spec in _REGISTRY if not spec.namespaced)


def resolve_resource(value: str) -> KindSpec:
    """Return the registry entry for ``value``.

    Raises:
        BadRequestError: When the type is not supported.
    """
    spec = _LOOKUP.get((value or "").strip().lower())
    if spec is None:
        raise BadRequestError(f"Unsupported resource type: {value}", value=value)
    return spec


def resolve_scan_kinds(resource_type: str) -> tuple[KindSpec, ...]:
    """Expand a scan ``resourceType`` into the ordered kinds to list."""
    if (resource_type or "").strip().lower() == ALL_SENTINEL:
        return tuple(_BY_KIND[kind] for kind in SCAN_KIND_ORDER)
    spec = resolve_resource(resource_type)
    if not spec.scannable:
        raise BadRequestError(f"Unsupported resource type: {resource_type}", value=resource_type)
    return (spec,)


def kind_rank(kind: str) -> int:
    """Sort rank of a row kind. Unknown kinds (including events) sort last."""
    return _KIND_RANK.get(kind, UNKNOWN_KIND_RANK)


__all__ = [
    "CLUSTER_SCOPED_RESOURCES",
    "KindSpec",
    "kind_rank",
    "resolve_resource",
    "resolve_scan_kinds",
]

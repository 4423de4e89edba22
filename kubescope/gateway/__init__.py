"""Cluster API gateway."""

from kubescope.gateway.kubectl_gateway import (
    KubectlError,
    KubectlGateway,
    open_gateway,
)
from kubescope.gateway.resource_kinds import (
    KindSpec,
    kind_rank,
    resolve_resource,
    resolve_scan_kinds,
)

__all__ = [
    "KindSpec",
    "KubectlError",
    "KubectlGateway",
    "kind_rank",
    "open_gateway",
    "resolve_resource",
    "resolve_scan_kinds",
]

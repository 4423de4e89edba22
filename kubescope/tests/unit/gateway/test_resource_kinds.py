"""Tests for the resource kind registry."""

from __future__ import annotations

import pytest

from kubescope.constants.enums import ResourceKind
from kubescope.errors import BadRequestError
from kubescope.gateway.resource_kinds import (
    CLUSTER_SCOPED_RESOURCES,
    kind_rank,
    resolve_resource,
    resolve_scan_kinds,
)


class TestResolveResource:
    """Tests for resolve_resource function."""

    @pytest.mark.parametrize(
        ("alias", "resource"),
        [
            ("po", "pods"),
            ("Pod", "pods"),
            ("deploy", "deployments"),
            ("STS", "statefulsets"),
            ("svc", "services"),
            ("ingress", "ingresses"),
            ("pvc", "persistentvolumeclaims"),
            ("PersistentVolumeClaim", "persistentvolumeclaims"),
            ("netpol", "networkpolicies"),
            ("sparkapp", "sparkapplications.sparkoperator.k8s.io"),
        ],
    )
    def test_aliases(self, alias: str, resource: str) -> None:
        """Plural, singular, Kind and short names all resolve."""
        assert resolve_resource(alias).resource == resource

    def test_unsupported_type(self) -> None:
        """Unknown types raise a bad request carrying the value."""
        with pytest.raises(BadRequestError, match="Unsupported resource type: widgets") as exc_info:
            resolve_resource("widgets")
        assert exc_info.value.value == "widgets"

    def test_cluster_scoped(self) -> None:
        """Nodes and namespaces are cluster-scoped."""
        assert CLUSTER_SCOPED_RESOURCES == frozenset({"nodes", "namespaces"})


class TestResolveScanKinds:
    """Tests for resolve_scan_kinds function."""

    def test_all_expands_in_display_order(self) -> None:
        """'all' covers the eleven namespaced kinds, pods first."""
        specs = resolve_scan_kinds("all")
        assert len(specs) == 11
        assert specs[0].kind is ResourceKind.POD
        assert specs[-1].kind is ResourceKind.PERSISTENT_VOLUME_CLAIM
        assert all(spec.namespaced for spec in specs)

    def test_single_kind(self) -> None:
        """A single type resolves to one spec."""
        (spec,) = resolve_scan_kinds("nodes")
        assert spec.kind is ResourceKind.NODE

    def test_non_scannable_kind_rejected(self) -> None:
        """Types without classifiers cannot be scanned."""
        with pytest.raises(BadRequestError):
            resolve_scan_kinds("replicasets")


class TestKindRank:
    """Tests for kind_rank function."""

    def test_order(self) -> None:
        """Workloads sort before config, nodes after claims, unknown last."""
        assert kind_rank("Pod") < kind_rank("Deployment") < kind_rank("ConfigMap")
        assert kind_rank("PersistentVolumeClaim") < kind_rank("Node")
        assert kind_rank("Event/BackOff") == 999

"""Cluster-wide views: namespaces, node usage, pod metrics, deployments, network."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from kubescope.api.auth import require_role
from kubescope.api.dependencies import get_aggregator, get_controller
from kubescope.api.routes._serialize import dump, dump_all
from kubescope.constants.enums import Role
from kubescope.controllers.cluster.controller import ClusterController
from kubescope.controllers.cluster.metrics_aggregator import MetricsAggregator

router = APIRouter(prefix="/cluster", tags=["cluster"])

editor = [Depends(require_role(Role.EDITOR))]


@router.get("/namespaces", dependencies=[Depends(require_role(Role.VIEWER))])
async def list_namespaces(
    controller: ClusterController = Depends(get_controller),
) -> dict[str, list[str]]:
    return {"namespaces": await controller.list_namespaces()}


@router.get("/nodes", dependencies=editor)
async def nodes(aggregator: MetricsAggregator = Depends(get_aggregator)) -> dict[str, Any]:
    return dump(await aggregator.get_cluster_snapshot())


@router.get("/pods", dependencies=editor)
async def pods(
    namespace: str | None = None,
    aggregator: MetricsAggregator = Depends(get_aggregator),
) -> dict[str, Any]:
    return dump(await aggregator.list_pod_metrics(namespace))


@router.get("/deployments", dependencies=editor)
async def deployments(
    namespace: str | None = None,
    aggregator: MetricsAggregator = Depends(get_aggregator),
) -> dict[str, Any]:
    items = await aggregator.list_deployment_status(namespace)
    return {"count": len(items), "items": dump_all(items)}


@router.get("/network", dependencies=editor)
async def network(
    namespace: str | None = None,
    aggregator: MetricsAggregator = Depends(get_aggregator),
) -> dict[str, Any]:
    return dump(await aggregator.get_network_overview(namespace))

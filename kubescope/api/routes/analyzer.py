"""Analyzer endpoints: scans, the issues table, and write actions."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from kubescope.api.auth import require_role
from kubescope.api.dependencies import get_controller, get_scanner
from kubescope.api.routes._serialize import dump_all, first_of
from kubescope.constants.defaults import RESOURCE_TYPE_DEFAULT, SCAN_NAMESPACE_DEFAULT
from kubescope.constants.enums import Role
from kubescope.controllers.cluster.controller import ClusterController
from kubescope.controllers.cluster.scanner import ResourceScanner
from kubescope.models.core.resource_row import ScanQuery
from kubescope.utils.time_utils import utc_now

router = APIRouter(prefix="/analyzer", tags=["analyzer"])

viewer = [Depends(require_role(Role.VIEWER))]
editor = [Depends(require_role(Role.EDITOR))]
admin = [Depends(require_role(Role.ADMIN))]


class ScaleRequest(BaseModel):
    # Validated by the controller so bad values map to 400.
    replicas: Any = None


class EditYamlRequest(BaseModel):
    yaml: str | None = None


@router.get("/scan", dependencies=viewer)
async def scan(
    namespace: str = SCAN_NAMESPACE_DEFAULT,
    resource_type: str | None = Query(None, alias="resourceType"),
    type_: str | None = Query(None, alias="type"),
    search: str = "",
    problems_only: bool | None = Query(None, alias="problemsOnly"),
    only: bool | None = None,
    scanner: ResourceScanner = Depends(get_scanner),
) -> dict[str, Any]:
    query = ScanQuery(
        namespace=namespace,
        resource_type=first_of(resource_type, type_, default=RESOURCE_TYPE_DEFAULT),
        search=search,
        problems_only=first_of(problems_only, only, default=False),
    )
    rows = await scanner.scan(query)
    return {
        "namespace": query.namespace,
        "resourceType": query.resource_type,
        "problemsOnly": query.problems_only,
        "count": len(rows),
        "items": dump_all(rows),
    }


@router.get("/problems", dependencies=viewer)
async def problems(
    namespace: str = SCAN_NAMESPACE_DEFAULT,
    search: str = "",
    scanner: ResourceScanner = Depends(get_scanner),
) -> dict[str, Any]:
    scanned_at = utc_now()
    report = await scanner.scan_problems(namespace, search, now=scanned_at)
    return {
        "scannedAt": scanned_at.isoformat(),
        "count": len(report.items),
        "issues": dump_all(report.items),
    }


@router.post("/{namespace}/pods/{name}/restart", dependencies=editor)
async def restart_pod(
    namespace: str,
    name: str,
    controller: ClusterController = Depends(get_controller),
) -> dict[str, Any]:
    return await controller.restart_pod(namespace, name)


@router.post("/{namespace}/deployments/{name}/restart", dependencies=editor)
async def restart_deployment(
    namespace: str,
    name: str,
    controller: ClusterController = Depends(get_controller),
) -> dict[str, Any]:
    return await controller.restart_deployment(namespace, name)


@router.post("/{namespace}/deployments/{name}/scale", dependencies=editor)
async def scale_deployment(
    namespace: str,
    name: str,
    body: ScaleRequest,
    controller: ClusterController = Depends(get_controller),
) -> dict[str, Any]:
    return await controller.scale_deployment(namespace, name, body.replicas)


@router.delete("/{namespace}/pods/{name}", dependencies=admin)
async def delete_pod(
    namespace: str,
    name: str,
    controller: ClusterController = Depends(get_controller),
) -> dict[str, Any]:
    return await controller.delete_pod(namespace, name)


@router.delete("/{namespace}/{kind}/{name}", dependencies=admin)
async def delete_resource(
    namespace: str,
    kind: str,
    name: str,
    controller: ClusterController = Depends(get_controller),
) -> dict[str, Any]:
    return await controller.delete_resource(namespace, kind, name)


@router.get("/{namespace}/secrets/{name}/view", dependencies=admin)
async def view_secret(
    namespace: str,
    name: str,
    controller: ClusterController = Depends(get_controller),
) -> dict[str, Any]:
    return await controller.view_secret(namespace, name)


@router.put("/{namespace}/{kind}/{name}/edit", dependencies=admin)
async def edit_yaml(
    namespace: str,
    kind: str,
    name: str,
    body: EditYamlRequest,
    controller: ClusterController = Depends(get_controller),
) -> dict[str, Any]:
    return await controller.edit_yaml(namespace, kind, name, body.yaml)

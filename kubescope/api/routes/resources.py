"""Resource table and single-object reads."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from kubescope.api.auth import require_role
from kubescope.api.dependencies import get_controller, get_scanner
from kubescope.api.routes._serialize import dump_all, first_of
from kubescope.constants.defaults import RESOURCE_TYPE_DEFAULT, SCAN_NAMESPACE_DEFAULT
from kubescope.constants.enums import Role
from kubescope.constants.limits import MAX_LOG_TAIL_LINES
from kubescope.controllers.cluster.controller import ClusterController
from kubescope.controllers.cluster.scanner import ResourceScanner
from kubescope.models.core.resource_row import ScanQuery

router = APIRouter(
    prefix="/resources",
    tags=["resources"],
    dependencies=[Depends(require_role(Role.VIEWER))],
)


@router.get("")
async def list_resources(
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
    return {"items": dump_all(rows)}


@router.get("/{namespace}/{resource_type}/{name}/details")
async def get_details(
    namespace: str,
    resource_type: str,
    name: str,
    controller: ClusterController = Depends(get_controller),
) -> dict[str, Any]:
    return await controller.get_details(namespace, resource_type, name)


@router.get("/{namespace}/{resource_type}/{name}/yaml", response_class=PlainTextResponse)
async def get_yaml(
    namespace: str,
    resource_type: str,
    name: str,
    controller: ClusterController = Depends(get_controller),
) -> PlainTextResponse:
    text = await controller.get_yaml(namespace, resource_type, name)
    return PlainTextResponse(text, media_type="text/yaml")


@router.get("/{namespace}/{name}/events")
async def get_events(
    namespace: str,
    name: str,
    controller: ClusterController = Depends(get_controller),
) -> list[dict[str, Any]]:
    return await controller.get_events(namespace, name)


@router.get("/{namespace}/{pod}/logs", response_class=PlainTextResponse)
async def get_pod_logs(
    namespace: str,
    pod: str,
    tail_lines: int | None = Query(None, alias="tailLines", ge=1, le=MAX_LOG_TAIL_LINES),
    controller: ClusterController = Depends(get_controller),
) -> PlainTextResponse:
    return PlainTextResponse(await controller.get_logs(namespace, pod, None, tail_lines))


@router.get("/{namespace}/{pod}/{container}/logs", response_class=PlainTextResponse)
async def get_container_logs(
    namespace: str,
    pod: str,
    container: str,
    tail_lines: int | None = Query(None, alias="tailLines", ge=1, le=MAX_LOG_TAIL_LINES),
    controller: ClusterController = Depends(get_controller),
) -> PlainTextResponse:
    return PlainTextResponse(await controller.get_logs(namespace, pod, container, tail_lines))

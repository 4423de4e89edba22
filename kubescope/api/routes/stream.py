"""Live metrics over Server-Sent Events."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from kubescope.api.auth import authenticate
from kubescope.api.dependencies import get_aggregator, get_settings
from kubescope.constants.enums import Role
from kubescope.constants.values import SSE_HEADERS
from kubescope.controllers.cluster.metrics_aggregator import MetricsAggregator
from kubescope.errors import ForbiddenError
from kubescope.models.state.app_settings import AppSettings
from kubescope.streaming.publisher import MetricsStreamPublisher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stream"])


@router.get("/stream")
async def stream_metrics(
    request: Request,
    settings: AppSettings = Depends(get_settings),
    aggregator: MetricsAggregator = Depends(get_aggregator),
) -> StreamingResponse:
    publisher = MetricsStreamPublisher(
        aggregator,
        interval=settings.stream_interval_seconds,
        top_pods_limit=settings.top_pods_limit,
    )

    def _authorize() -> None:
        principal = authenticate(request, settings)
        if not principal.role.allows(Role.VIEWER):
            raise ForbiddenError("Forbidden: requires viewer role")

    publisher.connect(_authorize)
    logger.info("Metrics stream connected from %s", request.client.host if request.client else "-")
    return StreamingResponse(
        publisher.stream(request.is_disconnected),
        media_type="text/event-stream",
        headers=dict(SSE_HEADERS),
    )

"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kubescope import __version__
from kubescope.api.errors import register_exception_handlers
from kubescope.api.routes import api_router
from kubescope.constants.values import API_PREFIX, APP_TITLE
from kubescope.controllers.cluster.controller import ClusterController
from kubescope.controllers.cluster.correlator import EventCorrelator
from kubescope.controllers.cluster.metrics_aggregator import MetricsAggregator
from kubescope.controllers.cluster.scanner import ResourceScanner
from kubescope.gateway.kubectl_gateway import KubectlGateway, open_gateway
from kubescope.models.state.app_settings import AppSettings
from kubescope.models.state.config_manager import ConfigManager

logger = logging.getLogger(__name__)


def _attach_components(app: FastAPI, gateway: KubectlGateway, settings: AppSettings) -> None:
    correlator = EventCorrelator(gateway)
    app.state.gateway = gateway
    app.state.scanner = ResourceScanner(gateway, settings, correlator=correlator)
    app.state.aggregator = MetricsAggregator(gateway, settings)
    app.state.controller = ClusterController(gateway, correlator=correlator)


def create_app(
    settings: AppSettings | None = None,
    gateway: KubectlGateway | None = None,
) -> FastAPI:
    """Build the API app.

    Args:
        settings: Settings to use; loaded from the environment when omitted.
        gateway: Pre-built gateway (tests). When omitted the lifespan opens
            one from ``settings`` and closes it on shutdown.
    """
    if settings is None:
        settings = ConfigManager().load()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = gateway is None
        active = gateway if gateway is not None else await open_gateway(settings)
        _attach_components(app, active, settings)
        logger.info("%s %s ready", APP_TITLE, __version__)
        try:
            yield
        finally:
            if owned:
                await active.close()
            logger.info("%s shut down", APP_TITLE)

    app = FastAPI(title=APP_TITLE, version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix=API_PREFIX)
    return app

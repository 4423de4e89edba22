"""API routers, mounted under ``/api``."""

from fastapi import APIRouter

from kubescope.api.routes import analyzer, cluster, health, resources, stream

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(resources.router)
api_router.include_router(analyzer.router)
api_router.include_router(cluster.router)
api_router.include_router(stream.router)

__all__ = ["api_router"]

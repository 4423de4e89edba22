"""FastAPI dependencies resolving the per-app components."""

from __future__ import annotations

from fastapi import Request

from kubescope.controllers.cluster.controller import ClusterController
from kubescope.controllers.cluster.metrics_aggregator import MetricsAggregator
from kubescope.controllers.cluster.scanner import ResourceScanner
from kubescope.models.state.app_settings import AppSettings


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_scanner(request: Request) -> ResourceScanner:
    return request.app.state.scanner


def get_aggregator(request: Request) -> MetricsAggregator:
    return request.app.state.aggregator


def get_controller(request: Request) -> ClusterController:
    return request.app.state.controller

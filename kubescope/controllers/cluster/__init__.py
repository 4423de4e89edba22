"""Cluster controllers: scanning, metrics and single-object actions."""

from kubescope.controllers.cluster.controller import ClusterController
from kubescope.controllers.cluster.correlator import EventCorrelator, EventIndex
from kubescope.controllers.cluster.metrics_aggregator import MetricsAggregator
from kubescope.controllers.cluster.scanner import ResourceScanner

__all__ = [
    "ClusterController",
    "EventCorrelator",
    "EventIndex",
    "MetricsAggregator",
    "ResourceScanner",
]

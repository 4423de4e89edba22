"""Fetchers for cluster data."""

from kubescope.controllers.cluster.fetchers.event_fetcher import EventFetcher
from kubescope.controllers.cluster.fetchers.metrics_fetcher import (
    MetricsFetcher,
    NodeMetricSample,
)

__all__ = ["EventFetcher", "MetricsFetcher", "NodeMetricSample"]

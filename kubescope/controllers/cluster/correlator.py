"""Event correlation - latest event timestamp per involved object."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from kubescope.constants.values import ALL_SENTINEL
from kubescope.controllers.cluster.fetchers.event_fetcher import EventFetcher
from kubescope.controllers.cluster.parsers.kind_parser import KindParser
from kubescope.errors import SourceUnavailableError
from kubescope.gateway.kubectl_gateway import KubectlGateway
from kubescope.models.core.kind_views import EventView
from kubescope.utils.time_utils import parse_iso_timestamp, utc_now

logger = logging.getLogger(__name__)

EventKey = tuple[str, str, str]
# Events from one fetch scope; the scope is None for a cluster-wide call.
EventBatch = tuple[str | None, list[EventView]]


@dataclass
class EventIndex:
    """``(namespace, kind, name) -> latest timestamp`` for one scan.

    A missing entry is normal: most objects have no recent events.
    """

    entries: dict[EventKey, datetime] = field(default_factory=dict)

    def record(self, key: EventKey, timestamp: datetime) -> None:
        current = self.entries.get(key)
        if current is None or timestamp > current:
            self.entries[key] = timestamp

    def last_seen(self, namespace: str, kind: str, name: str) -> datetime | None:
        return self.entries.get((namespace, kind, name))

    def __len__(self) -> int:
        return len(self.entries)


class EventCorrelator:
    """Builds event indexes and recent-warning lists from core/v1 events."""

    def __init__(
        self,
        gateway: KubectlGateway,
        event_fetcher: EventFetcher | None = None,
        kind_parser: KindParser | None = None,
    ) -> None:
        self._gateway = gateway
        self._event_fetcher = event_fetcher or EventFetcher(gateway.run)
        self._kind_parser = kind_parser or KindParser()

    async def resolve_namespaces(self, namespace: str) -> list[str] | None:
        """Namespaces to fan out over, or None to fall back to one cluster-wide call."""
        if namespace.lower() != ALL_SENTINEL:
            return [namespace]
        try:
            return await self._gateway.list_namespaces()
        except SourceUnavailableError as exc:
            logger.warning("Failed to list namespaces for event correlation: %s", exc)
            return None

    async def _fetch_namespace_events(self, namespace: str | None) -> list[EventView]:
        raw_events = await self._event_fetcher.fetch_events_raw(namespace=namespace)
        return [self._kind_parser.parse_event(raw) for raw in raw_events]

    async def fetch_events(self, namespaces: list[str] | None) -> list[EventBatch]:
        """Fetch events per namespace concurrently; failed namespaces are skipped."""
        if not namespaces:
            try:
                return [(None, await self._fetch_namespace_events(None))]
            except SourceUnavailableError as exc:
                logger.warning("Cluster-wide event fetch failed: %s", exc)
                return []

        async def _fetch_namespace(
            namespace: str,
        ) -> tuple[str, list[EventView], Exception | None]:
            try:
                return namespace, await self._fetch_namespace_events(namespace), None
            except SourceUnavailableError as exc:
                return namespace, [], exc

        results: list[EventBatch] = []
        tasks = [asyncio.create_task(_fetch_namespace(namespace)) for namespace in namespaces]
        try:
            for future in asyncio.as_completed(tasks):
                namespace, events, error = await future
                if error is not None:
                    logger.warning("Namespace event fetch failed for %s: %s", namespace, error)
                    continue
                results.append((namespace, events))
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            if tasks:
                await asyncio.gather(*tasks, return_exceptions=True)
        return results

    @staticmethod
    def _event_key(event: EventView, scope_namespace: str | None) -> EventKey:
        namespace = event.involved_namespace or scope_namespace or event.namespace or ""
        return (namespace, event.involved_kind, event.involved_name)

    def index_events(self, batches: list[EventBatch]) -> EventIndex:
        index = EventIndex()
        for scope_namespace, events in batches:
            for event in events:
                timestamp = parse_iso_timestamp(event.timestamp)
                if timestamp is None:
                    continue
                index.record(self._event_key(event, scope_namespace), timestamp)
        logger.debug("Event index built with %d entries", len(index))
        return index

    async def build_event_index(self, namespaces: list[str] | None) -> EventIndex:
        """Index the latest event timestamp per involved object. Never raises."""
        return self.index_events(await self.fetch_events(namespaces))

    @staticmethod
    def recent_warning_events(
        batches: list[EventBatch],
        max_age_hours: float,
        now: datetime | None = None,
    ) -> list[tuple[EventView, datetime]]:
        """Warning events newer than ``max_age_hours``, newest first."""
        cutoff = (now or utc_now()) - timedelta(hours=max_age_hours)
        recent: list[tuple[EventView, datetime]] = []
        for _, events in batches:
            for event in events:
                if event.event_type != "Warning":
                    continue
                timestamp = parse_iso_timestamp(event.timestamp)
                if timestamp is None or timestamp < cutoff:
                    continue
                recent.append((event, timestamp))
        recent.sort(key=lambda pair: pair[1], reverse=True)
        return recent

    async def object_events(self, namespace: str, name: str) -> list[dict[str, Any]]:
        """Events for one object, newest first, shaped for the details view."""
        raw_events = await self._event_fetcher.fetch_object_events_raw(namespace, name)
        events = []
        for raw in raw_events:
            event = self._kind_parser.parse_event(raw)
            events.append(
                {
                    "type": event.event_type,
                    "reason": event.reason,
                    "message": event.message,
                    "count": event.count,
                    "lastTimestamp": event.timestamp,
                    "involvedObject": {
                        "kind": event.involved_kind,
                        "name": event.involved_name,
                        "namespace": event.involved_namespace,
                    },
                }
            )
        events.sort(key=lambda item: item["lastTimestamp"] or "", reverse=True)
        return events

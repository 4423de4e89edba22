"""Resource scanner - lists, classifies and filters rows across kinds."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, cast

from kubescope.constants.defaults import SCAN_NAMESPACE_DEFAULT
from kubescope.constants.enums import ResourceKind, Severity
from kubescope.constants.limits import MAX_EVENT_MESSAGE_LENGTH
from kubescope.constants.values import EVENT_KIND_PREFIX
from kubescope.controllers.base.base_controller import BaseController, FetchResult, run_fetch
from kubescope.controllers.cluster.classifiers import (
    PROBLEM_RULES,
    SCAN_RULES,
    Classifier,
    ClassifierContext,
    status_for,
)
from kubescope.controllers.cluster.correlator import EventBatch, EventCorrelator, EventIndex
from kubescope.controllers.cluster.parsers.kind_parser import KindParser
from kubescope.controllers.cluster.parsers.node_parser import NodeParser
from kubescope.gateway.kubectl_gateway import KubectlGateway
from kubescope.gateway.resource_kinds import KindSpec, kind_rank, resolve_scan_kinds
from kubescope.models.core.kind_views import PodView, ServiceView
from kubescope.models.core.resource_row import FetchFailure, ResourceRow, ScanQuery, ScanReport
from kubescope.models.state.app_settings import AppSettings
from kubescope.utils.payload import object_name, object_namespace
from kubescope.utils.time_utils import format_age, utc_now

logger = logging.getLogger(__name__)

EndpointCounts = dict[tuple[str, str], int]


def sort_rows(rows: list[ResourceRow]) -> list[ResourceRow]:
    """Order by kind rank, then namespace, then name."""
    return sorted(rows, key=lambda row: (kind_rank(row.kind), row.namespace, row.name))


def matches_search(name: str, search: str) -> bool:
    return not search or search.lower() in (name or "").lower()


class ResourceScanner(BaseController):
    """Builds ``ResourceRow`` lists for the resource table and the analyzer.

    Kind lists, the endpoints lookup and the event fetch run concurrently.
    A failed list contributes no rows and is reported in
    ``ScanReport.failures`` instead of failing the scan.
    """

    SOURCE_ENDPOINTS = "endpoints"

    def __init__(
        self,
        gateway: KubectlGateway,
        settings: AppSettings | None = None,
        correlator: EventCorrelator | None = None,
        kind_parser: KindParser | None = None,
    ) -> None:
        super().__init__(gateway)
        self._settings = settings or AppSettings()
        self._node_parser = NodeParser()
        self._kind_parser = kind_parser or KindParser(self._node_parser)
        self._correlator = correlator or EventCorrelator(gateway, kind_parser=self._kind_parser)

    async def check_connection(self) -> bool:
        return await self._gateway.check_connection()

    def _context(self, now: datetime | None = None) -> ClassifierContext:
        return ClassifierContext(
            now=now or utc_now(),
            pending_warning_minutes=self._settings.pending_warning_minutes,
            high_restart_threshold=self._settings.high_restart_threshold,
        )

    async def _event_batches(self, namespace: str) -> list[EventBatch]:
        namespaces = await self._correlator.resolve_namespaces(namespace)
        return await self._correlator.fetch_events(namespaces)

    async def _list_kind(self, spec: KindSpec, namespace: str) -> FetchResult[list[dict[str, Any]]]:
        return await run_fetch(
            spec.resource,
            self._gateway.list(spec.resource, namespace),
            namespace=namespace,
        )

    async def _endpoint_counts(self, namespace: str) -> FetchResult[EndpointCounts]:
        async def _count() -> EndpointCounts:
            items = await self._gateway.list("endpoints", namespace)
            return {
                (object_namespace(item) or "", object_name(item) or ""): self._kind_parser.count_ready_addresses(item)
                for item in items
            }

        return await run_fetch(self.SOURCE_ENDPOINTS, _count(), namespace=namespace)

    def _build_row(
        self,
        spec: KindSpec,
        raw: dict[str, Any],
        *,
        rules: Mapping[ResourceKind, Classifier],
        context: ClassifierContext,
        index: EventIndex,
        endpoints: EndpointCounts | None,
    ) -> ResourceRow:
        kind = cast(ResourceKind, spec.kind)
        view = self._kind_parser.parse(kind, raw)
        if isinstance(view, ServiceView) and endpoints is not None:
            view = view.model_copy(
                update={"ready_addresses": endpoints.get((view.meta.namespace or "", view.meta.name), 0)}
            )
        classification = rules[kind](view, context)
        namespace = view.meta.namespace or "default"

        details: dict[str, Any] | None = None
        node_name = None
        if isinstance(view, PodView):
            node_name = view.node_name
            details = {"restarts": view.restart_count, "podIP": view.pod_ip}
        elif kind is ResourceKind.NODE:
            details = self._node_parser.parse_node_details(raw)

        return ResourceRow(
            kind=kind.value,
            name=view.meta.name,
            namespace=namespace,
            status=status_for(view),
            age=format_age(view.meta.creation_timestamp, context.now),
            issue=classification.issue,
            severity=classification.severity,
            last_seen=index.last_seen(namespace, kind.value, view.meta.name),
            node_name=node_name,
            details=details,
        )

    async def _scan(
        self,
        query: ScanQuery,
        rules: Mapping[ResourceKind, Classifier],
        now: datetime | None,
    ) -> tuple[ScanReport, list[EventBatch]]:
        specs = resolve_scan_kinds(query.resource_type)
        context = self._context(now)
        want_endpoints = rules is PROBLEM_RULES and any(
            spec.kind is ResourceKind.SERVICE for spec in specs
        )

        kind_results, batches, endpoints_result = await asyncio.gather(
            asyncio.gather(*(self._list_kind(spec, query.namespace) for spec in specs)),
            self._event_batches(query.namespace),
            self._endpoint_counts(query.namespace) if want_endpoints else _no_fetch(),
        )
        index = self._correlator.index_events(batches)

        fetch_results: list[FetchResult[Any]] = list(kind_results)
        endpoints: EndpointCounts | None = None
        if endpoints_result is not None:
            fetch_results.append(endpoints_result)
            endpoints = endpoints_result.data if endpoints_result.success else None

        rows: list[ResourceRow] = []
        for spec, result in zip(specs, kind_results):
            if not result.success:
                continue
            for raw in result.data or []:
                name = self._kind_parser.parse_meta(raw).name
                if not matches_search(name, query.search):
                    continue
                row = self._build_row(
                    spec,
                    raw,
                    rules=rules,
                    context=context,
                    index=index,
                    endpoints=endpoints,
                )
                if query.problems_only and not row.issue:
                    continue
                rows.append(row)

        failures = [
            FetchFailure(source=result.source, namespace=result.namespace, error=result.error or "")
            for result in fetch_results
            if not result.success
        ]
        return ScanReport(items=sort_rows(rows), failures=failures), batches

    async def scan_report(
        self,
        query: ScanQuery,
        *,
        rules: Mapping[ResourceKind, Classifier] = SCAN_RULES,
        now: datetime | None = None,
    ) -> ScanReport:
        """Scan and return both the rows and the per-source failures.

        Raises:
            BadRequestError: When ``query.resource_type`` is not supported.
        """
        report, _ = await self._scan(query, rules, now)
        if report.partial:
            logger.warning(
                "Scan of %s/%s completed with %d failed source(s)",
                query.namespace,
                query.resource_type,
                len(report.failures),
            )
        return report

    async def scan(self, query: ScanQuery, *, now: datetime | None = None) -> list[ResourceRow]:
        """Rows for the resource table. Per-kind failures contribute no rows."""
        report = await self.scan_report(query, now=now)
        return report.items

    async def scan_problems(
        self,
        namespace: str = SCAN_NAMESPACE_DEFAULT,
        search: str = "",
        *,
        now: datetime | None = None,
    ) -> ScanReport:
        """Analyzer issues table: problem rules plus recent warning events."""
        now = now or utc_now()
        query = ScanQuery(namespace=namespace, search=search, problems_only=True)
        report, batches = await self._scan(query, PROBLEM_RULES, now)
        event_rows = self._warning_event_rows(batches, query.search, now)
        return ScanReport(
            items=sort_rows([*report.items, *event_rows]),
            failures=report.failures,
        )

    def _warning_event_rows(
        self,
        batches: list[EventBatch],
        search: str,
        now: datetime,
    ) -> list[ResourceRow]:
        events = self._correlator.recent_warning_events(
            batches, self._settings.event_age_hours, now
        )
        rows: list[ResourceRow] = []
        seen: set[tuple[str, str, str]] = set()
        for event, timestamp in events:
            name = event.involved_name
            if not matches_search(name, search):
                continue
            reason = event.reason or "Warning"
            namespace = event.involved_namespace or event.namespace or "default"
            key = (reason, namespace, name)
            # Newest first, so the first occurrence per key wins.
            if key in seen:
                continue
            seen.add(key)
            rows.append(
                ResourceRow(
                    kind=f"{EVENT_KIND_PREFIX}{reason}",
                    name=name,
                    namespace=namespace,
                    status=event.involved_kind or "Event",
                    age=format_age(timestamp, now),
                    issue=_truncate(event.message) or reason,
                    severity=Severity.WARNING,
                    last_seen=timestamp,
                )
            )
        return rows


async def _no_fetch() -> None:
    return None


def _truncate(message: str) -> str:
    if len(message) <= MAX_EVENT_MESSAGE_LENGTH:
        return message
    return message[: MAX_EVENT_MESSAGE_LENGTH - 3].rstrip() + "..."

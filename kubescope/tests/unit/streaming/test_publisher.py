"""Tests for the metrics SSE publisher."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from kubescope.constants.enums import StreamState
from kubescope.errors import ForbiddenError, UnauthorizedError
from kubescope.gateway.kubectl_gateway import KubectlError
from kubescope.models.core.cluster_snapshot import (
    ClusterOverview,
    ClusterSnapshot,
    NodeUsage,
    PodMetric,
)
from kubescope.streaming.publisher import MetricsStreamPublisher, StreamStateError, format_sse


def _parse_frame(frame: str) -> tuple[str, dict[str, Any]]:
    event_line, data_line, *_ = frame.split("\n")
    return event_line.removeprefix("event: "), json.loads(data_line.removeprefix("data: "))


def _overview() -> ClusterOverview:
    return ClusterOverview(
        cluster=ClusterSnapshot(node_count=1, ready_count=1, total_cpu_cores=1.5, metrics_available=True),
        nodes=[NodeUsage(name="node-a", ready=True, cpu_cores=1.5, memory_bytes=1024.0)],
    )


class TestFormatSse:
    """Tests for format_sse function."""

    def test_frame_layout(self) -> None:
        """Frames are an event line, a data line and a blank line."""
        assert format_sse("metrics", {"a": 1}) == 'event: metrics\ndata: {"a": 1}\n\n'


class TestMetricsStreamPublisher:
    """Tests for MetricsStreamPublisher class."""

    @pytest.fixture
    def aggregator(self) -> MagicMock:
        aggregator = MagicMock()
        aggregator.get_cluster_snapshot = AsyncMock(return_value=_overview())
        aggregator.get_top_pods = AsyncMock(
            return_value=[PodMetric(namespace="prod", name="api-1", cpu_cores=0.5, memory_bytes=10.0)]
        )
        return aggregator

    @pytest.fixture
    def sleep(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def publisher(self, aggregator: MagicMock, sleep: AsyncMock) -> MetricsStreamPublisher:
        return MetricsStreamPublisher(
            aggregator, interval=5.0, top_pods_limit=10, sleep=sleep, clock=lambda: 1714564800.5
        )

    @pytest.mark.asyncio
    async def test_first_frame_is_immediate(
        self, publisher: MetricsStreamPublisher, sleep: AsyncMock
    ) -> None:
        """The first frame is sent before any sleep."""
        stream = publisher.stream()

        frame = await stream.__anext__()

        sleep.assert_not_awaited()
        event, data = _parse_frame(frame)
        assert event == "metrics"
        assert data["ts"] == 1714564800500
        assert data["cluster"]["nodeCount"] == 1
        assert data["cluster"]["metricsAvailable"] is True
        assert data["nodes"][0]["cpuCores"] == 1.5
        assert data["topPods"][0]["name"] == "api-1"
        assert publisher.state is StreamState.STREAMING
        await stream.aclose()
        assert publisher.state is StreamState.CLOSED

    @pytest.mark.asyncio
    async def test_ticks_on_interval_until_disconnect(
        self, publisher: MetricsStreamPublisher, sleep: AsyncMock, aggregator: MagicMock
    ) -> None:
        """Frames repeat every interval and stop when the client disconnects."""
        disconnected = AsyncMock(side_effect=[False, False, False, True])

        frames = [frame async for frame in publisher.stream(disconnected)]

        assert len(frames) == 3
        assert publisher.frames_sent == 3
        assert [call.args[0] for call in sleep.await_args_list] == [5.0, 5.0, 5.0]
        aggregator.get_top_pods.assert_awaited_with(10)
        assert publisher.state is StreamState.CLOSED

    @pytest.mark.asyncio
    async def test_failed_cycle_sends_error_frame_and_continues(
        self, publisher: MetricsStreamPublisher, aggregator: MagicMock
    ) -> None:
        """A failed cycle becomes an error frame; the next cycle recovers."""
        aggregator.get_cluster_snapshot.side_effect = [KubectlError("connection refused"), _overview()]
        disconnected = AsyncMock(side_effect=[False, False, True])

        frames = [frame async for frame in publisher.stream(disconnected)]

        first_event, first_data = _parse_frame(frames[0])
        assert first_event == "error"
        assert first_data == {"message": "stream error", "error": "connection refused"}
        assert _parse_frame(frames[1])[0] == "metrics"

    @pytest.mark.asyncio
    async def test_unexpected_error_also_becomes_error_frame(
        self, publisher: MetricsStreamPublisher, aggregator: MagicMock
    ) -> None:
        """Programming errors are logged and reported as error frames."""
        aggregator.get_top_pods.side_effect = ValueError("bad data")

        frame = await publisher.next_frame()

        assert _parse_frame(frame) == ("error", {"message": "stream error", "error": "bad data"})

    @pytest.mark.parametrize("error", [UnauthorizedError("Missing token"), ForbiddenError("Invalid token")])
    @pytest.mark.asyncio
    async def test_rejected_connection(self, publisher: MetricsStreamPublisher, error: Exception) -> None:
        """Rejected credentials end in REJECTED and never stream."""

        def _authorize() -> None:
            raise error

        with pytest.raises(type(error)):
            publisher.connect(_authorize)

        assert publisher.state is StreamState.REJECTED
        with pytest.raises(StreamStateError):
            await publisher.stream().__anext__()

    def test_accepted_connection(self, publisher: MetricsStreamPublisher) -> None:
        """A successful authorization returns its value and stays CONNECTING."""
        assert publisher.connect(lambda: "principal") == "principal"
        assert publisher.state is StreamState.CONNECTING

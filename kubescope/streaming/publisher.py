"""Server-Sent-Events publisher for live cluster metrics.

One publisher serves one connection and walks
``CONNECTING -> STREAMING -> CLOSED``. A connection whose credentials are
rejected goes to ``REJECTED`` and never streams. Sleep and clock are
injectable so tests can drive the ticker without waiting.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, TypeVar

from kubescope.constants.enums import StreamState
from kubescope.constants.timeouts import STREAM_INTERVAL_SECONDS
from kubescope.constants.values import SSE_EVENT_ERROR, SSE_EVENT_METRICS
from kubescope.controllers.cluster.metrics_aggregator import MetricsAggregator
from kubescope.errors import ForbiddenError, SourceUnavailableError, UnauthorizedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]
ClockFunc = Callable[[], float]
DisconnectCheck = Callable[[], Awaitable[bool]]


def format_sse(event: str, data: Any) -> str:
    """Encode one SSE frame."""
    return f"event: {event}\ndata: {json.dumps(data, default=str)}\n\n"


class StreamStateError(RuntimeError):
    """Raised when the publisher is driven out of order."""


class MetricsStreamPublisher:
    """Pushes a metrics frame immediately and then every ``interval`` seconds."""

    def __init__(
        self,
        aggregator: MetricsAggregator,
        *,
        interval: float = STREAM_INTERVAL_SECONDS,
        top_pods_limit: int | None = None,
        sleep: SleepFunc = asyncio.sleep,
        clock: ClockFunc = time.time,
    ) -> None:
        self._aggregator = aggregator
        self._interval = interval
        self._top_pods_limit = top_pods_limit
        self._sleep = sleep
        self._clock = clock
        self.state = StreamState.CONNECTING
        self.frames_sent = 0

    def connect(self, authorize: Callable[[], T]) -> T:
        """Run the credential check; a rejection is terminal.

        Raises:
            UnauthorizedError: Missing token.
            ForbiddenError: Invalid token or role.
        """
        if self.state is not StreamState.CONNECTING:
            raise StreamStateError(f"Cannot connect from state {self.state.value}")
        try:
            return authorize()
        except (UnauthorizedError, ForbiddenError):
            self.state = StreamState.REJECTED
            raise

    async def build_payload(self) -> dict[str, Any]:
        overview, top_pods = await asyncio.gather(
            self._aggregator.get_cluster_snapshot(),
            self._aggregator.get_top_pods(self._top_pods_limit),
        )
        return {
            "ts": int(self._clock() * 1000),
            "cluster": overview.cluster.model_dump(by_alias=True, mode="json"),
            "nodes": [node.model_dump(by_alias=True, mode="json") for node in overview.nodes],
            "topPods": [pod.model_dump(by_alias=True, mode="json") for pod in top_pods],
        }

    async def next_frame(self) -> str:
        """Build one frame. A failed cycle becomes an error frame."""
        try:
            payload = await self.build_payload()
        except SourceUnavailableError as exc:
            logger.warning("Metrics stream cycle failed: %s", exc)
            return format_sse(SSE_EVENT_ERROR, {"message": "stream error", "error": str(exc)})
        except Exception as exc:
            logger.exception("Unexpected error in metrics stream cycle")
            return format_sse(SSE_EVENT_ERROR, {"message": "stream error", "error": str(exc)})
        return format_sse(SSE_EVENT_METRICS, payload)

    async def stream(self, is_disconnected: DisconnectCheck | None = None) -> AsyncIterator[str]:
        """Yield frames until the client goes away."""
        if self.state is not StreamState.CONNECTING:
            raise StreamStateError(f"Cannot stream from state {self.state.value}")
        self.state = StreamState.STREAMING
        logger.debug("Metrics stream opened")
        try:
            while True:
                if is_disconnected is not None and await is_disconnected():
                    break
                yield await self.next_frame()
                self.frames_sent += 1
                await self._sleep(self._interval)
        finally:
            self.state = StreamState.CLOSED
            logger.debug("Metrics stream closed after %d frame(s)", self.frames_sent)

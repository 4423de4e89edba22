"""Server-Sent-Events streaming."""

from kubescope.streaming.publisher import MetricsStreamPublisher, StreamStateError, format_sse

__all__ = ["MetricsStreamPublisher", "StreamStateError", "format_sse"]

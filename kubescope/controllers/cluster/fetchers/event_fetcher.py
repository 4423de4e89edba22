"""Event fetcher for the cluster controllers - fetches core/v1 events."""

from __future__ import annotations

import json
import logging
from typing import Any

from kubescope.constants.limits import EVENT_CHUNK_SIZE
from kubescope.constants.timeouts import CLUSTER_REQUEST_TIMEOUT, EVENT_RETRY_REQUEST_TIMEOUT
from kubescope.gateway.kubectl_gateway import KubectlError, RunKubectlFunc
from kubescope.utils.payload import dict_items

logger = logging.getLogger(__name__)


class EventFetcher:
    """Fetches event data from Kubernetes cluster."""

    _EVENT_QUERY_TIMEOUT = CLUSTER_REQUEST_TIMEOUT
    _RETRY_EVENT_QUERY_TIMEOUT = EVENT_RETRY_REQUEST_TIMEOUT
    _TIMEOUT_ERROR_TOKENS = (
        "timed out",
        "timeout",
        "deadline exceeded",
        "i/o timeout",
        "context deadline exceeded",
    )

    def __init__(self, run_kubectl_func: RunKubectlFunc) -> None:
        """Initialize with kubectl runner function.

        Args:
            run_kubectl_func: Async function to run kubectl commands
        """
        self._run_kubectl = run_kubectl_func

    @classmethod
    def _is_timeout_error(cls, error: Exception) -> bool:
        """Return True when error indicates timeout-like failure."""
        message = str(error).lower()
        return any(token in message for token in cls._TIMEOUT_ERROR_TOKENS)

    @staticmethod
    def _build_events_args(
        *,
        request_timeout: str,
        namespace: str | None = None,
    ) -> tuple[str, ...]:
        """Build event query arguments for all namespaces or one namespace."""
        args: list[str] = ["get", "events"]
        if namespace:
            args.extend(["-n", namespace])
        else:
            args.append("--all-namespaces")
        args.extend(
            [
                f"--chunk-size={EVENT_CHUNK_SIZE}",
                "-o",
                "json",
                f"--request-timeout={request_timeout}",
            ]
        )
        return tuple(args)

    @staticmethod
    def _build_object_events_args(
        *,
        namespace: str,
        name: str,
        request_timeout: str,
    ) -> tuple[str, ...]:
        return (
            "get",
            "events",
            "-n",
            namespace,
            f"--field-selector=involvedObject.name={name}",
            "-o",
            "json",
            f"--request-timeout={request_timeout}",
        )

    def _timeout_plan(self, request_timeout: str | None) -> list[str]:
        plan: list[str] = []
        for timeout in (
            request_timeout or self._EVENT_QUERY_TIMEOUT,
            CLUSTER_REQUEST_TIMEOUT,
            self._RETRY_EVENT_QUERY_TIMEOUT,
        ):
            if timeout not in plan:
                plan.append(timeout)
        return plan

    async def _run_with_retries(self, build_args: Any, request_timeout: str | None, scope: str) -> str:
        timeout_plan = self._timeout_plan(request_timeout)
        for attempt, timeout in enumerate(timeout_plan, start=1):
            try:
                return await self._run_kubectl(build_args(timeout))
            except Exception as exc:
                is_retryable = self._is_timeout_error(exc)
                has_next_attempt = attempt < len(timeout_plan)
                if is_retryable and has_next_attempt:
                    logger.warning(
                        "Event fetch timed out (attempt %s/%s with %s, namespace=%s), retrying",
                        attempt,
                        len(timeout_plan),
                        timeout,
                        scope,
                    )
                    continue
                raise
        return ""

    @staticmethod
    def _decode_items(output: str) -> list[dict[str, Any]]:
        if not output:
            return []
        try:
            data = json.loads(output)
        except json.JSONDecodeError as exc:
            raise KubectlError(f"Error parsing events JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise KubectlError(f"Unexpected events payload: {type(data).__name__}")
        return dict_items(data.get("items"))

    async def fetch_events_raw(
        self,
        *,
        namespace: str | None = None,
        request_timeout: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch raw events for all namespaces or a single namespace.

        Raises:
            KubectlError: When every attempt in the timeout plan failed.
        """
        output = await self._run_with_retries(
            lambda timeout: self._build_events_args(
                request_timeout=timeout,
                namespace=namespace,
            ),
            request_timeout,
            namespace or "all",
        )
        return self._decode_items(output)

    async def fetch_object_events_raw(
        self,
        namespace: str,
        name: str,
        *,
        request_timeout: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch events whose involvedObject is ``namespace/name``."""
        output = await self._run_with_retries(
            lambda timeout: self._build_object_events_args(
                namespace=namespace,
                name=name,
                request_timeout=timeout,
            ),
            request_timeout,
            namespace,
        )
        return self._decode_items(output)

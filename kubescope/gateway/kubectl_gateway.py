"""Cluster API gateway backed by the kubectl CLI.

Every call runs ``kubectl`` in a worker thread via ``asyncio.to_thread`` and
asks for JSON output. A per-gateway semaphore bounds how many kubectl
processes run at once. The gateway holds no caches, so concurrent requests
never share mutable state.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import subprocess
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import Any

from kubescope.constants.limits import MAX_CONCURRENT_REQUESTS, MAX_LOG_TAIL_LINES
from kubescope.constants.timeouts import (
    CLUSTER_CHECK_TIMEOUT,
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
    SEMAPHORE_ACQUIRE_TIMEOUT,
)
from kubescope.constants.values import ALL_SENTINEL
from kubescope.errors import BadRequestError, SourceUnavailableError
from kubescope.gateway.resource_kinds import CLUSTER_SCOPED_RESOURCES
from kubescope.models.state.app_settings import AppSettings
from kubescope.utils.payload import dict_items, object_name

logger = logging.getLogger(__name__)

RunKubectlFunc = Callable[..., Awaitable[str]]

_METRICS_API_PATH = "/apis/metrics.k8s.io/v1beta1"
_PATCH_TYPES = frozenset({"merge", "json", "strategic"})


class KubectlError(SourceUnavailableError):
    """A kubectl invocation failed, timed out or returned unusable output."""

    def __init__(self, message: str, args: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.command_args = args

    @property
    def not_found(self) -> bool:
        return "notfound" in str(self).lower().replace(" ", "")


class KubectlGateway:
    """List/get/patch/delete access to the cluster, grouped behind one object.

    Args:
        context: Optional kubeconfig context name.
        kubectl_binary: Executable to run.
        request_timeout: Value for ``--request-timeout`` on read calls.
        command_timeout: Process-level timeout in seconds.
        max_concurrent: Upper bound on concurrent kubectl processes.
        run_kubectl_func: Async ``(args, stdin=None) -> str`` runner. Tests
            inject a fake here; production uses a threaded subprocess.
    """

    def __init__(
        self,
        context: str | None = None,
        *,
        kubectl_binary: str = "kubectl",
        request_timeout: str = CLUSTER_REQUEST_TIMEOUT,
        command_timeout: int = KUBECTL_COMMAND_TIMEOUT,
        max_concurrent: int = MAX_CONCURRENT_REQUESTS,
        run_kubectl_func: RunKubectlFunc | None = None,
    ) -> None:
        self.context = context
        self.request_timeout = request_timeout
        self._kubectl_binary = kubectl_binary
        self._command_timeout = command_timeout
        self._semaphore = asyncio.Semaphore(max(1, max_concurrent))
        self._run_kubectl: RunKubectlFunc = run_kubectl_func or self._run_kubectl_threaded
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Process execution
    # ------------------------------------------------------------------

    @staticmethod
    def _request_timeout_seconds(args: tuple[str, ...]) -> int | None:
        """Parse kubectl --request-timeout value (seconds) from args."""
        prefix = "--request-timeout="
        for part in args:
            if not part.startswith(prefix):
                continue
            value = part[len(prefix):].strip().lower()
            if value.endswith("s"):
                value = value[:-1]
            if not value:
                return None
            with suppress(ValueError):
                seconds = float(value)
                if seconds > 0:
                    return max(1, math.ceil(seconds))
        return None

    def _kubectl_timeout_for_args(self, args: tuple[str, ...]) -> int:
        """Process timeout: always longer than the request timeout it wraps."""
        request_timeout_seconds = self._request_timeout_seconds(args)
        if request_timeout_seconds is None:
            return self._command_timeout
        return max(self._command_timeout, request_timeout_seconds + 10)

    def _run_kubectl_sync(self, args: tuple[str, ...], stdin: str | None = None) -> str:
        """Run a kubectl command synchronously (thread-safe wrapper target)."""
        cmd = [self._kubectl_binary]
        if self.context:
            cmd.extend(["--context", self.context])
        cmd.extend(args)
        result = subprocess.run(
            cmd,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=self._kubectl_timeout_for_args(args),
        )
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise RuntimeError(stderr or "kubectl command failed")
        return result.stdout

    async def _run_kubectl_threaded(self, args: tuple[str, ...], stdin: str | None = None) -> str:
        return await asyncio.to_thread(self._run_kubectl_sync, args, stdin)

    async def run(self, args: tuple[str, ...], *, stdin: str | None = None) -> str:
        """Run one kubectl command under the concurrency bound.

        Raises:
            KubectlError: On any failure, including process timeouts.
        """
        if self._closed:
            raise KubectlError("Gateway is closed", args)
        try:
            await asyncio.wait_for(self._semaphore.acquire(), timeout=SEMAPHORE_ACQUIRE_TIMEOUT)
        except asyncio.TimeoutError as exc:
            raise KubectlError("Timed out waiting for a kubectl slot", args) from exc
        try:
            if stdin is None:
                return await self._run_kubectl(args)
            return await self._run_kubectl(args, stdin=stdin)
        except KubectlError:
            raise
        except subprocess.TimeoutExpired as exc:
            raise KubectlError(f"kubectl timed out after {exc.timeout}s", args) from exc
        except Exception as exc:
            raise KubectlError(str(exc) or type(exc).__name__, args) from exc
        finally:
            self._semaphore.release()

    async def _run_json(self, args: tuple[str, ...], *, stdin: str | None = None) -> dict[str, Any]:
        output = await self.run(args, stdin=stdin)
        if not output.strip():
            return {}
        try:
            data = json.loads(output)
        except json.JSONDecodeError as exc:
            raise KubectlError(f"Invalid JSON from kubectl: {exc}", args) from exc
        if not isinstance(data, dict):
            raise KubectlError("Unexpected kubectl output shape", args)
        return data

    # ------------------------------------------------------------------
    # Argument builders
    # ------------------------------------------------------------------

    @staticmethod
    def _scope_args(resource: str, namespace: str | None) -> list[str]:
        if resource in CLUSTER_SCOPED_RESOURCES:
            return []
        if namespace is None or namespace.lower() == ALL_SENTINEL:
            return ["-A"]
        return ["-n", namespace]

    def _read_args(self, *parts: str) -> tuple[str, ...]:
        return (*parts, "-o", "json", f"--request-timeout={self.request_timeout}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list(self, resource: str, namespace: str | None = None) -> list[dict[str, Any]]:
        """List ``resource`` in one namespace, or cluster-wide for None/"all"."""
        data = await self._run_json(
            self._read_args("get", resource, *self._scope_args(resource, namespace))
        )
        return dict_items(data.get("items"))

    async def get(self, resource: str, namespace: str | None, name: str) -> dict[str, Any]:
        scope = [] if resource in CLUSTER_SCOPED_RESOURCES or not namespace else ["-n", namespace]
        return await self._run_json(self._read_args("get", resource, name, *scope))

    async def list_namespaces(self) -> list[str]:
        items = await self.list("namespaces")
        names = (object_name(item) for item in items)
        return sorted(name.strip() for name in names if name and name.strip())

    async def list_metrics(self, kind: str, namespace: str | None = None) -> list[dict[str, Any]]:
        """List metrics.k8s.io usage for ``"nodes"`` or ``"pods"``."""
        if kind == "nodes":
            path = f"{_METRICS_API_PATH}/nodes"
        elif kind == "pods":
            if namespace and namespace.lower() != ALL_SENTINEL:
                path = f"{_METRICS_API_PATH}/namespaces/{namespace}/pods"
            else:
                path = f"{_METRICS_API_PATH}/pods"
        else:
            raise BadRequestError(f"Unsupported metrics kind: {kind}", value=kind)
        data = await self._run_json(
            ("get", "--raw", path, f"--request-timeout={self.request_timeout}")
        )
        return dict_items(data.get("items"))

    async def pod_logs(
        self,
        namespace: str,
        pod: str,
        container: str | None = None,
        tail_lines: int | None = None,
    ) -> str:
        args = ["logs", pod, "-n", namespace]
        if container:
            args.extend(["-c", container])
        if tail_lines is not None:
            args.append(f"--tail={max(1, min(tail_lines, MAX_LOG_TAIL_LINES))}")
        args.append(f"--request-timeout={self.request_timeout}")
        return await self.run(tuple(args))

    async def check_connection(self) -> bool:
        """Return True when the API server answers its readiness probe."""
        try:
            await asyncio.wait_for(
                self.run(("get", "--raw", "/readyz", f"--request-timeout={self.request_timeout}")),
                timeout=CLUSTER_CHECK_TIMEOUT,
            )
        except (KubectlError, asyncio.TimeoutError) as exc:
            logger.warning("Cluster connection check failed: %s", exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def patch(
        self,
        resource: str,
        namespace: str | None,
        name: str,
        patch: dict[str, Any] | list[Any],
        patch_type: str = "merge",
    ) -> dict[str, Any]:
        if patch_type not in _PATCH_TYPES:
            raise BadRequestError(f"Unsupported patch type: {patch_type}", value=patch_type)
        scope = ["-n", namespace] if namespace and resource not in CLUSTER_SCOPED_RESOURCES else []
        return await self._run_json(
            (
                "patch",
                resource,
                name,
                *scope,
                "--type",
                patch_type,
                "-p",
                json.dumps(patch),
                "-o",
                "json",
            )
        )

    async def delete(self, resource: str, namespace: str | None, name: str) -> str:
        scope = ["-n", namespace] if namespace and resource not in CLUSTER_SCOPED_RESOURCES else []
        output = await self.run(("delete", resource, name, *scope, "--wait=false"))
        logger.info("Deleted %s %s/%s", resource, namespace or "-", name)
        return output.strip()

    async def replace(self, manifest: dict[str, Any]) -> dict[str, Any]:
        """Replace an object with ``manifest`` (fed to ``kubectl replace -f -``)."""
        return await self._run_json(
            ("replace", "-f", "-", "-o", "json"),
            stdin=json.dumps(manifest),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Refuse further calls. Processes already running finish on their own timeout."""
        self._closed = True


async def open_gateway(
    settings: AppSettings,
    *,
    run_kubectl_func: RunKubectlFunc | None = None,
    verify: bool = True,
) -> KubectlGateway:
    """Build a gateway from settings and optionally probe the cluster once."""
    gateway = KubectlGateway(
        settings.kube_context,
        kubectl_binary=settings.kubectl_binary,
        request_timeout=settings.request_timeout,
        command_timeout=settings.command_timeout_seconds,
        max_concurrent=settings.max_concurrent_requests,
        run_kubectl_func=run_kubectl_func,
    )
    if verify:
        if await gateway.check_connection():
            logger.info("Connected to cluster (context=%s)", settings.kube_context or "current")
        else:
            logger.warning(
                "Cluster is not reachable yet (context=%s); requests will fail until it is",
                settings.kube_context or "current",
            )
    return gateway


__all__ = ["KubectlError", "KubectlGateway", "RunKubectlFunc", "open_gateway"]

"""Base controller shared by the cluster-facing controllers.

Controllers receive the gateway explicitly and wrap each independent fetch
in a ``FetchResult`` so orchestrators can fold partial failures instead of
aborting the whole request.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

from kubescope.errors import SourceUnavailableError
from kubescope.gateway.kubectl_gateway import KubectlGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class FetchResult(Generic[T]):
    """Result wrapper for one independent fetch."""

    source: str
    success: bool
    data: T | None = None
    error: str | None = None
    namespace: str | None = None


async def run_fetch(
    source: str,
    awaitable: Awaitable[T],
    *,
    namespace: str | None = None,
) -> FetchResult[T]:
    """Await ``awaitable`` and capture a source failure as a failed result."""
    try:
        data = await awaitable
    except SourceUnavailableError as exc:
        logger.warning("Fetch of %s failed (namespace=%s): %s", source, namespace or "all", exc)
        return FetchResult(
            source=source,
            success=False,
            error=str(exc),
            namespace=namespace,
        )
    return FetchResult(
        source=source,
        success=True,
        data=data,
        namespace=namespace,
    )


class BaseController(ABC):
    """Base class for controllers that read the cluster through a gateway."""

    def __init__(self, gateway: KubectlGateway) -> None:
        self._gateway = gateway

    @property
    def gateway(self) -> KubectlGateway:
        return self._gateway

    @abstractmethod
    async def check_connection(self) -> bool:
        """Check if the data source is available.

        Returns:
            True if connection is available, False otherwise
        """
        ...

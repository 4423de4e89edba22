"""Exception taxonomy shared by the gateway, controllers and HTTP layer."""

from __future__ import annotations


class KubeScopeError(Exception):
    """Base exception for kubescope errors."""


class SourceUnavailableError(KubeScopeError):
    """A Kubernetes API group or the metrics API could not be reached."""


class BadRequestError(KubeScopeError):
    """The caller asked for something kubescope does not support."""

    def __init__(self, message: str, value: str | None = None) -> None:
        super().__init__(message)
        self.value = value


class UnauthorizedError(KubeScopeError):
    """Missing credentials."""


class ForbiddenError(KubeScopeError):
    """Invalid credentials or insufficient role."""


__all__ = [
    "BadRequestError",
    "ForbiddenError",
    "KubeScopeError",
    "SourceUnavailableError",
    "UnauthorizedError",
]

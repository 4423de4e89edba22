"""Bearer-token verification and role gating.

Tokens are issued by the external auth service; kubescope only verifies
them with the shared secret. The role comes from the token's ``role`` claim,
or from the ``x-user-role`` header / ``role`` query parameter for clients
(EventSource) that cannot send custom claims.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import jwt
from fastapi import Depends, Request

from kubescope.api.dependencies import get_settings
from kubescope.constants.enums import Role
from kubescope.errors import ForbiddenError, UnauthorizedError
from kubescope.models.state.app_settings import AppSettings

logger = logging.getLogger(__name__)

ROLE_HEADER = "x-user-role"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    subject: str | None
    role: Role
    claims: dict[str, Any]


def extract_token(request: Request) -> str | None:
    """Bearer token from the Authorization header, else the ``token`` query parameter."""
    authorization = request.headers.get("authorization", "")
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1].strip():
        return parts[1].strip()
    return request.query_params.get("token") or None


def verify_token(token: str, settings: AppSettings) -> dict[str, Any]:
    """Decode and verify ``token``.

    Raises:
        ForbiddenError: When the token cannot be verified.
    """
    if not settings.jwt_secret:
        raise ForbiddenError("Invalid token")
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=settings.jwt_algorithms)
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise ForbiddenError("Invalid token") from exc
    return claims if isinstance(claims, dict) else {}


def resolve_role(claims: dict[str, Any], request: Request) -> Role:
    """Role from the token claim, then the header, then the query string.

    Raises:
        ForbiddenError: When no valid role is supplied.
    """
    raw_role = claims.get("role") or request.headers.get(ROLE_HEADER) or request.query_params.get("role")
    try:
        return Role(str(raw_role).strip().lower())
    except ValueError as exc:
        raise ForbiddenError("Forbidden: invalid role") from exc


def authenticate(request: Request, settings: AppSettings) -> Principal:
    """Authenticate ``request``.

    Raises:
        UnauthorizedError: Missing token.
        ForbiddenError: Invalid token or role.
    """
    if not settings.auth_enabled:
        raw_role = request.headers.get(ROLE_HEADER) or request.query_params.get("role") or Role.ADMIN.value
        try:
            role = Role(raw_role.strip().lower())
        except ValueError as exc:
            raise ForbiddenError("Forbidden: invalid role") from exc
        return Principal(subject=None, role=role, claims={})

    token = extract_token(request)
    if not token:
        raise UnauthorizedError("Missing token")
    claims = verify_token(token, settings)
    role = resolve_role(claims, request)
    subject = claims.get("sub") or claims.get("userId") or claims.get("email")
    return Principal(subject=str(subject) if subject is not None else None, role=role, claims=claims)


def require_role(minimum: Role) -> Callable[..., Awaitable[Principal]]:
    """FastAPI dependency that admits callers whose role is at least ``minimum``."""

    async def _dependency(
        request: Request,
        settings: AppSettings = Depends(get_settings),
    ) -> Principal:
        principal = authenticate(request, settings)
        if not principal.role.allows(minimum):
            raise ForbiddenError(f"Forbidden: requires {minimum.value} role")
        request.state.principal = principal
        return principal

    return _dependency


__all__ = [
    "Principal",
    "authenticate",
    "extract_token",
    "require_role",
    "resolve_role",
    "verify_token",
]

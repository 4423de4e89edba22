"""Map kubescope exceptions to JSON error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kubescope.errors import (
    BadRequestError,
    ForbiddenError,
    SourceUnavailableError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)


def error_body(error: str, details: str | None = None) -> dict[str, str | None]:
    return {"error": error, "details": details}


async def _bad_request(request: Request, exc: Exception) -> JSONResponse:
    value = exc.value if isinstance(exc, BadRequestError) else None
    return JSONResponse(status_code=400, content=error_body(str(exc), value))


async def _unauthorized(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=401, content=error_body(str(exc) or "Unauthorized"))


async def _forbidden(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=403, content=error_body(str(exc) or "Forbidden"))


async def _source_unavailable(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("%s %s: cluster source unavailable: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=502,
        content=error_body("Cluster source unavailable", str(exc)),
    )


async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error on %s %s (path params: %s)",
        request.method,
        request.url.path,
        dict(request.path_params),
    )
    return JSONResponse(status_code=500, content=error_body("Internal server error", str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BadRequestError, _bad_request)
    app.add_exception_handler(UnauthorizedError, _unauthorized)
    app.add_exception_handler(ForbiddenError, _forbidden)
    app.add_exception_handler(SourceUnavailableError, _source_unavailable)
    app.add_exception_handler(Exception, _unexpected)

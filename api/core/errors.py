"""
Application-wide exception handlers.

Routes raise `HTTPException` for expected 4xx outcomes. Anything that escapes
a route ends up here and is turned into one of:
- 400 invalid request body / query
- 503 connection pool exhausted
- 500 database, service (RuntimeError) or unexpected failure
  (detail only outside production)
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .db import PoolExhaustedError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Internal server error."


def _is_production(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return settings is None or settings.is_production


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request.", "errors": jsonable_encoder(exc.errors())},
    )


async def _pool_exhausted(request: Request, exc: PoolExhaustedError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service overloaded, retry later."},
    )


async def _database_error(request: Request, exc: asyncpg.PostgresError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    content = {"detail": GENERIC_ERROR}
    if not _is_production(request):
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": GENERIC_ERROR}
    if not _is_production(request):
        content["error"] = f"{type(exc).__name__}: {exc}"
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(PoolExhaustedError, _pool_exhausted)
    app.add_exception_handler(asyncpg.PostgresError, _database_error)
    # Handled inside ExceptionMiddleware: logged once, CORS headers kept.
    app.add_exception_handler(RuntimeError, _unhandled_error)
    app.add_exception_handler(Exception, _unhandled_error)

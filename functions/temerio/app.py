"""
FastAPI application entry point for the Temerio account service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from temerio.config import get_settings
from temerio.errors import TemerioError
from temerio.routes import router

logger = logging.getLogger(__name__)


async def _temerio_error_handler(request: Request, exc: TemerioError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        detail = f"{location}: {message}" if location else message
    else:
        detail = "Invalid request"
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {detail}"})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s error: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error"})


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Temerio Account Service", version="0.1.0")
    app.add_exception_handler(TemerioError, _temerio_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()

"""FastAPI application factory."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import AppConfig, get_config
from ..container import Container
from ..logging_setup import configure_logging
from .cors import CorsPolicyMiddleware, build_policies
from .routes import ROUTE_POLICIES, router

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request body")
    return f"{location}: {message}" if location else message


def create_app(
    config: Optional[AppConfig] = None,
    container: Optional[Container] = None,
) -> FastAPI:
    """Build the HTTP application.

    Args:
        config: Configuration override (defaults to the environment).
        container: Container override, e.g. one with fake adapters.
    """
    config = config or get_config()
    configure_logging(config.observability)

    app = FastAPI(
        title="RideLink Trip Core",
        version="1.0",
        description="Trip interpretation, geocoding, matching and payment relay.",
    )
    app.state.config = config
    app.state.container = container or Container.create_default(config)

    app.add_middleware(
        CorsPolicyMiddleware,
        policies=build_policies(config.cors),
        route_policies=ROUTE_POLICIES,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            {"error": str(exc.detail)},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def body_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse({"error": _validation_message(exc)}, status_code=400)

    app.include_router(router)
    logger.info("RideLink API ready", extra={"routes": sorted(ROUTE_POLICIES)})
    return app

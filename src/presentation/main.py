"""FastAPI application factory for the game-server provisioning service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from domain.exceptions import BackendError, DomainError, MalformedResponseError
from infrastructure.container import get_container
from infrastructure.observability.logging_config import setup_logging
from infrastructure.observability.metrics import record_rejection, setup_metrics
from infrastructure.settings import get_settings

from .api.v1 import servers
from .middleware.account_context import AccountContextMiddleware
from .middleware.request_logging import RequestLoggingMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    container = get_container()
    setup_logging(container.settings.log_level)
    app.state.container = container
    yield
    close = getattr(container.backend, "close", None)
    if callable(close):
        close()


# ---------------------------------------------------------------------------
# Exception handlers ({success: false, error: {...}} envelope)
# ---------------------------------------------------------------------------


def _error_json(
    status_code: int,
    message: str,
    *,
    title: str | None = None,
    details: Any = None,
) -> JSONResponse:
    error: dict[str, Any] = {"message": message, "status": status_code}
    if title:
        error["title"] = title
    if details is not None:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
    )


async def _domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.warning(
        "%s on %s %s: %s",
        exc.title,
        request.method,
        request.url.path,
        exc.detail,
    )
    if isinstance(exc, MalformedResponseError):
        logger.error("Malformed backend response in %s: %s", exc.operation, exc.reason)
    record_rejection(exc.title, exc.status_code)
    details = exc.payload if isinstance(exc, BackendError) else None
    return _error_json(exc.status_code, exc.detail, title=exc.title, details=details)


async def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for err in exc.errors():
        errors.append(
            {
                "field": " -> ".join(str(loc) for loc in err.get("loc", [])),
                "message": err.get("msg", ""),
                "type": err.get("type", ""),
            }
        )
    message = "The request body or parameters failed validation."
    if errors:
        message = f"{errors[0]['field']}: {errors[0]['message']}"
    record_rejection("Request Validation", status.HTTP_400_BAD_REQUEST)
    return _error_json(
        status.HTTP_400_BAD_REQUEST,
        message,
        title="Validation Error",
        details=errors,
    )


async def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        title="Internal Server Error",
    )


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

API_V1_PREFIX = "/api/v1"
API_VERSION = "1.0.0"


def create_app() -> FastAPI:
    app = FastAPI(
        title="Game Server Provisioning API",
        version=API_VERSION,
        description=(
            "Prices, validates and gates game-server provisioning requests "
            "before relaying them to the panel backend."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=_lifespan,
    )

    # -- CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in get_settings().cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # -- Custom middleware
    setup_metrics(app)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(AccountContextMiddleware)

    # -- API routers
    app.include_router(servers.router, prefix=API_V1_PREFIX)

    # -- Exception handlers
    app.add_exception_handler(DomainError, _domain_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)

    @app.get("/health", tags=["Operations"], summary="Health check", response_model=dict)
    async def health_check() -> dict[str, Any]:
        return {
            "status": "healthy",
            "version": API_VERSION,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return app


app = create_app()

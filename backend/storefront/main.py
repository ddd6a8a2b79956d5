"""
Storefront Catalog - FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       uvicorn serves the module-level `app` (uvicorn storefront.main:app).

Application Layout:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:  /attributes  /products  /departments      │
    │           /categories  /health                      │
    │                                                     │
    │  Exception Handlers:                                │
    │    CatalogError → its status (404 / 400)            │
    │    RequestValidationError → 422                     │
    │    Exception → 500                                  │
    └─────────────────────────────────────────────────────┘

Every error response uses the same body:
    {"error": {"status": ..., "code": ..., "message": ..., "field": ...}}
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from storefront import __version__
from storefront.config import settings
from storefront.database import dispose_engine
from storefront.exceptions import CatalogError
from storefront.middleware.logging import RequestLoggingMiddleware
from storefront.middleware.request_id import RequestIDMiddleware, request_id_var
from storefront.routes import attributes, categories, departments, health, products

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging once at startup.

    Format: 2024-01-15T12:00:00 [INFO] storefront.access: GET /products 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Storefront Catalog API %s starting up", __version__)
    logger.info(
        "Pagination defaults: limit=%d (max %d); NAME_ONLY search case-sensitive=%s",
        settings.default_page_limit,
        settings.max_page_limit,
        settings.search_name_case_sensitive,
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Storefront Catalog API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    status: int,
    code: str,
    message: str,
    field: Optional[str] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={
            "error": {
                "status": status,
                "code": code,
                "message": message,
                "field": field,
            }
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the uniform error envelope.

        CatalogError subclasses → exc.status with the catalog code
        RequestValidationError  → 422 validation_error (first failing field)
        Exception               → 500 internal_server_error (details logged only)
    """

    @app.exception_handler(CatalogError)
    async def handle_catalog_error(request: Request, exc: CatalogError):
        rid = request_id_var.get("")
        logger.info("[%s] %s %s: %s", rid, exc.status, exc.code, exc.message)
        return JSONResponse(status_code=exc.status, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = [
            str(part)
            for part in first.get("loc", ())
            if part not in ("query", "path", "body")
        ]
        field = ".".join(location) or None
        message = first.get("msg", "Invalid request")
        rid = request_id_var.get("")
        logger.warning("[%s] Request validation failed: %s", rid, errors)
        return error_response(422, "validation_error", message, field)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Persistence and programming errors: log the trace, return a generic 500."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Catalog API",
        description=(
            "Read-mostly REST API over an e-commerce catalog: products, categories, "
            "departments, attributes and product reviews."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(attributes.router)
    app.include_router(products.router)
    app.include_router(departments.router)
    app.include_router(categories.router)
    app.include_router(health.router)

    return app


app = create_app()

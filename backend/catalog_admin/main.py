"""Catalog Admin Backend -- FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_admin import __version__
from catalog_admin.api.v1.router import api_v1_router
from catalog_admin.config import settings
from catalog_admin.core.exceptions import CatalogError
from catalog_admin.db.session import engine
from catalog_admin.models import Base
from catalog_admin.services.cache_service import get_cache_service

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("catalog_api_starting", environment=settings.ENVIRONMENT, debug=settings.DEBUG)

    # Tables are created on startup; schema changes need a migration.
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_verified")
    except Exception as e:
        logger.error("database_init_failed", error=str(e), exc_info=True)
        raise

    cache = get_cache_service()
    if cache.enabled:
        if await cache.health_check():
            logger.info("redis_cache_connected")
        else:
            logger.warning("redis_cache_unavailable", detail="serving without cache")

    yield

    logger.info("catalog_api_stopping")
    await cache.close()
    await engine.dispose()


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    else:
        logger.info("request_rejected", path=request.url.path, status=exc.status_code, error=exc.message)
    return _error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first invalid field as a 400 ``{"error": ...}``."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _error_response(400, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("request_crashed", path=request.url.path, error=str(exc), exc_info=exc)
    return _error_response(500, str(exc) or "Internal server error")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Catalog Admin API",
        description="Product and category administration for the storefront catalog",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_v1_router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Catalog Admin API",
            "version": __version__,
            "docs": "/docs" if settings.DEBUG else None,
            "health": f"{settings.API_PREFIX}/health",
        }

    return app


app = create_app()

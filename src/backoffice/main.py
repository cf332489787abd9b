# Backoffice/src/backoffice/main.py
# @ai-rules:
# 1. [Wiring]: Repositories and services are built ONCE in startup_event and stored on app.state. No module-level services.
# 2. [STORE_BACKEND]: "memory" skips PostgreSQL entirely. Tests patch backoffice.main.STORE_BACKEND.
# 3. [Errors]: StoreError -> its status_code, request validation -> 400, psycopg2.Error -> 500. Handlers never build error responses.
"""
Store back-office API - FastAPI application entry point.

Manages products, orders and discount coupons behind a REST interface.
"""

import logging
import time

import psycopg2
from psycopg2.pool import SimpleConnectionPool

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .config import (
    ADMIN_PASSWORD,
    DB_POOL_MAX,
    DB_POOL_MIN,
    LOG_LEVEL,
    SERVICE_NAME,
    SERVICE_VERSION,
    STORE_BACKEND,
    db_dsn,
)
from .errors import StoreError
from .repositories.admin import MemoryAdminRepository, PostgresAdminRepository
from .repositories.cupons import MemoryCuponRepository, PostgresCuponRepository
from .repositories.orders import MemoryOrderRepository, PostgresOrderRepository
from .repositories.postgres import init_schema
from .repositories.products import MemoryProductRepository, PostgresProductRepository
from .routes.auth import hash_password, router as auth_router
from .routes.cupons import router as cupons_router
from .routes.orders import router as orders_router
from .routes.products import router as products_router
from .services.cupons import CuponService
from .services.orders import OrderService
from .services.products import ProductService

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of every request."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
        return response


# Create FastAPI app
app = FastAPI(
    title="Store Back-Office",
    description="Products, orders and discount coupons for the store back office",
    version=SERVICE_VERSION
)

app.add_middleware(RequestLogMiddleware)

# Mount routes
app.include_router(auth_router)
app.include_router(products_router)
app.include_router(orders_router)
app.include_router(cupons_router)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and out-of-catalog values are client errors: answer 400, not 422."""
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"detail": "; ".join(messages)})


@app.exception_handler(psycopg2.Error)
async def storage_error_handler(request: Request, exc: psycopg2.Error):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Storage failure"})


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "service": SERVICE_NAME, "version": SERVICE_VERSION}


def _build_memory_backend():
    return (
        MemoryProductRepository(),
        MemoryOrderRepository(),
        MemoryCuponRepository(),
        MemoryAdminRepository(hash_password(ADMIN_PASSWORD)),
    )


def _build_postgres_backend():
    db_pool = SimpleConnectionPool(DB_POOL_MIN, DB_POOL_MAX, dsn=db_dsn())
    app.state.db_pool = db_pool
    try:
        init_schema(db_pool, hash_password(ADMIN_PASSWORD))
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
    return (
        PostgresProductRepository(db_pool),
        PostgresOrderRepository(db_pool),
        PostgresCuponRepository(db_pool),
        PostgresAdminRepository(db_pool),
    )


@app.on_event("startup")
async def startup_event():
    """Build repositories and services for the configured backend."""
    app.state.db_pool = None
    if STORE_BACKEND == "memory":
        products, orders, cupons, admin = _build_memory_backend()
    else:
        products, orders, cupons, admin = _build_postgres_backend()

    app.state.admin_repository = admin
    app.state.product_service = ProductService(products)
    app.state.order_service = OrderService(orders)
    app.state.cupon_service = CuponService(cupons)
    logger.info(f"{SERVICE_NAME} {SERVICE_VERSION} started with '{STORE_BACKEND}' backend")


@app.on_event("shutdown")
async def shutdown_event():
    """Close database connections on shutdown."""
    db_pool = getattr(app.state, "db_pool", None)
    if db_pool:
        db_pool.closeall()
        logger.info("Database connection pool closed.")

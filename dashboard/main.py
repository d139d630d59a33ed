import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dashboard import __version__
from dashboard.api import auth, customers, orders, products, stats
from dashboard.core.config import APP_NAME, Settings
from dashboard.core.errors import DashboardError
from dashboard.core.logging import configure_logging
from dashboard.store import Store, create_store

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness and store connectivity."},
    {"name": "stats", "description": "Aggregates for the dashboard charts."},
    {"name": "products", "description": "Product catalog and stock."},
    {"name": "customers", "description": "Customer records."},
    {"name": "orders", "description": "Orders; totals are computed server-side."},
    {"name": "auth", "description": "Customer registration and login."},
]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(400, _describe_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return _error(404, "Endpoint not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error(500, "Internal server error")


def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    """Application factory.

    ``settings`` defaults to the environment; a missing JWT secret or store
    credential raises ``ConfigError`` here, before anything is served.
    ``store`` lets tests hand in a prepared backend instead of the one
    selected by ``STORE_BACKEND``.
    """
    if settings is None:
        settings = Settings.from_env()
    else:
        settings.validate()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_store = store or create_store(settings)
        app_store.init_schema()
        if settings.seed_sample_data:
            app_store.seed_if_empty()
        app.state.store = app_store
        logger.info("%s started with %s store", APP_NAME, app_store.backend)
        try:
            yield
        finally:
            app_store.close()
            logger.info("%s stopped", APP_NAME)

    app = FastAPI(
        title=APP_NAME,
        description="Backend for the inventory / order management dashboard (products, customers, orders, stats).",
        version=__version__,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed)
        return response

    register_exception_handlers(app)

    app.include_router(stats.router, prefix="/api/stats", tags=["stats"])
    app.include_router(products.router, prefix="/api/products", tags=["products"])
    app.include_router(customers.router, prefix="/api/customers", tags=["customers"])
    app.include_router(orders.router, prefix="/api/orders", tags=["orders"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])

    @app.get("/health", tags=["Health"], summary="Service health check")
    def health():
        return {
            "success": True,
            "message": "Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health/db", tags=["Health"], summary="Store health check")
    def health_db(request: Request):
        ok = request.app.state.store.ping()
        return {"success": ok, "database": "ok" if ok else "unreachable"}

    return app

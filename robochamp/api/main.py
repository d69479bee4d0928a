"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Build the FastAPI app (create_app) with metadata, middleware and routes
  - Open/close the PostgreSQL pool in the lifespan when Postgres is in use
  - Expose /healthz

Collaborators:
  - RequestContextMiddleware: request id + logging context
  - CORSMiddleware: origins from ALLOWED_ORIGINS
  - auth_routes.router: /auth/* endpoints
  - exception_handlers: RFC 7807 responses for infrastructure failures

Notes:
  - Middleware order (last added runs first): CORS -> RequestContext -> routes
  - Settings are validated on first get_settings() (import of the app)
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..container import uses_postgres
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from ..infrastructure.db.pool import close_pool, get_pool, init_pool, is_pool_initialized
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Initializes the pool only for Postgres."""
    settings = get_settings()
    postgres = uses_postgres()

    if postgres:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )

    logger.info(
        "RoboChamp auth API starting up",
        extra={
            "app_env": settings.app_env,
            "store": "postgres" if postgres else "in_memory",
            "mail_mode": settings.mail_mode,
        },
    )
    try:
        yield
    finally:
        if postgres:
            close_pool()
        logger.info("RoboChamp auth API shutting down")


def _db_status() -> str:
    if not is_pool_initialized():
        return "in_memory"
    try:
        with get_pool().connection() as conn:
            conn.execute("SELECT 1")
        return "connected"
    except Exception:
        logger.warning("Health check: DB no disponible", exc_info=True)
        return "disconnected"


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="RoboChamp Auth API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "auth",
                "description": "Signup, verification, sessions (JWT) and password flows",
            },
        ],
    )

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
    )

    app.include_router(auth_router)
    register_exception_handlers(app)

    @app.get("/healthz")
    def healthz(request: Request):
        db = _db_status()
        return {
            "ok": db != "disconnected",
            "db": db,
            "request_id": getattr(request.state, "request_id", None),
        }

    return app


app = create_app()

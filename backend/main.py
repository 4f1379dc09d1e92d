"""FastAPI application entry point."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.trustedhost import TrustedHostMiddleware

from backend.api.auth import router as auth_router
from backend.api.health import VERSION
from backend.api.health import router as health_router
from backend.api.pages import router as pages_router
from backend.api.settings import router as settings_router
from backend.api.site import router as site_router
from backend.api.theme import router as theme_router
from backend.config import Settings
from backend.exceptions import InternalServerError, SiteError
from backend.filesystem.document_store import SettingsStore, ThemeStore
from backend.filesystem.page_store import PageStore
from backend.services.deploy_service import Deployer
from backend.services.generator import SiteGenerator
from backend.services.page_service import ensure_home_page
from backend.services.publish_service import SitePublisher
from backend.services.rate_limit_service import LoginThrottle

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    """Configure application logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("paramiko").setLevel(logging.INFO if debug else logging.WARNING)


def init_app_state(app: FastAPI, settings: Settings) -> None:
    """Build the stores and the publishing pipeline and attach them to the app."""
    page_store = PageStore(settings.pages_dir)
    theme_store = ThemeStore(settings.config_dir)
    settings_store = SettingsStore(
        settings.config_dir,
        bootstrap_username=settings.admin_username,
        bootstrap_password=settings.admin_password,
    )
    generator = SiteGenerator(
        page_store, theme_store, settings.output_dir, templates_dir=settings.templates_dir
    )
    deployer = Deployer(
        settings_store,
        settings.output_dir,
        settings.secret_key,
        timeout=settings.deploy_timeout_seconds,
    )

    app.state.settings = settings
    app.state.page_store = page_store
    app.state.theme_store = theme_store
    app.state.settings_store = settings_store
    app.state.publisher = SitePublisher(generator, deployer, settings_store)
    app.state.login_throttle = LoginThrottle(
        settings.auth_login_max_failures, settings.auth_rate_limit_window_seconds
    )


def ensure_site_scaffold(app: FastAPI) -> None:
    """Create the pages directory, theme, settings and home page if missing."""
    settings: Settings = app.state.settings
    settings.pages_dir.mkdir(parents=True, exist_ok=True)
    app.state.theme_store.get()
    app.state.settings_store.get()
    ensure_home_page(app.state.page_store)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan: startup and shutdown."""
    settings: Settings = app.state.settings
    settings.validate_runtime_security()
    _configure_logging(settings.debug)
    logger.info("Starting Pagewright (debug=%s)", settings.debug)

    try:
        ensure_site_scaffold(app)
    except Exception as exc:
        logger.critical("Failed to initialize site data at %s: %s.", settings.data_dir, exc)
        raise

    try:
        count = app.state.publisher.generate()
        logger.info("Generated %d pages on startup", count)
    except Exception as exc:
        logger.critical("Initial site generation failed: %s", exc)
        raise

    yield

    logger.info("Pagewright stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    docs_enabled = settings.debug or settings.expose_docs

    app = FastAPI(
        title="Pagewright",
        description="A small self-hosted site builder",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    init_app_state(app, settings)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.middleware("http")
    async def security_headers(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        if settings.security_headers_enabled:
            response.headers.setdefault("X-Content-Type-Options", "nosniff")
            response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        return response

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(pages_router)
    app.include_router(theme_router)
    app.include_router(settings_router)
    app.include_router(site_router)

    # Global exception handlers: every error becomes {"message": ...}

    @app.exception_handler(SiteError)
    async def site_error_handler(request: Request, exc: SiteError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "%s in %s %s: %s",
                type(exc).__name__,
                request.method,
                request.url.path,
                exc.message,
                exc_info=exc,
            )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message},
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = []
        for err in exc.errors():
            loc = err.get("loc", ())
            field = str(loc[-1]) if loc else "unknown"
            errors.append({"field": field, "message": err.get("msg", "Invalid value")})
        logger.warning(
            "RequestValidationError in %s %s: %s",
            request.method,
            request.url.path,
            errors,
        )
        return JSONResponse(
            status_code=422,
            content={"message": "Invalid request", "errors": errors},
        )

    @app.exception_handler(InternalServerError)
    async def internal_server_error_handler(
        request: Request, exc: InternalServerError
    ) -> JSONResponse:
        logger.error(
            "InternalServerError in %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error"},
        )

    @app.exception_handler(OSError)
    async def os_error_handler(request: Request, exc: OSError) -> JSONResponse:
        logger.error("OSError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"message": "Storage operation failed"},
        )

    @app.exception_handler(json.JSONDecodeError)
    async def json_error_handler(request: Request, exc: json.JSONDecodeError) -> JSONResponse:
        logger.error(
            "JSONDecodeError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc
        )
        return JSONResponse(
            status_code=500,
            content={"message": "Data integrity error"},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.error("ValueError in %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        message = str(exc) or "Invalid value"
        return JSONResponse(
            status_code=422,
            content={"message": message},
        )

    # Generated site, and the admin client when it is installed
    settings.output_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/public", StaticFiles(directory=str(settings.output_dir), html=True), name="public")

    admin_dir = settings.admin_dir
    if admin_dir.is_dir():
        app.mount("/admin", StaticFiles(directory=str(admin_dir), html=True), name="admin")

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        return RedirectResponse("/admin/" if admin_dir.is_dir() else "/public/")

    return app


def cli_entry() -> None:
    """CLI entry point for running the server."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "backend.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )

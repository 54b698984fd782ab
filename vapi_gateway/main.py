"""
FastAPI application entry point for the Vapi call gateway.

This module:
- Configures structured logging with structlog
- Builds the application and its services once (`create_app`)
- Registers middleware: request timing, security headers, rate limiting, CORS
- Maps gateway exceptions to HTTP responses
- Closes the upstream HTTP client on shutdown

Design decisions:
- Services live on `app.state` and reach routes through dependencies
- Every error response has the shape `{"success": false, "error": ...}`
- The browser client is served from STATIC_DIR when present
"""

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from vapi_gateway import __version__
from vapi_gateway.api.routes import health, search, vapi
from vapi_gateway.config import Settings, settings as default_settings
from vapi_gateway.core.exceptions import UpstreamHTTPError, VapiError
from vapi_gateway.core.security import build_rate_limiter, get_security_headers
from vapi_gateway.models.base import create_db_engine, create_session_factory
from vapi_gateway.models.database import create_tables
from vapi_gateway.services.credentials import Credentials
from vapi_gateway.services.health import HealthAggregator
from vapi_gateway.services.property_search import PropertySearchService
from vapi_gateway.services.transport import VapiTransport
from vapi_gateway.services.vapi_service import VapiService
from vapi_gateway.services.webhooks import WebhookInterpreter

SERVICE_NAME = "Vapi Call Gateway"


def configure_logging(app_settings: Settings) -> None:
    """
    Configure structlog: JSON for production log aggregation, console for
    local development.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),  # ISO 8601 timestamps
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if app_settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(app_settings.log_level.upper())
        ),
    )


configure_logging(default_settings)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: log configuration (never credentials).
    Shutdown: close the pooled Vapi HTTP client.
    """
    app_settings: Settings = app.state.settings
    logger.info(
        "application_starting",
        service=SERVICE_NAME,
        version=__version__,
        environment=app_settings.app_env,
        vapi_base_url=app_settings.vapi_base_url,
        vapi_configured=app.state.vapi_service.initialized,
        database_configured=app.state.property_search.available,
        cors_origins=app_settings.cors_origins
    )

    yield  # Application is running

    logger.info("application_shutting_down")
    await app.state.vapi_service.close()
    logger.info("shutdown_complete")


def create_app(
    app_settings: Settings | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None
) -> FastAPI:
    """
    Build the application and its services.

    Args:
        app_settings: Settings to use (module settings when omitted)
        http_transport: Optional httpx transport for the Vapi client
            (tests pass httpx.MockTransport)
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title=SERVICE_NAME,
        description="REST gateway for Vapi voice calls and property search",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if app_settings.is_production else "/docs",
        redoc_url=None,
    )

    # ===== Services =====

    vapi_service = VapiService(
        Credentials.from_settings(app_settings),
        VapiTransport(
            app_settings.vapi_base_url,
            timeout=app_settings.vapi_timeout,
            transport=http_transport,
        ),
        phone_number_id=app_settings.vapi_phone_number_id,
        web_call_path=app_settings.vapi_web_call_path,
    )

    session_factory = None
    if app_settings.database_url:
        engine = create_db_engine(app_settings.database_url)
        create_tables(engine)
        session_factory = create_session_factory(engine)
    else:
        logger.warning("database_not_configured")

    app.state.settings = app_settings
    app.state.vapi_service = vapi_service
    app.state.health_aggregator = HealthAggregator(vapi_service)
    app.state.webhook_interpreter = WebhookInterpreter()
    app.state.property_search = PropertySearchService(session_factory)
    app.state.rate_limiter = build_rate_limiter(app_settings)

    _register_middleware(app, app_settings)
    _register_exception_handlers(app)

    # ===== Routers =====

    app.include_router(health.router)
    app.include_router(search.router)
    app.include_router(vapi.router)

    static_dir = Path(app_settings.static_dir)
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/", include_in_schema=False)
    async def root():
        """Browser client when installed, otherwise service discovery info."""
        index = static_dir / "index.html"
        if index.is_file():
            return FileResponse(index)
        return {
            "service": SERVICE_NAME,
            "version": __version__,
            "environment": app_settings.app_env,
            "endpoints": {
                "health": "/api/health",
                "search": "/api/search",
                "vapi": "/api/vapi",
                "webhook": "/api/vapi/webhook",
            },
        }

    return app


def _register_middleware(app: FastAPI, app_settings: Settings) -> None:
    """Register middleware. The last one added runs outermost, so CORS goes last."""

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        """Reject clients over their fixed-window limit with 429."""
        if request.method == "OPTIONS":
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        rule = request.app.state.rate_limiter.check(request.url.path, client_ip)
        if rule is not None:
            logger.warning("rate_limit_exceeded", path=request.url.path, client_ip=client_ip, rule=rule.prefix)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"success": False, "error": rule.message},
                headers={"Retry-After": str(int(rule.window_seconds))},
            )
        return await call_next(request)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in get_security_headers().items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Log every request with timing information and add an
        X-Process-Time header.
        """
        start_time = time.time()

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown"
        )

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=round(process_time * 1000, 2)
        )

        response.headers["X-Process-Time"] = str(round(process_time, 3))
        return response

    # Outside production any origin may call the API (local browser clients)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins if app_settings.is_production else ["*"],
        allow_credentials=app_settings.is_production,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )


def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(VapiError)
    async def vapi_error_handler(request: Request, exc: VapiError):
        """
        Map gateway exceptions to HTTP responses.

        Response format:
        {
            "success": false,
            "error": "API Error: 404 - Call not found",
            "code": "API_001"
        }
        """
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "vapi_error",
            error_code=exc.error_code.value,
            message=exc.message,
            status_code=exc.status_code,
            upstream_status=exc.upstream_status if isinstance(exc, UpstreamHTTPError) else None,
            path=request.url.path
        )

        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "validation_error",
            errors=jsonable_encoder(exc.errors()),
            path=request.url.path
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "success": False,
                "error": "Invalid request data",
                "details": jsonable_encoder(exc.errors()),
            }
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """
        Catch-all for unexpected exceptions. Logs the full traceback and
        returns a generic message so internals do not leak.
        """
        logger.exception(
            "unexpected_error",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Internal server error"}
        )


app = create_app()

"""FastAPI application for the meeting authority service."""
from __future__ import annotations

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import Settings, get_settings
from .db.session import build_engine, build_sessionmaker
from .routers import meetings as meetings_router
from .services.registry import MeetingRegistry
from .services.rtc import CredentialIssuer, RoomService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build whichever collaborators were not injected, and release them on shutdown."""

    settings: Settings = app.state.settings
    missing = settings.missing_required()
    if missing:
        if settings.strict_config:
            raise RuntimeError(f"Missing environment variables: {', '.join(missing)}")
        logger.warning("Missing environment variables: %s", ", ".join(missing))
        logger.warning("Server will start but features may not work correctly.")

    engine = None
    if app.state.registry is None:
        session_factory = None
        if settings.database_url:
            engine = build_engine(settings)
            session_factory = build_sessionmaker(engine)
        app.state.registry = MeetingRegistry(session_factory)
    if app.state.issuer is None:
        app.state.issuer = CredentialIssuer(
            settings.livekit_api_key,
            settings.livekit_api_secret,
            ttl_seconds=settings.token_ttl_seconds,
        )
    if app.state.rooms is None:
        app.state.rooms = RoomService(settings.livekit_url, settings.livekit_api_key, settings.livekit_api_secret)

    logger.info("%s ready (env=%s, livekit=%s)", settings.service_name, settings.app_env, settings.livekit_url or "NOT SET")
    try:
        yield
    finally:
        rooms = app.state.rooms
        if isinstance(rooms, RoomService):
            await rooms.aclose()
        if engine is not None:
            await engine.dispose()


def create_app(
    settings: Settings | None = None,
    *,
    registry: MeetingRegistry | None = None,
    issuer: CredentialIssuer | None = None,
    rooms: RoomService | None = None,
) -> FastAPI:
    """Assemble the application; collaborators passed in are used as-is."""

    settings = settings or get_settings()
    app = FastAPI(title=settings.service_name, version=settings.service_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry
    app.state.issuer = issuer
    app.state.rooms = rooms
    app.state.started_at = time.monotonic()

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info("%s %s -> %d (%.1f ms)", request.method, request.url.path, status_code, elapsed_ms)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # A known path hit with the wrong method is reported like an unknown path.
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Endpoint not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "Malformed request body"})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Server error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/", tags=["meta"])
    async def index() -> dict[str, Any]:
        """Describe the service and its endpoints."""

        return {
            "message": f"{settings.service_name} API",
            "version": settings.service_version,
            "timestamp": _now_iso(),
            "endpoints": {
                "health": "GET /health",
                "createMeeting": "POST /create-meeting",
                "joinMeeting": "POST /join-meeting",
                "endMeeting": "POST /end-meeting",
            },
        }

    @app.head("/", tags=["meta"])
    async def index_head() -> Response:
        """Fast health checks issue HEAD /; answer with 200 to avoid noisy 405s."""

        return Response(status_code=200)

    @app.get("/health", tags=["meta"])
    async def health() -> dict[str, Any]:
        """Liveness check; does not touch the registry or the SFU."""

        return {
            "ok": True,
            "timestamp": _now_iso(),
            "service": settings.service_name,
            "uptime": round(time.monotonic() - app.state.started_at, 3),
        }

    @app.head("/health", tags=["meta"])
    async def health_head() -> Response:
        """Allow HEAD for uptime monitors that only need the status code."""

        return Response(status_code=200)

    app.include_router(meetings_router.router, tags=["meetings"])
    return app


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


app = create_app()

"""FastAPI application for the RTC token server."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from .core.config import Settings, get_settings
from .routers import rtc as rtc_router
from .schemas.rtc import HealthResponse
from .services.rtc import AppCredentials
from .services.signer import AgoraTokenSigner, TokenSigner

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, signer: TokenSigner | None = None) -> FastAPI:
    """Build the API around one immutable settings object and a signer.

    ``get_settings`` raises ``StartupConfigurationError`` when the app
    credentials are missing, so no app is built without them.
    """

    if settings is None:
        settings = get_settings()

    app = FastAPI(title="RTC Token Server", version="0.1.0")
    app.state.settings = settings
    app.state.credentials = AppCredentials.from_settings(settings)
    app.state.signer = signer or AgoraTokenSigner()

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health", response_model=HealthResponse, tags=["meta"])
    async def health(request: Request) -> HealthResponse:
        """Liveness probe; the app id is not secret."""

        return HealthResponse(status="Server is running", app_id=request.app.state.credentials.app_id)

    @app.head("/health", tags=["meta"])
    async def health_head() -> Response:
        """Allow HEAD for uptime monitors that only need the status code."""

        return Response(status_code=200)

    app.include_router(rtc_router.router, tags=["rtc"])
    return app

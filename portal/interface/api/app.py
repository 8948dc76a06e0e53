"""FastAPI application."""

import logging

from dishka import AsyncContainer
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portal.config import Settings
from portal.domain.error import AuthError
from portal.interface.api.routes import auth, health
from portal.interface.error import error_body, status_for
from portal.util.di.container import create_container, setup_di
from portal.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)

logger = logging.getLogger(__name__)


async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    """Render an ``AuthError`` with its public message only."""
    status_code = status_for(exc)
    logger.info(
        f"Auth failure: path={request.url.path}, kind={exc.kind.value}, "
        f"status={status_code}"
    )
    return JSONResponse(status_code=status_code, content=error_body(exc))


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use; the production container when None
    """
    settings = Settings()

    # Outbound OAuth provider calls
    instrument_httpx()

    app_instance = FastAPI(
        title="Portal API",
        description="Email one-time passcode and OAuth (GitHub, GitLab, Google) sign-in",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
            "http://localhost:5173",  # Vite default
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "User-Agent",
            "Cache-Control",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    setup_di(app_instance, container or create_container())

    app_instance.add_exception_handler(AuthError, handle_auth_error)

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()

#!/usr/bin/env python3
"""Start the Portal API with Logfire error tracking for startup errors."""

import sys

import logfire
import uvicorn

from portal.config import Settings
from portal.util.logging import setup_logging
from portal.util.observability import configure_logfire


def main() -> int:
    """Start the application and log any startup errors to Logfire."""
    settings = Settings()

    # Logfire first, so failures while importing the app are reported
    configure_logfire(settings)
    setup_logging(settings)

    if settings.is_production and settings.auth.jwt_secret == "CHANGE_ME_IN_PRODUCTION":
        logfire.error("Refusing to start: AUTH__JWT_SECRET is not set")
        return 1

    if settings.is_production and not settings.mail.enabled:
        logfire.error("Refusing to start: MAIL__ENABLED is false")
        return 1

    try:
        logfire.info(
            "Starting Portal API",
            environment=settings.environment,
            enabled_providers=[
                provider.value
                for provider, enabled in settings.oauth.enabled_providers().items()
                if enabled
            ],
            mail_enabled=settings.mail.enabled,
        )

        uvicorn.run(
            "portal.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )

        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())

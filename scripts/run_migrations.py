#!/usr/bin/env python3
"""Apply Alembic migrations for the users, identities and OTP tables."""

import sys

import logfire
from alembic import command
from alembic.config import Config

from portal.config import Settings
from portal.util.observability import configure_logfire


def main() -> int:
    """Upgrade the schema to head; failures are reported to Logfire."""
    settings = Settings()
    configure_logfire(settings)

    try:
        with logfire.span("run_migrations", environment=settings.environment):
            # env.py reads the database URL from Settings
            alembic_cfg = Config("alembic.ini")
            command.upgrade(alembic_cfg, "head")

        logfire.info("Database migrations completed")
        return 0

    except Exception as e:
        logfire.error(
            "Database migration failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Deployment must stop rather than start on a broken schema
        raise


if __name__ == "__main__":
    sys.exit(main())

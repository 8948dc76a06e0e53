#!/usr/bin/env python3
"""Delete expired OTP challenges. Meant to run periodically (cron)."""

import asyncio
import sys

import logfire

from portal.config import Settings
from portal.domain.service import OtpStore
from portal.util.di.container import create_container
from portal.util.observability import configure_logfire


async def purge() -> int:
    container = create_container()
    try:
        async with container() as request_container:
            otp_store = await request_container.get(OtpStore)
            return await otp_store.purge_expired()
    finally:
        await container.close()


def main() -> int:
    configure_logfire(Settings())

    removed = asyncio.run(purge())
    logfire.info("Expired OTP purge finished", removed=removed)
    return 0


if __name__ == "__main__":
    sys.exit(main())

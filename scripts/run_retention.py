#!/usr/bin/env python3
"""Run the retention sweep for every active tenant.

Meant for a scheduled job. The sweep hard-deletes soft-deleted posts and
comments older than each tenant's ``retention_days``.
"""

import asyncio
import sys

import logfire

from huddle.config import Settings
from huddle.domain.service import RetentionService
from huddle.util.di.container import create_container
from huddle.util.observability import configure_logfire


async def run() -> int:
    """Purge every tenant in one request scope (single transaction)."""
    container = create_container(web=False)
    try:
        async with container() as request_container:
            retention_service = await request_container.get(RetentionService)
            reports = await retention_service.purge_all_companies()
    finally:
        await container.close()

    removed = sum(report.total for report in reports)
    logfire.info("Retention sweep finished", tenants=len(reports), removed=removed)
    return 0


def main() -> int:
    """Run the sweep and log any errors to Logfire."""
    settings = Settings()
    configure_logfire(settings)

    try:
        return asyncio.run(run())
    except Exception:
        logfire.exception("Retention sweep failed")
        raise


if __name__ == "__main__":
    sys.exit(main())

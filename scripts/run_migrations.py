#!/usr/bin/env python3
"""Apply Alembic migrations before the API starts.

Usage:
    python scripts/run_migrations.py            # upgrade to head
    python scripts/run_migrations.py 3c41f0d2   # upgrade to a revision
    python scripts/run_migrations.py --sql      # print SQL instead
"""

import argparse
import sys

import logfire
from alembic import command
from alembic.config import Config

from huddle.config import Settings
from huddle.util.observability import configure_logfire


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run huddle database migrations")
    parser.add_argument("revision", nargs="?", default="head")
    parser.add_argument(
        "--sql", action="store_true", help="emit SQL for review without connecting"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Upgrade the schema; failures are logged and re-raised."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    settings = Settings()
    configure_logfire(settings)

    alembic_cfg = Config("alembic.ini")
    try:
        with logfire.span("migrations.upgrade", revision=args.revision, sql=args.sql):
            command.upgrade(alembic_cfg, args.revision, sql=args.sql)
    except Exception:
        logfire.exception("Database migration failed", revision=args.revision)
        # Fail the deploy instead of starting on a stale schema
        raise

    logfire.info("Database migrations completed", revision=args.revision)
    return 0


if __name__ == "__main__":
    sys.exit(main())

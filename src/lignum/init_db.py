"""Create (or with ``--drop``, recreate) every table for the configured database.

Use Alembic migrations for real deployments; this is for local development.
"""

from __future__ import annotations

import argparse
import logging

from lignum.core.logging import configure_logging
from lignum.core.settings import settings
from lignum.db.session import create_tables, drop_tables

logger = logging.getLogger(__name__)


def init_db(drop: bool = False) -> None:
    """Initialize the database by creating all tables."""
    if drop:
        drop_tables()
        logger.info("Dropped all tables")
    create_tables()
    logger.info("Tables created for %s", settings.effective_database_url)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args(argv)
    configure_logging(settings.log_level)
    init_db(drop=args.drop)


if __name__ == "__main__":
    main()

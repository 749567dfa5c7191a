# src/lignum/scripts/migrate.py
"""Upgrade the configured database to the latest Alembic revision."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

from lignum.core.logging import configure_logging
from lignum.core.settings import settings

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def build_config() -> Config:
    """Return an Alembic config pointed at this repo's migrations folder."""
    cfg = Config(str(MIGRATIONS_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", settings.database_url_sync)
    return cfg


def run_upgrade_head() -> None:
    command.upgrade(build_config(), "head")


def main() -> None:
    configure_logging(settings.log_level)
    run_upgrade_head()


if __name__ == "__main__":
    main()

"""Programmatic access to the Alembic migrations shipped inside the package."""

import logging
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config

from shaker.core.config import settings

logger = logging.getLogger(__name__)

SCRIPT_LOCATION = Path(__file__).resolve().parent.parent / "migrations"


def alembic_config(url: Optional[str] = None) -> Config:
    # No ini file: the caller's logging setup is left alone
    cfg = Config()
    cfg.set_main_option("script_location", str(SCRIPT_LOCATION))
    cfg.set_main_option("sqlalchemy.url", (url or settings.DATABASE_URL).replace("%", "%%"))
    return cfg


def upgrade(url: Optional[str] = None, revision: str = "head") -> None:
    """Bring the database at ``url`` up to ``revision``; a no-op when already there."""
    cfg = alembic_config(url)
    logger.info("Applying migrations up to %s", revision)
    command.upgrade(cfg, revision)

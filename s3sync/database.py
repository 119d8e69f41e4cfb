# s3sync/database.py
#!/usr/bin/env python3

import logging
import os

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from s3sync.config import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "migrations")

Base = declarative_base()

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _run_alembic_upgrade(target_engine) -> None:
    """
    Put the schema under Alembic version control.

    A database without an ``alembic_version`` table was just built by
    ``create_all`` and is stamped to head; a tracked database gets its
    pending migrations applied.
    """
    if not os.path.isdir(MIGRATIONS_DIR):
        logger.debug(f"No migrations directory at {MIGRATIONS_DIR}, skipping Alembic")
        return

    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", MIGRATIONS_DIR)

    with target_engine.begin() as connection:
        alembic_cfg.attributes["connection"] = connection
        if "alembic_version" in inspect(connection).get_table_names():
            command.upgrade(alembic_cfg, "head")
        else:
            logger.info("Stamping new database to the latest schema revision")
            command.stamp(alembic_cfg, "head")


def init_db():
    """Call this once (e.g. on startup) to create tables if they don't exist."""
    url = make_url(settings.database_url)
    in_memory = url.get_backend_name() == "sqlite" and (not url.database or url.database == ":memory:")
    if url.get_backend_name() == "sqlite" and not in_memory:
        db_dir = os.path.dirname(os.path.abspath(url.database))
        os.makedirs(db_dir, exist_ok=True)

    # Make sure the models are registered on Base
    from s3sync import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

    if not in_memory:
        _run_alembic_upgrade(engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

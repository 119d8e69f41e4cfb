"""Alembic environment configuration for s3sync.

Uses the database URL from ``s3sync.config.settings`` and the SQLAlchemy
``Base.metadata`` so that autogenerate can detect model changes.

An existing connection can be passed via ``config.attributes["connection"]``
for programmatic invocation, e.g. against an in-memory SQLite database.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from s3sync.database import Base

# Ensure all models are imported so Base.metadata is populated.
from s3sync.models import DeletionQueueEntry, FileRecord  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _get_url() -> str:
    """Return the database URL, preferring the alembic config."""
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    from s3sync.config import settings

    return settings.database_url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to the script output."""
    context.configure(
        url=_get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against an engine or a passed connection."""
    connectable = config.attributes.get("connection", None)

    if connectable is not None:
        context.configure(connection=connectable, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()
        return

    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = _get_url()
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

"""Alembic environment configuration.

Migrations run through a sync driver: the async URL from settings is
rewritten (asyncpg → psycopg2, aiosqlite → pysqlite).
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from safeplace.adapters.persistence.database import Base
from safeplace.adapters.persistence.models import (  # noqa: F401 — ensure models are registered
    AssignmentModel,
    ProfessionalModel,
    TransferModel,
)
from safeplace.config import settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _sync_url(url: str) -> str:
    return url.replace("+asyncpg", "+psycopg2").replace("+aiosqlite", "")


# .env is the source of truth for the database location
config.set_main_option("sqlalchemy.url", _sync_url(settings.database_url))


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (generate SQL without connecting)."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations online using a sync engine."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

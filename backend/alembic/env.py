"""
Product Catalog Backend — Alembic Environment
===============================================

What:  Runs the catalog's schema migrations (the `products` table).
How:   The URL comes from app.config.Settings, so `DATABASE_URL` drives both
       the API and `alembic upgrade head`. Online runs go through an async
       engine built from that URL; offline runs print SQL.
Who:   `alembic` CLI, run from backend/ (see alembic.ini).

When the schema is managed here, start the API with DB_CREATE_TABLES=false
so it does not create tables on its own at startup.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from app.config import settings
from app.database import Base
from app.models.product import Product  # noqa: F401  registers the table on Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

config.set_main_option("sqlalchemy.url", settings.database_url)
target_metadata = Base.metadata


def run_offline() -> None:
    """Render the products DDL as SQL without a database connection."""
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    # NullPool: one short-lived connection per migration run
    engine = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())

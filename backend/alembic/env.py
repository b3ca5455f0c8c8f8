"""Alembic environment: DATABASE_URL from the environment, metadata from models."""
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

import db.session  # noqa: F401  (loads .env.local / .env for local runs)
from models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# sqlalchemy.url set by the caller (e.g. tests) wins over DATABASE_URL
if not config.get_main_option("sqlalchemy.url"):
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL is not set")
    config.set_main_option("sqlalchemy.url", database_url)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

# This project was developed with assistance from AI tools.
"""Alembic environment -- runs migrations with a synchronous psycopg2 engine."""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url

from db import models  # noqa: F401  (registers tables on Base.metadata)
from db.database import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# DATABASE_URL wins over alembic.ini; the async driver is swapped for psycopg2.
_env_url = os.environ.get("DATABASE_URL")
if _env_url:
    _sync_url = make_url(_env_url).set(drivername="postgresql+psycopg2")
    config.set_main_option(
        "sqlalchemy.url", _sync_url.render_as_string(hide_password=False).replace("%", "%%")
    )

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

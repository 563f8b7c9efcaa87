# alembic/env.py
from __future__ import annotations

import os
from logging.config import fileConfig
from typing import Any, Dict, cast

from alembic import context
from sqlalchemy import engine_from_config, pool

# Alembic Config object
config = context.config

# Setup Python logging from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# --- App metadata (models must be imported so their tables are registered) ---
from sleeper_dash import models  # noqa: E402,F401
from sleeper_dash.config import get_database_url  # noqa: E402
from sleeper_dash.db import Base  # noqa: E402

target_metadata = Base.metadata

# Options helpful for SQLite + autogenerate
COMPARE_TYPE = True
RENDER_AS_BATCH = True


def _database_url() -> str:
    # DATABASE_URL / POSTGRES_URL win over alembic.ini, same as the app
    env_url = os.getenv("DATABASE_URL") or os.getenv("POSTGRES_URL")
    return env_url or config.get_main_option("sqlalchemy.url") or get_database_url()


def run_migrations_offline() -> None:
    """Emit SQL without a live connection."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=COMPARE_TYPE,
        render_as_batch=RENDER_AS_BATCH,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = cast(Dict[str, Any], config.get_section(config.config_ini_section) or {})
    section["sqlalchemy.url"] = _database_url()

    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=COMPARE_TYPE,
            render_as_batch=RENDER_AS_BATCH,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

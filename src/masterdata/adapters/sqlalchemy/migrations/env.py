"""Alembic environment for the registry schema.

``upgrade_head`` hands in an open connection through ``config.attributes``; the
``alembic`` command line falls back to ``sqlalchemy.url`` or ``DATABASE_URI``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from alembic import context
from sqlalchemy import create_engine, pool

from masterdata.adapters.sqlalchemy import mapper_registry, start_mappers
from masterdata.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config
log = logging.getLogger("alembic.env")

start_mappers()
target_metadata = mapper_registry.metadata

# sqlite cannot ALTER most constraints in place
_COMMON_OPTIONS = {
    "target_metadata": target_metadata,
    "render_as_batch": True,
    "compare_type": True,
}


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_config().uri


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, **_COMMON_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    context.configure(url=_database_url(), literal_binds=True, **_COMMON_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is not None:
        _migrate(connection)
        return

    engine = create_engine(_database_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as owned:
            _migrate(owned)
    finally:
        engine.dispose()


if context.is_offline_mode():
    log.info("Rendering registry migrations as SQL")
    run_migrations_offline()
else:
    run_migrations_online()

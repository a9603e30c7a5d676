"""Alembic environment for the MovieHub schema.

The URL comes from ``sqlalchemy.url`` when the caller sets one (tests,
one-off scripts) and from ``settings.DATABASE_URL`` otherwise. SQLite runs
in batch mode since it cannot ALTER most constraints in place.
"""
from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from moviehub.config import settings
from moviehub.database import Base

# Register every table on Base.metadata
from moviehub.models.user import User                                # noqa: F401
from moviehub.models.group import Group, GroupMember, GroupContent   # noqa: F401
from moviehub.models.join_request import JoinRequest                 # noqa: F401
from moviehub.models.favorite import Favorite                        # noqa: F401
from moviehub.models.review import Review                            # noqa: F401

config = context.config
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=_is_sqlite(url),
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
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

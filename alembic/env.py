"""Alembic environment for RentMaster - migrations run on a sync driver."""

import logging
from logging.config import fileConfig
from pathlib import Path

# Load .env FIRST so Settings sees DATABASE_URL
from dotenv import load_dotenv
load_dotenv(Path(__file__).parent.parent / '.env')

from sqlalchemy import pool, create_engine  # noqa: E402
from sqlalchemy.engine import make_url  # noqa: E402

from alembic import context  # noqa: E402

from rentmaster.core.config import get_settings  # noqa: E402
from rentmaster.core.database import Base  # noqa: E402
import rentmaster.models  # noqa: E402,F401  registers every table on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

# Autogenerate compares against the ORM models
target_metadata = Base.metadata

SYNC_DRIVERS = {"postgresql": "postgresql+psycopg2", "sqlite": "sqlite"}


def get_url() -> str:
    """Application DATABASE_URL with its async driver swapped for a sync one."""
    url = make_url(get_settings().database_url)
    sync_url = url.set(drivername=SYNC_DRIVERS.get(url.get_backend_name(), url.drivername))
    logger.info("Migrating %s database %s", sync_url.get_backend_name(), sync_url.database)
    return sync_url.render_as_string(hide_password=False)


def _configure(db_url: str, **kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        # SQLite cannot ALTER most constraints in place
        render_as_batch=make_url(db_url).get_backend_name() == "sqlite",
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    url = get_url()
    _configure(url, url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a short-lived sync engine."""
    url = get_url()
    connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        _configure(url, connection=connection)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

"""
Alembic environment for the hospital_admin schema.

The database URL comes from application settings so migrations and the
API always target the same database.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from hospital_admin.core.config import get_settings
from hospital_admin.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Importing hospital_admin.models registers every table here
target_metadata = Base.metadata


def database_url() -> str:
    """
    `alembic -x db_url=...` wins over DATABASE_URL, so a migration can be
    pointed at a scratch database without editing .env.
    """
    overrides = context.get_x_argument(as_dictionary=True)
    return overrides.get("db_url") or get_settings().database_url


def _configure_kwargs(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "compare_server_default": True,
        # SQLite cannot ALTER most columns in place
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL instead of connecting (`alembic upgrade head --sql`)."""
    url = database_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = database_url()
    engine = create_engine(url, future=True, poolclass=pool.NullPool)

    with engine.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs(url))

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

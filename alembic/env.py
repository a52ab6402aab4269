import os
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Set inside run_migrations_*, once the models are imported.
target_metadata = None

# DATABASE_URL wins over alembic.ini; otherwise fall back to the app settings.
db_url = os.getenv("DATABASE_URL")
if not db_url:
    from products_api.core.config import get_settings

    db_url = get_settings().database_url_resolved
config.set_main_option("sqlalchemy.url", db_url)


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")

    # Import models here so Base.metadata is populated.
    from products_api import models  # noqa: F401
    from products_api.core.db import Base

    global target_metadata
    target_metadata = Base.metadata

    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    from products_api import models  # noqa: F401
    from products_api.core.db import Base

    global target_metadata
    target_metadata = Base.metadata

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

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

from sqlmodel import SQLModel
from app.core.config import get_settings
from app.utils.logger import setup_logging
import app.models  # noqa: F401

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
settings = get_settings()
config = context.config

config.set_main_option("sqlalchemy.url", str(settings.DATABASE_URL))

# Route alembic's stdlib logging through loguru like the API does.
setup_logging(settings.LOG_LEVEL)

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """
    Run Alembic migrations using the configured SQLAlchemy URL without creating an Engine.

    Configures the Alembic context to render SQL with literal binds and named parameter style, enables type comparison against target metadata, and executes migrations within a transaction so the generated SQL is emitted rather than executed against a live DB.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Run migrations using a live database connection built from the Alembic configuration.

    SQLite connections use batch mode so ALTER-style migrations work there too.
    """
    configuration = config.get_section(config.config_ini_section, {})

    connectable = engine_from_config(
        configuration,
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

from logging.config import fileConfig

from alembic import context

# Import Base and all models to ensure they're registered
from app.database.base import Base
from app.database.engine import get_engine
from app.models import (  # noqa: F401
    HeartEpisode,
    UserChatUsage,
    UserRole,
    WellnessFaq,
)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL for the wellness tables without connecting.

    The URL comes from the same settings the API uses (DATABASE_URL,
    DB_* parts, or the local SQLite file).
    """
    context.configure(
        url=get_engine().url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations over the API's own engine."""
    with get_engine().connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite needs batch mode for ALTER TABLE
            render_as_batch=connection.dialect.name == "sqlite",
            compare_type=True,
            compare_server_default=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

"""Alembic environment for the admin schema.

Migrations target the same database the API connects to (``DATABASE_PUBLIC_URL``
first, then ``DATABASE_URL``), so a local shell can migrate the hosted database.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from wellness_admin.models import ActivityLog, AssessmentDefinition, AssessmentQuestion, ResponseOption  # noqa: F401
from wellness_admin.platform.database import Base, database_url

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata

# SQLite cannot ALTER most columns in place
_batch = database_url.startswith("sqlite")


def run_migrations_offline() -> None:
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=_batch,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(database_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=_batch,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

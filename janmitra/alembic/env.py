from logging.config import fileConfig
from sqlalchemy import sql
from alembic import context
from alembic.operations import ops
from janmitra.config import Settings
from janmitra.database import create_db_engine
from janmitra.domain.model_base import Base
from janmitra.domain.user import models as user_models # noqa: F401
from janmitra.domain.session import models as session_models # noqa: F401
from janmitra.domain.issue import models as issue_models # noqa: F401
from janmitra.domain.volunteer import models as volunteer_models # noqa: F401
import logging

# Alembic Config object
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

logger = logging.getLogger('alembic.janmitra')

def database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or Settings.from_env().database_url

def process_revision_directives(context, revision, directives):
    """
    Rewrites autogenerated `add_column` of a non-nullable column into
    add as nullable, backfill existing rows, then set `NOT NULL`.
    """

    script: ops.MigrationScript = directives[0]

    for table_ops in script.upgrade_ops.ops:
        if not isinstance(table_ops, ops.ModifyTableOps):
            continue

        rewritten = []
        for op in table_ops.ops:
            if not isinstance(op, ops.AddColumnOp) or op.column.nullable:
                rewritten.append(op)
                continue

            column = op.column
            logger.info(f"Backfilling non-nullable column {op.table_name}.{column.name}")

            nullable_column = column.copy()
            nullable_column.nullable = True

            backfill = "''"
            if str(column.type) in ("INTEGER", "FLOAT"):
                backfill = "0"
            elif str(column.type) == "DATETIME":
                backfill = str(sql.func.current_timestamp())

            rewritten.extend([
                ops.AddColumnOp(op.table_name, nullable_column),
                ops.ExecuteSQLOp(
                    f"UPDATE {op.table_name} SET {column.name} = {backfill} WHERE {column.name} IS NULL"
                ),
                ops.AlterColumnOp(
                    op.table_name,
                    column.name,
                    existing_type=column.type,
                    modify_nullable=False
                ),
            ])

        table_ops.ops = rewritten

def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
        process_revision_directives=process_revision_directives
    )

    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = create_db_engine(database_url())

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
            process_revision_directives=process_revision_directives
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

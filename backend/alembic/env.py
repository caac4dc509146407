from __future__ import annotations

import os
from logging.config import fileConfig

from alembic.operations import ops
from sqlalchemy import engine_from_config, pool

from alembic import context
from evalservice.core.config import settings
from evalservice.core.db import Base

config = context.config

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


_DROP_OPS = (ops.DropTableOp, ops.DropColumnOp, ops.DropIndexOp, ops.DropConstraintOp)


def _collect_drops(migration_ops: ops.MigrateOperation) -> list[ops.MigrateOperation]:
    if isinstance(migration_ops, _DROP_OPS):
        return [migration_ops]
    found = []
    for op in getattr(migration_ops, "ops", None) or ():
        found.extend(_collect_drops(op))
    return found


def _describe(drop: ops.MigrateOperation) -> str:
    table = getattr(drop, "table_name", None)
    name = getattr(drop, "column_name", None) or getattr(drop, "constraint_name", None)
    name = name or getattr(drop, "index_name", None)
    return f"{type(drop).__name__}({table}{'.' + name if name else ''})"


def _guard_autogenerate_drops(_context: context.MigrationContext, _revision, directives) -> None:
    # Drops must be opted into
    if os.environ.get("EVALSERVICE_ALLOW_DROPS") == "1" or not directives:
        return

    upgrade_ops = getattr(directives[0], "upgrade_ops", None)
    drops = _collect_drops(upgrade_ops) if upgrade_ops is not None else []
    if drops:
        raise SystemExit(
            "Autogenerated revision would drop "
            + ", ".join(_describe(drop) for drop in drops)
            + ". Set EVALSERVICE_ALLOW_DROPS=1 to keep it."
        )


def run_migrations_offline() -> None:
    url = settings.DATABASE_URL
    config.set_main_option("DATABASE_URL", url)
    config.set_main_option("sqlalchemy.url", url)
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=_is_sqlite,
        process_revision_directives=_guard_autogenerate_drops,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    config.set_main_option("DATABASE_URL", settings.DATABASE_URL)
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
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
            render_as_batch=_is_sqlite,
            process_revision_directives=_guard_autogenerate_drops,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

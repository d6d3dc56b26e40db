from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parent.parent))
from config import DATABASE_URL
from database import Base
from models import (
    audit_log,
    business_partners,
    cashbook_balance,
    chart_of_accounts,
    direct_purchases,
    direct_sales,
    journal_entry,
    journal_line,
    payments,
    purchase_orders,
    sales_orders,
)  # noqa: F401  registers the tables on Base.metadata
config = context.config

# Logging setup comes from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# The environment decides which database to migrate, not alembic.ini
config.set_main_option("sqlalchemy.url", DATABASE_URL.replace("%", "%%"))

# Metadata used by autogenerate
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting to the database."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a live connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

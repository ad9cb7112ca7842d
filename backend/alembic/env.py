# backend/alembic/env.py
from logging.config import fileConfig
import os, sys
from alembic import context

# backend/ en el PYTHONPATH para poder importar `app`
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

# Mismo engine y metadata que la aplicación (DATABASE_URL / MSSQL_DSN del .env)
from app.core.db import engine as app_engine, Base
from app import models  # noqa: F401  llena Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
# SQLite no soporta ALTER TABLE completo
AS_BATCH = app_engine.dialect.name == "sqlite"


def run_migrations_offline():
    """Genera el SQL sin conectarse."""
    context.configure(
        url=str(app_engine.url),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=AS_BATCH,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    with app_engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=AS_BATCH,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

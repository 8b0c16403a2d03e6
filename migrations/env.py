# migrations/env.py
from __future__ import annotations

import logging
import os
from logging.config import fileConfig
from typing import Any, Dict, Optional

import sqlalchemy as sa
from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import make_url

# ------------------------------------------------------------
# Alembic config & logging
# ------------------------------------------------------------
config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)
log = logging.getLogger("alembic.env")

# ------------------------------------------------------------
# .env (opțional)
# ------------------------------------------------------------
try:
    from dotenv import find_dotenv, load_dotenv
    load_dotenv(find_dotenv(filename=".env", usecwd=True), override=False)
except ImportError:
    pass

# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "t", "yes", "y", "on"}

def _mask_url(url: str) -> str:
    try:
        u = make_url(url)
        if u.password:
            u = u.set(password="***")
        return str(u)
    except Exception:
        return url

def _quote_ident(ident: str) -> str:
    return '"' + ident.replace('"', '""') + '"'

def _get_database_url() -> str:
    env_url = (os.getenv("DATABASE_URL") or "").strip()
    if env_url:
        return env_url
    ini_url = (config.get_main_option("sqlalchemy.url") or "").strip()
    if ini_url:
        return ini_url
    raise RuntimeError("Nu am găsit URL-ul DB. Setează DATABASE_URL sau sqlalchemy.url în alembic.ini.")

# ------------------------------------------------------------
# Config general
# ------------------------------------------------------------
DATABASE_URL = _get_database_url()
IS_SQLITE = DATABASE_URL.startswith("sqlite")
DEFAULT_SCHEMA: Optional[str] = None if IS_SQLITE else (os.getenv("DB_SCHEMA") or "app").strip()
VERSION_TABLE = (os.getenv("ALEMBIC_VERSION_TABLE") or "alembic_version").strip()
AUTO_CREATE_SCHEMA = _env_bool("AUTO_CREATE_SCHEMA", True)
SQL_ECHO = _env_bool("ALEMBIC_SQL_ECHO", False)

# Modelele se înregistrează pe Base.metadata la import
from app.database import Base  # noqa: E402
import app.models  # noqa: E402,F401

target_metadata = Base.metadata

# ------------------------------------------------------------
# Bootstrap PG: schema + search_path
# ------------------------------------------------------------
def _ensure_schema(connection: sa.engine.Connection) -> None:
    if connection.dialect.name != "postgresql" or not DEFAULT_SCHEMA:
        return
    if AUTO_CREATE_SCHEMA:
        connection.exec_driver_sql(f"CREATE SCHEMA IF NOT EXISTS {_quote_ident(DEFAULT_SCHEMA)}")
    connection.exec_driver_sql(f"SET search_path = {_quote_ident(DEFAULT_SCHEMA)}, public")
    log.info("Using SESSION search_path for migrations: %s", connection.exec_driver_sql("SHOW search_path").scalar())

def _configure_kwargs() -> Dict[str, Any]:
    return dict(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        include_schemas=bool(DEFAULT_SCHEMA),
        version_table=VERSION_TABLE,
        version_table_schema=DEFAULT_SCHEMA,
    )

# ------------------------------------------------------------
# Offline migrations
# ------------------------------------------------------------
def run_migrations_offline() -> None:
    log.info("[alembic] offline url=%s | schema=%s", _mask_url(DATABASE_URL), DEFAULT_SCHEMA or "-")
    context.configure(url=DATABASE_URL, literal_binds=True, **_configure_kwargs())
    with context.begin_transaction():
        context.run_migrations()

# ------------------------------------------------------------
# Online migrations
# ------------------------------------------------------------
def run_migrations_online() -> None:
    log.info("[alembic] online url=%s | schema=%s", _mask_url(DATABASE_URL), DEFAULT_SCHEMA or "-")
    engine = sa.create_engine(DATABASE_URL, poolclass=pool.NullPool, echo=SQL_ECHO)

    with engine.connect() as connection:
        _ensure_schema(connection)
        if connection.in_transaction():
            connection.commit()

        context.configure(
            connection=connection,
            render_as_batch=connection.dialect.name == "sqlite",
            **_configure_kwargs(),
        )
        with context.begin_transaction():
            context.run_migrations()
        connection.commit()

# ------------------------------------------------------------
# Entrypoint
# ------------------------------------------------------------
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

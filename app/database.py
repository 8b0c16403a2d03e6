# app/database.py
from __future__ import annotations

import os
import re
from typing import Generator, List, Optional

from dotenv import load_dotenv
from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

# Încarcă variabilele din .env (pe host). În Docker vin din env_file/environment.
load_dotenv()

# -----------------------------
# Helpers
# -----------------------------
def _env_bool(key: str, default: bool = False) -> bool:
    val = os.getenv(key)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

def _sanitize_search_path(raw: str, fallback: str) -> str:
    """
    Acceptă doar identificatori ne-citați separați prin virgulă (ex. 'app,public').
    Dacă nu trece validarea, întoarce fallback.
    """
    parts = [p.strip() for p in (raw or "").split(",") if p.strip()]
    if not parts or not all(_IDENT_RE.fullmatch(p) for p in parts):
        return fallback
    uniq: List[str] = []
    for p in parts:
        if p not in uniq:
            uniq.append(p)
    return ",".join(uniq)

# -----------------------------
# Config din environment
# -----------------------------
DATABASE_URL = (os.getenv("DATABASE_URL", "sqlite:///./app.db") or "").strip()
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL este gol. Setează o valoare validă.")

IS_SQLITE = DATABASE_URL.startswith("sqlite")

# SQLite nu are scheme (în afară de ATTACH) -> tabelele stau în 'main'
DEFAULT_SCHEMA: Optional[str] = None if IS_SQLITE else ((os.getenv("DB_SCHEMA", "app") or "app").strip())

# Logs SQL la nevoie: DB_ECHO=1 / true / yes / on
ECHO_SQL = _env_bool("DB_ECHO", False)

PG_SEARCH_PATH = _sanitize_search_path(
    os.getenv("DB_SEARCH_PATH", f"{DEFAULT_SCHEMA},public") or "",
    f"{DEFAULT_SCHEMA},public",
)
PG_APP_NAME = (os.getenv("DB_APPLICATION_NAME") or "").strip()

# Pooling
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "1800"))  # sec (30 min)
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))    # sec

# Creează schema la pornire, dacă lipsește (util în dev/CI)
CREATE_SCHEMA_IF_MISSING = _env_bool("DB_CREATE_SCHEMA_IF_MISSING", False)

# -----------------------------
# Naming convention pentru Alembic/op.f()
# -----------------------------
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(schema=DEFAULT_SCHEMA, naming_convention=NAMING_CONVENTION)
Base = declarative_base(metadata=metadata)  # schema implicită pentru toate modelele

# -----------------------------
# Engine factory
# -----------------------------
def _build_engine_kwargs(url: str) -> dict:
    kwargs: dict = {"echo": ECHO_SQL, "pool_pre_ping": True}

    if url.startswith("sqlite"):
        # SQLite: single-thread în driver → dezactivează check_same_thread
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory → StaticPool (altfel fiecare conexiune are DB separat)
        if url in {"sqlite://", "sqlite:///:memory:", "sqlite+pysqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["poolclass"] = NullPool
        return kwargs

    kwargs.update(
        {
            "pool_size": POOL_SIZE,
            "max_overflow": MAX_OVERFLOW,
            "pool_recycle": POOL_RECYCLE,
            "pool_timeout": POOL_TIMEOUT,
        }
    )
    # Postgres: search_path prin libpq options (NU ca statement)
    connect_args: dict = {}
    if PG_SEARCH_PATH and url.startswith("postgresql"):
        connect_args["options"] = f"-c search_path={PG_SEARCH_PATH}"
    if PG_APP_NAME:
        connect_args["application_name"] = PG_APP_NAME
    if connect_args:
        kwargs["connect_args"] = connect_args
    return kwargs

def build_engine(url: str = DATABASE_URL) -> Engine:
    return create_engine(url, **_build_engine_kwargs(url))

engine: Engine = build_engine()

# -----------------------------
# Session factory
# -----------------------------
# expire_on_commit=False → obiectele rămân utilizabile după commit (evită re-load imediat)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency pentru o sesiune SQLAlchemy închisă garantat.
    Face rollback automat dacă apare o excepție în request handler.
    """
    db: Session = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def _ensure_schema() -> None:
    """Creează schema DEFAULT_SCHEMA dacă lipsește (doar cu DB_CREATE_SCHEMA_IF_MISSING=1, doar PG)."""
    if CREATE_SCHEMA_IF_MISSING and DEFAULT_SCHEMA and not IS_SQLITE:
        with engine.begin() as conn:
            conn.exec_driver_sql(f'CREATE SCHEMA IF NOT EXISTS "{DEFAULT_SCHEMA}"')

def init_db_if_requested() -> None:
    """
    Opțional: creează tabelele din modele când SQLALCHEMY_CREATE_ALL=1.
    Util în prototip/demo; în producție folosește Alembic.
    """
    _ensure_schema()
    if _env_bool("SQLALCHEMY_CREATE_ALL", False):
        import app.models  # noqa: F401
        Base.metadata.create_all(bind=engine)

__all__ = [
    "engine",
    "build_engine",
    "SessionLocal",
    "Base",
    "get_db",
    "init_db_if_requested",
]

# app/main.py
from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional, Tuple

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from app.core.errors import (
    ConflictError,
    DuplicateKeyError,
    NotFoundError,
    RegistryError,
    StoreError,
    ValidationError,
)
from app.core.logging import setup_logging
from app.core.settings import settings
from app.database import DEFAULT_SCHEMA, SessionLocal, get_db, init_db_if_requested
from app.routers.category import router as categories_router
from app.routers.location import router as locations_router
from app.routers.sku import router as skus_router

ALEMBIC_VERSION_TABLE = "alembic_version"

# --- Logging ---
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger("sku-registry-api")

tags_metadata = [
    {"name": "health", "description": "Liveness/Readiness checks"},
    {"name": "skus", "description": "SKU generation, storage & lookup"},
    {"name": "locations", "description": "Bin axis values (columns / rows)"},
    {"name": "categories", "description": "Category code lookup"},
]

# Registrul ridică erori de domeniu; aici le mapăm pe coduri HTTP
_ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateKeyError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_400_BAD_REQUEST,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _get_req_id_from_headers(request: Request) -> str:
    # Prefer X-Request-ID, apoi X-Correlation-ID; dacă lipsesc, generează unul.
    return (
        request.headers.get("x-request-id")
        or request.headers.get("x-correlation-id")
        or uuid.uuid4().hex[:12]
    )


async def request_context_mw(request: Request, call_next):
    """
    - Generează/propagă X-Request-ID
    - Headers de securitate minime
    - X-Process-Time
    """
    req_id = _get_req_id_from_headers(request)
    start = time.perf_counter()
    response: Response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    response.headers.setdefault("X-Request-ID", req_id)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Cache-Control", "no-store")
    response.headers.setdefault("X-App-Version", settings.APP_VERSION)
    response.headers.setdefault("X-Process-Time", f"{duration_ms:.1f}ms")
    return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: tabele (doar dacă e cerut explicit) + sanity check DB
    try:
        init_db_if_requested()
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        logger.info("DB startup check OK (schema=%s)", DEFAULT_SCHEMA or "-")
    except Exception:
        # pornim oricum; /health/db raportează starea reală
        logger.exception("DB startup check FAILED")
    yield


docs_off = settings.DISABLE_DOCS
app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    root_path=(settings.ROOT_PATH or "").strip(),
    docs_url=None if docs_off else "/docs",
    redoc_url=None if docs_off else "/redoc",
    openapi_url=None if docs_off else "/openapi.json",
)

app.middleware("http")(request_context_mw)

# CORS din env: CORS_ORIGINS="http://localhost:3000,https://example.com"
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time", "X-App-Version"],
    )

# --- Exception handlers ---
@app.exception_handler(RegistryError)
async def _registry_error_handler(request: Request, exc: RegistryError):
    code = next(
        (c for cls, c in _ERROR_STATUS.items() if isinstance(exc, cls)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=code,
        content={"detail": exc.message},
        headers={"X-Request-ID": _get_req_id_from_headers(request)},
    )

@app.exception_handler(RequestValidationError)
async def _validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
        headers={"X-Request-ID": _get_req_id_from_headers(request)},
    )

# Prinde 404/405 Starlette și răspunde JSON unitar
@app.exception_handler(StarletteHTTPException)
async def _starlette_http_exc_handler(request: Request, exc: StarletteHTTPException):
    headers = dict(exc.headers or {})
    headers.setdefault("X-Request-ID", _get_req_id_from_headers(request))
    detail = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
        logger.info("No route for %s %s", request.method, request.url.path)
        detail = {"message": "Not Found", "path": str(request.url.path)}
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        detail = {"message": "Method Not Allowed", "path": str(request.url.path)}
    return JSONResponse(status_code=exc.status_code, content={"detail": detail}, headers=headers)

@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
        headers={"X-Request-ID": _get_req_id_from_headers(request)},
    )

# --- Helpers Alembic/health ---
def _get_db_alembic_version(db: Session) -> Tuple[Optional[str], bool]:
    table = f'"{DEFAULT_SCHEMA}"."{ALEMBIC_VERSION_TABLE}"' if DEFAULT_SCHEMA else f'"{ALEMBIC_VERSION_TABLE}"'
    try:
        version = db.execute(text(f"SELECT version_num FROM {table}")).scalar_one_or_none()
        return version, True
    except Exception:
        db.rollback()
        return None, False

# --- Routes: health ---
@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}

@app.get("/healthz", tags=["health"])
def healthz():
    return {"ok": True, "ts": datetime.now(timezone.utc).isoformat()}

@app.get("/health/db", tags=["health"])
def health_db(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="DB not ready")
    return {"status": "ok", "db": "up", "dialect": db.get_bind().dialect.name}

@app.get("/health/migrations", tags=["health"])
def health_migrations(db: Session = Depends(get_db)):
    version, present = _get_db_alembic_version(db)
    return {"alembic_version": version, "present": present}

# --- Routers ---
app.include_router(skus_router)
app.include_router(locations_router)
app.include_router(categories_router)

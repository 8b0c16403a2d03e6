# tests/conftest.py
from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Trebuie setat înainte de importul app.* (schema/engine se decid la import)
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SQLALCHEMY_CREATE_ALL", "0")

import app.models  # noqa: E402,F401
from app.core.errors import DuplicateKeyError  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.category import Category  # noqa: E402
from app.models.location import Location  # noqa: E402
from app.models.sku import SkuRecord  # noqa: E402
from app.repositories.category import CategoryRepository  # noqa: E402
from app.repositories.location import LocationRepository  # noqa: E402
from app.repositories.sku import SkuRepository  # noqa: E402
from app.routers.deps import get_registry  # noqa: E402
from app.services.sku_registry import SkuRegistry  # noqa: E402

# iunie 2024 -> dateCode "0624"
FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0)


def fixed_clock() -> datetime:
    return FIXED_NOW


# --- Fake-uri in-memory pentru repository-uri -----------------------------------
class InMemoryRepository:
    """Fake pentru Repository: dict id -> obiect ORM tranzient."""

    model: Any = None
    unique_keys: tuple = ()

    def __init__(self) -> None:
        self.items: Dict[int, Any] = {}
        self._next_id = 1
        self.writes = 0

    @staticmethod
    def _matches(obj: Any, filters: Dict[str, Any]) -> bool:
        return all(getattr(obj, k) == v for k, v in filters.items())

    def _check_unique(self, data: Dict[str, Any], skip_id: Optional[int] = None) -> None:
        if not self.unique_keys:
            return
        key = {k: data.get(k) for k in self.unique_keys}
        for obj_id, obj in self.items.items():
            if obj_id != skip_id and self._matches(obj, key):
                raise DuplicateKeyError("Duplicate key.")

    def create(self, data: Dict[str, Any]) -> Any:
        self._check_unique(data)
        obj = self.model(id=self._next_id, **data)
        self.items[self._next_id] = obj
        self._next_id += 1
        self.writes += 1
        return obj

    def find_one(self, **filters: Any) -> Optional[Any]:
        return next((o for o in self.items.values() if self._matches(o, filters)), None)

    def find_many(self, **filters: Any) -> List[Any]:
        return [o for o in self.items.values() if self._matches(o, filters)]

    def find_by_id(self, obj_id: int) -> Optional[Any]:
        return self.items.get(obj_id)

    def update_by_id(self, obj_id: int, changes: Dict[str, Any]) -> Optional[Any]:
        obj = self.items.get(obj_id)
        if obj is None:
            return None
        for k, v in changes.items():
            setattr(obj, k, v)
        self.writes += 1
        return obj

    def delete_one(self, **filters: Any) -> Optional[Any]:
        obj = self.find_one(**filters)
        if obj is None:
            return None
        del self.items[obj.id]
        self.writes += 1
        return obj


class InMemorySkuStore(InMemoryRepository):
    model = SkuRecord
    unique_keys = ("serial_number",)

    def create(self, data: Dict[str, Any]) -> Any:
        data = {"created_at": datetime.now(timezone.utc), **data}
        return super().create(data)

    def max_serial(self) -> int:
        return max((o.serial_number for o in self.items.values()), default=0)


class InMemoryLocationStore(InMemoryRepository):
    model = Location
    unique_keys = ("type", "value")


class InMemoryCategoryStore(InMemoryRepository):
    model = Category
    unique_keys = ("code",)


@pytest.fixture()
def sku_store() -> InMemorySkuStore:
    return InMemorySkuStore()


@pytest.fixture()
def location_store() -> InMemoryLocationStore:
    return InMemoryLocationStore()


@pytest.fixture()
def category_store() -> InMemoryCategoryStore:
    return InMemoryCategoryStore()


@pytest.fixture()
def registry(sku_store, location_store, category_store) -> SkuRegistry:
    return SkuRegistry(sku_store, location_store, category_store, clock=fixed_clock)


# --- Client HTTP in-process pe SQLite in-memory ---------------------------------
@pytest.fixture()
def session_factory() -> Generator[sessionmaker, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def sql_registry(session_factory) -> Generator[SkuRegistry, None, None]:
    """Registrul peste repository-urile SQLAlchemy (constrângerile reale din DB)."""
    db = session_factory()
    try:
        yield SkuRegistry(
            SkuRepository(db),
            LocationRepository(db),
            CategoryRepository(db),
            clock=fixed_clock,
        )
    finally:
        db.close()


@pytest.fixture()
def client(session_factory) -> Generator[TestClient, None, None]:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def override_get_registry(db: Session = Depends(get_db)) -> SkuRegistry:
        return SkuRegistry(
            SkuRepository(db),
            LocationRepository(db),
            CategoryRepository(db),
            clock=fixed_clock,
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_registry] = override_get_registry
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

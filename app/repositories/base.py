# app/repositories/base.py
from __future__ import annotations

import logging
from typing import Any, Dict, Generic, List, Optional, Protocol, Sequence, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateKeyError, StoreError, ValidationError
from app.database import Base

log = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=Base)

# SQLSTATE pentru unique_violation (PG); SQLite nu are coduri, doar mesajul
_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == _UNIQUE_VIOLATION
    return "unique" in str(orig).lower()


class Repository(Protocol[T]):
    """
    Capabilitățile de store de care are nevoie SkuRegistry.
    Implementări: SQLAlchemy (producție) și in-memory (teste).
    """

    def create(self, data: Dict[str, Any]) -> T: ...

    def find_one(self, **filters: Any) -> Optional[T]: ...

    def find_many(self, **filters: Any) -> List[T]: ...

    def find_by_id(self, obj_id: int) -> Optional[T]: ...

    def update_by_id(self, obj_id: int, changes: Dict[str, Any]) -> Optional[T]: ...

    def delete_one(self, **filters: Any) -> Optional[T]: ...


class SkuStore(Repository[T], Protocol[T]):
    def max_serial(self) -> int:
        """Cel mai mare serial_number existent, 0 dacă nu există înregistrări."""
        ...


class SqlAlchemyRepository(Generic[M]):
    """Implementare comună peste o sesiune SQLAlchemy; un commit per operație."""

    model: Type[M]
    # mesaj pentru IntegrityError (unicitate)
    duplicate_message: str = "Duplicate key."

    def __init__(self, db: Session) -> None:
        self.db = db

    # -------------------------- Reads --------------------------

    def find_one(self, **filters: Any) -> Optional[M]:
        stmt = select(self.model).filter_by(**filters).limit(1)
        return self._read(lambda: self.db.execute(stmt).scalars().first())

    def find_many(self, **filters: Any) -> List[M]:
        stmt = select(self.model).filter_by(**filters).order_by(self.model.id.asc())
        return self._read(lambda: list(self.db.execute(stmt).scalars().all()))

    def find_by_id(self, obj_id: int) -> Optional[M]:
        return self._read(lambda: self.db.get(self.model, obj_id))

    # -------------------------- Mutations --------------------------

    def create(self, data: Dict[str, Any]) -> M:
        obj = self.model(**data)
        self.db.add(obj)
        self._commit()
        self.db.refresh(obj)
        return obj

    def update_by_id(self, obj_id: int, changes: Dict[str, Any]) -> Optional[M]:
        obj = self.find_by_id(obj_id)
        if obj is None:
            return None
        for k, v in changes.items():
            setattr(obj, k, v)
        self._commit()
        self.db.refresh(obj)
        return obj

    def delete_one(self, **filters: Any) -> Optional[M]:
        obj = self.find_one(**filters)
        if obj is None:
            return None
        self.db.delete(obj)
        self._commit()
        return obj

    # -------------------------- Helpers --------------------------

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if _is_unique_violation(e):
                raise DuplicateKeyError(self.duplicate_message) from e
            # CHECK / NOT NULL: nu e duplicat, e o valoare respinsă
            log.warning("Constraint violation on %s: %s", self.model.__tablename__, e.orig)
            raise ValidationError("Value rejected by a database constraint.") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("Commit failed on %s", self.model.__tablename__)
            raise StoreError("Database write failed.") from e

    def _read(self, fn):
        try:
            return fn()
        except SQLAlchemyError as e:
            log.exception("Read failed on %s", self.model.__tablename__)
            raise StoreError("Database read failed.") from e


__all__: Sequence[str] = ("Repository", "SkuStore", "SqlAlchemyRepository")

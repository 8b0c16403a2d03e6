# app/repositories/sku.py
from __future__ import annotations

from sqlalchemy import func, select

from app.models.sku import SkuRecord
from app.repositories.base import SqlAlchemyRepository


class SkuRepository(SqlAlchemyRepository[SkuRecord]):
    model = SkuRecord
    duplicate_message = "Serial number already exists; generate a new SKU and retry."

    def max_serial(self) -> int:
        # echivalentul findOne().sort({serialNumber: -1})
        stmt = select(func.max(SkuRecord.serial_number))
        return int(self._read(lambda: self.db.execute(stmt).scalar()) or 0)

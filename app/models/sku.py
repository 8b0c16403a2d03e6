# app/models/sku.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.errors import ValidationError
from app.core.settings import settings
from app.database import Base
from app.services import sku_code


class SkuRecord(Base):
    """
    Înregistrare SKU (tabel 'skus').

    Note:
    - `serial_number` e UNIC la nivel DB: e singurul mecanism care oprește
      două salvări concurente cu același serial propus de /generateSKU.
    - `column`/`row` sunt fie ambele setate (Stored), fie ambele NULL (Unstored).
    - `sku` e o proiecție a câmpurilor structurate, ținută în DB pentru căutări exacte.
    """
    __tablename__ = "skus"
    __table_args__ = (
        Index("ix_skus_serial_number", "serial_number", unique=True),
        Index("ix_skus_sku", "sku"),
        # folosite de verificarea de referință la ștergerea unei locații
        Index("ix_skus_column", "column"),
        Index("ix_skus_row", "row"),
        CheckConstraint("cost >= 0", name="cost_nonnegative"),
        CheckConstraint("price >= 0", name="price_nonnegative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sku: Mapped[str] = mapped_column(String(128), nullable=False)
    serial_number: Mapped[int] = mapped_column(Integer, nullable=False)
    column: Mapped[str | None] = mapped_column(String(32), nullable=True)
    row: Mapped[str | None] = mapped_column(String(32), nullable=True)
    date_code: Mapped[str] = mapped_column(String(4), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    subcategory: Mapped[str | None] = mapped_column(String(64), nullable=True)
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    storage_room: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(64), nullable=False, default="Active")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    @property
    def storage_status(self) -> str:
        return sku_code.storage_status(self.column, self.row)

    @property
    def generated_sku(self) -> str:
        """Șirul canonic recalculat din câmpurile structurate."""
        code = sku_code.SkuCode(self.serial_number, self.date_code, self.category, self.column, self.row)
        try:
            width = sku_code.serial_segment_width(self.sku)
        except ValidationError:
            width = settings.SKU_SERIAL_WIDTH
        return code.format(width)

    def __repr__(self) -> str:
        return f"<SkuRecord id={self.id!r} sku={self.sku!r} serial={self.serial_number!r}>"

# app/models/location.py
from __future__ import annotations

import enum

from sqlalchemy import Enum, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class LocationType(str, enum.Enum):
    """Axa unei locații: horizontal = coloană, vertical = rând."""
    horizontal = "horizontal"
    vertical = "vertical"

    @property
    def sku_field(self) -> str:
        # câmpul din SkuRecord care referă valoarea pe această axă
        return "column" if self is LocationType.horizontal else "row"


class Location(Base):
    """Valoare de axă pentru un bin (ex. coloana 'A', rândul '3'); unică per tip."""
    __tablename__ = "locations"
    __table_args__ = (
        UniqueConstraint("type", "value", name="uq_locations_type_value"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    type: Mapped[LocationType] = mapped_column(
        Enum(LocationType, name="location_type", native_enum=False, length=16), nullable=False
    )
    value: Mapped[str] = mapped_column(String(32), nullable=False)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Location id={self.id!r} type={self.type.value!r} value={self.value!r}>"

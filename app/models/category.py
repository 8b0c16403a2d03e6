# app/models/category.py
from __future__ import annotations

import enum

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class CategoryType(str, enum.Enum):
    category = "category"
    subcategory = "subcategory"


class Category(Base):
    """
    Tabel de lookup 'categories' (cod scurt -> nume prietenos).
    - Populat din migrații/scripturi; API-ul îl expune doar read-only.
    """
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    friendly_name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    code: Mapped[str] = mapped_column(String(4), nullable=False, unique=True)
    type: Mapped[CategoryType] = mapped_column(
        Enum(CategoryType, name="category_type", native_enum=False, length=16), nullable=False
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Category id={self.id!r} code={self.code!r} type={self.type.value!r}>"

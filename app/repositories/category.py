# app/repositories/category.py
from __future__ import annotations

from app.models.category import Category
from app.repositories.base import SqlAlchemyRepository


class CategoryRepository(SqlAlchemyRepository[Category]):
    model = Category
    duplicate_message = "Category code or name already exists."

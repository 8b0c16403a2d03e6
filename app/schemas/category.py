# app/schemas/category.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.models.category import CategoryType


class CategoryRead(BaseModel):
    """Intrare din tabelul de lookup al categoriilor."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    friendly_name: str = Field(alias="friendlyName")
    code: str
    type: CategoryType

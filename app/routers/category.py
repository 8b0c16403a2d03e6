# app/routers/category.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from app.routers.deps import get_registry
from app.schemas.category import CategoryRead
from app.services.sku_registry import SkuRegistry

router = APIRouter(prefix="/api", tags=["categories"])


@router.get(
    "/getCategories",
    response_model=List[CategoryRead],
    summary="Category / subcategory code lookup (read-only)",
)
def get_categories(
    type: str | None = Query(default=None, description="category | subcategory"),
    registry: SkuRegistry = Depends(get_registry),
):
    return registry.list_categories(type)

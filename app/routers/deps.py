# app/routers/deps.py
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.repositories.category import CategoryRepository
from app.repositories.location import LocationRepository
from app.repositories.sku import SkuRepository
from app.services.sku_registry import SkuRegistry


def get_registry(db: Session = Depends(get_db)) -> SkuRegistry:
    """Registrul SKU legat de sesiunea request-ului curent."""
    return SkuRegistry(
        skus=SkuRepository(db),
        locations=LocationRepository(db),
        categories=CategoryRepository(db),
    )


__all__ = ("get_registry",)

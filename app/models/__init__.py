# app/models/__init__.py
# Importă toate modelele ca să fie înregistrate pe Base.metadata (create_all / Alembic).
from app.models.category import Category
from app.models.location import Location
from app.models.sku import SkuRecord

__all__ = ("Category", "Location", "SkuRecord")

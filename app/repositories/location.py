# app/repositories/location.py
from __future__ import annotations

from app.models.location import Location
from app.repositories.base import SqlAlchemyRepository


class LocationRepository(SqlAlchemyRepository[Location]):
    model = Location
    duplicate_message = "Location already exists."

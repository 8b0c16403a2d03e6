# app/schemas/location.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from app.models.location import LocationType


class LocationIn(BaseModel):
    """Payload /addLocation și /removeLocation."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={"examples": [{"type": "horizontal", "value": "A"}]},
    )

    type: Optional[str] = None
    value: Optional[str] = None


class LocationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: LocationType
    value: str


class LocationAdded(BaseModel):
    message: str
    location: LocationRead


class LocationsByAxis(BaseModel):
    """Valorile disponibile pe fiecare axă, sortate."""
    horizontal: List[str]
    vertical: List[str]


class Message(BaseModel):
    message: str

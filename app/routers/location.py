# app/routers/location.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.routers.deps import get_registry
from app.schemas.location import LocationAdded, LocationIn, LocationRead, LocationsByAxis, Message
from app.services.sku_registry import SkuRegistry

router = APIRouter(prefix="/api", tags=["locations"])


@router.get("/getLocations", response_model=LocationsByAxis, summary="List bin axis values")
def get_locations(registry: SkuRegistry = Depends(get_registry)):
    return LocationsByAxis(**registry.list_locations())


@router.post(
    "/addLocation",
    response_model=LocationAdded,
    status_code=status.HTTP_201_CREATED,
    summary="Add a column (horizontal) or row (vertical) value",
)
def add_location(payload: LocationIn, registry: SkuRegistry = Depends(get_registry)):
    location = registry.add_location(payload.type, payload.value)
    return LocationAdded(message="Location added successfully", location=LocationRead.model_validate(location))


@router.post(
    "/removeLocation",
    response_model=Message,
    summary="Remove a location value (rejected while a SKU uses it)",
)
def remove_location(payload: LocationIn, registry: SkuRegistry = Depends(get_registry)):
    registry.remove_location(payload.type, payload.value)
    return Message(message="Location removed successfully")

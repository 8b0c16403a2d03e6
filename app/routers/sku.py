# app/routers/sku.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, status

from app.routers.deps import get_registry
from app.schemas.sku import (
    ExistsResponse,
    GenerateSkuRequest,
    GenerateSkuResponse,
    SkuLocationUpdate,
    SkuRead,
    SkuSave,
    SkuSaved,
    SkuSummary,
)
from app.services.sku_registry import SkuRegistry

router = APIRouter(prefix="/api", tags=["skus"])


@router.post(
    "/generateSKU",
    response_model=GenerateSkuResponse,
    summary="Preview the next SKU for a bin (nothing is persisted)",
)
def generate_sku(payload: GenerateSkuRequest, registry: SkuRegistry = Depends(get_registry)):
    """
    Propune următorul serial (`max + 1`). Nu rezervă nimic: două apeluri
    concurente pot primi același serial, iar al doilea /saveSKU va primi 400.
    """
    proposal = registry.generate_sku(
        payload.column, payload.row, payload.category, payload.subcategory
    )
    return GenerateSkuResponse(sku=proposal.sku, serial_number=proposal.serial_number)


@router.get("/checkSKU", response_model=ExistsResponse, summary="Check whether a SKU string exists")
def check_sku(
    sku: str | None = Query(default=None, description="Full SKU string"),
    registry: SkuRegistry = Depends(get_registry),
):
    return ExistsResponse(exists=registry.check_sku_exists(sku))


@router.post(
    "/saveSKU",
    response_model=SkuSaved,
    status_code=status.HTTP_201_CREATED,
    summary="Persist a previously generated SKU",
)
def save_sku(payload: SkuSave, registry: SkuRegistry = Depends(get_registry)):
    record = registry.save_sku(payload.model_dump())
    return SkuSaved(message="SKU saved successfully", sku=SkuRead.model_validate(record))


@router.get("/getSKUs", response_model=List[SkuSummary], summary="List all SKUs (projected fields)")
def get_skus(registry: SkuRegistry = Depends(get_registry)):
    return registry.list_all()


@router.get("/getSKU", response_model=SkuRead, summary="Get a SKU by its full string")
def get_sku(
    sku: str | None = Query(default=None, description="Full SKU string"),
    registry: SkuRegistry = Depends(get_registry),
):
    return registry.get_by_sku(sku)


@router.get(
    "/checkSerialNumber",
    response_model=ExistsResponse,
    summary="Check whether a serial number is taken",
)
def check_serial_number(
    serial_number: str | None = Query(default=None, alias="serialNumber"),
    registry: SkuRegistry = Depends(get_registry),
):
    return ExistsResponse(exists=registry.check_serial_exists(serial_number))


@router.put("/updateSKU/{sku_id}", response_model=SkuRead, summary="Move / unstore a SKU")
def update_sku(
    sku_id: int,
    payload: SkuLocationUpdate,
    registry: SkuRegistry = Depends(get_registry),
):
    """
    Doar câmpurile trimise se aplică. `column`/`row` trimise goale scot SKU-ul din
    stoc; `sku` e regenerat păstrând serialul, dateCode și categoria.
    """
    return registry.update_location(sku_id, payload.model_dump(exclude_unset=True))

# app/schemas/sku.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Numele de pe fir sunt camelCase (contractul clientului existent);
# populate_by_name permite și numele python în teste/scripturi.
_WIRE = ConfigDict(populate_by_name=True)


class GenerateSkuRequest(BaseModel):
    """Payload /generateSKU; câmpurile lipsă sunt raportate de registru (400)."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"column": "A", "row": "1", "category": "ELEC", "subcategory": "CBL"}]},
    )

    column: Optional[str] = None
    row: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None


class GenerateSkuResponse(BaseModel):
    model_config = _WIRE

    sku: str
    serial_number: int = Field(alias="serialNumber")


class SkuSave(BaseModel):
    """Payload /saveSKU: SKU-ul propus + metadatele înregistrării."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "sku": "A1-0001-0624-ELEC",
                    "column": "A",
                    "row": "1",
                    "category": "ELEC",
                    "subcategory": "CBL",
                    "cost": 2.5,
                    "price": 7.99,
                    "storageRoom": "Back room",
                    "description": "USB-C cable 1m",
                }
            ]
        },
    )

    sku: Optional[str] = None
    column: Optional[str] = None
    row: Optional[str] = None
    date_code: Optional[str] = Field(None, alias="dateCode")
    category: Optional[str] = None
    subcategory: Optional[str] = None
    cost: Optional[Decimal] = None
    price: Optional[Decimal] = None
    storage_room: Optional[str] = Field(None, alias="storageRoom")
    description: Optional[str] = None
    status: Optional[str] = None


class SkuLocationUpdate(BaseModel):
    """Payload /updateSKU/{id}; column și row goale = scos din stoc."""
    column: Optional[str] = None
    row: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


class SkuSummary(BaseModel):
    """Proiecția folosită de /getSKUs."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    sku: str
    column: Optional[str] = None
    row: Optional[str] = None
    category: str
    subcategory: Optional[str] = None
    serial_number: int = Field(alias="serialNumber")
    description: str = ""
    status: str


class SkuRead(SkuSummary):
    """Înregistrarea completă + câmpurile derivate."""
    date_code: str = Field(alias="dateCode")
    cost: float = 0
    price: float = 0
    storage_room: Optional[str] = Field(None, alias="storageRoom")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    storage_status: str = Field(alias="storageStatus")
    generated_sku: str = Field(alias="generatedSku")


class SkuSaved(BaseModel):
    message: str
    sku: SkuRead


class ExistsResponse(BaseModel):
    exists: bool

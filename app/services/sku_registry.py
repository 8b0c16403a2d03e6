# app/services/sku_registry.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Optional

from app.core.errors import (
    ConflictError,
    DuplicateKeyError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from app.core.settings import Settings, settings as default_settings
from app.models.category import CategoryType
from app.models.location import LocationType
from app.repositories.base import Repository, SkuStore
from app.services import sku_code
from app.services.sku_code import SkuCode

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedSku:
    """Propunere de SKU (nepersistată)."""
    sku: str
    serial_number: int
    date_code: str


def _clean(value: Any) -> Optional[str]:
    # "" / "   " / None -> None
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _required(value: Any, field: str) -> str:
    cleaned = _clean(value)
    if cleaned is None:
        raise ValidationError(f"'{field}' is required.")
    return cleaned


def _no_separator(value: Optional[str], field: str) -> None:
    if value and "-" in value:
        raise ValidationError(f"'{field}' must not contain '-'.")


def _amount(value: Any, field: str) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"'{field}' must be a number.") from None
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"'{field}' must be a number >= 0.")
    return amount


def _in_id_range(value: int) -> bool:
    return 1 <= value <= sku_code.MAX_SERIAL


class SkuRegistry:
    """
    Regulile de business pentru SKU-uri și locații.

    Alocarea serialului e în doi pași: `generate_sku` propune `max + 1` fără să
    scrie nimic, iar `save_sku` persistă. Între cei doi pași doi clienți pot primi
    același serial; indexul unic pe `serial_number` respinge a doua salvare cu
    DuplicateKeyError, iar clientul trebuie să ceară o nouă propunere.
    """

    def __init__(
        self,
        skus: SkuStore,
        locations: Repository,
        categories: Optional[Repository] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        config: Optional[Settings] = None,
    ) -> None:
        self.skus = skus
        self.locations = locations
        self.categories = categories
        self.clock = clock or datetime.now
        self.config = config or default_settings

    # -------------------------- SKU string --------------------------

    @property
    def serial_width(self) -> int:
        return self.config.SKU_SERIAL_WIDTH

    def current_date_code(self) -> str:
        return sku_code.date_code_for(self.clock())

    def _check_category(self, category: str) -> None:
        _no_separator(category, "category")
        limit = self.config.SKU_CATEGORY_MAX_LENGTH
        if len(category) > limit:
            raise ValidationError(f"'category' must be at most {limit} characters.")

    def generate_sku(
        self,
        column: Any,
        row: Any,
        category: Any,
        subcategory: Any = None,
    ) -> GeneratedSku:
        column = _required(column, "column")
        row = _required(row, "row")
        category = _required(category, "category")
        for name, val in (("column", column), ("row", row)):
            _no_separator(val, name)
        self._check_category(category)

        serial = self.skus.max_serial() + 1
        if serial > sku_code.MAX_SERIAL:
            raise StoreError("Serial number space exhausted.")
        code = SkuCode(
            serial_number=serial,
            date_code=self.current_date_code(),
            category=category,
            column=column,
            row=row,
        )
        return GeneratedSku(sku=code.format(self.serial_width), serial_number=serial, date_code=code.date_code)

    # -------------------------- Save --------------------------

    def save_sku(self, payload: Mapping[str, Any]):
        """
        Persistă un SKU propus anterior. Serialul vine din segmentul numeric al
        șirului `sku`; câmpurile structurate trebuie să reproducă exact șirul.
        """
        raw_sku = _required(payload.get("sku"), "sku")
        _, parsed = sku_code.split(raw_sku)

        column = _clean(payload.get("column"))
        row = _clean(payload.get("row"))
        sku_code.check_pairing(column, row)
        _no_separator(column, "column")
        _no_separator(row, "row")

        category = _clean(payload.get("category")) or parsed.category
        self._check_category(category)

        date_code = _clean(payload.get("date_code")) or parsed.date_code
        if not sku_code.DATE_CODE_RE.match(date_code):
            raise ValidationError("'dateCode' must be MMYY.")

        code = SkuCode(
            serial_number=parsed.serial_number,
            date_code=date_code,
            category=category,
            column=column,
            row=row,
        )
        canonical = code.format(self.serial_width)
        if canonical != raw_sku:
            raise ValidationError(
                f"SKU {raw_sku!r} does not match its fields (expected {canonical!r})."
            )

        data: Dict[str, Any] = {
            "sku": canonical,
            "serial_number": code.serial_number,
            "column": column,
            "row": row,
            "date_code": date_code,
            "category": category,
            "subcategory": _clean(payload.get("subcategory")),
            "cost": _amount(payload.get("cost"), "cost"),
            "price": _amount(payload.get("price"), "price"),
            "storage_room": _clean(payload.get("storage_room")),
            "description": payload.get("description") or "",
            "status": _clean(payload.get("status")) or self.config.SKU_DEFAULT_STATUS,
        }
        try:
            record = self.skus.create(data)
        except DuplicateKeyError:
            log.warning("SKU %s rejected by store (serial %s)", canonical, code.serial_number)
            raise
        log.info("SKU saved: %s (id=%s)", record.sku, record.id)
        return record

    # -------------------------- Reads --------------------------

    def check_sku_exists(self, sku: Any) -> bool:
        return self.skus.find_one(sku=_required(sku, "sku")) is not None

    def check_serial_exists(self, serial_number: Any) -> bool:
        raw = _required(serial_number, "serialNumber")
        try:
            serial = int(raw)
        except ValueError:
            raise ValidationError("'serialNumber' must be an integer.") from None
        if not _in_id_range(serial):
            return False
        return self.skus.find_one(serial_number=serial) is not None

    def get_by_sku(self, sku: Any):
        sku = _required(sku, "sku")
        record = self.skus.find_one(sku=sku)
        if record is None:
            raise NotFoundError(f"SKU {sku!r} not found.")
        return record

    def list_all(self) -> List[Any]:
        return list(self.skus.find_many())

    # -------------------------- Update --------------------------

    def update_location(self, record_id: int, changes: Mapping[str, Any]):
        """
        Mută (sau scoate din stoc) un SKU. Doar cheile prezente în `changes` se aplică;
        dacă apare `column` sau `row`, perechea e revalidată și `sku` regenerat din
        serial/dateCode/categorie existente, cu lățimea serialului din `sku` stocat.
        """
        if not _in_id_range(record_id):
            raise NotFoundError(f"SKU with id {record_id} not found.")
        record = self.skus.find_by_id(record_id)
        if record is None:
            raise NotFoundError(f"SKU with id {record_id} not found.")

        updates: Dict[str, Any] = {}
        if "column" in changes or "row" in changes:
            column = _clean(changes.get("column"))
            row = _clean(changes.get("row"))
            sku_code.check_pairing(column, row)
            _no_separator(column, "column")
            _no_separator(row, "row")
            code = SkuCode(
                serial_number=record.serial_number,
                date_code=record.date_code,
                category=record.category,
            ).relocated(column, row)
            updates.update(column=column, row=row, sku=code.format(self._stored_width(record)))

        if "description" in changes:
            updates["description"] = changes.get("description") or ""
        if _clean(changes.get("status")):
            updates["status"] = _clean(changes.get("status"))

        updated = self.skus.update_by_id(record_id, updates)
        if updated is None:
            raise NotFoundError(f"SKU with id {record_id} not found.")
        log.info("SKU %s updated (%s -> %s)", record_id, sorted(updates), updated.sku)
        return updated

    def _stored_width(self, record) -> int:
        # lățimea cu care a fost salvat, nu cea configurată acum
        try:
            return sku_code.serial_segment_width(record.sku)
        except ValidationError:
            log.warning("Stored SKU %r is malformed; using configured width", record.sku)
            return self.serial_width

    # -------------------------- Locations --------------------------

    @staticmethod
    def _location_type(value: Any) -> LocationType:
        raw = _required(value, "type")
        try:
            return LocationType(raw.lower())
        except ValueError:
            raise ValidationError("'type' must be 'horizontal' or 'vertical'.") from None

    def list_locations(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {t.value: [] for t in LocationType}
        for loc in self.locations.find_many():
            out[LocationType(loc.type).value].append(loc.value)
        for values in out.values():
            values.sort()
        return out

    def add_location(self, type_: Any, value: Any):
        loc_type = self._location_type(type_)
        value = _required(value, "value")
        _no_separator(value, "value")
        location = self.locations.create({"type": loc_type, "value": value})
        log.info("Location added: %s=%s", loc_type.value, value)
        return location

    def remove_location(self, type_: Any, value: Any) -> None:
        loc_type = self._location_type(type_)
        value = _required(value, "value")

        in_use = self.skus.find_one(**{loc_type.sku_field: value})
        if in_use is not None:
            log.warning("Refusing to remove %s=%s: used by SKU %s", loc_type.value, value, in_use.sku)
            raise ConflictError(
                f"Location {value!r} is in use by SKU {in_use.sku!r} and cannot be removed."
            )

        deleted = self.locations.delete_one(type=loc_type, value=value)
        if deleted is None:
            raise NotFoundError(f"Location {loc_type.value}={value!r} not found.")
        log.info("Location removed: %s=%s", loc_type.value, value)

    # -------------------------- Categories --------------------------

    def list_categories(self, type_: Any = None) -> List[Any]:
        if self.categories is None:
            return []
        raw = _clean(type_)
        if raw is None:
            return self.categories.find_many()
        try:
            cat_type = CategoryType(raw.lower())
        except ValueError:
            raise ValidationError("'type' must be 'category' or 'subcategory'.") from None
        return self.categories.find_many(type=cat_type)


__all__ = ("SkuRegistry", "GeneratedSku")

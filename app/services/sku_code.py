# app/services/sku_code.py
"""
Codec pentru șirul SKU canonic.

Format:
    {column}{row}-{serial}-{dateCode}-{category}   (stocat)
    {serial}-{dateCode}-{category}                 (nestocat)

`serial` are padding cu zerouri până la `width` cifre (implicit 4); valorile
mai mari nu se trunchiază, doar lățesc segmentul. `dateCode` este MMYY.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from app.core.errors import ValidationError

DATE_CODE_RE = re.compile(r"^(0[1-9]|1[0-2])\d{2}$")
_SERIAL_RE = re.compile(r"^\d+$")
# serial_number e INTEGER pe 32 biți în store
MAX_SERIAL = 2**31 - 1


def date_code_for(moment: datetime) -> str:
    """MMYY pentru momentul dat (ex. iunie 2024 -> '0624')."""
    return f"{moment.month:02d}{moment.year % 100:02d}"


def location_prefix(column: Optional[str], row: Optional[str]) -> str:
    return f"{column}{row}" if column and row else ""


def storage_status(column: Optional[str], row: Optional[str]) -> str:
    return "Stored" if column and row else "Unstored"


def check_pairing(column: Optional[str], row: Optional[str]) -> None:
    """Coloana și rândul trebuie să fie ambele completate sau ambele goale."""
    if bool(column) != bool(row):
        raise ValidationError("Both 'column' and 'row' must be either filled or empty.")


@dataclass(frozen=True)
class SkuCode:
    serial_number: int
    date_code: str
    category: str
    column: Optional[str] = None
    row: Optional[str] = None

    def format(self, width: int = 4) -> str:
        body = f"{self.serial_number:0{width}d}-{self.date_code}-{self.category}"
        prefix = location_prefix(self.column, self.row)
        return f"{prefix}-{body}" if prefix else body

    def relocated(self, column: Optional[str], row: Optional[str]) -> "SkuCode":
        # serial/dateCode/category rămân neatinse
        return replace(self, column=column or None, row=row or None)

    def __str__(self) -> str:
        return self.format()


def split(sku: str) -> tuple[str, SkuCode]:
    """(prefix_locație, SkuCode); ValidationError dacă șirul nu respectă formatul."""
    prefix, serial, date_code, category = _segments(sku)
    return prefix, SkuCode(serial_number=int(serial), date_code=date_code, category=category)


def serial_segment_width(sku: str) -> int:
    """Numărul de cifre al segmentului serial, așa cum e scris în `sku`."""
    return len(_segments(sku)[1])


def _segments(sku: str) -> tuple[str, str, str, str]:
    raw = (sku or "").strip()
    parts = raw.split("-")
    if len(parts) == 4:
        prefix, serial, date_code, category = parts
        if not prefix:
            raise ValidationError(f"Malformed SKU {raw!r}: empty location segment")
    elif len(parts) == 3:
        prefix = ""
        serial, date_code, category = parts
    else:
        raise ValidationError(f"Malformed SKU {raw!r}: expected 3 or 4 '-' separated segments")

    if not _SERIAL_RE.match(serial):
        raise ValidationError(f"Malformed SKU {raw!r}: serial segment {serial!r} is not numeric")
    if len(serial) > len(str(MAX_SERIAL)) or not 1 <= int(serial) <= MAX_SERIAL:
        raise ValidationError(f"Malformed SKU {raw!r}: serial number must be between 1 and {MAX_SERIAL}")
    if not DATE_CODE_RE.match(date_code):
        raise ValidationError(f"Malformed SKU {raw!r}: date code {date_code!r} is not MMYY")
    if not category:
        raise ValidationError(f"Malformed SKU {raw!r}: empty category segment")
    return prefix, serial, date_code, category


__all__ = [
    "SkuCode",
    "DATE_CODE_RE",
    "MAX_SERIAL",
    "date_code_for",
    "location_prefix",
    "storage_status",
    "check_pairing",
    "split",
    "serial_segment_width",
]

# app/core/errors.py
from __future__ import annotations


class RegistryError(Exception):
    """Baza pentru erorile registrului SKU; mesajul e afișat clientului."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RegistryError):
    """Input lipsă sau invalid (400)."""


class NotFoundError(RegistryError):
    """Nu există înregistrarea cerută (404)."""


class DuplicateKeyError(RegistryError):
    """Încălcare de unicitate la nivel de store (serial_number, (type, value))."""


class ConflictError(RegistryError):
    """Locația e încă referită de cel puțin un SKU."""


class StoreError(RegistryError):
    """Eșec al bazei de date (500)."""


__all__ = [
    "RegistryError",
    "ValidationError",
    "NotFoundError",
    "DuplicateKeyError",
    "ConflictError",
    "StoreError",
]

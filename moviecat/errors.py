# moviecat/errors.py
from __future__ import annotations
from typing import Optional


class CatalogError(Exception):
    """Base class for all catalog errors."""


class PersistenceError(CatalogError):
    """Storage operation failed (connection lost, statement rejected, ...)."""
    def __init__(self, detail: str = "Database operation failed"):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(PersistenceError):
    """Operation addressed an id without a matching row."""
    def __init__(self, resource: str = "Resource", ident: Optional[object] = None):
        detail = f"{resource} not found" if ident is None else f"{resource} {ident} not found"
        super().__init__(detail)
        self.resource = resource
        self.ident = ident


class ValidationError(CatalogError):
    """Caller supplied a structurally invalid value."""
    def __init__(self, detail: str = "Validation failed"):
        super().__init__(detail)
        self.detail = detail


class DateParseWarning(UserWarning):
    """A malformed date was stored as 'no value' instead of failing the write."""

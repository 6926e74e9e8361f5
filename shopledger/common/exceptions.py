"""
Error taxonomy for the ledger engine.

Business errors carry the field and the numbers involved so the HTTP layer
can hand them back to the caller unchanged.
"""

from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base class for every error raised by the engine."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, **context: Any):
        super().__init__(message)
        self.message = message
        self.field = field
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"error": type(self).__name__, "message": self.message}
        if self.field:
            data["field"] = self.field
        if self.context:
            data["context"] = {key: str(value) for key, value in self.context.items()}
        return data


class InvalidAmount(LedgerError, ValueError):
    """Money out of range or with more than 2 decimal places."""


class ValidationError(LedgerError, ValueError):
    """Malformed business input, e.g. an empty item list."""


class NotFound(LedgerError, LookupError):
    status_code = 404


class ItemNotFound(NotFound):
    """No inventory row matches the requested goods type."""


class InsufficientStock(LedgerError):
    status_code = 409

    def __init__(self, item_type: str, requested, available, unit: str = ""):
        super().__init__(
            f"Insufficient stock for {item_type}. "
            f"Requested: {requested}{unit}, Available: {available}{unit}",
            field="items",
            item_type=item_type,
            requested=requested,
            available=available,
        )
        self.item_type = item_type
        self.requested = requested
        self.available = available


class IntegrityIssue(LedgerError):
    """Balance or order corruption that cannot be repaired automatically."""

    status_code = 422


class StorageError(LedgerError):
    """Entity store I/O failure."""

    status_code = 503


class VersionConflict(StorageError):
    """A write was based on a stale revision of the entity."""

    status_code = 409

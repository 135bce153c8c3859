"""Errors raised by the inventory ledger and its services.

Every error leaves the ledger unchanged; views map them onto structured
responses via ``code``.
"""


class LedgerError(Exception):
    code = "ledger_error"

    def __init__(self, message: str = "", **context):
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.context = context

    @property
    def detail(self) -> str:
        return str(self)

    def as_payload(self) -> dict:
        return {"detail": self.detail, "code": self.code, **self.context}


class ValidationError(LedgerError):
    """Malformed ledger request."""

    code = "invalid"


class NotFoundError(ValidationError):
    """Referenced item or location does not exist."""

    code = "not_found"


class InsufficientStockError(LedgerError):
    """Not enough stock at the source location."""

    code = "insufficient_stock"

    def __init__(self, *, item_id: int, location_id: int, requested: int, available: int):
        super().__init__(
            f"Only {available} available",
            item_id=item_id,
            location_id=location_id,
            requested=requested,
            available=available,
        )
        self.item_id = item_id
        self.location_id = location_id
        self.requested = requested
        self.available = available


class ConcurrencyConflictError(LedgerError):
    """Stock rows stayed contended after bounded retries; try again."""

    code = "concurrency_conflict"


class ImmutableRecordError(LedgerError):
    """Ledger transactions cannot be changed or deleted."""

    code = "immutable"

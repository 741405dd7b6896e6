"""Invoicing Domain Errors

Every failure raised by the engine carries a stable ``code``, a human readable
``message`` and a ``context`` dict (invoice id, expected vs. actual values)
that callers can render or serialize.
"""

from typing import Any, Dict, Optional


class BillingError(Exception):
    """Base class for all invoicing engine errors"""

    code = "BILLING_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, **context: Any):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": {key: _jsonable(value) for key, value in self.context.items()},
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(BillingError):
    """Malformed or inconsistent input"""

    code = "VALIDATION_ERROR"


class InvoiceNotFoundError(ValidationError):
    code = "INVOICE_NOT_FOUND"

    def __init__(self, invoice_id: int):
        super().__init__(f"Invoice with ID {invoice_id} not found", invoice_id=invoice_id)


class OverpaymentError(BillingError):
    """Payment would push amount_paid above invoice_amount"""

    code = "OVERPAYMENT"


class InvalidSplitStateError(BillingError):
    """Invoice is paid, partially paid, already split or itself a split child"""

    code = "INVALID_SPLIT_STATE"


class SplitAmountMismatchError(BillingError):
    code = "SPLIT_AMOUNT_MISMATCH"


class ParentInvoiceSplitError(BillingError):
    """Payments must be recorded against the split children, not the parent"""

    code = "PARENT_INVOICE_SPLIT"


class ShareAllocationError(BillingError):
    code = "SHARE_ALLOCATION_INVALID"


class InvalidRateError(BillingError):
    code = "INVALID_RATE"


class InfrastructureError(BillingError):
    """Persistence or collaborator failure (lock contention, connectivity loss)"""

    code = "INFRASTRUCTURE_ERROR"


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return str(value)

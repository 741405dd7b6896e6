"""HTTP error translation

Domain errors are rendered as ``{"error": {"code", "message", "context"}}``.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from src.domain.errors import (
    BillingError,
    InfrastructureError,
    InvalidRateError,
    InvalidSplitStateError,
    InvoiceNotFoundError,
    OverpaymentError,
    ParentInvoiceSplitError,
    ShareAllocationError,
    SplitAmountMismatchError,
)

logger = logging.getLogger(__name__)

# Most specific first: InvoiceNotFoundError is also a ValidationError
ERROR_STATUS_CODES = [
    (InvoiceNotFoundError, status.HTTP_404_NOT_FOUND),
    (OverpaymentError, status.HTTP_409_CONFLICT),
    (InvalidSplitStateError, status.HTTP_409_CONFLICT),
    (ParentInvoiceSplitError, status.HTTP_409_CONFLICT),
    (SplitAmountMismatchError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ShareAllocationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidRateError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InfrastructureError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_code_for(error: BillingError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


class ClientError(Exception):
    """A domain error together with the HTTP status it is returned with"""

    def __init__(self, error: BillingError, status_code: int = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_code_for(error)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.error.code}: {exc.error.message}"
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.error.to_dict()})

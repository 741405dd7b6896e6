"""Invoice API Routes

FastAPI routes for the invoice lifecycle: creation, payments, splits,
currency breakdown and partner shares.
"""

from typing import List
from fastapi import APIRouter, Depends, status

from src.api.error import ClientError
from src.api.schemas.invoice_request import (
    AllocatePartnerSharesRequestSchema,
    CreateInvoiceRequestSchema,
    RecordPaymentRequestSchema,
    SplitInvoiceRequestSchema,
)
from src.app.use_cases.invoicing.aggregate import InvoiceAggregateService
from src.app.use_cases.invoicing.dtos import (
    AllocatePartnerSharesCommandDTO,
    CreateInvoiceCommandDTO,
    CurrencyBreakdownDTO,
    InvoiceResponseDTO,
    PartnerShareInputDTO,
    PartnerSharesResponseDTO,
    PaymentResponseDTO,
    RecordPaymentCommandDTO,
    RecordPaymentResponseDTO,
    SplitAllocationDTO,
    SplitInvoiceCommandDTO,
    SplitInvoiceResponseDTO,
)
from src.depends import get_invoice_service
from src.domain.errors import BillingError

router = APIRouter(prefix="/billing/invoices", tags=["Invoices"])

NOT_FOUND_RESPONSE = {
    404: {
        "description": "Invoice not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INVOICE_NOT_FOUND",
                        "message": "Invoice with ID 123 not found",
                        "context": {"invoice_id": 123},
                    }
                }
            }
        },
    }
}


@router.post(
    "/",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "UNSUPPORTED_CURRENCY",
                            "message": "Currency XYZ is not supported",
                            "context": {"currency": "XYZ"},
                        }
                    }
                }
            },
        },
        503: {"description": "Exchange rate service unavailable"},
    },
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    service: InvoiceAggregateService = Depends(get_invoice_service),
):
    """
    Create an invoice for a client / matter.

    When `invoice_currency` differs from `matter_currency` the amount is
    converted and the rate (`conversion_rate`, or the current provider rate)
    is frozen on the invoice.

    **Returns:**
    - 201: Invoice created
    - 400: Invalid currency, amount, dates or invoice number
    - 422: Invalid conversion rate
    - 503: No exchange rate available
    """
    command = CreateInvoiceCommandDTO(**request.model_dump())

    try:
        return await service.create(command)
    except BillingError as e:
        raise ClientError(e)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=NOT_FOUND_RESPONSE,
)
async def get_invoice(
    invoice_id: int,
    service: InvoiceAggregateService = Depends(get_invoice_service),
):
    """
    Retrieve an invoice with its payment state.

    `display_status` adds the overdue overlay; for a split invoice it is
    derived from the split children.
    """
    try:
        return await service.get_invoice(invoice_id)
    except BillingError as e:
        raise ClientError(e)


@router.post(
    "/{invoice_id}/payments",
    response_model=RecordPaymentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        **NOT_FOUND_RESPONSE,
        409: {
            "description": "Overpayment or payment against a split invoice",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "OVERPAYMENT",
                            "message": "Payment of 500.00 exceeds remaining balance 300.00",
                            "context": {"invoice_id": 1, "remaining": "300.00"},
                        }
                    }
                }
            },
        },
    },
)
async def record_payment(
    invoice_id: int,
    request: RecordPaymentRequestSchema,
    service: InvoiceAggregateService = Depends(get_invoice_service),
):
    """
    Append a payment to the invoice ledger.

    **Returns:**
    - 201: Payment recorded; response carries the new invoice balance
    - 404: Invoice not found
    - 409: Amount exceeds the remaining balance, or the invoice was split
    """
    command = RecordPaymentCommandDTO(invoice_id=invoice_id, **request.model_dump())

    try:
        return await service.record_payment(command)
    except BillingError as e:
        raise ClientError(e)


@router.get(
    "/{invoice_id}/payments",
    response_model=List[PaymentResponseDTO],
    status_code=status.HTTP_200_OK,
    responses=NOT_FOUND_RESPONSE,
)
async def list_payments(
    invoice_id: int,
    service: InvoiceAggregateService = Depends(get_invoice_service),
):
    """
    Payment history, newest first.

    For a split invoice the children's payments are listed with
    `is_split_payment = true`.
    """
    try:
        return await service.list_payments(invoice_id)
    except BillingError as e:
        raise ClientError(e)


@router.post(
    "/{invoice_id}/split",
    response_model=SplitInvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        **NOT_FOUND_RESPONSE,
        409: {"description": "Invoice already paid, partially paid or split"},
        422: {
            "description": "Allocations do not sum to the invoice amount",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "SPLIT_AMOUNT_MISMATCH",
                            "message": "Split amounts total 900.00 but invoice amount is 1000.00",
                            "context": {"invoice_id": 1, "expected": "1000.00", "actual": "900.00"},
                        }
                    }
                }
            },
        },
    },
)
async def split_invoice(
    invoice_id: int,
    request: SplitInvoiceRequestSchema,
    service: InvoiceAggregateService = Depends(get_invoice_service),
):
    """
    Split an unpaid invoice into independently payable child invoices.

    Allocation amounts must sum exactly to the invoice amount.
    """
    command = SplitInvoiceCommandDTO(
        invoice_id=invoice_id,
        allocations=[
            SplitAllocationDTO(**allocation.model_dump()) for allocation in request.allocations
        ],
    )

    try:
        return await service.split(command)
    except BillingError as e:
        raise ClientError(e)


@router.get(
    "/{invoice_id}/splits",
    response_model=List[InvoiceResponseDTO],
    status_code=status.HTTP_200_OK,
    responses=NOT_FOUND_RESPONSE,
)
async def list_splits(
    invoice_id: int,
    service: InvoiceAggregateService = Depends(get_invoice_service),
):
    """Split children of an invoice ordered by sequence (empty if never split)."""
    try:
        return await service.list_splits(invoice_id)
    except BillingError as e:
        raise ClientError(e)


@router.get(
    "/{invoice_id}/currency-breakdown",
    response_model=CurrencyBreakdownDTO,
    status_code=status.HTTP_200_OK,
    responses=NOT_FOUND_RESPONSE,
)
async def get_currency_breakdown(
    invoice_id: int,
    service: InvoiceAggregateService = Depends(get_invoice_service),
):
    """
    Original and converted amounts with the rate frozen at creation.

    **Example response:**
    ```json
    {
      "invoice_id": 1,
      "invoice_number": "07012026-M",
      "matter_currency": "USD",
      "invoice_currency": "INR",
      "original_amount": "1000.00",
      "converted_amount": "83000.00",
      "conversion_rate": "83.000000",
      "is_converted": true
    }
    ```
    """
    try:
        return await service.get_breakdown(invoice_id)
    except BillingError as e:
        raise ClientError(e)


@router.put(
    "/{invoice_id}/partner-shares",
    response_model=PartnerSharesResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        **NOT_FOUND_RESPONSE,
        422: {
            "description": "Shares do not total 100%",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "SHARE_ALLOCATION_INVALID",
                            "message": "Partner shares must total exactly 100%. Current total: 90%",
                            "context": {"invoice_id": 1, "expected": "100", "actual": "90"},
                        }
                    }
                }
            },
        },
    },
)
async def allocate_partner_shares(
    invoice_id: int,
    request: AllocatePartnerSharesRequestSchema,
    service: InvoiceAggregateService = Depends(get_invoice_service),
):
    """Replace the partner share allocation of an invoice."""
    command = AllocatePartnerSharesCommandDTO(
        invoice_id=invoice_id,
        shares=[PartnerShareInputDTO(**share.model_dump()) for share in request.shares],
    )

    try:
        return await service.allocate_partner_shares(command)
    except BillingError as e:
        raise ClientError(e)


@router.get(
    "/{invoice_id}/partner-shares",
    response_model=PartnerSharesResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=NOT_FOUND_RESPONSE,
)
async def get_partner_shares(
    invoice_id: int,
    service: InvoiceAggregateService = Depends(get_invoice_service),
):
    """Partner shares with amounts computed from the cash collected so far."""
    try:
        return await service.get_partner_shares(invoice_id)
    except BillingError as e:
        raise ClientError(e)

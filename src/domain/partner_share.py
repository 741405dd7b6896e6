"""Partner Share Domain Entity and Allocation Rules

A partner share assigns a percentage of the cash collected on an invoice to
a firm partner. Only the percentage is stored; the monetary amount is
recomputed from the collected amount every time it is read.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple
from sqlmodel import Field, Column, UniqueConstraint
from sqlalchemy import BigInteger, ForeignKey, Numeric
from src.domain.base import BaseModel, id_column
from src.domain.currency import to_decimal
from src.domain.errors import ShareAllocationError, ValidationError

HUNDRED = Decimal("100")
DEFAULT_TOLERANCE = Decimal("0.01")


class PartnerShare(BaseModel, table=True):
    """
    Partner Share - Percentage of collected revenue owed to a partner

    Domain Rules:
    - One share per (invoice, partner)
    - 0 <= share_percentage <= 100
    - Shares of one invoice total 100 within +/- 0.01
    """

    __tablename__ = "invoice_partner_shares"
    __table_args__ = (
        UniqueConstraint('invoice_id', 'partner_id', name='uq_partner_share_invoice_partner'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=id_column(),
        description="Unique share identifier (auto-increment)"
    )

    invoice_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True),
        description="Invoice the share applies to"
    )

    partner_id: int = Field(index=True, description="Partner (user) receiving the share")

    share_percentage: Decimal = Field(
        sa_column=Column(Numeric(7, 4), nullable=False),
        description="Percentage of collected revenue (0-100)"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)


def validate_shares(
    shares: Iterable[Tuple[int, Decimal]],
    tolerance: Decimal = DEFAULT_TOLERANCE,
    invoice_id: Optional[int] = None,
) -> List[Tuple[int, Decimal]]:
    """
    Validate a partner share allocation

    Args:
        shares: (partner_id, percentage) pairs
        tolerance: Allowed deviation of the total from 100
        invoice_id: Included in error context

    Returns:
        The shares with percentages coerced to Decimal

    Raises:
        ValidationError: empty allocation, duplicate partner, percentage out of range
        ShareAllocationError: percentages do not total 100 within tolerance
    """
    normalized = [(partner_id, to_decimal(pct)) for partner_id, pct in shares]

    if not normalized:
        raise ValidationError(
            "Partner shares are required", code="PARTNER_SHARES_REQUIRED", invoice_id=invoice_id
        )

    partner_ids = [partner_id for partner_id, _ in normalized]
    if len(set(partner_ids)) != len(partner_ids):
        raise ValidationError(
            "Duplicate partner IDs in partner shares",
            code="DUPLICATE_PARTNER",
            invoice_id=invoice_id,
            partner_ids=partner_ids,
        )

    for partner_id, pct in normalized:
        if not pct.is_finite() or pct < 0 or pct > HUNDRED:
            raise ValidationError(
                f"Share percentage for partner {partner_id} must be between 0 and 100",
                code="INVALID_SHARE_PERCENTAGE",
                invoice_id=invoice_id,
                partner_id=partner_id,
                percentage=pct,
            )

    total = sum((pct for _, pct in normalized), Decimal("0"))
    if abs(total - HUNDRED) > to_decimal(tolerance):
        raise ShareAllocationError(
            f"Partner shares must total exactly 100%. Current total: {total}%",
            invoice_id=invoice_id,
            expected=HUNDRED,
            actual=total,
        )

    return normalized


def share_amount(collected: Decimal, percentage: Decimal) -> Decimal:
    """Unrounded share of the collected amount"""
    return collected * percentage / HUNDRED

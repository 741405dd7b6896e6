"""Unit tests for partner share validation"""

import pytest
from decimal import Decimal

from src.domain.errors import ShareAllocationError, ValidationError
from src.domain.partner_share import share_amount, validate_shares


class TestValidateShares:
    def test_valid_allocation(self):
        shares = validate_shares([(7, "60"), (9, Decimal("40"))])
        assert shares == [(7, Decimal("60")), (9, Decimal("40"))]

    def test_thirds_within_tolerance(self):
        validate_shares([(1, "33.33"), (2, "33.33"), (3, "33.33")])

    def test_total_off_by_more_than_tolerance(self):
        with pytest.raises(ShareAllocationError) as exc_info:
            validate_shares([(7, "60"), (9, "30")], invoice_id=5)

        error = exc_info.value
        assert error.code == "SHARE_ALLOCATION_INVALID"
        assert error.context["expected"] == Decimal("100")
        assert error.context["actual"] == Decimal("90")
        assert error.context["invoice_id"] == 5

    def test_empty_allocation(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_shares([])
        assert exc_info.value.code == "PARTNER_SHARES_REQUIRED"

    def test_duplicate_partner(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_shares([(7, "50"), (7, "50")])
        assert exc_info.value.code == "DUPLICATE_PARTNER"

    def test_percentage_out_of_range(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_shares([(7, "120"), (9, "-20")])
        assert exc_info.value.code == "INVALID_SHARE_PERCENTAGE"


def test_share_amount():
    assert share_amount(Decimal("20000.00"), Decimal("60")) == Decimal("12000")

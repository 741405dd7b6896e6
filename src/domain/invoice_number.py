"""Invoice Numbering

Format: DDMMYYYY-OFFICE for the first invoice of a day, then
DDMMYYYY-OFFICE-A, -B, ... -Z, -AA, -AB for subsequent ones.
Split children append -<sequence> to their parent's number and are not
counted when allocating the next number.
"""

import re
from datetime import date
from typing import Dict, Iterable, Optional

ISSUED_NUMBER_PATTERN = re.compile(r"^(\d{2})(\d{2})(\d{4})-([A-Z]+)(-[A-Z]+)?$")

DEFAULT_OFFICE_CODES = {
    "delhi": "D",
    "mumbai": "M",
    "bangalore": "B",
    "delhi (lt)": "LT",
}
DEFAULT_OFFICE_CODE = "M"


def office_code(
    billing_location: Optional[str],
    office_codes: Optional[Dict[str, str]] = None,
    default: str = DEFAULT_OFFICE_CODE,
) -> str:
    codes = office_codes if office_codes is not None else DEFAULT_OFFICE_CODES
    if not billing_location:
        return default
    return codes.get(billing_location.strip().lower(), default)


def sequence_suffix(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA, 27 -> AB"""
    result = ""
    n = index
    while True:
        result = chr(65 + n % 26) + result
        n = n // 26 - 1
        if n < 0:
            return result


def is_valid_invoice_number(
    invoice_number: str,
    office_codes: Optional[Dict[str, str]] = None,
    default_office_code: str = DEFAULT_OFFICE_CODE,
) -> bool:
    """Check format, office code and the calendar plausibility of the date portion"""
    match = ISSUED_NUMBER_PATTERN.match(invoice_number or "")
    if not match:
        return False
    codes = office_codes if office_codes is not None else DEFAULT_OFFICE_CODES
    if match.group(4) not in set(codes.values()) | {default_office_code}:
        return False
    day, month, year = (int(part) for part in match.group(1, 2, 3))
    return 1 <= day <= 31 and 1 <= month <= 12 and 2000 <= year <= 2100


def next_invoice_number(
    invoice_date: date,
    billing_location: Optional[str],
    numbers_for_date: Iterable[str],
    office_codes: Optional[Dict[str, str]] = None,
    default_office_code: str = DEFAULT_OFFICE_CODE,
) -> str:
    """
    Allocate the next invoice number for a date

    Args:
        invoice_date: Calendar date of the invoice
        billing_location: Billing office (mapped to an office code)
        numbers_for_date: Invoice numbers already issued for the same date
        office_codes: location -> code mapping
        default_office_code: Code used for unknown locations

    Returns:
        DDMMYYYY-OFFICE or DDMMYYYY-OFFICE-<letters>
    """
    code = office_code(billing_location, office_codes, default_office_code)
    prefix = invoice_date.strftime("%d%m%Y")
    issued = {
        number for number in numbers_for_date
        if number.startswith(prefix) and ISSUED_NUMBER_PATTERN.match(number)
    }

    if not issued:
        return f"{prefix}-{code}"
    # Numbers supplied by callers can occupy a later suffix
    index = len(issued) - 1
    while f"{prefix}-{code}-{sequence_suffix(index)}" in issued:
        index += 1
    return f"{prefix}-{code}-{sequence_suffix(index)}"

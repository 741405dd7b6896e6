"""Currency Conversion

Converts amounts between a matter's currency and an invoice's billing
currency using a rate frozen on the invoice at creation time.

Domain Rules:
- Amounts are rounded half-up to the target currency precision
  (0 decimals for zero-decimal currencies such as JPY, 2 otherwise)
- Rates are stored with 6 decimal places and must be > 0
- A rate exists only when the two currencies differ
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional, Union
from src.domain.errors import InvalidRateError, ValidationError

DEFAULT_SUPPORTED_CURRENCIES = ("INR", "USD", "EUR", "GBP", "AED", "JPY")
DEFAULT_ZERO_DECIMAL_CURRENCIES = ("JPY",)

RATE_PRECISION = Decimal("0.000001")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Coerce a number to Decimal without binary float artifacts"""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid numeric value: {value!r}", value=value)


class CurrencyConverter:
    """
    Currency Converter

    Holds the supported currency list and per-currency precision. Rates are
    always supplied by the caller (the snapshot on the invoice); this class
    never looks rates up itself.
    """

    def __init__(
        self,
        supported_currencies: Iterable[str] = DEFAULT_SUPPORTED_CURRENCIES,
        zero_decimal_currencies: Iterable[str] = DEFAULT_ZERO_DECIMAL_CURRENCIES,
    ):
        self.supported_currencies = tuple(c.upper() for c in supported_currencies)
        self.zero_decimal_currencies = frozenset(c.upper() for c in zero_decimal_currencies)

    def is_supported(self, currency: Optional[str]) -> bool:
        return bool(currency) and currency.upper() in self.supported_currencies

    def ensure_supported(self, currency: Optional[str]) -> str:
        """Return the normalized currency code or raise ValidationError"""
        if not self.is_supported(currency):
            raise ValidationError(
                f"Invalid currency {currency!r}. Supported currencies: "
                f"{', '.join(self.supported_currencies)}",
                code="UNSUPPORTED_CURRENCY",
                currency=currency,
            )
        return currency.upper()

    def precision(self, currency: str) -> int:
        """Number of decimal places used by the currency"""
        return 0 if currency.upper() in self.zero_decimal_currencies else 2

    def quantum(self, currency: str) -> Decimal:
        return Decimal(1).scaleb(-self.precision(currency))

    def quantize(self, amount: Number, currency: str) -> Decimal:
        return to_decimal(amount).quantize(self.quantum(currency), rounding=ROUND_HALF_UP)

    def is_quantized(self, amount: Number, currency: str) -> bool:
        """True if the amount carries no more decimals than the currency allows"""
        value = to_decimal(amount)
        return value == value.quantize(self.quantum(currency), rounding=ROUND_HALF_UP)

    def normalize_rate(self, rate: Number) -> Decimal:
        """Validate a conversion rate and round it to 6 decimal places"""
        value = to_decimal(rate)
        if not value.is_finite() or value <= 0:
            raise InvalidRateError(
                f"Conversion rate must be greater than 0, got {rate}", rate=rate
            )
        normalized = value.quantize(RATE_PRECISION, rounding=ROUND_HALF_UP)
        if normalized <= 0:
            raise InvalidRateError(
                f"Conversion rate {rate} rounds to zero at 6 decimal places", rate=rate
            )
        return normalized

    def convert(self, amount: Number, rate: Number, target_currency: str) -> Decimal:
        """
        Convert amount using a frozen rate

        Args:
            amount: Amount in the source currency
            rate: Source -> target conversion rate (must be > 0)
            target_currency: Currency whose precision the result is rounded to

        Returns:
            Converted amount rounded half-up to target precision

        Raises:
            InvalidRateError: rate <= 0
        """
        value = to_decimal(rate)
        if not value.is_finite() or value <= 0:
            raise InvalidRateError(
                f"Conversion rate must be greater than 0, got {rate}", rate=rate
            )
        return self.quantize(to_decimal(amount) * value, target_currency)


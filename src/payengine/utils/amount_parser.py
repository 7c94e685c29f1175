"""Amount parsing and fixed-precision arithmetic utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN

from payengine.domain.errors import AmountOverflowError, amount_overflow

# Four fractional digits, eighteen significant digits overall. The upper
# bound keeps every amount representable as a signed 64-bit count of
# ten-thousandths, which is how the SQL store persists them.
AMOUNT_PLACES = 4
MAX_DIGITS = 18
QUANTUM = Decimal(1).scaleb(-AMOUNT_PLACES)
MAX_AMOUNT = Decimal(10) ** (MAX_DIGITS - AMOUNT_PLACES) - QUANTUM
ZERO = Decimal(0).quantize(QUANTUM)


def quantize_amount(amount) -> Decimal:
    """Round an amount to four fractional digits.

    Args:
        amount: Decimal (or anything Decimal accepts via str())

    Returns:
        Decimal with exponent -4

    Raises:
        ValueError: If the amount is not finite or is out of range
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number, got {amount}")
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(amount_overflow(amount))

    amount = amount.quantize(QUANTUM, rounding=ROUND_HALF_EVEN)
    if amount.is_zero():
        # Drop the sign of negative zero
        return ZERO
    return amount


def checked_amount(amount: Decimal) -> Decimal:
    """Return a computed balance unchanged, or fail if it left the supported range.

    Raises:
        AmountOverflowError: If the balance is not representable
    """
    if abs(amount) > MAX_AMOUNT:
        raise AmountOverflowError(amount_overflow(amount))
    return amount


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a four-place Decimal.

    Handles "10", "10.5", "  0.0001 " and scientific notation such as "1e2".

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is out of range
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    return quantize_amount(amount)

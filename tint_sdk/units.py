"""
Conversion between human-readable decimal amounts and smallest token units.
"""
import re

from .exceptions import ConversionError

_DECIMAL_RE = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")


def parse_units(amount: str, decimals: int) -> int:
    """
    Convert a decimal string such as "1.25" to an integer of smallest units.

    Args:
        amount: Non-negative decimal string
        decimals: Token decimal precision

    Returns:
        Amount in smallest units

    Raises:
        ConversionError: If the string is not a non-negative decimal or has
            more fractional digits than the token supports
    """
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise ConversionError(f"Invalid token decimals: {decimals!r}")
    if not isinstance(amount, str):
        raise ConversionError(f"Amount must be a decimal string, got {type(amount).__name__}")

    text = amount.strip()
    if not _DECIMAL_RE.match(text):
        raise ConversionError(f"Invalid amount: {amount!r}")

    whole, _, fraction = text.partition(".")
    fraction = fraction.rstrip("0")
    if len(fraction) > decimals:
        raise ConversionError(
            f"Amount {amount!r} has more than {decimals} decimal places"
        )

    return int(whole or "0") * 10 ** decimals + int(fraction.ljust(decimals, "0") or "0")


def format_units(value: int, decimals: int) -> str:
    """
    Convert smallest units back to a decimal string, always with a fractional part.

    >>> format_units(1500000, 6)
    '1.5'
    >>> format_units(10 ** 18, 18)
    '1.0'
    """
    if value < 0:
        return "-" + format_units(-value, decimals)
    if decimals == 0:
        return f"{value}.0"
    whole, fraction = divmod(value, 10 ** decimals)
    fraction_text = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{whole}.{fraction_text}"

"""
GS1 Validation Primitives

Building blocks shared by the linters and the structural rule engine:
- GS1 character sets (CSET 82, CSET 39, CSET 64, CSET 32)
- Mod10 check digit (GTIN, SSCC, GLN, ...)
- Alphanumeric check character pair (GMN, GINC)
- Calendar helpers for YYMMDD / YYYYMMDD style dates
- Decimal position handling for weight/measure AIs

Based on GS1 General Specifications and the GS1 Barcode Syntax Dictionary.
"""

from __future__ import annotations

from calendar import monthrange
from typing import Optional, Tuple


# GS1 AI encodable character set 82, in the order used for check pair weighting
CSET82_ORDERED = (
    '!"%&\'()*+,-./0123456789:;<=>?'
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ_'
    'abcdefghijklmnopqrstuvwxyz'
)
CSET82 = frozenset(CSET82_ORDERED)

# GS1 AI encodable character set 39 (restricted alphanumeric)
CSET39 = frozenset('#-/0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ')

# GS1 AI encodable character set 64 (file-safe URI-safe base64)
CSET64 = frozenset(
    '-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz'
)

# Check characters for the alphanumeric check pair
CSET32 = '23456789ABCDEFGHJKLMNPQRSTUVWXYZ'

NUMERIC = frozenset('0123456789')

_CHECK_PAIR_PRIMES = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37,
    41, 43, 47, 53, 59, 61, 67, 71, 73, 79, 83, 89,
)

# Longest value (including the pair) the prime weights can cover
MAX_CHECK_PAIR_LENGTH = len(_CHECK_PAIR_PRIMES) + 1


def first_invalid(value: str, charset: frozenset) -> Optional[int]:
    """Return the index of the first character outside charset, or None."""
    for i, char in enumerate(value):
        if char not in charset:
            return i
    return None


def calculate_check_digit_mod10(digits: str) -> int:
    """
    Calculate GS1 Mod10 check digit.

    Algorithm (GS1 General Specifications):
    1. From right to left, alternate multipliers 3 and 1
    2. Sum all products
    3. Check digit = (10 - (sum mod 10)) mod 10

    Args:
        digits: Numeric string without check digit

    Returns:
        Calculated check digit (0-9)
    """
    if not digits or not digits.isdigit():
        raise ValueError("Input must be a non-empty numeric string")

    total = 0
    for i, digit in enumerate(reversed(digits)):
        multiplier = 3 if i % 2 == 0 else 1
        total += int(digit) * multiplier

    return (10 - (total % 10)) % 10


def has_valid_check_digit(value: str) -> bool:
    """True if the final digit of value is the Mod10 check digit of the rest."""
    if len(value) < 2 or not value.isdigit():
        return False
    return calculate_check_digit_mod10(value[:-1]) == int(value[-1])


def calculate_check_pair(data: str) -> str:
    """
    Calculate the two-character GS1 check pair for CSET 82 data.

    Each character's CSET 82 position is weighted by a prime, the rightmost
    character taking the smallest prime. The sum modulo 1021 is split into
    two CSET 32 characters.

    Args:
        data: The value without its trailing check pair

    Returns:
        Two check characters
    """
    if len(data) > len(_CHECK_PAIR_PRIMES):
        raise ValueError("Data too long for check pair calculation")

    total = 0
    for i, char in enumerate(data):
        total += CSET82_ORDERED.index(char) * _CHECK_PAIR_PRIMES[len(data) - 1 - i]
    total %= 1021

    return CSET32[total >> 5] + CSET32[total & 31]


def days_in_month(year: int, month: int) -> int:
    """Days in month for a four digit year."""
    return monthrange(year, month)[1]


def expand_two_digit_year(yy: int) -> int:
    """
    Map YY onto a year with the same leap-year behaviour.

    GS1 dates with a two digit year are checked without reference to the
    current date, so Feb 29 is accepted whenever YY is divisible by 4.
    """
    return 2000 + yy


def check_date_parts(
    year: int,
    month: int,
    day: int,
    allow_zero_day: bool = False
) -> Optional[str]:
    """
    Check month and day for a year.

    Returns:
        None if valid, otherwise 'month' or 'day' naming the bad part
    """
    if month < 1 or month > 12:
        return 'month'
    if day == 0 and allow_zero_day:
        return None
    if day < 1 or day > days_in_month(year, month):
        return 'day'
    return None


def to_iso_date(value: str) -> Optional[str]:
    """
    Convert a YYMMDD or YYYYMMDD value to an ISO date string.

    Day 00 means the last day of the month. Two digit years use the GS1
    sliding window relative to 2000 (YY >= 51 is 19YY).

    Returns:
        'YYYY-MM-DD' or None if the value is not a date
    """
    if not value.isdigit() or len(value) not in (6, 8):
        return None

    if len(value) == 6:
        yy = int(value[0:2])
        year = 1900 + yy if yy >= 51 else 2000 + yy
        rest = value[2:]
    else:
        year = int(value[0:4])
        rest = value[4:]

    month = int(rest[0:2])
    day = int(rest[2:4])

    if check_date_parts(year, month, day, allow_zero_day=True):
        return None
    if day == 0:
        day = days_in_month(year, month)

    return f"{year:04d}-{month:02d}-{day:02d}"


def decode_decimal_value(
    value: str,
    decimal_positions: int
) -> Tuple[float, str]:
    """
    Decode a numeric value with implied decimal positions.

    Used for weight/measure AIs like 310x, 320x, 392x, etc.
    where the last digit of the AI indicates decimal places.

    Example: AI 3102, value "001234" -> 12.34

    Args:
        value: Numeric string value
        decimal_positions: Number of decimal places (0-9)

    Returns:
        (float_value, formatted_string)
    """
    if not value.isdigit():
        raise ValueError("Value must be numeric")

    if decimal_positions == 0:
        return float(value), value

    if len(value) <= decimal_positions:
        value = value.zfill(decimal_positions + 1)

    int_part = value[:-decimal_positions] or "0"
    dec_part = value[-decimal_positions:]

    formatted = f"{int_part}.{dec_part}"

    return float(formatted), formatted

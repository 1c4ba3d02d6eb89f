"""
Validation modules for the GS1 syntax engine.
"""

from .codes import LintError, LinterCode
from .linters import LINTERS, Linter, get_linter
from .validators import (
    calculate_check_digit_mod10,
    calculate_check_pair,
    has_valid_check_digit,
    decode_decimal_value,
    to_iso_date,
    CSET82,
    CSET39,
    CSET64,
    NUMERIC,
)

__all__ = [
    "LintError",
    "LinterCode",
    "LINTERS",
    "Linter",
    "get_linter",
    "calculate_check_digit_mod10",
    "calculate_check_pair",
    "has_valid_check_digit",
    "decode_decimal_value",
    "to_iso_date",
    "CSET82",
    "CSET39",
    "CSET64",
    "NUMERIC",
]

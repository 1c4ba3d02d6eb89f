"""
North American coupon linters.

AI 8110 carries the full coupon code data structure and AI 8112 the paperless
coupon offer code. Both are strings of numeric fields, most of them preceded
by a one digit Variable Length Indicator (VLI) giving the field's length.

Reference: GS1 US "Coupon Code Data Structure" (AI 8110) and
"Paperless Coupon" (AI 8112) guidelines.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .codes import LintError, LinterCode
from .validators import check_date_parts, expand_two_digit_year


class _CouponError(Exception):
    def __init__(self, code: LinterCode, position: int, length: int):
        super().__init__(code.value)
        self.lint = LintError(code, position, length)


class _CouponReader:
    """Sequential reader over the coupon digits."""

    def __init__(self, data: str):
        self.data = data
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def take(self, length: int) -> str:
        if self.remaining < length:
            raise _CouponError(LinterCode.COUPON_TRUNCATED_FIELD, self.pos, self.remaining)
        value = self.data[self.pos:self.pos + length]
        self.pos += length
        return value

    def choice(self, allowed: str) -> str:
        """Read a single digit that must be one of allowed."""
        start = self.pos
        digit = self.take(1)
        if digit not in allowed:
            raise _CouponError(LinterCode.COUPON_INVALID_FIELD, start, 1)
        return digit

    def vli(self, allowed: str) -> int:
        start = self.pos
        if self.remaining < 1:
            raise _CouponError(LinterCode.COUPON_MISSING_VLI, start, 0)
        digit = self.take(1)
        if digit not in allowed:
            raise _CouponError(LinterCode.COUPON_INVALID_VLI, start, 1)
        return int(digit)

    def vli_field(self, allowed: str, base: int = 0) -> str:
        """Read a VLI and then the field of base + VLI digits it announces."""
        return self.take(base + self.vli(allowed))

    def date(self) -> Tuple[str, int]:
        start = self.pos
        value = self.take(6)
        year = expand_two_digit_year(int(value[:2]))
        if check_date_parts(year, int(value[2:4]), int(value[4:6])):
            raise _CouponError(LinterCode.COUPON_INVALID_DATE, start, 6)
        return value, start

    def finish(self) -> None:
        if self.remaining:
            raise _CouponError(LinterCode.COUPON_EXCESS_DATA, self.pos, self.remaining)


_DIGITS = '0123456789'
_PURCHASE_CODES = '012349'


def _read_purchase_requirement(reader: _CouponReader, gcp_vlis: str) -> None:
    """Requirement (VLI + value), requirement code, family code and GCP."""
    reader.vli_field('12345')
    reader.choice(_PURCHASE_CODES)
    reader.take(3)
    gcp_vli = reader.vli(gcp_vlis)
    # VLI 9 means the primary GCP applies
    if gcp_vli != 9:
        reader.take(6 + gcp_vli)


def _non_digit(data: str) -> Optional[LintError]:
    for i, char in enumerate(data):
        if char not in _DIGITS:
            return LintError(LinterCode.NON_DIGIT_CHARACTER, i, 1)
    return None


def lint_couponcode(data: str) -> Optional[LintError]:
    """Validate the AI 8110 coupon code data structure."""
    error = _non_digit(data)
    if error:
        return error

    reader = _CouponReader(data)
    try:
        reader.vli_field('0123456', base=6)     # primary GCP
        reader.take(6)                          # offer code
        reader.vli_field('12345')               # save value
        reader.vli_field('12345')               # primary purchase requirement
        reader.choice(_PURCHASE_CODES)
        reader.take(3)                          # primary purchase family code

        last_indicator = 0
        expiry = start = None
        while reader.remaining:
            indicator_pos = reader.pos
            indicator = int(reader.take(1))
            if indicator not in (1, 2, 3, 4, 5, 6, 9):
                raise _CouponError(LinterCode.COUPON_INVALID_DATA_FIELD_INDICATOR, indicator_pos, 1)
            if indicator <= last_indicator:
                raise _CouponError(LinterCode.COUPON_FIELDS_OUT_OF_ORDER, indicator_pos, 1)
            last_indicator = indicator

            if indicator == 1:
                reader.choice('0123')           # additional purchase rules code
                _read_purchase_requirement(reader, '01234569')
            elif indicator == 2:
                _read_purchase_requirement(reader, '01234569')
            elif indicator == 3:
                expiry = reader.date()
            elif indicator == 4:
                start = reader.date()
            elif indicator == 5:
                reader.vli_field(_DIGITS, base=6)
            elif indicator == 6:
                reader.vli_field('1234567', base=6)
            else:
                reader.choice('01256')          # save value code
                reader.choice('012')            # applies to item
                reader.take(1)                  # store coupon flag
                reader.choice('01')             # don't multiply flag

        # Dates compare as YYMMDD strings within the same century
        if expiry and start and start[0] > expiry[0]:
            raise _CouponError(LinterCode.COUPON_EXPIRATION_BEFORE_START, expiry[1], 6)
    except _CouponError as exc:
        return exc.lint

    return None


def lint_couponposoffer(data: str) -> Optional[LintError]:
    """Validate the AI 8112 positive offer file coupon code."""
    error = _non_digit(data)
    if error:
        return error

    reader = _CouponReader(data)
    try:
        if reader.remaining < 1 or reader.data[0] not in '01':
            raise _CouponError(LinterCode.COUPON_INVALID_FORMAT_CODE, 0, min(1, len(data)))
        reader.take(1)
        reader.vli_field('0123456', base=6)     # coupon funder ID
        reader.take(6)                          # offer code
        reader.vli_field(_DIGITS, base=6)       # serial number
        reader.finish()
    except _CouponError as exc:
        return exc.lint

    return None

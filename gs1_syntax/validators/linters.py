"""
GS1 Linter Registry

Each linter validates the content of a single AI component beyond its basic
length and character set. A linter takes the component text and returns
None when the data is acceptable, or a LintError locating the bad characters.

Linters are looked up by the names used in the GS1 Barcode Syntax Dictionary
(e.g. "csum", "yymmd0", "iso3166"). The registry is built once at import and
never modified afterwards.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from .codes import LintError, LinterCode
from .coupon import lint_couponcode, lint_couponposoffer
from .iso_codes import ISO3166_ALPHA2, ISO3166_NUMERIC, ISO4217_NUMERIC
from .validators import (
    CSET32,
    CSET39,
    CSET64,
    CSET82,
    MAX_CHECK_PAIR_LENGTH,
    NUMERIC,
    calculate_check_digit_mod10,
    calculate_check_pair,
    check_date_parts,
    expand_two_digit_year,
    first_invalid,
)


Linter = Callable[[str], Optional[LintError]]

LINTERS: Dict[str, Linter] = {}

# Shortest GS1 Company Prefix that can be allocated
MIN_GCP_LENGTH = 4


def linter(name: str) -> Callable[[Linter], Linter]:
    """Register a linter under its syntax dictionary name."""
    def register(func: Linter) -> Linter:
        LINTERS[name] = func
        return func
    return register


def get_linter(name: str) -> Linter:
    """Look up a linter; unknown names are a dictionary error."""
    try:
        return LINTERS[name]
    except KeyError:
        raise KeyError(f"Unknown linter: {name}") from None


def _charset_error(value: str, charset: frozenset, code: LinterCode) -> Optional[LintError]:
    pos = first_invalid(value, charset)
    if pos is not None:
        return LintError(code, pos, 1)
    return None


# --- character sets -----------------------------------------------------------

@linter("csetnumeric")
def lint_csetnumeric(data: str) -> Optional[LintError]:
    return _charset_error(data, NUMERIC, LinterCode.NON_DIGIT_CHARACTER)


@linter("cset82")
def lint_cset82(data: str) -> Optional[LintError]:
    return _charset_error(data, CSET82, LinterCode.INVALID_CSET82_CHARACTER)


@linter("cset39")
def lint_cset39(data: str) -> Optional[LintError]:
    return _charset_error(data, CSET39, LinterCode.INVALID_CSET39_CHARACTER)


@linter("cset64")
def lint_cset64(data: str) -> Optional[LintError]:
    """File-safe base64; up to two '=' pad characters at the very end."""
    body = data.rstrip('=')
    padding = len(data) - len(body)

    error = _charset_error(body, CSET64, LinterCode.INVALID_CSET64_CHARACTER)
    if error:
        if body[error.position] == '=':
            return LintError(LinterCode.INVALID_CSET64_PADDING, error.position, 1)
        return error

    if padding > 2 or (padding and len(data) % 4 != 0):
        return LintError(LinterCode.INVALID_CSET64_PADDING, len(body), padding)

    return None


# --- check characters ---------------------------------------------------------

@linter("csum")
def lint_csum(data: str) -> Optional[LintError]:
    """Trailing GS1 Mod10 check digit."""
    error = lint_csetnumeric(data)
    if error:
        return error
    if len(data) < 2:
        return LintError(LinterCode.TOO_SHORT_FOR_CHECK_DIGIT, 0, len(data))
    if calculate_check_digit_mod10(data[:-1]) != int(data[-1]):
        return LintError(LinterCode.INCORRECT_CHECK_DIGIT, len(data) - 1, 1)
    return None


@linter("csumalpha")
def lint_csumalpha(data: str) -> Optional[LintError]:
    """Trailing pair of check characters over CSET 82 data."""
    if len(data) < 2:
        return LintError(LinterCode.TOO_SHORT_FOR_CHECK_PAIR, 0, len(data))
    if len(data) > MAX_CHECK_PAIR_LENGTH:
        return LintError(LinterCode.TOO_LONG_FOR_CHECK_PAIR, 0, len(data))

    error = lint_cset82(data[:-2])
    if error:
        return error

    pair = data[-2:]
    if any(c not in CSET32 for c in pair) or pair != calculate_check_pair(data[:-2]):
        return LintError(LinterCode.INCORRECT_CHECK_PAIR, len(data) - 2, 2)
    return None


def _lint_gcp_at(data: str, position: int) -> Optional[LintError]:
    # Without an allocation table only the length available for a GCP is checked
    if len(data) - position < MIN_GCP_LENGTH:
        return LintError(LinterCode.TOO_SHORT_FOR_GCP, position, len(data) - position)
    digits = data[position:position + MIN_GCP_LENGTH]
    error = lint_csetnumeric(digits)
    if error:
        return LintError(error.code, position + error.position, 1)
    return None


@linter("gcppos1")
def lint_gcppos1(data: str) -> Optional[LintError]:
    return _lint_gcp_at(data, 0)


@linter("gcppos2")
def lint_gcppos2(data: str) -> Optional[LintError]:
    return _lint_gcp_at(data, 1)


@linter("key")
def lint_key(data: str) -> Optional[LintError]:
    # Marks the component holding an identification key; nothing to check.
    return None


# --- numeric content ----------------------------------------------------------

@linter("hasnondigit")
def lint_hasnondigit(data: str) -> Optional[LintError]:
    if data.isdigit():
        return LintError(LinterCode.REQUIRES_NON_DIGIT_CHARACTER, 0, len(data))
    return None


@linter("nonzero")
def lint_nonzero(data: str) -> Optional[LintError]:
    if data and set(data) == {'0'}:
        return LintError(LinterCode.ILLEGAL_ZERO_VALUE, 0, len(data))
    return None


@linter("nozeroprefix")
def lint_nozeroprefix(data: str) -> Optional[LintError]:
    if len(data) > 1 and data[0] == '0':
        return LintError(LinterCode.ILLEGAL_ZERO_PREFIX, 0, 1)
    return None


@linter("zero")
def lint_zero(data: str) -> Optional[LintError]:
    if data != '0':
        return LintError(LinterCode.NOT_ZERO, 0, len(data))
    return None


@linter("yesno")
def lint_yesno(data: str) -> Optional[LintError]:
    if data not in ('0', '1'):
        return LintError(LinterCode.NOT_ZERO_OR_ONE, 0, len(data))
    return None


@linter("winding")
def lint_winding(data: str) -> Optional[LintError]:
    if data not in ('0', '1', '9'):
        return LintError(LinterCode.INVALID_WINDING_DIRECTION, 0, len(data))
    return None


@linter("iso5218")
def lint_iso5218(data: str) -> Optional[LintError]:
    """ISO/IEC 5218 biological sex code."""
    if data not in ('0', '1', '2', '9'):
        return LintError(LinterCode.INVALID_BIOLOGICAL_SEX_CODE, 0, len(data))
    return None


@linter("mediatype")
def lint_mediatype(data: str) -> Optional[LintError]:
    """AIDC media type: 01-10 are assigned, 80-99 are company internal."""
    if len(data) != 2 or not data.isdigit():
        return LintError(LinterCode.INVALID_MEDIA_TYPE, 0, len(data))
    value = int(data)
    if not (1 <= value <= 10 or 80 <= value <= 99):
        return LintError(LinterCode.INVALID_MEDIA_TYPE, 0, 2)
    return None


@linter("importeridx")
def lint_importeridx(data: str) -> Optional[LintError]:
    if len(data) != 1 or data not in CSET64:
        return LintError(LinterCode.INVALID_IMPORTER_IDX, 0, len(data))
    return None


@linter("hyphen")
def lint_hyphen(data: str) -> Optional[LintError]:
    for i, char in enumerate(data):
        if char != '-':
            return LintError(LinterCode.NOT_HYPHEN, i, 1)
    return None


@linter("pieceoftotal")
def lint_pieceoftotal(data: str) -> Optional[LintError]:
    """Piece number followed by total count, each half of the data."""
    if not data or len(data) % 2 or not data.isdigit():
        return LintError(LinterCode.INVALID_PIECE_OF_TOTAL, 0, len(data))

    half = len(data) // 2
    piece, total = int(data[:half]), int(data[half:])
    if piece == 0:
        return LintError(LinterCode.ZERO_PIECE_NUMBER, 0, half)
    if total == 0:
        return LintError(LinterCode.ZERO_TOTAL_PIECES, half, half)
    if piece > total:
        return LintError(LinterCode.PIECE_NUMBER_EXCEEDS_TOTAL, 0, len(data))
    return None


@linter("posinseqslash")
def lint_posinseqslash(data: str) -> Optional[LintError]:
    """Position in sequence as 'position/end'."""
    position, sep, end = data.partition('/')
    if not sep or not position.isdigit() or not end.isdigit():
        return LintError(LinterCode.POSITION_IN_SEQUENCE_MALFORMED, 0, len(data))
    if int(position) == 0 or position[0] == '0':
        return LintError(LinterCode.ZERO_POSITION_IN_SEQUENCE, 0, len(position))
    if end[0] == '0' or int(position) > int(end):
        return LintError(LinterCode.POSITION_EXCEEDS_END, 0, len(data))
    return None


@linter("pcenc")
def lint_pcenc(data: str) -> Optional[LintError]:
    """Every '%' introduces two hex digits."""
    hexdigits = '0123456789ABCDEFabcdef'
    for i, char in enumerate(data):
        if char != '%':
            continue
        escape = data[i + 1:i + 3]
        if len(escape) != 2 or any(c not in hexdigits for c in escape):
            return LintError(LinterCode.INVALID_PERCENT_SEQUENCE, i, 1 + len(escape))
    return None


# --- dates and times ----------------------------------------------------------

def _lint_date(data: str, year_digits: int, allow_zero_day: bool) -> Optional[LintError]:
    if len(data) != year_digits + 4:
        return LintError(LinterCode.INVALID_DATE_LENGTH, 0, len(data))
    error = lint_csetnumeric(data)
    if error:
        return error

    if year_digits == 2:
        year = expand_two_digit_year(int(data[:2]))
    else:
        year = int(data[:4])
    month = int(data[year_digits:year_digits + 2])
    day = int(data[year_digits + 2:year_digits + 4])

    bad = check_date_parts(year, month, day, allow_zero_day)
    if bad == 'month':
        return LintError(LinterCode.ILLEGAL_MONTH, year_digits, 2)
    if bad == 'day':
        return LintError(LinterCode.ILLEGAL_DAY, year_digits + 2, 2)
    return None


@linter("yymmdd")
def lint_yymmdd(data: str) -> Optional[LintError]:
    return _lint_date(data, 2, allow_zero_day=False)


@linter("yymmd0")
def lint_yymmd0(data: str) -> Optional[LintError]:
    return _lint_date(data, 2, allow_zero_day=True)


@linter("yyyymmdd")
def lint_yyyymmdd(data: str) -> Optional[LintError]:
    return _lint_date(data, 4, allow_zero_day=False)


@linter("yyyymmd0")
def lint_yyyymmd0(data: str) -> Optional[LintError]:
    return _lint_date(data, 4, allow_zero_day=True)


def _lint_two_digits(data: str, limit: int, code: LinterCode) -> Optional[LintError]:
    if len(data) != 2:
        return LintError(LinterCode.INVALID_TIME_LENGTH, 0, len(data))
    error = lint_csetnumeric(data)
    if error:
        return error
    if int(data) > limit:
        return LintError(code, 0, 2)
    return None


@linter("hh")
def lint_hh(data: str) -> Optional[LintError]:
    return _lint_two_digits(data, 23, LinterCode.ILLEGAL_HOUR)


@linter("mi")
def lint_mi(data: str) -> Optional[LintError]:
    return _lint_two_digits(data, 59, LinterCode.ILLEGAL_MINUTE)


@linter("ss")
def lint_ss(data: str) -> Optional[LintError]:
    return _lint_two_digits(data, 59, LinterCode.ILLEGAL_SECOND)


def _offset(error: Optional[LintError], by: int) -> Optional[LintError]:
    if error is None:
        return None
    return LintError(error.code, error.position + by, error.length)


@linter("hhmi")
def lint_hhmi(data: str) -> Optional[LintError]:
    if len(data) != 4:
        return LintError(LinterCode.INVALID_TIME_LENGTH, 0, len(data))
    return lint_hh(data[:2]) or _offset(lint_mi(data[2:]), 2)


@linter("mmoptss")
def lint_mmoptss(data: str) -> Optional[LintError]:
    """Minutes with optional seconds."""
    if len(data) not in (2, 4):
        return LintError(LinterCode.INVALID_TIME_LENGTH, 0, len(data))
    return lint_mi(data[:2]) or _offset(lint_ss(data[2:]) if len(data) == 4 else None, 2)


@linter("yymmddhh")
def lint_yymmddhh(data: str) -> Optional[LintError]:
    if len(data) != 8:
        return LintError(LinterCode.INVALID_DATE_LENGTH, 0, len(data))
    return lint_yymmdd(data[:6]) or _offset(lint_hh(data[6:]), 6)


# --- code lists ---------------------------------------------------------------

@linter("iso3166")
def lint_iso3166(data: str) -> Optional[LintError]:
    if data not in ISO3166_NUMERIC:
        return LintError(LinterCode.NOT_ISO3166, 0, len(data))
    return None


@linter("iso3166999")
def lint_iso3166999(data: str) -> Optional[LintError]:
    if data != '999' and data not in ISO3166_NUMERIC:
        return LintError(LinterCode.NOT_ISO3166_OR_999, 0, len(data))
    return None


@linter("iso3166alpha2")
def lint_iso3166alpha2(data: str) -> Optional[LintError]:
    if data not in ISO3166_ALPHA2:
        return LintError(LinterCode.NOT_ISO3166_ALPHA2, 0, len(data))
    return None


@linter("iso3166list")
def lint_iso3166list(data: str) -> Optional[LintError]:
    """One or more concatenated ISO 3166 numeric codes."""
    if not data or len(data) % 3:
        return LintError(LinterCode.NOT_ISO3166_LIST, 0, len(data))
    for pos in range(0, len(data), 3):
        if data[pos:pos + 3] not in ISO3166_NUMERIC:
            return LintError(LinterCode.NOT_ISO3166, pos, 3)
    return None


@linter("iso4217")
def lint_iso4217(data: str) -> Optional[LintError]:
    if data not in ISO4217_NUMERIC:
        return LintError(LinterCode.NOT_ISO4217, 0, len(data))
    return None


@linter("iban")
def lint_iban(data: str) -> Optional[LintError]:
    """ISO 13616 IBAN: country, two check digits, mod 97 over the rearranged value."""
    if len(data) < 5:
        return LintError(LinterCode.IBAN_TOO_SHORT, 0, len(data))
    if len(data) > 34:
        return LintError(LinterCode.IBAN_TOO_LONG, 0, len(data))

    allowed = NUMERIC | frozenset('ABCDEFGHIJKLMNOPQRSTUVWXYZ')
    error = _charset_error(data, allowed, LinterCode.INVALID_IBAN_CHARACTER)
    if error:
        return error

    if data[:2] not in ISO3166_ALPHA2:
        return LintError(LinterCode.ILLEGAL_IBAN_COUNTRY_CODE, 0, 2)
    if not data[2:4].isdigit():
        return LintError(LinterCode.INVALID_IBAN_CHARACTER, 2, 2)

    rearranged = data[4:] + data[:4]
    remainder = 0
    for char in rearranged:
        remainder = int(str(remainder) + str(int(char, 36))) % 97
    if remainder != 1:
        return LintError(LinterCode.INCORRECT_IBAN_CHECKSUM, 2, 2)
    return None


# --- coordinates --------------------------------------------------------------

@linter("latitude")
def lint_latitude(data: str) -> Optional[LintError]:
    """Latitude as 10 digits offset by +90 degrees, 7 decimal places."""
    if len(data) != 10 or not data.isdigit() or int(data) > 1800000000:
        return LintError(LinterCode.INVALID_LATITUDE, 0, len(data))
    return None


@linter("longitude")
def lint_longitude(data: str) -> Optional[LintError]:
    """Longitude as 10 digits offset by +180 degrees, 7 decimal places."""
    if len(data) != 10 or not data.isdigit() or int(data) > 3600000000:
        return LintError(LinterCode.INVALID_LONGITUDE, 0, len(data))
    return None


@linter("latlong")
def lint_latlong(data: str) -> Optional[LintError]:
    if len(data) != 20:
        return LintError(LinterCode.INVALID_LATITUDE, 0, len(data))
    return lint_latitude(data[:10]) or _offset(lint_longitude(data[10:]), 10)


# --- coupons ------------------------------------------------------------------

LINTERS["couponcode"] = lint_couponcode
LINTERS["couponposoffer"] = lint_couponposoffer

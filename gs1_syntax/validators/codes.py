"""
Linter result types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LinterCode(str, Enum):
    """Reasons a linter rejects an AI component."""
    NON_DIGIT_CHARACTER = "NON_DIGIT_CHARACTER"
    INVALID_CSET82_CHARACTER = "INVALID_CSET82_CHARACTER"
    INVALID_CSET39_CHARACTER = "INVALID_CSET39_CHARACTER"
    INVALID_CSET64_CHARACTER = "INVALID_CSET64_CHARACTER"
    INVALID_CSET64_PADDING = "INVALID_CSET64_PADDING"
    TOO_SHORT_FOR_CHECK_DIGIT = "TOO_SHORT_FOR_CHECK_DIGIT"
    INCORRECT_CHECK_DIGIT = "INCORRECT_CHECK_DIGIT"
    TOO_SHORT_FOR_CHECK_PAIR = "TOO_SHORT_FOR_CHECK_PAIR"
    TOO_LONG_FOR_CHECK_PAIR = "TOO_LONG_FOR_CHECK_PAIR"
    INCORRECT_CHECK_PAIR = "INCORRECT_CHECK_PAIR"
    TOO_SHORT_FOR_GCP = "TOO_SHORT_FOR_GCP"
    REQUIRES_NON_DIGIT_CHARACTER = "REQUIRES_NON_DIGIT_CHARACTER"
    INVALID_DATE_LENGTH = "INVALID_DATE_LENGTH"
    ILLEGAL_MONTH = "ILLEGAL_MONTH"
    ILLEGAL_DAY = "ILLEGAL_DAY"
    INVALID_TIME_LENGTH = "INVALID_TIME_LENGTH"
    ILLEGAL_HOUR = "ILLEGAL_HOUR"
    ILLEGAL_MINUTE = "ILLEGAL_MINUTE"
    ILLEGAL_SECOND = "ILLEGAL_SECOND"
    NOT_HYPHEN = "NOT_HYPHEN"
    IBAN_TOO_SHORT = "IBAN_TOO_SHORT"
    IBAN_TOO_LONG = "IBAN_TOO_LONG"
    INVALID_IBAN_CHARACTER = "INVALID_IBAN_CHARACTER"
    ILLEGAL_IBAN_COUNTRY_CODE = "ILLEGAL_IBAN_COUNTRY_CODE"
    INCORRECT_IBAN_CHECKSUM = "INCORRECT_IBAN_CHECKSUM"
    INVALID_IMPORTER_IDX = "INVALID_IMPORTER_IDX"
    NOT_ISO3166 = "NOT_ISO3166"
    NOT_ISO3166_OR_999 = "NOT_ISO3166_OR_999"
    NOT_ISO3166_ALPHA2 = "NOT_ISO3166_ALPHA2"
    NOT_ISO3166_LIST = "NOT_ISO3166_LIST"
    NOT_ISO4217 = "NOT_ISO4217"
    INVALID_BIOLOGICAL_SEX_CODE = "INVALID_BIOLOGICAL_SEX_CODE"
    INVALID_LATITUDE = "INVALID_LATITUDE"
    INVALID_LONGITUDE = "INVALID_LONGITUDE"
    INVALID_MEDIA_TYPE = "INVALID_MEDIA_TYPE"
    ILLEGAL_ZERO_VALUE = "ILLEGAL_ZERO_VALUE"
    ILLEGAL_ZERO_PREFIX = "ILLEGAL_ZERO_PREFIX"
    INVALID_PERCENT_SEQUENCE = "INVALID_PERCENT_SEQUENCE"
    INVALID_PIECE_OF_TOTAL = "INVALID_PIECE_OF_TOTAL"
    ZERO_PIECE_NUMBER = "ZERO_PIECE_NUMBER"
    ZERO_TOTAL_PIECES = "ZERO_TOTAL_PIECES"
    PIECE_NUMBER_EXCEEDS_TOTAL = "PIECE_NUMBER_EXCEEDS_TOTAL"
    POSITION_IN_SEQUENCE_MALFORMED = "POSITION_IN_SEQUENCE_MALFORMED"
    ZERO_POSITION_IN_SEQUENCE = "ZERO_POSITION_IN_SEQUENCE"
    POSITION_EXCEEDS_END = "POSITION_EXCEEDS_END"
    INVALID_WINDING_DIRECTION = "INVALID_WINDING_DIRECTION"
    NOT_ZERO_OR_ONE = "NOT_ZERO_OR_ONE"
    NOT_ZERO = "NOT_ZERO"
    COUPON_INVALID_FORMAT_CODE = "COUPON_INVALID_FORMAT_CODE"
    COUPON_MISSING_VLI = "COUPON_MISSING_VLI"
    COUPON_INVALID_VLI = "COUPON_INVALID_VLI"
    COUPON_TRUNCATED_FIELD = "COUPON_TRUNCATED_FIELD"
    COUPON_INVALID_FIELD = "COUPON_INVALID_FIELD"
    COUPON_INVALID_DATA_FIELD_INDICATOR = "COUPON_INVALID_DATA_FIELD_INDICATOR"
    COUPON_FIELDS_OUT_OF_ORDER = "COUPON_FIELDS_OUT_OF_ORDER"
    COUPON_INVALID_DATE = "COUPON_INVALID_DATE"
    COUPON_EXPIRATION_BEFORE_START = "COUPON_EXPIRATION_BEFORE_START"
    COUPON_EXCESS_DATA = "COUPON_EXCESS_DATA"


@dataclass(frozen=True)
class LintError:
    """
    A linter rejection.

    Attributes:
        code: Why the data was rejected
        position: Offset of the offending data within the linted component
        length: Length of the offending data
    """
    code: LinterCode
    position: int
    length: int

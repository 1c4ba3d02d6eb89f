"""
Tests for the North American coupon linters (AI 8110 and AI 8112).

Tests cover:
- Mandatory coupon fields
- Optional data fields and their ordering
- Date fields
- Positive offer file coupon codes
"""

import pytest

from gs1_syntax.validators import LinterCode, LintError, get_linter


# VLI 0 + GCP, offer code, save value, purchase requirement, purchase code, family code
COUPON = "0" "614141" "123456" "2" "50" "1" "1" "0" "123"


@pytest.fixture
def couponcode():
    return get_linter("couponcode")


@pytest.fixture
def couponposoffer():
    return get_linter("couponposoffer")


class TestCouponCode:
    """Tests for the AI 8110 coupon code linter."""

    def test_mandatory_fields_only(self, couponcode):
        assert couponcode(COUPON) is None

    def test_expiration_and_start_dates(self, couponcode):
        assert couponcode(COUPON + "3261231" + "4260101") is None

    def test_second_purchase_requirement(self, couponcode):
        """Additional purchase rules with the primary GCP."""
        assert couponcode(COUPON + "1" "0" "1" "5" "0" "123" "9") is None

    def test_save_value_fields(self, couponcode):
        assert couponcode(COUPON + "9" "0" "1" "1" "0") is None

    def test_non_digit(self, couponcode):
        assert couponcode("A" + COUPON[1:]) == LintError(LinterCode.NON_DIGIT_CHARACTER, 0, 1)

    def test_invalid_gcp_vli(self, couponcode):
        assert couponcode("7" + COUPON[1:]) == LintError(LinterCode.COUPON_INVALID_VLI, 0, 1)

    def test_truncated_save_value(self, couponcode):
        assert couponcode(COUPON[:15]) == LintError(LinterCode.COUPON_TRUNCATED_FIELD, 14, 1)

    def test_invalid_data_field_indicator(self, couponcode):
        assert couponcode(COUPON + "7") == LintError(
            LinterCode.COUPON_INVALID_DATA_FIELD_INDICATOR, 22, 1
        )

    def test_fields_out_of_order(self, couponcode):
        assert couponcode(COUPON + "4260101" + "3261231") == LintError(
            LinterCode.COUPON_FIELDS_OUT_OF_ORDER, 29, 1
        )

    def test_invalid_date(self, couponcode):
        assert couponcode(COUPON + "3261332") == LintError(LinterCode.COUPON_INVALID_DATE, 23, 6)

    def test_expiration_before_start(self, couponcode):
        assert couponcode(COUPON + "3260101" + "4261231") == LintError(
            LinterCode.COUPON_EXPIRATION_BEFORE_START, 23, 6
        )

    def test_invalid_save_value_code(self, couponcode):
        assert couponcode(COUPON + "9" "3" "1" "1" "0") == LintError(
            LinterCode.COUPON_INVALID_FIELD, 23, 1
        )


class TestCouponPositiveOffer:
    """Tests for the AI 8112 positive offer file coupon linter."""

    OFFER = "0" "0" "614141" "123456" "0" "123456"

    def test_valid(self, couponposoffer):
        assert couponposoffer(self.OFFER) is None

    def test_invalid_format_code(self, couponposoffer):
        assert couponposoffer("2" + self.OFFER[1:]) == LintError(
            LinterCode.COUPON_INVALID_FORMAT_CODE, 0, 1
        )

    def test_excess_data(self, couponposoffer):
        assert couponposoffer(self.OFFER + "9") == LintError(LinterCode.COUPON_EXCESS_DATA, 21, 1)

    def test_truncated_serial(self, couponposoffer):
        assert couponposoffer(self.OFFER[:-1]).code == LinterCode.COUPON_TRUNCATED_FIELD

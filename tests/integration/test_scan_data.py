"""
Integration tests for barcode scan data.

Tests cover:
- Decoding each supported symbology identifier
- Rendering scan data for every symbology
- EAN/UPC and GS1-128 composites
- Digital Link URIs carried by 2D symbologies
- Messages a symbology cannot carry
"""

import pytest

from gs1_syntax import GS1Parser, ParseOptions, parse_gs1
from gs1_syntax.core.errors import (
    LinterFailureError,
    StructuralViolationError,
    UnderlyingFailureError,
    UnrecognizedFormatError,
)
from gs1_syntax.core.scan_data import GS, Symbology


GTIN = "09501101530003"


def pairs(parser):
    return [(e.ai, e.value) for e in parser.elements]


def scan(text, symbology):
    return parse_gs1(text, options=ParseOptions(symbology=symbology)).scan_data


class TestDecoding:
    """Tests for decoding scan data."""

    def test_ean13(self):
        parser = parse_gs1("]E02112345678900")
        assert pairs(parser) == [('01', "02112345678900")]
        assert parser.symbology == Symbology.EAN_13
        assert parser.scan_data == "]E02112345678900"

    def test_ean8(self):
        parser = parse_gs1("]E402345673")
        assert pairs(parser) == [('01', "00000002345673")]
        assert parser.symbology == Symbology.EAN_8

    def test_ean_wrong_length(self):
        with pytest.raises(StructuralViolationError):
            parse_gs1("]E0211234567890")

    def test_ean_check_digit_offset(self):
        parser = GS1Parser()
        with pytest.raises(LinterFailureError):
            parser.set_input("]E02112345678901")
        assert (parser.last_error.offset, parser.last_error.length) == (15, 1)

    def test_gs1_128(self):
        parser = parse_gs1("]C1011231231231233310ABC123" + GS + "99TESTING")
        assert pairs(parser) == [('01', "12312312312333"), ('10', "ABC123"), ('99', "TESTING")]
        assert parser.symbology == Symbology.GS1_128_CCA

    def test_gs_placeholder(self):
        parser = parse_gs1("]C1011231231231233310ABC123{GS}99TESTING")
        assert pairs(parser)[2] == ('99', "TESTING")

    @pytest.mark.parametrize("identifier,symbology", [
        ("]d2", Symbology.DATAMATRIX),
        ("]Q3", Symbology.QR),
        ("]J1", Symbology.DOTCODE),
        ("]e0", Symbology.DATABAR_EXPANDED),
    ])
    def test_ai_data_identifiers(self, identifier, symbology):
        parser = parse_gs1(identifier + "010950110153000310ABC123")
        assert pairs(parser) == [('01', GTIN), ('10', "ABC123")]
        assert parser.symbology == symbology

    @pytest.mark.parametrize("identifier,symbology", [
        ("]d1", Symbology.DATAMATRIX),
        ("]Q1", Symbology.QR),
        ("]J0", Symbology.DOTCODE),
    ])
    def test_uri_identifiers(self, identifier, symbology):
        uri = "https://example.com/01/09501101530003/10/A1?x=y"
        parser = parse_gs1(identifier + uri)
        assert pairs(parser) == [('01', GTIN), ('10', "A1")]
        assert parser.symbology == symbology
        assert parser.dl_ignored_query_params == ["x=y"]
        assert parser.scan_data == identifier + uri

    def test_uri_error_offset(self):
        parser = GS1Parser()
        with pytest.raises(StructuralViolationError):
            parser.set_input("]Q1https://example.com/01/09501101530003/10/A C")
        assert parser.last_error.offset == 45

    def test_ean_composite(self):
        parser = parse_gs1("]E402345673|]e099COMPOSITE" + GS + "98XYZ")
        assert pairs(parser) == [('01', "00000002345673"), ('99', "COMPOSITE"), ('98', "XYZ")]
        assert [e.composite for e in parser.elements] == [False, True, True]

    def test_unsupported_identifier(self):
        with pytest.raises(UnrecognizedFormatError):
            parse_gs1("]X0123")


class TestEncoding:
    """Tests for rendering scan data."""

    def test_ean13(self):
        assert scan("2112345678900", Symbology.EAN_13) == "]E02112345678900"

    def test_upc_a(self):
        assert scan("416000336108", Symbology.UPC_A) == "]E00416000336108"

    def test_upc_e(self):
        assert scan("416000336108", Symbology.UPC_E) == "]E00416000336108"

    def test_ean8(self):
        assert scan("02345673", Symbology.EAN_8) == "]E402345673"

    def test_ean8_composite(self):
        assert scan("^0100000002345673|^99COMPOSITE^98XYZ", Symbology.EAN_8) == (
            "]E402345673|]e099COMPOSITE" + GS + "98XYZ"
        )

    def test_gs1_128(self):
        assert scan("^011231231231233310ABC123^99TESTING", Symbology.GS1_128_CCA) == (
            "]C1011231231231233310ABC123" + GS + "99TESTING"
        )

    def test_gs1_128_composite(self):
        assert scan("^0112312312312333|^98COMPOSITE^97XYZ", Symbology.GS1_128_CCC) == (
            "]e00112312312312333" + GS + "98COMPOSITE" + GS + "97XYZ"
        )

    def test_databar_omni(self):
        assert scan(GTIN, Symbology.DATABAR_OMNI) == "]e00109501101530003"

    def test_databar_composite(self):
        assert scan("(01)09501101530003|(99)CC", Symbology.DATABAR_STACKED) == (
            "]e00109501101530003" + GS + "99CC"
        )

    def test_databar_expanded(self):
        assert scan("(01)09501101530003(10)ABC(17)261231", Symbology.DATABAR_EXPANDED) == (
            "]e00109501101530003" "10ABC" + GS + "17261231"
        )

    def test_qr_with_uri(self):
        uri = "https://example.org/01/12312312312333"
        assert scan(uri, Symbology.QR) == "]Q1" + uri

    def test_datamatrix(self):
        assert scan("(01)09501101530003(10)ABC(21)XYZ", Symbology.DATAMATRIX) == (
            "]d2010950110153000310ABC" + GS + "21XYZ"
        )


class TestUnsupportedCombinations:
    """Tests for messages a symbology cannot carry."""

    def test_ean13_requires_single_gtin(self):
        with pytest.raises(UnderlyingFailureError):
            scan("(01)09501101530003(10)ABC", Symbology.EAN_13)

    def test_ean8_requires_leading_zeros(self):
        with pytest.raises(UnderlyingFailureError):
            scan(GTIN, Symbology.EAN_8)

    def test_upc_requires_leading_zeros(self):
        with pytest.raises(UnderlyingFailureError):
            scan("2112345678900", Symbology.UPC_A)

    def test_databar_limited_first_digit(self):
        assert scan(GTIN, Symbology.DATABAR_LIMITED) == "]e00109501101530003"
        assert scan("12312312312333", Symbology.DATABAR_LIMITED) == "]e00112312312312333"
        with pytest.raises(UnderlyingFailureError):
            scan("21231231231236", Symbology.DATABAR_LIMITED)

    def test_matrix_has_no_composite(self):
        with pytest.raises(UnderlyingFailureError):
            scan("(01)09501101530003|(99)CC", Symbology.QR)

"""
Integration tests for the GS1 parser with element string input.

Tests cover:
- Format detection and equivalence of the input formats
- Bracketed and unbracketed element strings, including escaping
- Plain GTINs and check digit addition
- Unknown AIs
- Cross-field failures from every input format
- Error reporting and the state kept after a failure
- Option handling
"""

import pytest

from gs1_syntax import GS1Parser, OutputFormat, ParseOptions, Validation, parse_gs1
from gs1_syntax.core.ai_dictionary_loader import AIDictionary
from gs1_syntax.core.errors import (
    CrossFieldKind,
    EmptyInputError,
    ErrorCode,
    GS1ParseError,
    LinterFailureError,
    ScanDataUnavailableError,
    StructuralViolationError,
    UnderlyingFailureError,
    UnrecognizedFormatError,
)
from gs1_syntax.core.scan_data import Symbology
from gs1_syntax.validators import LinterCode, calculate_check_digit_mod10


GTIN = "09501101530003"


def pairs(parser):
    return [(e.ai, e.value) for e in parser.elements]


class TestFormatEquivalence:
    """The same message in every input format decodes identically."""

    FORMS = [
        "(01)09501101530003(10)ABC123",
        "^010950110153000310ABC123",
        "]d2010950110153000310ABC123",
        "https://id.gs1.org/01/09501101530003/10/ABC123",
    ]

    @pytest.mark.parametrize("text", FORMS)
    def test_elements(self, text):
        assert pairs(parse_gs1(text)) == [('01', GTIN), ('10', "ABC123")]

    @pytest.mark.parametrize("text", FORMS)
    def test_outputs(self, text):
        parser = parse_gs1(text)
        assert parser.ai_data_string == "(01)09501101530003(10)ABC123"
        assert parser.data_string == "^010950110153000310ABC123"
        assert parser.digital_link_uri() == "https://id.gs1.org/01/09501101530003/10/ABC123"
        assert parser.hri == ["(01) 09501101530003", "(10) ABC123"]


class TestRoundTrips:
    """Re-encoding and re-decoding gives back the same elements."""

    @pytest.mark.parametrize("text", [
        "(01)09501101530003(17)261231(10)ABC(21)XYZ",
        r"(01)09501101530003(10)AB\(1)",
        "(00)106141412345678908(400)ORDER-42",
        "(01)09501101530003(3103)001234(99)INTERNAL|(98)COMP(97)XYZ",
        "(8013)1987654Ad4X4bL5ttr2310c2K(99)X",
    ])
    def test_bracketed_and_unbracketed(self, text):
        parser = parse_gs1(text)
        assert parser.ai_data_string == text
        assert parse_gs1(parser.data_string).elements == parser.elements

    def test_digital_link(self):
        parser = parse_gs1("(01)09501101530003(10)AB/C(17)261231")
        uri = parser.digital_link_uri()
        assert uri == "https://id.gs1.org/01/09501101530003/10/AB%2FC?17=261231"
        assert parse_gs1(uri).elements == parser.elements


class TestBracketed:
    """Tests for bracketed element strings."""

    def test_escaped_parenthesis(self):
        parser = parse_gs1(r"(01)09501101530003(10)A\(B")
        assert pairs(parser)[1] == ('10', "A(B")
        assert parser.data_string == "^010950110153000310A(B"

    def test_unescaped_parenthesis(self):
        with pytest.raises(StructuralViolationError):
            parse_gs1("(01)09501101530003(10)A(B")

    def test_escaped_error_offset(self):
        with pytest.raises(StructuralViolationError) as exc_info:
            parse_gs1(r"(01)09501101530003(10)A\(B^")
        record = exc_info.value.record
        assert (record.offset, record.length) == (26, 1)
        assert record.markup == "(10)A(B|^|"

    def test_empty_value(self):
        with pytest.raises(StructuralViolationError):
            parse_gs1("(01)09501101530003(10)")

    def test_malformed_ai(self):
        with pytest.raises(StructuralViolationError):
            parse_gs1("(1)09501101530003")

    def test_composite(self):
        parser = parse_gs1("(01)09501101530003|(99)COMPOSITE")
        assert [e.composite for e in parser.elements] == [False, True]
        assert parser.data_string == "^0109501101530003|^99COMPOSITE"


class TestUnbracketed:
    """Tests for unbracketed element strings."""

    def test_separator_after_predefined_length(self):
        parser = parse_gs1("^0109501101530003^10ABC123")
        assert pairs(parser) == [('01', GTIN), ('10', "ABC123")]
        assert parser.data_string == "^010950110153000310ABC123"

    def test_variable_length_separator(self):
        parser = parse_gs1("^0109501101530003" "10ABC123^21XYZ")
        assert pairs(parser) == [('01', GTIN), ('10', "ABC123"), ('21', "XYZ")]

    def test_trailing_separator(self):
        assert pairs(parse_gs1("^010950110153000310ABC123^")) == [('01', GTIN), ('10', "ABC123")]

    def test_unknown_ai(self):
        with pytest.raises(StructuralViolationError):
            parse_gs1("^3249123456", options=ParseOptions(permit_unknown_ais=True))

    def test_composite(self):
        parser = parse_gs1("^0109501101530003|^99COMPOSITE^98XYZ")
        assert pairs(parser) == [('01', GTIN), ('99', "COMPOSITE"), ('98', "XYZ")]
        assert parser.ai_data_string == "(01)09501101530003|(99)COMPOSITE(98)XYZ"


class TestPlainGTIN:
    """Tests for a bare GTIN as input."""

    @pytest.mark.parametrize("gtin", ["02345673", "416000336108", "2112345678900", "12312312312333"])
    def test_accepted_iff_check_digit_valid(self, gtin):
        expected = calculate_check_digit_mod10(gtin[:-1])
        for digit in range(10):
            candidate = gtin[:-1] + str(digit)
            if digit == expected:
                assert pairs(parse_gs1(candidate)) == [('01', candidate.zfill(14))]
            else:
                with pytest.raises(LinterFailureError):
                    parse_gs1(candidate)

    @pytest.mark.parametrize("digits", ["1234567", "123456789", "12345678901", "123456789012345"])
    def test_bad_length(self, digits):
        with pytest.raises(StructuralViolationError):
            parse_gs1(digits)

    def test_check_digit_error_offset(self):
        with pytest.raises(LinterFailureError) as exc_info:
            parse_gs1("9501101530004")
        record = exc_info.value.record
        assert record.linter == LinterCode.INCORRECT_CHECK_DIGIT
        assert (record.offset, record.length) == (12, 1)
        assert record.markup == "(01)0950110153000|4|"


class TestAddCheckDigit:
    """Tests for calculating the GTIN check digit."""

    def test_plain_gtin(self):
        options = ParseOptions(symbology=Symbology.EAN_13, add_check_digit=True)
        parser = parse_gs1("211234567890", options=options)
        assert pairs(parser) == [('01', "02112345678900")]
        assert parser.scan_data == "]E02112345678900"

    def test_bracketed(self):
        options = ParseOptions(symbology=Symbology.EAN_13, add_check_digit=True)
        assert pairs(parse_gs1("(01)0950110153000", options=options)) == [('01', GTIN)]

    def test_plain_gtin_with_check_digit_rejected(self):
        options = ParseOptions(symbology=Symbology.EAN_13, add_check_digit=True)
        with pytest.raises(StructuralViolationError):
            parse_gs1(GTIN, options=options)

    def test_not_applied_to_variable_symbology(self):
        options = ParseOptions(symbology=Symbology.DATAMATRIX, add_check_digit=True)
        with pytest.raises(StructuralViolationError):
            parse_gs1("(01)0950110153000", options=options)


class TestUnknownAIs:
    """Tests for AIs absent from the dictionary."""

    def test_rejected_by_default(self):
        with pytest.raises(StructuralViolationError):
            parse_gs1("(3249)123456")

    def test_permitted(self):
        parser = parse_gs1("(3249)123456", options=ParseOptions(permit_unknown_ais=True))
        assert parser.elements[0].entry.unknown
        assert parser.hri == ["(3249) 123456"]

    @pytest.mark.parametrize("text", ["(3249)1234567", "(3249)ABCDEF", "(999)1"])
    def test_inferred_specification_enforced(self, text):
        with pytest.raises(StructuralViolationError):
            parse_gs1(text, options=ParseOptions(permit_unknown_ais=True))


class TestCrossField:
    """Cross-field failures are reported for every input format."""

    @pytest.mark.parametrize("text", [
        "(01)09501101530003(02)09501101530003",
        "^01095011015300030209501101530003",
        "]d201095011015300030209501101530003",
        "https://id.gs1.org/01/09501101530003?02=09501101530003",
    ])
    def test_mutex(self, text):
        with pytest.raises(GS1ParseError) as exc_info:
            parse_gs1(text)
        assert exc_info.value.record.code == ErrorCode.CROSS_FIELD_VIOLATION
        assert exc_info.value.record.kind == CrossFieldKind.MUTEX

    def test_requisite_toggle(self):
        parser = GS1Parser()
        with pytest.raises(GS1ParseError) as exc_info:
            parser.set_input("(10)ABC")
        assert exc_info.value.record.kind == CrossFieldKind.MISSING_REQUISITE

        parser.set_validation_enabled(Validation.REQUISITE_AIS, False)
        assert not parser.is_validation_enabled(Validation.REQUISITE_AIS)
        parser.set_input("(10)ABC")
        assert pairs(parser) == [('10', "ABC")]

    def test_repeatable_ai_in_custom_dictionary(self):
        with pytest.raises(GS1ParseError):
            parse_gs1("(99)A(99)B")
        dictionary = AIDictionary.from_text("99  X..90  rep  # INTERNAL")
        parser = parse_gs1("(99)A(99)B", options=ParseOptions(custom_dictionary=dictionary))
        assert pairs(parser) == [('99', "A"), ('99', "B")]


class TestParserState:
    """Tests for the state held between inputs."""

    def test_failure_keeps_previous_message(self):
        parser = GS1Parser()
        parser.set_input("(01)09501101530003(17)261231")
        with pytest.raises(LinterFailureError):
            parser.set_input("(01)09501101530003(17)261332")

        assert parser.input == "(01)09501101530003(17)261231"
        assert pairs(parser) == [('01', GTIN), ('17', "261231")]
        assert parser.last_error.code == ErrorCode.LINTER_FAILURE
        assert parser.last_error.linter == LinterCode.ILLEGAL_MONTH
        assert (parser.last_error.offset, parser.last_error.length) == (24, 2)
        assert parser.error_markup == "(17)26|13|32"

    def test_success_clears_error(self):
        parser = GS1Parser()
        with pytest.raises(GS1ParseError):
            parser.set_input("(01)09501101530004")
        assert parser.error_markup == "(01)0950110153000|4|"
        parser.set_input(GTIN)
        assert parser.last_error is None
        assert parser.error_markup == ''

    def test_cross_field_error_has_no_markup(self):
        parser = GS1Parser()
        with pytest.raises(GS1ParseError):
            parser.set_input("(10)ABC")
        assert parser.error_markup == ''
        assert parser.last_error.ais[0] == '10'

    def test_error_span_in_bytes(self):
        """Offsets and lengths count UTF-8 bytes of the input."""
        parser = GS1Parser()
        with pytest.raises(StructuralViolationError) as exc_info:
            parser.set_input("(01)09501101530003(10)AB€C")
        assert (parser.last_error.offset, parser.last_error.length) == (24, 3)
        assert exc_info.value.record == parser.last_error
        assert parser.error_markup == "(10)AB|€|C"

    def test_empty_input(self):
        with pytest.raises(EmptyInputError):
            parse_gs1("")

    def test_unrecognised_input(self):
        with pytest.raises(UnrecognizedFormatError):
            parse_gs1("hello")

    def test_elements_is_a_copy(self):
        parser = parse_gs1(GTIN)
        parser.elements.clear()
        assert len(parser.elements) == 1


class TestRendering:
    """Tests for rendering outputs and option handling."""

    def test_hri_titles(self):
        parser = parse_gs1("(01)09501101530003(10)ABC123")
        parser.include_data_titles_in_hri = True
        assert parser.hri == ["GTIN (01) 09501101530003", "BATCH/LOT (10) ABC123"]
        assert parser.render(OutputFormat.HRI) == "GTIN (01) 09501101530003\nBATCH/LOT (10) ABC123"

    def test_render_formats(self):
        parser = parse_gs1("(01)09501101530003(10)ABC123")
        assert parser.render(OutputFormat.BRACKETED) == parser.ai_data_string
        assert parser.render("unbracketed") == parser.data_string
        assert parser.render(OutputFormat.DL_URI, "example.com") == (
            "https://example.com/01/09501101530003/10/ABC123"
        )

    def test_scan_data_without_symbology(self):
        parser = parse_gs1("(01)09501101530003(10)ABC123")
        assert parser.scan_data is None
        with pytest.raises(ScanDataUnavailableError):
            parser.render(OutputFormat.SCAN_DATA)

    def test_scan_data_without_message(self):
        parser = GS1Parser(ParseOptions(symbology=Symbology.DATABAR_EXPANDED))
        assert parser.scan_data is None
        assert parser.render(OutputFormat.SCAN_DATA) == ''

    def test_symbology_can_be_changed(self):
        parser = parse_gs1("(01)09501101530003(10)ABC123")
        parser.symbology = Symbology.QR
        assert parser.scan_data == "]Q3010950110153000310ABC123"
        parser.symbology = "gs1-128-cca"
        assert parser.scan_data == "]C1010950110153000310ABC123"

    def test_digital_link_without_key(self):
        parser = parse_gs1("(400)ORDER-42")
        with pytest.raises(UnderlyingFailureError):
            parser.digital_link_uri()

    def test_options_are_copied(self):
        options = ParseOptions()
        parser = GS1Parser(options)
        parser.set_validation_enabled(Validation.REQUISITE_AIS, False)
        assert Validation.REQUISITE_AIS in options.validations

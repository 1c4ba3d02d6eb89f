"""
GS1 Syntax Engine

Parses, validates and converts GS1 data between its surface formats:

- Bracketed AI element strings:    (01)09501101530003(10)ABC123
- Unbracketed AI element strings:  ^010950110153000310ABC123
- Barcode scan data:               ]d2010950110153000310ABC123
- GS1 Digital Link URIs:           https://id.gs1.org/01/09501101530003/10/ABC123
- Plain GTINs:                     09501101530003

A GS1Parser holds one parsed message. set_input() replaces it only when the
new input is fully valid; otherwise the previous message is kept and the
error is recorded. Every output is rendered on demand from the held message
using the current options.

Based on:
- GS1 General Specifications
- GS1 Barcode Syntax Dictionary
- GS1 Digital Link URI Syntax
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Set, Tuple

from .ai_dictionary_loader import AIDictionary, load_ai_dictionary
from .cross_field import DEFAULT_VALIDATIONS, Validation, validate_cross_field
from .digital_link import DEFAULT_DL_DOMAIN, parse_dl_uri, to_dl_uri
from .element_rules import ElementData, validate_elements
from .element_string import parse_bracketed, parse_unbracketed, to_bracketed, to_unbracketed
from .errors import (
    EmptyInputError,
    ErrorRecord,
    GS1ParseError,
    StructuralViolationError,
    UnrecognizedFormatError,
    byte_span,
)
from .scan_data import (
    FIXED_LENGTH_SYMBOLOGIES,
    Symbology,
    normalize_gs,
    parse_scan_data,
    to_scan_data,
)
from ..formatters.hri import hri_lines
from ..validators.validators import calculate_check_digit_mod10


LOGGER = logging.getLogger(__name__)

_DL_SCHEME = re.compile(r'https?://', re.IGNORECASE)
_DIGITS = re.compile(r'[0-9]+')

PLAIN_GTIN_LENGTHS = (8, 12, 13, 14)

# Plain GTIN lengths accepted when the check digit is to be added
PLAIN_GTIN_LENGTHS_WITHOUT_CHECK_DIGIT = (7, 11, 12, 13)


class OutputFormat(str, Enum):
    """Renderable output formats."""
    BRACKETED = "bracketed"
    UNBRACKETED = "unbracketed"
    SCAN_DATA = "scan-data"
    DL_URI = "dl-uri"
    HRI = "hri"


@dataclass
class ParseOptions:
    """
    Configuration options for parsing and rendering.

    Attributes:
        symbology: Barcode symbology for scan data output (set by scan data input)
        add_check_digit: GTINs for fixed-length symbologies are given without
            their check digit, which is calculated
        include_data_titles_in_hri: Prefix HRI lines with the AI title
        permit_unknown_ais: Accept AIs absent from the dictionary if they fit
            an AI family (bracketed and Digital Link input only)
        permit_zero_suppressed_gtin_in_dl_uris: Accept GTIN-8/12/13 as the
            (01) key of a Digital Link URI
        validations: Enabled optional cross-field validations
        custom_dictionary: Optional custom AI dictionary
        default_dl_domain: URI stem for Digital Link output
    """
    symbology: Optional[Symbology] = None
    add_check_digit: bool = False
    include_data_titles_in_hri: bool = False
    permit_unknown_ais: bool = False
    permit_zero_suppressed_gtin_in_dl_uris: bool = False
    validations: Set[Validation] = field(default_factory=lambda: set(DEFAULT_VALIDATIONS))
    custom_dictionary: Optional[AIDictionary] = None
    default_dl_domain: str = DEFAULT_DL_DOMAIN


@dataclass
class _Decoded:
    elements: List[ElementData]
    ignored_params: List[str] = field(default_factory=list)
    symbology: Optional[Symbology] = None
    uri: Optional[str] = None


class GS1Parser:
    """
    Main GS1 parser class.

    Holds the current message, the options and the last error.
    Not safe for concurrent use; create one parser per thread.
    """

    def __init__(self, options: Optional[ParseOptions] = None):
        self.options = replace(options) if options else ParseOptions()
        self.options.validations = set(self.options.validations)
        self._input = ''
        self._elements: List[ElementData] = []
        self._ignored_params: List[str] = []
        self._uri: Optional[str] = None
        self._last_error: Optional[ErrorRecord] = None

    @property
    def dictionary(self) -> AIDictionary:
        return self.options.custom_dictionary or load_ai_dictionary()

    # --- input ------------------------------------------------------------

    def set_input(self, raw: str) -> None:
        """
        Detect the format of raw, decode and validate it.

        Raises:
            GS1ParseError: The input is invalid; the previous message is kept
        """
        try:
            decoded = self._decode(raw)
        except GS1ParseError as exc:
            exc.record = byte_span(exc.record, raw)
            self._last_error = exc.record
            LOGGER.debug("Input rejected: %s", exc)
            raise

        self._input = raw
        self._elements = decoded.elements
        self._ignored_params = decoded.ignored_params
        self._uri = decoded.uri
        self._last_error = None
        if decoded.symbology is not None:
            self.options.symbology = decoded.symbology

    def _decode(self, raw: str) -> _Decoded:
        if not raw:
            raise EmptyInputError("No input data")

        dictionary = self.dictionary
        options = self.options

        if raw.startswith('('):
            LOGGER.debug("Decoding bracketed element string")
            decoded = _Decoded(parse_bracketed(raw, dictionary, options.permit_unknown_ais))
        elif raw.startswith(']'):
            LOGGER.debug("Decoding scan data")
            scan = parse_scan_data(
                normalize_gs(raw),
                dictionary,
                options.permit_unknown_ais,
                options.permit_zero_suppressed_gtin_in_dl_uris,
            )
            decoded = _Decoded(scan.elements, scan.ignored_params, scan.symbology, scan.uri)
        elif raw.startswith('^'):
            LOGGER.debug("Decoding unbracketed element string")
            decoded = _Decoded(parse_unbracketed(raw, dictionary))
        elif _DL_SCHEME.match(raw):
            LOGGER.debug("Decoding Digital Link URI")
            elements, ignored = parse_dl_uri(
                raw,
                dictionary,
                options.permit_unknown_ais,
                options.permit_zero_suppressed_gtin_in_dl_uris,
            )
            decoded = _Decoded(elements, ignored, uri=raw)
        elif _DIGITS.fullmatch(raw):
            LOGGER.debug("Decoding plain GTIN")
            decoded = _Decoded([self._plain_gtin(raw, dictionary)])
        else:
            raise UnrecognizedFormatError("Input is not in a recognised GS1 format")

        if self._adds_check_digit(decoded.symbology):
            _add_check_digit(decoded.elements)

        validate_elements(decoded.elements)
        validate_cross_field(decoded.elements, options.validations)
        return decoded

    def _adds_check_digit(self, symbology: Optional[Symbology] = None) -> bool:
        return self.options.add_check_digit and (
            (symbology or self.options.symbology) in FIXED_LENGTH_SYMBOLOGIES
        )

    def _plain_gtin(self, digits: str, dictionary: AIDictionary) -> ElementData:
        """(01) element for 8, 12, 13 or 14 digits, zero-padded to 14."""
        if self._adds_check_digit():
            lengths, target = PLAIN_GTIN_LENGTHS_WITHOUT_CHECK_DIGIT, 13
        else:
            lengths, target = PLAIN_GTIN_LENGTHS, 14
        if len(digits) not in lengths:
            raise StructuralViolationError(
                f"A plain GTIN must have {', '.join(map(str, lengths))} digits",
                offset=0, length=len(digits)
            )

        pad = target - len(digits)
        return ElementData(
            ai='01',
            value='0' * pad + digits,
            entry=dictionary.get('01'),
            start_index=0,
            char_offsets=[0] * pad + list(range(len(digits) + 1)),
        )

    # --- state ------------------------------------------------------------

    @property
    def input(self) -> str:
        """The last successfully parsed input."""
        return self._input

    @property
    def elements(self) -> List[ElementData]:
        return list(self._elements)

    @property
    def last_error(self) -> Optional[ErrorRecord]:
        return self._last_error

    @property
    def error_markup(self) -> str:
        """Value of the failing AI with the bad data between '|', or ''."""
        if self._last_error is None or self._last_error.markup is None:
            return ''
        return self._last_error.markup

    @property
    def dl_ignored_query_params(self) -> List[str]:
        """Query parameters of a Digital Link input that are not AIs, verbatim."""
        return list(self._ignored_params)

    # --- options ----------------------------------------------------------

    @property
    def symbology(self) -> Optional[Symbology]:
        return self.options.symbology

    @symbology.setter
    def symbology(self, value: Optional[Symbology]) -> None:
        self.options.symbology = Symbology(value) if value is not None else None

    @property
    def add_check_digit(self) -> bool:
        return self.options.add_check_digit

    @add_check_digit.setter
    def add_check_digit(self, value: bool) -> None:
        self.options.add_check_digit = value

    @property
    def include_data_titles_in_hri(self) -> bool:
        return self.options.include_data_titles_in_hri

    @include_data_titles_in_hri.setter
    def include_data_titles_in_hri(self, value: bool) -> None:
        self.options.include_data_titles_in_hri = value

    @property
    def permit_unknown_ais(self) -> bool:
        return self.options.permit_unknown_ais

    @permit_unknown_ais.setter
    def permit_unknown_ais(self, value: bool) -> None:
        self.options.permit_unknown_ais = value

    @property
    def permit_zero_suppressed_gtin_in_dl_uris(self) -> bool:
        return self.options.permit_zero_suppressed_gtin_in_dl_uris

    @permit_zero_suppressed_gtin_in_dl_uris.setter
    def permit_zero_suppressed_gtin_in_dl_uris(self, value: bool) -> None:
        self.options.permit_zero_suppressed_gtin_in_dl_uris = value

    @property
    def validations(self) -> frozenset:
        return frozenset(self.options.validations)

    @validations.setter
    def validations(self, value: Iterable[Validation]) -> None:
        self.options.validations = {Validation(v) for v in value}

    def set_validation_enabled(self, validation: Validation, enabled: bool) -> None:
        if enabled:
            self.options.validations.add(validation)
        else:
            self.options.validations.discard(validation)

    def is_validation_enabled(self, validation: Validation) -> bool:
        return validation in self.options.validations

    # --- outputs ----------------------------------------------------------

    @property
    def ai_data_string(self) -> str:
        """Bracketed element string."""
        return to_bracketed(self._elements) if self._elements else ''

    @property
    def data_string(self) -> str:
        """Unbracketed element string."""
        return to_unbracketed(self._elements) if self._elements else ''

    @property
    def scan_data(self) -> Optional[str]:
        """Scan data for the current symbology, None if no symbology is set."""
        if self.options.symbology is None or not self._elements:
            return None
        return to_scan_data(self._elements, self.options.symbology, self._uri)

    def digital_link_uri(self, custom_domain: Optional[str] = None) -> str:
        return to_dl_uri(self._elements, custom_domain or self.options.default_dl_domain)

    @property
    def hri(self) -> List[str]:
        return hri_lines(self._elements, self.options.include_data_titles_in_hri)

    def render(self, output: OutputFormat, custom_domain: Optional[str] = None) -> str:
        """
        Render the current message.

        Raises:
            ScanDataUnavailableError: SCAN_DATA without a symbology
            UnderlyingFailureError: The message cannot be expressed in the format
        """
        output = OutputFormat(output)
        LOGGER.debug("Rendering %s", output.value)
        if output == OutputFormat.BRACKETED:
            return self.ai_data_string
        if output == OutputFormat.UNBRACKETED:
            return self.data_string
        if output == OutputFormat.SCAN_DATA:
            return to_scan_data(self._elements, self.options.symbology, self._uri)
        if output == OutputFormat.DL_URI:
            return self.digital_link_uri(custom_domain)
        return '\n'.join(self.hri)


def _add_check_digit(elements: List[ElementData]) -> None:
    """Append the check digit to a 13 digit GTIN leading the primary message."""
    primary = [e for e in elements if not e.composite]
    if not primary:
        return
    element = primary[0]
    if element.ai != '01' or len(element.value) != 13 or not element.value.isdigit():
        return

    if element.char_offsets is None:
        offsets = list(range(element.start_index, element.start_index + 14))
    else:
        offsets = list(element.char_offsets)
    offsets.append(offsets[-1])

    element.value += str(calculate_check_digit_mod10(element.value))
    element.char_offsets = offsets


def parse_gs1(text: str, *, options: Optional[ParseOptions] = None) -> GS1Parser:
    """
    Parse GS1 data in any supported format.

    Raises:
        GS1ParseError: The input is invalid
    """
    parser = GS1Parser(options)
    parser.set_input(text)
    return parser

"""
Barcode scan data with AIM symbology identifiers (ISO/IEC 15424).

A scanner transmits the symbology identifier, then the message. GS1 AI data
uses ASCII GS (0x1D) for FNC1 separators; QR Code, Data Matrix and DotCode
may carry a Digital Link URI instead.

    ]E0  EAN-13 / UPC-A / UPC-E      ]E4  EAN-8
    ]e0  GS1 DataBar, and any GS1 Composite except EAN/UPC
    ]C1  GS1-128
    ]d2  GS1 DataMatrix              ]d1  Data Matrix with a URI
    ]Q3  GS1 QR Code                 ]Q1  QR Code with a URI
    ]J1  GS1 DotCode                 ]J0  DotCode with a URI

An EAN/UPC composite is reported as two messages joined by '|', the second
with its own ]e0 identifier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .ai_dictionary_loader import AIDictionary
from .digital_link import parse_dl_uri
from .element_rules import ElementData
from .element_string import encode_ai_data, parse_ai_data, split_composite
from .errors import (
    ScanDataUnavailableError,
    StructuralViolationError,
    UnderlyingFailureError,
    UnrecognizedFormatError,
)


LOGGER = logging.getLogger(__name__)

GS = '\x1d'
GS_PLACEHOLDER = '{GS}'


class Symbology(str, Enum):
    """GS1 barcode symbologies."""
    DATABAR_OMNI = "databar-omni"
    DATABAR_TRUNCATED = "databar-truncated"
    DATABAR_STACKED = "databar-stacked"
    DATABAR_STACKED_OMNI = "databar-stacked-omni"
    DATABAR_LIMITED = "databar-limited"
    DATABAR_EXPANDED = "databar-expanded"
    UPC_A = "upc-a"
    UPC_E = "upc-e"
    EAN_13 = "ean-13"
    EAN_8 = "ean-8"
    GS1_128_CCA = "gs1-128-cca"
    GS1_128_CCC = "gs1-128-ccc"
    QR = "qr"
    DATAMATRIX = "datamatrix"
    DOTCODE = "dotcode"


# Symbologies that encode a single GTIN of fixed length
FIXED_LENGTH_SYMBOLOGIES = frozenset({
    Symbology.UPC_A, Symbology.UPC_E, Symbology.EAN_13, Symbology.EAN_8,
    Symbology.DATABAR_OMNI, Symbology.DATABAR_TRUNCATED, Symbology.DATABAR_STACKED,
    Symbology.DATABAR_STACKED_OMNI, Symbology.DATABAR_LIMITED,
})

_EAN_UPC = frozenset({Symbology.UPC_A, Symbology.UPC_E, Symbology.EAN_13, Symbology.EAN_8})

_DATABAR_LINEAR = frozenset({
    Symbology.DATABAR_OMNI, Symbology.DATABAR_TRUNCATED, Symbology.DATABAR_STACKED,
    Symbology.DATABAR_STACKED_OMNI, Symbology.DATABAR_LIMITED,
})

# AIM identifiers for (AI data, URI) in the 2D symbologies
_MATRIX_IDENTIFIERS = {
    Symbology.DATAMATRIX: (']d2', ']d1'),
    Symbology.QR: (']Q3', ']Q1'),
    Symbology.DOTCODE: (']J1', ']J0'),
}

# Identifier of AI data -> symbology it selects
_AI_DATA_IDENTIFIERS = {
    ']e0': Symbology.DATABAR_EXPANDED,
    ']C1': Symbology.GS1_128_CCA,
    ']d2': Symbology.DATAMATRIX,
    ']Q3': Symbology.QR,
    ']J1': Symbology.DOTCODE,
}

_URI_IDENTIFIERS = {
    ']d1': Symbology.DATAMATRIX,
    ']Q1': Symbology.QR,
    ']J0': Symbology.DOTCODE,
}

_EAN_COMPOSITE = '|]e0'


@dataclass
class ScanDecode:
    """Result of decoding scan data."""
    elements: List[ElementData]
    symbology: Symbology
    uri: Optional[str] = None
    ignored_params: List[str] = field(default_factory=list)


def normalize_gs(text: str) -> str:
    """Replace '{GS}' placeholders with the GS control character."""
    return text.replace(GS_PLACEHOLDER, GS)


def _parse_ean_upc(
    text: str,
    dictionary: AIDictionary,
    digits: int,
    symbology: Symbology
) -> ScanDecode:
    payload = text[3:3 + digits]
    if len(payload) != digits or not payload.isdigit() or not payload.isascii():
        raise StructuralViolationError(
            f"{symbology.value} scan data must have {digits} digits",
            offset=3, length=len(text) - 3
        )

    pad = 14 - digits
    element = ElementData(
        ai='01',
        value='0' * pad + payload,
        entry=dictionary.get('01'),
        start_index=3,
        char_offsets=[3] * pad + list(range(3, 3 + digits + 1)),
    )
    elements = [element]

    rest = text[3 + digits:]
    if rest:
        if not rest.startswith(_EAN_COMPOSITE):
            raise StructuralViolationError(
                "Unexpected data after the linear component", offset=3 + digits, length=len(rest)
            )
        base = 3 + digits + len(_EAN_COMPOSITE)
        composite = parse_ai_data(text[base:], dictionary, GS, base_offset=base, composite=True)
        if not composite:
            raise StructuralViolationError("Empty composite component", offset=base, length=0)
        elements += composite

    return ScanDecode(elements, symbology)


def parse_scan_data(
    text: str,
    dictionary: AIDictionary,
    permit_unknown: bool = False,
    permit_zero_suppressed_gtin: bool = False
) -> ScanDecode:
    """
    Decode scan data, selecting the symbology from its AIM identifier.

    Raises:
        UnrecognizedFormatError: Unsupported symbology identifier
        StructuralViolationError: Malformed message
    """
    identifier = text[:3]

    if identifier == ']E0':
        return _parse_ean_upc(text, dictionary, 13, Symbology.EAN_13)
    if identifier == ']E4':
        return _parse_ean_upc(text, dictionary, 8, Symbology.EAN_8)

    if identifier in _AI_DATA_IDENTIFIERS:
        elements = parse_ai_data(text[3:], dictionary, GS, base_offset=3)
        if not elements:
            raise StructuralViolationError("Missing AI data", offset=3, length=0)
        return ScanDecode(elements, _AI_DATA_IDENTIFIERS[identifier])

    if identifier in _URI_IDENTIFIERS:
        uri = text[3:]
        elements, ignored = parse_dl_uri(
            uri, dictionary, permit_unknown, permit_zero_suppressed_gtin, base_offset=3
        )
        return ScanDecode(elements, _URI_IDENTIFIERS[identifier], uri=uri, ignored_params=ignored)

    raise UnrecognizedFormatError(
        f"Unsupported symbology identifier '{identifier}'", offset=0, length=len(identifier)
    )


def _single_gtin(primary: List[ElementData], symbology: Symbology) -> str:
    if len(primary) != 1 or primary[0].ai != '01':
        raise UnderlyingFailureError(
            f"{symbology.value} requires the primary message to be a single GTIN (01)"
        )
    return primary[0].value


def to_scan_data(
    elements: List[ElementData],
    symbology: Optional[Symbology],
    uri: Optional[str] = None
) -> str:
    """
    Render scan data for a symbology.

    Args:
        elements: Validated element sequence
        symbology: Target symbology
        uri: Original Digital Link URI, rendered as-is by the 2D symbologies

    Raises:
        ScanDataUnavailableError: No symbology selected
        UnderlyingFailureError: The data cannot be carried by the symbology
    """
    if symbology is None:
        raise ScanDataUnavailableError("No symbology selected")
    if not elements:
        return ''

    LOGGER.debug("Rendering scan data for %s", symbology.value)
    primary, composite = split_composite(elements)

    if symbology in _MATRIX_IDENTIFIERS:
        ai_identifier, uri_identifier = _MATRIX_IDENTIFIERS[symbology]
        if uri is not None:
            return uri_identifier + uri
        if composite:
            raise UnderlyingFailureError(f"{symbology.value} has no composite component")
        return ai_identifier + encode_ai_data(primary, GS)

    if symbology in _EAN_UPC:
        gtin = _single_gtin(primary, symbology)
        if symbology == Symbology.EAN_8:
            identifier, zeros = ']E4', 6
        elif symbology == Symbology.EAN_13:
            identifier, zeros = ']E0', 1
        else:
            identifier, zeros = ']E0', 2
        if gtin[:zeros] != '0' * zeros:
            raise UnderlyingFailureError(f"GTIN {gtin} cannot be carried by {symbology.value}")
        # UPC-A and UPC-E are transmitted as their EAN-13 equivalent
        text = identifier + gtin[1 if identifier == ']E0' else zeros:]
        if composite:
            text += _EAN_COMPOSITE + encode_ai_data(composite, GS)
        return text

    if symbology in _DATABAR_LINEAR:
        gtin = _single_gtin(primary, symbology)
        if symbology == Symbology.DATABAR_LIMITED and gtin[0] not in '01':
            raise UnderlyingFailureError(
                f"GTIN {gtin} cannot be carried by {symbology.value}"
            )
        text = ']e0' + encode_ai_data(primary, GS)
        if composite:
            text += GS + encode_ai_data(composite, GS)
        return text

    if symbology == Symbology.DATABAR_EXPANDED:
        text = ']e0' + encode_ai_data(primary, GS)
        if composite:
            text += GS + encode_ai_data(composite, GS)
        return text

    # GS1-128
    if composite:
        return ']e0' + encode_ai_data(primary, GS) + GS + encode_ai_data(composite, GS)
    return ']C1' + encode_ai_data(primary, GS)

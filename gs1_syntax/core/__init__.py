"""
Core parsing modules for the GS1 syntax engine.
"""

from .parser import parse_gs1, GS1Parser, OutputFormat, ParseOptions
from .ai_dictionary_loader import load_ai_dictionary, AIEntry, AIDictionary, Component
from .cross_field import Validation
from .element_rules import ElementData
from .errors import (
    CrossFieldKind,
    CrossFieldViolationError,
    EmptyInputError,
    ErrorCode,
    ErrorRecord,
    GS1ParseError,
    LinterFailureError,
    ScanDataUnavailableError,
    StructuralViolationError,
    UnderlyingFailureError,
    UnrecognizedFormatError,
)
from .scan_data import Symbology

__all__ = [
    "parse_gs1",
    "GS1Parser",
    "OutputFormat",
    "ParseOptions",
    "load_ai_dictionary",
    "AIEntry",
    "AIDictionary",
    "Component",
    "Validation",
    "ElementData",
    "CrossFieldKind",
    "CrossFieldViolationError",
    "EmptyInputError",
    "ErrorCode",
    "ErrorRecord",
    "GS1ParseError",
    "LinterFailureError",
    "ScanDataUnavailableError",
    "StructuralViolationError",
    "UnderlyingFailureError",
    "UnrecognizedFormatError",
    "Symbology",
]

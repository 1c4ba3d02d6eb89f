"""
GS1 Syntax Engine

Parses, validates and converts GS1 Application Identifier data between
bracketed and unbracketed element strings, barcode scan data and GS1 Digital
Link URIs, and renders its human-readable interpretation.

Based on GS1 General Specifications and the GS1 Barcode Syntax Dictionary.
"""

from .core.parser import parse_gs1, GS1Parser, OutputFormat, ParseOptions
from .core.ai_dictionary_loader import load_ai_dictionary, AIEntry, AIDictionary
from .core.cross_field import Validation
from .core.element_rules import ElementData
from .core.errors import ErrorCode, ErrorRecord, GS1ParseError, CrossFieldKind
from .core.scan_data import Symbology
from .formatters.json_formatter import (
    format_gs1_result_json,
    parse_gs1_to_json,
    parse_gs1_to_dict,
)

__version__ = "1.0.0"
__all__ = [
    "parse_gs1",
    "GS1Parser",
    "OutputFormat",
    "ParseOptions",
    "load_ai_dictionary",
    "AIEntry",
    "AIDictionary",
    "Validation",
    "ElementData",
    "ErrorCode",
    "ErrorRecord",
    "GS1ParseError",
    "CrossFieldKind",
    "Symbology",
    "format_gs1_result_json",
    "parse_gs1_to_json",
    "parse_gs1_to_dict",
]

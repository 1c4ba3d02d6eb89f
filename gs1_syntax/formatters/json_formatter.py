"""
JSON Formatter for the GS1 syntax engine

Summarises a parsed message:
- Each element with its AI, title and value
- Dates as ISO 8601 (YYYY-MM-DD)
- Implied-decimal values of the measure and amount AIs
- Every output format that can be rendered for the message
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..core.element_rules import ElementData
from ..core.errors import GS1ParseError
from ..core.parser import GS1Parser, ParseOptions, parse_gs1
from ..validators.validators import decode_decimal_value, to_iso_date


# Linters that mark a component as a date, with the date's length
DATE_LINTERS = {
    'yymmdd': 6,
    'yymmd0': 6,
    'yyyymmdd': 8,
    'yyyymmd0': 8,
}


def format_element(element: ElementData) -> Dict[str, Any]:
    """Dictionary describing one element."""
    output: Dict[str, Any] = {
        'ai': element.ai,
        'title': element.title,
        'value': element.value,
    }
    if element.entry.unknown:
        output['unknown'] = True
    if element.composite:
        output['composite'] = True

    first = element.entry.components[0]
    for linter in first.linters:
        if linter in DATE_LINTERS:
            output['date'] = to_iso_date(element.value[:DATE_LINTERS[linter]])
            break

    decimals = element.entry.decimal_positions
    if decimals is not None and element.value.isdigit():
        output['decimal_value'] = decode_decimal_value(element.value, decimals)[0]

    return output


def _render_or_none(render) -> Optional[str]:
    try:
        return render()
    except GS1ParseError:
        return None


def format_gs1_result_dict(parser: GS1Parser) -> Dict[str, Any]:
    """Dictionary summary of the parser's current message."""
    return {
        'input': parser.input,
        'valid': True,
        'symbology': parser.symbology.value if parser.symbology else None,
        'elements': [format_element(e) for e in parser.elements],
        'bracketed': parser.ai_data_string,
        'unbracketed': parser.data_string,
        'scan_data': _render_or_none(lambda: parser.scan_data),
        'dl_uri': _render_or_none(parser.digital_link_uri),
        'hri': parser.hri,
        'dl_ignored_query_params': parser.dl_ignored_query_params,
    }


def format_gs1_result_json(parser: GS1Parser) -> str:
    """
    Format the parser's current message as JSON.

    Returns:
        JSON string with the elements and the rendered formats
    """
    return json.dumps(format_gs1_result_dict(parser), ensure_ascii=False, indent=2)


def parse_gs1_to_dict(text: str, options: Optional[ParseOptions] = None) -> Dict[str, Any]:
    """
    Parse GS1 data and return its summary.

    Invalid input is reported in the dictionary rather than raised.

    Example:
        >>> parse_gs1_to_dict("(01)09501101530003(17)261231")['elements'][1]
        {'ai': '17', 'title': 'USE BY or EXPIRY', 'value': '261231', 'date': '2026-12-31'}
    """
    try:
        parser = parse_gs1(text, options=options)
    except GS1ParseError as exc:
        return {
            'input': text,
            'valid': False,
            'error': exc.record.to_dict(),
        }
    return format_gs1_result_dict(parser)


def parse_gs1_to_json(text: str, options: Optional[ParseOptions] = None) -> str:
    """Parse GS1 data and return its summary as JSON."""
    return json.dumps(parse_gs1_to_dict(text, options), ensure_ascii=False, indent=2)

"""
CLI interface for the GS1 syntax engine.

Usage:
    python -m gs1_syntax "<gs1 data>" [options]

Options:
    --symbology NAME          Symbology for scan data output
    --add-check-digit         Calculate the GTIN check digit (fixed-length symbologies)
    --hri-titles              Include AI titles in the HRI
    --permit-unknown-ais      Accept AIs missing from the dictionary
    --permit-zero-suppressed-gtin
                              Accept GTIN-8/12/13 in Digital Link URIs
    --no-requisite-check      Do not check requisite AIs
    --allow-unknown-dl-attrs  Accept unknown AIs as Digital Link attributes
    --dl-domain URL           Domain for the Digital Link URI output
    --json                    Output as JSON
    --verbose                 Log decoding steps
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .core.cross_field import Validation
from .core.errors import GS1ParseError
from .core.parser import GS1Parser, ParseOptions
from .core.scan_data import Symbology
from .formatters.json_formatter import format_gs1_result_dict, format_element


def _render(render) -> str:
    try:
        value = render()
    except GS1ParseError as exc:
        return f"(unavailable: {exc})"
    return value if value is not None else "(unavailable: no symbology)"


def format_result(parser: GS1Parser, dl_domain: Optional[str] = None) -> str:
    """Format the parsed message for display."""
    lines = [
        "=" * 60,
        "GS1 Parse Result",
        "=" * 60,
        f"Input: {parser.input!r}",
    ]

    if parser.symbology:
        lines.append(f"Symbology: {parser.symbology.value}")

    lines.extend([
        "",
        "Elements:",
        "-" * 40,
    ])

    for element in parser.elements:
        info = format_element(element)
        lines.append(f"  AI({info['ai']}): {info['title']}")
        lines.append(f"    Value: {info['value']!r}")
        if 'date' in info:
            lines.append(f"    Date: {info['date']}")
        if 'decimal_value' in info:
            lines.append(f"    Decimal Value: {info['decimal_value']}")
        if info.get('composite'):
            lines.append("    Composite: True")

    lines.extend([
        "",
        "Outputs:",
        "-" * 40,
        f"  Bracketed:    {parser.ai_data_string}",
        f"  Unbracketed:  {parser.data_string}",
        f"  Scan data:    {_render(lambda: parser.scan_data)!r}",
        f"  Digital Link: {_render(lambda: parser.digital_link_uri(dl_domain))}",
        "",
        "HRI:",
        "-" * 40,
    ])
    lines.extend(f"  {line}" for line in parser.hri)

    if parser.dl_ignored_query_params:
        lines.extend([
            "",
            "Ignored query parameters:",
            "-" * 40,
        ])
        lines.extend(f"  {param}" for param in parser.dl_ignored_query_params)

    return '\n'.join(lines)


def format_error(exc: GS1ParseError) -> str:
    record = exc.record
    lines = [f"ERROR [{record.code.value}]: {record.message}"]
    if record.markup:
        lines.append(f"  {record.markup}")
    elif record.offset is not None:
        lines.append(f"  at offset {record.offset}")
    if record.ais:
        lines.append(f"  AIs: {', '.join(record.ais)}")
    return '\n'.join(lines)


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='gs1_syntax',
        description='Parse, validate and convert GS1 data'
    )

    parser.add_argument(
        'data',
        help='Bracketed or unbracketed element string, scan data, '
             'Digital Link URI or plain GTIN'
    )

    parser.add_argument(
        '--symbology',
        choices=[s.value for s in Symbology],
        default=None,
        help='Barcode symbology used for scan data output'
    )

    parser.add_argument(
        '--add-check-digit',
        action='store_true',
        help='GTIN is given without its check digit (fixed-length symbologies only)'
    )

    parser.add_argument(
        '--hri-titles',
        action='store_true',
        help='Include AI titles in the human-readable interpretation'
    )

    parser.add_argument(
        '--permit-unknown-ais',
        action='store_true',
        help='Accept AIs that are not in the dictionary but fit an AI family'
    )

    parser.add_argument(
        '--permit-zero-suppressed-gtin',
        action='store_true',
        help='Accept GTIN-8, GTIN-12 and GTIN-13 keys in Digital Link URIs'
    )

    parser.add_argument(
        '--no-requisite-check',
        action='store_true',
        help='Do not require the requisite AIs of each AI'
    )

    parser.add_argument(
        '--allow-unknown-dl-attrs',
        action='store_true',
        help='Accept unknown AIs as Digital Link URI data attributes'
    )

    parser.add_argument(
        '--dl-domain',
        default=None,
        help='Domain for the Digital Link URI output'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Output result as JSON'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log decoding and rendering steps to stderr'
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )

    # Configure options
    validations = set(Validation)
    if args.no_requisite_check:
        validations.discard(Validation.REQUISITE_AIS)
    if args.allow_unknown_dl_attrs:
        validations.discard(Validation.UNKNOWN_AI_NOT_DL_ATTR)

    options = ParseOptions(
        symbology=Symbology(args.symbology) if args.symbology else None,
        add_check_digit=args.add_check_digit,
        include_data_titles_in_hri=args.hri_titles,
        permit_unknown_ais=args.permit_unknown_ais,
        permit_zero_suppressed_gtin_in_dl_uris=args.permit_zero_suppressed_gtin,
        validations=validations,
    )
    if args.dl_domain:
        options.default_dl_domain = args.dl_domain

    gs1 = GS1Parser(options)
    try:
        gs1.set_input(args.data)
    except GS1ParseError as exc:
        if args.json:
            print(json.dumps({
                'input': args.data,
                'valid': False,
                'error': exc.record.to_dict(),
            }, indent=2, ensure_ascii=False))
        else:
            print(format_error(exc), file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(format_gs1_result_dict(gs1), indent=2, ensure_ascii=False))
    else:
        print(format_result(gs1))

    return 0


if __name__ == '__main__':
    sys.exit(main())

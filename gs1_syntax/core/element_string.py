"""
Bracketed and unbracketed GS1 element strings.

Bracketed:    (01)09501101530003(10)ABC123|(99)COMPOSITE
Unbracketed:  ^010950110153000310ABC123|^99COMPOSITE

In bracketed strings a '(' inside a value is written '\\('. In unbracketed
strings '^' stands for FNC1: it starts the message and terminates every
value whose AI does not have a predefined length.
"""

from __future__ import annotations

import re
from typing import List

from .ai_dictionary_loader import AIDictionary
from .element_rules import ElementData, resolve_entry, value_extent
from .errors import StructuralViolationError


FNC1 = '^'
COMPOSITE_SEPARATOR = '|'

_BRACKETED_AI = re.compile(r'\((\d{2,4})\)')


def parse_bracketed(
    text: str,
    dictionary: AIDictionary,
    permit_unknown: bool = False
) -> List[ElementData]:
    """
    Decode a bracketed element string.

    Raises:
        StructuralViolationError: Malformed AI, unknown AI or empty value
    """
    elements: List[ElementData] = []
    composite = False
    pos = 0

    while pos < len(text):
        if text.startswith('|(', pos) and elements and not composite:
            composite = True
            pos += 1

        match = _BRACKETED_AI.match(text, pos)
        if not match:
            raise StructuralViolationError(
                "Expected a bracketed AI", offset=pos, length=1
            )
        ai = match.group(1)
        entry = resolve_entry(ai, dictionary, permit_unknown, offset=match.start(1))
        pos = match.end()

        chars: List[str] = []
        offsets: List[int] = []
        escaped = False
        while pos < len(text):
            char = text[pos]
            if char == '\\' and text.startswith('(', pos + 1):
                chars.append('(')
                offsets.append(pos)
                escaped = True
                pos += 2
                continue
            if char == '(' or text.startswith('|(', pos):
                break
            chars.append(char)
            offsets.append(pos)
            pos += 1
        offsets.append(pos)

        if not chars:
            raise StructuralViolationError(
                f"AI ({ai}) value is empty", offset=pos, length=0, ai=ai
            )

        elements.append(ElementData(
            ai=ai,
            value=''.join(chars),
            entry=entry,
            composite=composite,
            start_index=offsets[0],
            char_offsets=offsets if escaped else None,
        ))

    return elements


def parse_ai_data(
    text: str,
    dictionary: AIDictionary,
    separator: str,
    base_offset: int = 0,
    composite: bool = False
) -> List[ElementData]:
    """
    Decode concatenated AI data with separators between values.

    AIs are recognised by longest match against the dictionary, so unknown
    AIs cannot be decoded. A separator after a predefined-length value is
    tolerated.

    Args:
        text: AI data without its leading FNC1
        separator: Character terminating variable-length values
        base_offset: Offset of text within the original input
        composite: Mark the decoded elements as composite
    """
    elements: List[ElementData] = []
    pos = 0

    while pos < len(text):
        entry, ai_len = dictionary.find_longest_match(text, pos)
        if entry is None:
            raise StructuralViolationError(
                "No known AI", offset=base_offset + pos, length=min(4, len(text) - pos)
            )
        ai = text[pos:pos + ai_len]
        pos += ai_len

        end = value_extent(text, pos, entry, separator)
        if end == pos:
            raise StructuralViolationError(
                f"AI ({ai}) value is empty", offset=base_offset + pos, length=0, ai=ai
            )
        elements.append(ElementData(
            ai=ai,
            value=text[pos:end],
            entry=entry,
            composite=composite,
            start_index=base_offset + pos,
        ))

        pos = end
        if text.startswith(separator, pos):
            pos += 1

    return elements


def parse_unbracketed(text: str, dictionary: AIDictionary) -> List[ElementData]:
    """
    Decode an unbracketed element string.

    Raises:
        StructuralViolationError: Missing leading FNC1, unknown AI or empty value
    """
    if not text.startswith(FNC1):
        raise StructuralViolationError("Missing leading FNC1", offset=0, length=1)

    split = text.find(COMPOSITE_SEPARATOR + FNC1)
    primary = text if split == -1 else text[:split]
    if len(primary) < 2:
        raise StructuralViolationError("Missing AI data", offset=1, length=0)

    elements = parse_ai_data(primary[1:], dictionary, FNC1, base_offset=1)
    if split != -1:
        elements += parse_ai_data(
            text[split + 2:], dictionary, FNC1, base_offset=split + 2, composite=True
        )
        if not elements[-1].composite:
            raise StructuralViolationError(
                "Empty composite component", offset=split, length=2
            )
    return elements


def encode_ai_data(elements: List[ElementData], separator: str) -> str:
    """
    Concatenate elements, adding a separator after every value whose AI has
    no predefined length unless it is the last.
    """
    out = []
    for i, element in enumerate(elements):
        out.append(element.ai + element.value)
        if i < len(elements) - 1 and element.entry.fnc1_required:
            out.append(separator)
    return ''.join(out)


def split_composite(elements: List[ElementData]):
    """(primary elements, composite elements)"""
    primary = [e for e in elements if not e.composite]
    composite = [e for e in elements if e.composite]
    return primary, composite


def to_bracketed(elements: List[ElementData]) -> str:
    out = []
    previous_composite = False
    for element in elements:
        if element.composite and not previous_composite:
            out.append(COMPOSITE_SEPARATOR)
        previous_composite = element.composite
        escaped = element.value.replace('(', '\\(')
        out.append(f"({element.ai}){escaped}")
    return ''.join(out)


def to_unbracketed(elements: List[ElementData]) -> str:
    primary, composite = split_composite(elements)
    text = FNC1 + encode_ai_data(primary, FNC1)
    if composite:
        text += COMPOSITE_SEPARATOR + FNC1 + encode_ai_data(composite, FNC1)
    return text

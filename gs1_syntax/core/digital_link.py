"""
GS1 Digital Link URIs.

    https://id.gs1.org/01/09501101530003/10/ABC123?17=261231

The path ends with a primary key and its key qualifiers as /AI/value pairs,
in the order the dictionary declares for the key. Any path before the key is
an arbitrary stem. Query parameters whose key is an AI are data attributes;
other parameters are kept aside, unparsed.

Reference: GS1 Digital Link URI Syntax standard.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import quote

from .ai_dictionary_loader import AIDictionary, AIEntry, vivify_ai
from .element_rules import ElementData, resolve_entry
from .errors import StructuralViolationError, UnderlyingFailureError


LOGGER = logging.getLogger(__name__)

DEFAULT_DL_DOMAIN = "https://id.gs1.org"

# RFC 3986 unreserved and reserved characters, plus '%'
_URI_CHARACTERS = frozenset(
    'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789'
    "-._~:/?#[]@!$&'()*+,;=%"
)

_SCHEME = re.compile(r'https?://', re.IGNORECASE)
_HEX = '0123456789ABCDEFabcdef'

# Lengths of zero-suppressed GTINs (GTIN-8, GTIN-12, GTIN-13)
_ZERO_SUPPRESSED_GTIN_LENGTHS = (8, 12, 13)


def percent_decode(text: str, offset: int) -> Tuple[str, List[int]]:
    """
    Decode %XX escapes.

    Returns:
        (decoded text, input offset of each decoded character plus the end offset)

    Raises:
        StructuralViolationError: '%' not followed by two hex digits
    """
    chars: List[str] = []
    offsets: List[int] = []
    pos = 0
    while pos < len(text):
        if text[pos] == '%':
            escape = text[pos + 1:pos + 3]
            if len(escape) != 2 or any(c not in _HEX for c in escape):
                raise StructuralViolationError(
                    "Invalid percent-encoding", offset=offset + pos, length=1 + len(escape)
                )
            chars.append(chr(int(escape, 16)))
            offsets.append(offset + pos)
            pos += 3
        else:
            chars.append(text[pos])
            offsets.append(offset + pos)
            pos += 1
    offsets.append(offset + pos)
    return ''.join(chars), offsets


def _is_qualifier_path(entry: AIEntry, qualifiers: List[Tuple[str, AIEntry]]) -> bool:
    """
    True if the qualifier AIs follow one of the key's declared sequences.

    Qualifiers need not all be present but must keep the declared order.
    Inferred unknown AIs are not subject to the ordering.
    """
    known = [ai for ai, qualifier in qualifiers if not qualifier.unknown]
    if not known:
        return True
    for sequence in entry.dl_key_qualifiers:
        position = 0
        for ai in known:
            try:
                position = sequence.index(ai, position) + 1
            except ValueError:
                break
        else:
            return True
    return False


def _path_entry(ai: str, dictionary: AIDictionary, permit_unknown: bool) -> Optional[AIEntry]:
    if not ai.isdigit():
        return None
    entry = dictionary.get(ai)
    if entry is None and permit_unknown:
        entry = vivify_ai(ai)
    return entry


def _find_key(
    segments: List[str],
    dictionary: AIDictionary,
    permit_unknown: bool
) -> Optional[int]:
    """Index of the segment holding the primary key of the path."""
    for start in range(len(segments)):
        key = dictionary.get(segments[start])
        if key is None or not key.dl_primary_key or (len(segments) - start) % 2:
            continue
        qualifiers = []
        for i in range(start + 2, len(segments), 2):
            entry = _path_entry(segments[i], dictionary, permit_unknown)
            if entry is None:
                break
            qualifiers.append((segments[i], entry))
        else:
            if _is_qualifier_path(key, qualifiers):
                return start
    return None


def parse_dl_uri(
    uri: str,
    dictionary: AIDictionary,
    permit_unknown: bool = False,
    permit_zero_suppressed_gtin: bool = False,
    base_offset: int = 0
) -> Tuple[List[ElementData], List[str]]:
    """
    Decode a GS1 Digital Link URI.

    Args:
        uri: The URI
        dictionary: AI dictionary
        permit_unknown: Accept AIs absent from the dictionary if they fit an AI family
        permit_zero_suppressed_gtin: Pad a GTIN-8/12/13 key to 14 digits
        base_offset: Offset of the URI within the original input

    Returns:
        (elements, query parameters not mapped to AIs)

    Raises:
        StructuralViolationError: Malformed URI, or no valid key path
    """
    for pos, char in enumerate(uri):
        if char not in _URI_CHARACTERS:
            raise StructuralViolationError(
                "Invalid character in URI", offset=base_offset + pos, length=1
            )

    scheme = _SCHEME.match(uri)
    if not scheme:
        raise StructuralViolationError("URI scheme must be http or https", offset=base_offset, length=0)

    # Fragment is ignored
    uri = uri.split('#', 1)[0]

    authority_end = uri.find('/', scheme.end())
    query_start = uri.find('?')
    if authority_end == -1 or (query_start != -1 and query_start < authority_end):
        raise StructuralViolationError(
            "URI has no path", offset=base_offset + scheme.end(), length=0
        )
    if authority_end == scheme.end():
        raise StructuralViolationError(
            "URI has no domain", offset=base_offset + scheme.end(), length=0
        )

    path_end = len(uri) if query_start == -1 else query_start
    path = uri[authority_end + 1:path_end]

    segments: List[str] = []
    segment_offsets: List[int] = []
    pos = authority_end + 1
    for segment in path.split('/'):
        segments.append(segment)
        segment_offsets.append(pos)
        pos += len(segment) + 1

    key_index = _find_key(segments, dictionary, permit_unknown)
    if key_index is None:
        raise StructuralViolationError(
            "No GS1 Digital Link primary key path found", offset=base_offset + authority_end,
            length=path_end - authority_end
        )
    LOGGER.debug("Digital Link stem is /%s", '/'.join(segments[:key_index]))

    elements: List[ElementData] = []
    for i in range(key_index, len(segments), 2):
        ai = segments[i]
        entry = resolve_entry(ai, dictionary, permit_unknown, offset=base_offset + segment_offsets[i])
        raw_offset = base_offset + segment_offsets[i + 1]
        value, offsets = percent_decode(segments[i + 1], raw_offset)

        if not value:
            raise StructuralViolationError(
                f"AI ({ai}) value is empty", offset=raw_offset, length=0, ai=ai
            )

        if (
            ai == '01'
            and i == key_index
            and permit_zero_suppressed_gtin
            and len(value) in _ZERO_SUPPRESSED_GTIN_LENGTHS
            and value.isdigit()
        ):
            pad = 14 - len(value)
            value = '0' * pad + value
            offsets = [offsets[0]] * pad + offsets

        elements.append(ElementData(
            ai=ai,
            value=value,
            entry=entry,
            start_index=offsets[0],
            char_offsets=offsets,
        ))

    ignored: List[str] = []
    if query_start != -1:
        pos = query_start + 1
        for param in uri[query_start + 1:].split('&'):
            param_offset = pos
            pos += len(param) + 1
            if not param:
                continue

            key, sep, raw_value = param.partition('=')
            entry = None
            if sep and key.isdigit():
                entry = dictionary.get(key)
                if entry is None and permit_unknown:
                    entry = vivify_ai(key)
            if entry is None:
                ignored.append(param)
                continue

            if not entry.dl_data_attr:
                raise StructuralViolationError(
                    f"AI ({key}) is not a valid Digital Link data attribute",
                    offset=base_offset + param_offset, length=len(key), ai=key
                )

            raw_offset = base_offset + param_offset + len(key) + 1
            value, offsets = percent_decode(raw_value, raw_offset)
            if not value:
                raise StructuralViolationError(
                    f"AI ({key}) value is empty", offset=raw_offset, length=0, ai=key
                )
            elements.append(ElementData(
                ai=key,
                value=value,
                entry=entry,
                start_index=offsets[0],
                char_offsets=offsets,
                dl_attribute=True,
            ))

    return elements, ignored


def _encode(value: str) -> str:
    return quote(value, safe='')


def to_dl_uri(elements: List[ElementData], domain: Optional[str] = None) -> str:
    """
    Render a GS1 Digital Link URI.

    The first primary key in the sequence forms the path together with the
    longest sequence of its key qualifiers present, followed by any unknown
    AIs that were not query attributes. All other elements become query
    parameters in sequence order.

    Raises:
        UnderlyingFailureError: No primary key, or an element that can only
            appear in the path
    """
    key = next((e for e in elements if e.entry.dl_primary_key), None)
    if key is None:
        raise UnderlyingFailureError("Cannot create a Digital Link URI without a primary key")

    others = [e for e in elements if e is not key]
    best: List[ElementData] = []
    for sequence in key.entry.dl_key_qualifiers:
        chosen = []
        for ai in sequence:
            match = next((e for e in others if e.ai == ai), None)
            if match is not None:
                chosen.append(match)
        if len(chosen) > len(best):
            best = chosen
    # Unknown AIs are accepted anywhere in a path but never as attributes
    best += [e for e in others if e.entry.unknown and not e.dl_attribute]

    stem = (domain or DEFAULT_DL_DOMAIN).rstrip('/')
    if '://' not in stem:
        stem = 'https://' + stem

    path = ''.join(f"/{e.ai}/{_encode(e.value)}" for e in [key] + best)

    query = []
    for element in others:
        if any(element is q for q in best):
            continue
        if not element.entry.dl_data_attr:
            raise UnderlyingFailureError(
                f"AI ({element.ai}) cannot be a Digital Link data attribute"
            )
        query.append(f"{element.ai}={_encode(element.value)}")

    uri = stem + path
    if query:
        uri += '?' + '&'.join(query)
    return uri

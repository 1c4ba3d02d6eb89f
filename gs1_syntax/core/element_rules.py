"""
Structural rules for individual GS1 elements.

Resolves the AIEntry for an AI (inferring one for unknown AIs when that is
permitted), splits values into their components and runs the character set
check and the linters of every component. Failures are reported against the
coordinates of the original input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .ai_dictionary_loader import AIDictionary, AIEntry, Component, vivify_ai
from .errors import (
    LinterFailureError,
    StructuralViolationError,
    error_markup,
)
from ..validators.linters import get_linter


LOGGER = logging.getLogger(__name__)

# Linter implementing the character set check for each component type
CSET_LINTERS = {
    'N': 'csetnumeric',
    'X': 'cset82',
    'Y': 'cset39',
    'Z': 'cset64',
}


@dataclass(eq=False)
class ElementData:
    """
    One AI and its value within a parsed message.

    Attributes:
        ai: Application Identifier code
        value: Value with any input escaping removed
        entry: Dictionary (or inferred) specification of the AI
        composite: Element belongs to the composite component
        start_index: Offset of the value in the original input
        char_offsets: Input offset of each value character plus the end
            offset, when decoding changed the value's length
        dl_attribute: Element came from a Digital Link URI query parameter
    """
    ai: str
    value: str
    entry: AIEntry
    composite: bool = False
    start_index: int = 0
    char_offsets: Optional[List[int]] = None
    dl_attribute: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ElementData):
            return NotImplemented
        return (self.ai, self.value, self.composite) == (other.ai, other.value, other.composite)

    def __repr__(self) -> str:
        marker = ', composite' if self.composite else ''
        return f"ElementData(({self.ai}){self.value}{marker})"

    @property
    def title(self) -> str:
        return self.entry.title

    def input_span(self, position: int, length: int) -> Tuple[int, int]:
        """Map a span of the value onto (offset, length) in the original input."""
        if self.char_offsets is None:
            return self.start_index + position, length
        start = self.char_offsets[position]
        return start, self.char_offsets[position + length] - start


def resolve_entry(
    ai: str,
    dictionary: AIDictionary,
    permit_unknown: bool,
    offset: Optional[int] = None
) -> AIEntry:
    """
    Find the specification for an AI.

    Raises:
        StructuralViolationError: The AI is not in the dictionary and either
            unknown AIs are not permitted or the AI fits no AI family
    """
    entry = dictionary.get(ai)
    if entry is not None:
        return entry

    if not permit_unknown:
        raise StructuralViolationError(
            f"Unrecognised AI ({ai})", offset=offset, length=len(ai), ai=ai
        )

    entry = vivify_ai(ai)
    if entry is None:
        raise StructuralViolationError(
            f"AI ({ai}) not permitted: it does not fit any AI family",
            offset=offset, length=len(ai), ai=ai
        )

    LOGGER.debug("Inferred specification for unknown AI (%s)", ai)
    return entry


def value_extent(text: str, pos: int, entry: AIEntry, separator: str) -> int:
    """
    End offset of the value starting at pos in an unbracketed string.

    Predefined-length AIs take exactly their length; all others run to the
    next separator or the end of the text.
    """
    if entry.fixed_length is not None:
        return min(pos + entry.fixed_length, len(text))
    end = text.find(separator, pos)
    return len(text) if end == -1 else end


def split_components(entry: AIEntry, value: str) -> List[Tuple[Component, int, str]]:
    """
    Divide a value between the components of its AI.

    A fixed-length component takes its length. A variable-length component
    takes as much as it can while leaving enough for the mandatory
    components that follow it. Trailing optional components may be absent.

    Returns:
        (component, offset within value, component text) for each present component
    """
    parts = []
    pos = 0
    components = entry.components

    for i, component in enumerate(components):
        remaining = len(value) - pos
        if component.optional and remaining == 0:
            break
        needed_after = sum(c.min_length for c in components[i + 1:] if not c.optional)
        if component.fixed:
            length = component.max_length
        else:
            length = min(component.max_length, remaining - needed_after)
        if length < component.min_length or length > remaining:
            break
        parts.append((component, pos, value[pos:pos + length]))
        pos += length

    return parts


def _structural_error(element: ElementData, message: str, position: int, length: int):
    offset, input_length = element.input_span(position, length)
    return StructuralViolationError(
        message,
        offset=offset,
        length=input_length,
        ai=element.ai,
        markup=error_markup(element.ai, element.value, position, length),
    )


def validate_element(element: ElementData) -> None:
    """
    Check an element's length, component character sets and linters.

    Raises:
        StructuralViolationError: Length or character set mismatch
        LinterFailureError: A component linter rejected the data
    """
    entry = element.entry
    value = element.value

    if not value:
        raise _structural_error(element, f"AI ({element.ai}) value is empty", 0, 0)
    if len(value) < entry.min_length:
        raise _structural_error(element, f"AI ({element.ai}) value is too short", 0, len(value))
    if len(value) > entry.max_length:
        over = entry.max_length
        raise _structural_error(
            element, f"AI ({element.ai}) value is too long", over, len(value) - over
        )

    parts = split_components(entry, value)
    consumed = sum(len(text) for _, _, text in parts)
    if consumed != len(value):
        raise _structural_error(
            element, f"AI ({element.ai}) value has an invalid length", consumed, len(value) - consumed
        )

    for component, start, text in parts:
        lint_error = get_linter(CSET_LINTERS[component.cset])(text)
        if lint_error:
            position = start + lint_error.position
            offset, length = element.input_span(position, lint_error.length)
            raise StructuralViolationError(
                f"AI ({element.ai}) contains an invalid character",
                offset=offset,
                length=length,
                ai=element.ai,
                linter=lint_error.code,
                markup=error_markup(element.ai, value, position, lint_error.length),
            )

        for name in component.linters:
            lint_error = get_linter(name)(text)
            if lint_error is None:
                continue
            position = start + lint_error.position
            offset, length = element.input_span(position, lint_error.length)
            raise LinterFailureError(
                f"AI ({element.ai}): {lint_error.code.value.replace('_', ' ').lower()}",
                offset=offset,
                length=length,
                ai=element.ai,
                linter=lint_error.code,
                markup=error_markup(element.ai, value, position, lint_error.length),
            )


def validate_elements(elements: List[ElementData]) -> None:
    for element in elements:
        validate_element(element)

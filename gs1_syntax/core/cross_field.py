"""
Validation of relationships between the elements of a message.

Mutual exclusion, repetition and the digital signature serial key rules are
always applied. Requisite AIs and the rejection of unknown AIs as Digital
Link attributes can be switched off.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import AbstractSet, List

from .element_rules import ElementData
from .errors import CrossFieldKind, CrossFieldViolationError


LOGGER = logging.getLogger(__name__)

# Keys that must carry their serial component when a digital signature is present
DIGSIG_AI = '8030'
DIGSIG_SERIALISED_KEYS = ('253', '255', '8003')


class Validation(str, Enum):
    """Cross-field checks that can be enabled or disabled."""
    REQUISITE_AIS = "REQUISITE_AIS"
    UNKNOWN_AI_NOT_DL_ATTR = "UNKNOWN_AI_NOT_DL_ATTR"


DEFAULT_VALIDATIONS = frozenset(Validation)


def ai_matches(pattern: str, ai: str) -> bool:
    """Match an AI against a dictionary pattern where 'n' is any digit."""
    if len(pattern) != len(ai):
        return False
    return all(p == c or (p == 'n' and c.isdigit()) for p, c in zip(pattern, ai))


def check_mutex(elements: List[ElementData]) -> None:
    for element in elements:
        for pattern in element.entry.exclusive_ais:
            for other in elements:
                if other.ai != element.ai and ai_matches(pattern, other.ai):
                    raise CrossFieldViolationError(
                        f"AIs ({element.ai}) and ({other.ai}) are mutually exclusive",
                        CrossFieldKind.MUTEX,
                        (element.ai, other.ai),
                    )


def check_repeats(elements: List[ElementData]) -> None:
    seen = set()
    for element in elements:
        if element.ai in seen and not element.entry.repeatable:
            raise CrossFieldViolationError(
                f"AI ({element.ai}) must not be repeated",
                CrossFieldKind.REPEAT,
                (element.ai,),
            )
        seen.add(element.ai)


def check_digsig_serial_key(elements: List[ElementData]) -> None:
    if not any(e.ai == DIGSIG_AI for e in elements):
        return
    for element in elements:
        if element.ai in DIGSIG_SERIALISED_KEYS and len(element.value) <= element.entry.min_length:
            raise CrossFieldViolationError(
                f"AI ({element.ai}) requires a serial component when ({DIGSIG_AI}) is present",
                CrossFieldKind.DIGSIG_SERIAL_KEY,
                (element.ai, DIGSIG_AI),
            )


def check_requisites(elements: List[ElementData]) -> None:
    present = [e.ai for e in elements]

    def satisfied(alternative: List[str]) -> bool:
        return all(any(ai_matches(p, ai) for ai in present) for p in alternative)

    for element in elements:
        for group in element.entry.required_ais:
            if not any(satisfied(alternative) for alternative in group):
                options = ' or '.join('+'.join(alt) for alt in group)
                raise CrossFieldViolationError(
                    f"AI ({element.ai}) requires {options}",
                    CrossFieldKind.MISSING_REQUISITE,
                    (element.ai,) + tuple(ai for alt in group for ai in alt),
                )


def check_unknown_dl_attributes(elements: List[ElementData]) -> None:
    for element in elements:
        if element.dl_attribute and element.entry.unknown:
            raise CrossFieldViolationError(
                f"Unknown AI ({element.ai}) is not a valid Digital Link data attribute",
                CrossFieldKind.DISALLOWED_UNKNOWN_ATTRIBUTE,
                (element.ai,),
            )


def validate_cross_field(
    elements: List[ElementData],
    validations: AbstractSet[Validation] = DEFAULT_VALIDATIONS
) -> None:
    """
    Run every applicable cross-field check.

    Raises:
        CrossFieldViolationError: At the first broken relationship
    """
    check_mutex(elements)
    check_repeats(elements)
    check_digsig_serial_key(elements)
    if Validation.UNKNOWN_AI_NOT_DL_ATTR in validations:
        check_unknown_dl_attributes(elements)
    if Validation.REQUISITE_AIS in validations:
        check_requisites(elements)
    LOGGER.debug("Cross-field validation passed for %d elements", len(elements))

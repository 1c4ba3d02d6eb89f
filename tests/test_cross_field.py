"""
Tests for validation across the elements of a message.

Tests cover:
- Mutually exclusive AIs, including digit wildcards
- Repeated AIs
- Serial components required with a digital signature
- Requisite AIs and their alternatives
- Unknown AIs as Digital Link attributes
- Enabling and disabling optional validations
"""

import pytest

from gs1_syntax.core.ai_dictionary_loader import load_ai_dictionary, vivify_ai
from gs1_syntax.core.cross_field import (
    Validation,
    ai_matches,
    validate_cross_field,
)
from gs1_syntax.core.element_rules import ElementData
from gs1_syntax.core.errors import CrossFieldKind, CrossFieldViolationError


DICTIONARY = load_ai_dictionary()

GTIN = "09501101530003"


def element(ai, value, **kwargs):
    return ElementData(ai=ai, value=value, entry=DICTIONARY.get(ai), **kwargs)


def violation(elements, validations=frozenset(Validation)):
    with pytest.raises(CrossFieldViolationError) as exc_info:
        validate_cross_field(elements, validations)
    return exc_info.value


class TestPatterns:
    """Tests for AI patterns with digit wildcards."""

    def test_exact(self):
        assert ai_matches('21', '21')
        assert not ai_matches('21', '235')

    def test_wildcard(self):
        assert ai_matches('391n', '3915')
        assert not ai_matches('391n', '3925')
        assert not ai_matches('391n', '391')


class TestMutex:
    """Tests for mutually exclusive AIs."""

    def test_gtin_and_content(self):
        exc = violation([element('01', GTIN), element('02', GTIN), element('37', "1")])
        assert exc.kind == CrossFieldKind.MUTEX
        assert set(exc.record.ais) == {'01', '02'}

    def test_serial_and_tpx(self):
        exc = violation([element('01', GTIN), element('21', "S1"), element('235', "T1")])
        assert exc.kind == CrossFieldKind.MUTEX

    def test_wildcard_exclusion(self):
        exc = violation([
            element('255', "9501101530003"),
            element('3900', "100"),
            element('3910', "978100"),
        ])
        assert exc.kind == CrossFieldKind.MUTEX

    def test_checked_before_requisites(self):
        """02 without 37 is a mutex failure first."""
        exc = violation([element('01', GTIN), element('02', GTIN)])
        assert exc.kind == CrossFieldKind.MUTEX


class TestRepeats:
    """Tests for repeated AIs."""

    def test_repeated_same_value(self):
        exc = violation([element('01', GTIN), element('10', "ABC"), element('10', "ABC")])
        assert exc.kind == CrossFieldKind.REPEAT
        assert exc.record.ais == ('10',)

    def test_repeated_different_value(self):
        exc = violation([element('01', GTIN), element('10', "ABC"), element('10', "DEF")])
        assert exc.kind == CrossFieldKind.REPEAT


class TestDigitalSignature:
    """Tests for serialised keys alongside AI (8030)."""

    def test_key_without_serial(self):
        exc = violation([element('253', "9501101530003"), element('8030', "ABCD")])
        assert exc.kind == CrossFieldKind.DIGSIG_SERIAL_KEY
        assert exc.record.ais == ('253', '8030')

    def test_key_with_serial(self):
        validate_cross_field([element('253', "9501101530003XYZ"), element('8030', "ABCD")])

    def test_not_applied_without_signature(self):
        validate_cross_field([element('253', "9501101530003")])


class TestRequisites:
    """Tests for requisite AIs."""

    def test_missing(self):
        exc = violation([element('10', "ABC")])
        assert exc.kind == CrossFieldKind.MISSING_REQUISITE
        assert exc.record.ais[0] == '10'

    def test_satisfied_by_alternative(self):
        validate_cross_field([element('02', GTIN), element('37', "10"), element('10', "ABC")])

    def test_combination_requires_all(self):
        exc = violation([element('01', GTIN), element('8030', "ABCD")])
        assert exc.kind == CrossFieldKind.MISSING_REQUISITE
        validate_cross_field([element('01', GTIN), element('21', "S1"), element('8030', "ABCD")])

    def test_every_group_required(self):
        """AI (250) needs one of 01/8006 and also 21."""
        exc = violation([element('01', GTIN), element('250', "X")])
        assert exc.kind == CrossFieldKind.MISSING_REQUISITE
        validate_cross_field([element('01', GTIN), element('21', "S"), element('250', "X")])

    def test_disabled(self):
        validate_cross_field([element('10', "ABC")], validations=frozenset())


class TestUnknownDigitalLinkAttributes:
    """Tests for unknown AIs given as Digital Link query parameters."""

    @staticmethod
    def unknown_attribute():
        return ElementData(ai='3249', value="123456", entry=vivify_ai('3249'), dl_attribute=True)

    def test_rejected(self):
        exc = violation([element('01', GTIN), self.unknown_attribute()])
        assert exc.kind == CrossFieldKind.DISALLOWED_UNKNOWN_ATTRIBUTE

    def test_allowed_when_disabled(self):
        validate_cross_field(
            [element('01', GTIN), self.unknown_attribute()],
            validations=frozenset({Validation.REQUISITE_AIS}),
        )

    def test_unknown_in_element_string_allowed(self):
        unknown = ElementData(ai='3249', value="123456", entry=vivify_ai('3249'))
        validate_cross_field([element('01', GTIN), unknown])

"""
Error kinds raised by the GS1 syntax engine.

Every failure is raised synchronously as a subclass of GS1ParseError. The
exception carries an ErrorRecord: structural and linter failures locate the
offending characters in the original input, cross-field failures name the
AIs involved instead.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from ..validators.codes import LinterCode


class ErrorCode(str, Enum):
    """Error categories."""
    EMPTY_INPUT = "EMPTY_INPUT"
    UNRECOGNIZED_FORMAT = "UNRECOGNIZED_FORMAT"
    STRUCTURAL_VIOLATION = "STRUCTURAL_VIOLATION"
    LINTER_FAILURE = "LINTER_FAILURE"
    CROSS_FIELD_VIOLATION = "CROSS_FIELD_VIOLATION"
    UNDERLYING_FAILURE = "UNDERLYING_FAILURE"
    SCAN_DATA_UNAVAILABLE = "SCAN_DATA_UNAVAILABLE"


class CrossFieldKind(str, Enum):
    """Which relationship between elements was broken."""
    MUTEX = "MUTEX"
    REPEAT = "REPEAT"
    MISSING_REQUISITE = "MISSING_REQUISITE"
    DISALLOWED_UNKNOWN_ATTRIBUTE = "DISALLOWED_UNKNOWN_ATTRIBUTE"
    DIGSIG_SERIAL_KEY = "DIGSIG_SERIAL_KEY"


@dataclass(frozen=True)
class ErrorRecord:
    """
    Details of the last failure.

    Attributes:
        code: Error category
        message: Human-readable description
        offset: Byte offset of the offending data in the UTF-8 encoded input
        length: Byte length of the offending data
        ai: AI whose value was rejected
        linter: Linter result code for LINTER_FAILURE
        kind: Relationship broken for CROSS_FIELD_VIOLATION
        ais: AIs implicated in a cross-field failure
        markup: "(AI)value" with the offending characters between '|'
    """
    code: ErrorCode
    message: str
    offset: Optional[int] = None
    length: Optional[int] = None
    ai: Optional[str] = None
    linter: Optional[LinterCode] = None
    kind: Optional[CrossFieldKind] = None
    ais: Tuple[str, ...] = ()
    markup: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code.value,
            'message': self.message,
            'offset': self.offset,
            'length': self.length,
            'ai': self.ai,
            'linter': self.linter.value if self.linter else None,
            'kind': self.kind.value if self.kind else None,
            'ais': list(self.ais),
            'markup': self.markup,
        }


class GS1ParseError(ValueError):
    """Base class for all engine failures."""
    code = ErrorCode.UNDERLYING_FAILURE

    def __init__(
        self,
        message: str,
        *,
        offset: Optional[int] = None,
        length: Optional[int] = None,
        ai: Optional[str] = None,
        linter: Optional[LinterCode] = None,
        kind: Optional[CrossFieldKind] = None,
        ais: Iterable[str] = (),
        markup: Optional[str] = None,
    ):
        super().__init__(message)
        self.record = ErrorRecord(
            code=self.code,
            message=message,
            offset=offset,
            length=length,
            ai=ai,
            linter=linter,
            kind=kind,
            ais=tuple(ais),
            markup=markup,
        )


class EmptyInputError(GS1ParseError):
    code = ErrorCode.EMPTY_INPUT


class UnrecognizedFormatError(GS1ParseError):
    code = ErrorCode.UNRECOGNIZED_FORMAT


class StructuralViolationError(GS1ParseError):
    code = ErrorCode.STRUCTURAL_VIOLATION


class LinterFailureError(GS1ParseError):
    code = ErrorCode.LINTER_FAILURE


class CrossFieldViolationError(GS1ParseError):
    code = ErrorCode.CROSS_FIELD_VIOLATION

    def __init__(self, message: str, kind: CrossFieldKind, ais: Iterable[str]):
        super().__init__(message, kind=kind, ais=ais)

    @property
    def kind(self) -> CrossFieldKind:
        return self.record.kind


class UnderlyingFailureError(GS1ParseError):
    code = ErrorCode.UNDERLYING_FAILURE


class ScanDataUnavailableError(GS1ParseError):
    code = ErrorCode.SCAN_DATA_UNAVAILABLE


def error_markup(ai: str, value: str, position: int, length: int) -> str:
    """Render "(AI)value" with value[position:position+length] between '|'."""
    end = position + length
    return f"({ai}){value[:position]}|{value[position:end]}|{value[end:]}"


def byte_span(record: ErrorRecord, text: str) -> ErrorRecord:
    """Convert the character span of record within text to a UTF-8 byte span."""
    if record.offset is None or text.isascii():
        return record
    offset = len(text[:record.offset].encode('utf-8'))
    length = record.length
    if length is not None:
        length = len(text[record.offset:record.offset + length].encode('utf-8'))
    return replace(record, offset=offset, length=length)

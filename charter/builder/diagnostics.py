"""
Advisory diagnostics.

Problems that must not stop a build (responses without a description,
examples that contradict their schema) are reported as ``Diagnostic``
records to a pluggable sink instead of being raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from ..faults import Severity
from ..validation import ErrorDetail

logger = logging.getLogger("charter.builder")


MISSING_DESCRIPTION = "MISSING_DESCRIPTION"
EXAMPLE_MISMATCH = "EXAMPLE_MISMATCH"
EXAMPLE_UNCHECKED = "EXAMPLE_UNCHECKED"


@dataclass(frozen=True)
class Diagnostic:
    """
    One advisory finding.

    Attributes:
        code: Stable identifier (MISSING_DESCRIPTION, EXAMPLE_MISMATCH, ...)
        message: Human-readable message
        operation_id: Operation the finding belongs to
        status: Response status, when the finding is about a response
        example: Name of the example, for named examples
        errors: Validation errors behind the finding
        severity: Always advisory (INFO or WARN)
    """
    code: str
    message: str
    operation_id: str
    status: Optional[int] = None
    example: Optional[str] = None
    errors: Tuple[ErrorDetail, ...] = ()
    severity: Severity = Severity.WARN

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "operation_id": self.operation_id,
            "status": self.status,
            "example": self.example,
            "errors": [e.to_dict() for e in self.errors],
            "severity": self.severity.value,
        }


@runtime_checkable
class DiagnosticSink(Protocol):
    """Receives advisory diagnostics as they are produced."""

    def emit(self, diagnostic: Diagnostic) -> None:
        ...


class LoggingSink:
    """Writes diagnostics to a logger (``charter.builder`` by default)."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.logger = log or logger

    def emit(self, diagnostic: Diagnostic) -> None:
        level = logging.INFO if diagnostic.severity == Severity.INFO else logging.WARNING
        self.logger.log(level, "%s", diagnostic.message)


class CollectingSink:
    """Keeps diagnostics in memory, e.g. for CI checks or tests."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def by_code(self, code: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.code == code]

    def clear(self) -> None:
        self.diagnostics.clear()

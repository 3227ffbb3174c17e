"""
Example cross-checking.

Examples attached to responses are validated against the response schema.
Mismatches are diagnostics, never exceptions; the document is built anyway.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from ..contract.metadata import RouteDefinition
from ..faults import Fault, Severity
from ..validation import ErrorDetail, Validator
from .diagnostics import EXAMPLE_MISMATCH, EXAMPLE_UNCHECKED, Diagnostic

logger = logging.getLogger("charter.builder.examples")


def _format_errors(errors: List[ErrorDetail]) -> str:
    return ", ".join(str(error) for error in errors)


class ExampleValidator:
    """Checks response examples with an injected ``Validator``."""

    def __init__(self, validator: Validator, report: Callable[[Diagnostic], None]):
        self.validator = validator
        self.report = report

    def check_route(self, route: RouteDefinition, operation_id: str) -> int:
        """
        Validate every example of ``route``.

        Returns:
            Number of diagnostics reported
        """
        reported = 0
        for status, response in route.responses.items():
            if response.schema is None:
                continue
            if response.has_example:
                label = f"Example for {status} response on {operation_id}"
                if self._check(response.schema, response.example, label, operation_id, status, None):
                    reported += 1
            for name, example in (response.examples or {}).items():
                label = f'Example "{name}" for {status} response on {operation_id}'
                if self._check(response.schema, example.value, label, operation_id, status, name):
                    reported += 1
        return reported

    def _check(
        self,
        schema: Dict[str, Any],
        value: Any,
        label: str,
        operation_id: str,
        status: int,
        name: Any,
    ) -> bool:
        try:
            errors = list(self.validator.validate(schema, value))
        except Fault as fault:
            logger.debug("Validator rejected schema for %s: %s", label, fault)
            self.report(Diagnostic(
                code=EXAMPLE_UNCHECKED,
                message=f"{label} could not be checked: {fault.message}",
                operation_id=operation_id,
                status=status,
                example=name,
                severity=Severity.INFO,
            ))
            return True
        except Exception as exc:
            # Injected validators may fail with arbitrary errors
            logger.warning("Validator failed on %s: %r", label, exc)
            self.report(Diagnostic(
                code=EXAMPLE_UNCHECKED,
                message=f"{label} could not be checked: {type(exc).__name__}: {exc}",
                operation_id=operation_id,
                status=status,
                example=name,
                severity=Severity.INFO,
            ))
            return True

        if not errors:
            return False

        self.report(Diagnostic(
            code=EXAMPLE_MISMATCH,
            message=f"{label} doesn't match schema: {_format_errors(errors)}",
            operation_id=operation_id,
            status=status,
            example=name,
            errors=tuple(errors),
        ))
        return True

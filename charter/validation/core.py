"""
Validation capability contract.

The builder never validates on its own: it is handed an object with a
``validate(schema, value)`` method and reports whatever that returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class ErrorDetail:
    """
    A single structural mismatch between a value and its schema.

    Attributes:
        path: JSON-pointer style location of the offending value ("" for root)
        message: Human-readable explanation
        code: Optional machine-readable keyword that failed (e.g. "type")
    """
    path: str
    message: str
    code: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.path or '/'}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        data = {"path": self.path, "message": self.message}
        if self.code:
            data["code"] = self.code
        return data


@runtime_checkable
class Validator(Protocol):
    """Anything that can check a value against a schema."""

    def validate(self, schema: Dict[str, Any], value: Any) -> List[ErrorDetail]:
        ...

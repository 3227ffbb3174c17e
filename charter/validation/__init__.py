"""
Charter validation - schema checking capability.

- ErrorDetail: one structural mismatch
- Validator: protocol the builder depends on
- SchemaValidator: default implementation
"""

from .core import ErrorDetail, Validator
from .validator import SchemaValidator, DEFAULT_FORMATS

__all__ = [
    "ErrorDetail",
    "Validator",
    "SchemaValidator",
    "DEFAULT_FORMATS",
]

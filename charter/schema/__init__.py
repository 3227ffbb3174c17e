"""
Charter schema layer.

- SchemaRegistry: identity-deduplicated component store
- schema_for: Python types and dataclasses → schema dicts
- to_json_schema / schema_ref: document-ready output
"""

from .registry import SchemaRegistry
from .export import REF_PREFIX, schema_ref, to_json_schema
from .types import TypeSchemaFactory, schema_for

__all__ = [
    "SchemaRegistry",
    "REF_PREFIX",
    "schema_ref",
    "to_json_schema",
    "TypeSchemaFactory",
    "schema_for",
]

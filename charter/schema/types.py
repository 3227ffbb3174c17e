"""
Python type → JSON Schema mapping.

Lets authors describe contracts with dataclasses and annotations instead of
hand-written dicts::

    @dataclass
    class User:
        '''A registered user.'''
        id: str
        name: str
        email: Optional[str] = None

    UserSchema = schema_for(User)
    # {"$id": "User", "type": "object", "properties": {...}, "required": ["id", "name"], ...}

Dataclass schemas are cached per class: the registry deduplicates by
object identity, so one class must always map to one dict.
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
import inspect
import uuid
from types import UnionType
from typing import (
    Annotated,
    Any,
    Dict,
    List,
    Literal,
    Set,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .export import schema_ref


_PYTHON_TYPE_MAP: Dict[type, Dict[str, str]] = {
    str: {"type": "string"},
    int: {"type": "integer"},
    float: {"type": "number", "format": "double"},
    bool: {"type": "boolean"},
    bytes: {"type": "string", "format": "binary"},
    type(None): {"type": "null"},
    datetime.datetime: {"type": "string", "format": "date-time"},
    datetime.date: {"type": "string", "format": "date"},
    uuid.UUID: {"type": "string", "format": "uuid"},
    decimal.Decimal: {"type": "string", "format": "decimal"},
}


def _is_union(origin: Any) -> bool:
    return origin is Union or origin is UnionType


def _class_description(cls: type) -> str:
    # Own docstring only; base classes (Enum) carry their own
    doc = cls.__dict__.get("__doc__")
    if not doc:
        return ""
    doc = inspect.cleandoc(doc)
    # Dataclasses synthesize "Name(field: type, ...)" when undocumented
    if doc.startswith(f"{cls.__name__}(") or doc == "An enumeration.":
        return ""
    return doc


class TypeSchemaFactory:
    """
    Builds schema dicts from Python types, caching class-based schemas.
    """

    def __init__(self):
        self._cache: Dict[type, Dict[str, Any]] = {}
        self._building: Set[type] = set()

    def schema_for(self, tp: Any) -> Dict[str, Any]:
        """Convert a Python type annotation to a JSON Schema fragment."""
        if tp is inspect.Parameter.empty or tp is Any:
            return {}

        if tp in _PYTHON_TYPE_MAP:
            return dict(_PYTHON_TYPE_MAP[tp])

        origin = get_origin(tp)
        args = get_args(tp)

        # Annotated[X, ...] → unwrap
        if origin is Annotated:
            return self.schema_for(args[0])

        # Optional[X] / X | None
        if _is_union(origin):
            non_none = [a for a in args if a is not type(None)]
            nullable = len(non_none) != len(args)
            if len(non_none) == 1:
                return self._nullable(self.schema_for(non_none[0])) if nullable else self.schema_for(non_none[0])
            variants = [self.schema_for(a) for a in non_none]
            if nullable:
                variants.append({"type": "null"})
            return {"anyOf": variants}

        if origin is Literal:
            values = list(args)
            schema: Dict[str, Any] = {"enum": values}
            kinds = {type(v) for v in values}
            if len(kinds) == 1 and next(iter(kinds)) in _PYTHON_TYPE_MAP:
                schema["type"] = _PYTHON_TYPE_MAP[next(iter(kinds))]["type"]
            return schema

        # list[X]
        if origin in (list, List):
            item_schema = self.schema_for(args[0]) if args else {}
            return {"type": "array", "items": item_schema}

        # dict[str, X]
        if origin in (dict, Dict):
            val_schema = self.schema_for(args[1]) if len(args) > 1 else {}
            return {"type": "object", "additionalProperties": val_schema}

        # tuple → array with prefixItems
        if origin in (tuple, Tuple):
            if args and args[-1] is Ellipsis:
                return {"type": "array", "items": self.schema_for(args[0])}
            if args:
                return {
                    "type": "array",
                    "prefixItems": [self.schema_for(a) for a in args],
                    "minItems": len(args),
                    "maxItems": len(args),
                }
            return {"type": "array"}

        # set → array with uniqueItems
        if origin in (set, Set, frozenset):
            item_schema = self.schema_for(args[0]) if args else {}
            return {"type": "array", "items": item_schema, "uniqueItems": True}

        if isinstance(tp, type) and issubclass(tp, enum.Enum):
            return self._cached(tp, self._enum_schema)

        if tp in (list, tuple, set):
            return {"type": "array"}
        if tp is dict:
            return {"type": "object"}

        # Dataclass / class with __annotations__
        if isinstance(tp, type) and hasattr(tp, "__annotations__"):
            if tp in self._building:
                return schema_ref(tp.__name__)
            return self._cached(tp, self._class_schema)

        return {"type": "object"}

    # ── Class-based schemas ──────────────────────────────────────────────

    def _cached(self, cls: type, build) -> Dict[str, Any]:
        cached = self._cache.get(cls)
        if cached is None:
            self._building.add(cls)
            try:
                cached = build(cls)
            finally:
                self._building.discard(cls)
            self._cache[cls] = cached
        return cached

    def _enum_schema(self, cls: type) -> Dict[str, Any]:
        values = [member.value for member in cls]
        schema: Dict[str, Any] = {"$id": cls.__name__, "enum": values}
        kinds = {type(v) for v in values}
        if len(kinds) == 1 and next(iter(kinds)) in _PYTHON_TYPE_MAP:
            schema["type"] = _PYTHON_TYPE_MAP[next(iter(kinds))]["type"]
        description = _class_description(cls)
        if description:
            schema["description"] = description
        return schema

    def _class_schema(self, cls: type) -> Dict[str, Any]:
        """Convert a dataclass or annotated class to a JSON Schema object."""
        properties: Dict[str, Any] = {}
        required: List[str] = []

        hints = get_type_hints(cls, include_extras=True)

        if dataclasses.is_dataclass(cls):
            for f in dataclasses.fields(cls):
                if f.name.startswith("_"):
                    continue
                properties[f.name] = self.schema_for(hints.get(f.name, Any))
                if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                    required.append(f.name)
        else:
            for field_name, field_type in hints.items():
                if field_name.startswith("_"):
                    continue
                properties[field_name] = self.schema_for(field_type)
                if getattr(cls, field_name, inspect.Parameter.empty) is inspect.Parameter.empty:
                    required.append(field_name)

        schema: Dict[str, Any] = {
            "$id": cls.__name__,
            "type": "object",
            "properties": properties,
        }
        if required:
            schema["required"] = required

        description = _class_description(cls)
        if description:
            schema["description"] = description

        return schema

    @staticmethod
    def _nullable(schema: Dict[str, Any]) -> Dict[str, Any]:
        if "$id" in schema or "$ref" in schema:
            # Keep class schemas as shared objects
            return {"anyOf": [schema, {"type": "null"}]}
        kind = schema.get("type")
        if isinstance(kind, str):
            return {**schema, "type": [kind, "null"]}
        return {"anyOf": [schema, {"type": "null"}]}


_default_factory = TypeSchemaFactory()


def schema_for(tp: Any) -> Dict[str, Any]:
    """Convert a Python type to a schema using the shared class cache."""
    return _default_factory.schema_for(tp)

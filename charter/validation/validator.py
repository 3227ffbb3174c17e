"""
Default structural schema validator.

Covers the subset of JSON Schema that route contracts use in practice:
types (including OpenAPI 3.0 ``nullable``), object properties, arrays,
enums and constants, composition keywords, string/number/array bounds and
a handful of common formats. Unknown keywords are ignored.
"""

from __future__ import annotations

import ipaddress
import math
import re
import uuid
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from ..faults import SchemaTypeFault, SchemaValidationFault
from .core import ErrorDetail


_TYPE_NAMES = ("null", "boolean", "integer", "number", "string", "array", "object")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_URI_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:[^\s]*$")


def _is_datetime(value: str) -> bool:
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return "T" in value or " " in value


def _is_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def _is_ipv4(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def _is_ipv6(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


DEFAULT_FORMATS: Dict[str, Callable[[str], bool]] = {
    "email": lambda v: bool(_EMAIL_RE.match(v)),
    "uri": lambda v: bool(_URI_RE.match(v)),
    "uuid": _is_uuid,
    "date-time": _is_datetime,
    "date": _is_date,
    "ipv4": _is_ipv4,
    "ipv6": _is_ipv6,
}


def _json_type(value: Any) -> str:
    """Name the JSON type of a Python value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _matches_type(value: Any, expected: str) -> bool:
    actual = _json_type(value)
    if expected == "number":
        return actual in ("integer", "number")
    if expected == "integer" and actual == "number":
        return float(value).is_integer()
    return actual == expected


def _child(path: str, key: Any) -> str:
    token = str(key).replace("~", "~0").replace("/", "~1")
    return f"{path}/{token}"


class SchemaValidator:
    """
    Validate values against JSON-Schema-like dicts.

    Collects every error rather than stopping at the first one, so the
    builder can report all mismatches of an example in one diagnostic.

    Usage::

        validator = SchemaValidator()
        errors = validator.validate(
            {"type": "object", "properties": {"id": {"type": "string"}}},
            {"id": 123},
        )
        # [ErrorDetail(path="/id", message="Expected string, got integer", code="type")]
    """

    def __init__(self, formats: Optional[Dict[str, Callable[[str], bool]]] = None):
        self.formats: Dict[str, Callable[[str], bool]] = dict(DEFAULT_FORMATS)
        if formats:
            self.formats.update(formats)

    def validate(self, schema: Dict[str, Any], value: Any) -> List[ErrorDetail]:
        """Return all structural errors of ``value`` against ``schema``."""
        if not isinstance(schema, dict):
            raise SchemaTypeFault(schema, "schemas must be mappings")
        errors: List[ErrorDetail] = []
        self._check(schema, value, "", errors)
        return errors

    def validate_or_raise(self, schema: Dict[str, Any], value: Any) -> None:
        """Validate and raise ``SchemaValidationFault`` on any error."""
        errors = self.validate(schema, value)
        if errors:
            name = schema.get("$id") or schema.get("title") or "value"
            raise SchemaValidationFault(name, errors)

    def is_valid(self, schema: Dict[str, Any], value: Any) -> bool:
        return not self.validate(schema, value)

    # ── Keyword checks ──────────────────────────────────────────────────

    def _check(self, schema: Any, value: Any, path: str, errors: List[ErrorDetail]) -> None:
        if schema is False:
            errors.append(ErrorDetail(path, "No value is allowed here", "false"))
            return
        if not isinstance(schema, dict):
            return

        if value is None and schema.get("nullable") is True:
            return

        if "type" in schema and not self._check_type(schema["type"], value, path, errors):
            # Remaining keywords are meaningless for the wrong type
            return

        if "const" in schema and value != schema["const"]:
            errors.append(ErrorDetail(path, f"Expected constant {schema['const']!r}", "const"))

        if "enum" in schema and value not in schema["enum"]:
            allowed = ", ".join(repr(v) for v in schema["enum"])
            errors.append(ErrorDetail(path, f"Expected one of: {allowed}", "enum"))

        self._check_composition(schema, value, path, errors)

        if isinstance(value, str):
            self._check_string(schema, value, path, errors)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            self._check_number(schema, value, path, errors)
        elif isinstance(value, (list, tuple)):
            self._check_array(schema, value, path, errors)
        elif isinstance(value, dict):
            self._check_object(schema, value, path, errors)

    def _check_type(self, expected: Any, value: Any, path: str, errors: List[ErrorDetail]) -> bool:
        expected_types = expected if isinstance(expected, list) else [expected]
        for name in expected_types:
            if name not in _TYPE_NAMES:
                raise SchemaTypeFault(expected, f"unknown type '{name}'")
        if any(_matches_type(value, name) for name in expected_types):
            return True
        wanted = " or ".join(expected_types)
        errors.append(ErrorDetail(path, f"Expected {wanted}, got {_json_type(value)}", "type"))
        return False

    def _check_composition(self, schema: dict, value: Any, path: str, errors: List[ErrorDetail]) -> None:
        for sub in schema.get("allOf", []):
            self._check(sub, value, path, errors)

        if "anyOf" in schema:
            if not any(not self.validate(sub, value) for sub in schema["anyOf"]):
                errors.append(ErrorDetail(path, "Value does not match any allowed schema", "anyOf"))

        if "oneOf" in schema:
            matches = sum(1 for sub in schema["oneOf"] if not self.validate(sub, value))
            if matches != 1:
                errors.append(
                    ErrorDetail(path, f"Value must match exactly one schema, matched {matches}", "oneOf")
                )

        if "not" in schema and isinstance(schema["not"], dict) and not self.validate(schema["not"], value):
            errors.append(ErrorDetail(path, "Value matches a forbidden schema", "not"))

    def _check_string(self, schema: dict, value: str, path: str, errors: List[ErrorDetail]) -> None:
        if "minLength" in schema and len(value) < schema["minLength"]:
            errors.append(ErrorDetail(path, f"Expected at least {schema['minLength']} characters", "minLength"))
        if "maxLength" in schema and len(value) > schema["maxLength"]:
            errors.append(ErrorDetail(path, f"Expected at most {schema['maxLength']} characters", "maxLength"))
        if "pattern" in schema and not self._pattern(schema["pattern"]).search(value):
            errors.append(ErrorDetail(path, f"Expected to match pattern {schema['pattern']!r}", "pattern"))
        fmt = schema.get("format")
        if fmt in self.formats and not self.formats[fmt](value):
            errors.append(ErrorDetail(path, f"Expected {fmt} format", "format"))

    @staticmethod
    def _pattern(pattern: Any) -> "re.Pattern[str]":
        try:
            return re.compile(pattern)
        except (re.error, TypeError) as exc:
            raise SchemaTypeFault(pattern, f"invalid pattern: {exc}") from exc

    def _check_number(self, schema: dict, value: float, path: str, errors: List[ErrorDetail]) -> None:
        if "minimum" in schema and value < schema["minimum"]:
            errors.append(ErrorDetail(path, f"Expected >= {schema['minimum']}", "minimum"))
        if "maximum" in schema and value > schema["maximum"]:
            errors.append(ErrorDetail(path, f"Expected <= {schema['maximum']}", "maximum"))

        # 3.1 numeric form; the 3.0 boolean form modifies minimum/maximum
        exclusive_min = schema.get("exclusiveMinimum")
        if exclusive_min is True and "minimum" in schema:
            exclusive_min = schema["minimum"]
        if not isinstance(exclusive_min, bool) and exclusive_min is not None and value <= exclusive_min:
            errors.append(ErrorDetail(path, f"Expected > {exclusive_min}", "exclusiveMinimum"))

        exclusive_max = schema.get("exclusiveMaximum")
        if exclusive_max is True and "maximum" in schema:
            exclusive_max = schema["maximum"]
        if not isinstance(exclusive_max, bool) and exclusive_max is not None and value >= exclusive_max:
            errors.append(ErrorDetail(path, f"Expected < {exclusive_max}", "exclusiveMaximum"))

        multiple = schema.get("multipleOf")
        if multiple:
            quotient = value / multiple
            if not math.isclose(quotient, round(quotient), abs_tol=1e-9):
                errors.append(ErrorDetail(path, f"Expected a multiple of {multiple}", "multipleOf"))

    def _check_array(self, schema: dict, value: list, path: str, errors: List[ErrorDetail]) -> None:
        if "minItems" in schema and len(value) < schema["minItems"]:
            errors.append(ErrorDetail(path, f"Expected at least {schema['minItems']} items", "minItems"))
        if "maxItems" in schema and len(value) > schema["maxItems"]:
            errors.append(ErrorDetail(path, f"Expected at most {schema['maxItems']} items", "maxItems"))

        if schema.get("uniqueItems"):
            seen: List[Any] = []
            for item in value:
                if item in seen:
                    errors.append(ErrorDetail(path, "Expected unique items", "uniqueItems"))
                    break
                seen.append(item)

        prefix = schema.get("prefixItems") or []
        for index, sub in enumerate(prefix[: len(value)]):
            self._check(sub, value[index], _child(path, index), errors)

        items = schema.get("items")
        if isinstance(items, dict):
            for index in range(len(prefix), len(value)):
                self._check(items, value[index], _child(path, index), errors)

    def _check_object(self, schema: dict, value: dict, path: str, errors: List[ErrorDetail]) -> None:
        properties = schema.get("properties") or {}

        for name in schema.get("required", []):
            if name not in value:
                errors.append(ErrorDetail(_child(path, name), "Required property is missing", "required"))

        for name, item in value.items():
            if name in properties:
                self._check(properties[name], item, _child(path, name), errors)
                continue
            extra = schema.get("additionalProperties", True)
            if extra is False:
                errors.append(ErrorDetail(_child(path, name), "Unexpected property", "additionalProperties"))
            elif isinstance(extra, dict):
                self._check(extra, item, _child(path, name), errors)

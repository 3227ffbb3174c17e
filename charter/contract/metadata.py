"""
Contract Metadata

Immutable descriptions of routes, responses and controllers. These are the
only inputs the document builder reads; it never mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from ..faults import RouteDefinitionFault


HTTP_METHODS = ("get", "post", "put", "patch", "delete")


class AuthLevel(str, Enum):
    """Authentication requirement of a route."""
    REQUIRED = "required"
    OPTIONAL = "optional"
    NONE = "none"


class _Unset:
    """Marker for "no example given" (``None`` is a valid example)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class ResponseHeader:
    """A header returned with a response."""
    schema: Dict[str, Any]
    description: Optional[str] = None
    required: bool = False


@dataclass(frozen=True)
class RequestHeader:
    """A custom request header accepted by a route."""
    name: str
    schema: Dict[str, Any] = field(default_factory=lambda: {"type": "string"})
    description: Optional[str] = None
    required: bool = False


@dataclass(frozen=True)
class ResponseExample:
    """A named example value for a response."""
    value: Any
    summary: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"value": self.value}
        if self.summary is not None:
            data["summary"] = self.summary
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class ResponseDefinition:
    """
    Contract of one response status.

    Attributes:
        schema: Body schema, or None for responses without a body
        description: Human-readable description
        headers: Response headers by name
        example: Single example value (UNSET when absent)
        examples: Named examples
    """
    schema: Optional[Dict[str, Any]]
    description: Optional[str] = None
    headers: Optional[Mapping[str, ResponseHeader]] = None
    example: Any = UNSET
    examples: Optional[Mapping[str, ResponseExample]] = None

    @property
    def has_example(self) -> bool:
        return self.example is not UNSET


@dataclass(frozen=True)
class RouteConfig:
    """
    Documentation and validation settings of a route.

    Attributes:
        summary: Short summary for the operation
        description: Detailed description
        operation_id: Explicit operationId (defaults to the route's name)
        deprecated: Mark the operation as deprecated
        auth: Authentication requirement
        body: Request body schema
        query: Query parameters (object schema)
        params: Path parameters (object schema)
        headers: Custom request headers
        multipart: Publish the body as multipart/form-data
    """
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = None
    deprecated: bool = False
    auth: AuthLevel = AuthLevel.NONE
    body: Optional[Dict[str, Any]] = None
    query: Optional[Dict[str, Any]] = None
    params: Optional[Dict[str, Any]] = None
    headers: Tuple[RequestHeader, ...] = ()
    multipart: bool = False

    def __post_init__(self):
        try:
            object.__setattr__(self, "auth", AuthLevel(self.auth))
        except ValueError:
            allowed = ", ".join(level.value for level in AuthLevel)
            raise RouteDefinitionFault(
                str(self.operation_id or "<route>"),
                f"auth must be one of {allowed}, got {self.auth!r}",
            ) from None
        object.__setattr__(self, "headers", tuple(self.headers))


@dataclass(frozen=True)
class RouteDefinition:
    """
    One HTTP method + path + validation + response contract.

    The method is stored lowercase. Construction fails with
    ``RouteDefinitionFault`` for unsupported methods, paths not starting
    with ``/`` and invalid status codes.
    """
    method: str
    path: str
    config: RouteConfig = field(default_factory=RouteConfig)
    responses: Mapping[int, ResponseDefinition] = field(default_factory=dict)
    handler: Optional[Callable[..., Any]] = None

    def __post_init__(self):
        label = f"{self.method} {self.path}"
        if not isinstance(self.method, str) or self.method.lower() not in HTTP_METHODS:
            raise RouteDefinitionFault(
                label, f"method must be one of {', '.join(m.upper() for m in HTTP_METHODS)}"
            )
        if not isinstance(self.path, str) or not self.path.startswith("/"):
            raise RouteDefinitionFault(label, "path must start with '/'")

        responses: Dict[int, ResponseDefinition] = {}
        for status, response in self.responses.items():
            try:
                code = int(status)
            except (TypeError, ValueError):
                raise RouteDefinitionFault(label, f"status {status!r} is not an HTTP status code") from None
            if not 100 <= code <= 599:
                raise RouteDefinitionFault(label, f"status {code} is outside 100-599")
            if not isinstance(response, ResponseDefinition):
                raise RouteDefinitionFault(label, f"response for {code} is not a ResponseDefinition")
            responses[code] = response

        object.__setattr__(self, "method", self.method.lower())
        object.__setattr__(self, "responses", MappingProxyType(responses))

    def __str__(self) -> str:
        return f"{self.method.upper()} {self.path}"


@dataclass(frozen=True)
class ControllerDefinition:
    """
    A named group of routes sharing a tag and an optional path prefix.

    Route order is the insertion order of ``routes``; the builder processes
    routes in exactly that order.
    """
    tag: str
    routes: Mapping[str, RouteDefinition] = field(default_factory=dict)
    description: Optional[str] = None
    prefix: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.tag, str) or not self.tag:
            raise RouteDefinitionFault(repr(self.tag), "controller tag must be a non-empty string")
        for name, route in self.routes.items():
            if not isinstance(route, RouteDefinition):
                raise RouteDefinitionFault(
                    f"{self.tag}.{name}", f"expected RouteDefinition, got {type(route).__name__}"
                )
        if self.prefix and not self.prefix.startswith("/"):
            raise RouteDefinitionFault(self.prefix, "controller prefix must start with '/'")
        object.__setattr__(self, "routes", MappingProxyType(dict(self.routes)))

    def iter_routes(self) -> Iterator[Tuple[str, RouteDefinition, str]]:
        """Yield ``(name, route, full_path)`` with the prefix applied."""
        prefix = self.prefix or ""
        for name, route in self.routes.items():
            yield name, route, prefix + route.path

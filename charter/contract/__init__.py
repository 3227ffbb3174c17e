"""
Charter contract authoring.

Routes are declared as ``"METHOD /path"`` strings with schemas for the
body, query, path parameters and every response status, then grouped into
controllers that share a tag and a path prefix.
"""

from .metadata import (
    HTTP_METHODS,
    AuthLevel,
    UNSET,
    ResponseHeader,
    RequestHeader,
    ResponseExample,
    ResponseDefinition,
    RouteConfig,
    RouteDefinition,
    ControllerDefinition,
)
from .routes import (
    parse_route_string,
    coerce_schema,
    normalize_response,
    normalize_responses,
    define_route,
    route,
    define_controller,
    controller,
)

__all__ = [
    # Metadata
    "HTTP_METHODS",
    "AuthLevel",
    "UNSET",
    "ResponseHeader",
    "RequestHeader",
    "ResponseExample",
    "ResponseDefinition",
    "RouteConfig",
    "RouteDefinition",
    "ControllerDefinition",

    # Builders
    "parse_route_string",
    "coerce_schema",
    "normalize_response",
    "normalize_responses",
    "define_route",
    "route",
    "define_controller",
    "controller",
]

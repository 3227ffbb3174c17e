"""
Route and Controller Builders

Function and decorator APIs that turn author input into the immutable
definitions of ``contract.metadata``.

Example:
    from charter import define_route, define_controller

    get_user = define_route(
        "GET /users/:id",
        summary="Fetch a user",
        responses={200: {"schema": User, "description": "The user"}, 404: None},
    )

    users = define_controller("Users", {"get_user": get_user}, prefix="/api")

Or, class-based::

    @controller("Users", prefix="/api")
    class Users:
        @route("GET /users/:id", responses={200: User, 404: None})
        def get_user(ctx):
            ...
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from ..faults import RouteDefinitionFault
from ..schema.types import schema_for
from .metadata import (
    HTTP_METHODS,
    AuthLevel,
    ControllerDefinition,
    RequestHeader,
    ResponseDefinition,
    ResponseExample,
    ResponseHeader,
    RouteConfig,
    RouteDefinition,
    UNSET,
)


_RESPONSE_KEYS = {"schema", "description", "headers", "example", "examples"}


def parse_route_string(route: str) -> Tuple[str, str]:
    """
    Split ``"METHOD /path"`` into ``(method, path)``.

    The method is returned lowercase.

    Raises:
        RouteDefinitionFault: if the string is not a supported method
            followed by a single space and a path starting with ``/``
    """
    if not isinstance(route, str):
        raise RouteDefinitionFault(repr(route), "route must be a string like 'GET /users'")
    method, sep, path = route.strip().partition(" ")
    if not sep:
        raise RouteDefinitionFault(route, "expected 'METHOD /path'")
    if method.lower() not in HTTP_METHODS:
        raise RouteDefinitionFault(
            route, f"method must be one of {', '.join(m.upper() for m in HTTP_METHODS)}"
        )
    path = path.strip()
    if not path.startswith("/") or " " in path:
        raise RouteDefinitionFault(route, "path must start with '/' and contain no spaces")
    return method.lower(), path


def coerce_schema(value: Any, where: str) -> Dict[str, Any]:
    """Accept a schema dict as-is, or convert a Python type to one."""
    if isinstance(value, dict):
        return value
    if isinstance(value, type) or getattr(value, "__origin__", None) is not None:
        return schema_for(value)
    raise RouteDefinitionFault(where, f"expected a schema dict or a type, got {type(value).__name__}")


def _coerce_header(name: str, value: Any, where: str) -> ResponseHeader:
    if isinstance(value, ResponseHeader):
        return value
    if isinstance(value, Mapping) and "schema" in value:
        return ResponseHeader(
            schema=coerce_schema(value["schema"], where),
            description=value.get("description"),
            required=bool(value.get("required", False)),
        )
    raise RouteDefinitionFault(where, f"header '{name}' must be a ResponseHeader or a dict with 'schema'")


def _coerce_example(name: str, value: Any, where: str) -> ResponseExample:
    if isinstance(value, ResponseExample):
        return value
    if isinstance(value, Mapping) and "value" in value:
        return ResponseExample(
            value=value["value"],
            summary=value.get("summary"),
            description=value.get("description"),
        )
    raise RouteDefinitionFault(where, f"example '{name}' must be a ResponseExample or a dict with 'value'")


def normalize_response(value: Any, where: str) -> ResponseDefinition:
    """
    Normalize one response entry.

    - ``None`` → response without a body
    - ``ResponseDefinition`` → unchanged
    - dict with a ``"schema"`` key → response definition
    - any other dict or a Python type → body schema
    """
    if value is None:
        return ResponseDefinition(schema=None)
    if isinstance(value, ResponseDefinition):
        return value
    if isinstance(value, dict) and "schema" in value:
        unknown = set(value) - _RESPONSE_KEYS
        if unknown:
            raise RouteDefinitionFault(where, f"unknown response keys: {', '.join(sorted(unknown))}")
        schema = value["schema"]
        headers = value.get("headers")
        examples = value.get("examples")
        return ResponseDefinition(
            schema=None if schema is None else coerce_schema(schema, where),
            description=value.get("description"),
            headers=(
                {n: _coerce_header(n, h, where) for n, h in headers.items()}
                if headers else None
            ),
            example=value.get("example", UNSET),
            examples=(
                {n: _coerce_example(n, e, where) for n, e in examples.items()}
                if examples else None
            ),
        )
    return ResponseDefinition(schema=coerce_schema(value, where))


def normalize_responses(responses: Mapping[Any, Any], where: str = "") -> Dict[int, ResponseDefinition]:
    """Normalize a status → response mapping."""
    normalized: Dict[int, ResponseDefinition] = {}
    for status, value in responses.items():
        try:
            code = int(status)
        except (TypeError, ValueError):
            raise RouteDefinitionFault(where, f"status {status!r} is not an HTTP status code") from None
        normalized[code] = normalize_response(value, f"{where} [{code}]")
    return normalized


def _coerce_request_headers(headers: Optional[Iterable[Any]], where: str) -> Tuple[RequestHeader, ...]:
    result = []
    for header in headers or ():
        if isinstance(header, RequestHeader):
            result.append(header)
        elif isinstance(header, Mapping) and "name" in header:
            result.append(RequestHeader(
                name=header["name"],
                schema=coerce_schema(header.get("schema", {"type": "string"}), where),
                description=header.get("description"),
                required=bool(header.get("required", False)),
            ))
        else:
            raise RouteDefinitionFault(where, "request headers must be RequestHeader or dicts with 'name'")
    return tuple(result)


def define_route(
    route: str,
    *,
    responses: Mapping[Any, Any],
    summary: Optional[str] = None,
    description: Optional[str] = None,
    operation_id: Optional[str] = None,
    deprecated: bool = False,
    auth: Union[AuthLevel, str] = AuthLevel.NONE,
    body: Any = None,
    query: Any = None,
    params: Any = None,
    headers: Optional[Iterable[Any]] = None,
    multipart: bool = False,
    handler: Optional[Callable[..., Any]] = None,
) -> RouteDefinition:
    """
    Define a route from a ``"METHOD /path"`` string.

    Schemas may be given as dicts or Python types (dataclasses, ``list[X]``,
    ...). Without a handler the definition is a pure contract.

    Raises:
        RouteDefinitionFault: for unparseable route strings or malformed
            response entries
    """
    method, path = parse_route_string(route)
    config = RouteConfig(
        summary=summary,
        description=description,
        operation_id=operation_id,
        deprecated=deprecated,
        auth=auth,
        body=None if body is None else coerce_schema(body, f"{route} body"),
        query=None if query is None else coerce_schema(query, f"{route} query"),
        params=None if params is None else coerce_schema(params, f"{route} params"),
        headers=_coerce_request_headers(headers, f"{route} headers"),
        multipart=multipart,
    )
    return RouteDefinition(
        method=method,
        path=path,
        config=config,
        responses=normalize_responses(responses, route),
        handler=handler,
    )


def route(route_string: str, **options: Any) -> Callable[[Callable[..., Any]], RouteDefinition]:
    """
    Decorator form of ``define_route``.

    The decorated function becomes the route's handler and its docstring
    the fallback summary/description.
    """
    def decorator(func: Callable[..., Any]) -> RouteDefinition:
        doc = inspect.getdoc(func) or ""
        if doc:
            first, _, rest = doc.partition("\n")
            options.setdefault("summary", first.strip())
            if rest.strip():
                options.setdefault("description", rest.strip())
        return define_route(route_string, handler=func, **options)

    return decorator


def define_controller(
    tag: str,
    routes: Mapping[str, RouteDefinition],
    *,
    description: Optional[str] = None,
    prefix: Optional[str] = None,
) -> ControllerDefinition:
    """Group routes under a tag. Route names become default operationIds."""
    return ControllerDefinition(tag=tag, routes=routes, description=description, prefix=prefix)


def controller(
    tag: Optional[str] = None,
    *,
    description: Optional[str] = None,
    prefix: Optional[str] = None,
) -> Callable[[type], ControllerDefinition]:
    """
    Class decorator collecting ``@route`` attributes into a controller.

    The tag defaults to the class name without a ``Controller`` suffix and
    the description to the first line of the class docstring.
    """
    def decorator(cls: type) -> ControllerDefinition:
        routes = {
            name: value
            for name, value in vars(cls).items()
            if isinstance(value, RouteDefinition)
        }
        doc = inspect.getdoc(cls) or ""
        return ControllerDefinition(
            tag=tag or cls.__name__.replace("Controller", ""),
            routes=routes,
            description=description or (doc.split("\n")[0] if doc else None),
            prefix=prefix,
        )

    return decorator

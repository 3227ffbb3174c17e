"""
Path template translation.

Routes are authored with ``:name`` tokens (``/users/:id``); the document
uses ``{name}`` templates (``/users/{id}``).
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from ..faults import RouteDefinitionFault
from ..schema.export import to_json_schema

_PARAM_TOKEN = re.compile(r":(\w+)")


def extract_param_names(path: str) -> List[str]:
    """
    Extract parameter names in left-to-right order.

    Example:
        extract_param_names("/users/:userId/posts/:postId") -> ["userId", "postId"]
    """
    return _PARAM_TOKEN.findall(path)


def translate_path(path: str) -> str:
    """
    Convert a route path to a document path template.

    Example:
        /a/:x/b/:y -> /a/{x}/b/{y}
    """
    return _PARAM_TOKEN.sub(r"{\1}", path)


def path_parameters(path: str, params_schema: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Build the path parameter objects of a route.

    A property of ``params_schema`` with the token's name supplies the
    schema and description; otherwise the parameter is a plain string.
    Path parameters are always required, whatever the schema says.
    """
    properties: Mapping[str, Any] = {}
    if params_schema:
        properties = params_schema.get("properties") or {}

    parameters = []
    for name in extract_param_names(path):
        param: Dict[str, Any] = {"name": name, "in": "path", "required": True}
        prop = properties.get(name)
        if isinstance(prop, dict):
            if isinstance(prop.get("description"), str):
                param["description"] = prop["description"]
            param["schema"] = to_json_schema(prop)
        else:
            param["schema"] = {"type": "string"}
        parameters.append(param)
    return parameters


def substitute_path(path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Fill ``:name`` tokens with URL-encoded values.

    Raises:
        RouteDefinitionFault: if a token has no value
    """
    params = params or {}

    def replace(match: re.Match) -> str:
        key = match.group(1)
        if key not in params or params[key] is None:
            raise RouteDefinitionFault(path, f"missing path parameter '{key}'")
        return quote(str(params[key]), safe="")

    return _PARAM_TOKEN.sub(replace, path)

"""
Operation assembly for a single route.

Builds parameters, request body, responses and security of one operation.
Every schema that ends up behind a ``$ref`` goes through the registry.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List

from ..config import BuilderOptions
from ..contract.metadata import AuthLevel, ResponseDefinition, RouteDefinition
from ..faults import DocumentBuildFault
from ..schema.export import schema_ref, to_json_schema
from ..schema.registry import SchemaRegistry
from .diagnostics import MISSING_DESCRIPTION, Diagnostic
from .paths import path_parameters


JSON_MEDIA_TYPE = "application/json"
MULTIPART_MEDIA_TYPE = "multipart/form-data"

STATUS_DESCRIPTIONS: Dict[int, str] = {
    200: "Successful response",
    201: "Resource created",
    204: "No content",
    400: "Bad request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not found",
    422: "Validation error",
    500: "Internal server error",
}

# Inline on purpose: it never becomes a component
UNAUTHORIZED_RESPONSE: Dict[str, Any] = {
    "description": "Unauthorized - authentication required",
    "content": {
        JSON_MEDIA_TYPE: {
            "schema": {
                "type": "object",
                "properties": {
                    "message": {"type": "string", "description": "Error message"},
                },
                "required": ["message"],
            },
        },
    },
}


def default_description(status: int) -> str:
    return STATUS_DESCRIPTIONS.get(int(status), "Response")


class ResponseAssembler:
    """
    Turns one ``RouteDefinition`` into an operation object.

    Args:
        registry: Shared component registry
        options: Builder options (security scheme, warning switches)
        report: Callback receiving advisory diagnostics
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        options: BuilderOptions,
        report: Callable[[Diagnostic], None],
    ):
        self.registry = registry
        self.options = options
        self.report = report

    def assemble(
        self,
        route: RouteDefinition,
        full_path: str,
        tag: str,
        operation_id: str,
    ) -> Dict[str, Any]:
        """Build the operation object for ``route`` mounted at ``full_path``."""
        config = route.config

        operation: Dict[str, Any] = {"operationId": operation_id}
        if config.summary:
            operation["summary"] = config.summary
        if config.description:
            operation["description"] = config.description
        operation["tags"] = [tag]
        if config.deprecated:
            operation["deprecated"] = True

        operation["security"] = self.build_security(config.auth)

        parameters = self.build_parameters(route, full_path)
        if parameters:
            operation["parameters"] = parameters

        if config.body is not None:
            operation["requestBody"] = self.build_request_body(route)

        operation["responses"] = self.build_responses(route, operation_id)
        return operation

    # ── Parameters ───────────────────────────────────────────────────────

    def build_parameters(self, route: RouteDefinition, full_path: str) -> List[Dict[str, Any]]:
        config = route.config
        parameters = path_parameters(full_path, config.params)

        query = config.query
        if query and isinstance(query.get("properties"), dict):
            required = set(query.get("required") or [])
            for name, prop in query["properties"].items():
                param: Dict[str, Any] = {"name": name, "in": "query", "required": name in required}
                if isinstance(prop, dict) and isinstance(prop.get("description"), str):
                    param["description"] = prop["description"]
                param["schema"] = to_json_schema(prop)
                parameters.append(param)

        for header in config.headers:
            param = {"name": header.name, "in": "header", "required": header.required}
            if header.description:
                param["description"] = header.description
            param["schema"] = to_json_schema(header.schema)
            parameters.append(param)

        return parameters

    # ── Request body ─────────────────────────────────────────────────────

    def build_request_body(self, route: RouteDefinition) -> Dict[str, Any]:
        body = route.config.body
        name = self.registry.register(body)
        media_type = MULTIPART_MEDIA_TYPE if route.config.multipart else JSON_MEDIA_TYPE

        request_body: Dict[str, Any] = {"required": True}
        if isinstance(body.get("description"), str) and body["description"]:
            request_body["description"] = body["description"]
        request_body["content"] = {media_type: {"schema": schema_ref(name)}}
        return request_body

    # ── Responses ────────────────────────────────────────────────────────

    def build_responses(self, route: RouteDefinition, operation_id: str) -> Dict[str, Any]:
        responses: Dict[str, Any] = {}
        for status, response in route.responses.items():
            responses[str(status)] = self.build_response(status, response, operation_id)

        if route.config.auth == AuthLevel.REQUIRED and "401" not in responses:
            responses["401"] = copy.deepcopy(UNAUTHORIZED_RESPONSE)

        if not responses:
            raise DocumentBuildFault(
                f"{route} declares no responses", operation_id=operation_id
            )
        return responses

    def build_response(self, status: int, response: ResponseDefinition, operation_id: str) -> Dict[str, Any]:
        if not response.description and not self.options.suppress_description_warnings:
            self.report(Diagnostic(
                code=MISSING_DESCRIPTION,
                message=f"Missing description for {status} response on {operation_id}",
                operation_id=operation_id,
                status=status,
            ))

        result: Dict[str, Any] = {
            "description": response.description or default_description(status),
        }

        if response.schema is not None:
            name = self.registry.register(response.schema)
            media: Dict[str, Any] = {"schema": schema_ref(name)}
            if response.has_example:
                media["example"] = copy.deepcopy(response.example)
            if response.examples:
                media["examples"] = {
                    example_name: copy.deepcopy(example.to_dict())
                    for example_name, example in response.examples.items()
                }
            result["content"] = {JSON_MEDIA_TYPE: media}

        if response.headers:
            headers: Dict[str, Any] = {}
            for header_name, header in response.headers.items():
                entry: Dict[str, Any] = {}
                if header.description:
                    entry["description"] = header.description
                entry["required"] = header.required
                entry["schema"] = to_json_schema(header.schema)
                headers[header_name] = entry
            result["headers"] = headers

        return result

    # ── Security ─────────────────────────────────────────────────────────

    def build_security(self, auth: AuthLevel) -> List[Dict[str, List[str]]]:
        if auth == AuthLevel.REQUIRED:
            return [{self.options.security_scheme.name: []}]
        # Explicitly empty: overrides any document-level requirement
        return []

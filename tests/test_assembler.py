"""
Test: Operation assembly (builder/assembler.py)

- Parameters (path, query, header)
- Request bodies
- Responses, default descriptions and headers
- 401 injection and security requirements
"""

import pytest

from charter.builder import MISSING_DESCRIPTION, STATUS_DESCRIPTIONS, ResponseAssembler, default_description
from charter.config import BuilderOptions
from charter.contract import RouteDefinition, define_route
from charter.faults import DocumentBuildFault
from charter.schema import SchemaRegistry

from .conftest import user_schema


def make_assembler(**option_kwargs):
    reports = []
    assembler = ResponseAssembler(SchemaRegistry(), BuilderOptions(**option_kwargs), reports.append)
    return assembler, reports


def assemble(route_def, path=None, tag="Users", operation_id="op", **option_kwargs):
    assembler, reports = make_assembler(**option_kwargs)
    operation = assembler.assemble(route_def, path or route_def.path, tag, operation_id)
    return operation, assembler, reports


# ============================================================================
# Operation shape
# ============================================================================

class TestOperationShape:

    def test_key_order(self):
        route_def = define_route(
            "POST /users/:id",
            summary="S",
            description="D",
            deprecated=True,
            body=user_schema(),
            responses={200: {"schema": None, "description": "ok"}},
        )
        operation, _, _ = assemble(route_def, operation_id="createUser")
        assert list(operation) == [
            "operationId", "summary", "description", "tags", "deprecated",
            "security", "parameters", "requestBody", "responses",
        ]
        assert operation["operationId"] == "createUser"
        assert operation["tags"] == ["Users"]
        assert operation["deprecated"] is True

    def test_minimal_operation(self):
        route_def = define_route("GET /health", responses={200: {"schema": None, "description": "ok"}})
        operation, _, _ = assemble(route_def)
        assert list(operation) == ["operationId", "tags", "security", "responses"]

    def test_no_responses_is_fatal(self):
        route_def = RouteDefinition("get", "/health")
        assembler, _ = make_assembler()
        with pytest.raises(DocumentBuildFault) as exc_info:
            assembler.assemble(route_def, "/health", "Health", "health")
        assert exc_info.value.metadata["operation_id"] == "health"


# ============================================================================
# Parameters
# ============================================================================

class TestParameters:

    def test_path_then_query_then_headers(self):
        route_def = define_route(
            "GET /users/:id",
            query={
                "type": "object",
                "properties": {
                    "expand": {"type": "boolean", "description": "Expand relations"},
                    "fields": {"type": "string"},
                },
                "required": ["fields"],
            },
            headers=[{"name": "X-Tenant", "description": "Tenant id", "required": True}],
            responses={200: {"schema": None, "description": "ok"}},
        )
        operation, _, _ = assemble(route_def)
        assert operation["parameters"] == [
            {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}},
            {
                "name": "expand",
                "in": "query",
                "required": False,
                "description": "Expand relations",
                "schema": {"type": "boolean", "description": "Expand relations"},
            },
            {"name": "fields", "in": "query", "required": True, "schema": {"type": "string"}},
            {
                "name": "X-Tenant",
                "in": "header",
                "required": True,
                "description": "Tenant id",
                "schema": {"type": "string"},
            },
        ]

    def test_prefix_params_included(self):
        route_def = define_route("GET /posts/:postId", responses={200: {"schema": None, "description": "ok"}})
        operation, _, _ = assemble(route_def, path="/orgs/:orgId/posts/:postId")
        assert [p["name"] for p in operation["parameters"]] == ["orgId", "postId"]

    def test_query_schema_not_registered(self):
        route_def = define_route(
            "GET /users",
            query={"$id": "UserQuery", "type": "object", "properties": {"q": {"type": "string"}}},
            responses={200: {"schema": None, "description": "ok"}},
        )
        _, assembler, _ = assemble(route_def)
        assert len(assembler.registry) == 0


# ============================================================================
# Request body
# ============================================================================

class TestRequestBody:

    def test_body_registered_and_referenced(self):
        body = user_schema()
        body["description"] = "User to create"
        route_def = define_route("POST /users", body=body, responses={201: {"schema": None, "description": "c"}})
        operation, assembler, _ = assemble(route_def)
        assert operation["requestBody"] == {
            "required": True,
            "description": "User to create",
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/User"}}},
        }
        assert assembler.registry.get("User") is body

    def test_body_without_description(self):
        route_def = define_route("POST /users", body=user_schema(), responses={201: None})
        operation, _, _ = assemble(route_def, suppress_description_warnings=True)
        assert "description" not in operation["requestBody"]

    def test_multipart(self):
        route_def = define_route(
            "POST /uploads",
            body={"title": "Upload", "type": "object", "properties": {"file": {"type": "string", "format": "binary"}}},
            multipart=True,
            responses={201: None},
        )
        operation, _, _ = assemble(route_def, suppress_description_warnings=True)
        assert list(operation["requestBody"]["content"]) == ["multipart/form-data"]


# ============================================================================
# Responses
# ============================================================================

class TestResponses:

    def test_default_description_table(self):
        assert STATUS_DESCRIPTIONS == {
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
        assert default_description(418) == "Response"

    def test_missing_description_reported(self):
        route_def = define_route("GET /users", responses={200: user_schema(), 418: None})
        operation, _, reports = assemble(route_def, operation_id="listUsers")
        assert operation["responses"]["200"]["description"] == "Successful response"
        assert operation["responses"]["418"]["description"] == "Response"
        assert [d.code for d in reports] == [MISSING_DESCRIPTION, MISSING_DESCRIPTION]
        assert reports[0].status == 200
        assert reports[0].operation_id == "listUsers"
        assert "200" in reports[0].message and "listUsers" in reports[0].message

    def test_missing_description_suppressed(self):
        route_def = define_route("GET /users", responses={200: user_schema()})
        operation, _, reports = assemble(route_def, suppress_description_warnings=True)
        assert reports == []
        assert operation["responses"]["200"]["description"] == "Successful response"

    def test_null_schema_has_no_content(self):
        route_def = define_route("DELETE /users/:id", responses={204: {"schema": None, "description": "Gone"}})
        operation, _, _ = assemble(route_def)
        assert operation["responses"]["204"] == {"description": "Gone"}

    def test_content_references_component(self):
        route_def = define_route("GET /users/:id", responses={200: {"schema": user_schema(), "description": "ok"}})
        operation, _, _ = assemble(route_def)
        assert operation["responses"]["200"]["content"] == {
            "application/json": {"schema": {"$ref": "#/components/schemas/User"}},
        }

    def test_status_keys_are_strings(self):
        route_def = define_route("GET /x", responses={200: None, 404: None})
        operation, _, _ = assemble(route_def, suppress_description_warnings=True)
        assert list(operation["responses"]) == ["200", "404"]

    def test_examples_copied_verbatim(self):
        example = {"id": "1", "name": "Ada", "extra": [1, 2]}
        route_def = define_route("GET /users/:id", responses={200: {
            "schema": user_schema(),
            "description": "ok",
            "example": example,
            "examples": {"ada": {"value": example, "summary": "Ada"}},
        }})
        operation, _, _ = assemble(route_def)
        media = operation["responses"]["200"]["content"]["application/json"]
        assert media["example"] == example
        assert media["example"] is not example
        assert media["examples"] == {"ada": {"value": example, "summary": "Ada"}}

    def test_none_example_kept(self):
        route_def = define_route("GET /x", responses={200: {
            "schema": {"type": ["string", "null"]}, "description": "ok", "example": None,
        }})
        operation, _, _ = assemble(route_def)
        media = operation["responses"]["200"]["content"]["application/json"]
        assert "example" in media and media["example"] is None

    def test_response_headers(self):
        route_def = define_route("GET /users", responses={200: {
            "schema": None,
            "description": "ok",
            "headers": {
                "X-Total-Count": {"schema": {"type": "integer"}, "description": "Total", "required": True},
                "X-Next": {"schema": {"type": "string"}},
            },
        }})
        operation, _, _ = assemble(route_def)
        assert operation["responses"]["200"]["headers"] == {
            "X-Total-Count": {"description": "Total", "required": True, "schema": {"type": "integer"}},
            "X-Next": {"required": False, "schema": {"type": "string"}},
        }

    def test_same_schema_shared_across_statuses(self):
        error = {"$id": "Error", "type": "object"}
        route_def = define_route("GET /x", responses={
            400: {"schema": error, "description": "bad"},
            500: {"schema": error, "description": "boom"},
        })
        _, assembler, _ = assemble(route_def)
        assert list(assembler.registry.entries()) == ["Error"]


# ============================================================================
# Auth
# ============================================================================

class TestAuth:

    def test_required_injects_401(self):
        route_def = define_route("GET /me", auth="required", responses={200: {"schema": None, "description": "ok"}})
        operation, assembler, _ = assemble(route_def)
        assert list(operation["responses"]) == ["200", "401"]
        unauthorized = operation["responses"]["401"]
        assert unauthorized["description"] == "Unauthorized - authentication required"
        schema = unauthorized["content"]["application/json"]["schema"]
        assert schema["type"] == "object"
        assert schema["required"] == ["message"]
        assert len(assembler.registry) == 0

    def test_declared_401_untouched(self):
        error = {"$id": "AuthError", "type": "object"}
        route_def = define_route("GET /me", auth="required", responses={
            200: {"schema": None, "description": "ok"},
            401: {"schema": error, "description": "Token expired"},
        })
        operation, _, _ = assemble(route_def)
        assert operation["responses"]["401"] == {
            "description": "Token expired",
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/AuthError"}}},
        }

    def test_injected_401_satisfies_non_empty(self):
        route_def = define_route("GET /me", auth="required", responses={})
        operation, _, _ = assemble(route_def)
        assert list(operation["responses"]) == ["401"]

    def test_injected_401_is_independent(self):
        route_def = define_route("GET /me", auth="required", responses={200: None})
        first, _, _ = assemble(route_def, suppress_description_warnings=True)
        first["responses"]["401"]["content"]["application/json"]["schema"]["type"] = "string"
        second, _, _ = assemble(route_def, suppress_description_warnings=True)
        assert second["responses"]["401"]["content"]["application/json"]["schema"]["type"] == "object"

    def test_required_security(self):
        route_def = define_route("GET /me", auth="required", responses={200: None})
        operation, _, _ = assemble(route_def, suppress_description_warnings=True)
        assert operation["security"] == [{"BearerAuth": []}]

    def test_custom_scheme_name(self):
        route_def = define_route("GET /me", auth="required", responses={200: None})
        operation, _, _ = assemble(
            route_def, suppress_description_warnings=True, security_scheme={"name": "Token"}
        )
        assert operation["security"] == [{"Token": []}]

    @pytest.mark.parametrize("auth", ["optional", "none"])
    def test_explicit_empty_security(self, auth):
        route_def = define_route("GET /feed", auth=auth, responses={200: None})
        operation, _, _ = assemble(route_def, suppress_description_warnings=True)
        assert operation["security"] == []
        assert "401" not in operation["responses"]

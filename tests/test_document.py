"""
Test: Document builder (builder/document.py)

End-to-end document assembly: controllers, tags, paths, components,
security, diagnostics, idempotent finalize and serialization.
"""

import copy
import json
import logging

import pytest
import yaml

from charter.builder import (
    EXAMPLE_MISMATCH,
    MISSING_DESCRIPTION,
    CollectingSink,
    DocumentBuilder,
    LoggingSink,
    build_document,
)
from charter.config import BuilderOptions
from charter.contract import define_controller, define_route, route, controller
from charter.faults import ControllerTargetFault, DocumentBuildFault
from charter.schema import schema_for

from .conftest import Customer, user_schema


def users_controller(schema=None, **route_kwargs):
    schema = schema or user_schema()
    return define_controller("Users", {
        "getUser": define_route(
            "GET /users/:id",
            responses={200: {"schema": schema, "description": "ok"}, 404: None},
            **route_kwargs,
        ),
    })


# ============================================================================
# End to end
# ============================================================================

class TestEndToEnd:

    def test_users_example(self, builder):
        document = builder.add_controller(users_controller(auth="none")).finalize()

        operation = document["paths"]["/users/{id}"]["get"]
        responses = operation["responses"]
        assert list(responses) == ["200", "404"]
        assert responses["200"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/User",
        }
        assert "content" not in responses["404"]
        assert responses["404"]["description"] == "Not found"

        assert len(operation["parameters"]) == 1
        param = operation["parameters"][0]
        assert {k: param[k] for k in ("name", "in", "required")} == {
            "name": "id", "in": "path", "required": True,
        }
        assert operation["security"] == []
        assert "security" not in document

        assert operation["operationId"] == "getUser"
        assert document["components"]["schemas"] == {
            "User": {
                "type": "object",
                "properties": {"id": {"type": "string"}, "name": {"type": "string"}},
                "required": ["id", "name"],
            },
        }

    def test_document_skeleton(self, builder):
        document = builder.finalize()
        assert list(document) == ["openapi", "info", "servers", "tags", "paths", "components"]
        assert document["openapi"] == "3.1.0"
        assert document["info"] == {"title": "Test API", "description": "", "version": "1.2.3"}
        assert document["servers"] == []
        assert document["tags"] == []
        assert document["paths"] == {}
        assert document["components"] == {
            "schemas": {},
            "securitySchemes": {
                "BearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT",
                    "description": "JWT bearer token authentication",
                },
            },
        }

    def test_spec_version_option(self, sink):
        document = DocumentBuilder(BuilderOptions(spec_version="3.0.3"), sink=sink).finalize()
        assert document["openapi"] == "3.0.3"

    def test_global_security(self, sink):
        document = DocumentBuilder(BuilderOptions(global_security=True), sink=sink).finalize()
        assert document["security"] == [{"BearerAuth": []}]

    def test_prefix_and_operation_id(self, builder):
        users = define_controller("Users", {
            "list": define_route("GET /users", operation_id="listUsers", responses={200: None}),
        }, prefix="/api/v1")
        document = builder.add_controller(users).finalize()
        assert document["paths"]["/api/v1/users"]["get"]["operationId"] == "listUsers"

    def test_multiple_methods_share_path(self, builder):
        users = define_controller("Users", {
            "getUser": define_route("GET /users/:id", responses={200: None}),
            "deleteUser": define_route("DELETE /users/:id", responses={204: None}),
        })
        document = builder.add_controller(users).finalize()
        assert list(document["paths"]["/users/{id}"]) == ["get", "delete"]

    def test_duplicate_route_replaced(self, builder, caplog):
        first = define_controller("A", {"one": define_route("GET /x", responses={200: None})})
        second = define_controller("B", {"two": define_route("GET /x", responses={200: None})})
        with caplog.at_level(logging.WARNING, logger="charter.builder"):
            document = builder.add_controller(first).add_controller(second).finalize()
        assert document["paths"]["/x"]["get"]["operationId"] == "two"
        assert "declared more than once" in caplog.text

    def test_decorated_controller(self, builder):
        @controller(prefix="/shop")
        class CustomersController:
            """Customer accounts."""

            @route("GET /customers/:id", responses={200: {"schema": Customer, "description": "ok"}})
            def get_customer(ctx):
                """Fetch a customer."""

        document = builder.add_controller(CustomersController).finalize()
        operation = document["paths"]["/shop/customers/{id}"]["get"]
        assert operation["summary"] == "Fetch a customer."
        assert operation["tags"] == ["Customers"]
        assert list(document["components"]["schemas"]) == ["Customer", "Address"]
        assert document["tags"] == [{"name": "Customers", "description": "Customer accounts."}]

    def test_rejects_non_controller(self, builder):
        with pytest.raises(ControllerTargetFault):
            builder.add_controller({"tag": "Users"})

    def test_empty_responses_fatal(self, builder):
        broken = define_controller("Broken", {"noop": define_route("GET /noop", responses={})})
        with pytest.raises(DocumentBuildFault):
            builder.add_controller(broken)

    def test_failed_controller_leaves_no_trace(self, builder, sink):
        builder.add_controller(users_controller())
        before = builder.finalize()
        diagnostics = list(builder.diagnostics)

        mixed = define_controller("Mixed", {
            "a": define_route("GET /a", responses={200: {"schema": {"$id": "Thing", "type": "object"}}}),
            "b": define_route("GET /b", responses={}),
        })
        with pytest.raises(DocumentBuildFault):
            builder.add_controller(mixed)

        after = builder.finalize()
        assert after["paths"] == before["paths"]
        assert after["tags"] == before["tags"]
        assert after["components"] == before["components"]
        assert "Thing" not in builder.registry
        assert builder.diagnostics == diagnostics
        assert sink.diagnostics == diagnostics

    def test_build_continues_after_failed_controller(self, builder):
        broken = define_controller("Broken", {
            "first": define_route("GET /first", responses={200: {"schema": {"type": "string"}}}),
            "noop": define_route("GET /noop", responses={}),
        })
        with pytest.raises(DocumentBuildFault):
            builder.add_controller(broken)
        document = builder.add_controller(users_controller()).finalize()
        assert list(document["paths"]) == ["/users/{id}"]
        # The anonymous string schema of "first" is gone
        assert list(document["components"]["schemas"]) == ["User"]

    def test_build_document_helper(self, sink):
        document = build_document([users_controller()], BuilderOptions(title="Helper"), sink=sink)
        assert document["info"]["title"] == "Helper"
        assert "/users/{id}" in document["paths"]


# ============================================================================
# Tags
# ============================================================================

class TestTags:

    def test_sorted_by_name(self, builder):
        builder.add_controller(define_controller("Zebra", {}))
        builder.add_controller(define_controller("Apple", {}))
        assert builder.finalize()["tags"] == [{"name": "Apple"}, {"name": "Zebra"}]

    def test_description_included(self, builder):
        builder.add_controller(define_controller("Users", {}, description="User ops"))
        assert builder.finalize()["tags"] == [{"name": "Users", "description": "User ops"}]

    def test_later_registration_wins(self, builder):
        builder.add_controller(define_controller("Users", {}, description="First"))
        builder.add_controller(define_controller("Users", {}, description="Second"))
        assert builder.finalize()["tags"] == [{"name": "Users", "description": "Second"}]


# ============================================================================
# Components
# ============================================================================

class TestComponents:

    def test_dedup_across_routes(self, builder):
        schema = user_schema()
        users = define_controller("Users", {
            "getUser": define_route("GET /users/:id", responses={200: {"schema": schema, "description": "ok"}}),
            "updateUser": define_route("PUT /users/:id", body=schema, responses={200: {"schema": schema, "description": "ok"}}),
        })
        document = builder.add_controller(users).finalize()
        assert list(document["components"]["schemas"]) == ["User"]

    def test_nested_id_extraction(self, builder):
        address = {"$id": "Address", "type": "object", "properties": {"city": {"type": "string"}}}
        body = {
            "$id": "CreateUser",
            "type": "object",
            "properties": {"name": {"type": "string"}, "address": address},
        }
        users = define_controller("Users", {
            "createUser": define_route("POST /users", body=body, responses={201: {"schema": None, "description": "c"}}),
        })
        schemas = builder.add_controller(users).finalize()["components"]["schemas"]
        assert set(schemas) == {"CreateUser", "Address"}
        assert schemas["Address"] == {"type": "object", "properties": {"city": {"type": "string"}}}
        assert "$id" not in schemas["CreateUser"]["properties"]["address"]

    def test_anonymous_schemas_numbered_in_order(self, builder):
        users = define_controller("Things", {
            "a": define_route("GET /a", responses={200: {"schema": {"type": "string"}, "description": "a"}}),
            "b": define_route("GET /b", responses={200: {"schema": {"type": "integer"}, "description": "b"}}),
        })
        schemas = builder.add_controller(users).finalize()["components"]["schemas"]
        assert schemas == {"Schema1": {"type": "string"}, "Schema2": {"type": "integer"}}

    def test_inputs_not_mutated(self, builder):
        schema = user_schema()
        snapshot = copy.deepcopy(schema)
        builder.add_controller(users_controller(schema)).finalize()
        assert schema == snapshot

    def test_custom_security_scheme(self, sink):
        options = BuilderOptions(security_scheme={
            "name": "ApiKeyAuth", "type": "apiKey", "location": "header", "parameter_name": "X-API-Key",
        })
        builder = DocumentBuilder(options, sink=sink)
        builder.add_controller(users_controller(auth="required"))
        document = builder.finalize()
        assert document["components"]["securitySchemes"]["ApiKeyAuth"]["in"] == "header"
        assert document["paths"]["/users/{id}"]["get"]["security"] == [{"ApiKeyAuth": []}]


# ============================================================================
# Finalize
# ============================================================================

class TestFinalize:

    def test_idempotent(self, builder):
        builder.add_controller(users_controller())
        assert builder.finalize() == builder.finalize()

    def test_returns_independent_copies(self, builder):
        builder.add_controller(users_controller())
        first = builder.finalize()
        first["paths"].clear()
        first["components"]["schemas"]["User"]["type"] = "string"
        second = builder.finalize()
        assert "/users/{id}" in second["paths"]
        assert second["components"]["schemas"]["User"]["type"] == "object"

    def test_accumulates_between_calls(self, builder):
        builder.add_controller(users_controller())
        first = builder.finalize()
        builder.add_controller(define_controller("Health", {
            "health": define_route("GET /health", responses={200: None}),
        }))
        second = builder.finalize()
        assert set(second["paths"]) == {"/users/{id}", "/health"}
        assert set(first["paths"]) == {"/users/{id}"}

    def test_to_json(self, builder):
        builder.add_controller(users_controller())
        assert json.loads(builder.to_json()) == builder.finalize()

    def test_to_yaml(self, builder):
        builder.add_controller(users_controller())
        text = builder.to_yaml()
        assert text.startswith("openapi: 3.1.0")
        assert yaml.safe_load(text) == builder.finalize()


# ============================================================================
# Diagnostics
# ============================================================================

class TestDiagnostics:

    def test_example_mismatch_does_not_block(self, builder, sink):
        route_def = define_route("GET /users/:id", responses={200: {
            "schema": user_schema(), "description": "ok", "example": {"id": 123, "name": "x"},
        }})
        document = builder.add_controller(define_controller("Users", {"getUser": route_def})).finalize()
        assert "/users/{id}" in document["paths"]
        mismatches = sink.by_code(EXAMPLE_MISMATCH)
        assert len(mismatches) == 1
        assert "/id" in mismatches[0].message
        assert builder.diagnostics == sink.diagnostics

    def test_matching_example_no_warnings(self, builder, sink):
        route_def = define_route("GET /users/:id", responses={200: {
            "schema": user_schema(), "description": "ok", "example": {"id": "1", "name": "x"},
        }})
        builder.add_controller(define_controller("Users", {"getUser": route_def})).finalize()
        assert len(sink) == 0

    def test_example_checks_disabled(self, sink):
        builder = DocumentBuilder(BuilderOptions(validate_examples=False), sink=sink)
        route_def = define_route("GET /x", responses={200: {
            "schema": {"type": "string"}, "description": "ok", "example": 1,
        }})
        builder.add_controller(define_controller("X", {"x": route_def}))
        assert sink.by_code(EXAMPLE_MISMATCH) == []

    def test_missing_description_diagnostic(self, builder, sink):
        builder.add_controller(define_controller("X", {"x": define_route("GET /x", responses={200: None})}))
        assert [d.code for d in sink.diagnostics] == [MISSING_DESCRIPTION]

    def test_default_sink_logs(self, caplog):
        builder = DocumentBuilder()
        assert isinstance(builder.sink, LoggingSink)
        with caplog.at_level(logging.WARNING, logger="charter.builder"):
            builder.add_controller(define_controller("X", {"x": define_route("GET /x", responses={200: None})}))
        assert "Missing description for 200 response on x" in caplog.text

    def test_collecting_sink_clear(self):
        sink = CollectingSink()
        builder = DocumentBuilder(sink=sink)
        builder.add_controller(define_controller("X", {"x": define_route("GET /x", responses={200: None})}))
        assert len(sink) == 1
        sink.clear()
        assert len(sink) == 0
        assert len(builder.diagnostics) == 1

    def test_builders_are_independent(self, sink):
        strict = DocumentBuilder(BuilderOptions(suppress_description_warnings=False), sink=sink)
        quiet = DocumentBuilder(BuilderOptions(suppress_description_warnings=True), sink=CollectingSink())
        controller_def = define_controller("X", {"x": define_route("GET /x", responses={200: None})})
        strict.add_controller(controller_def)
        quiet.add_controller(controller_def)
        assert len(strict.diagnostics) == 1
        assert quiet.diagnostics == []

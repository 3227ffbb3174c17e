"""
Document Builder - assembles the API description document.

Walks controllers in the order they are added, delegates each route to the
``ResponseAssembler`` and ``ExampleValidator``, and accumulates paths, tags
and schema components until ``finalize()`` is called.

Usage::

    builder = DocumentBuilder(BuilderOptions(title="Users API"))
    builder.add_controller(users)
    document = builder.finalize()
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config import BuilderOptions
from ..contract.metadata import ControllerDefinition
from ..faults import ControllerTargetFault
from ..schema.export import to_json_schema
from ..schema.registry import SchemaRegistry
from ..validation import SchemaValidator, Validator
from .assembler import ResponseAssembler
from .diagnostics import Diagnostic, DiagnosticSink, LoggingSink
from .examples import ExampleValidator
from .paths import translate_path

logger = logging.getLogger("charter.builder")


class DocumentBuilder:
    """
    Accumulates controllers into one document.

    State (registry, paths, tags, diagnostics) grows with every
    ``add_controller`` call and is never reset; ``finalize()`` always
    reflects everything added so far and can be called repeatedly.

    Args:
        options: Builder options (defaults to ``BuilderOptions()``)
        validator: Validator used for example checks
        sink: Receives advisory diagnostics (defaults to logging them)
    """

    def __init__(
        self,
        options: Optional[BuilderOptions] = None,
        *,
        validator: Optional[Validator] = None,
        sink: Optional[DiagnosticSink] = None,
    ):
        self.options = options or BuilderOptions()
        self.validator = validator or SchemaValidator()
        self.sink = sink or LoggingSink()

        self.registry = SchemaRegistry()
        self.paths: Dict[str, Dict[str, Any]] = {}
        self.tags: Dict[str, Dict[str, str]] = {}
        self.diagnostics: List[Diagnostic] = []

        self._assembler = ResponseAssembler(self.registry, self.options, self._report)
        self._examples = ExampleValidator(self.validator, self._report)

        # Diagnostics of the controller being added; published on commit
        self._pending: List[Diagnostic] = []

    def _report(self, diagnostic: Diagnostic) -> None:
        self._pending.append(diagnostic)

    # ── Accumulation ─────────────────────────────────────────────────────

    def add_controller(self, controller: ControllerDefinition) -> "DocumentBuilder":
        """
        Process every route of ``controller``. Returns ``self`` for chaining.

        All-or-nothing: if any route fails, the builder (paths, tags,
        components, diagnostics) is left as it was before the call.
        """
        if not isinstance(controller, ControllerDefinition):
            raise ControllerTargetFault(
                repr(controller),
                f"expected ControllerDefinition, got {type(controller).__name__}",
            )

        state = self.registry.snapshot()
        self._pending = []
        staged: List[Tuple[str, str, Dict[str, Any]]] = []
        try:
            for name, route, full_path in controller.iter_routes():
                operation_id = route.config.operation_id or name
                operation = self._assembler.assemble(route, full_path, controller.tag, operation_id)
                if self.options.validate_examples:
                    self._examples.check_route(route, operation_id)
                staged.append((translate_path(full_path), route.method, operation))
        except Exception:
            self.registry.restore(state)
            self._pending = []
            raise

        self._commit(controller, staged)
        return self

    def _commit(
        self,
        controller: ControllerDefinition,
        staged: List[Tuple[str, str, Dict[str, Any]]],
    ) -> None:
        tag: Dict[str, str] = {"name": controller.tag}
        if controller.description:
            tag["description"] = controller.description
        # Same tag twice: the later registration wins
        self.tags[controller.tag] = tag

        for template, method, operation in staged:
            operation_id = operation["operationId"]
            methods = self.paths.setdefault(template, {})
            if method in methods:
                logger.warning(
                    "%s %s is declared more than once; '%s' replaces '%s'",
                    method.upper(), template, operation_id,
                    methods[method].get("operationId"),
                )
            methods[method] = operation

        pending, self._pending = self._pending, []
        for diagnostic in pending:
            self.diagnostics.append(diagnostic)
            self.sink.emit(diagnostic)

        logger.debug(
            "Added controller '%s' (%d routes)", controller.tag, len(controller.routes)
        )

    def add_controllers(self, controllers: Iterable[ControllerDefinition]) -> "DocumentBuilder":
        for controller in controllers:
            self.add_controller(controller)
        return self

    # ── Output ───────────────────────────────────────────────────────────

    def finalize(self) -> Dict[str, Any]:
        """
        Produce the document from everything added so far.

        The result is a fresh deep copy; mutating it does not affect the
        builder, and calling ``finalize()`` again yields an equal document.
        """
        options = self.options
        scheme = options.security_scheme

        document: Dict[str, Any] = {
            "openapi": options.spec_version,
            "info": {
                "title": options.title,
                "description": options.description,
                "version": options.version,
            },
            "servers": options.servers,
            "tags": sorted(self.tags.values(), key=lambda t: t["name"]),
            "paths": self.paths,
            "components": {
                "schemas": {
                    name: to_json_schema(schema)
                    for name, schema in self.registry.entries().items()
                },
                "securitySchemes": {scheme.name: scheme.to_openapi()},
            },
        }
        if options.global_security:
            document["security"] = [{scheme.name: []}]

        return copy.deepcopy(document)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.finalize(), indent=indent, ensure_ascii=False)

    def to_yaml(self) -> str:
        import yaml
        return yaml.safe_dump(self.finalize(), sort_keys=False, allow_unicode=True)


def build_document(
    controllers: Iterable[ControllerDefinition],
    options: Optional[BuilderOptions] = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    """Build and finalize a document in one call. ``kwargs`` go to ``DocumentBuilder``."""
    return DocumentBuilder(options, **kwargs).add_controllers(controllers).finalize()

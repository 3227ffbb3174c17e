"""
Charter Faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults
- ROUTING faults
- SCHEMA faults
- BUILD faults
"""

from typing import Any, Optional

from .core import Fault, FaultDomain, Severity


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            metadata=metadata,
        )


class ConfigMissingFault(ConfigFault):
    """Required configuration is missing."""

    def __init__(self, key: str, **kwargs):
        super().__init__(
            code="CONFIG_MISSING",
            message=f"Required configuration key '{key}' is missing",
            metadata={"key": key, **kwargs.get("metadata", {})},
        )


class ConfigInvalidFault(ConfigFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# ROUTING Faults
# ============================================================================

class RoutingFault(Fault):
    """Base class for route and controller definition faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.ROUTING,
            severity=severity,
            metadata=metadata,
        )


class RouteDefinitionFault(RoutingFault):
    """A route string or route definition cannot be parsed."""

    def __init__(self, route: str, reason: str, **kwargs):
        super().__init__(
            code="ROUTE_INVALID",
            message=f"Invalid route '{route}': {reason}",
            metadata={"route": route, "reason": reason, **kwargs.get("metadata", {})},
        )


class ControllerTargetFault(RoutingFault):
    """A controller import target cannot be resolved."""

    def __init__(self, target: str, reason: str, **kwargs):
        super().__init__(
            code="CONTROLLER_TARGET_INVALID",
            message=f"Cannot load controllers from '{target}': {reason}",
            metadata={"target": target, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# SCHEMA Faults
# ============================================================================

class SchemaFault(Fault):
    """Base class for schema faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.SCHEMA,
            severity=severity,
            metadata=metadata,
        )


class SchemaTypeFault(SchemaFault):
    """A value used as a schema is not a schema mapping."""

    def __init__(self, schema: Any, reason: str, **kwargs):
        super().__init__(
            code="SCHEMA_INVALID",
            message=f"Invalid schema {type(schema).__name__}: {reason}",
            metadata={"reason": reason, **kwargs.get("metadata", {})},
        )


class SchemaValidationFault(SchemaFault):
    """A value does not conform to its schema."""

    def __init__(self, schema_name: str, errors: list, **kwargs):
        summary = ", ".join(f"{e.path}: {e.message}" for e in errors)
        super().__init__(
            code="SCHEMA_VALIDATION_FAILED",
            message=f"Validation failed for {schema_name}: {summary}",
            metadata={"schema": schema_name, "errors": errors, **kwargs.get("metadata", {})},
        )
        self.errors = errors


# ============================================================================
# BUILD Faults
# ============================================================================

class DocumentBuildFault(Fault):
    """The document under assembly violates a structural invariant."""

    def __init__(self, reason: str, *, operation_id: Optional[str] = None, **kwargs):
        where = f" (operation '{operation_id}')" if operation_id else ""
        super().__init__(
            code="DOCUMENT_INVALID",
            message=f"Cannot build document{where}: {reason}",
            domain=FaultDomain.BUILD,
            severity=Severity.FATAL,
            metadata={"operation_id": operation_id, "reason": reason, **kwargs.get("metadata", {})},
        )

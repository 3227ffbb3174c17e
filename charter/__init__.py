"""
Charter - API description documents from declared route contracts.

Routes (method, path, validation schemas, response contracts) are grouped
into controllers; the document builder derives a single, internally
consistent OpenAPI document from them:

- Contract: define_route / define_controller and the @route / @controller decorators
- Schema: identity-deduplicated component registry, Python type to schema conversion
- Builder: path templating, response assembly, auth injection, example checks
- Validation: pluggable validator used for example cross-checking
- Faults: structured errors with stable codes and domains
"""

__version__ = "0.3.0"

# ============================================================================
# Contract
# ============================================================================

from .contract import (
    AuthLevel,
    ControllerDefinition,
    RequestHeader,
    ResponseDefinition,
    ResponseExample,
    ResponseHeader,
    RouteConfig,
    RouteDefinition,
    controller,
    define_controller,
    define_route,
    route,
)

# ============================================================================
# Schemas & Validation
# ============================================================================

from .schema import SchemaRegistry, TypeSchemaFactory, schema_for, to_json_schema
from .validation import ErrorDetail, SchemaValidator, Validator

# ============================================================================
# Builder & Configuration
# ============================================================================

from .config import BuilderOptions, ConfigLoader, SecuritySchemeConfig
from .builder import (
    CollectingSink,
    Diagnostic,
    DocumentBuilder,
    LoggingSink,
    build_document,
    substitute_path,
    translate_path,
)

# ============================================================================
# Faults
# ============================================================================

from .faults import (
    Fault,
    FaultDomain,
    Severity,
    ConfigFault,
    ConfigInvalidFault,
    ConfigMissingFault,
    RouteDefinitionFault,
    ControllerTargetFault,
    SchemaTypeFault,
    SchemaValidationFault,
    DocumentBuildFault,
)

__all__ = [
    "__version__",
    # Contract
    "AuthLevel",
    "ControllerDefinition",
    "RequestHeader",
    "ResponseDefinition",
    "ResponseExample",
    "ResponseHeader",
    "RouteConfig",
    "RouteDefinition",
    "controller",
    "define_controller",
    "define_route",
    "route",
    # Schemas & validation
    "SchemaRegistry",
    "TypeSchemaFactory",
    "schema_for",
    "to_json_schema",
    "ErrorDetail",
    "SchemaValidator",
    "Validator",
    # Builder & config
    "BuilderOptions",
    "ConfigLoader",
    "SecuritySchemeConfig",
    "CollectingSink",
    "Diagnostic",
    "DocumentBuilder",
    "LoggingSink",
    "build_document",
    "substitute_path",
    "translate_path",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ConfigFault",
    "ConfigInvalidFault",
    "ConfigMissingFault",
    "RouteDefinitionFault",
    "ControllerTargetFault",
    "SchemaTypeFault",
    "SchemaValidationFault",
    "DocumentBuildFault",
]

"""
Charter Faults - Structured error handling.

Every failure the builder raises is a typed fault with a stable code and
a domain. Advisory problems (missing descriptions, examples that do not
match their schema) are never faults; they are reported as diagnostics.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain enumeration
- Severity: Severity levels
- Domain faults for configuration, routing, schemas and document assembly
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
)

from .domains import (
    ConfigFault,
    ConfigMissingFault,
    ConfigInvalidFault,
    RoutingFault,
    RouteDefinitionFault,
    ControllerTargetFault,
    SchemaFault,
    SchemaTypeFault,
    SchemaValidationFault,
    DocumentBuildFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",

    # Domain faults
    "ConfigFault",
    "ConfigMissingFault",
    "ConfigInvalidFault",
    "RoutingFault",
    "RouteDefinitionFault",
    "ControllerTargetFault",
    "SchemaFault",
    "SchemaTypeFault",
    "SchemaValidationFault",
    "DocumentBuildFault",
]

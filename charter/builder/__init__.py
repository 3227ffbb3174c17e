"""
Charter Builder - turns controllers into an API description document.
"""

from .assembler import STATUS_DESCRIPTIONS, ResponseAssembler, default_description
from .diagnostics import (
    EXAMPLE_MISMATCH,
    EXAMPLE_UNCHECKED,
    MISSING_DESCRIPTION,
    CollectingSink,
    Diagnostic,
    DiagnosticSink,
    LoggingSink,
)
from .document import DocumentBuilder, build_document
from .examples import ExampleValidator
from .paths import extract_param_names, path_parameters, substitute_path, translate_path

__all__ = [
    "DocumentBuilder",
    "build_document",
    "ResponseAssembler",
    "ExampleValidator",
    "STATUS_DESCRIPTIONS",
    "default_description",
    "Diagnostic",
    "DiagnosticSink",
    "LoggingSink",
    "CollectingSink",
    "MISSING_DESCRIPTION",
    "EXAMPLE_MISMATCH",
    "EXAMPLE_UNCHECKED",
    "extract_param_names",
    "translate_path",
    "path_parameters",
    "substitute_path",
]

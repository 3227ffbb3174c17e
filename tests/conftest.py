"""
Shared test fixtures and helpers for the Charter test suite.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import pytest

from charter.builder import CollectingSink, DocumentBuilder
from charter.config import BuilderOptions
from charter.validation import SchemaValidator


# ============================================================================
# Schemas
# ============================================================================


def user_schema() -> Dict[str, Any]:
    """A fresh ``User`` schema object (new identity on every call)."""
    return {
        "$id": "User",
        "type": "object",
        "properties": {
            "id": {"type": "string"},
            "name": {"type": "string"},
        },
        "required": ["id", "name"],
    }


@dataclass
class Address:
    """A postal address."""
    street: str
    city: str


@dataclass
class Customer:
    id: int
    name: str
    address: Address
    nickname: Optional[str] = None


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def validator():
    return SchemaValidator()


@pytest.fixture
def sink():
    return CollectingSink()


@pytest.fixture
def options():
    return BuilderOptions(title="Test API", version="1.2.3")


@pytest.fixture
def builder(options, sink):
    return DocumentBuilder(options, sink=sink)

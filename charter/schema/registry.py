"""
Component schema registry.

Schemas are plain dicts. The registry deduplicates them by object identity,
never by content: two equal anonymous dicts are two components, while the
same dict reached from ten routes is one component. Every registered dict
is kept referenced by the registry, so its ``id()`` stays unique for as
long as the registry lives.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..faults import SchemaTypeFault

logger = logging.getLogger("charter.schema.registry")

RegistryState = Tuple[Dict[int, Tuple[str, Dict[str, Any]]], Dict[str, Dict[str, Any]]]


def _schema_id(schema: Dict[str, Any]) -> Optional[str]:
    value = schema.get("$id")
    return value if isinstance(value, str) and value else None


def _schema_title(schema: Dict[str, Any]) -> Optional[str]:
    value = schema.get("title")
    return value if isinstance(value, str) and value else None


class SchemaRegistry:
    """
    Name → schema store with identity-based deduplication.

    Naming rule for a schema registered directly:
    ``$id`` if present, else ``title``, else ``Schema<n>`` where ``n`` is
    one more than the number of entries at that moment. Nested schemas
    discovered while walking a registered schema are only registered when
    they carry their own ``$id``, and always under that ``$id``.

    Usage::

        registry = SchemaRegistry()
        name = registry.register(user_schema)     # "User"
        registry.register(user_schema)            # "User", no re-walk
        registry.entries()                        # {"User": user_schema, ...}
    """

    def __init__(self):
        # id(schema) -> (name, schema); the schema reference pins the id
        self._by_identity: Dict[int, Tuple[str, Dict[str, Any]]] = {}
        self._entries: Dict[str, Dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    # ── Registration ─────────────────────────────────────────────────────

    def register(self, schema: Dict[str, Any]) -> str:
        """
        Register a schema and return its component name.

        Raises:
            SchemaTypeFault: if ``schema`` is not a dict
        """
        if not isinstance(schema, dict):
            raise SchemaTypeFault(schema, "only dict schemas can be registered")

        known = self._by_identity.get(id(schema))
        if known is not None:
            return known[0]

        name = _schema_id(schema) or _schema_title(schema) or self._anonymous_name()
        name = self._store(name, schema)
        self.extract_nested(schema)
        return name

    def extract_nested(self, schema: Any) -> None:
        """Register every not-yet-known nested schema that carries a ``$id``."""
        seen = {id(schema)}
        if isinstance(schema, dict):
            children: List[Any] = list(schema.values())
        elif isinstance(schema, list):
            children = list(schema)
        else:
            return
        for child in children:
            self._walk(child, seen)

    def _walk(self, node: Any, seen: set) -> None:
        if isinstance(node, list):
            for item in node:
                self._walk(item, seen)
            return
        if not isinstance(node, dict) or id(node) in seen:
            return
        seen.add(id(node))

        if id(node) in self._by_identity:
            # Already registered, so its subtree was walked back then
            return

        schema_id = _schema_id(node)
        if schema_id is not None:
            self._store(schema_id, node)

        for value in node.values():
            self._walk(value, seen)

    def _store(self, name: str, schema: Dict[str, Any]) -> str:
        existing = self._entries.get(name)
        if existing is None:
            self._entries[name] = schema
            logger.debug("Registered schema component '%s'", name)
        elif existing is not schema:
            # First registration keeps the name; later objects alias it
            level = logging.DEBUG if existing == schema else logging.WARNING
            logger.log(
                level,
                "Schema component '%s' is already registered with a different object; "
                "the first registration is kept",
                name,
            )
        self._by_identity[id(schema)] = (name, schema)
        return name

    def _anonymous_name(self) -> str:
        counter = len(self._entries) + 1
        name = f"Schema{counter}"
        while name in self._entries:
            counter += 1
            name = f"Schema{counter}"
        return name

    # ── Staging ──────────────────────────────────────────────────────────

    def snapshot(self) -> RegistryState:
        """Capture the current registrations for a later ``restore()``."""
        return dict(self._by_identity), dict(self._entries)

    def restore(self, state: RegistryState) -> None:
        """Drop every registration made since ``state`` was captured."""
        by_identity, entries = state
        dropped = [name for name in self._entries if name not in entries]
        self._by_identity = dict(by_identity)
        self._entries = dict(entries)
        if dropped:
            logger.debug("Rolled back schema components: %s", ", ".join(dropped))

    # ── Lookup ───────────────────────────────────────────────────────────

    def name_of(self, schema: Dict[str, Any]) -> Optional[str]:
        """Return the component name of an already registered schema object."""
        known = self._by_identity.get(id(schema))
        return known[0] if known is not None else None

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        return self._entries.get(name)

    def entries(self) -> Dict[str, Dict[str, Any]]:
        """Snapshot of name → schema in registration order."""
        return dict(self._entries)

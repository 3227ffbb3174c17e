"""
Config system - Builder options with layered loading.

Options are explicit values handed to each builder; nothing here is
process-global. ``ConfigLoader`` merges files, environment variables and
overrides into a ``BuilderOptions``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from glob import glob
from pathlib import Path
from typing import Any, Dict, List, Optional

from .faults import ConfigInvalidFault, ConfigMissingFault

logger = logging.getLogger("charter.config")


SUPPORTED_SPEC_VERSIONS = ("3.0.3", "3.1.0")
DEFAULT_SPEC_VERSION = "3.1.0"

SECURITY_SCHEME_TYPES = ("http", "apiKey", "oauth2", "openIdConnect")


@dataclass
class SecuritySchemeConfig:
    """
    The security scheme referenced by routes with ``auth="required"``.

    Attributes:
        name: Key under ``components.securitySchemes``
        type: http, apiKey, oauth2 or openIdConnect
        scheme: HTTP auth scheme (``bearer``, ``basic``) for type http
        bearer_format: Bearer token format hint
        description: Human-readable description
        location: Where an apiKey is sent (header, query, cookie)
        parameter_name: Header/query/cookie name carrying an apiKey
        flows: OAuth2 flows object
        open_id_connect_url: Discovery URL for openIdConnect
    """
    name: str = "BearerAuth"
    type: str = "http"
    scheme: Optional[str] = "bearer"
    bearer_format: Optional[str] = "JWT"
    description: Optional[str] = "JWT bearer token authentication"
    location: Optional[str] = None
    parameter_name: Optional[str] = None
    flows: Optional[Dict[str, Any]] = None
    open_id_connect_url: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ConfigMissingFault("security_scheme.name")
        if self.type not in SECURITY_SCHEME_TYPES:
            raise ConfigInvalidFault(
                "security_scheme.type",
                f"expected one of {', '.join(SECURITY_SCHEME_TYPES)}, got {self.type!r}",
            )
        if self.type == "apiKey" and not (self.location and self.parameter_name):
            raise ConfigInvalidFault(
                "security_scheme", "apiKey schemes need 'location' and 'parameter_name'"
            )
        if self.type == "oauth2" and not self.flows:
            raise ConfigMissingFault("security_scheme.flows")
        if self.type == "openIdConnect" and not self.open_id_connect_url:
            raise ConfigMissingFault("security_scheme.open_id_connect_url")

    def to_openapi(self) -> Dict[str, Any]:
        """Render the security scheme object."""
        scheme: Dict[str, Any] = {"type": self.type}
        if self.type == "http":
            if self.scheme:
                scheme["scheme"] = self.scheme
            if self.bearer_format and (self.scheme or "").lower() == "bearer":
                scheme["bearerFormat"] = self.bearer_format
        elif self.type == "apiKey":
            scheme["in"] = self.location
            scheme["name"] = self.parameter_name
        elif self.type == "oauth2":
            scheme["flows"] = self.flows
        elif self.type == "openIdConnect":
            scheme["openIdConnectUrl"] = self.open_id_connect_url
        if self.description:
            scheme["description"] = self.description
        return scheme

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SecuritySchemeConfig":
        known = {f.name for f in fields(cls)}
        aliases = {"bearerFormat": "bearer_format", "in": "location", "openIdConnectUrl": "open_id_connect_url"}
        kwargs = {}
        for key, value in data.items():
            key = aliases.get(key, key)
            if key in known:
                kwargs[key] = value
        return cls(**kwargs)


@dataclass
class BuilderOptions:
    """
    Construction-time configuration of a ``DocumentBuilder``.

    Attributes:
        title: API title (info.title)
        version: API version (info.version)
        description: API description (info.description)
        servers: Server objects ``{"url", "description"}``
        spec_version: OpenAPI version written to the document
        security_scheme: Scheme used for ``auth="required"`` routes
        suppress_description_warnings: Do not report responses without a description
        validate_examples: Check response examples against their schemas
        global_security: Also declare the scheme as the document-level default
    """
    title: str = "API"
    version: str = "1.0.0"
    description: str = ""
    servers: List[Dict[str, str]] = field(default_factory=list)
    spec_version: str = DEFAULT_SPEC_VERSION
    security_scheme: SecuritySchemeConfig = field(default_factory=SecuritySchemeConfig)
    suppress_description_warnings: bool = False
    validate_examples: bool = True
    global_security: bool = False

    def __post_init__(self):
        if self.spec_version not in SUPPORTED_SPEC_VERSIONS:
            raise ConfigInvalidFault(
                "spec_version",
                f"expected one of {', '.join(SUPPORTED_SPEC_VERSIONS)}, got {self.spec_version!r}",
            )
        if isinstance(self.security_scheme, dict):
            self.security_scheme = SecuritySchemeConfig.from_dict(self.security_scheme)
        servers = []
        for index, server in enumerate(self.servers):
            if isinstance(server, str):
                server = {"url": server}
            if not isinstance(server, dict) or not server.get("url"):
                raise ConfigInvalidFault(f"servers[{index}]", "each server needs a 'url'")
            servers.append(dict(server))
        self.servers = servers

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuilderOptions":
        """Create options from a dict, ignoring unknown and private keys."""
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key.startswith("_"):
                continue
            if key not in known:
                logger.debug("Ignoring unknown builder option '%s'", key)
                continue
            kwargs[key] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigLoader:
    """
    Loads and merges builder configuration with precedence:
    overrides > environment variables > config files > defaults

    Usage::

        options = ConfigLoader.load(paths=["charter.yaml"]).options()
    """

    def __init__(self, env_prefix: str = "CHARTER_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[List[str]] = None,
        env_prefix: str = "CHARTER_",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources.

        Args:
            paths: Config file paths (glob patterns supported; .json, .yaml, .yml)
            env_prefix: Prefix for environment variables
            overrides: Manual overrides (highest precedence)
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            matched = sorted(glob(pattern))
            if not matched:
                raise ConfigInvalidFault("paths", f"no config file matches '{pattern}'")
            for path_str in matched:
                loader._load_file(Path(path_str))

        loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_file(self, path: Path):
        if path.suffix == ".json":
            with open(path) as f:
                data = json.load(f)
        elif path.suffix in (".yaml", ".yml"):
            import yaml
            with open(path) as f:
                data = yaml.safe_load(f)
        else:
            raise ConfigInvalidFault(str(path), "config files must be .json, .yaml or .yml")

        if data is None:
            return
        if not isinstance(data, dict):
            raise ConfigInvalidFault(str(path), "top level must be a mapping")
        logger.debug("Loaded builder config from %s", path)
        self._merge_dict(self.config_data, data)

    def _load_from_env(self):
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert CHARTER_SECURITY_SCHEME__NAME to nested dict."""
        key = key[len(self.env_prefix):]

        # Double underscore separates nesting levels
        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current: Any = self.config_data
        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def options(self) -> BuilderOptions:
        """Build validated ``BuilderOptions`` from the merged data."""
        return BuilderOptions.from_dict(self.config_data)

    def to_dict(self) -> dict:
        return self.config_data.copy()

"""Build options and project configuration."""

from __future__ import annotations

import importlib
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from graphql import GraphQLSchema

DEFAULT_CONFIG_FILE = "ophooks.yaml"

_TRUTHY = ("1", "true", "yes")
_FALSY = ("0", "false", "no", "")


@dataclass
class BuildOptions:
    """Options passed to every plugin.

    Attributes:
        operation_messages_preflight: Add a ``preflight`` argument to root
            mutations that runs the before hooks and returns the collected
            messages without executing the mutation
    """

    operation_messages_preflight: bool = False

    @classmethod
    def from_env(cls) -> BuildOptions:
        """Create options from environment variables.

        OPHOOKS_MESSAGES_PREFLIGHT: enable pre-flight mutations (1/true/yes)
        """
        preflight = os.environ.get("OPHOOKS_MESSAGES_PREFLIGHT", "")
        return cls(operation_messages_preflight=preflight.lower() in _TRUTHY)

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], base: BuildOptions | None = None
    ) -> BuildOptions:
        """Create options from a YAML/JSON mapping, overriding ``base``.

        Raises:
            ValueError: For unknown option names or values that are not booleans
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown build option(s): {', '.join(unknown)}. "
                f"Available options: {', '.join(sorted(known))}"
            )
        values = {f.name: getattr(base, f.name) for f in fields(cls)} if base else {}
        values.update({k: _parse_bool(k, v) for k, v in data.items()})
        return cls(**values)


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
    raise ValueError(f"Build option '{name}' must be a boolean, got {value!r}")

def import_object(reference: str) -> Any:
    """Import an object from a ``package.module:attribute`` reference.

    Raises:
        ValueError: If the reference is malformed or cannot be resolved
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(
            f"Invalid reference '{reference}'; expected 'package.module:attribute'"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module '{module_name}': {e}") from e

    obj: Any = module
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ValueError(f"'{module_name}' has no attribute '{attribute}'") from e
    return obj


@dataclass
class ProjectConfig:
    """Project settings loaded from ``ophooks.yaml``.

    Example file:
        schema: schema.graphql
        resolvers: myapp.resolvers:RESOLVERS
        plugins:
          - myapp.audit:audit_plugin
        options:
          operation_messages_preflight: true
    """

    schema_path: Path
    resolvers: str | None = None
    plugins: list[str] = field(default_factory=list)
    options: BuildOptions = field(default_factory=BuildOptions)

    @classmethod
    def load(cls, path: Path) -> ProjectConfig:
        """Load a config file. Relative schema paths resolve against its directory.

        Environment options apply first; the file's ``options`` override them.

        Raises:
            ValueError: If the file is missing or malformed
        """
        if not path.exists():
            raise ValueError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

        schema = data.get("schema")
        if not schema:
            raise ValueError(f"Config file {path} is missing 'schema'")

        plugins = data.get("plugins") or []
        if isinstance(plugins, str):
            plugins = [plugins]

        return cls(
            schema_path=(path.parent / schema).resolve(),
            resolvers=data.get("resolvers"),
            plugins=list(plugins),
            options=BuildOptions.from_dict(
                data.get("options") or {}, base=BuildOptions.from_env()
            ),
        )

    def build(self) -> GraphQLSchema:
        """Build the schema with the operation hooks preset and configured plugins."""
        from ophooks.plugins import operation_hooks_plugin
        from ophooks.schema import build_schema

        type_defs = self.schema_path.read_text()
        resolvers = import_object(self.resolvers) if self.resolvers else {}
        plugins = [operation_hooks_plugin]
        plugins.extend(import_object(reference) for reference in self.plugins)
        return build_schema(type_defs, resolvers, plugins, self.options)

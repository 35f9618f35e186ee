"""ophooks: ordered before/after/error hooks around GraphQL root resolvers.

Usage:
    from ophooks import build_schema, operation_hooks_plugin

    schema = build_schema(TYPE_DEFS, RESOLVERS, plugins=[operation_hooks_plugin])
"""

from ophooks.config import BuildOptions, ProjectConfig
from ophooks.plugins import operation_hooks_plugin
from ophooks.schema import SchemaBuilder, build_schema

__all__ = [
    "BuildOptions",
    "ProjectConfig",
    "SchemaBuilder",
    "build_schema",
    "operation_hooks_plugin",
]

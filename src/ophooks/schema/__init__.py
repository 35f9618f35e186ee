"""Phased schema builder hosting the operation hooks plugins."""

from ophooks.schema.builder import (
    PHASES,
    Build,
    FieldRecord,
    FieldSpec,
    Plugin,
    SchemaBuilder,
    TypeContext,
    build_schema,
)

__all__ = [
    "Build",
    "FieldRecord",
    "FieldSpec",
    "PHASES",
    "Plugin",
    "SchemaBuilder",
    "TypeContext",
    "build_schema",
]

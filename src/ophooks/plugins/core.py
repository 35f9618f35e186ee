"""Core operation hooks plugin.

Attaches the hook registry to the build, wraps root field resolvers
with their aggregated hooks, and checks every root field was wrapped.
"""

import logging
from dataclasses import replace

from graphql import GraphQLSchema

from ophooks.config import BuildOptions
from ophooks.hooks.errors import ConfigurationError
from ophooks.hooks.registry import HookRegistry, aggregate
from ophooks.hooks.service import wrap_resolver
from ophooks.hooks.types import FieldContext
from ophooks.hooks.validator import validate_wrapped
from ophooks.schema.builder import Build, FieldSpec, SchemaBuilder

logger = logging.getLogger(__name__)


def attach_registry(build: Build) -> None:
    registry = HookRegistry()
    build.extend("operation_hook_registry", registry)
    build.extend("add_operation_hook", registry.register)


def wrap_root_field(spec: FieldSpec, build: Build, context: FieldContext) -> FieldSpec:
    """Wrap a root field's resolver with its operation hooks."""
    if not context.is_root:
        return spec

    bundles = build.operation_hook_registry.resolve_for(context)
    callbacks = aggregate(bundles)
    if callbacks is None:
        # No relevant hooks, leave the resolver alone
        return spec

    if spec.resolve is None:
        raise ConfigurationError(context.type_name, context.field_name)

    logger.debug(
        "Wrapping %s with %d before, %d after, %d error hook(s)",
        context.identifier,
        len(callbacks.before),
        len(callbacks.after),
        len(callbacks.error),
    )
    wrapper = wrap_resolver(spec.resolve, callbacks)
    return replace(spec, resolve=wrapper, wrapped_resolve=wrapper)


def check_wrapped(schema: GraphQLSchema, build: Build) -> GraphQLSchema:
    return validate_wrapped(schema, build.field_records)


def operation_hooks_core_plugin(builder: SchemaBuilder, options: BuildOptions) -> None:
    builder.hook("build", attach_registry)
    builder.hook("field", wrap_root_field)
    builder.hook("finalize", check_wrapped)

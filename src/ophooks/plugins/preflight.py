"""Mutation pre-flight plugin.

Enabled by ``BuildOptions.operation_messages_preflight``. Mutation
payload types (object types returned only by root mutations) gain a
``preflight: Boolean!`` field reporting whether the result came from a
pre-flight run. Every root mutation returning such a payload gains a
``preflight: Boolean`` argument; when it is true the before hooks run as
usual (so validation messages are collected) but the mutation itself is
skipped. Other mutations are left alone.
"""

from collections.abc import Mapping
from dataclasses import replace
from typing import Any, Callable

from graphql import GraphQLArgument, GraphQLBoolean, GraphQLField, GraphQLNonNull

from ophooks.config import BuildOptions
from ophooks.hooks.types import FieldContext, HookBundle, HookDescriptor
from ophooks.plugins.messages import get_messages
from ophooks.schema.builder import Build, FieldSpec, SchemaBuilder, TypeContext

PREFLIGHT = "preflight"

# Right at the end, after the messages have been validated
PREFLIGHT_PRIORITY = 990


async def preflight_hook(value, args, context, info):
    if not args.get(PREFLIGHT):
        return value
    return {PREFLIGHT: True, "messages": list(get_messages(info))}


def preflight_hooks(context: FieldContext) -> HookBundle | None:
    if not context.is_root_mutation:
        return None
    return HookBundle(
        before=[HookDescriptor(priority=PREFLIGHT_PRIORITY, callback=preflight_hook)]
    )


def resolve_preflight(parent: Any, info: Any) -> bool:
    if isinstance(parent, Mapping):
        return bool(parent.get(PREFLIGHT))
    return bool(getattr(parent, PREFLIGHT, False))


def _without_preflight(resolve: Callable[..., Any]) -> Callable[..., Any]:
    # The mutation's own resolver never sees the preflight argument
    def resolve_without_preflight(source, info, **args):
        args.pop(PREFLIGHT, None)
        return resolve(source, info, **args)

    return resolve_without_preflight


def register_preflight_hooks(build: Build) -> None:
    build.add_operation_hook(preflight_hooks)


def add_preflight_field(
    fields: dict[str, GraphQLField], build: Build, context: TypeContext
) -> dict[str, GraphQLField]:
    if not context.is_mutation_payload:
        return fields
    if PREFLIGHT in fields:
        raise ValueError(f"Field {context.type_name}.{PREFLIGHT} already exists")
    fields[PREFLIGHT] = GraphQLField(
        GraphQLNonNull(GraphQLBoolean), resolve=resolve_preflight
    )
    return fields


def add_preflight_argument(
    spec: FieldSpec, build: Build, context: FieldContext
) -> FieldSpec:
    if not context.is_root_mutation or not build.returns_mutation_payload(spec.field):
        return spec
    if PREFLIGHT in spec.args:
        raise ValueError(f"Argument {PREFLIGHT} already exists on {context.identifier}")
    args = {**spec.args, PREFLIGHT: GraphQLArgument(GraphQLBoolean)}
    resolve = _without_preflight(spec.resolve) if spec.resolve is not None else None
    return replace(spec, args=args, resolve=resolve)


def operation_messages_preflight_plugin(
    builder: SchemaBuilder, options: BuildOptions
) -> None:
    if not options.operation_messages_preflight:
        return
    builder.hook("init", register_preflight_hooks)
    builder.hook("fields", add_preflight_field)
    builder.hook("field", add_preflight_argument)

"""Phased GraphQL schema builder.

Builds a graphql-core schema from SDL and a resolver map, letting
plugins hook into each phase of the build:

- build:    fn(build) -> None, attach shared APIs with ``build.extend``
- init:     fn(build) -> None, register with the APIs attached in ``build``
- fields:   fn(fields, build, type_context) -> fields, once per object type
- field:    fn(spec, build, field_context) -> spec, once per field
- finalize: fn(schema, build) -> schema, once, after all fields are done

Root types are visited first (query, mutation, subscription), then the
remaining object types. Introspection types are never visited.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLObjectType,
    GraphQLSchema,
    assert_valid_schema,
    build_schema as build_sdl_schema,
    get_named_type,
    get_nullable_type,
    is_interface_type,
    is_object_type,
    is_union_type,
)

from ophooks.config import BuildOptions
from ophooks.hooks.types import FieldContext

logger = logging.getLogger(__name__)

PHASES = ("build", "init", "fields", "field", "finalize")

Plugin = Callable[["SchemaBuilder", BuildOptions], None]


@dataclass(frozen=True)
class TypeContext:
    """Build-time description of an object type, passed to ``fields`` hooks.

    Attributes:
        type_name: Name of the object type
        is_root_query: The type is the query root
        is_root_mutation: The type is the mutation root
        is_root_subscription: The type is the subscription root
        is_mutation_payload: The type is returned directly by a root mutation
            field and is not used by any other field, union or root
    """

    type_name: str
    is_root_query: bool = False
    is_root_mutation: bool = False
    is_root_subscription: bool = False
    is_mutation_payload: bool = False


@dataclass
class FieldSpec:
    """A field definition as seen by ``field`` hooks.

    Hooks return a (possibly replaced) spec; ``dataclasses.replace`` is
    the usual way to change it.

    Attributes:
        name: Field name
        type_name: Owning type name
        field: The underlying GraphQLField
        resolve: Resolver, or None for graphql-core's default resolver
        subscribe: Subscription source resolver (subscription roots only)
        args: Field arguments
        wrapped_resolve: The resolver produced by the operation hooks; the
            field only counts as wrapped while ``resolve`` is this object
    """

    name: str
    type_name: str
    field: GraphQLField
    resolve: Callable[..., Any] | None = None
    subscribe: Callable[..., Any] | None = None
    args: dict[str, GraphQLArgument] = field(default_factory=dict)
    wrapped_resolve: Callable[..., Any] | None = None

    @property
    def wrapped(self) -> bool:
        return self.resolve is not None and self.resolve is self.wrapped_resolve


@dataclass(frozen=True)
class FieldRecord:
    """Per-field bookkeeping kept by the build after ``field`` hooks ran."""

    type_name: str
    field_name: str
    wrapped: bool = False

    @property
    def identifier(self) -> str:
        return f"{self.type_name}.{self.field_name}"


class Build:
    """Shared state passed to every hook during one schema build.

    Plugins attach APIs with ``extend``; attached values are then
    readable as attributes (``build.add_operation_hook``).
    """

    def __init__(self, options: BuildOptions):
        self.options = options
        self.field_records: dict[str, FieldRecord] = {}
        self.mutation_payload_types: frozenset[str] = frozenset()
        self._extensions: dict[str, Any] = {}

    def extend(self, name: str, value: Any) -> None:
        """Attach a named value to the build.

        Raises:
            ValueError: If the name is already in use
        """
        if name in self._extensions or name in self.__dict__ or hasattr(type(self), name):
            raise ValueError(f"Build already has an attribute named '{name}'")
        self._extensions[name] = value

    def __getattr__(self, name: str) -> Any:
        extensions = self.__dict__.get("_extensions", {})
        if name in extensions:
            return extensions[name]
        raise AttributeError(
            f"Build has no attribute '{name}'; is the plugin that provides it loaded?"
        )

    def field_record(self, type_name: str, field_name: str) -> FieldRecord | None:
        return self.field_records.get(f"{type_name}.{field_name}")

    def returns_mutation_payload(self, graphql_field: GraphQLField) -> bool:
        """Whether the field returns one of the build's mutation payload types."""
        return _returned_object_name(graphql_field) in self.mutation_payload_types


def _returned_object_name(graphql_field: GraphQLField) -> str | None:
    returned = get_nullable_type(graphql_field.type)
    return returned.name if is_object_type(returned) else None


def _mutation_payload_names(schema: GraphQLSchema) -> set[str]:
    """Object types returned directly by root mutations and used nowhere else."""
    mutation_type = schema.mutation_type
    if mutation_type is None:
        return set()
    candidates = set()
    for mutation_field in mutation_type.fields.values():
        name = _returned_object_name(mutation_field)
        if name is not None:
            candidates.add(name)

    shared = {
        t.name
        for t in (schema.query_type, schema.mutation_type, schema.subscription_type)
        if t is not None
    }
    for name, named_type in schema.type_map.items():
        if name.startswith("__") or named_type is mutation_type:
            continue
        if is_object_type(named_type) or is_interface_type(named_type):
            for other_field in named_type.fields.values():
                shared.add(get_named_type(other_field.type).name)
        elif is_union_type(named_type):
            shared.update(member.name for member in named_type.types)
    for mutation_field in mutation_type.fields.values():
        # Lists of payloads are not payloads
        if _returned_object_name(mutation_field) is None:
            shared.add(get_named_type(mutation_field.type).name)
    return candidates - shared


def _object_types(schema: GraphQLSchema) -> list[GraphQLObjectType]:
    roots = [
        t
        for t in (schema.query_type, schema.mutation_type, schema.subscription_type)
        if t is not None
    ]
    others = [
        t
        for name, t in schema.type_map.items()
        if is_object_type(t) and not name.startswith("__") and t not in roots
    ]
    return roots + others


class SchemaBuilder:
    """Builds a schema, running plugin hooks at each phase.

    Example:
        builder = SchemaBuilder(BuildOptions())
        builder.use(operation_hooks_plugin)
        schema = builder.build_schema(TYPE_DEFS, {"Query": {"echo": resolve_echo}})
    """

    def __init__(self, options: BuildOptions | None = None):
        self.options = options or BuildOptions()
        self._hooks: dict[str, list[Callable[..., Any]]] = {p: [] for p in PHASES}

    def hook(self, phase: str, fn: Callable[..., Any]) -> None:
        """Register a hook for a build phase."""
        if phase not in self._hooks:
            raise ValueError(
                f"Unknown build phase '{phase}'. Available phases: {', '.join(PHASES)}"
            )
        self._hooks[phase].append(fn)

    def use(self, plugin: Plugin) -> None:
        """Apply a plugin, letting it register its hooks."""
        plugin(self, self.options)

    def build_schema(
        self,
        type_defs: str,
        resolvers: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> GraphQLSchema:
        """Build the schema.

        Args:
            type_defs: Schema definition language source
            resolvers: ``{"Type": {"field": resolver}}``; a subscription field
                may map to ``{"subscribe": fn, "resolve": fn}``

        Returns:
            The finished schema, after all finalize hooks

        Raises:
            ValueError: If a resolver names an unknown type or field
        """
        resolvers = resolvers or {}
        build = Build(self.options)

        for fn in self._hooks["build"]:
            fn(build)
        for fn in self._hooks["init"]:
            fn(build)

        schema = build_sdl_schema(type_defs)
        _check_resolver_map(schema, resolvers)
        build.mutation_payload_types = frozenset(_mutation_payload_names(schema))

        for object_type in _object_types(schema):
            is_query = object_type is schema.query_type
            is_mutation = object_type is schema.mutation_type
            is_subscription = object_type is schema.subscription_type
            type_context = TypeContext(
                type_name=object_type.name,
                is_root_query=is_query,
                is_root_mutation=is_mutation,
                is_root_subscription=is_subscription,
                is_mutation_payload=object_type.name in build.mutation_payload_types,
            )
            self._run_fields_hooks(object_type, build, type_context)

            type_resolvers = resolvers.get(object_type.name, {})
            for field_name, graphql_field in object_type.fields.items():
                context = FieldContext(
                    type_name=object_type.name,
                    field_name=field_name,
                    is_root_query=is_query,
                    is_root_mutation=is_mutation,
                    is_root_subscription=is_subscription,
                )
                spec = _initial_spec(
                    object_type.name, field_name, graphql_field, type_resolvers.get(field_name)
                )
                for fn in self._hooks["field"]:
                    spec = fn(spec, build, context)

                graphql_field.resolve = spec.resolve
                graphql_field.subscribe = spec.subscribe
                graphql_field.args = spec.args
                build.field_records[context.identifier] = FieldRecord(
                    type_name=object_type.name,
                    field_name=field_name,
                    wrapped=spec.wrapped,
                )

        assert_valid_schema(schema)

        for fn in self._hooks["finalize"]:
            schema = fn(schema, build)

        logger.debug(
            "Built schema with %d object field(s)", len(build.field_records)
        )
        return schema

    def _run_fields_hooks(
        self, object_type: GraphQLObjectType, build: Build, context: TypeContext
    ) -> None:
        current = object_type.fields
        fields = current
        for fn in self._hooks["fields"]:
            fields = fn(fields, build, context)
        if fields is not current:
            replacement = dict(fields)
            current.clear()
            current.update(replacement)


def _initial_spec(
    type_name: str, field_name: str, graphql_field: GraphQLField, resolver: Any
) -> FieldSpec:
    subscribe = graphql_field.subscribe
    resolve = graphql_field.resolve
    if isinstance(resolver, Mapping):
        resolve = resolver.get("resolve", resolve)
        subscribe = resolver.get("subscribe", subscribe)
    elif resolver is not None:
        resolve = resolver
    return FieldSpec(
        name=field_name,
        type_name=type_name,
        field=graphql_field,
        resolve=resolve,
        subscribe=subscribe,
        args=dict(graphql_field.args),
    )


def _check_resolver_map(
    schema: GraphQLSchema, resolvers: Mapping[str, Mapping[str, Any]]
) -> None:
    for type_name, type_resolvers in resolvers.items():
        object_type = schema.type_map.get(type_name)
        if not is_object_type(object_type):
            raise ValueError(f"Resolver map references unknown object type '{type_name}'")
        for field_name in type_resolvers:
            if field_name not in object_type.fields:
                raise ValueError(
                    f"Resolver map references unknown field '{type_name}.{field_name}'"
                )


def build_schema(
    type_defs: str,
    resolvers: Mapping[str, Mapping[str, Any]] | None = None,
    plugins: Iterable[Plugin] = (),
    options: BuildOptions | None = None,
) -> GraphQLSchema:
    """Build a schema with the given plugins applied in order."""
    builder = SchemaBuilder(options)
    for plugin in plugins:
        builder.use(plugin)
    return builder.build_schema(type_defs, resolvers)

"""Operation hook types.

Defines the core data structures for the operation hook engine:
- FieldContext: static description of a root field at build time
- HookDescriptor: a prioritised callback for one stage
- HookBundle: the before/after/error descriptors a generator contributes
- AggregatedCallbacks: the sorted callbacks used to wrap one resolver
- Proceed / ShortCircuit: before-stage outcome markers
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

MIN_PRIORITY = 0
MAX_PRIORITY = 1000

# Per-invocation scratch space shared by hooks and the original resolver
CallMeta = dict[str, Any]

# Hook callback signature: (value, args, context, info) -> value
HookCallback = Callable[[Any, dict[str, Any], Any, Any], Awaitable[Any] | Any]


@dataclass(frozen=True)
class FieldContext:
    """Build-time description of a field, supplied by the schema builder.

    Attributes:
        type_name: Name of the owning object type (e.g., "Query")
        field_name: Name of the field
        is_root_query: The owning type is the query root
        is_root_mutation: The owning type is the mutation root
        is_root_subscription: The owning type is the subscription root
    """

    type_name: str
    field_name: str
    is_root_query: bool = False
    is_root_mutation: bool = False
    is_root_subscription: bool = False

    @property
    def is_root(self) -> bool:
        return self.is_root_query or self.is_root_mutation or self.is_root_subscription

    @property
    def identifier(self) -> str:
        return f"{self.type_name}.{self.field_name}"


@dataclass(frozen=True)
class HookDescriptor:
    """A callback with its ordering key.

    Lower priorities run first; equal priorities keep registration order.
    """

    priority: int
    callback: HookCallback

    def __post_init__(self) -> None:
        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise ValueError(f"Hook priority must be an integer, got {self.priority!r}")
        if not MIN_PRIORITY <= self.priority <= MAX_PRIORITY:
            raise ValueError(
                f"Hook priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}, "
                f"got {self.priority}"
            )


@dataclass(frozen=True)
class HookBundle:
    """Hooks contributed by one generator for one field."""

    before: tuple[HookDescriptor, ...] = ()
    after: tuple[HookDescriptor, ...] = ()
    error: tuple[HookDescriptor, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable, store tuples
        object.__setattr__(self, "before", tuple(self.before))
        object.__setattr__(self, "after", tuple(self.after))
        object.__setattr__(self, "error", tuple(self.error))

    @property
    def is_empty(self) -> bool:
        return not (self.before or self.after or self.error)


# Generator signature: FieldContext -> HookBundle, or None when not applicable
HookGenerator = Callable[[FieldContext], HookBundle | None]


@dataclass(frozen=True)
class AggregatedCallbacks:
    """Priority-sorted callbacks for each stage of one field."""

    before: tuple[HookCallback, ...] = ()
    after: tuple[HookCallback, ...] = ()
    error: tuple[HookCallback, ...] = ()


class Proceed:
    """Initial value of the before stage.

    A before hook that returns the Proceed it was given lets the original
    resolver run. Any other value ends the operation with that value.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return "Proceed()"


@dataclass(frozen=True)
class ShortCircuit:
    """Returned by a hook to stop its stage immediately.

    The stage result becomes ``value``; the default None is GraphQL null.
    """

    value: Any = None

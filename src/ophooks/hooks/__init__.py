"""Operation hook engine.

Wraps root query, mutation and subscription resolvers with ordered
hook stages:
- before: runs ahead of the resolver (can replace the result, can exit early)
- after: transforms the resolver's result
- error: enriches or replaces an error before it is re-raised

Usage:
    from ophooks.hooks import HookBundle, HookDescriptor

    async def require_login(value, args, context, info):
        if context.get("user") is None:
            raise OperationError("Login required")
        return value

    build.add_operation_hook(
        lambda ctx: HookBundle(before=[HookDescriptor(100, require_login)])
        if ctx.is_root_mutation
        else None
    )
"""

from ophooks.hooks.errors import (
    ConfigurationError,
    LogicError,
    OperationError,
    OperationHooksError,
    RegistrationLockedError,
    ValidationError,
)
from ophooks.hooks.registry import HookRegistry, RegistryPhase, aggregate
from ophooks.hooks.service import ResolveInfoWithMeta, apply_stage, wrap_resolver
from ophooks.hooks.types import (
    AggregatedCallbacks,
    CallMeta,
    FieldContext,
    HookBundle,
    HookCallback,
    HookDescriptor,
    HookGenerator,
    MAX_PRIORITY,
    MIN_PRIORITY,
    Proceed,
    ShortCircuit,
)
from ophooks.hooks.validator import find_unwrapped_fields, validate_wrapped

__all__ = [
    "AggregatedCallbacks",
    "CallMeta",
    "ConfigurationError",
    "FieldContext",
    "HookBundle",
    "HookCallback",
    "HookDescriptor",
    "HookGenerator",
    "HookRegistry",
    "LogicError",
    "MAX_PRIORITY",
    "MIN_PRIORITY",
    "OperationError",
    "OperationHooksError",
    "Proceed",
    "RegistrationLockedError",
    "RegistryPhase",
    "ResolveInfoWithMeta",
    "ShortCircuit",
    "ValidationError",
    "aggregate",
    "apply_stage",
    "find_unwrapped_fields",
    "validate_wrapped",
    "wrap_resolver",
]

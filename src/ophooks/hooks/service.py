"""Hook execution for operation hooks.

Runs the before/after/error stages around a root resolver. Stages
execute sequentially; each hook's output is the next hook's input.
"""

import logging
from inspect import isawaitable
from typing import Any, Callable

from ophooks.hooks.errors import LogicError, OperationError
from ophooks.hooks.types import (
    AggregatedCallbacks,
    CallMeta,
    HookCallback,
    Proceed,
    ShortCircuit,
)

logger = logging.getLogger(__name__)


class ResolveInfoWithMeta:
    """GraphQLResolveInfo view carrying the per-invocation CallMeta.

    Attribute access falls through to the wrapped info, so hooks and
    resolvers can use ``info.field_name``, ``info.context`` and so on.
    """

    __slots__ = ("info", "meta")

    def __init__(self, info: Any, meta: CallMeta | None = None):
        self.info = info
        self.meta: CallMeta = {} if meta is None else meta

    def __getattr__(self, name: str) -> Any:
        return getattr(self.info, name)

    def __repr__(self) -> str:
        return f"ResolveInfoWithMeta({self.info!r}, meta={self.meta!r})"


async def apply_stage(
    callbacks: tuple[HookCallback, ...] | list[HookCallback],
    initial: Any,
    args: dict[str, Any],
    context: Any,
    info: Any,
) -> Any:
    """Apply one stage of hooks, in order.

    Args:
        callbacks: Priority-sorted hook callbacks
        initial: Value passed to the first callback
        args: Field arguments
        context: The execution context
        info: Resolve info with CallMeta

    Returns:
        The last callback's output, or the value of a ShortCircuit.
        A callback that passes on a None it was given ends the stage
        with None.

    Raises:
        LogicError: If a callback turns a value into None
    """
    output = initial
    for callback in callbacks:
        value = output
        output = callback(value, args, context, info)
        if isawaitable(output):
            output = await output
        if output is None:
            if value is None:
                return None
            raise LogicError()
        if isinstance(output, ShortCircuit):
            logger.debug(
                "Operation hook %s short-circuited",
                getattr(callback, "__qualname__", repr(callback)),
            )
            return output.value
    return output


def wrap_resolver(
    resolve: Callable[..., Any],
    callbacks: AggregatedCallbacks,
) -> Callable[..., Any]:
    """Wrap a root resolver with before, after and error hooks.

    The returned resolver has the graphql-core signature
    ``(source, info, **args)`` and always runs asynchronously.
    """

    async def resolve_with_hooks(source: Any, info: Any, **args: Any) -> Any:
        info_with_meta = ResolveInfoWithMeta(info)
        context = info.context
        proceed = Proceed()
        try:
            before = await apply_stage(
                callbacks.before, proceed, args, context, info_with_meta
            )
            # Only this call's own marker lets the resolver run
            if before is not proceed:
                return before

            result = resolve(source, info_with_meta, **args)
            if isawaitable(result):
                result = await result

            return await apply_stage(
                callbacks.after, result, args, context, info_with_meta
            )
        except Exception as error:
            outcome = await apply_stage(
                callbacks.error, error, args, context, info_with_meta
            )
            if outcome is error:
                raise
            if isinstance(outcome, BaseException):
                raise outcome from error
            raise OperationError(
                f"Operation hook replaced the error with a non-error value: {outcome!r}"
            ) from error

    return resolve_with_hooks

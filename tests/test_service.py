"""Tests for hook stage execution and resolver wrapping."""

import asyncio
from types import SimpleNamespace

import pytest

from ophooks.hooks import (
    AggregatedCallbacks,
    LogicError,
    OperationError,
    Proceed,
    ResolveInfoWithMeta,
    ShortCircuit,
    apply_stage,
    wrap_resolver,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def info():
    return SimpleNamespace(field_name="echo", context={"user": "U001"})


@pytest.fixture
def calls():
    return []


def tracking(calls, name, result=lambda value: value):
    async def callback(value, args, context, info):
        calls.append(name)
        return result(value)

    return callback


async def echo(source, info, message):
    return message


# =============================================================================
# apply_stage
# =============================================================================


class TestApplyStage:
    @pytest.mark.asyncio
    async def test_empty_stage_returns_initial(self, info):
        assert await apply_stage((), "x", {}, None, info) == "x"

    @pytest.mark.asyncio
    async def test_chains_outputs(self, info):
        async def add_a(value, args, context, info):
            return value + "a"

        async def add_b(value, args, context, info):
            return value + "b"

        assert await apply_stage((add_a, add_b), "", {}, None, info) == "ab"

    @pytest.mark.asyncio
    async def test_sync_callbacks_accepted(self, info):
        def double(value, args, context, info):
            return value * 2

        assert await apply_stage((double, double), 3, {}, None, info) == 12

    @pytest.mark.asyncio
    async def test_passes_args_context_info(self, info):
        received = []

        async def capture(value, args, context, info):
            received.append((args, context, info))
            return value

        await apply_stage((capture,), 1, {"message": "Hi"}, {"user": "U001"}, info)
        assert received == [({"message": "Hi"}, {"user": "U001"}, info)]

    @pytest.mark.asyncio
    async def test_none_raises_logic_error(self, info, calls):
        async def forgot_return(value, args, context, info):
            calls.append("forgot")

        with pytest.raises(LogicError, match="returned an undefined value"):
            await apply_stage(
                (forgot_return, tracking(calls, "later")), 1, {}, None, info
            )
        assert calls == ["forgot"]

    @pytest.mark.asyncio
    async def test_passed_on_none_ends_stage(self, info, calls):
        stages = (tracking(calls, "first"), tracking(calls, "second"))
        assert await apply_stage(stages, None, {}, None, info) is None
        assert calls == ["first"]

    @pytest.mark.asyncio
    async def test_short_circuit_stops_stage(self, info, calls):
        stages = (
            tracking(calls, "first", lambda v: ShortCircuit()),
            tracking(calls, "second"),
        )
        assert await apply_stage(stages, 1, {}, None, info) is None
        assert calls == ["first"]

    @pytest.mark.asyncio
    async def test_short_circuit_with_value(self, info):
        async def stop(value, args, context, info):
            return ShortCircuit("cached")

        assert await apply_stage((stop,), 1, {}, None, info) == "cached"

    @pytest.mark.asyncio
    async def test_runs_sequentially(self, info):
        events = []

        def slow(name):
            async def callback(value, args, context, info):
                events.append(f"start {name}")
                await asyncio.sleep(0)
                events.append(f"end {name}")
                return value

            return callback

        await apply_stage((slow("a"), slow("b")), 1, {}, None, info)
        assert events == ["start a", "end a", "start b", "end b"]


# =============================================================================
# wrap_resolver
# =============================================================================


class TestWrapResolver:
    @pytest.mark.asyncio
    async def test_before_unchanged_calls_resolver(self, info, calls):
        resolve = wrap_resolver(
            echo, AggregatedCallbacks(before=(tracking(calls, "before"),))
        )
        assert await resolve(None, info, message="Hi") == "Hi"
        assert calls == ["before"]

    @pytest.mark.asyncio
    async def test_before_receives_proceed(self, info):
        received = []

        async def capture(value, args, context, info):
            received.append(value)
            return value

        resolve = wrap_resolver(echo, AggregatedCallbacks(before=(capture,)))
        await resolve(None, info, message="Hi")
        assert isinstance(received[0], Proceed)

    @pytest.mark.asyncio
    async def test_after_transforms_result(self, info):
        async def append_after(value, args, context, info):
            return value + "(AFTER)"

        resolve = wrap_resolver(echo, AggregatedCallbacks(after=(append_after,)))
        assert await resolve(None, info, message="Hi") == "Hi(AFTER)"

    @pytest.mark.asyncio
    async def test_before_short_circuit_skips_resolver_and_after(self, info, calls):
        async def resolver(source, info, message):
            calls.append("resolver")
            return message

        resolve = wrap_resolver(
            resolver,
            AggregatedCallbacks(
                before=(
                    tracking(calls, "stop", lambda v: ShortCircuit()),
                    tracking(calls, "later before"),
                ),
                after=(tracking(calls, "after"),),
            ),
        )
        assert await resolve(None, info, message="Hi") is None
        assert calls == ["stop"]

    @pytest.mark.asyncio
    async def test_before_replacement_value_returned(self, info, calls):
        async def resolver(source, info, message):
            calls.append("resolver")
            return message

        resolve = wrap_resolver(
            resolver,
            AggregatedCallbacks(
                before=(
                    tracking(calls, "replace", lambda v: "cached"),
                    tracking(calls, "later before"),
                ),
                after=(tracking(calls, "after"),),
            ),
        )
        assert await resolve(None, info, message="Hi") == "cached"
        assert calls == ["replace", "later before"]

    @pytest.mark.asyncio
    async def test_foreign_proceed_does_not_run_resolver(self, info, calls):
        async def resolver(source, info, message):
            calls.append("resolver")
            return message

        other = Proceed()
        resolve = wrap_resolver(
            resolver,
            AggregatedCallbacks(
                before=(tracking(calls, "swap", lambda v: other),),
                after=(tracking(calls, "after"),),
            ),
        )
        assert await resolve(None, info, message="Hi") is other
        assert calls == ["swap"]

    @pytest.mark.asyncio
    async def test_sync_resolver(self, info):
        def resolver(source, info):
            return "pong"

        resolve = wrap_resolver(resolver, AggregatedCallbacks())
        assert await resolve(None, info) == "pong"

    @pytest.mark.asyncio
    async def test_resolver_sees_meta(self, info):
        async def set_user(value, args, context, info):
            info.meta["user"] = context["user"]
            return value

        async def resolver(source, info):
            assert info.field_name == "echo"
            return info.meta["user"]

        resolve = wrap_resolver(resolver, AggregatedCallbacks(before=(set_user,)))
        assert await resolve(None, info) == "U001"

    @pytest.mark.asyncio
    async def test_error_stage_runs_in_order(self, info, calls):
        async def failing(source, info):
            raise ValueError("boom")

        resolve = wrap_resolver(
            failing,
            AggregatedCallbacks(
                after=(tracking(calls, "after"),),
                error=(tracking(calls, "error 1"), tracking(calls, "error 2")),
            ),
        )
        with pytest.raises(ValueError, match="boom"):
            await resolve(None, info)
        assert calls == ["error 1", "error 2"]

    @pytest.mark.asyncio
    async def test_error_hooks_see_transformed_error(self, info):
        original = ValueError("boom")
        seen = []

        async def failing(source, info):
            raise original

        async def replace_error(error, args, context, info):
            return OperationError(f"wrapped: {error}")

        async def capture(error, args, context, info):
            seen.append(error)
            return error

        resolve = wrap_resolver(
            failing, AggregatedCallbacks(error=(replace_error, capture))
        )
        with pytest.raises(OperationError, match="wrapped: boom") as exc_info:
            await resolve(None, info)
        assert seen == [exc_info.value]
        assert exc_info.value.__cause__ is original

    @pytest.mark.asyncio
    async def test_before_hook_error_routed_to_error_stage(self, info, calls):
        async def abort(value, args, context, info):
            raise RuntimeError("Abort!")

        resolve = wrap_resolver(
            echo,
            AggregatedCallbacks(before=(abort,), error=(tracking(calls, "error"),)),
        )
        with pytest.raises(RuntimeError, match="Abort!"):
            await resolve(None, info, message="Hi")
        assert calls == ["error"]

    @pytest.mark.asyncio
    async def test_logic_error_routed_to_error_stage(self, info):
        seen = []

        async def forgot_return(value, args, context, info):
            pass

        async def capture(error, args, context, info):
            seen.append(type(error))
            return error

        resolve = wrap_resolver(
            echo, AggregatedCallbacks(after=(forgot_return,), error=(capture,))
        )
        with pytest.raises(LogicError):
            await resolve(None, info, message="Hi")
        assert seen == [LogicError]

    @pytest.mark.asyncio
    async def test_error_hook_short_circuit_still_raises(self, info):
        async def failing(source, info):
            raise ValueError("boom")

        async def swallow(error, args, context, info):
            return ShortCircuit()

        resolve = wrap_resolver(failing, AggregatedCallbacks(error=(swallow,)))
        with pytest.raises(OperationError, match="non-error value") as exc_info:
            await resolve(None, info)
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.asyncio
    async def test_meta_is_fresh_per_invocation(self, info):
        metas = []

        async def capture(value, args, context, info):
            metas.append(info.meta)
            info.meta["count"] = info.meta.get("count", 0) + 1
            return value

        resolve = wrap_resolver(echo, AggregatedCallbacks(before=(capture,)))
        await resolve(None, info, message="a")
        await resolve(None, info, message="b")
        assert metas[0] is not metas[1]
        assert metas[0] == {"count": 1}
        assert metas[1] == {"count": 1}

    @pytest.mark.asyncio
    async def test_concurrent_invocations_isolated(self, info):
        seen = []

        async def remember(value, args, context, info):
            info.meta["message"] = args["message"]
            await asyncio.sleep(0)
            return value

        async def check(value, args, context, info):
            await asyncio.sleep(0)
            seen.append((args["message"], info.meta["message"]))
            return value

        resolve = wrap_resolver(echo, AggregatedCallbacks(before=(remember, check)))
        results = await asyncio.gather(
            resolve(None, info, message="first"),
            resolve(None, info, message="second"),
        )
        assert results == ["first", "second"]
        assert sorted(seen) == [("first", "first"), ("second", "second")]


class TestResolveInfoWithMeta:
    def test_delegates_attributes(self, info):
        wrapped = ResolveInfoWithMeta(info)
        assert wrapped.field_name == "echo"
        assert wrapped.context == {"user": "U001"}
        assert wrapped.meta == {}
        assert wrapped.info is info

    def test_missing_attribute_raises(self, info):
        with pytest.raises(AttributeError):
            ResolveInfoWithMeta(info).not_there

"""Tests for ActionInvoker: lookup, confirmation gate, error normalization, map fan-out."""

import asyncio

import pytest

from actionflow.exceptions import InvocationError, ToolNotFound
from actionflow.functions.plugin import build_definition
from actionflow.functions.registry import FunctionRegistry
from actionflow.types import InvocationStatus
from actionflow.workflows.invoker import ActionInvoker


@pytest.fixture
def invoker(registry):
    return ActionInvoker(registry)


class TestInvoke:

    @pytest.mark.asyncio
    async def test_async_function(self, invoker):
        result = await invoker.invoke("get_user_by_id", {"userId": "2"})
        assert result.status == InvocationStatus.SUCCEEDED
        assert result.value["name"] == "Jane"
        assert not result.awaiting_confirmation

    @pytest.mark.asyncio
    async def test_sync_function(self, invoker):
        result = await invoker.invoke("get_file_by_user_id", {"userId": "2"})
        assert [f["fileId"] for f in result.value] == ["f1", "f2"]

    @pytest.mark.asyncio
    async def test_functions_prefix_is_stripped(self, invoker):
        result = await invoker.invoke("functions.get_user_by_id", {"userId": "1"})
        assert result.value["name"] == "John"

    @pytest.mark.asyncio
    async def test_unknown_tool(self, invoker):
        with pytest.raises(ToolNotFound) as exc_info:
            await invoker.invoke("does_not_exist", {})
        assert "does_not_exist" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_inactive_tool(self, invoker, registry):
        registry.set_active("get_user_by_id", False)
        with pytest.raises(ToolNotFound, match="not active"):
            await invoker.invoke("get_user_by_id", {"userId": "1"})

    @pytest.mark.asyncio
    async def test_missing_required_parameter(self, invoker):
        with pytest.raises(InvocationError) as exc_info:
            await invoker.invoke("get_user_by_id", {})
        assert "'userId'" in str(exc_info.value)
        assert "get_user_by_id" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_function_exception_is_normalized(self, invoker):
        with pytest.raises(InvocationError) as exc_info:
            await invoker.invoke("explode", {"extra": 1})
        exc = exc_info.value
        assert str(exc) == "boom"
        assert exc.tool_name == "explode"
        assert exc.params == {"extra": 1}
        assert '"extra": 1' in exc.details["traceback"]
        assert "RuntimeError" in exc.details["traceback"]
        assert isinstance(exc.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_unknown_parameters_dropped_for_strict_signatures(self, invoker):
        result = await invoker.invoke("get_user_by_id", {"userId": "3", "verbose": True})
        assert result.value["name"] == "Ana"

    @pytest.mark.asyncio
    async def test_kwargs_function_receives_everything(self, invoker):
        result = await invoker.invoke("echo", {"a": 1, "b": [2]})
        assert result.value == {"a": 1, "b": [2]}


class TestConfirmationGate:

    @pytest.mark.asyncio
    async def test_unconfirmed_call_is_suspended(self, invoker, outbox):
        result = await invoker.invoke("send_email", {"to": "a@b.c"}, action_id="mail")
        assert result.status == InvocationStatus.AWAITING_CONFIRMATION
        assert result.confirmation.tool == "send_email"
        assert result.confirmation.arguments == {"to": "a@b.c"}
        assert result.confirmation.action_id == "mail"
        assert outbox == []

    @pytest.mark.asyncio
    async def test_confirmed_call_runs(self, invoker, outbox):
        result = await invoker.invoke("send_email", {"to": "a@b.c"}, confirmed=True)
        assert result.value == {"sent": True, "to": "a@b.c"}
        assert outbox == [{"to": "a@b.c", "subject": "Hello"}]

    @pytest.mark.asyncio
    async def test_unconfirmed_map_is_suspended_with_all_arguments(self, invoker, outbox):
        result = await invoker.invoke_many("send_email", [{"to": "a"}, {"to": "b"}])
        assert result.awaiting_confirmation
        assert result.confirmation.arguments == [{"to": "a"}, {"to": "b"}]
        assert outbox == []

    @pytest.mark.asyncio
    async def test_unconfirmed_map_over_nothing_does_not_suspend(self, invoker, outbox):
        result = await invoker.invoke_many("send_email", [], action_id="mail")
        assert result.status == InvocationStatus.SUCCEEDED
        assert result.value == []
        assert result.confirmation is None
        assert outbox == []


class TestInvokeMany:

    @pytest.mark.asyncio
    async def test_results_follow_source_order(self, invoker):
        # Later elements finish first
        params = [{"value": i, "delay": 0.03 - i * 0.01} for i in range(3)]
        result = await invoker.invoke_many("slow_echo", params)
        assert result.value == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_empty_param_sets(self, invoker):
        result = await invoker.invoke_many("slow_echo", [])
        assert result.status == InvocationStatus.SUCCEEDED
        assert result.value == []

    @pytest.mark.asyncio
    async def test_first_failure_in_source_order_is_raised(self, invoker):
        with pytest.raises(InvocationError, match="-2 is not positive"):
            await invoker.invoke_many("check_positive", [{"n": 1}, {"n": -2}, {"n": -3}])

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        in_flight = 0
        peak = 0

        async def track(value: int) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return value

        registry = FunctionRegistry()
        registry.register(build_definition(track), track)
        invoker = ActionInvoker(registry)

        result = await invoker.invoke_many("track", [{"value": i} for i in range(10)], concurrency=3)
        assert result.value == list(range(10))
        assert peak == 3

"""
Tests for emberls/addons/chain.py

Covers:
- Results flow from link to link
- Failing, slow and non-list links leave results untouched
- Every link works on its own copy of the results
- Sync and async callbacks
"""
from __future__ import annotations

import asyncio
import threading
import time
from unittest.mock import Mock

import pytest
from lsprotocol.types import MessageType, Position, TextDocumentIdentifier

from emberls.addons.api import CompletionFunctionParams
from emberls.addons.chain import query_addons_api_chain

ROOT = "/project"


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def server():
    return Mock()


@pytest.fixture
def params():
    return CompletionFunctionParams(
        text_document=TextDocumentIdentifier(uri="file:///project/app/templates/a.hbs"),
        position=Position(line=0, character=0),
        type="template",
        results=[],
    )


def appender(label: str):
    async def on_complete(root, params):
        return params.results + [{"label": label}]

    return on_complete


def logged_errors(server) -> list[str]:
    return [
        call.args[0].message
        for call in server.window_log_message.call_args_list
        if call.args[0].type == MessageType.Error
    ]


# ============================================================================
# Chain behaviour
# ============================================================================

class TestChainFlow:
    @pytest.mark.asyncio
    async def test_empty_chain_returns_seed(self, params):
        params.results = [{"label": "seed"}]

        assert await query_addons_api_chain([], ROOT, params) == [{"label": "seed"}]

    @pytest.mark.asyncio
    async def test_results_accumulate_in_order(self, params):
        result = await query_addons_api_chain(
            [appender("a"), appender("b"), appender("c")], ROOT, params
        )

        assert [item["label"] for item in result] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_link_may_replace_results(self, params):
        async def replace(root, params):
            return [{"label": "only"}]

        result = await query_addons_api_chain([appender("a"), replace], ROOT, params)

        assert result == [{"label": "only"}]

    @pytest.mark.asyncio
    async def test_root_passed_to_each_link(self, params):
        roots = []

        def record(root, params):
            roots.append(root)
            return params.results

        await query_addons_api_chain([record, record], ROOT, params)

        assert roots == [ROOT, ROOT]

    @pytest.mark.asyncio
    async def test_sync_callback(self, params):
        def sync_link(root, params):
            return params.results + ["sync"]

        assert await query_addons_api_chain([sync_link], ROOT, params) == ["sync"]


class TestChainIsolation:
    @pytest.mark.asyncio
    async def test_exception_is_logged_and_skipped(self, params, server):
        async def broken(root, params):
            raise RuntimeError("boom")

        result = await query_addons_api_chain(
            [appender("a"), broken, appender("b")], ROOT, params, server=server
        )

        assert [item["label"] for item in result] == ["a", "b"]
        errors = logged_errors(server)
        assert len(errors) == 1
        assert "Addon API error" in errors[0]
        assert "RuntimeError: boom" in errors[0]
        assert ROOT in errors[0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [None, {"label": "x"}, "x", ("x",)])
    async def test_non_list_is_ignored(self, params, value):
        async def odd(root, params):
            return value

        result = await query_addons_api_chain([appender("a"), odd], ROOT, params)

        assert result == [{"label": "a"}]

    @pytest.mark.asyncio
    async def test_mutation_before_failure_does_not_leak(self, params, server):
        async def mutate_then_fail(root, params):
            params.results.append({"label": "leaked"})
            params.results[0]["label"] = "changed"
            raise ValueError("late failure")

        result = await query_addons_api_chain(
            [appender("a"), mutate_then_fail], ROOT, params, server=server
        )

        assert result == [{"label": "a"}]

    @pytest.mark.asyncio
    async def test_each_link_gets_a_private_copy(self, params):
        seen = []

        async def keep(root, params):
            seen.append(params.results)
            return params.results

        await query_addons_api_chain([appender("a"), keep, keep], ROOT, params)

        assert seen[0] == seen[1]
        assert seen[0] is not seen[1]
        assert seen[0][0] is not seen[1][0]

    @pytest.mark.asyncio
    async def test_seed_is_not_mutated(self, params):
        seed = [{"label": "seed"}]
        params.results = seed

        async def mutate(root, params):
            params.results[0]["label"] = "changed"
            return params.results

        result = await query_addons_api_chain([mutate], ROOT, params)

        assert seed == [{"label": "seed"}]
        assert result == [{"label": "changed"}]

    @pytest.mark.asyncio
    async def test_timeout_is_logged_and_skipped(self, params, server):
        async def slow(root, params):
            await asyncio.sleep(1)
            return ["late"]

        result = await query_addons_api_chain(
            [appender("a"), slow], ROOT, params, server=server, timeout=0.01
        )

        assert result == [{"label": "a"}]
        assert any("timed out" in message for message in logged_errors(server))

    @pytest.mark.asyncio
    async def test_server_taken_from_params(self, params, server):
        params.server = server

        def broken(root, params):
            raise KeyError("missing")

        await query_addons_api_chain([broken], ROOT, params)

        assert len(logged_errors(server)) == 1

    @pytest.mark.asyncio
    async def test_uncopyable_results_are_dropped(self, params, server):
        async def lock_holder(root, params):
            return params.results + [{"label": "x", "data": threading.Lock()}]

        result = await query_addons_api_chain(
            [appender("a"), lock_holder, appender("b")], ROOT, params, server=server
        )

        assert [item["label"] for item in result] == ["a", "b"]
        errors = logged_errors(server)
        assert len(errors) == 1
        assert "results dropped" in errors[0]

    @pytest.mark.asyncio
    async def test_uncopyable_seed_fails_links_not_the_chain(self, params, server):
        params.results = [threading.Lock()]

        result = await query_addons_api_chain([appender("a")], ROOT, params, server=server)

        assert len(result) == 1
        assert len(logged_errors(server)) == 1

    @pytest.mark.asyncio
    async def test_sync_link_deadline(self, params, server):
        def slow_sync(root, params):
            time.sleep(0.5)
            return ["late"]

        started = time.monotonic()
        result = await query_addons_api_chain(
            [appender("a"), slow_sync], ROOT, params, server=server, timeout=0.05
        )

        assert time.monotonic() - started < 0.4
        assert result == [{"label": "a"}]
        assert any("timed out" in message for message in logged_errors(server))

    @pytest.mark.asyncio
    async def test_sync_link_returning_coroutine(self, params):
        async def handler(root, params):
            return params.results + ["async"]

        def wrapper(root, params):
            return handler(root, params)

        assert await query_addons_api_chain([wrapper], ROOT, params) == ["async"]

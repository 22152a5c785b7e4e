"""
Addon API chain execution.

Runs an ordered list of resolve functions over an evolving result list.
Each link sees a private deep copy of the current results; a link that
fails, times out or returns a non-list leaves the results untouched.
Plain (non-async) links run in a worker thread; a link that misses its
deadline is abandoned, not interrupted.
"""
from __future__ import annotations

import asyncio
import copy
import dataclasses
import inspect
from typing import TYPE_CHECKING, Any, Sequence

from lsprotocol.types import LogMessageParams, MessageType

from emberls.addons.api import APIParams, ResolveFunction

if TYPE_CHECKING:
    from emberls.lsp.ember_language_server import EmberLanguageServer


def _callback_name(callback: ResolveFunction) -> str:
    name = getattr(callback, "__qualname__", None) or getattr(callback, "__name__", None)
    module = getattr(callback, "__module__", None)
    if name and module:
        return f"{module}.{name}"
    return name or repr(callback)


async def _invoke(callback: ResolveFunction, root: str, params: APIParams) -> Any:
    if inspect.iscoroutinefunction(callback):
        result = callback(root, params)
    else:
        # Plain functions run in a worker thread, under the same deadline.
        result = await asyncio.to_thread(callback, root, params)
    if inspect.isawaitable(result):
        result = await result
    return result


async def query_addons_api_chain(
    callbacks: Sequence[ResolveFunction],
    root: str,
    params: APIParams,
    *,
    server: EmberLanguageServer | None = None,
    timeout: float | None = None,
) -> list[Any]:
    """
    Run ``callbacks`` in order and return the last accepted result list.

    Args:
        callbacks: Resolve functions ``(root, params) -> list``, sync or async.
        root: Project root passed to every callback.
        params: Request parameters; ``params.results`` seeds the chain.
        server: Used for error logging, if given.
        timeout: Per-link deadline in seconds; ``None`` waits indefinitely.
    """
    last_result: list[Any] = list(params.results or [])
    server = server or params.server

    for callback in callbacks:
        name = _callback_name(callback)
        try:
            link_params = dataclasses.replace(params, results=copy.deepcopy(last_result))
            if timeout is None:
                temp_result = await _invoke(callback, root, link_params)
            else:
                temp_result = await asyncio.wait_for(
                    _invoke(callback, root, link_params), timeout
                )
        except asyncio.TimeoutError:
            _log_error(
                server,
                f"Addon API error in {name} for {root}: timed out after {timeout}s",
            )
            continue
        except Exception as e:
            _log_error(
                server,
                f"Addon API error in {name} for {root}: {type(e).__name__}: {e}",
            )
            continue

        # API must return a list
        if not isinstance(temp_result, list):
            continue

        # last_result is always a private copy that can be copied again
        try:
            last_result = copy.deepcopy(temp_result)
        except Exception as e:
            _log_error(
                server,
                f"Addon API error in {name} for {root}: results dropped, "
                f"{type(e).__name__}: {e}",
            )

    return last_result


def _log_error(server: EmberLanguageServer | None, message: str) -> None:
    if server:
        server.window_log_message(
            LogMessageParams(type=MessageType.Error, message=message)
        )

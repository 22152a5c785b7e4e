"""
Text Synchronization Manager

Handles LSP text sync notifications and lets other components hook into
document open and save events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Awaitable, Callable

from lsprotocol.types import (
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    LogMessageParams,
    MessageType,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
)

if TYPE_CHECKING:
    from emberls.lsp.ember_language_server import EmberLanguageServer


OnOpenHook = Callable[[DidOpenTextDocumentParams], Awaitable[None]]
OnSaveHook = Callable[[DidSaveTextDocumentParams], Awaitable[None]]


class TextSyncManager:
    """
    Broadcasts document lifecycle events to registered hooks.

    - Hooks run in registration order
    - A failing hook is logged and does not stop the others

    Usage:
        text_sync = TextSyncManager(server)
        text_sync.register_handlers()

        # Projects register themselves on open and reload on package.json save
        text_sync.add_on_save_hook(project_roots._on_manifest_saved)
    """

    def __init__(self, server: EmberLanguageServer) -> None:
        self.server = server

        self._on_open_hooks: list[OnOpenHook] = []
        self._on_save_hooks: list[OnSaveHook] = []

    def add_on_open_hook(self, hook: OnOpenHook) -> None:
        """Register a hook for document open events."""
        self._on_open_hooks.append(hook)

    def add_on_save_hook(self, hook: OnSaveHook) -> None:
        """
        Register a hook for document save events.

        Saves are user-initiated, so hooks may do heavier work here, such
        as re-resolving a project's addons.
        """
        self._on_save_hooks.append(hook)

    async def _broadcast(self, hooks: list, params, event: str) -> None:
        for hook in hooks:
            try:
                await hook(params)
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Error in {event} hook {getattr(hook, '__name__', hook)}: "
                                f"{type(e).__name__}: {e}"
                    )
                )

    async def broadcast_on_open(self, params: DidOpenTextDocumentParams) -> None:
        await self._broadcast(self._on_open_hooks, params, "on_open")

    async def broadcast_on_save(self, params: DidSaveTextDocumentParams) -> None:
        await self._broadcast(self._on_save_hooks, params, "on_save")

    def register_handlers(self) -> None:
        """
        Register textDocument/didOpen and textDocument/didSave handlers.

        Call once during initialization, before components add hooks.
        """

        @self.server.feature(TEXT_DOCUMENT_DID_OPEN)
        async def did_open(
            ls: EmberLanguageServer,
            params: DidOpenTextDocumentParams,
        ) -> None:
            # pygls has already stored the document in ls.workspace
            await self.broadcast_on_open(params)

        @self.server.feature(TEXT_DOCUMENT_DID_SAVE)
        async def did_save(
            ls: EmberLanguageServer,
            params: DidSaveTextDocumentParams,
        ) -> None:
            await self.broadcast_on_save(params)

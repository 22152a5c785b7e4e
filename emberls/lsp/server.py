from __future__ import annotations

from lsprotocol.types import (
    INITIALIZE,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DEFINITION,
    TEXT_DOCUMENT_REFERENCES,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    DefinitionParams,
    InitializeParams,
    LogMessageParams,
    MessageType,
    ReferenceParams,
)

from emberls.config import ServerSettings
from emberls.lsp.ember_language_server import EmberLanguageServer
from emberls.lsp.features.completion import provide_completion
from emberls.lsp.features.navigation import provide_definition, provide_references
from emberls.lsp.text_sync_manager import TextSyncManager
from emberls.syntax.focus_path import AstProvider
from emberls.workspace.cache import IndexCache, ProjectIndex
from emberls.workspace.layout import ProjectLayout, StaticProjectLayout
from emberls.workspace.project_roots import ProjectRoots

# Characters that open a new completion context in templates and scripts
TRIGGER_CHARACTERS = [".", ":", "=", "/", "{", "(", "<", "@", "'", '"']


def create_server(
    layout: ProjectLayout | None = None,
    ast_provider: AstProvider | None = None,
) -> EmberLanguageServer:
    """
    Creates and returns a configured Language Server instance.

    Args:
        layout: Listing functions for project symbols. Defaults to an
            empty StaticProjectLayout.
        ast_provider: Parser producing JSON-shaped syntax trees for
            templates and scripts. Without one, only addon providers can
            contribute completions.

    The LanguageServer class from pygls handles:
    - JSON-RPC communication with clients (editors)
    - Request/response lifecycle
    - Notifications and event handling
    """
    server = EmberLanguageServer("emberls", "0.1.0")
    server.layout = layout or StaticProjectLayout()
    server.ast_provider = ast_provider

    # Text sync handlers are registered up front; hooks are added on initialize.
    server.text_sync_manager = TextSyncManager(server)
    server.text_sync_manager.register_handlers()

    @server.feature(INITIALIZE)
    def initialize(ls: EmberLanguageServer, params: InitializeParams):
        """
        Initialize the server and set up any necessary state.
        """
        ls.settings = ServerSettings.from_initialization_options(
            params.initialization_options
        )
        ls.project_index = ProjectIndex(
            ls.layout, IndexCache(), settings=ls.settings, server=ls
        )
        ls.project_roots = ProjectRoots(ls.project_index, server=ls)
        ls.project_roots.register_text_sync_hooks()

        ls.window_log_message(
            LogMessageParams(
                MessageType.Info,
                f"emberls initialized (addon timeout: {ls.settings.addon_timeout}s)",
            )
        )

    @server.feature(
        TEXT_DOCUMENT_COMPLETION,
        CompletionOptions(trigger_characters=TRIGGER_CHARACTERS),
    )
    async def completion(ls: EmberLanguageServer, params: CompletionParams):
        if ls.project_roots:
            return await provide_completion(ls, params)
        return CompletionList(is_incomplete=False, items=[])

    @server.feature(TEXT_DOCUMENT_DEFINITION)
    async def definition(ls: EmberLanguageServer, params: DefinitionParams):
        if ls.project_roots:
            return await provide_definition(ls, params)
        return None

    @server.feature(TEXT_DOCUMENT_REFERENCES)
    async def references(ls: EmberLanguageServer, params: ReferenceParams):
        if ls.project_roots:
            return await provide_references(ls, params)
        return None

    return server

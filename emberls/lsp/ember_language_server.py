from __future__ import annotations

from pygls.lsp.server import LanguageServer

from emberls.config import ServerSettings
from emberls.lsp.text_sync_manager import TextSyncManager
from emberls.syntax.focus_path import AstProvider
from emberls.workspace.cache import ProjectIndex
from emberls.workspace.layout import ProjectLayout
from emberls.workspace.project_roots import ProjectRoots


class EmberLanguageServer(LanguageServer):
    """
    Custom Language Server with Ember-specific attributes.

    Attributes:
        settings: Tunables read from initialization options
        layout: Raw listing functions for project symbols
        ast_provider: Parses a document into a JSON-shaped syntax tree
        project_index: TTL cache over the layout listings
        project_roots: Registry of projects and their provider chains
    """

    def __init__(self, name: str, version: str):
        super().__init__(name, version)

        self.settings: ServerSettings = ServerSettings()
        self.layout: ProjectLayout | None = None
        self.ast_provider: AstProvider | None = None
        self.project_index: ProjectIndex | None = None
        self.project_roots: ProjectRoots | None = None
        self.text_sync_manager: TextSyncManager | None = None

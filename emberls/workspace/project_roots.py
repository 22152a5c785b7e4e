"""
Project registry.

Maps documents to their Ember project and keeps each project's provider
chains, which are resolved when the project is first seen and rebuilt
when its package.json is saved.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from lsprotocol.types import DidSaveTextDocumentParams, LogMessageParams, MessageType
from pygls.uris import to_fs_path

from emberls.addons.api import ProjectProviders
from emberls.addons.dag import AddonOrderingCycleError
from emberls.addons.resolver import ExtensionResolver, init_builtin_providers
from emberls.utils.find_files import find_project_root

if TYPE_CHECKING:
    from emberls.lsp.ember_language_server import EmberLanguageServer
    from emberls.workspace.cache import ProjectIndex


@dataclass
class Project:
    root: Path
    providers: ProjectProviders = field(default_factory=ProjectProviders)
    # Set when the addon graph could not be built (e.g. ordering cycle)
    configuration_error: str | None = None


class ProjectRoots:
    """
    Registry of known projects.

    Usage:
        roots = ProjectRoots(index, server=ls)
        project = roots.project_for_uri(params.text_document.uri)
        if project:
            chain = project.providers.completion_providers
    """

    def __init__(
        self,
        index: ProjectIndex,
        server: EmberLanguageServer | None = None,
        resolver: ExtensionResolver | None = None,
    ) -> None:
        self.index = index
        self.server = server
        self.resolver = resolver or ExtensionResolver(server)
        self.projects: dict[Path, Project] = {}

    def project_for_uri(self, uri: str) -> Project | None:
        path = to_fs_path(uri)
        if not path:
            return None
        return self.project_for_path(Path(path))

    def project_for_path(self, path: Path) -> Project | None:
        # Prefer the most specific registered root (in-repo addons live inside apps).
        for root in sorted(self.projects, key=lambda p: len(p.parts), reverse=True):
            if path == root or root in path.parents:
                return self.projects[root]

        root = find_project_root(path)
        if root is None:
            return None
        return self.register(root)

    def register(self, root: Path) -> Project:
        """Register a project root, resolving its providers once."""
        project = self.projects.get(root)
        if project is not None:
            return project

        project = self._build(root)
        self.projects[root] = project
        self.index.init_registry(str(root))
        self._log(MessageType.Info, f"Project registered: {root}")
        return project

    def reload(self, root: Path) -> Project:
        """Rebuild the providers of a project after its addon set changed."""
        self.index.invalidate(str(root))
        project = self._build(root)
        self.projects[root] = project
        self._log(MessageType.Info, f"Project providers reloaded: {root}")
        return project

    def _build(self, root: Path) -> Project:
        builtin = init_builtin_providers(self.index)
        try:
            providers = self.resolver.collect_project_providers(root, builtin)
        except AddonOrderingCycleError as e:
            self._log(MessageType.Error, f"Invalid addon configuration in {root}: {e}")
            return Project(root=root, providers=builtin, configuration_error=str(e))
        return Project(root=root, providers=providers)

    def register_text_sync_hooks(self) -> None:
        if not self.server or not self.server.text_sync_manager:
            return
        text_sync = self.server.text_sync_manager
        text_sync.add_on_open_hook(self._on_document_opened)
        text_sync.add_on_save_hook(self._on_manifest_saved)

    async def _on_document_opened(self, params) -> None:
        self.project_for_uri(params.text_document.uri)

    async def _on_manifest_saved(self, params: DidSaveTextDocumentParams) -> None:
        uri = params.text_document.uri
        if not uri.endswith("/package.json"):
            return
        path = to_fs_path(uri)
        if not path:
            return
        root = Path(path).parent
        if root in self.projects:
            self.reload(root)

    def _log(self, level: MessageType, message: str) -> None:
        if self.server:
            self.server.window_log_message(LogMessageParams(type=level, message=message))

"""
Extension resolver.

Discovers addons that declare a language server extension anywhere in a
project's dependency tree, orders them by their before/after constraints
and turns them into per-operation provider chains.
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from lsprotocol.types import LogMessageParams, MessageType

from emberls.addons.api import Operation, ProjectProviders, ResolveFunction
from emberls.addons.dag import OrderedExtensionGraph
from emberls.addons.manifest import build_descriptor, get_candidate_roots, get_package_json
from emberls.addons.provider import AddonDescriptor, AddonLoadError, Provider

if TYPE_CHECKING:
    from emberls.lsp.ember_language_server import EmberLanguageServer
    from emberls.workspace.cache import ProjectIndex


def init_builtin_providers(index: ProjectIndex) -> ProjectProviders:
    """Baseline links that head every project's chains."""
    from emberls.builtin.script_completion import ScriptCompletionProvider
    from emberls.builtin.template_completion import TemplateCompletionProvider

    script_completion = ScriptCompletionProvider(index)
    template_completion = TemplateCompletionProvider(index)
    return ProjectProviders(
        completion_providers=[script_completion.on_complete, template_completion.on_complete],
        definition_providers=[],
        references_providers=[],
    )


class ExtensionResolver:
    """
    Builds ProjectProviders for a project root.

    Owns one Provider per discovered addon, keyed by ``(root, name)`` so
    projects sharing a resolver keep their own providers. Debug addons get
    their Provider reloaded before each call; all others are loaded once at
    resolution.

    Usage:
        resolver = ExtensionResolver(server)
        providers = resolver.collect_project_providers(root)
    """

    def __init__(
        self,
        server: EmberLanguageServer | None = None,
        provider_factory: Callable[[AddonDescriptor], Provider] = Provider,
    ) -> None:
        self.server = server
        self.provider_factory = provider_factory
        self.providers: dict[tuple[str, str], Provider] = {}

    def discover(self, root: Path) -> OrderedExtensionGraph[AddonDescriptor]:
        """
        Read manifests of all candidate packages into an ordering graph.

        Raises:
            AddonOrderingCycleError: if before/after constraints form a cycle.
        """
        graph: OrderedExtensionGraph[AddonDescriptor] = OrderedExtensionGraph()
        for package_root in get_candidate_roots(root):
            info = get_package_json(package_root)
            if not info and (package_root / "package.json").is_file():
                self._log(
                    MessageType.Warning,
                    f"els-addon-api: unable to read {package_root / 'package.json'}",
                )
                continue
            descriptor = build_descriptor(package_root, info)
            if descriptor is None:
                continue
            if not descriptor.handler_module_path.is_file():
                self._log(
                    MessageType.Warning,
                    f"els-addon-api: entry {descriptor.handler_module_path} "
                    f"not found for {descriptor.name}",
                )
                continue
            graph.add(
                descriptor.name,
                descriptor,
                before=descriptor.declared_before,
                after=descriptor.declared_after,
            )
        return graph

    def collect_project_providers(
        self, root: str | Path, builtin: ProjectProviders | None = None
    ) -> ProjectProviders:
        """
        Resolve the provider chains for ``root``.

        Built-in providers (if given) come first, followed by addon
        providers in topological order.

        Raises:
            AddonOrderingCycleError: if before/after constraints form a cycle.
        """
        root_path = Path(root)
        root_key = str(root_path)
        graph = self.discover(root_path)
        result = ProjectProviders(
            completion_providers=list(builtin.completion_providers) if builtin else [],
            definition_providers=list(builtin.definition_providers) if builtin else [],
            references_providers=list(builtin.references_providers) if builtin else [],
        )
        self.providers = {
            key: provider for key, provider in self.providers.items() if key[0] != root_key
        }

        def add_addon(name: str, descriptor: AddonDescriptor) -> None:
            provider = self.provider_factory(descriptor)
            self.providers[(root_key, name)] = provider

            if descriptor.debug_reload_enabled:
                self._log(
                    MessageType.Info,
                    f"els-addon-api: debug mode enabled for {descriptor.package_root}, "
                    "for all requests resolvers will be reloaded.",
                )
                for operation in Operation:
                    if descriptor.capabilities.supports(operation):
                        result.for_operation(operation).append(
                            self._debug_link(provider, operation)
                        )
                return

            if not self._load(provider):
                return
            for operation in Operation:
                handler = provider.handler(operation)
                if handler is not None:
                    result.for_operation(operation).append(handler)

        graph.each(add_addon)
        return result

    def _load(self, provider: Provider) -> bool:
        try:
            provider.reload()
        except AddonLoadError as e:
            self._log(MessageType.Error, f"els-addon-api: {e}")
            return False
        return True

    def _debug_link(self, provider: Provider, operation: Operation) -> ResolveFunction:
        def resolve(root: str, params: Any) -> Any:
            if not self._load(provider):
                return params.results
            handler = provider.handler(operation)
            if handler is None:
                return params.results
            return handler(root, params)

        resolve.__name__ = f"{provider.descriptor.name}:{operation.handler_name}"
        resolve.__qualname__ = resolve.__name__
        return resolve

    def _log(self, level: MessageType, message: str) -> None:
        if self.server:
            self.server.window_log_message(LogMessageParams(type=level, message=message))

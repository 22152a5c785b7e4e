"""
Built-in template completion provider.

Classifies the cursor position in a template and adds the project-specific
candidates for that position:

- Components (``<Foo``, ``{{foo}}``, ``{{#foo}}``)
- Component arguments (``<Foo @na``)
- Helpers and modifiers
- Local (``this.*``) and argument (``@*``) paths
- Block params in scope (``as |item|``)
- Route names (``{{link-to}}``, ``<LinkTo @route>``)
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Callable

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    LogMessageParams,
    MessageType,
)

from emberls.addons.api import CompletionFunctionParams
from emberls.builtin.keywords import (
    BLOCK_ITEMS,
    MODIFIER_ITEMS,
    MUSTACHE_ITEMS,
    SUB_EXPRESSION_ITEMS,
    builtin_modifiers,
)
from emberls.context.completion_classifier import CompletionContextClassifier
from emberls.context.types import CompletionContext
from emberls.syntax.ast_helpers import (
    get_local_scope,
    has_node_type,
    is_scoped_path_expression,
)
from emberls.syntax.focus_path import FocusPath
from emberls.utils.items import uniq_by_label, with_label
from emberls.utils.normalizers import normalize_to_angle_bracket_component

if TYPE_CHECKING:
    from emberls.lsp.ember_language_server import EmberLanguageServer
    from emberls.workspace.cache import ProjectIndex

# Tags whose arguments are not backed by a project template
NON_INTROSPECTABLE_TAGS = frozenset({"Input", "Textarea", "LinkTo"})


def is_argument_name(name: str) -> bool:
    return name.startswith("@")


class TemplateCompletionProvider:
    """Completion for ``template`` requests, backed by a ProjectIndex."""

    def __init__(
        self,
        index: ProjectIndex,
        classifier: CompletionContextClassifier | None = None,
    ) -> None:
        self.index = index
        self.classifier = classifier or CompletionContextClassifier()
        self._handlers: dict[
            CompletionContext,
            Callable[[str, FocusPath, str, str], list[CompletionItem]],
        ] = {
            CompletionContext.ANGLE_COMPONENT: self._complete_angle_component,
            CompletionContext.COMPONENT_ARGUMENT: self._complete_component_argument,
            CompletionContext.LOCAL_PATH: self._complete_local_path,
            CompletionContext.ARGUMENT_PATH: self._complete_argument_path,
            CompletionContext.MUSTACHE_PATH: self._complete_mustache_path,
            CompletionContext.BLOCK_PATH: self._complete_block_path,
            CompletionContext.SUB_EXPRESSION_PATH: self._complete_sub_expression_path,
            CompletionContext.PATH_EXPRESSION: self._complete_path_expression,
            CompletionContext.ROUTE_TARGET: self._complete_route_target,
            CompletionContext.MODIFIER_PATH: self._complete_modifier_path,
        }

    # ===== Candidate assembly =====

    def get_all_angle_bracket_components(self, root: str) -> list[CompletionItem]:
        addon_components = self.index.addon_items(root, "component")
        items = [
            *self.index.mu_components(root),
            *self.index.components(root),
            *self.index.pods_components(root),
            *addon_components,
        ]
        return uniq_by_label(
            with_label(item, normalize_to_angle_bracket_component(item.label))
            for item in items
        )

    def get_local_path_expression_candidates(
        self, root: str, uri: str, original_text: str
    ) -> list[CompletionItem]:
        return list(self.index.template_context(root, uri, original_text))

    def get_mustache_path_candidates(self, root: str) -> list[CompletionItem]:
        return uniq_by_label(
            [
                *self.index.components(root),
                *self.index.mu_components(root),
                *self.index.pods_components(root),
                *self.index.helpers(root),
                *self.index.addon_items(root, "component", "helper"),
            ]
        )

    def get_block_path_candidates(self, root: str) -> list[CompletionItem]:
        return uniq_by_label(
            [
                *self.index.components(root),
                *self.index.mu_components(root),
                *self.index.pods_components(root),
                *self.index.addon_items(root, "component"),
            ]
        )

    def get_sub_expression_path_candidates(self, root: str) -> list[CompletionItem]:
        return uniq_by_label(
            [
                *self.index.helpers(root),
                *self.index.addon_items(root, "helper"),
            ]
        )

    def get_scoped_values(self, focus_path: FocusPath) -> list[CompletionItem]:
        items = []
        for scoped in get_local_scope(focus_path):
            node = scoped.node
            if has_node_type(node, "ElementNode"):
                block_source = f"<{node.get('tag')} as |...|>"
            else:
                parent = scoped.path.parent or {}
                head = (parent.get("path") or {}).get("original")
                block_source = f"{{{{#{head} as |...|}}}}"
            items.append(
                CompletionItem(
                    label=scoped.name,
                    kind=CompletionItemKind.Variable,
                    detail=f"Param from {block_source}",
                )
            )
        return items

    # ===== Context handlers =====

    def _scoped_values_if_any(self, focus_path: FocusPath) -> list[CompletionItem]:
        if is_scoped_path_expression(focus_path):
            return self.get_scoped_values(focus_path)
        return []

    def _complete_angle_component(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str
    ) -> list[CompletionItem]:
        return [
            *self.get_scoped_values(focus_path),
            *self.get_all_angle_bracket_components(root),
        ]

    def _complete_component_argument(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str
    ) -> list[CompletionItem]:
        element = focus_path.parent or {}
        tag = element.get("tag") or ""
        if (
            not tag
            or tag in NON_INTROSPECTABLE_TAGS
            or is_argument_name(tag)
            or tag.startswith(":")
            or "." in tag
        ):
            return []

        templates = [
            Path(p) for p in self.index.layout.component_template_paths(root, tag)
        ]
        existing = [p for p in templates if p.is_file()]
        if not existing:
            return []

        template = existing[0]
        content = template.read_text(encoding="utf-8")
        focused = focus_path.node
        existing_attributes = {
            attr.get("name")
            for attr in element.get("attributes") or []
            if attr is not focused and is_argument_name(str(attr.get("name", "")))
        }

        results = []
        for candidate in self.get_local_path_expression_candidates(
            root, str(template), content
        ):
            name = candidate.label.split(".")[0]
            if is_argument_name(name) and name not in existing_attributes:
                results.append(
                    CompletionItem(label=name, kind=candidate.kind, detail=candidate.detail)
                )
        return results

    def _complete_local_path(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str
    ) -> list[CompletionItem]:
        return [
            item
            for item in self.get_local_path_expression_candidates(root, uri, original_text)
            if item.label.startswith("this.")
        ]

    def _complete_argument_path(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str
    ) -> list[CompletionItem]:
        return [
            item
            for item in self.get_local_path_expression_candidates(root, uri, original_text)
            if is_argument_name(item.label)
        ]

    def _complete_mustache_path(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str
    ) -> list[CompletionItem]:
        return [
            *self._scoped_values_if_any(focus_path),
            *self.get_local_path_expression_candidates(root, uri, original_text),
            *self.get_mustache_path_candidates(root),
            *MUSTACHE_ITEMS,
        ]

    def _complete_block_path(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str
    ) -> list[CompletionItem]:
        return [
            *self._scoped_values_if_any(focus_path),
            *self.get_block_path_candidates(root),
            *BLOCK_ITEMS,
        ]

    def _complete_sub_expression_path(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str
    ) -> list[CompletionItem]:
        return [
            *self.get_sub_expression_path_candidates(root),
            *SUB_EXPRESSION_ITEMS,
        ]

    def _complete_path_expression(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str
    ) -> list[CompletionItem]:
        return [
            *self._scoped_values_if_any(focus_path),
            *self.get_local_path_expression_candidates(root, uri, original_text),
        ]

    def _complete_route_target(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str
    ) -> list[CompletionItem]:
        return list(self.index.routes(root))

    def _complete_modifier_path(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str
    ) -> list[CompletionItem]:
        return [
            *self.index.modifiers(root),
            *self.index.addon_items(root, "modifier"),
            *MODIFIER_ITEMS,
            *builtin_modifiers(),
        ]

    # ===== Entry point =====

    def candidates_for(
        self, root: str, focus_path: FocusPath, uri: str, original_text: str = ""
    ) -> list[CompletionItem]:
        """Deduplicated candidates for the context detected at ``focus_path``."""
        context = self.classifier.classify(focus_path)
        handler = self._handlers.get(context)
        if handler is None:
            return []
        return uniq_by_label(handler(root, focus_path, uri, original_text))

    async def on_complete(
        self, root: str, params: CompletionFunctionParams
    ) -> list[CompletionItem]:
        if params.type != "template" or params.focus_path is None:
            return params.results

        completions = list(params.results)
        try:
            candidates = self.candidates_for(
                root,
                params.focus_path,
                params.text_document.uri,
                params.original_text or "",
            )
        except Exception as e:
            self._log_error(params.server, f"Template completion error: {type(e).__name__}: {e}")
            return completions

        if not candidates:
            return completions
        return uniq_by_label([*completions, *candidates])

    def _log_error(self, server: EmberLanguageServer | None, message: str) -> None:
        if server:
            server.window_log_message(
                LogMessageParams(type=MessageType.Error, message=message)
            )

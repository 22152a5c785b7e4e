"""
Built-in script completion provider.

Suggests model names in store lookups (``this.store.findRecord('us|')``)
and route names in transitions (``this.transitionTo('po|')``).
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from lsprotocol.types import CompletionItem, LogMessageParams, MessageType

from emberls.addons.api import CompletionFunctionParams
from emberls.syntax.ast_helpers import is_route_lookup, is_store_model_lookup
from emberls.utils.items import uniq_by_label

if TYPE_CHECKING:
    from emberls.workspace.cache import ProjectIndex

MAX_RESULTS = 40


def filter_by_prefix(
    items: list[CompletionItem], prefix: str, limit: int = MAX_RESULTS
) -> list[CompletionItem]:
    """Keep labels containing ``prefix``; labels starting with it rank first."""
    query = prefix.lower()
    matches = [item for item in items if query in item.label.lower()]
    matches.sort(key=lambda item: not item.label.lower().startswith(query))
    return matches[:limit]


class ScriptCompletionProvider:
    """Completion for ``script`` requests, backed by a ProjectIndex."""

    def __init__(self, index: ProjectIndex) -> None:
        self.index = index

    def candidates_for(self, root: str, params: CompletionFunctionParams) -> list[CompletionItem]:
        focus_path = params.focus_path
        if focus_path is None:
            return []

        if is_store_model_lookup(focus_path):
            candidates = self.index.models(root)
        elif is_route_lookup(focus_path):
            candidates = self.index.routes(root)
        else:
            return []

        text_prefix = str(focus_path.node.get("value") or "")
        return filter_by_prefix(uniq_by_label(candidates), text_prefix)

    async def on_complete(
        self, root: str, params: CompletionFunctionParams
    ) -> list[CompletionItem]:
        if params.type != "script":
            return params.results

        try:
            candidates = self.candidates_for(root, params)
        except Exception as e:
            if params.server:
                params.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Script completion error: {type(e).__name__}: {e}",
                    )
                )
            return params.results

        if not candidates:
            return params.results
        return uniq_by_label([*params.results, *candidates])

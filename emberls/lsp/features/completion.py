"""
Completion (Autocomplete) feature.

Builds the request context (project, request type, focus path) and runs
the project's completion chain: built-in providers first, then addons.
"""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from lsprotocol.converters import get_converter
from lsprotocol.types import (
    CompletionItem,
    CompletionList,
    CompletionParams,
    LogMessageParams,
    MessageType,
)

from emberls.addons.api import CompletionFunctionParams, RequestType
from emberls.addons.chain import query_addons_api_chain
from emberls.syntax.focus_path import FocusPath

if TYPE_CHECKING:
    from emberls.lsp.ember_language_server import EmberLanguageServer

TEMPLATE_EXTENSIONS = frozenset({".hbs", ".handlebars"})
SCRIPT_EXTENSIONS = frozenset({".js", ".ts"})

_converter = get_converter()


def request_type_for(uri: str) -> RequestType | None:
    suffix = PurePosixPath(uri).suffix.lower()
    if suffix in TEMPLATE_EXTENSIONS:
        return "template"
    if suffix in SCRIPT_EXTENSIONS:
        return "script"
    return None


def build_focus_path(
    ls: EmberLanguageServer, uri: str, text: str, request_type: RequestType, position
) -> FocusPath | None:
    if ls.ast_provider is None:
        return None
    try:
        ast = ls.ast_provider(uri, text, request_type)
    except Exception as e:
        ls.window_log_message(
            LogMessageParams(
                type=MessageType.Warning,
                message=f"Unable to parse {uri}: {type(e).__name__}: {e}",
            )
        )
        return None
    if ast is None:
        return None
    return FocusPath.to_position(ast, position)


def to_completion_item(item: Any) -> CompletionItem | None:
    """Coerce an addon result (object or plain dict) into a CompletionItem."""
    if isinstance(item, CompletionItem):
        return item
    if isinstance(item, dict) and "label" in item:
        return _converter.structure(item, CompletionItem)
    return None


async def provide_completion(
    ls: EmberLanguageServer, params: CompletionParams
) -> CompletionList:
    empty = CompletionList(is_incomplete=False, items=[])

    uri = params.text_document.uri
    request_type = request_type_for(uri)
    if request_type is None or ls.project_roots is None:
        return empty

    project = ls.project_roots.project_for_uri(uri)
    if project is None:
        return empty

    document = ls.workspace.get_text_document(uri)
    text = document.source
    focus_path = build_focus_path(ls, uri, text, request_type, params.position)

    api_params = CompletionFunctionParams(
        text_document=params.text_document,
        position=params.position,
        server=ls,
        type=request_type,
        focus_path=focus_path,
        original_text=text,
        results=[],
    )
    results = await query_addons_api_chain(
        project.providers.completion_providers,
        str(project.root),
        api_params,
        server=ls,
        timeout=ls.settings.addon_timeout,
    )

    items = []
    for result in results:
        try:
            item = to_completion_item(result)
        except Exception as e:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Warning,
                    message=f"Dropping malformed completion item {result!r}: {e}",
                )
            )
            continue
        if item is not None:
            items.append(item)

    return CompletionList(is_incomplete=False, items=items)


"""
Definition and references features.

Both are served entirely by addon chains; there are no built-in
definition or reference providers.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lsprotocol.converters import get_converter
from lsprotocol.types import DefinitionParams, Location, ReferenceParams

from emberls.addons.api import DefinitionFunctionParams, ReferenceFunctionParams
from emberls.addons.chain import query_addons_api_chain
from emberls.lsp.features.completion import build_focus_path, request_type_for

if TYPE_CHECKING:
    from emberls.lsp.ember_language_server import EmberLanguageServer

_converter = get_converter()


def to_locations(results: list[Any]) -> list[Location]:
    locations = []
    for result in results:
        if isinstance(result, Location):
            locations.append(result)
        elif isinstance(result, dict):
            locations.append(_converter.structure(result, Location))
    return locations


async def provide_definition(
    ls: EmberLanguageServer, params: DefinitionParams
) -> list[Location] | None:
    uri = params.text_document.uri
    request_type = request_type_for(uri)
    if request_type is None or ls.project_roots is None:
        return None

    project = ls.project_roots.project_for_uri(uri)
    if project is None or not project.providers.definition_providers:
        return None

    text = ls.workspace.get_text_document(uri).source
    api_params = DefinitionFunctionParams(
        text_document=params.text_document,
        position=params.position,
        server=ls,
        type=request_type,
        focus_path=build_focus_path(ls, uri, text, request_type, params.position),
        original_text=text,
        results=[],
    )
    results = await query_addons_api_chain(
        project.providers.definition_providers,
        str(project.root),
        api_params,
        server=ls,
        timeout=ls.settings.addon_timeout,
    )
    return to_locations(results) or None


async def provide_references(
    ls: EmberLanguageServer, params: ReferenceParams
) -> list[Location] | None:
    uri = params.text_document.uri
    if ls.project_roots is None:
        return None

    project = ls.project_roots.project_for_uri(uri)
    if project is None or not project.providers.references_providers:
        return None

    api_params = ReferenceFunctionParams(
        text_document=params.text_document,
        position=params.position,
        server=ls,
        results=[],
    )
    results = await query_addons_api_chain(
        project.providers.references_providers,
        str(project.root),
        api_params,
        server=ls,
        timeout=ls.settings.addon_timeout,
    )
    return to_locations(results) or None

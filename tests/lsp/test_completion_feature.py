"""
Tests for emberls/lsp/features/completion.py and navigation.py

The server is a Mock carrying just the attributes the features read; the
project registry returns a fixed Project.
"""
from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest
from lsprotocol.types import (
    CompletionItem,
    CompletionParams,
    DefinitionParams,
    Location,
    MessageType,
    Position,
    Range,
    ReferenceContext,
    ReferenceParams,
    TextDocumentIdentifier,
)

from emberls.addons.api import ProjectProviders
from emberls.config import ServerSettings
from emberls.lsp.features.completion import (
    build_focus_path,
    provide_completion,
    request_type_for,
    to_completion_item,
)
from emberls.lsp.features.navigation import (
    provide_definition,
    provide_references,
    to_locations,
)
from emberls.workspace.project_roots import Project

TEMPLATE_URI = "file:///app/app/templates/application.hbs"

LOCATION = {
    "uri": "file:///app/app/components/foo.js",
    "range": {"start": {"line": 1, "character": 0}, "end": {"line": 1, "character": 3}},
}


def make_server(providers: ProjectProviders, text: str = "{{foo}}", ast_provider=None):
    ls = Mock()
    ls.settings = ServerSettings(addon_timeout=1.0)
    ls.ast_provider = ast_provider
    ls.workspace.get_text_document.return_value.source = text
    ls.project_roots.project_for_uri.return_value = Project(
        root=Path("/app"), providers=providers
    )
    return ls


def completion_params(uri: str = TEMPLATE_URI) -> CompletionParams:
    return CompletionParams(
        text_document=TextDocumentIdentifier(uri=uri),
        position=Position(line=0, character=3),
    )


class TestRequestType:
    @pytest.mark.parametrize(
        "uri,expected",
        [
            ("file:///a/b.hbs", "template"),
            ("file:///a/b.HANDLEBARS", "template"),
            ("file:///a/b.js", "script"),
            ("file:///a/b.ts", "script"),
            ("file:///a/b.css", None),
            ("file:///a/package.json", None),
        ],
    )
    def test_request_type_for(self, uri, expected):
        assert request_type_for(uri) == expected


class TestConversion:
    def test_completion_item_from_dict(self):
        item = to_completion_item({"label": "foo", "kind": 7, "detail": "component"})

        assert isinstance(item, CompletionItem)
        assert item.label == "foo"
        assert item.detail == "component"

    def test_completion_item_passthrough(self):
        item = CompletionItem(label="foo")
        assert to_completion_item(item) is item

    def test_unknown_shapes_dropped(self):
        assert to_completion_item({"detail": "no label"}) is None
        assert to_completion_item("foo") is None

    def test_locations(self):
        location = Location(
            uri="file:///x.js",
            range=Range(start=Position(line=0, character=0), end=Position(line=0, character=1)),
        )
        result = to_locations([location, LOCATION, "junk"])

        assert result[0] is location
        assert result[1].uri == LOCATION["uri"]
        assert result[1].range.start.line == 1
        assert len(result) == 2


class TestBuildFocusPath:
    def test_without_parser(self):
        ls = make_server(ProjectProviders())
        assert build_focus_path(ls, TEMPLATE_URI, "", "template", Position(line=0, character=0)) is None

    def test_parser_failure_logged(self):
        def parse(uri, text, kind):
            raise SyntaxError("unclosed mustache")

        ls = make_server(ProjectProviders(), ast_provider=parse)

        assert build_focus_path(ls, TEMPLATE_URI, "{{", "template", Position(line=0, character=0)) is None
        message = ls.window_log_message.call_args.args[0]
        assert message.type == MessageType.Warning
        assert "unclosed mustache" in message.message

    def test_parser_receives_request_kind(self):
        parse = Mock(return_value={"type": "Template", "body": []})
        ls = make_server(ProjectProviders(), ast_provider=parse)

        build_focus_path(ls, TEMPLATE_URI, "", "template", Position(line=0, character=0))

        parse.assert_called_once_with(TEMPLATE_URI, "", "template")


class TestProvideCompletion:
    @pytest.mark.asyncio
    async def test_chain_results_returned(self):
        async def addon(root, params):
            assert root == str(Path("/app"))
            assert params.type == "template"
            assert params.original_text == "{{foo}}"
            return params.results + [{"label": "from-addon"}, CompletionItem(label="object")]

        ls = make_server(ProjectProviders(completion_providers=[addon]))

        result = await provide_completion(ls, completion_params())

        assert [item.label for item in result.items] == ["from-addon", "object"]
        assert result.is_incomplete is False

    @pytest.mark.asyncio
    async def test_unsupported_document(self):
        ls = make_server(ProjectProviders(completion_providers=[Mock()]))

        result = await provide_completion(ls, completion_params("file:///app/styles/app.css"))

        assert result.items == []

    @pytest.mark.asyncio
    async def test_outside_project(self):
        ls = make_server(ProjectProviders())
        ls.project_roots.project_for_uri.return_value = None

        result = await provide_completion(ls, completion_params())

        assert result.items == []

    @pytest.mark.asyncio
    async def test_malformed_item_dropped(self):
        async def addon(root, params):
            return [{"label": "ok"}, {"label": "bad", "kind": "not-a-kind", "textEdit": 5}]

        ls = make_server(ProjectProviders(completion_providers=[addon]))

        result = await provide_completion(ls, completion_params())

        assert [item.label for item in result.items] == ["ok"]
        message = ls.window_log_message.call_args.args[0]
        assert message.type == MessageType.Warning


class TestNavigation:
    @pytest.mark.asyncio
    async def test_definition_from_addons(self):
        def addon(root, params):
            return params.results + [LOCATION]

        ls = make_server(ProjectProviders(definition_providers=[addon]))
        params = DefinitionParams(
            text_document=TextDocumentIdentifier(uri=TEMPLATE_URI),
            position=Position(line=0, character=3),
        )

        result = await provide_definition(ls, params)

        assert [location.uri for location in result] == [LOCATION["uri"]]

    @pytest.mark.asyncio
    async def test_definition_without_providers(self):
        ls = make_server(ProjectProviders())
        params = DefinitionParams(
            text_document=TextDocumentIdentifier(uri=TEMPLATE_URI),
            position=Position(line=0, character=3),
        )

        assert await provide_definition(ls, params) is None

    @pytest.mark.asyncio
    async def test_references_from_addons(self):
        async def addon(root, params):
            return [LOCATION, LOCATION]

        ls = make_server(ProjectProviders(references_providers=[addon]))
        params = ReferenceParams(
            text_document=TextDocumentIdentifier(uri="file:///app/app/components/foo.js"),
            position=Position(line=0, character=3),
            context=ReferenceContext(include_declaration=True),
        )

        result = await provide_references(ls, params)

        assert len(result) == 2

    @pytest.mark.asyncio
    async def test_empty_references(self):
        async def addon(root, params):
            return []

        ls = make_server(ProjectProviders(references_providers=[addon]))
        params = ReferenceParams(
            text_document=TextDocumentIdentifier(uri=TEMPLATE_URI),
            position=Position(line=0, character=0),
            context=ReferenceContext(include_declaration=False),
        )

        assert await provide_references(ls, params) is None

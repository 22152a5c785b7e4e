"""
Addon API types.

These are the shapes shared by built-in providers and addon handler
modules. An addon handler module may define any of::

    async def on_complete(root: str, params: CompletionFunctionParams) -> list[CompletionItem]
    async def on_definition(root: str, params: DefinitionFunctionParams) -> list[Location]
    async def on_reference(root: str, params: ReferenceFunctionParams) -> list[Location]

Plain (non-async) functions are accepted as well.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Literal, Mapping, Union

from lsprotocol.types import CompletionItem, Location, Position, TextDocumentIdentifier

if TYPE_CHECKING:
    from emberls.lsp.ember_language_server import EmberLanguageServer
    from emberls.syntax.focus_path import FocusPath

ADDON_CONFIG_KEY = "ember-language-server"
ADDON_METADATA_KEY = "ember-addon"

RequestType = Literal["script", "template"]


class Operation(Enum):
    """Operations an addon handler module can implement."""

    COMPLETION = "on_complete"
    DEFINITION = "on_definition"
    REFERENCES = "on_reference"

    @property
    def handler_name(self) -> str:
        return self.value


@dataclass
class BaseAPIParams:
    text_document: TextDocumentIdentifier
    position: Position
    server: EmberLanguageServer | None = field(default=None, repr=False, compare=False)


@dataclass
class ReferenceFunctionParams(BaseAPIParams):
    results: list[Location] = field(default_factory=list)


@dataclass
class CompletionFunctionParams(BaseAPIParams):
    type: RequestType = "template"
    focus_path: FocusPath | None = None
    original_text: str = ""
    results: list[CompletionItem] = field(default_factory=list)


@dataclass
class DefinitionFunctionParams(BaseAPIParams):
    type: RequestType = "template"
    focus_path: FocusPath | None = None
    original_text: str = ""
    results: list[Location] = field(default_factory=list)


APIParams = Union[CompletionFunctionParams, DefinitionFunctionParams, ReferenceFunctionParams]

# (root, params) -> results, sync or async
ResolveFunction = Callable[[str, Any], Union[list[Any], Awaitable[list[Any]]]]


@dataclass(frozen=True)
class Capabilities:
    """Normalized capability flags declared by an addon."""

    definition: bool = False
    reference: bool = False
    completion: bool = False

    @classmethod
    def normalize(cls, raw: Mapping[str, Any] | None) -> Capabilities:
        """
        Reduce declared capabilities to booleans.

        ``referencesProvider`` may be scoped (``{"components": true}``) and
        ``completionProvider`` may be any options object.
        """
        raw = raw or {}
        references = raw.get("referencesProvider")
        completion = raw.get("completionProvider")
        return cls(
            definition=raw.get("definitionProvider") is True,
            reference=references is True
            or (isinstance(references, Mapping) and references.get("components") is True),
            completion=completion is True or isinstance(completion, Mapping),
        )

    def supports(self, operation: Operation) -> bool:
        return {
            Operation.COMPLETION: self.completion,
            Operation.DEFINITION: self.definition,
            Operation.REFERENCES: self.reference,
        }[operation]


@dataclass
class ProjectProviders:
    """Ordered chains of resolve functions, one per operation."""

    completion_providers: list[ResolveFunction] = field(default_factory=list)
    definition_providers: list[ResolveFunction] = field(default_factory=list)
    references_providers: list[ResolveFunction] = field(default_factory=list)

    def for_operation(self, operation: Operation) -> list[ResolveFunction]:
        return {
            Operation.COMPLETION: self.completion_providers,
            Operation.DEFINITION: self.definition_providers,
            Operation.REFERENCES: self.references_providers,
        }[operation]

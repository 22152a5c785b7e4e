"""
Project layout: the raw listing primitives behind the index.

Decoding a project's file layout into symbol lists is done elsewhere; the
completion engine only consumes these listings. ``StaticProjectLayout`` is
an in-memory implementation used when no decoder is configured, and in
tests.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from lsprotocol.types import CompletionItem, CompletionItemKind

from emberls.utils.normalizers import normalize_to_classic_component

_TEMPLATE_PATH = re.compile(r"(?<![\w.\-])((?:this\.|@)[A-Za-z_$][\w$\-]*(?:\.[A-Za-z_$][\w$\-]*)*)")


class ProjectLayout(Protocol):
    """Listing functions for one kind of project layout."""

    def list_components(self, root: str) -> list[CompletionItem]: ...

    def list_mu_components(self, root: str) -> list[CompletionItem]: ...

    def list_pods_components(self, root: str) -> list[CompletionItem]: ...

    def list_helpers(self, root: str) -> list[CompletionItem]: ...

    def list_modifiers(self, root: str) -> list[CompletionItem]: ...

    def list_routes(self, root: str) -> list[CompletionItem]: ...

    def list_models(self, root: str) -> list[CompletionItem]: ...

    def get_project_addons_info(self, root: str) -> list[CompletionItem]:
        """Symbols contributed by addons; ``detail`` names the kind ("component", "helper", "modifier")."""
        ...

    def template_context_lookup(
        self, root: str, uri: str, text: str
    ) -> list[CompletionItem]:
        """Local (``this.*``) and argument (``@*``) paths usable in a template."""
        ...

    def component_template_paths(self, root: str, name: str) -> list[Path]:
        """Candidate template files for an angle bracket component name."""
        ...


def conventional_template_paths(root: str, name: str) -> list[Path]:
    """
    Template file candidates for a component, in lookup order.

    Covers the classic, co-located, pods and module unification layouts.
    """
    dashed = normalize_to_classic_component(name)
    base = Path(root)
    return [
        base / "app" / "components" / f"{dashed}.hbs",
        base / "app" / "templates" / "components" / f"{dashed}.hbs",
        base / "app" / "components" / dashed / "template.hbs",
        base / "app" / "pods" / "components" / dashed / "template.hbs",
        base / "src" / "ui" / "components" / dashed / "template.hbs",
        base / "addon" / "components" / f"{dashed}.hbs",
        base / "addon" / "templates" / "components" / f"{dashed}.hbs",
    ]


@dataclass
class StaticProjectLayout:
    """ProjectLayout backed by fixed lists, shared by every project root."""

    components: list[CompletionItem] = field(default_factory=list)
    mu_components: list[CompletionItem] = field(default_factory=list)
    pods_components: list[CompletionItem] = field(default_factory=list)
    helpers: list[CompletionItem] = field(default_factory=list)
    modifiers: list[CompletionItem] = field(default_factory=list)
    routes: list[CompletionItem] = field(default_factory=list)
    models: list[CompletionItem] = field(default_factory=list)
    addons_info: list[CompletionItem] = field(default_factory=list)
    # uri -> candidates
    template_context: dict[str, list[CompletionItem]] = field(default_factory=dict)

    def list_components(self, root: str) -> list[CompletionItem]:
        return list(self.components)

    def list_mu_components(self, root: str) -> list[CompletionItem]:
        return list(self.mu_components)

    def list_pods_components(self, root: str) -> list[CompletionItem]:
        return list(self.pods_components)

    def list_helpers(self, root: str) -> list[CompletionItem]:
        return list(self.helpers)

    def list_modifiers(self, root: str) -> list[CompletionItem]:
        return list(self.modifiers)

    def list_routes(self, root: str) -> list[CompletionItem]:
        return list(self.routes)

    def list_models(self, root: str) -> list[CompletionItem]:
        return list(self.models)

    def get_project_addons_info(self, root: str) -> list[CompletionItem]:
        return list(self.addons_info)

    def template_context_lookup(
        self, root: str, uri: str, text: str
    ) -> list[CompletionItem]:
        return list(self.template_context.get(uri, [])) + template_path_expressions(text)

    def component_template_paths(self, root: str, name: str) -> list[Path]:
        return conventional_template_paths(root, name)


def template_path_expressions(text: str) -> list[CompletionItem]:
    """Local and argument path expressions used in a template, in order of appearance."""
    items: list[CompletionItem] = []
    seen: set[str] = set()
    for match in _TEMPLATE_PATH.finditer(text):
        label = match.group(1)
        if label in seen:
            continue
        seen.add(label)
        items.append(
            CompletionItem(
                label=label,
                kind=CompletionItemKind.Variable,
                detail="argument" if label.startswith("@") else "local",
            )
        )
    return items

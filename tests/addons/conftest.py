"""
Shared fixtures for addon tests: throwaway projects on disk.
"""
from __future__ import annotations

import json
from pathlib import Path
from textwrap import dedent

import pytest


def write_package(directory: Path, manifest: dict, files: dict[str, str] | None = None) -> Path:
    """Create ``directory/package.json`` plus any extra files."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    for relative, content in (files or {}).items():
        path = directory / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(content), encoding="utf-8")
    return directory


def addon_manifest(
    name: str,
    entry: str = "lib/langserver",
    capabilities: dict | None = None,
    before=None,
    after=None,
    debug: bool = False,
) -> dict:
    ember_addon: dict = {}
    if before is not None:
        ember_addon["before"] = before
    if after is not None:
        ember_addon["after"] = after
    config: dict = {
        "entry": entry,
        "capabilities": capabilities if capabilities is not None else {"completionProvider": True},
    }
    if debug:
        config["debug"] = True
    return {
        "name": name,
        "keywords": ["ember-addon"],
        "ember-addon": ember_addon,
        "ember-language-server": config,
    }


def label_handler(label: str) -> str:
    """Handler module that appends one completion item labelled ``label``."""
    return f"""
    async def on_complete(root, params):
        return params.results + [{{"label": "{label}"}}]
    """


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Empty Ember app; tests add dependencies with ``add_dependency``."""
    return write_package(
        tmp_path / "app",
        {
            "name": "app",
            "dependencies": {},
            "devDependencies": {"ember-cli": "*"},
        },
    )


def add_dependency(project: Path, name: str, dev: bool = False) -> None:
    manifest_path = project / "package.json"
    manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    section = "devDependencies" if dev else "dependencies"
    manifest.setdefault(section, {})[name] = "*"
    manifest_path.write_text(json.dumps(manifest), encoding="utf-8")


@pytest.fixture
def package_writer():
    return write_package


@pytest.fixture
def manifest_for():
    return addon_manifest


@pytest.fixture
def handler_source():
    return label_handler


@pytest.fixture
def depend():
    return add_dependency

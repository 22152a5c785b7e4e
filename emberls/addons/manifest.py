"""
Package manifest helpers.

Discovers the package roots that may carry a language server extension
and turns their ``package.json`` into AddonDescriptors.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from emberls.addons.api import ADDON_CONFIG_KEY, ADDON_METADATA_KEY, Capabilities
from emberls.addons.provider import AddonDescriptor


def get_package_json(package_root: Path) -> dict[str, Any]:
    """Read ``package.json``; unreadable or invalid manifests read as empty."""
    manifest = package_root / "package.json"
    try:
        with open(manifest, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def is_ember_addon(info: dict[str, Any]) -> bool:
    keywords = info.get("keywords") or []
    return isinstance(keywords, list) and "ember-addon" in keywords


def has_language_server_extension(info: dict[str, Any]) -> bool:
    return isinstance(info.get(ADDON_CONFIG_KEY), dict)


def resolve_package_root(root: Path, package_name: str) -> Path | None:
    """Find ``node_modules/<package_name>`` in ``root`` or any of its parents."""
    for directory in (root, *root.parents):
        candidate = directory / "node_modules" / package_name
        if (candidate / "package.json").is_file():
            return candidate
    return None


def get_project_addons_roots(
    root: Path, _visited: set[Path] | None = None
) -> list[Path]:
    """
    Installed addons reachable from ``root``'s dependencies.

    The root's dependencies and devDependencies are followed; for addons,
    only their runtime dependencies. Each package is listed once.
    """
    visited = _visited if _visited is not None else {root.resolve()}
    info = get_package_json(root)

    names = list(info.get("dependencies") or {})
    if _visited is None:
        names += list(info.get("devDependencies") or {})

    roots: list[Path] = []
    for name in names:
        package_root = resolve_package_root(root, name)
        if package_root is None:
            continue
        resolved = package_root.resolve()
        if resolved in visited:
            continue
        visited.add(resolved)

        package_info = get_package_json(package_root)
        if not (is_ember_addon(package_info) or has_language_server_extension(package_info)):
            continue
        roots.append(package_root)
        roots.extend(get_project_addons_roots(package_root, visited))

    return roots


def get_project_in_repo_addons_roots(root: Path) -> list[Path]:
    """In-repo addons listed under ``ember-addon.paths``."""
    info = get_package_json(root)
    addon_info = info.get(ADDON_METADATA_KEY)
    if not isinstance(addon_info, dict):
        return []
    paths = addon_info.get("paths") or []

    roots: list[Path] = []
    for relative in paths:
        if not isinstance(relative, str):
            continue
        candidate = root / relative
        if (candidate / "package.json").is_file():
            roots.append(candidate)
    return roots


def get_candidate_roots(root: Path) -> list[Path]:
    """Project root first, then installed addons, then in-repo addons."""
    return [
        root,
        *get_project_addons_roots(root),
        *get_project_in_repo_addons_roots(root),
    ]


def build_descriptor(package_root: Path, info: dict[str, Any]) -> AddonDescriptor | None:
    """Descriptor for a package carrying the extension key, else None."""
    if not has_language_server_extension(info):
        return None

    config = info[ADDON_CONFIG_KEY]
    entry = config.get("entry")
    if not isinstance(entry, str) or not entry:
        return None

    addon_info = info.get(ADDON_METADATA_KEY)
    if not isinstance(addon_info, dict):
        addon_info = {}

    return AddonDescriptor(
        name=info.get("name") or str(package_root),
        package_root=package_root,
        handler_module_path=_entry_path(package_root, entry),
        declared_before=_names(addon_info.get("before")),
        declared_after=_names(addon_info.get("after")),
        capabilities=Capabilities.normalize(config.get("capabilities")),
        debug_reload_enabled=config.get("debug") is True,
    )


def _entry_path(package_root: Path, entry: str) -> Path:
    path = package_root / entry
    if path.suffix == "" and not path.exists():
        path = path.with_suffix(".py")
    return path


def _names(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        return tuple(item for item in value if isinstance(item, str))
    return ()

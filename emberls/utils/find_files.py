import json
from pathlib import Path


def find_project_root(path: Path) -> Path | None:
    """
    Find the Ember project root for a file or directory.

    Walks up from ``path`` and returns the nearest directory whose
    package.json describes an Ember application or addon.

    Args:
        path: A document path or directory inside the project

    Returns:
        Path to the project root, or None if not found
    """
    start = path if path.is_dir() else path.parent

    for candidate in (start, *start.parents):
        if "node_modules" in candidate.parts:
            continue
        if is_project_root(candidate):
            return candidate

    return None


def is_project_root(path: Path) -> bool:
    """
    Check if a path is an Ember project root.

    A valid project root must contain a package.json that either:
    - depends on ember-cli (application), or
    - lists "ember-addon" among its keywords (addon)
    """
    manifest = path / "package.json"
    if not manifest.is_file():
        return False

    try:
        with open(manifest, "r", encoding="utf-8") as f:
            info = json.load(f)
    except (OSError, ValueError):
        return False

    if not isinstance(info, dict):
        return False

    dependencies = {
        **(info.get("dependencies") or {}),
        **(info.get("devDependencies") or {}),
    }
    if "ember-cli" in dependencies:
        return True

    keywords = info.get("keywords") or []
    return isinstance(keywords, list) and "ember-addon" in keywords

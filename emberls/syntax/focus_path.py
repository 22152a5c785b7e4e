"""
Focus path: a read-only pointer into a parsed syntax tree.

Trees are JSON-shaped (dict nodes with a ``type`` key and an optional
``loc`` of ``{"start": {"line", "column"}, "end": {...}}``), as produced by
the Glimmer template parser or an ESTree script parser. Lines are 1-based
and columns 0-based, while LSP positions use 0-based lines.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from lsprotocol.types import Position

Node = Mapping[str, Any]

# Builds a tree for a document: (uri, text, kind) -> tree or None
AstProvider = Callable[[str, str, str], "Node | None"]

# Back-references added by some parsers; following them loops forever.
_SKIPPED_KEYS = frozenset({"parent", "loc", "range"})


@dataclass(frozen=True)
class FocusPath:
    """
    Node under the cursor together with its ancestor chain.

    ``path[0]`` is the outermost node that contains the position and
    ``path[index]`` is the focused node.
    """

    path: tuple[Node, ...]
    index: int = -1

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("FocusPath requires at least one node")
        if self.index < 0:
            object.__setattr__(self, "index", len(self.path) + self.index)

    @property
    def node(self) -> Node:
        return self.path[self.index]

    @property
    def parent(self) -> Node | None:
        if self.index - 1 < 0:
            return None
        return self.path[self.index - 1]

    @property
    def parent_path(self) -> FocusPath | None:
        if self.index - 1 < 0:
            return None
        return FocusPath(self.path, self.index - 1)

    @classmethod
    def to_position(cls, ast: Node, position: Position) -> FocusPath | None:
        """Find the deepest chain of nodes whose location contains position."""
        line = position.line + 1
        column = position.character
        path = _find_focus_path(ast, (line, column), set())
        if not path:
            return None
        return cls(tuple(path))


def node_type(node: Any) -> str | None:
    if isinstance(node, Mapping):
        return node.get("type")
    return None


def _contains(node: Node, point: tuple[int, int]) -> bool:
    loc = node.get("loc")
    if not isinstance(loc, Mapping):
        return False
    start = loc.get("start") or {}
    end = loc.get("end") or {}
    try:
        start_point = (start["line"], start["column"])
        end_point = (end["line"], end["column"])
    except KeyError:
        return False
    return start_point <= point <= end_point


def _find_focus_path(value: Any, point: tuple[int, int], seen: set[int]) -> list[Node]:
    if id(value) in seen:
        return []
    seen.add(id(value))

    path: list[Node] = []
    children: list[Any]

    if isinstance(value, Mapping):
        if _contains(value, point):
            path.append(value)
        children = [v for k, v in value.items() if k not in _SKIPPED_KEYS]
    elif isinstance(value, (list, tuple)):
        children = list(value)
    else:
        return []

    for child in children:
        if not isinstance(child, (Mapping, list, tuple)):
            continue
        child_path = _find_focus_path(child, point, seen)
        if child_path:
            path.extend(child_path)
            break

    return path

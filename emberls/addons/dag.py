"""
Ordering graph for addon providers.

An edge ``A -> B`` means "A runs before B". Vertices keep their insertion
order, which breaks ties between unconstrained vertices.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, TypeVar

V = TypeVar("V")


class AddonOrderingCycleError(ValueError):
    """Raised when before/after constraints between addons form a cycle."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"cycle detected in addon ordering: {' <- '.join(cycle)}")


@dataclass
class _Vertex(Generic[V]):
    key: str
    value: V | None = None
    # Keys of vertices that must run before this one, in insertion order.
    incoming: list[str] = field(default_factory=list)


class OrderedExtensionGraph(Generic[V]):
    """
    Directed acyclic graph with a deterministic topological order.

    Keys referenced in ``before``/``after`` but never added remain
    placeholders: they still constrain ordering and are skipped by ``each``.
    """

    def __init__(self) -> None:
        self._vertices: dict[str, _Vertex[V]] = {}

    def _vertex(self, key: str) -> _Vertex[V]:
        vertex = self._vertices.get(key)
        if vertex is None:
            vertex = _Vertex(key=key)
            self._vertices[key] = vertex
        return vertex

    def add(
        self,
        key: str,
        value: V | None,
        before: str | Iterable[str] | None = None,
        after: str | Iterable[str] | None = None,
    ) -> None:
        """
        Add a vertex.

        Args:
            key: Vertex name (package name).
            value: Payload yielded by ``each``.
            before: Keys this vertex must run before.
            after: Keys this vertex must run after.

        Raises:
            AddonOrderingCycleError: if an edge would close a cycle.
        """
        vertex = self._vertex(key)
        vertex.value = value

        for target in _as_list(before):
            self.add_edge(key, target)
        for source in _as_list(after):
            self.add_edge(source, key)

    def add_edge(self, source: str, target: str) -> None:
        """Require ``source`` to run before ``target``."""
        if source == target:
            raise AddonOrderingCycleError([target, source])

        self._vertex(source)
        target_vertex = self._vertex(target)
        if source in target_vertex.incoming:
            return

        cycle = self._path_to(source, target)
        if cycle is not None:
            raise AddonOrderingCycleError([target, *cycle])

        target_vertex.incoming.append(source)

    def _path_to(self, start: str, goal: str) -> list[str] | None:
        """Walk incoming edges from ``start``; return the path if ``goal`` precedes it."""
        stack: list[tuple[str, list[str]]] = [(start, [start])]
        visited: set[str] = set()
        while stack:
            key, path = stack.pop()
            if key == goal:
                return path
            if key in visited:
                continue
            visited.add(key)
            for source in self._vertices[key].incoming:
                stack.append((source, [*path, source]))
        return None

    def topological_order(self) -> list[str]:
        """All keys, predecessors first, ties broken by insertion order."""
        order: list[str] = []
        emitted: set[str] = set()

        def visit(key: str) -> None:
            if key in emitted:
                return
            emitted.add(key)
            for source in self._vertices[key].incoming:
                visit(source)
            order.append(key)

        for key in self._vertices:
            visit(key)
        return order

    def each(self, callback: Callable[[str, V], None]) -> None:
        """Call ``callback(key, value)`` for every non-placeholder vertex in order."""
        for key in self.topological_order():
            value = self._vertices[key].value
            if value is None:
                continue
            callback(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._vertices

    def __len__(self) -> int:
        return len(self._vertices)


def _as_list(value: str | Iterable[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [item for item in value if isinstance(item, str)]

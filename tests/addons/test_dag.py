"""
Tests for emberls/addons/dag.py

Covers:
- Before/after constraints produce a valid topological order
- Insertion order breaks ties
- Placeholders constrain order but are never visited
- Cycles are rejected when the closing edge is added
"""
from __future__ import annotations

import pytest

from emberls.addons.dag import AddonOrderingCycleError, OrderedExtensionGraph


@pytest.fixture
def graph() -> OrderedExtensionGraph[str]:
    return OrderedExtensionGraph()


def visited(graph: OrderedExtensionGraph) -> list[str]:
    keys: list[str] = []
    graph.each(lambda key, value: keys.append(key))
    return keys


class TestOrdering:
    def test_insertion_order_without_constraints(self, graph):
        for key in ("c", "a", "b"):
            graph.add(key, key)

        assert visited(graph) == ["c", "a", "b"]

    def test_before_constraint(self, graph):
        graph.add("b", "B")
        graph.add("a", "A", before="b")

        assert visited(graph) == ["a", "b"]

    def test_after_constraint(self, graph):
        graph.add("a", "A", after="b")
        graph.add("b", "B")

        assert visited(graph) == ["b", "a"]

    def test_every_edge_respected(self, graph):
        graph.add("ui", "ui", after=["data", "core"])
        graph.add("data", "data", after="core")
        graph.add("core", "core")
        graph.add("lint", "lint", before="ui")

        order = visited(graph)

        for source, target in [("data", "ui"), ("core", "ui"), ("core", "data"), ("lint", "ui")]:
            assert order.index(source) < order.index(target)
        assert sorted(order) == ["core", "data", "lint", "ui"]

    def test_values_passed_to_callback(self, graph):
        graph.add("a", {"name": "a"})
        seen = []
        graph.each(lambda key, value: seen.append((key, value)))

        assert seen == [("a", {"name": "a"})]

    def test_duplicate_edge_is_ignored(self, graph):
        graph.add("a", "A", before="b")
        graph.add_edge("a", "b")
        graph.add("b", "B")

        assert visited(graph) == ["a", "b"]

    def test_non_string_names_are_ignored(self, graph):
        graph.add("a", "A", before=["b", 3, None])
        graph.add("b", "B")

        assert visited(graph) == ["a", "b"]


class TestPlaceholders:
    def test_placeholder_is_skipped(self, graph):
        graph.add("a", "A", after="missing")

        assert "missing" in graph
        assert len(graph) == 2
        assert visited(graph) == ["a"]

    def test_placeholder_still_orders(self, graph):
        graph.add("b", "B", after="missing")
        graph.add("a", "A", before="missing")

        assert visited(graph) == ["a", "b"]
        assert graph.topological_order() == ["a", "missing", "b"]

    def test_placeholder_filled_later(self, graph):
        graph.add("a", "A", after="late")
        graph.add("late", "L")

        assert visited(graph) == ["late", "a"]


class TestCycles:
    def test_two_vertex_cycle(self, graph):
        graph.add("a", "A", before="b")

        with pytest.raises(AddonOrderingCycleError) as excinfo:
            graph.add("b", "B", before="a")

        assert "a" in excinfo.value.cycle
        assert "b" in excinfo.value.cycle

    def test_self_loop(self, graph):
        with pytest.raises(AddonOrderingCycleError):
            graph.add("a", "A", before="a")

    def test_longer_cycle(self, graph):
        graph.add("a", "A", before="b")
        graph.add("b", "B", before="c")

        with pytest.raises(AddonOrderingCycleError) as excinfo:
            graph.add("c", "C", before="a")

        assert "cycle detected" in str(excinfo.value)
        assert set(excinfo.value.cycle) == {"a", "b", "c"}

    def test_cycle_error_is_value_error(self, graph):
        graph.add("a", "A", after="b")

        with pytest.raises(ValueError):
            graph.add_edge("a", "b")

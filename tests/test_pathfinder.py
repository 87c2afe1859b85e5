"""Tests for pathfinder.py — breadth-first shortest relationship path."""

from __future__ import annotations

import pytest

from lineage_graph.graph import LineageGraph, Person
from lineage_graph.pathfinder import PathResult, UnknownPersonError, find_path, relationship_graph

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_graph(*edges: tuple[str, str]) -> LineageGraph:
    """Build a LineageGraph from (big, little) pairs."""
    people: dict[str, Person] = {}
    for big, little in edges:
        people.setdefault(big, Person(name=big)).littles.append(little)
        people.setdefault(little, Person(name=little)).bigs.append(big)
    return LineageGraph.from_people(list(people.values()))


# ─── find_path Tests ──────────────────────────────────────────────────────────


class TestFindPath:
    def test_shortest_of_two_routes(self):
        """Alice→Bob→Carol and Alice→Dave→Carol — a 3-person path, never longer."""
        g = make_graph(("Alice", "Bob"), ("Bob", "Carol"), ("Alice", "Dave"), ("Dave", "Carol"))
        result = find_path(g, "Alice", "Carol")
        assert result.found
        assert result.path in (["Alice", "Bob", "Carol"], ["Alice", "Dave", "Carol"])
        assert result.hops == 2

    def test_prefers_short_route_over_long(self):
        """A long chain and a direct edge — the direct edge wins."""
        g = make_graph(("A", "B"), ("B", "C"), ("C", "D"), ("A", "D"))
        assert find_path(g, "A", "D").path == ["A", "D"]

    def test_walks_up_and_down(self):
        """Siblings connect through their shared big (edges are undirected here)."""
        g = make_graph(("Big", "Ann"), ("Big", "Bea"))
        assert find_path(g, "Ann", "Bea").path == ["Ann", "Big", "Bea"]

    def test_no_path(self):
        """{Alice→Bob} and {Carol→Dave} are disconnected."""
        g = make_graph(("Alice", "Bob"), ("Carol", "Dave"))
        result = find_path(g, "Alice", "Carol")
        assert not result.found
        assert result.path == []
        assert (result.source, result.target) == ("Alice", "Carol")

    def test_same_person(self):
        g = make_graph(("A", "B"))
        assert find_path(g, "A", "A").path == ["A"]

    def test_unknown_person(self):
        """A missing endpoint is a resolution failure, not a 'no path' result."""
        g = make_graph(("A", "B"))
        with pytest.raises(UnknownPersonError) as exc_info:
            find_path(g, "A", "Zed")
        assert exc_info.value.name == "Zed"
        with pytest.raises(KeyError):
            find_path(g, "Nobody", "A")

    def test_cycle_terminates(self):
        g = make_graph(("A", "B"), ("B", "C"), ("C", "A"), ("C", "D"))
        result = find_path(g, "A", "D")
        assert result.path == ["A", "C", "D"]


class TestPathResult:
    def test_links(self):
        result = PathResult(source="A", target="C", path=["A", "B", "C"])
        assert result.links == [("A", "B"), ("B", "C")]

    def test_has_link_either_direction(self):
        result = PathResult(source="A", target="C", path=["A", "B", "C"])
        assert result.has_link("B", "A")
        assert result.has_link("B", "C")
        assert not result.has_link("A", "C")

    def test_not_found(self):
        result = PathResult(source="A", target="B")
        assert not result.found
        assert result.hops == -1
        assert result.links == []


class TestRelationshipGraph:
    def test_neighbors_are_bigs_and_littles(self):
        g = make_graph(("A", "B"), ("B", "C"))
        adjacency = relationship_graph(g)
        assert set(adjacency.neighbors("B")) == {"A", "C"}
        assert not adjacency.is_directed()

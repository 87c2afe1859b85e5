"""Tests for highlight.py — highlight context resolution."""

from __future__ import annotations

from lineage_graph.graph import LineageGraph, Person
from lineage_graph.highlight import FocusSets, HighlightContext, focus_sets
from lineage_graph.pathfinder import PathResult, find_path


def sample_graph() -> LineageGraph:
    """Sam → Ann → Bea → Cal; Ann in Lion, the rest in Bear; Bea in class Beta."""
    return LineageGraph.from_people(
        [
            Person(name="Sam", families=["Bear"], littles=["Ann"]),
            Person(name="Ann", families=["Lion", "Bear"], bigs=["Sam"], littles=["Bea"]),
            Person(name="Bea", families=["Bear"], pledge_class="Beta", bigs=["Ann"], littles=["Cal"]),
            Person(name="Cal", families=["Bear"], bigs=["Bea"]),
        ]
    )


class TestHighlightContext:
    def test_empty(self):
        assert HighlightContext().is_empty
        assert HighlightContext(path=PathResult(source="A", target="B")).is_empty

    def test_not_empty(self):
        assert not HighlightContext(selected="Ann").is_empty


class TestFocusSets:
    def test_selected_and_nuclear_family(self):
        sets = focus_sets(sample_graph(), HighlightContext(selected="Ann"))
        assert sets.focus == {"Ann"}
        assert sets.nuclear == {"Sam", "Bea"}
        assert sets.is_faded("Cal")
        assert not sets.is_faded("Sam")

    def test_family_uses_any_declared_family(self):
        sets = focus_sets(sample_graph(), HighlightContext(family="Lion"))
        assert sets.focus == {"Ann"}

    def test_pledge_class(self):
        sets = focus_sets(sample_graph(), HighlightContext(pledge_class="Beta"))
        assert sets.focus == {"Bea"}
        assert sets.nuclear == {"Ann", "Cal"}

    def test_unknown_selection_ignored(self):
        sets = focus_sets(sample_graph(), HighlightContext(selected="Nobody"))
        assert sets.focus == set()
        assert not sets.is_faded("Ann")

    def test_path_overrides_fading(self):
        g = sample_graph()
        path = find_path(g, "Sam", "Bea")
        sets = focus_sets(g, HighlightContext(selected="Cal", path=path))
        assert sets.path_nodes == {"Sam", "Ann", "Bea"}
        assert sets.is_faded("Cal")
        assert sets.is_edge_emphasized("Ann", "Bea")

    def test_edge_emphasis(self):
        sets = FocusSets(focus={"Ann"}, nuclear={"Sam", "Bea"})
        assert sets.is_edge_emphasized("Sam", "Ann")
        assert sets.is_edge_emphasized("Ann", "Bea")
        assert not sets.is_edge_emphasized("Bea", "Cal")

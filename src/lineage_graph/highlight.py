"""Highlight context — what the renderer should emphasize.

The selection, family filter, pledge-class filter and active path are passed
around as a value instead of being read from shared state. Computing the
emphasized sets never touches layout geometry.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lineage_graph.graph import LineageGraph
from lineage_graph.pathfinder import PathResult


@dataclass(frozen=True)
class HighlightContext:
    selected: str | None = None
    family: str | None = None
    pledge_class: str | None = None
    path: PathResult | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.selected or self.family or self.pledge_class or (self.path and self.path.found))


@dataclass
class FocusSets:
    """Emphasized people, their direct bigs/littles, and the active path."""

    focus: set[str] = field(default_factory=set)
    nuclear: set[str] = field(default_factory=set)
    path_nodes: set[str] = field(default_factory=set)
    path: PathResult | None = None

    def is_edge_emphasized(self, big: str, little: str) -> bool:
        if self.path is not None and self.path.has_link(big, little):
            return True
        near = self.focus | self.nuclear
        if big in self.focus and little in near:
            return True
        if little in self.focus and big in near:
            return True
        return big in self.nuclear and little in self.nuclear

    def is_faded(self, name: str) -> bool:
        """True when something is highlighted and ``name`` is not part of it."""
        if self.path_nodes:
            return name not in self.path_nodes
        if not self.focus:
            return False
        return name not in self.focus and name not in self.nuclear


def focus_sets(graph: LineageGraph, context: HighlightContext) -> FocusSets:
    """Resolve a highlight context against the graph."""
    focus: set[str] = set()
    if context.selected and context.selected in graph:
        focus.add(context.selected)
    for person in graph.people():
        if context.family and context.family in person.families:
            focus.add(person.name)
        if context.pledge_class and person.pledge_class == context.pledge_class:
            focus.add(person.name)

    nuclear: set[str] = set()
    for name in focus:
        nuclear.update(graph.bigs[name])
        nuclear.update(graph.littles[name])
    nuclear -= focus

    path = context.path if context.path is not None and context.path.found else None
    path_nodes = set(path.path) if path else set()
    return FocusSets(focus=focus, nuclear=nuclear, path_nodes=path_nodes, path=path)

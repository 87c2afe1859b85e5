"""Shortest relationship path between two people.

The relationship graph is searched undirected: a person's neighbours are
their bigs followed by their littles. Breadth-first search expands paths in
non-decreasing length, so the first path reaching the target is a shortest one.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

import networkx as nx

from lineage_graph.graph import LineageGraph


class UnknownPersonError(KeyError):
    """A path endpoint is not a person in the record set."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"{self.name!r} not found in the data"


@dataclass(frozen=True)
class PathResult:
    """Outcome of a path search.

    ``path`` runs from ``source`` to ``target`` inclusive, and is empty when
    the two people are not connected.
    """

    source: str
    target: str
    path: list[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.path)

    @property
    def hops(self) -> int:
        return len(self.path) - 1 if self.path else -1

    @property
    def links(self) -> list[tuple[str, str]]:
        """Consecutive (from, to) pairs along the path."""
        return list(zip(self.path, self.path[1:]))

    def has_link(self, a: str, b: str) -> bool:
        """True when a–b is a step of the path, in either direction."""
        return any({a, b} == {x, y} for x, y in self.links)


def relationship_graph(graph: LineageGraph) -> nx.Graph:
    """Undirected view: every person linked to each of their bigs and littles."""
    g: nx.Graph = nx.Graph()
    for name in graph.names:
        g.add_node(name)
        for other in graph.bigs[name] + graph.littles[name]:
            g.add_edge(name, other)
    return g


def find_path(graph: LineageGraph, source: str, target: str) -> PathResult:
    """Breadth-first search for a minimum-hop path from ``source`` to ``target``.

    Raises:
        UnknownPersonError: either endpoint is not in the graph.
    """
    for name in (source, target):
        if name not in graph:
            raise UnknownPersonError(name)

    adjacency = relationship_graph(graph)
    queue: deque[list[str]] = deque([[source]])
    visited: set[str] = {source}

    while queue:
        path = queue.popleft()
        current = path[-1]
        if current == target:
            return PathResult(source=source, target=target, path=path)
        for neighbor in adjacency.neighbors(current):
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(path + [neighbor])

    return PathResult(source=source, target=target)

"""Layout module — family-grouped lineage layout pipeline.

Phases:
  1. Depth assignment (longest path from roots over the bigs relation)
  2. Family grouping + ordering (greedy connectivity chain)
  3. Intra-family subtree placement (unit positions, cycle-guarded)
  4. Leaf spacing (pixel offsets from label widths)
  5. Global composition (family blocks side by side, centered on the canvas)

Every pass starts from scratch: nothing computed here survives between calls
except inside an explicit ``LayoutCache``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field

from lineage_graph.config import DEFAULT_CONFIG, LayoutConfig
from lineage_graph.graph import DEFAULT_FAMILY, LineageGraph
from lineage_graph.labels import LabelMeasurer, estimate_width

logger = logging.getLogger(__name__)


def _finite(value: float, default: float = 0.0) -> float:
    return value if math.isfinite(value) else default


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# ─── Depth Assignment ─────────────────────────────────────────────────────────


def assign_depths(graph: LineageGraph) -> dict[str, int]:
    """Assign a generation depth to every person.

    depth(p) = 0 when p has no bigs, else 1 + max(depth(b) for b in bigs(p)).

    Traversal uses an explicit stack and an on-path set, so deep chains do not
    hit the recursion limit. A big that is still on the current path (a cycle)
    counts at its best-known depth, which is 0 until it has been resolved.
    Depths are cached across the whole pass, so a shared ancestor is resolved
    once no matter how many descendants reach it.
    """
    depths: dict[str, int] = {}

    for start in graph.names:
        if start in depths:
            continue
        on_path: set[str] = {start}
        stack: list[tuple[str, Iterator[str]]] = [(start, iter(graph.bigs[start]))]

        while stack:
            name, pending = stack[-1]
            descended = False
            for big in pending:
                if big in depths or big in on_path:
                    continue
                on_path.add(big)
                stack.append((big, iter(graph.bigs[big])))
                descended = True
                break
            if descended:
                continue

            stack.pop()
            on_path.discard(name)
            bigs = graph.bigs[name]
            depths[name] = 1 + max((depths.get(b, 0) for b in bigs), default=-1)

    return depths


# ─── Family Grouping + Ordering ───────────────────────────────────────────────


def group_by_family(graph: LineageGraph) -> dict[str, list[str]]:
    """Map primary family → member names, both in record order."""
    groups: dict[str, list[str]] = {}
    for person in graph.people():
        groups.setdefault(person.family, []).append(person.name)
    return groups


def family_cross_links(graph: LineageGraph) -> dict[str, dict[str, int]]:
    """Symmetric count of edges whose endpoints have different primary families."""
    links: dict[str, dict[str, int]] = {}
    for big, little in graph.edges:
        k1 = graph.person(big).family
        k2 = graph.person(little).family
        if k1 == k2:
            continue
        m1 = links.setdefault(k1, {})
        m2 = links.setdefault(k2, {})
        m1[k2] = m1.get(k2, 0) + 1
        m2[k1] = m2.get(k1, 0) + 1
    return links


def order_families(keys: list[str], cross_links: dict[str, dict[str, int]]) -> list[str]:
    """Order families left to right so cross-linked families sit next to each other.

    Greedy chain building:
      1. Seed with the family of largest total cross-family weight (first wins ties).
      2. Repeatedly take the unplaced family most connected to the placed ones
         (ties → lexicographically smallest name) and attach it to whichever end
         of the chain it is more connected to (ties → left end).
    """
    if len(keys) <= 1:
        return list(keys)

    def total_weight(key: str) -> int:
        return sum(cross_links.get(key, {}).values())

    def weight_between(a: str, b: str) -> int:
        return cross_links.get(a, {}).get(b, 0)

    seed = keys[0]
    seed_weight = total_weight(seed)
    for key in keys[1:]:
        w = total_weight(key)
        if w > seed_weight:
            seed, seed_weight = key, w

    placed: list[str] = [seed]
    unplaced: set[str] = set(keys) - {seed}

    while unplaced:
        best = None
        best_score = -1
        for key in sorted(unplaced):
            score = sum(weight_between(key, p) for p in placed)
            if score > best_score:
                best, best_score = key, score
        assert best is not None
        unplaced.remove(best)

        if weight_between(best, placed[0]) >= weight_between(best, placed[-1]):
            placed.insert(0, best)
        else:
            placed.append(best)

    return placed


# ─── Subtree Placement ────────────────────────────────────────────────────────


@dataclass
class FamilyPlacement:
    """Relative placement of one family's members before global composition.

    Attributes:
        unit: name → unitless order value (leaves are integers, parents the
              mean of their littles).
        local: name → pixel x relative to the family.
        span: total block width, from the leftmost left edge to the rightmost
              right edge.
        left_edge: min(local - width/2) over the family.
        cycles: each detected cycle as an ordered name list (first == last).
    """

    unit: dict[str, float]
    local: dict[str, float]
    span: float
    left_edge: float
    cycles: list[list[str]] = field(default_factory=list)


def family_children(graph: LineageGraph, family: str) -> dict[str, list[str]]:
    """name → littles in the same primary family, sorted by name."""
    children: dict[str, list[str]] = {}
    for big, little in graph.edges:
        if graph.person(big).family != family or graph.person(little).family != family:
            continue
        children.setdefault(big, []).append(little)
    for kids in children.values():
        kids.sort()
    return children


def assign_unit_positions(
    members: list[str],
    children: dict[str, list[str]],
) -> tuple[dict[str, float], list[list[str]]]:
    """Depth-first unit positions for one family.

    Roots (members no intra-family edge points at) are walked in name order,
    then any member still unplaced (pure intra-family cycles) in name order.
    A leaf takes the next integer; a parent takes the mean of its littles once
    all of them are placed. A little met again while on the current path is
    given the next integer immediately and the walk does not follow that edge.
    """
    targets = {kid for kids in children.values() for kid in kids}
    roots = sorted(m for m in members if m not in targets)

    unit: dict[str, float] = {}
    cycles: list[list[str]] = []
    next_unit = 0

    def place(start: str) -> None:
        nonlocal next_unit
        if start in unit:
            return
        visiting: set[str] = {start}
        path: list[str] = [start]
        stack: list[tuple[str, Iterator[str]]] = [(start, iter(children.get(start, [])))]

        while stack:
            name, pending = stack[-1]
            descended = False
            for little in pending:
                if little in visiting:
                    if little not in unit:
                        unit[little] = next_unit
                        next_unit += 1
                    cycle = path[path.index(little) :] + [little]
                    logger.warning("Cycle detected in littles: %s", " → ".join(cycle))
                    cycles.append(cycle)
                elif little not in unit:
                    visiting.add(little)
                    path.append(little)
                    stack.append((little, iter(children.get(little, []))))
                    descended = True
                    break
            if descended:
                continue

            stack.pop()
            path.pop()
            visiting.discard(name)
            kids = children.get(name, [])
            if kids:
                unit[name] = _mean([unit.get(k, 0.0) for k in kids])
            else:
                unit[name] = next_unit
                next_unit += 1

    for root in roots:
        place(root)
        next_unit += 1

    for name in sorted(members):
        if name not in unit:
            place(name)
            next_unit += 1

    return unit, cycles


def space_leaves(leaves: list[str], widths: dict[str, float], min_gap: float) -> dict[str, float]:
    """Pixel x for leaves already sorted left to right.

    The first leaf sits at 0; each next one at the previous x plus half of
    both widths plus ``min_gap``, so neighbouring boxes never overlap.
    """
    local: dict[str, float] = {}
    x = 0.0
    for i, name in enumerate(leaves):
        if i > 0:
            x += (widths[leaves[i - 1]] + widths[name]) / 2 + min_gap
        local[name] = x
    return local


def place_family(
    members: list[str],
    children: dict[str, list[str]],
    depths: dict[str, int],
    widths: dict[str, float],
    config: LayoutConfig = DEFAULT_CONFIG,
) -> FamilyPlacement:
    """Place one family: leaves first, then parents centered over their littles."""
    unit, cycles = assign_unit_positions(members, children)

    leaves = [m for m in members if not children.get(m)]
    leaves.sort(key=lambda m: unit[m])
    local = space_leaves(leaves, widths, config.min_gap)

    # Members without a leaf below them (isolated cycles) fall back to unit spacing.
    spacing = _mean([widths.get(m) or config.fallback_node_width for m in members]) + config.min_gap
    for m in members:
        if m not in local:
            local[m] = _finite(unit.get(m, 0.0) * spacing)

    # Deepest first, so every little is final before its big is centered.
    for m in sorted(members, key=lambda n: depths.get(n, 0), reverse=True):
        kids = children.get(m)
        if kids:
            center = _mean([local[k] for k in kids])
            if math.isfinite(center):
                local[m] = center

    if members:
        left_edge = min(local[m] - widths[m] / 2 for m in members)
        right_edge = max(local[m] + widths[m] / 2 for m in members)
    else:
        left_edge = right_edge = 0.0
    span = _finite(right_edge - left_edge)
    return FamilyPlacement(unit=unit, local=local, span=span, left_edge=_finite(left_edge), cycles=cycles)


# ─── Global Composition ───────────────────────────────────────────────────────


@dataclass
class LayoutNode:
    """A positioned person in the final layout.

    ``family_order`` is set for people declaring two or more families: their
    first two families ordered by where the family blocks ended up (left, right).
    """

    id: str
    family: str
    depth: int
    unit: float
    local_x: float
    width: float
    x: float
    y: float
    family_order: tuple[str, str] | None = None


@dataclass
class LayoutEdge:
    """A big → little edge with resolved endpoint coordinates."""

    source: str
    target: str
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass
class FamilyLabel:
    """Anchor for a family title, centered above the family's members."""

    family: str
    x: float
    y: float
    member_count: int


@dataclass
class LayoutResult:
    """Everything the rendering layer needs from one layout pass."""

    nodes: list[LayoutNode]
    edges: list[LayoutEdge]
    family_order: list[str]
    family_spans: dict[str, tuple[float, float]]
    labels: list[FamilyLabel]
    cycles: list[list[str]]

    def node_map(self) -> dict[str, LayoutNode]:
        return {n.id: n for n in self.nodes}


def compose(
    graph: LineageGraph,
    order: list[str],
    groups: dict[str, list[str]],
    placements: dict[str, FamilyPlacement],
    depths: dict[str, int],
    widths: dict[str, float],
    config: LayoutConfig = DEFAULT_CONFIG,
) -> tuple[list[LayoutNode], dict[str, tuple[float, float]]]:
    """Lay family blocks left to right and write global (x, y) on every person.

    Returns the positioned nodes (record order) and family → (base_x, span).
    """
    base_x: dict[str, float] = {}
    current = 0.0
    for family in order:
        base_x[family] = current
        current += placements[family].span + config.family_gap
    total = current - config.family_gap if order else 0.0
    offset = _finite(config.canvas_width / 2 - total / 2)
    for family in order:
        base_x[family] += offset

    centers = {f: base_x[f] + placements[f].span / 2 for f in order}
    spans = {f: (base_x[f], placements[f].span) for f in order}

    family_of = {name: family for family, names in groups.items() for name in names}
    nodes: list[LayoutNode] = []
    for person in graph.people():
        family = family_of[person.name]
        placement = placements[family]
        local = placement.local[person.name]
        depth = depths.get(person.name, 0)

        family_order = None
        if len(person.families) >= 2:
            first_two = sorted(person.families[:2], key=lambda f: centers.get(f, 0.0))
            family_order = (first_two[0], first_two[1])

        nodes.append(
            LayoutNode(
                id=person.name,
                family=family,
                depth=depth,
                unit=placement.unit.get(person.name, 0.0),
                local_x=local,
                width=widths[person.name],
                x=_finite(base_x[family] + local - placement.left_edge),
                y=_finite(config.top_margin + depth * config.layer_height),
                family_order=family_order,
            )
        )
    return nodes, spans


def route_edges(graph: LineageGraph, nodes: list[LayoutNode]) -> list[LayoutEdge]:
    """Resolve every big → little edge to its endpoint coordinates."""
    node_map = {n.id: n for n in nodes}
    edges: list[LayoutEdge] = []
    for big, little in graph.edges:
        src = node_map[big]
        tgt = node_map[little]
        edges.append(LayoutEdge(source=big, target=little, x1=src.x, y1=src.y, x2=tgt.x, y2=tgt.y))
    return edges


def family_labels(nodes: list[LayoutNode], config: LayoutConfig = DEFAULT_CONFIG) -> list[FamilyLabel]:
    """One title anchor per named family, above its topmost member.

    People without a family are not labelled.
    """
    members: dict[str, list[LayoutNode]] = {}
    for n in nodes:
        if n.family != DEFAULT_FAMILY:
            members.setdefault(n.family, []).append(n)

    labels: list[FamilyLabel] = []
    for family, fam_nodes in members.items():
        xs = [n.x for n in fam_nodes]
        top = min(n.y for n in fam_nodes)
        labels.append(
            FamilyLabel(
                family=family,
                x=(min(xs) + max(xs)) / 2,
                y=top - config.family_label_offset,
                member_count=len(fam_nodes),
            )
        )
    return labels


# ─── Full Layout Pipeline ─────────────────────────────────────────────────────


def full_layout(
    graph: LineageGraph,
    measurer: LabelMeasurer | None = None,
    config: LayoutConfig = DEFAULT_CONFIG,
) -> LayoutResult:
    """Run the full layout pipeline and return positioned nodes + edges."""
    depths = assign_depths(graph)
    widths = {p.name: estimate_width(p, measurer, config) for p in graph.people()}

    groups = group_by_family(graph)
    order = order_families(list(groups), family_cross_links(graph))
    logger.debug("Family order: %s", order)

    placements: dict[str, FamilyPlacement] = {}
    cycles: list[list[str]] = []
    for family in order:
        placement = place_family(groups[family], family_children(graph, family), depths, widths, config)
        placements[family] = placement
        cycles.extend(placement.cycles)

    nodes, spans = compose(graph, order, groups, placements, depths, widths, config)
    return LayoutResult(
        nodes=nodes,
        edges=route_edges(graph, nodes),
        family_order=order,
        family_spans=spans,
        labels=family_labels(nodes, config),
        cycles=cycles,
    )


class LayoutCache:
    """Single-slot layout cache keyed by a record-set version.

    Highlight and selection changes re-use the cached geometry; only a new
    version (the record set changed) triggers a fresh pass.
    """

    def __init__(self, measurer: LabelMeasurer | None = None, config: LayoutConfig = DEFAULT_CONFIG) -> None:
        self.measurer = measurer
        self.config = config
        self._version: Hashable | None = None
        self._result: LayoutResult | None = None

    def get(self, version: Hashable, graph: LineageGraph) -> LayoutResult:
        if self._result is None or version != self._version:
            logger.debug("Layout cache miss for version %r", version)
            self._result = full_layout(graph, self.measurer, self.config)
            self._version = version
        return self._result

    def clear(self) -> None:
        self._version = None
        self._result = None

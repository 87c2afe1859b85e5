"""Layout and shortest-path search for big/little lineage graphs."""

from lineage_graph.config import LayoutConfig
from lineage_graph.graph import LineageGraph, Person, RecordError, load_records, parse_records
from lineage_graph.layout import LayoutCache, LayoutResult, full_layout
from lineage_graph.pathfinder import PathResult, UnknownPersonError, find_path
from lineage_graph.resolve import resolve_name

__all__ = [
    "LayoutCache",
    "LayoutConfig",
    "LayoutResult",
    "LineageGraph",
    "PathResult",
    "Person",
    "RecordError",
    "UnknownPersonError",
    "find_path",
    "full_layout",
    "load_records",
    "parse_records",
    "resolve_name",
]

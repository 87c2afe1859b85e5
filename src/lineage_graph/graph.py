"""Graph module — person records and the big→little relationship graph.

A ``LineageGraph`` wraps a ``networkx.DiGraph`` whose edges run big → little
(flattened from every person's ``littles`` list) and keeps each person's
declared bigs/littles restricted to names that exist in the record set.
Unresolved names are dropped, not reported as errors.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import networkx as nx

logger = logging.getLogger(__name__)

DEFAULT_FAMILY = "default"


class RecordError(ValueError):
    """The input document cannot be read as a set of person records."""


# ─── Records ──────────────────────────────────────────────────────────────────


@dataclass
class Person:
    """One entity of the lineage. Identity is ``name``."""

    name: str
    nickname: str | None = None
    bond_number: float | None = None
    pledge_class: str | None = None
    families: list[str] = field(default_factory=list)
    bigs: list[str] = field(default_factory=list)
    littles: list[str] = field(default_factory=list)
    redacted: bool = False

    @property
    def family(self) -> str:
        """Primary family (first declared), used for grouping and ordering."""
        return self.families[0] if self.families else DEFAULT_FAMILY


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item]


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def person_from_record(record: Any) -> Person:
    """Build a ``Person`` from one raw record; optional fields default when malformed."""
    if not isinstance(record, dict):
        raise RecordError(f"person record must be an object, got {type(record).__name__}")
    name = record.get("name")
    if not isinstance(name, str) or not name.strip():
        raise RecordError(f"person record has no usable name: {record!r}")

    bond = record.get("bondNumber")
    if isinstance(bond, bool) or not isinstance(bond, (int, float)):
        bond = None

    return Person(
        name=name,
        nickname=_opt_str(record.get("nickname")),
        bond_number=bond,
        pledge_class=_opt_str(record.get("pledgeClass")),
        families=_str_list(record.get("families")),
        bigs=_str_list(record.get("bigs")),
        littles=_str_list(record.get("littles")),
        redacted=record.get("redacted") is True,
    )


def parse_records(document: Any) -> list[Person]:
    """Parse a decoded ``{"people": [...]}`` document into persons."""
    if not isinstance(document, dict) or not isinstance(document.get("people"), list):
        raise RecordError('input must be an object with a "people" list')
    return [person_from_record(rec) for rec in document["people"]]


def load_records(path: str | Path) -> list[Person]:
    """Read and parse a JSON record file."""
    with open(path, encoding="utf-8") as fh:
        try:
            document = json.load(fh)
        except json.JSONDecodeError as exc:
            raise RecordError(f"{path}: invalid JSON: {exc}") from exc
    return parse_records(document)


# ─── Graph Builder ────────────────────────────────────────────────────────────


@dataclass
class LineageGraph:
    """Adjacency view over a record set.

    Attributes:
        digraph: big → little edges; every node carries ``data=Person``.
        bigs: name → declared bigs that exist in the record set.
        littles: name → declared littles that exist in the record set.
    """

    digraph: nx.DiGraph
    bigs: dict[str, list[str]]
    littles: dict[str, list[str]]

    @classmethod
    def from_people(cls, people: list[Person]) -> LineageGraph:
        """Build the graph. Later records with a duplicate name replace earlier ones."""
        by_name: dict[str, Person] = {}
        for person in people:
            if person.name in by_name:
                logger.warning("Duplicate person %r; keeping the later record", person.name)
            by_name[person.name] = person

        g: nx.DiGraph = nx.DiGraph()
        for name, person in by_name.items():
            g.add_node(name, data=person)

        bigs: dict[str, list[str]] = {}
        littles: dict[str, list[str]] = {}
        for name, person in by_name.items():
            bigs[name] = _resolved(name, "big", person.bigs, by_name)
            littles[name] = _resolved(name, "little", person.littles, by_name)
            for little in littles[name]:
                g.add_edge(name, little)

        return cls(digraph=g, bigs=bigs, littles=littles)

    @property
    def names(self) -> list[str]:
        """Person names in record order."""
        return list(self.digraph.nodes)

    @property
    def edges(self) -> list[tuple[str, str]]:
        """Flat (big, little) edge list."""
        return list(self.digraph.edges())

    def person(self, name: str) -> Person:
        return self.digraph.nodes[name]["data"]

    def people(self) -> list[Person]:
        return [self.person(name) for name in self.digraph.nodes]

    def __contains__(self, name: object) -> bool:
        return name in self.digraph

    def __len__(self) -> int:
        return self.digraph.number_of_nodes()


def _resolved(owner: str, kind: str, names: list[str], known: dict[str, Person]) -> list[str]:
    out: list[str] = []
    for name in names:
        if name not in known:
            logger.debug("%s: unresolved %s %r ignored", owner, kind, name)
            continue
        if name not in out:
            out.append(name)
    return out

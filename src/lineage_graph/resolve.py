"""Resolve user-typed text to a canonical person name."""

from __future__ import annotations

from lineage_graph.graph import Person
from lineage_graph.labels import REDACTED_LABEL, format_name_with_nickname


def resolve_name(people: list[Person], text: str) -> str | None:
    """Map typed text to a person's name, or None when nothing matches.

    Tried in order: the word "Redacted" (first redacted person), exact name,
    exact formatted name ('John "Johnny" Adams'), nickname, then a
    case-insensitive substring match either way. Redacted people are only
    reachable through the word "Redacted".
    """
    query = (text or "").strip()
    if not query:
        return None
    lowered = query.lower()

    if lowered == REDACTED_LABEL.lower():
        return next((p.name for p in people if p.redacted), None)

    visible = [p for p in people if not p.redacted]
    matchers = (
        lambda p: p.name == query,
        lambda p: format_name_with_nickname(p) == query,
        lambda p: bool(p.nickname) and p.nickname.lower() == lowered,
        lambda p: p.name.lower() in lowered or lowered in p.name.lower(),
    )
    for matches in matchers:
        for person in visible:
            if matches(person):
                return person.name
    return None

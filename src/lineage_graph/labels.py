"""Display labels and label width estimation.

The layout never measures text itself: it asks a ``LabelMeasurer`` for the
pixel width of each display label. Renderers that can measure real glyphs
plug in their own measurer; the default one counts characters.
"""

from __future__ import annotations

from typing import Protocol

from lineage_graph.config import DEFAULT_CONFIG, LayoutConfig
from lineage_graph.graph import Person

REDACTED_LABEL = "Redacted"


class LabelMeasurer(Protocol):
    """Protocol that all label measurers must implement."""

    def measure(self, label: str) -> float:
        """Return the rendered pixel width of ``label`` (non-negative)."""
        ...


class CharWidthMeasurer:
    """Fallback measurer: widest line × a fixed per-character width."""

    def __init__(
        self,
        char_width: float = DEFAULT_CONFIG.char_width,
        empty_width: float = DEFAULT_CONFIG.empty_label_width,
    ) -> None:
        self.char_width = char_width
        self.empty_width = empty_width

    def measure(self, label: str) -> float:
        if not label:
            return self.empty_width
        return label_columns(label) * self.char_width


def label_columns(label: str) -> int:
    """Length of the longest line of a label that may contain newlines."""
    if not label:
        return 0
    return max(len(line) for line in label.split("\n"))


# ─── Display names ────────────────────────────────────────────────────────────


def format_name_with_nickname(person: Person) -> str:
    """'John Adams' with nickname 'Johnny' → 'John "Johnny" Adams'."""
    if person.redacted:
        return REDACTED_LABEL
    if not person.nickname:
        return person.name
    parts = person.name.split()
    if len(parts) <= 1:
        return f'{person.name.strip()} "{person.nickname}"'
    return f'{parts[0]} "{person.nickname}" {" ".join(parts[1:])}'


def nickname_or_name(person: Person) -> str:
    """The short label drawn inside a node."""
    if person.redacted:
        return REDACTED_LABEL
    return person.nickname or person.name


def estimate_width(
    person: Person,
    measurer: LabelMeasurer | None = None,
    config: LayoutConfig = DEFAULT_CONFIG,
) -> float:
    """Estimated node box width: measured label plus padding.

    A measurer returning a negative or non-finite width is treated as
    returning the empty-label width.
    """
    if measurer is None:
        measurer = CharWidthMeasurer(config.char_width, config.empty_label_width)
    text_width = measurer.measure(nickname_or_name(person))
    if not (0 <= text_width < float("inf")):
        text_width = config.empty_label_width
    return text_width + config.label_padding

"""Layout configuration — pixel constants with environment overrides.

Every constant the layout pipeline uses lives on ``LayoutConfig``. The
defaults reproduce the reference look (14px bold labels, 140px layers);
each field can be overridden with a ``LINEAGE_<FIELD>`` environment variable:

    $ export LINEAGE_LAYER_HEIGHT=120
    $ export LINEAGE_CANVAS_WIDTH=1920
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

ENV_PREFIX = "LINEAGE_"


@dataclass(frozen=True)
class LayoutConfig:
    """Pixel geometry for one layout pass."""

    label_padding: float = 60.0  # added to the measured text width
    min_gap: float = 8.0  # between adjacent leaves
    layer_height: float = 140.0  # between generations
    family_gap: float = 80.0  # between family blocks
    canvas_width: float = 1200.0
    canvas_height: float = 800.0
    char_width: float = 8.0  # fallback per-character label width
    empty_label_width: float = 40.0
    fallback_node_width: float = 80.0
    family_label_offset: float = 100.0

    @property
    def top_margin(self) -> float:
        """Y of generation 0."""
        return self.canvas_height / 4

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LayoutConfig:
        """Build a config from ``LINEAGE_*`` variables, defaulting unset ones.

        Raises:
            ValueError: a variable is set but is not a finite, non-negative number.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, float] = {}
        for f in fields(cls):
            var = ENV_PREFIX + f.name.upper()
            raw = env.get(var)
            if raw is None or not raw.strip():
                continue
            try:
                value = float(raw)
            except ValueError:
                raise ValueError(f"{var} must be a number, got {raw!r}") from None
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{var} must be a finite, non-negative number, got {raw!r}")
            overrides[f.name] = value
        return cls(**overrides)


DEFAULT_CONFIG = LayoutConfig()

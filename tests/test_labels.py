"""Tests for labels.py — display names and label width estimation."""

from __future__ import annotations

from lineage_graph.config import LayoutConfig
from lineage_graph.graph import Person
from lineage_graph.labels import (
    CharWidthMeasurer,
    estimate_width,
    format_name_with_nickname,
    label_columns,
    nickname_or_name,
)


class NegativeMeasurer:
    def measure(self, label: str) -> float:
        return -5.0


class TestDisplayNames:
    def test_nickname_after_first_word(self):
        person = Person(name="John Quincy Adams", nickname="Johnny")
        assert format_name_with_nickname(person) == 'John "Johnny" Quincy Adams'

    def test_single_word_name(self):
        assert format_name_with_nickname(Person(name="Cher", nickname="C")) == 'Cher "C"'

    def test_no_nickname(self):
        assert format_name_with_nickname(Person(name="John Adams")) == "John Adams"

    def test_redacted(self):
        person = Person(name="Secret Person", nickname="Shh", redacted=True)
        assert format_name_with_nickname(person) == "Redacted"
        assert nickname_or_name(person) == "Redacted"

    def test_nickname_or_name(self):
        assert nickname_or_name(Person(name="Robert", nickname="Bob")) == "Bob"
        assert nickname_or_name(Person(name="Robert")) == "Robert"


class TestLabelColumns:
    def test_empty(self):
        assert label_columns("") == 0

    def test_multiline(self):
        assert label_columns("ab\ncde") == 3


class TestCharWidthMeasurer:
    def test_characters_times_width(self):
        assert CharWidthMeasurer().measure("Bob") == 24.0

    def test_empty_label(self):
        assert CharWidthMeasurer().measure("") == 40.0

    def test_custom_width(self):
        assert CharWidthMeasurer(char_width=10).measure("abcd") == 40.0


class TestEstimateWidth:
    def test_measured_plus_padding(self):
        assert estimate_width(Person(name="Bob")) == 84.0

    def test_uses_nickname(self):
        assert estimate_width(Person(name="Robert", nickname="Bob")) == 84.0

    def test_redacted_measures_placeholder(self):
        assert estimate_width(Person(name="X", redacted=True)) == 8 * len("Redacted") + 60.0

    def test_invalid_measurement_falls_back(self):
        """A negative measurement is replaced by the empty-label width."""
        assert estimate_width(Person(name="Bob"), NegativeMeasurer()) == 100.0

    def test_config_padding(self):
        config = LayoutConfig(label_padding=10, char_width=5)
        assert estimate_width(Person(name="Bob"), config=config) == 25.0

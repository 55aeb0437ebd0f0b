"""
Tests for set cell parsing.

Covers working set cells, warm-up notes and split markers.
"""

import pytest

from project_mass.models import Difficulty
from project_mass.set_parser import (
    is_skip_value,
    is_split_marker,
    parse_set_cell,
    parse_warmup_notes,
)


class TestParseSetCell:
    """Tests for parse_set_cell."""

    @pytest.mark.parametrize(
        "raw, reps, weight",
        [("3x225", 3, 225.0), ("10 x 60", 10, 60.0), ("5X315", 5, 315.0), ("12x62.5", 12, 62.5)],
    )
    def test_plain_reps_and_weight(self, raw, reps, weight):
        """Test plain reps x weight cells."""
        result = parse_set_cell(raw)

        assert result is not None
        assert result.reps == reps
        assert result.weight == weight
        assert result.difficulty is None
        assert result.increase_weight is False
        assert result.is_warmup is False

    def test_difficulty_and_increase_marker(self):
        """Test difficulty suffix with increase-weight marker."""
        result = parse_set_cell("3x225mh^")

        assert result is not None
        assert result.reps == 3
        assert result.weight == 225.0
        assert result.difficulty == Difficulty.MH
        assert result.difficulty == "mh"
        assert result.increase_weight is True

    def test_separator_normalization(self):
        """Test m/h and e/m shorthand becomes mh and em."""
        assert parse_set_cell("10x135m/h").difficulty == Difficulty.MH
        assert parse_set_cell("10x135e/m").difficulty == Difficulty.EM
        assert parse_set_cell("10x135M/H").difficulty == Difficulty.MH

    def test_longest_token_wins(self):
        """Test vh and mh are not read as a bare h."""
        assert parse_set_cell("3x225vh").difficulty == Difficulty.VH
        assert parse_set_cell("3x225 mh").difficulty == Difficulty.MH
        assert parse_set_cell("3x225h").difficulty == Difficulty.H
        assert parse_set_cell("8x100e").difficulty == Difficulty.E

    def test_unknown_weight(self):
        """Test reps x ? parses with zero weight."""
        result = parse_set_cell("10 x ?")

        assert result is not None
        assert result.reps == 10
        assert result.weight == 0.0

    def test_uncertain_weight(self):
        """Test reps x weight? keeps the best-effort weight."""
        result = parse_set_cell("10x9?")

        assert result is not None
        assert result.reps == 10
        assert result.weight == 9.0
        assert result.raw_text == "10x9?"

    def test_incomplete_entry(self):
        """Test reps x with no weight parses with zero weight."""
        result = parse_set_cell("4x")

        assert result is not None
        assert result.reps == 4
        assert result.weight == 0.0

    def test_raw_text_is_trimmed_original(self):
        """Test raw text keeps the cell as logged."""
        result = parse_set_cell("  3x225mh^ ")
        assert result.raw_text == "3x225mh^"

    @pytest.mark.parametrize("raw", ["dnf", "DNF", "", "   ", "--", "---", "n/a", "No Time", None])
    def test_skip_values(self, raw):
        """Test skip vocabulary yields no set."""
        assert parse_set_cell(raw) is None

    @pytest.mark.parametrize("raw", ["felt heavy", "x225", "3x225lbs", "skipped", "0x100"])
    def test_unparseable(self, raw):
        """Test noise yields no set rather than garbage."""
        assert parse_set_cell(raw) is None

    @pytest.mark.parametrize(
        "raw", ["3x225mh^", "10x135m/h", "10 x ?", "10x9?", "4x", "12x62.5e", "5 x 315 vh"]
    )
    def test_reparse_raw_text(self, raw):
        """Test parsing the preserved raw text gives the same set."""
        first = parse_set_cell(raw)
        second = parse_set_cell(first.raw_text)

        assert (second.reps, second.weight, second.difficulty, second.increase_weight) == (
            first.reps,
            first.weight,
            first.difficulty,
            first.increase_weight,
        )


class TestParseWarmupNotes:
    """Tests for parse_warmup_notes."""

    def test_all_warmups(self):
        """Test a notes cell made only of warm-up sets."""
        sets, remaining = parse_warmup_notes("12x45e, 12x95e, 10x135m, 8x185mh")

        assert [s.reps for s in sets] == [12, 12, 10, 8]
        assert [s.weight for s in sets] == [45.0, 95.0, 135.0, 185.0]
        assert all(s.is_warmup for s in sets)
        assert remaining == ""

    def test_warmups_then_text(self):
        """Test text after the warm-ups is kept as notes."""
        sets, remaining = parse_warmup_notes("8x45, 8x95, 6x135, felt good")

        assert len(sets) == 3
        assert remaining == "felt good"

    def test_stops_at_first_non_set(self):
        """Test the warm-up run ends at the first piece that is not a set."""
        sets, remaining = parse_warmup_notes("8x45, knee sore, 6x135")

        assert len(sets) == 1
        assert remaining == "knee sore, 6x135"

    def test_text_before_first_warmup_kept(self):
        """Test text ahead of the first warm-up stays in the notes."""
        sets, remaining = parse_warmup_notes("10x135 felt off, 8x45, back tight")

        assert [s.label() for s in sets] == ["8x45"]
        assert remaining == "10x135 felt off, back tight"

    def test_plain_text(self):
        """Test notes that do not start with a set are returned whole."""
        sets, remaining = parse_warmup_notes("felt strong today")

        assert sets == []
        assert remaining == "felt strong today"

    def test_empty(self):
        """Test empty notes."""
        assert parse_warmup_notes("") == ([], "")
        assert parse_warmup_notes(None) == ([], "")


class TestIsSplitMarker:
    """Tests for is_split_marker."""

    @pytest.mark.parametrize("value", ["--", "---", " -- ", "—", "–", "——", "-–-", "–-"])
    def test_markers(self, value):
        """Test dash-only cells are split markers."""
        assert is_split_marker(value) is True

    @pytest.mark.parametrize("value", ["", "-", "n/a", "3x225", "- -", None])
    def test_not_markers(self, value):
        """Test other cells are not split markers."""
        assert is_split_marker(value) is False


class TestIsSkipValue:
    """Tests for is_skip_value."""

    def test_case_insensitive(self):
        """Test skip vocabulary ignores case and padding."""
        assert is_skip_value("N/A")
        assert is_skip_value(" no machine ")
        assert not is_skip_value("3x225")

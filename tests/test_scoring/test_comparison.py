"""
Tests for tea_effects/scoring/comparison.py.

What we test
------------
compare_with_expected():
  - Within ±2.0 (inclusive) counts as a match.
  - Effects absent from the calculated vector read as 0.
  - match_percentage = matches / expected * 100; 0 when nothing expected.
  - Legacy names in the expected profile are resolved.
"""

from __future__ import annotations

import pytest

from tea_effects.scoring.comparison import compare_with_expected


class TestCompareWithExpected:
    def test_tolerance_inclusive(self):
        comparison = compare_with_expected({"calming": 6.0, "focusing": 5.0}, {"calming": 8.0, "focusing": 7.5})
        assert [m.effect for m in comparison.matches] == ["calming"]
        assert [m.effect for m in comparison.mismatches] == ["focusing"]
        assert comparison.mismatches[0].difference == pytest.approx(-2.5)
        assert comparison.match_percentage == pytest.approx(50.0)

    def test_missing_effect_reads_zero(self):
        comparison = compare_with_expected({}, {"grounding": 5.0})
        assert comparison.mismatches[0].calculated == 0.0

    def test_nothing_expected(self):
        comparison = compare_with_expected({"calming": 6.0}, {})
        assert comparison.match_percentage == 0.0
        assert comparison.matches == [] and comparison.mismatches == []

    def test_aliases_resolved(self):
        comparison = compare_with_expected(
            {"grounding": 6.0}, {"centering": 6.5}, aliases={"centering": "grounding"}
        )
        assert comparison.matches[0].effect == "grounding"

    def test_custom_tolerance(self):
        comparison = compare_with_expected({"calming": 6.0}, {"calming": 7.0}, tolerance=0.5)
        assert comparison.match_percentage == 0.0
        assert comparison.tolerance == 0.5

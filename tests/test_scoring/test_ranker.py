"""
Tests for tea_effects/scoring/ranker.py.

What we test
------------
rank():
  - Dominant is the maximum value.
  - A tie at the maximum goes to the effect earlier in the priority list,
    on every run and regardless of dict order.
  - Effects outside the priority list rank after it, alphabetically.
  - Supporting threshold: dominant 8.0 → 4.0 included, 3.9 excluded.
  - The absolute floor excludes weak effects even under a weak dominant.
  - Supporting effects are ordered by value, ties by priority.
  - max_supporting truncates.
  - All-zero or empty vector → undetermined, no supporting effects.
"""

from __future__ import annotations

from tea_effects.scoring.ranker import priority_key, rank
from tea_effects.taxonomy.effect_taxonomy import UNDETERMINED

PRIORITY = [
    "energizing", "calming", "focusing", "harmonizing",
    "grounding", "elevating", "comforting", "restorative",
]


class TestDominant:
    def test_maximum_wins(self):
        ranking = rank({"calming": 7.0, "focusing": 8.0}, PRIORITY)
        assert ranking.dominant == ("focusing", 8.0)

    def test_tie_broken_by_priority(self):
        forward = rank({"grounding": 6.0, "calming": 6.0}, PRIORITY)
        reverse = rank({"calming": 6.0, "grounding": 6.0}, PRIORITY)
        assert forward.dominant[0] == "calming"
        assert reverse.dominant[0] == "calming"

    def test_tie_repeatable(self):
        vector = {"restorative": 5.0, "elevating": 5.0, "comforting": 5.0}
        names = {rank(vector, PRIORITY).dominant[0] for _ in range(20)}
        assert names == {"elevating"}

    def test_unlisted_effects_after_priority_alphabetical(self):
        key = priority_key(PRIORITY)
        names = sorted(["zesty", "restorative", "bright", "energizing"], key=key)
        assert names == ["energizing", "restorative", "bright", "zesty"]

    def test_all_zero_undetermined(self):
        ranking = rank({"calming": 0.0, "focusing": 0.0}, PRIORITY)
        assert ranking.dominant == (UNDETERMINED, 0.0)
        assert ranking.supporting == []
        assert ranking.is_undetermined

    def test_empty_undetermined(self):
        assert rank({}, PRIORITY).is_undetermined


class TestSupporting:
    def test_fraction_boundary(self):
        ranking = rank({"energizing": 8.0, "focusing": 4.0, "calming": 3.9}, PRIORITY)
        assert ranking.supporting == [("focusing", 4.0)]

    def test_absolute_floor(self):
        ranking = rank({"energizing": 4.0, "focusing": 2.9, "calming": 3.0}, PRIORITY)
        assert ranking.supporting == [("calming", 3.0)]

    def test_order_by_value_then_priority(self):
        ranking = rank(
            {"energizing": 9.0, "grounding": 6.0, "calming": 6.0, "focusing": 7.0}, PRIORITY
        )
        assert [name for name, _ in ranking.supporting] == ["focusing", "calming", "grounding"]

    def test_max_supporting(self):
        ranking = rank(
            {"energizing": 9.0, "grounding": 6.0, "calming": 6.0, "focusing": 7.0},
            PRIORITY,
            max_supporting=2,
        )
        assert [name for name, _ in ranking.supporting] == ["focusing", "calming"]

    def test_custom_fraction(self):
        ranking = rank({"energizing": 10.0, "calming": 6.0}, PRIORITY, supporting_fraction=0.7)
        assert ranking.supporting == []

"""
Tests for tea_effects/models/reference.py.

What we test
------------
  - scale_max must be positive on every scaled table.
  - Interaction rules need two distinct effects and targets within the pair.
  - target_effects defaults to both effects.
  - Threshold rules reject zero divisors and inverted bands.
  - Geography projections need non-negative weights with a positive sum.
  - RatioBand.contains is [min, max); RangeModifier bounds are exclusive.
  - Season months lie in [1, 12] and belong to at most one season.
  - ReferenceTables.alias_map flattens declared aliases.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tea_effects.models.reference import (
    FlavorTable,
    GeographyTable,
    InteractionRule,
    ProcessingTable,
    RangeModifier,
    RatioBand,
    SeasonalTable,
    TeaTypeTable,
    ThresholdShift,
)


class TestScales:
    @pytest.mark.parametrize(
        "model", [TeaTypeTable, FlavorTable, ProcessingTable, SeasonalTable]
    )
    def test_non_positive_scale(self, model):
        with pytest.raises(ValidationError):
            model(scale_max=0)

    def test_negative_entry_intensity(self):
        with pytest.raises(ValidationError):
            ProcessingTable(methods={"steamed": {"effects": {"calming": 1.0}, "intensity": -1}})


class TestInteractionRule:
    def test_same_effect_twice(self):
        with pytest.raises(ValidationError):
            InteractionRule(name="x", effects=("calming", "calming"), modifier=0.1)

    def test_target_outside_pair(self):
        with pytest.raises(ValidationError):
            InteractionRule(
                name="x", effects=("calming", "focusing"), modifier=0.1, targets=["grounding"]
            )

    def test_default_targets_both(self):
        rule = InteractionRule(name="x", effects=("calming", "focusing"), modifier=0.1)
        assert rule.target_effects == ("calming", "focusing")


class TestGeographyModels:
    def test_zero_divisor(self):
        with pytest.raises(ValidationError):
            ThresholdShift(low=1, high=2, below={"fire": 0})

    def test_inverted_band(self):
        with pytest.raises(ValidationError):
            ThresholdShift(low=10, high=2)

    def test_projection_weights(self):
        with pytest.raises(ValidationError):
            GeographyTable(projection={"calming": {"water": 0.0}})

    def test_unknown_element_rejected(self):
        with pytest.raises(ValidationError):
            GeographyTable(soil={"volcanic": {"aether": 1.0}})


class TestRatioBand:
    def test_half_open(self):
        band = RatioBand(name="balanced", min_ratio=1.0, max_ratio=1.5)
        assert band.contains(1.0)
        assert band.contains(1.49)
        assert not band.contains(1.5)
        assert not band.contains(0.99)

    def test_open_ended(self):
        assert RatioBand(name="any").contains(100.0)


class TestAliasMap:
    def test_alias_map(self, minimal_tables):
        assert minimal_tables.alias_map() == {"clarifying": "focusing"}

    def test_bundled_aliases(self, reference_tables):
        aliases = reference_tables.alias_map()
        assert aliases["centering"] == "grounding"
        assert aliases["uplifting"] == "elevating"
        assert aliases["nurturing"] == "comforting"


class TestSeasonalModels:
    def test_month_claimed_twice(self):
        with pytest.raises(ValidationError, match="claimed by both"):
            SeasonalTable(
                seasons={
                    "summer": {"months": [6, 7, 8]},
                    "monsoon": {"months": [8, 9]},
                }
            )

    @pytest.mark.parametrize("month", [0, 13])
    def test_month_out_of_range(self, month):
        with pytest.raises(ValidationError):
            SeasonalTable(seasons={"odd": {"months": [month]}})

    def test_season_for(self):
        table = SeasonalTable(seasons={"winter": {"months": [12, 1, 2]}})
        assert table.season_for(1) == "winter"
        assert table.season_for(6) is None

    def test_modifier_bounds_exclusive(self):
        high = RangeModifier(above=1000.0, multipliers={})
        assert high.applies(1000.1)
        assert not high.applies(1000.0)
        low = RangeModifier(below=0.8, multipliers={})
        assert low.applies(0.5)
        assert not low.applies(0.8)

    def test_negative_multiplier(self):
        with pytest.raises(ValidationError):
            RangeModifier(above=1.0, multipliers={"calming": -1.0})

"""
Tests for tea_effects/scoring/seasonal.py.

What we test
------------
season_name():
  - Northern months map onto the bundled seasons.
  - A negative latitude shifts the month by six (October south = April north).
  - A missing latitude counts as northern; a missing month gives None.

score_seasonal():
  - Season intensities plus the type bonus for effects already present.
  - The same month scores differently in the two hemispheres.
  - No geography, no harvest month, or a month no season covers → empty.
  - Altitude and ratio modifiers scale existing effects only; bounds are
    exclusive; zero caffeine skips the ratio modifier.
  - Values are capped at 10 and legacy effect names are resolved.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tea_effects.models.reference import SeasonalTable
from tea_effects.models.tea import TeaCompounds, TeaGeography, TeaRecord
from tea_effects.scoring.seasonal import score_seasonal, season_name, type_bonus


def _harvest(month, latitude=None, altitude=None, tea_type=None, **compounds) -> TeaRecord:
    return TeaRecord(
        type=tea_type,
        geography=TeaGeography(harvest_month=month, latitude=latitude, altitude=altitude),
        compounds=TeaCompounds(**compounds) if compounds else None,
    )


class TestSeasonName:
    @pytest.mark.parametrize(
        "month, expected",
        [
            (1, "winter"), (2, "winter"), (3, "early-spring"), (4, "early-spring"),
            (5, "spring"), (6, "summer"), (7, "summer"), (8, "summer"),
            (9, "autumn"), (10, "autumn"), (11, "autumn"), (12, "winter"),
        ],
    )
    def test_northern_months(self, reference_tables, month, expected):
        assert season_name(reference_tables.seasonal, month, 30.0) == expected

    def test_southern_shift(self, reference_tables):
        table = reference_tables.seasonal
        assert season_name(table, 10, -33.0) == "early-spring"
        assert season_name(table, 6, -10.0) == "winter"
        assert season_name(table, 12, -40.0) == "summer"

    def test_missing_latitude_is_northern(self, reference_tables):
        assert season_name(reference_tables.seasonal, 7) == "summer"

    def test_missing_month(self, reference_tables):
        assert season_name(reference_tables.seasonal, None, 30.0) is None


class TestScoreSeasonal:
    def test_season_with_type_bonus(self, reference_tables):
        result = score_seasonal(_harvest(4, 30.0, tea_type="green"), reference_tables.seasonal)
        assert result == {
            "focusing": pytest.approx(9.0),
            "elevating": pytest.approx(7.0),
            "energizing": pytest.approx(7.0),
        }

    def test_bonus_only_for_present_effects(self, reference_tables):
        # green adds to focusing and energizing; winter has neither
        result = score_seasonal(_harvest(1, 30.0, tea_type="green"), reference_tables.seasonal)
        assert result == {
            "calming": pytest.approx(7.0),
            "restorative": pytest.approx(6.0),
            "comforting": pytest.approx(5.0),
        }

    def test_type_token_inside_longer_type(self, reference_tables):
        assert type_bonus(reference_tables.seasonal, "Puerh-Shou") == {
            "grounding": 1.0,
            "comforting": 1.0,
        }
        result = score_seasonal(_harvest(10, 22.0, tea_type="puerh-shou"), reference_tables.seasonal)
        assert result["comforting"] == pytest.approx(8.0)
        assert result["grounding"] == pytest.approx(7.0)
        assert result["harmonizing"] == pytest.approx(5.0)

    def test_hemisphere_flip(self, reference_tables):
        table = reference_tables.seasonal
        north = score_seasonal(_harvest(4, 30.0), table)
        south = score_seasonal(_harvest(4, -30.0), table)
        assert set(north) == {"focusing", "elevating", "energizing"}
        assert set(south) == {"comforting", "grounding", "harmonizing"}
        assert score_seasonal(_harvest(10, -30.0), table) == north

    def test_no_geography(self, reference_tables):
        assert score_seasonal(TeaRecord(type="green"), reference_tables.seasonal) == {}

    def test_no_harvest_month(self, reference_tables):
        tea = TeaRecord(geography=TeaGeography(latitude=30.0, altitude=1200))
        assert score_seasonal(tea, reference_tables.seasonal) == {}

    def test_month_without_season(self):
        table = SeasonalTable(seasons={"spring": {"months": [5], "effects": {"calming": 5.0}}})
        assert score_seasonal(_harvest(7, 30.0), table) == {}
        assert score_seasonal(_harvest(5, 30.0), table) == {"calming": pytest.approx(5.0)}

    def test_out_of_range_month_rejected(self):
        with pytest.raises(ValidationError):
            TeaGeography(harvest_month=13)

    def test_high_altitude_modifier(self, reference_tables):
        result = score_seasonal(_harvest(4, 30.0, altitude=1200), reference_tables.seasonal)
        assert result["focusing"] == pytest.approx(9.6)
        assert result["elevating"] == pytest.approx(8.4)
        assert result["energizing"] == pytest.approx(6.0)

    def test_altitude_bound_exclusive(self, reference_tables):
        result = score_seasonal(_harvest(4, 30.0, altitude=1000), reference_tables.seasonal)
        assert result["focusing"] == pytest.approx(8.0)

    def test_low_altitude_modifier_never_creates_effects(self, reference_tables):
        result = score_seasonal(_harvest(7, 30.0, altitude=200), reference_tables.seasonal)
        assert result["grounding"] == pytest.approx(7.2)
        assert result["energizing"] == pytest.approx(7.0)
        assert "comforting" not in result

    def test_high_ratio_modifier(self, reference_tables):
        tea = _harvest(1, 30.0, caffeine=3, l_theanine=9)
        result = score_seasonal(tea, reference_tables.seasonal)
        assert result["calming"] == pytest.approx(8.4)
        assert "focusing" not in result

    def test_low_ratio_modifier(self, reference_tables):
        tea = _harvest(7, 30.0, caffeine=8, l_theanine=4)
        assert score_seasonal(tea, reference_tables.seasonal)["energizing"] == pytest.approx(8.4)

    def test_zero_caffeine_skips_ratio(self, reference_tables):
        tea = _harvest(1, 30.0, caffeine=0, l_theanine=9)
        assert score_seasonal(tea, reference_tables.seasonal)["calming"] == pytest.approx(7.0)

    def test_capped_at_ten(self, reference_tables):
        # (8 + 1) * 1.2 = 10.8
        tea = _harvest(4, 30.0, altitude=1200, tea_type="green")
        assert score_seasonal(tea, reference_tables.seasonal)["focusing"] == 10.0

    def test_legacy_names_resolved(self, reference_tables):
        table = SeasonalTable(seasons={"summer": {"months": [7], "effects": {"centering": 6.0}}})
        result = score_seasonal(_harvest(7, 30.0), table, reference_tables.alias_map())
        assert result == {"grounding": pytest.approx(6.0)}

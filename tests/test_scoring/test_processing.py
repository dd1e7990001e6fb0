"""
Tests for tea_effects/scoring/processing.py.

What we test
------------
score_processing():
  - Each method adds its normalized vector * intensity.
  - Method lookup honours aliases and ignores case / separators.
  - Firing modifiers scale existing effects only.
  - Unknown methods are ignored; no processing → empty vector.
  - Values are capped at 10.
"""

from __future__ import annotations

import pytest

from tea_effects.models.reference import ProcessingTable
from tea_effects.models.tea import TeaProcessing, TeaRecord
from tea_effects.scoring.processing import firing_multipliers, score_processing

TABLE = ProcessingTable(
    scale_max=4.0,
    methods={
        "heavy-roast": {"effects": {"comforting": 2.0, "grounding": 2.0}, "intensity": 1.0},
        "steamed": {"effects": {"focusing": 2.0}, "intensity": 0.5, "aliases": ["steaming"]},
    },
    firing_modifiers=[
        {"match": ["charcoal", "heavy"], "multipliers": {"grounding": 1.2, "calming": 2.0}},
    ],
)


def _tea(*methods: str, firing: str | None = None) -> TeaRecord:
    return TeaRecord(processing=TeaProcessing(methods=list(methods), firing=firing))


class TestScoreProcessing:
    def test_method_times_intensity(self):
        assert score_processing(_tea("steamed"), TABLE) == {"focusing": pytest.approx(2.5)}

    def test_alias_and_case(self):
        assert score_processing(_tea("Steaming"), TABLE) == {"focusing": pytest.approx(2.5)}
        assert score_processing(_tea("Heavy Roast"), TABLE)["comforting"] == pytest.approx(5.0)

    def test_methods_sum(self):
        result = score_processing(_tea("steamed", "steamed"), TABLE)
        assert result["focusing"] == pytest.approx(5.0)

    def test_firing_scales_existing_effects_only(self):
        result = score_processing(_tea("heavy-roast", firing="charcoal"), TABLE)
        assert result["grounding"] == pytest.approx(6.0)
        assert result["comforting"] == pytest.approx(5.0)
        assert "calming" not in result

    def test_unknown_method_ignored(self):
        assert score_processing(_tea("moonlight-dried"), TABLE) == {}

    def test_no_processing(self):
        assert score_processing(TeaRecord(), TABLE) == {}

    def test_capped_at_ten(self):
        result = score_processing(_tea("heavy-roast", "heavy-roast", "heavy-roast"), TABLE)
        assert result["grounding"] == 10.0


class TestFiringMultipliers:
    def test_no_firing(self):
        assert firing_multipliers(TABLE, None) == {}

    def test_unmatched_firing(self):
        assert firing_multipliers(TABLE, "sun") == {}

    def test_bundled_charcoal_firing(self, reference_tables):
        multipliers = firing_multipliers(reference_tables.processing, "Charcoal")
        assert multipliers["grounding"] == pytest.approx(1.2)
        assert multipliers["comforting"] == pytest.approx(1.15)

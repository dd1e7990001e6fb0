"""
Comparison of a calculated profile with a catalogue's expected effects.

An expected effect matches when the calculated level is within
``tolerance`` (default 2.0 points) of it, in either direction. Effects the
engine did not produce at all count as calculated 0. The match percentage
is ``matches / expected * 100`` (0 when nothing was expected).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

from tea_effects.models.effect import EffectMatch, ExpectedComparison
from tea_effects.scoring.normalizer import canonicalize

DEFAULT_TOLERANCE = 2.0


def compare_with_expected(
    combined: Mapping[str, float],
    expected: Mapping[str, float],
    tolerance: float = DEFAULT_TOLERANCE,
    aliases: Optional[Mapping[str, str]] = None,
) -> ExpectedComparison:
    matches: list[EffectMatch] = []
    mismatches: list[EffectMatch] = []

    for effect, expected_level in canonicalize(expected, aliases).items():
        calculated = combined.get(effect, 0.0)
        entry = EffectMatch(
            effect=effect,
            expected=expected_level,
            calculated=round(calculated, 4),
            difference=round(calculated - expected_level, 4),
        )
        if abs(calculated - expected_level) <= tolerance:
            matches.append(entry)
        else:
            mismatches.append(entry)

    total = len(matches) + len(mismatches)
    return ExpectedComparison(
        tolerance=tolerance,
        matches=matches,
        mismatches=mismatches,
        match_percentage=(len(matches) / total * 100.0) if total else 0.0,
    )

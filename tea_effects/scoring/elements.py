"""
Elemental derivation: five element scores from continuous physical inputs.

Derivation
----------
    1. Every element starts at ``baseline`` (5).
    2. Altitude outside [800, 1500] m, absolute latitude outside [25, 35]
       degrees and humidity outside [55, 70] percent shift elements
       linearly with the distance beyond the band, ``distance / divisor``
       per element (signed divisors). Dry gardens lean to metal and fire,
       humid ones to water and earth.
    3. Soil and climate categories add fixed deltas. Unrecognised
       categories add nothing.
    4. Oxidation (0–100 read as 0–10) and roast level shift elements by
       ``(level - neutral) * factor``. Absent values read as neutral.
    5. Age shifts elements by ``min(age, max_years) * factor``.
    6. Clamp every element to [1, 10].

Shifts accumulate unclamped; clamping happens once, at the end, so the
result does not depend on the order of steps 2–5.

Example
-------
    altitude 2000 m, nothing else set:
        metal = 5 + 500/500  = 6.0
        water = 5 + 500/1000 = 5.5
        fire  = 5 - 500/750  ≈ 4.33
"""

from __future__ import annotations

import logging
from typing import Optional

from tea_effects.models.reference import GeographyTable, ThresholdShift
from tea_effects.models.tea import TeaRecord
from tea_effects.scoring.normalizer import category_key
from tea_effects.taxonomy.effect_taxonomy import Element

log = logging.getLogger(__name__)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _apply(scores: dict[Element, float], deltas: dict[Element, float], scale: float = 1.0) -> None:
    for element, delta in deltas.items():
        scores[element] += delta * scale


def threshold_shift(rule: ThresholdShift, value: float) -> dict[Element, float]:
    """Element shifts for ``value`` under a threshold rule (empty inside the band)."""
    if value < rule.low:
        distance = rule.low - value
        return {element: distance / divisor for element, divisor in rule.below.items()}
    if value > rule.high:
        distance = value - rule.high
        return {element: distance / divisor for element, divisor in rule.above.items()}
    return {}


def category_deltas(
    categories: dict[str, dict[Element, float]],
    value: Optional[str],
    kind: str,
) -> dict[Element, float]:
    """Look up fixed deltas for a soil / climate value; empty when unknown."""
    if not value:
        return {}
    wanted = category_key(value)
    for key, deltas in categories.items():
        if category_key(key) == wanted:
            return dict(deltas)
    log.debug("Unrecognized %s category %r ignored.", kind, value)
    return {}


def roast_level(table: GeographyTable, firing: Optional[str]) -> Optional[float]:
    """Map a firing descriptor to a roast level, or ``None`` if unrecognised.

    When several tokens occur in the descriptor the longest wins, so a
    declared ``"dark"`` does not shadow a more specific ``"charcoal"``.
    """
    if not firing:
        return None
    text = firing.strip().lower()
    matches = [token for token in table.roast_levels if token.lower() in text]
    if not matches:
        log.debug("Unrecognized firing descriptor %r; roast treated as neutral.", firing)
        return None
    best = max(matches, key=lambda token: (len(token), token))
    return table.roast_levels[best]


def derive_elements(tea: TeaRecord, table: GeographyTable) -> dict[str, float]:
    """Compute the five element scores for ``tea``.

    Args:
        tea: The tea record. Any subset of geography, processing and age
            may be present.
        table: Geography / element reference table.

    Returns:
        ``{element_name: score}`` for all five elements, each in
        ``[clamp_min, clamp_max]``.
    """
    scores: dict[Element, float] = {element: table.baseline for element in Element}

    geo = tea.geography
    if geo is not None:
        if geo.altitude is not None and table.altitude is not None:
            _apply(scores, threshold_shift(table.altitude, geo.altitude))
        if geo.latitude is not None and table.latitude is not None:
            _apply(scores, threshold_shift(table.latitude, abs(geo.latitude)))
        if geo.humidity is not None and table.humidity is not None:
            _apply(scores, threshold_shift(table.humidity, geo.humidity))
        _apply(scores, category_deltas(table.soil, geo.soil_type, "soil"))
        _apply(scores, category_deltas(table.climate, geo.climate, "climate"))

    processing = tea.processing
    if processing is not None:
        if processing.oxidation_level is not None:
            level = processing.oxidation_level / 10.0
            _apply(scores, table.oxidation_factors, level - table.neutral_level)
        roast = roast_level(table, processing.firing)
        if roast is not None:
            _apply(scores, table.roast_factors, roast - table.neutral_level)

    if tea.age and table.age is not None:
        _apply(scores, table.age.factors, min(tea.age, table.age.max_years))

    return {
        element.value: _clamp(score, table.clamp_min, table.clamp_max)
        for element, score in scores.items()
    }

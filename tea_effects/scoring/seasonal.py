"""
Seasonal scorer: harvest month → season → effect vector.

Steps
-----
1. The harvest month is shifted by ``southern_offset`` (wrapping past
   December) when the latitude is negative; a missing latitude counts as
   northern. The shifted month selects the season.
2. The season's effects, plus the type bonus for effects already present.
3. The first matching altitude modifier and the first matching
   L-theanine : caffeine ratio modifier scale effects already present. The
   ratio modifier needs both levels, with caffeine above zero.
4. Normalize onto 0–10 and cap.

Without a harvest month, or when no season covers it, the vector is empty.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from tea_effects.models.effect import EffectVector
from tea_effects.models.reference import RangeModifier, SeasonalTable
from tea_effects.models.tea import TeaRecord
from tea_effects.scoring.normalizer import (
    canonical_name,
    canonicalize,
    cap_vector,
    category_key,
    normalize_vector,
)

log = logging.getLogger(__name__)


def season_name(
    table: SeasonalTable,
    month: Optional[int],
    latitude: Optional[float] = None,
) -> Optional[str]:
    """Season for a harvest month at ``latitude``, or ``None``.

    Example: month 10 at latitude -33 is shifted to 4 and falls in
    early spring.
    """
    if month is None:
        return None
    if latitude is not None and latitude < 0:
        month = (month - 1 + table.southern_offset) % 12 + 1
    return table.season_for(month)


def type_bonus(table: SeasonalTable, tea_type: Optional[str]) -> EffectVector:
    if not tea_type:
        return {}
    wanted = category_key(tea_type)
    for token, bonus in table.type_adjustments.items():
        if category_key(token) in wanted:
            return dict(bonus)
    return {}


def _scale_existing(
    vector: EffectVector,
    modifiers: list[RangeModifier],
    value: Optional[float],
    aliases: Optional[Mapping[str, str]],
) -> None:
    if value is None:
        return
    modifier = next((m for m in modifiers if m.applies(value)), None)
    if modifier is None:
        return
    for effect, factor in modifier.multipliers.items():
        name = canonical_name(effect, aliases)
        if name in vector:
            vector[name] *= factor


def score_seasonal(
    tea: TeaRecord,
    table: SeasonalTable,
    aliases: Optional[Mapping[str, str]] = None,
) -> EffectVector:
    """Score the seasonal component of ``tea``; empty without a harvest month."""
    geo = tea.geography
    if geo is None or geo.harvest_month is None:
        return {}

    season = season_name(table, geo.harvest_month, geo.latitude)
    if season is None:
        log.debug("No season covers harvest month %d.", geo.harvest_month)
        return {}

    vector = canonicalize(table.seasons[season].effects, aliases)
    for effect, bonus in canonicalize(type_bonus(table, tea.type), aliases).items():
        if effect in vector:
            vector[effect] += bonus
    vector = normalize_vector(vector, table.scale_max)

    _scale_existing(vector, table.altitude_modifiers, geo.altitude, aliases)

    compounds = tea.compounds
    ratio = None
    if (
        compounds is not None
        and compounds.l_theanine is not None
        and compounds.caffeine is not None
        and compounds.caffeine > 0
    ):
        ratio = compounds.l_theanine / compounds.caffeine
    _scale_existing(vector, table.ratio_modifiers, ratio, aliases)

    return cap_vector(vector)

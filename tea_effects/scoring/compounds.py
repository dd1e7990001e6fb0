"""
Compound scorer: caffeine / L-theanine balance and catechin content.

    ratio = l_theanine / caffeine

The first ratio band containing ``ratio`` contributes
``factor * level`` per compound it lists. Catechins contribute
``factor * catechins`` regardless of ratio, and when both caffeine and
L-theanine are present the synergy factors apply to the smaller of the two.

A record without compound data, or with a compounds block in which every
level is missing, yields an empty vector. A record with some compounds
reads the missing ones as ``neutral_level``. Zero caffeine with some
theanine gives an infinite ratio (theanine-dominant); zero of both skips
the ratio bands and the synergy entirely.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Optional

from tea_effects.models.effect import EffectVector
from tea_effects.models.reference import CompoundTable, RatioBand
from tea_effects.models.tea import TeaRecord
from tea_effects.scoring.normalizer import canonicalize, cap_vector


def _add(totals: EffectVector, factors: Mapping[str, float], level: float) -> None:
    for effect, factor in factors.items():
        totals[effect] = totals.get(effect, 0.0) + factor * level


def theanine_ratio(caffeine: float, l_theanine: float) -> Optional[float]:
    """L-theanine : caffeine ratio, ``inf`` for zero caffeine, ``None`` for neither."""
    if caffeine > 0:
        return l_theanine / caffeine
    if l_theanine > 0:
        return math.inf
    return None


def select_band(table: CompoundTable, ratio: Optional[float]) -> Optional[RatioBand]:
    if ratio is None:
        return None
    return next((band for band in table.bands if band.contains(ratio)), None)


def score_compounds(
    tea: TeaRecord,
    table: CompoundTable,
    aliases: Optional[Mapping[str, str]] = None,
) -> EffectVector:
    """Score the compounds component of ``tea``; empty without compound data."""
    if tea.compounds is None or tea.compounds.is_empty:
        return {}

    neutral = table.neutral_level
    caffeine = tea.compounds.caffeine if tea.compounds.caffeine is not None else neutral
    theanine = tea.compounds.l_theanine if tea.compounds.l_theanine is not None else neutral
    catechins = tea.compounds.catechins if tea.compounds.catechins is not None else neutral

    totals: EffectVector = {}
    band = select_band(table, theanine_ratio(caffeine, theanine))
    if band is not None:
        _add(totals, band.caffeine, caffeine)
        _add(totals, band.l_theanine, theanine)

    _add(totals, table.catechins, catechins)

    if caffeine > 0 and theanine > 0:
        _add(totals, table.synergy, min(caffeine, theanine))

    return cap_vector(canonicalize(totals, aliases))

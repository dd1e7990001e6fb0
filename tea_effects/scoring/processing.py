"""
Processing scorer.

Each method tag adds its normalized vector multiplied by the method's
intensity. Firing modifiers then scale effects the methods already
produced: a charcoal or heavy firing deepens grounding and comforting, a
light firing lifts elevating. A modifier never creates an effect that no
method contributed. Unknown method tags are ignored (DEBUG log); values are
capped at 10.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from tea_effects.models.effect import EffectVector
from tea_effects.models.reference import ProcessingEntry, ProcessingTable
from tea_effects.models.tea import TeaRecord
from tea_effects.scoring.normalizer import (
    canonical_name,
    cap_vector,
    category_key,
    normalize_vector,
)

log = logging.getLogger(__name__)


def find_method(table: ProcessingTable, method: str) -> Optional[ProcessingEntry]:
    wanted = category_key(method)
    for key, entry in table.methods.items():
        if category_key(key) == wanted or any(category_key(a) == wanted for a in entry.aliases):
            return entry
    return None


def firing_multipliers(
    table: ProcessingTable,
    firing: Optional[str],
    aliases: Optional[Mapping[str, str]] = None,
) -> EffectVector:
    """Combined multiplier per effect for a firing descriptor.

    Every modifier with a token occurring in the descriptor applies once;
    multipliers from different modifiers compound.
    """
    if not firing:
        return {}
    text = firing.strip().lower()
    combined: EffectVector = {}
    for modifier in table.firing_modifiers:
        if any(token.lower() in text for token in modifier.match):
            for effect, factor in modifier.multipliers.items():
                name = canonical_name(effect, aliases)
                combined[name] = combined.get(name, 1.0) * factor
    return combined


def score_processing(
    tea: TeaRecord,
    table: ProcessingTable,
    aliases: Optional[Mapping[str, str]] = None,
) -> EffectVector:
    """Score the processing component of ``tea``.

    Args:
        tea: The tea record.
        table: Processing influence table.
        aliases: Legacy effect name → canonical name.

    Returns:
        Effect vector on 0–10; empty without processing data.
    """
    if tea.processing is None:
        return {}

    totals: EffectVector = {}
    for method in tea.processing.methods:
        entry = find_method(table, method)
        if entry is None:
            log.debug("Unrecognized processing method %r ignored.", method)
            continue
        for effect, value in normalize_vector(entry.effects, table.scale_max, aliases).items():
            totals[effect] = totals.get(effect, 0.0) + value * entry.intensity

    for effect, factor in firing_multipliers(table, tea.processing.firing, aliases).items():
        if effect in totals:
            totals[effect] *= factor

    return cap_vector(totals)

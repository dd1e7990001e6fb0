"""
Base-type scorer: effect vector for the tea's type, refined by sub type.

Lookup is case-insensitive and treats spaces, underscores and hyphens
alike, so ``"Puerh Shou"``, ``"puerh_shou"`` and ``"puerh-shou"`` all find
the same entry. Type aliases (``"red"`` → black) are honoured.

The first sub type entry whose match token occurs in the lower-cased
``sub_type`` is added on top of the base vector; each effect is then
capped at 10. An unknown or missing type yields an empty vector.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from tea_effects.models.effect import EffectVector
from tea_effects.models.reference import SubTypeEntry, TeaTypeTable, TypeEntry
from tea_effects.models.tea import TeaRecord
from tea_effects.scoring.normalizer import cap_vector, category_key, normalize_vector

log = logging.getLogger(__name__)


def find_type(table: TeaTypeTable, tea_type: str) -> Optional[TypeEntry]:
    """Return the entry for ``tea_type`` by key or alias, or ``None``."""
    wanted = category_key(tea_type)
    for key, entry in table.types.items():
        if category_key(key) == wanted:
            return entry
    for entry in table.types.values():
        if any(category_key(alias) == wanted for alias in entry.aliases):
            return entry
    return None


def match_sub_type(entry: TypeEntry, sub_type: Optional[str]) -> Optional[SubTypeEntry]:
    """Return the first sub type entry matching ``sub_type``, or ``None``."""
    if not sub_type:
        return None
    text = sub_type.strip().lower()
    for sub in entry.sub_types:
        if any(token in text for token in sub.match):
            return sub
    return None


def score_base_type(
    tea: TeaRecord,
    table: TeaTypeTable,
    aliases: Optional[Mapping[str, str]] = None,
) -> EffectVector:
    """Score the base component of ``tea``.

    Args:
        tea: The tea record.
        table: Tea type reference table.
        aliases: Legacy effect name → canonical name.

    Returns:
        Effect vector on 0–10; empty when the type is missing or unknown.
    """
    if not tea.type:
        return {}

    entry = find_type(table, tea.type)
    if entry is None:
        log.debug("Unrecognized tea type %r; base component left empty.", tea.type)
        return {}

    vector = normalize_vector(entry.effects, table.scale_max, aliases)

    sub = match_sub_type(entry, tea.sub_type)
    if sub is not None:
        for name, value in normalize_vector(sub.effects, table.scale_max, aliases).items():
            vector[name] = vector.get(name, 0.0) + value
    elif tea.sub_type:
        log.debug("No sub type entry for %r under %r.", tea.sub_type, tea.type)

    return cap_vector(vector)

"""
Flavor scorer.

Contribution formula
--------------------
For every flavor tag on the record and every table entry it selects (tag
equals the entry key or one of its ``notes``)::

    contribution[e] = normalize(entry.effects[e]) * entry.intensity * tag.intensity

Diminishing returns
-------------------
Contributions to the same effect are damped by arrival order: the n-th
contribution (n = 0, 1, 2, ...) is divided by ``1 + n``. Five "calming"
flavors therefore add less than five times one, and a tea described with
many overlapping notes does not saturate at 10 on a single effect.

Order of arrival is tag order on the record, then table declaration order,
so the result is deterministic for a given record.

Unknown tags are ignored and logged at DEBUG. Final values are capped at 10.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Optional

from tea_effects.models.effect import EffectVector
from tea_effects.models.reference import FlavorEntry, FlavorTable
from tea_effects.models.tea import TeaRecord
from tea_effects.scoring.normalizer import cap_vector, category_key, normalize_vector

log = logging.getLogger(__name__)


def matching_entries(table: FlavorTable, tag: str) -> Iterator[tuple[str, FlavorEntry]]:
    """Yield ``(entry_key, entry)`` for every entry the tag selects.

    Tags, keys and notes are compared through ``category_key``, so
    ``"stone fruit"``, ``"stone-fruit"`` and ``"Stone_Fruit"`` are one tag.
    """
    wanted = category_key(tag)
    for entries in table.categories.values():
        for key, entry in entries.items():
            if wanted == category_key(key) or any(
                wanted == category_key(note) for note in entry.notes
            ):
                yield key, entry


def score_flavor(
    tea: TeaRecord,
    table: FlavorTable,
    aliases: Optional[Mapping[str, str]] = None,
) -> EffectVector:
    """Score the flavor component of ``tea``.

    Args:
        tea: The tea record.
        table: Flavor influence table.
        aliases: Legacy effect name → canonical name.

    Returns:
        Effect vector on 0–10; empty when no tag is recognised.
    """
    totals: EffectVector = {}
    occurrences: dict[str, int] = {}

    for note in tea.flavors:
        tag_intensity = 1.0 if note.intensity is None else note.intensity
        matched = False
        for _, entry in matching_entries(table, note.name):
            matched = True
            normalized = normalize_vector(entry.effects, table.scale_max, aliases)
            for effect, value in normalized.items():
                n = occurrences.get(effect, 0)
                contribution = value * entry.intensity * tag_intensity / (1 + n)
                totals[effect] = totals.get(effect, 0.0) + contribution
                occurrences[effect] = n + 1
        if not matched:
            log.debug("Unrecognized flavor tag %r ignored.", note.name)

    return cap_vector(totals)

"""
Geography scorer: projects element scores onto effects.

Each effect in the table's ``projection`` is the weighted mean of its
elements, so outputs stay on the element scale [1, 10].

Only site data (altitude, latitude, humidity, soil, climate) switches the
component on. A record without geography, or whose geography block holds
nothing but a longitude or harvest month, yields an empty vector even
though processing and age alone could move the elements; those inputs are
already scored by their own components.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

from tea_effects.models.effect import EffectVector
from tea_effects.models.reference import GeographyTable
from tea_effects.models.tea import TeaRecord
from tea_effects.scoring.elements import derive_elements
from tea_effects.scoring.normalizer import canonicalize


def site_elements(tea: TeaRecord, table: GeographyTable) -> Optional[dict[str, float]]:
    """Element scores for ``tea``, or ``None`` when it carries no site data."""
    if tea.geography is None or not tea.geography.has_site_data:
        return None
    return derive_elements(tea, table)


def project_elements(elements: Mapping[str, float], table: GeographyTable) -> EffectVector:
    """Weighted-mean projection of element scores onto effects."""
    vector: EffectVector = {}
    for effect, weights in table.projection.items():
        total_weight = sum(weights.values())
        weighted = sum(
            elements.get(element.value, table.baseline) * w for element, w in weights.items()
        )
        vector[effect] = weighted / total_weight
    return vector


def score_geography(
    tea: TeaRecord,
    table: GeographyTable,
    aliases: Optional[Mapping[str, str]] = None,
    elements: Optional[Mapping[str, float]] = None,
) -> EffectVector:
    """Score the geography component of ``tea``; empty without site data.

    Args:
        tea: The tea record.
        table: Geography / element reference table.
        aliases: Legacy effect name → canonical name.
        elements: Element scores already derived for ``tea``. Derived here
            when not given.
    """
    if elements is None:
        elements = site_elements(tea, table)
        if elements is None:
            return {}
    return canonicalize(project_elements(elements, table), aliases)

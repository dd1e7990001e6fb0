"""
Result assembler: turns ranked effects and traces into an ``EffectResult``.

Display names and descriptions are static vocabulary data; effects outside
the vocabulary fall back to a title-cased name and an empty description.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

from tea_effects.models.effect import (
    ComponentScores,
    EffectResult,
    ExpectedComparison,
    RankedEffect,
)
from tea_effects.models.reference import EffectDefinition
from tea_effects.models.tea import TeaRecord
from tea_effects.scoring.aggregator import Aggregation
from tea_effects.scoring.ranker import Ranking
from tea_effects.taxonomy.effect_taxonomy import UNDETERMINED

_UNDETERMINED_DESCRIPTION = "Not enough information to determine an effect profile."


def describe(
    name: str,
    level: float,
    vocabulary: Mapping[str, EffectDefinition],
) -> RankedEffect:
    """Build a ``RankedEffect`` with display text from the vocabulary."""
    if name == UNDETERMINED:
        return RankedEffect(
            name=name,
            display_name="Undetermined",
            level=0.0,
            description=_UNDETERMINED_DESCRIPTION,
        )
    definition = vocabulary.get(name)
    if definition is None:
        return RankedEffect(name=name, display_name=name.replace("-", " ").title(), level=level)
    return RankedEffect(
        name=name,
        display_name=definition.display_name,
        level=level,
        description=definition.description,
    )


def assemble_result(
    tea: TeaRecord,
    components: ComponentScores,
    aggregation: Aggregation,
    ranking: Ranking,
    vocabulary: Mapping[str, EffectDefinition],
    elements: Optional[dict[str, float]] = None,
    comparison: Optional[ExpectedComparison] = None,
) -> EffectResult:
    """Package one calculation into a frozen ``EffectResult``."""
    dominant_name, dominant_level = ranking.dominant
    return EffectResult(
        tea_name=tea.name,
        dominant=describe(dominant_name, dominant_level, vocabulary),
        supporting=[describe(name, level, vocabulary) for name, level in ranking.supporting],
        combined=aggregation.combined,
        pre_interaction=aggregation.pre_interaction,
        components=components,
        contributions=aggregation.contributions,
        interactions=aggregation.applied,
        elements=elements,
        comparison=comparison,
    )

"""
Tea effect engine: the single entry point for effect calculation.

Usage
-----
    from tea_effects.config import load_config
    from tea_effects.engine import TeaEffectEngine

    engine = TeaEffectEngine.from_config(load_config())
    result = engine.calculate({"name": "Sencha", "type": "green", "sub_type": "sencha"})
    result.dominant.name          # "energizing"
    result.model_dump()           # JSON-ready dict

Pipeline per ``calculate`` call
-------------------------------
    tea record
      → component scorers (independent, pure; dispatched via ``SCORERS``)
      → aggregator (weighted sum → interactions → clamp)
      → ranker (dominant + supporting)
      → assembler (``EffectResult``)

Everything that can be wrong with configuration is checked in
``__init__``: weights, interaction rules and the priority list. After
construction ``calculate`` never raises for data reasons; malformed input
records are rejected by pydantic when the ``TeaRecord`` is built.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

from tea_effects.config import (
    AppConfig,
    ComponentWeights,
    ConfigurationError,
    InteractionConfig,
    RankingConfig,
)
from tea_effects.models.effect import ComponentScores, EffectResult, EffectVector
from tea_effects.models.reference import InteractionRule, ReferenceTables
from tea_effects.models.tea import TeaRecord
from tea_effects.reference.loader import load_reference_tables
from tea_effects.scoring.aggregator import combine, validate_weights
from tea_effects.scoring.assembler import assemble_result
from tea_effects.scoring.base_type import score_base_type
from tea_effects.scoring.comparison import compare_with_expected
from tea_effects.scoring.compounds import score_compounds
from tea_effects.scoring.flavor import score_flavor
from tea_effects.scoring.geography import score_geography, site_elements
from tea_effects.scoring.normalizer import canonical_name
from tea_effects.scoring.processing import score_processing
from tea_effects.scoring.ranker import rank
from tea_effects.scoring.seasonal import score_seasonal
from tea_effects.taxonomy.effect_taxonomy import COMPONENT_ORDER, Component

log = logging.getLogger(__name__)

Scorer = Callable[[TeaRecord, Any, Mapping[str, str]], EffectVector]

# Component → (scorer, attribute of ReferenceTables holding its table).
SCORERS: dict[Component, tuple[Scorer, str]] = {
    Component.BASE:       (score_base_type,  "tea_types"),
    Component.FLAVOR:     (score_flavor,     "flavors"),
    Component.PROCESSING: (score_processing, "processing"),
    Component.GEOGRAPHY:  (score_geography,  "geography"),
    Component.SEASONAL:   (score_seasonal,   "seasonal"),
    Component.COMPOUNDS:  (score_compounds,  "compounds"),
}


class TeaEffectEngine:
    """Computes effect profiles from injected, read-only reference tables.

    Args:
        tables: Reference tables, typically from ``load_reference_tables``.
        weights: Component weights, as ``ComponentWeights`` or a plain
            ``{component: weight}`` mapping. Defaults to ``ComponentWeights()``.
        ranking: Ranking parameters and tie-break priority.
        interactions: Interaction pass settings.

    Raises:
        ConfigurationError: If weights are negative or all zero, name an
            unknown component, an interaction rule references an unknown
            effect, or the priority list holds unknown or duplicate effects.
    """

    def __init__(
        self,
        tables: ReferenceTables,
        weights: Optional[Union[ComponentWeights, Mapping[str, float]]] = None,
        ranking: Optional[RankingConfig] = None,
        interactions: Optional[InteractionConfig] = None,
    ) -> None:
        self.tables = tables
        self.ranking = ranking or RankingConfig()
        self.interaction_config = interactions or InteractionConfig()
        self.aliases: dict[str, str] = tables.alias_map()

        self.weights = self._resolve_weights(weights)
        self.rules = self._resolve_rules(tables.interactions)
        self.priority = self._resolve_priority(self.ranking.priority)

        log.debug(
            "Engine ready: weights=%s, %d interaction rules, priority=%s",
            self.weights, len(self.rules), self.priority,
        )

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        tables: Optional[ReferenceTables] = None,
    ) -> "TeaEffectEngine":
        """Build an engine from ``AppConfig``, loading tables if not given."""
        if tables is None:
            tables = load_reference_tables(config.data.reference_dir)
        return cls(
            tables,
            weights=config.weights,
            ranking=config.ranking,
            interactions=config.interactions,
        )

    # ── Validation ────────────────────────────────────────────────────────────

    def _resolve_weights(
        self, weights: Optional[Union[ComponentWeights, Mapping[str, float]]]
    ) -> dict[str, float]:
        if weights is None:
            weights = ComponentWeights()
        raw = weights.as_dict() if isinstance(weights, ComponentWeights) else dict(weights)

        known = {component.value for component in Component}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown components in weights: {unknown}. Expected a subset of {sorted(known)}."
            )
        validate_weights(raw)
        return {component.value: raw.get(component.value, 0.0) for component in COMPONENT_ORDER}

    def _resolve_effect(self, name: str, context: str) -> str:
        resolved = canonical_name(name, self.aliases)
        if resolved not in self.tables.effects:
            raise ConfigurationError(f"{context} references unknown effect '{name}'.")
        return resolved

    def _resolve_rules(self, rules: list[InteractionRule]) -> list[InteractionRule]:
        resolved: list[InteractionRule] = []
        for rule in rules:
            context = f"Interaction rule '{rule.name}'"
            first = self._resolve_effect(rule.effects[0], context)
            second = self._resolve_effect(rule.effects[1], context)
            targets = (
                None if rule.targets is None
                else [self._resolve_effect(t, context) for t in rule.targets]
            )
            try:
                resolved.append(
                    InteractionRule(
                        name=rule.name,
                        effects=(first, second),
                        modifier=rule.modifier,
                        targets=targets,
                        floor=rule.floor,
                        description=rule.description,
                    )
                )
            except ValueError as exc:
                raise ConfigurationError(f"{context} is invalid after alias resolution: {exc}") from exc
        return resolved

    def _resolve_priority(self, priority: list[str]) -> list[str]:
        resolved = [self._resolve_effect(name, "Priority list") for name in priority]
        duplicates = sorted({name for name in resolved if resolved.count(name) > 1})
        if duplicates:
            raise ConfigurationError(f"Priority list names effects more than once: {duplicates}.")
        return resolved

    # ── Calculation ───────────────────────────────────────────────────────────

    def score_components(
        self,
        tea: TeaRecord,
        elements: Optional[Mapping[str, float]] = None,
    ) -> ComponentScores:
        """Run every component scorer on ``tea``.

        ``elements`` are element scores already derived for ``tea``; the
        geography scorer reuses them instead of deriving them again.
        """
        vectors: dict[str, EffectVector] = {}
        for component in COMPONENT_ORDER:
            scorer, table_attr = SCORERS[component]
            table = getattr(self.tables, table_attr)
            if component is Component.GEOGRAPHY and elements is not None:
                vectors[component.value] = score_geography(
                    tea, table, self.aliases, elements=elements
                )
            else:
                vectors[component.value] = scorer(tea, table, self.aliases)
        return ComponentScores(**vectors)

    def calculate(self, tea: Union[TeaRecord, Mapping[str, Any]]) -> EffectResult:
        """Compute the effect profile of one tea.

        Args:
            tea: A ``TeaRecord`` or a JSON-compatible dict accepted by it.

        Returns:
            Frozen ``EffectResult``. Identical input always gives an
            identical result.

        Raises:
            pydantic.ValidationError: If ``tea`` is a dict that is not a valid
                tea record.
        """
        record = tea if isinstance(tea, TeaRecord) else TeaRecord.model_validate(tea)

        elements = site_elements(record, self.tables.geography)
        components = self.score_components(record, elements)
        rules = self.rules if self.interaction_config.enabled else []
        aggregation = combine(
            components.as_dict(),
            self.weights,
            rules,
            default_floor=self.interaction_config.default_floor,
            strength_factor=self.interaction_config.strength_factor,
        )
        ranking = rank(
            aggregation.combined,
            self.priority,
            supporting_fraction=self.ranking.supporting_fraction,
            supporting_floor=self.ranking.supporting_floor,
            max_supporting=self.ranking.max_supporting,
        )

        comparison = (
            compare_with_expected(aggregation.combined, record.expected_effects, aliases=self.aliases)
            if record.expected_effects else None
        )

        result = assemble_result(
            record,
            components,
            aggregation,
            ranking,
            self.tables.effects,
            elements=elements,
            comparison=comparison,
        )
        log.debug(
            "Calculated %r: dominant=%s (%.2f), supporting=%s",
            record.name, result.dominant.name, result.dominant.level,
            [effect.name for effect in result.supporting],
        )
        return result

"""
Aggregator: blends component vectors into one combined effect vector.

Combination (in this order)
---------------------------
1. Weighted sum over the union of effect names::

       pre[e] = sum(weight[c] * component[c][e] for c in components)

2. Interaction pass. Rules are evaluated once, in declared order, each
   against ``pre`` (never against a partially modified vector). A rule
   fires when both of its effects are strictly above its floor; each
   target then receives::

       delta = modifier * min(pre[a], pre[b]) * strength_factor

   Deltas accumulate across rules and are applied together, so no rule
   can trigger another.

3. Clamp every value to [0, 10].

Missing effects read as 0 throughout. Components absent from ``weights``
contribute nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from tea_effects.config import ConfigurationError
from tea_effects.models.effect import AppliedInteraction, EffectVector
from tea_effects.models.reference import InteractionRule
from tea_effects.scoring.normalizer import CANONICAL_MAX, cap_vector

log = logging.getLogger(__name__)


@dataclass
class Aggregation:
    """Everything the combination step produced.

    Attributes:
        pre_interaction: Weighted sum, unclamped.
        combined:        Final vector after interactions, clamped to [0, 10].
        contributions:   Per-component weighted vectors (``weight * vector``).
        applied:         Interaction rules that fired, in declared order.
    """

    pre_interaction: EffectVector
    combined:        EffectVector
    contributions:   dict[str, EffectVector] = field(default_factory=dict)
    applied:         list[AppliedInteraction] = field(default_factory=list)


def validate_weights(weights: Mapping[str, float]) -> None:
    """Reject negative or all-zero weight sets.

    Raises:
        ConfigurationError: On any negative weight, or when no weight is
            positive.
    """
    negative = {name: w for name, w in weights.items() if w < 0}
    if negative:
        raise ConfigurationError(f"Component weights must be >= 0, got {negative}.")
    if not any(w > 0 for w in weights.values()):
        raise ConfigurationError("At least one component weight must be positive.")


def weighted_sum(
    components: Mapping[str, Mapping[str, float]],
    weights: Mapping[str, float],
) -> tuple[EffectVector, dict[str, EffectVector]]:
    """Return ``(pre_interaction, contributions)`` for the given components."""
    total: EffectVector = {}
    contributions: dict[str, EffectVector] = {}
    for component, vector in components.items():
        weight = weights.get(component, 0.0)
        if component not in weights and vector:
            log.debug("Component %r has no weight; its vector is ignored.", component)
        weighted = {effect: weight * value for effect, value in vector.items()}
        contributions[component] = weighted
        for effect, value in weighted.items():
            total[effect] = total.get(effect, 0.0) + value
    return total, contributions


def interaction_deltas(
    pre: Mapping[str, float],
    rules: Sequence[InteractionRule],
    default_floor: float = 4.0,
    strength_factor: float = 0.8,
) -> tuple[EffectVector, list[AppliedInteraction]]:
    """Evaluate every rule against ``pre`` and accumulate the deltas."""
    deltas: EffectVector = {}
    applied: list[AppliedInteraction] = []

    for rule in rules:
        first, second = rule.effects
        floor = default_floor if rule.floor is None else rule.floor
        level_a = pre.get(first, 0.0)
        level_b = pre.get(second, 0.0)
        if not (level_a > floor and level_b > floor):
            continue

        strength = min(level_a, level_b) * strength_factor
        rule_deltas = {target: rule.modifier * strength for target in rule.target_effects}
        for target, delta in rule_deltas.items():
            deltas[target] = deltas.get(target, 0.0) + delta

        applied.append(
            AppliedInteraction(
                name=rule.name,
                effects=(first, second),
                strength=strength,
                deltas=rule_deltas,
                description=rule.description,
            )
        )
        log.debug("Interaction %r fired: %s", rule.name, rule_deltas)

    return deltas, applied


def combine(
    components: Mapping[str, Mapping[str, float]],
    weights: Mapping[str, float],
    rules: Sequence[InteractionRule] = (),
    default_floor: float = 4.0,
    strength_factor: float = 0.8,
) -> Aggregation:
    """Blend component vectors into the final combined vector.

    Args:
        components: ``{component_name: effect_vector}``.
        weights: ``{component_name: weight}``; validated here as well as at
            engine construction so the function is safe to call directly.
        rules: Interaction rules, evaluated in the given order.
        default_floor: Activation floor for rules that declare none.
        strength_factor: Global scaling of every interaction.

    Returns:
        ``Aggregation`` with the weighted sum, the final clamped vector,
        per-component contributions and the rules that fired.

    Raises:
        ConfigurationError: If ``weights`` is invalid.
    """
    validate_weights(weights)

    pre, contributions = weighted_sum(components, weights)
    deltas, applied = interaction_deltas(pre, rules, default_floor, strength_factor)

    combined = dict(pre)
    for effect, delta in deltas.items():
        combined[effect] = combined.get(effect, 0.0) + delta

    return Aggregation(
        pre_interaction=pre,
        combined=cap_vector(combined, CANONICAL_MAX),
        contributions=contributions,
        applied=applied,
    )

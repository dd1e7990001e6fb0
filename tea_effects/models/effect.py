"""
Effect result models.

``EffectVector`` is the working currency of the engine: a plain
``dict[str, float]`` keyed by canonical effect name. Missing names are
implicitly 0. Vectors are unclamped while components are being combined;
only the final combined vector is guaranteed to lie in [0, 10].

``EffectResult`` is the frozen, JSON-serializable output of one
``calculate`` call (``result.model_dump()``).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tea_effects.taxonomy.effect_taxonomy import UNDETERMINED

EffectVector = dict[str, float]


class ComponentScores(BaseModel):
    """Raw (unweighted) vector from each scorer, kept for traceability."""

    model_config = ConfigDict(frozen=True)

    base: EffectVector = Field(default_factory=dict)
    flavor: EffectVector = Field(default_factory=dict)
    processing: EffectVector = Field(default_factory=dict)
    geography: EffectVector = Field(default_factory=dict)
    seasonal: EffectVector = Field(default_factory=dict)
    compounds: EffectVector = Field(default_factory=dict)

    def as_dict(self) -> dict[str, EffectVector]:
        """Return ``{component_name: vector}`` in canonical component order."""
        return {
            "base": self.base,
            "flavor": self.flavor,
            "processing": self.processing,
            "geography": self.geography,
            "seasonal": self.seasonal,
            "compounds": self.compounds,
        }

    def is_empty(self) -> bool:
        return not any(self.as_dict().values())


class RankedEffect(BaseModel):
    """One effect as it appears in the ranked result."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    level: float
    description: str = ""


class AppliedInteraction(BaseModel):
    """An interaction rule that fired, and what it changed.

    Attributes:
        name: Rule identifier from the interactions table.
        effects: The two effects whose co-presence triggered the rule.
        strength: ``min(pre[a], pre[b]) * strength_factor``.
        deltas: Signed change applied to each target effect (pre-clamp).
        description: Human explanation from the table.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    effects: tuple[str, str]
    strength: float
    deltas: EffectVector
    description: str = ""


class EffectMatch(BaseModel):
    """Calculated vs. expected level for one effect."""

    model_config = ConfigDict(frozen=True)

    effect: str
    expected: float
    calculated: float
    difference: float


class ExpectedComparison(BaseModel):
    """Agreement between the calculated profile and a catalogue reference."""

    model_config = ConfigDict(frozen=True)

    tolerance: float
    matches: list[EffectMatch] = Field(default_factory=list)
    mismatches: list[EffectMatch] = Field(default_factory=list)
    match_percentage: float = 0.0


class EffectResult(BaseModel):
    """Complete effect profile for one tea.

    Attributes:
        tea_name: Name from the input record, if any.
        dominant: Strongest effect, or the ``undetermined`` sentinel.
        supporting: Secondary effects, strongest first.
        combined: Final clamped effect vector.
        pre_interaction: Weighted sum before the interaction pass.
        components: Raw per-component vectors.
        contributions: Per-component vectors after weighting, i.e. each
            component's share of ``pre_interaction``.
        interactions: Rules that fired, in declared order.
        elements: Element scores when geography was scored, else ``None``.
        comparison: Present only when the record carried expected effects.
    """

    model_config = ConfigDict(frozen=True)

    tea_name: Optional[str] = None
    dominant: RankedEffect
    supporting: list[RankedEffect] = Field(default_factory=list)
    combined: EffectVector = Field(default_factory=dict)
    pre_interaction: EffectVector = Field(default_factory=dict)
    components: ComponentScores = Field(default_factory=ComponentScores)
    contributions: dict[str, EffectVector] = Field(default_factory=dict)
    interactions: list[AppliedInteraction] = Field(default_factory=list)
    elements: Optional[dict[str, float]] = None
    comparison: Optional[ExpectedComparison] = None

    @property
    def is_undetermined(self) -> bool:
        return self.dominant.name == UNDETERMINED

"""
Reference table models.

Each table is authored independently, on whatever intensity scale its author
found natural (processing on 0–6, flavors on 0–4, tea types on 0–10). A
table declares that scale via ``scale_max`` and scorers rescale onto the
canonical 0–10 range through ``scoring.normalizer``. Effect names inside a
table may use legacy aliases (``clarifying``, ``uplifting``); they are
resolved against the vocabulary in ``effects.toml`` at scoring time.

All models are frozen. ``ReferenceTables`` is built once by
``reference.loader.load_reference_tables`` and shared read-only by every
``calculate`` call.

Validation rules
----------------
- ``scale_max`` must be positive.
- Entry ``intensity`` multipliers must be non-negative.
- Interaction rules name two distinct effects, and their ``targets`` must
  be a subset of that pair. Whether the effects exist in the vocabulary is
  checked by the engine, after alias resolution.
- Every month belongs to at most one season.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tea_effects.models.effect import EffectVector
from tea_effects.taxonomy.effect_taxonomy import Element


def _validate_scale(v: float) -> float:
    if v <= 0:
        raise ValueError(f"scale_max must be positive, got {v}.")
    return v


def _validate_intensity(v: float) -> float:
    if v < 0:
        raise ValueError(f"intensity must be >= 0, got {v}.")
    return v


# ── Effect vocabulary ─────────────────────────────────────────────────────────


class EffectDefinition(BaseModel):
    """One canonical effect and the legacy names it replaces."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    description: str = ""
    aliases: list[str] = Field(default_factory=list)


# ── Base type ─────────────────────────────────────────────────────────────────


class SubTypeEntry(BaseModel):
    """Refinement added on top of a type's base vector.

    Matches when any token in ``match`` occurs in the lower-cased sub type.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    match: list[str]
    effects: EffectVector

    @field_validator("match")
    @classmethod
    def validate_match(cls, v: list[str]) -> list[str]:
        tokens = [t.strip().lower() for t in v if t.strip()]
        if not tokens:
            raise ValueError("Sub type entry needs at least one match token.")
        return tokens


class TypeEntry(BaseModel):
    """Effect vector for one tea type, plus its ordered sub type entries."""

    model_config = ConfigDict(frozen=True)

    effects: EffectVector
    aliases: list[str] = Field(default_factory=list)
    sub_types: list[SubTypeEntry] = Field(default_factory=list)


class TeaTypeTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    scale_max: float = 10.0
    types: dict[str, TypeEntry] = Field(default_factory=dict)

    @field_validator("scale_max")
    @classmethod
    def validate_scale(cls, v: float) -> float:
        return _validate_scale(v)


# ── Flavor ────────────────────────────────────────────────────────────────────


class FlavorEntry(BaseModel):
    """Effects of one flavor; ``notes`` are the tags that also select it."""

    model_config = ConfigDict(frozen=True)

    effects: EffectVector
    intensity: float = 1.0
    notes: list[str] = Field(default_factory=list)

    @field_validator("intensity")
    @classmethod
    def validate_intensity(cls, v: float) -> float:
        return _validate_intensity(v)


class FlavorTable(BaseModel):
    """Flavor entries grouped by category (``floral``, ``vegetal``, ...)."""

    model_config = ConfigDict(frozen=True)

    scale_max: float = 10.0
    categories: dict[str, dict[str, FlavorEntry]] = Field(default_factory=dict)

    @field_validator("scale_max")
    @classmethod
    def validate_scale(cls, v: float) -> float:
        return _validate_scale(v)


# ── Processing ────────────────────────────────────────────────────────────────


class ProcessingEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    effects: EffectVector
    intensity: float = 1.0
    aliases: list[str] = Field(default_factory=list)

    @field_validator("intensity")
    @classmethod
    def validate_intensity(cls, v: float) -> float:
        return _validate_intensity(v)


class FiringModifier(BaseModel):
    """Multipliers applied to existing processing effects for a firing style."""

    model_config = ConfigDict(frozen=True)

    match: list[str]
    multipliers: EffectVector

    @field_validator("multipliers")
    @classmethod
    def validate_multipliers(cls, v: EffectVector) -> EffectVector:
        for name, factor in v.items():
            if factor < 0:
                raise ValueError(f"Firing multiplier for '{name}' must be >= 0, got {factor}.")
        return v


class ProcessingTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    scale_max: float = 10.0
    methods: dict[str, ProcessingEntry] = Field(default_factory=dict)
    firing_modifiers: list[FiringModifier] = Field(default_factory=list)

    @field_validator("scale_max")
    @classmethod
    def validate_scale(cls, v: float) -> float:
        return _validate_scale(v)


# ── Geography / elements ──────────────────────────────────────────────────────


class ThresholdShift(BaseModel):
    """Linear element shifts outside a [low, high] band.

    Below ``low`` each element in ``below`` moves by ``(low - x) / divisor``;
    above ``high`` each element in ``above`` moves by ``(x - high) / divisor``.
    Divisors are signed: a negative divisor lowers the element.
    """

    model_config = ConfigDict(frozen=True)

    low: float
    high: float
    below: dict[Element, float] = Field(default_factory=dict)
    above: dict[Element, float] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_band(self) -> "ThresholdShift":
        if self.low > self.high:
            raise ValueError(f"Threshold low ({self.low}) must not exceed high ({self.high}).")
        for divisor in (*self.below.values(), *self.above.values()):
            if divisor == 0:
                raise ValueError("Threshold divisors must be non-zero.")
        return self


class AgeShift(BaseModel):
    """Per-year element shift, with years capped at ``max_years``."""

    model_config = ConfigDict(frozen=True)

    max_years: float = 20.0
    factors: dict[Element, float] = Field(default_factory=dict)


class GeographyTable(BaseModel):
    """Everything the elemental derivation and the projection need.

    Attributes:
        baseline: Starting value of every element.
        clamp_min / clamp_max: Final element range.
        neutral_level: Oxidation / roast level that produces no shift.
        altitude / latitude / humidity: Threshold shift rules.
        soil / climate: Category → fixed element deltas.
        oxidation_factors / roast_factors: Element shift per level above
            (or below) ``neutral_level``.
        roast_levels: Firing descriptor token → roast level (0–10).
        age: Per-year shift for aged teas.
        projection: Effect → element weights; each effect is the weighted
            mean of its elements.
    """

    model_config = ConfigDict(frozen=True)

    baseline: float = 5.0
    clamp_min: float = 1.0
    clamp_max: float = 10.0
    neutral_level: float = 5.0
    altitude: Optional[ThresholdShift] = None
    latitude: Optional[ThresholdShift] = None
    humidity: Optional[ThresholdShift] = None
    soil: dict[str, dict[Element, float]] = Field(default_factory=dict)
    climate: dict[str, dict[Element, float]] = Field(default_factory=dict)
    oxidation_factors: dict[Element, float] = Field(default_factory=dict)
    roast_factors: dict[Element, float] = Field(default_factory=dict)
    roast_levels: dict[str, float] = Field(default_factory=dict)
    age: Optional[AgeShift] = None
    projection: dict[str, dict[Element, float]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_ranges(self) -> "GeographyTable":
        if self.clamp_min >= self.clamp_max:
            raise ValueError(
                f"clamp_min ({self.clamp_min}) must be below clamp_max ({self.clamp_max})."
            )
        for effect, weights in self.projection.items():
            if any(w < 0 for w in weights.values()) or sum(weights.values()) <= 0:
                raise ValueError(
                    f"Projection weights for '{effect}' must be non-negative "
                    "with a positive sum."
                )
        return self


# ── Compounds ─────────────────────────────────────────────────────────────────


class RatioBand(BaseModel):
    """Contribution rule for an L-theanine : caffeine ratio range.

    The band covers ``[min_ratio, max_ratio)``; ``None`` leaves that side
    open. Each factor is multiplied by the compound's level.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    min_ratio: Optional[float] = None
    max_ratio: Optional[float] = None
    caffeine: EffectVector = Field(default_factory=dict)
    l_theanine: EffectVector = Field(default_factory=dict)

    def contains(self, ratio: float) -> bool:
        if self.min_ratio is not None and ratio < self.min_ratio:
            return False
        if self.max_ratio is not None and ratio >= self.max_ratio:
            return False
        return True


class CompoundTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    neutral_level: float = 5.0
    bands: list[RatioBand] = Field(default_factory=list)
    catechins: EffectVector = Field(default_factory=dict)
    synergy: EffectVector = Field(default_factory=dict)


# ── Interactions ──────────────────────────────────────────────────────────────


class InteractionRule(BaseModel):
    """Synergy (positive modifier) or antagonism (negative) between two effects.

    Attributes:
        name: Identifier shown in the applied-interaction trace.
        effects: The two effects that must both exceed the floor.
        modifier: Fraction of the interaction strength added to each target.
        targets: Effects that receive the delta; ``None`` means both.
        floor: Activation threshold; ``None`` uses the configured default.
        description: Human explanation.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    effects: tuple[str, str]
    modifier: float
    targets: Optional[list[str]] = None
    floor: Optional[float] = None
    description: str = ""

    @model_validator(mode="after")
    def validate_pair(self) -> "InteractionRule":
        first, second = self.effects
        if first == second:
            raise ValueError(f"Interaction '{self.name}' must name two distinct effects.")
        if self.targets is not None:
            stray = [t for t in self.targets if t not in self.effects]
            if stray:
                raise ValueError(
                    f"Interaction '{self.name}' targets {stray} outside its pair "
                    f"{list(self.effects)}."
                )
        return self

    @property
    def target_effects(self) -> tuple[str, ...]:
        return tuple(self.targets) if self.targets is not None else self.effects


# ── Seasons ───────────────────────────────────────────────────────────────────


class SeasonEntry(BaseModel):
    """Harvest season: the months it covers and the effects it brings."""

    model_config = ConfigDict(frozen=True)

    months: list[int]
    effects: EffectVector = Field(default_factory=dict)
    description: str = ""

    @field_validator("months")
    @classmethod
    def validate_months(cls, v: list[int]) -> list[int]:
        stray = [m for m in v if not 1 <= m <= 12]
        if stray:
            raise ValueError(f"Season months must be in [1, 12], got {stray}.")
        return v


class RangeModifier(BaseModel):
    """Multipliers for a value strictly between ``above`` and ``below``.

    Either bound may be omitted. Like firing modifiers, they only scale
    effects that are already present.
    """

    model_config = ConfigDict(frozen=True)

    above: Optional[float] = None
    below: Optional[float] = None
    multipliers: EffectVector

    @field_validator("multipliers")
    @classmethod
    def validate_multipliers(cls, v: EffectVector) -> EffectVector:
        for name, factor in v.items():
            if factor < 0:
                raise ValueError(f"Multiplier for '{name}' must be >= 0, got {factor}.")
        return v

    def applies(self, value: float) -> bool:
        if self.above is not None and value <= self.above:
            return False
        if self.below is not None and value >= self.below:
            return False
        return True


class SeasonalTable(BaseModel):
    """Harvest-season influences.

    Attributes:
        scale_max: Scale the season intensities are authored on.
        southern_offset: Months added to a southern-hemisphere harvest month
            before the season lookup.
        seasons: Season name → months and effect intensities.
        type_adjustments: Tea type token → bonus added to season effects
            that are already present. The first token found in the tea's
            type applies.
        altitude_modifiers / ratio_modifiers: Multipliers by altitude and by
            L-theanine : caffeine ratio; the first matching modifier of each
            list applies.
    """

    model_config = ConfigDict(frozen=True)

    scale_max: float = 10.0
    southern_offset: int = 6
    seasons: dict[str, SeasonEntry] = Field(default_factory=dict)
    type_adjustments: dict[str, EffectVector] = Field(default_factory=dict)
    altitude_modifiers: list[RangeModifier] = Field(default_factory=list)
    ratio_modifiers: list[RangeModifier] = Field(default_factory=list)

    @field_validator("scale_max")
    @classmethod
    def validate_scale(cls, v: float) -> float:
        return _validate_scale(v)

    @model_validator(mode="after")
    def validate_months_unique(self) -> "SeasonalTable":
        owner: dict[int, str] = {}
        for name, season in self.seasons.items():
            for month in season.months:
                if month in owner:
                    raise ValueError(
                        f"Month {month} is claimed by both '{owner[month]}' and '{name}'."
                    )
                owner[month] = name
        return self

    def season_for(self, month: int) -> Optional[str]:
        """Season covering ``month`` (northern calendar), or ``None``."""
        for name, season in self.seasons.items():
            if month in season.months:
                return name
        return None


# ── Bundle ────────────────────────────────────────────────────────────────────


class ReferenceTables(BaseModel):
    """All static reference data, loaded once and shared read-only."""

    model_config = ConfigDict(frozen=True)

    effects: dict[str, EffectDefinition] = Field(default_factory=dict)
    tea_types: TeaTypeTable = Field(default_factory=TeaTypeTable)
    flavors: FlavorTable = Field(default_factory=FlavorTable)
    processing: ProcessingTable = Field(default_factory=ProcessingTable)
    geography: GeographyTable = Field(default_factory=GeographyTable)
    compounds: CompoundTable = Field(default_factory=CompoundTable)
    seasonal: SeasonalTable = Field(default_factory=SeasonalTable)
    interactions: list[InteractionRule] = Field(default_factory=list)

    def alias_map(self) -> dict[str, str]:
        """Return ``{legacy_name: canonical_name}`` for every declared alias."""
        return {
            alias: name
            for name, definition in self.effects.items()
            for alias in definition.aliases
        }

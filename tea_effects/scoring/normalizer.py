"""
Category normalizer: rescales table values onto the canonical 0–10 scale
and folds legacy effect names into the canonical vocabulary.

    normalize(raw, scale_max) = clamp(raw * 10 / scale_max, 0, 10)

When two names in one vector resolve to the same canonical effect (e.g.
``centering`` and ``stabilizing`` both → ``grounding``) their raw values are
summed before rescaling; the clamp still applies to the total.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

from tea_effects.config import ConfigurationError
from tea_effects.models.effect import EffectVector

CANONICAL_MAX = 10.0


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def normalize(raw_value: float, source_scale_max: float) -> float:
    """Rescale one value from ``[0, source_scale_max]`` onto ``[0, 10]``.

    Raises:
        ConfigurationError: If ``source_scale_max`` is not positive.
    """
    if source_scale_max <= 0:
        raise ConfigurationError(f"Scale maximum must be positive, got {source_scale_max}.")
    return _clamp(raw_value * (CANONICAL_MAX / source_scale_max), 0.0, CANONICAL_MAX)


def category_key(value: str) -> str:
    """Normalise a category value for table lookup.

    Case, surrounding whitespace and the choice between spaces, hyphens and
    underscores are ignored: ``"Pan Fired"`` and ``"pan_fired"`` both give
    ``"pan-fired"``.
    """
    return "-".join(value.strip().lower().replace("_", " ").replace("-", " ").split())


def canonical_name(name: str, aliases: Optional[Mapping[str, str]] = None) -> str:
    """Resolve a possibly-legacy effect name. Unknown names pass through."""
    if not aliases:
        return name
    return aliases.get(name, name)


def canonicalize(
    vector: Mapping[str, float],
    aliases: Optional[Mapping[str, str]] = None,
) -> EffectVector:
    """Fold aliases into canonical names, summing collisions. No rescaling."""
    result: EffectVector = {}
    for name, value in vector.items():
        key = canonical_name(name, aliases)
        result[key] = result.get(key, 0.0) + value
    return result


def normalize_vector(
    vector: Mapping[str, float],
    source_scale_max: float,
    aliases: Optional[Mapping[str, str]] = None,
) -> EffectVector:
    """Canonicalize ``vector`` and rescale every entry onto ``[0, 10]``."""
    return {
        name: normalize(value, source_scale_max)
        for name, value in canonicalize(vector, aliases).items()
    }


def cap_vector(vector: Mapping[str, float], hi: float = CANONICAL_MAX) -> EffectVector:
    """Clamp every entry of ``vector`` into ``[0, hi]``."""
    return {name: _clamp(value, 0.0, hi) for name, value in vector.items()}

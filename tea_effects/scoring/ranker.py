"""
Ranker: picks the dominant effect and the supporting effects.

Rules
-----
- Dominant = the effect with the highest combined value. Ties are broken
  by the configured priority list; effects not on the list rank after it,
  alphabetically. The outcome is therefore identical on every run.
- Supporting = every other effect with
  ``value >= supporting_fraction * dominant`` AND ``value >= supporting_floor``,
  strongest first, ties broken the same way, optionally truncated to
  ``max_supporting``.
- A vector with no positive value has no dominant effect: the result is
  the ``undetermined`` sentinel with no supporting effects.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Callable, Optional

from tea_effects.taxonomy.effect_taxonomy import UNDETERMINED


@dataclass
class Ranking:
    """Ranked effects as ``(name, level)`` pairs."""

    dominant: tuple[str, float]
    supporting: list[tuple[str, float]] = field(default_factory=list)

    @property
    def is_undetermined(self) -> bool:
        return self.dominant[0] == UNDETERMINED


def priority_key(priority: Sequence[str]) -> Callable[[str], tuple[int, str]]:
    """Sort key placing listed effects in list order, then the rest A→Z."""
    index = {name: i for i, name in enumerate(priority)}
    unlisted = len(priority)

    def key(name: str) -> tuple[int, str]:
        if name in index:
            return index[name], ""
        return unlisted, name

    return key


def rank(
    combined: Mapping[str, float],
    priority: Sequence[str],
    supporting_fraction: float = 0.5,
    supporting_floor: float = 3.0,
    max_supporting: Optional[int] = None,
) -> Ranking:
    """Rank a combined effect vector.

    Args:
        combined: Final effect vector (expected in [0, 10]).
        priority: Tie-break order.
        supporting_fraction: Minimum share of the dominant level.
        supporting_floor: Absolute minimum level.
        max_supporting: Cap on the number of supporting effects.

    Returns:
        ``Ranking``; ``dominant`` is ``("undetermined", 0.0)`` when no
        effect is positive.
    """
    tie_break = priority_key(priority)
    ordered = sorted(
        ((name, value) for name, value in combined.items() if value > 0),
        key=lambda item: (-item[1], tie_break(item[0])),
    )
    if not ordered:
        return Ranking(dominant=(UNDETERMINED, 0.0))

    dominant = ordered[0]
    threshold = supporting_fraction * dominant[1]
    supporting = [
        (name, value)
        for name, value in ordered[1:]
        if value >= threshold and value >= supporting_floor
    ]
    if max_supporting is not None:
        supporting = supporting[:max_supporting]

    return Ranking(dominant=dominant, supporting=supporting)

"""
Shared pytest fixtures for the tea effect engine test suite.

Provides:
  - ``reference_tables``: the bundled reference tables, loaded once per session.
  - ``engine``: an engine over the bundled tables with default settings.
  - ``minimal_tables``: a tiny hand-written table set whose numbers are easy
    to check by hand.
  - Sample tea record factories.
"""

from __future__ import annotations

import pytest

from tea_effects.engine import TeaEffectEngine
from tea_effects.models.reference import (
    EffectDefinition,
    FlavorEntry,
    FlavorTable,
    InteractionRule,
    ProcessingEntry,
    ProcessingTable,
    ReferenceTables,
    TeaTypeTable,
    TypeEntry,
)
from tea_effects.models.tea import TeaCompounds, TeaGeography, TeaProcessing, TeaRecord
from tea_effects.reference.loader import load_reference_tables

EFFECT_NAMES = (
    "energizing", "calming", "focusing", "harmonizing",
    "grounding", "elevating", "comforting", "restorative",
)


# ── Reference tables ──────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def reference_tables() -> ReferenceTables:
    """The tables bundled with the package."""
    return load_reference_tables()


@pytest.fixture
def engine(reference_tables: ReferenceTables) -> TeaEffectEngine:
    """Engine over the bundled tables with default weights and ranking."""
    return TeaEffectEngine(reference_tables)


def make_vocabulary(*extra_aliases: tuple[str, str]) -> dict[str, EffectDefinition]:
    """Eight-effect vocabulary; ``extra_aliases`` adds ``(alias, canonical)`` pairs."""
    aliases: dict[str, list[str]] = {name: [] for name in EFFECT_NAMES}
    for alias, canonical in extra_aliases:
        aliases[canonical].append(alias)
    return {
        name: EffectDefinition(
            name=name,
            display_name=name.title(),
            description=f"{name.title()} description.",
            aliases=aliases[name],
        )
        for name in EFFECT_NAMES
    }


@pytest.fixture
def minimal_tables() -> ReferenceTables:
    """Small table set with round numbers.

    - type ``green``: energizing 6, focusing 5 (scale 10); sub type
      ``matcha`` adds focusing 2.
    - flavor ``grassy``: calming 2 on a 0–4 scale (→ 5), intensity 1.
    - method ``steamed``: focusing 2 on a 0–4 scale (→ 5), intensity 1.
    - no interaction rules.
    """
    return ReferenceTables(
        effects=make_vocabulary(("clarifying", "focusing")),
        tea_types=TeaTypeTable(
            scale_max=10.0,
            types={
                "green": TypeEntry(
                    effects={"energizing": 6.0, "focusing": 5.0},
                    sub_types=[{"name": "matcha", "match": ["matcha"], "effects": {"focusing": 2.0}}],
                ),
            },
        ),
        flavors=FlavorTable(
            scale_max=4.0,
            categories={"vegetal": {"grassy": FlavorEntry(effects={"calming": 2.0}, notes=["grass"])}},
        ),
        processing=ProcessingTable(
            scale_max=4.0,
            methods={"steamed": ProcessingEntry(effects={"clarifying": 2.0})},
        ),
        interactions=[],
    )


@pytest.fixture
def calm_focus_rule() -> InteractionRule:
    return InteractionRule(
        name="calm-focus",
        effects=("calming", "focusing"),
        modifier=0.5,
        targets=["focusing"],
    )


# ── Sample tea records ────────────────────────────────────────────────────────

@pytest.fixture
def green_only() -> TeaRecord:
    """A record carrying nothing but its type."""
    return TeaRecord(type="green")


@pytest.fixture
def sample_gyokuro() -> TeaRecord:
    """A fully described shade-grown green tea."""
    return TeaRecord(
        name="Gyokuro",
        type="green",
        sub_type="gyokuro",
        origin="Yame, Japan",
        processing=TeaProcessing(oxidation_level=0, methods=["shade-grown", "steamed"]),
        flavors=["seaweed", "grassy"],
        geography=TeaGeography(
            altitude=300,
            latitude=33.2,
            humidity=80,
            soil_type="volcanic",
            climate="humid-subtropical",
            harvest_month=4,
        ),
        compounds=TeaCompounds(caffeine=7, l_theanine=9, catechins=5),
    )


@pytest.fixture
def sample_shou() -> TeaRecord:
    """An aged, fermented ripe puerh."""
    return TeaRecord(
        name="Menghai Shou",
        type="puerh-shou",
        age=16,
        processing=TeaProcessing(oxidation_level=90, methods=["fermented", "compressed"]),
        flavors=["earthy", "leather"],
        geography=TeaGeography(altitude=1400, latitude=21.9, climate="tropical"),
    )

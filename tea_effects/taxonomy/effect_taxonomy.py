"""
Fixed vocabularies the engine is built around.

The effect names themselves (calming, energizing, ...) are deliberately NOT
an enum: they come from ``reference/data/effects.toml`` so that a table
author can extend the vocabulary without touching code. What is fixed is
the set of scoring components and the five elements used by the
elemental derivation.

``COMPONENT_ORDER`` is the canonical iteration order for components. The
weighted sum is commutative, but reports and traces list components in
this order so output stays stable.

This module has NO imports from any other ``tea_effects`` package.
"""

from enum import StrEnum


class Component(StrEnum):
    """A scoring component whose vector is blended into the combined profile."""

    BASE = "base"
    """Tea type (green, oolong, ...) plus sub type refinement."""

    FLAVOR = "flavor"
    """Flavor note tags matched against the flavor influence table."""

    PROCESSING = "processing"
    """Processing method tags and the firing descriptor."""

    GEOGRAPHY = "geography"
    """Element scores from altitude, latitude, humidity, soil, climate and processing."""

    SEASONAL = "seasonal"
    """Harvest season, by month and hemisphere."""

    COMPOUNDS = "compounds"
    """Caffeine / L-theanine balance and catechin content."""


class Element(StrEnum):
    """The five elements of the traditional correspondence system."""

    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"


COMPONENT_ORDER: tuple[Component, ...] = (
    Component.BASE,
    Component.FLAVOR,
    Component.PROCESSING,
    Component.GEOGRAPHY,
    Component.SEASONAL,
    Component.COMPOUNDS,
)

UNDETERMINED = "undetermined"
"""Dominant-effect sentinel for a combined vector with no positive entry."""

"""
Reference table loader.

Reads the eight TOML tables from a directory (the bundled ``data/``
directory by default) and builds one frozen ``ReferenceTables``.

Usage
-----
    from tea_effects.reference.loader import load_reference_tables

    tables = load_reference_tables()                 # bundled tables
    tables = load_reference_tables("my/tables/")     # custom directory

Every failure (missing file, TOML syntax error, duplicate key, failed model
validation) surfaces as ``ConfigurationError`` naming the offending file,
so a broken table is caught at start-up rather than mid-calculation.

Files expected in the directory
-------------------------------
    effects.toml        [effects.<name>]   display_name, description, aliases
    tea_types.toml      scale_max, [types.<key>] + [[types.<key>.sub_types]]
    flavors.toml        scale_max, [categories.<category>.<flavor>]
    processing.toml     scale_max, [methods.<key>], [[firing_modifiers]]
    geography.toml      thresholds, soil, climate, roast, age, projection
    compounds.toml      neutral_level, [[bands]], catechins, synergy
    seasonal.toml       scale_max, [seasons.<name>], type_adjustments, modifiers
    interactions.toml   [[rules]]
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from tea_effects.config import ConfigurationError
from tea_effects.models.reference import (
    CompoundTable,
    EffectDefinition,
    FlavorTable,
    GeographyTable,
    InteractionRule,
    ProcessingTable,
    ReferenceTables,
    SeasonalTable,
    TeaTypeTable,
)

log = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent / "data"

TABLE_FILES: tuple[str, ...] = (
    "effects.toml",
    "tea_types.toml",
    "flavors.toml",
    "processing.toml",
    "geography.toml",
    "compounds.toml",
    "seasonal.toml",
    "interactions.toml",
)


def _read_table(path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        ConfigurationError: If the file is missing or is not valid TOML
            (which includes a key defined twice in the same table).
    """
    if not path.exists():
        raise ConfigurationError(f"Reference table not found: {path}")
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Malformed reference table {path.name}: {exc}") from exc


def _parse_effects(raw: dict[str, Any]) -> dict[str, EffectDefinition]:
    effects: dict[str, EffectDefinition] = {}
    for name, block in raw.get("effects", {}).items():
        effects[name] = EffectDefinition(
            name=name,
            display_name=block.get("display_name", name.title()),
            description=block.get("description", ""),
            aliases=block.get("aliases", []),
        )
    return effects


def _check_aliases(effects: dict[str, EffectDefinition]) -> None:
    """Each alias must map to exactly one effect and must not shadow one."""
    owner: dict[str, str] = {}
    for name, definition in effects.items():
        for alias in definition.aliases:
            if alias in effects:
                raise ConfigurationError(
                    f"Alias '{alias}' of '{name}' is itself a canonical effect."
                )
            if alias in owner and owner[alias] != name:
                raise ConfigurationError(
                    f"Alias '{alias}' is claimed by both '{owner[alias]}' and '{name}'."
                )
            owner[alias] = name


def _build(filename: str, builder, raw: Any):
    """Run a model constructor, re-raising validation errors as ConfigurationError."""
    try:
        return builder(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid reference table {filename}: {exc}") from exc


def load_reference_tables(data_dir: Optional[Union[str, Path]] = None) -> ReferenceTables:
    """Load and validate every reference table.

    Args:
        data_dir: Directory holding the TOML tables. ``None`` uses the
            tables bundled with the package.

    Returns:
        Frozen ``ReferenceTables``.

    Raises:
        ConfigurationError: If the directory or any table is missing,
            malformed or fails validation.
    """
    directory = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
    if not directory.is_dir():
        raise ConfigurationError(f"Reference directory not found: {directory}")

    raw = {name: _read_table(directory / name) for name in TABLE_FILES}

    effects = _build("effects.toml", _parse_effects, raw["effects.toml"])
    _check_aliases(effects)

    tables = ReferenceTables(
        effects=effects,
        tea_types=_build("tea_types.toml", lambda r: TeaTypeTable(**r), raw["tea_types.toml"]),
        flavors=_build("flavors.toml", lambda r: FlavorTable(**r), raw["flavors.toml"]),
        processing=_build(
            "processing.toml", lambda r: ProcessingTable(**r), raw["processing.toml"]
        ),
        geography=_build(
            "geography.toml", lambda r: GeographyTable(**r), raw["geography.toml"]
        ),
        compounds=_build("compounds.toml", lambda r: CompoundTable(**r), raw["compounds.toml"]),
        seasonal=_build("seasonal.toml", lambda r: SeasonalTable(**r), raw["seasonal.toml"]),
        interactions=_build(
            "interactions.toml",
            lambda r: [InteractionRule(**rule) for rule in r.get("rules", [])],
            raw["interactions.toml"],
        ),
    )

    log.info(
        "Loaded reference tables from %s: %d effects, %d tea types, %d flavor entries, "
        "%d processing methods, %d seasons, %d interaction rules.",
        directory,
        len(tables.effects),
        len(tables.tea_types.types),
        sum(len(entries) for entries in tables.flavors.categories.values()),
        len(tables.processing.methods),
        len(tables.seasonal.seasons),
        len(tables.interactions),
    )
    return tables

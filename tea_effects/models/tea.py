"""
Tea record models: the input to ``TeaEffectEngine.calculate``.

Every field is optional. A record with nothing but a name is valid and
produces an ``undetermined`` result. Missing data is never an error; out of
range data is rejected here, at construction, so scorers can assume sane
values. NaN and infinity are rejected on every numeric field.

Example (JSON as supplied by a catalogue)::

    {
      "name": "Long Jing",
      "type": "green",
      "sub_type": "dragonwell",
      "processing": {"oxidation_level": 0, "methods": ["pan-fired"]},
      "flavors": ["chestnut", {"name": "grassy", "intensity": 0.5}],
      "geography": {"altitude": 300, "latitude": 30.2, "climate": "subtropical"},
      "compounds": {"caffeine": 5, "l_theanine": 6}
    }
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FlavorNote(BaseModel):
    """One flavor tag with an optional intensity multiplier (default 1.0)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    name: str
    intensity: Optional[float] = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("Flavor name must be non-empty.")
        return v

    @field_validator("intensity")
    @classmethod
    def validate_intensity(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError(f"Flavor intensity must be >= 0, got {v}.")
        return v


class TeaProcessing(BaseModel):
    """How the leaf was processed.

    Attributes:
        oxidation_level: Percent oxidation, 0 (green) to 100 (black).
        firing: Free-form roast / firing descriptor, e.g. ``"charcoal"``.
        methods: Processing method tags, e.g. ``["steamed", "shade-grown"]``.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    oxidation_level: Optional[float] = None
    firing: Optional[str] = None
    methods: list[str] = Field(default_factory=list)

    @field_validator("oxidation_level")
    @classmethod
    def validate_oxidation(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0.0 <= v <= 100.0:
            raise ValueError(f"oxidation_level must be in [0, 100], got {v}.")
        return v


class TeaGeography(BaseModel):
    """Where and when the tea was grown.

    Altitude in metres, humidity in percent. ``harvest_month`` is the
    calendar month (January = 1); which season it falls in depends on the
    hemisphere, taken from the sign of ``latitude``.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    altitude: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    humidity: Optional[float] = None
    soil_type: Optional[str] = None
    climate: Optional[str] = None
    harvest_month: Optional[int] = None

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not -90.0 <= v <= 90.0:
            raise ValueError(f"latitude must be in [-90, 90], got {v}.")
        return v

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not -180.0 <= v <= 180.0:
            raise ValueError(f"longitude must be in [-180, 180], got {v}.")
        return v

    @field_validator("altitude")
    @classmethod
    def validate_altitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError(f"altitude must be >= 0, got {v}.")
        return v

    @field_validator("humidity")
    @classmethod
    def validate_humidity(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0.0 <= v <= 100.0:
            raise ValueError(f"humidity must be in [0, 100], got {v}.")
        return v

    @field_validator("harvest_month")
    @classmethod
    def validate_harvest_month(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not 1 <= v <= 12:
            raise ValueError(f"harvest_month must be in [1, 12], got {v}.")
        return v

    @property
    def has_site_data(self) -> bool:
        """True when any input of the elemental derivation is set."""
        return any(
            value is not None
            for value in (self.altitude, self.latitude, self.humidity, self.soil_type, self.climate)
        )


class TeaCompounds(BaseModel):
    """Relative compound levels on a 0–10 scale."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    caffeine: Optional[float] = None
    l_theanine: Optional[float] = None
    catechins: Optional[float] = None

    @field_validator("caffeine", "l_theanine", "catechins")
    @classmethod
    def validate_level(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0.0 <= v <= 10.0:
            raise ValueError(f"Compound level must be in [0, 10], got {v}.")
        return v

    @property
    def is_empty(self) -> bool:
        return self.caffeine is None and self.l_theanine is None and self.catechins is None


class TeaRecord(BaseModel):
    """A tea as described by the catalogue.

    Attributes:
        name: Display name.
        type: Tea type key, matched case-insensitively (``"Green"`` ==
            ``"green"``).
        sub_type: Cultivar / style refinement, e.g. ``"gyokuro"``.
        origin: Free-text origin, informational only.
        processing: Processing details, or ``None`` if unknown.
        flavors: Flavor notes; plain strings are accepted and coerced.
        geography: Growing conditions, or ``None`` if unknown.
        age: Years since production (aged puerh, aged oolong).
        compounds: Compound levels, or ``None`` if unknown.
        expected_effects: Reference effect profile supplied by the catalogue,
            used only for the optional comparison in the result.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    name: Optional[str] = None
    type: Optional[str] = None
    sub_type: Optional[str] = None
    origin: Optional[str] = None
    processing: Optional[TeaProcessing] = None
    flavors: list[FlavorNote] = Field(default_factory=list)
    geography: Optional[TeaGeography] = None
    age: Optional[float] = None
    compounds: Optional[TeaCompounds] = None
    expected_effects: dict[str, float] = Field(default_factory=dict)

    @field_validator("flavors", mode="before")
    @classmethod
    def coerce_flavor_strings(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @field_validator("age")
    @classmethod
    def validate_age(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError(f"age must be >= 0, got {v}.")
        return v

    @field_validator("expected_effects")
    @classmethod
    def validate_expected(cls, v: dict[str, float]) -> dict[str, float]:
        for name, level in v.items():
            if not 0.0 <= level <= 10.0:
                raise ValueError(
                    f"Expected effect '{name}' must be in [0, 10], got {level}."
                )
        return v

"""Car Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - vin: exactly 17 alphanumeric characters
    - ncap_rating: 0..5; price > 0; discount in [0, 1]
    - homepage: http(s) URL up to 40 chars; tags unique, no commas
    - CarUpdate carries no construction (updates are attribute-only)

Design Decisions:
    - to_model() builds transient ORM objects: services work on Car instances,
      routes never touch the session
    - Tags upper-cased on input so brand-flag search matches regardless of case
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from car_registry.core.domain_types import (
    CONSTRUCTION_MODEL_MAX_LENGTH, CONSTRUCTION_VARIANT_MAX_LENGTH, EngineType,
    HOMEPAGE_MAX_LENGTH, MAX_NCAP_RATING, MIN_NCAP_RATING, VIN_LENGTH,
)
from car_registry.models.car import Car
from car_registry.models.construction import Construction


class ConstructionSchema(BaseModel):
    """Construction details as sent and returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    model: str = Field(min_length=1, max_length=CONSTRUCTION_MODEL_MAX_LENGTH)
    variant: str | None = Field(None, max_length=CONSTRUCTION_VARIANT_MAX_LENGTH)

    def to_model(self) -> Construction:
        return Construction(model=self.model, variant=self.variant)


class CarUpdate(BaseModel):
    """Attributes replaced by PUT — everything except id, version and construction."""
    vin: str = Field(
        min_length=VIN_LENGTH, max_length=VIN_LENGTH, pattern=r"^[A-Za-z0-9]+$",
    )
    ncap_rating: int = Field(ge=MIN_NCAP_RATING, le=MAX_NCAP_RATING)
    engine: EngineType | None = None
    price: Decimal = Field(gt=0, max_digits=8, decimal_places=2)
    discount: Decimal | None = Field(None, ge=0, le=1, max_digits=4, decimal_places=3)
    available: bool
    release_date: date | None = None
    homepage: str | None = Field(
        None, max_length=HOMEPAGE_MAX_LENGTH, pattern=r"^https?://\S+$",
    )
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        tags = [tag.strip().upper() for tag in v]
        if any(not tag or "," in tag for tag in tags):
            raise ValueError("tags must be non-empty and must not contain commas")
        if len(set(tags)) != len(tags):
            raise ValueError("tags must be unique")
        return tags

    def to_model(self) -> Car:
        return Car(
            vin=self.vin,
            ncap_rating=self.ncap_rating,
            engine=self.engine.value if self.engine else None,
            price=self.price,
            discount=self.discount,
            available=self.available,
            release_date=self.release_date,
            homepage=self.homepage,
            tags=list(self.tags),
        )


class CarCreate(CarUpdate):
    """Full car with construction details for POST."""
    construction: ConstructionSchema

    def to_model(self) -> Car:
        car = super().to_model()
        car.construction = self.construction.to_model()
        return car


class CarResponse(BaseModel):
    """Public view of a stored car."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    version: int
    vin: str
    ncap_rating: int | None
    engine: str | None
    price: Decimal
    discount: Decimal | None
    available: bool
    release_date: date | None
    homepage: str | None
    tags: list[str]
    construction: ConstructionSchema | None
    created_at: datetime
    updated_at: datetime

"""Search Criteria — permitted search keys and typed coercion of raw criteria values.

Invariants:
    - A criteria key is either a declared Car attribute, the construction key,
      or one of the fixed brand flags; anything else is rejected upstream
    - Brand flags map to a fixed, upper-case tag keyword
    - Tag criteria come out upper-cased, deduplicated and sorted, matching
      how tags are stored
    - coerce_criteria never adds keys: only keys present in the input come out

Design Decisions:
    - Pydantic model with extra="forbid" for coercion: query strings arrive as
      str, the store needs int/Decimal/bool/date (ADR: one typed boundary)
    - Attribute names listed explicitly instead of introspecting the ORM model:
      core stays free of persistence imports (tests assert they stay in sync)
"""

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from car_registry.core.domain_types import EngineType


SEARCHABLE_ATTRIBUTES: tuple[str, ...] = (
    "id", "version", "vin", "ncap_rating", "engine", "price", "discount",
    "available", "release_date", "homepage", "tags", "created_at", "updated_at",
)

CONSTRUCTION_KEY = "construction"

# Evaluation order matters: mercedes before audi
BRAND_FLAGS: dict[str, str] = {
    "mercedes": "MERCEDES",
    "audi": "AUDI",
}


def invalid_criteria_keys(keys: Iterable[str]) -> list[str]:
    """Return the keys that are neither Car attributes nor brand flags."""
    allowed = {*SEARCHABLE_ATTRIBUTES, CONSTRUCTION_KEY, *BRAND_FLAGS}
    return [key for key in keys if key not in allowed]


class CarCriteria(BaseModel):
    """Typed view of a criteria map. All fields optional, unknown keys forbidden."""
    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    id: int | None = None
    version: int | None = None
    vin: str | None = None
    ncap_rating: int | None = None
    engine: EngineType | None = None
    price: Decimal | None = None
    discount: Decimal | None = None
    available: bool | None = None
    release_date: date | None = None
    homepage: str | None = None
    tags: list[str] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    construction: str | None = None
    mercedes: bool | None = None
    audi: bool | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> Any:
        """Tags are a case-insensitive set; query strings carry them comma separated."""
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple, set)):
            return sorted({str(tag).strip().upper() for tag in v if str(tag).strip()})
        return v


def coerce_criteria(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Coerce raw criteria values to their attribute types.

    Raises pydantic.ValidationError for unknown keys or uncoercible values.
    """
    return CarCriteria.model_validate(dict(raw)).model_dump(exclude_unset=True)

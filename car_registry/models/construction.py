"""Construction ORM — owned one-to-one construction details of a car.

Invariants:
    - Always belongs to exactly one Car (car_id FK, non-nullable)
    - model is unique across all constructions
    - Never addressed on its own: created with its car, deleted with its car

Design Decisions:
    - No back-reference to Car: ownership is one-directional, car_id is filled
      in by the owner's relationship at flush time
"""

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from car_registry.core.domain_types import (
    CONSTRUCTION_MODEL_MAX_LENGTH, CONSTRUCTION_VARIANT_MAX_LENGTH,
)
from car_registry.db.base import Base


class Construction(Base):
    """Construction details (model name and variant)."""
    __tablename__ = "constructions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    model: Mapped[str] = mapped_column(
        String(CONSTRUCTION_MODEL_MAX_LENGTH), nullable=False, unique=True,
    )
    variant: Mapped[str | None] = mapped_column(
        String(CONSTRUCTION_VARIANT_MAX_LENGTH), nullable=True,
    )
    car_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("cars.id"), nullable=False,
    )

    def __repr__(self) -> str:
        return f"Construction(id={self.id!r}, model={self.model!r}, variant={self.variant!r})"

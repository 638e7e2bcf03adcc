"""Car ORM — persists the aggregate root of the registry.

Invariants:
    - id is a store-assigned integer primary key, never reused
    - vin is unique and has a fixed length
    - version starts at 0 on insert and grows by exactly 1 per UPDATE
    - Every UPDATE is guarded by WHERE version = <version read>
    - construction is created together with the car (save-update cascade)

Design Decisions:
    - version_id_col over a hand-written check: the engine enforces the
      read-check-write guard at flush time (ADR: no lost updates)
    - updated_at refreshed on each update so an UPDATE is always emitted,
      even when every attribute value is unchanged
    - lazy="raise" on construction: queries load it explicitly, an accidental
      lazy load in async code fails loudly instead of blocking
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from car_registry.core.domain_types import HOMEPAGE_MAX_LENGTH, VIN_LENGTH
from car_registry.db.base import Base
from car_registry.models.construction import Construction
from car_registry.models.types import SimpleArray


def _next_version(current: int | None) -> int:
    return 0 if current is None else current + 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Car(Base):
    """Car entity — VIN, rating, engine, pricing and tags."""
    __tablename__ = "cars"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    vin: Mapped[str] = mapped_column(
        String(VIN_LENGTH), nullable=False, unique=True,
    )
    ncap_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    engine: Mapped[str | None] = mapped_column(String(12), nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    discount: Mapped[Decimal | None] = mapped_column(Numeric(4, 3), nullable=True)
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    release_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    homepage: Mapped[str | None] = mapped_column(
        String(HOMEPAGE_MAX_LENGTH), nullable=True,
    )
    tags: Mapped[list[str]] = mapped_column(
        SimpleArray, nullable=False, default=list,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )

    # Relationships
    construction: Mapped[Construction | None] = relationship(
        Construction, uselist=False, cascade="save-update, merge",
        lazy="raise",
    )

    __mapper_args__ = {
        "version_id_col": version,
        "version_id_generator": _next_version,
    }

    def __repr__(self) -> str:
        return f"Car(id={self.id!r}, version={self.version!r}, vin={self.vin!r})"


# Attributes replaced by an update; construction and bookkeeping columns excluded
UPDATABLE_ATTRIBUTES: tuple[str, ...] = (
    "vin", "ncap_rating", "engine", "price", "discount",
    "available", "release_date", "homepage", "tags",
)

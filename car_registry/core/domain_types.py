"""Domain Types — rich types and bounds shared by models, schemas and criteria.

Invariants:
    - CarId is a positive integer assigned by the store, never recycled
    - Version starts at 0 and grows by exactly 1 per successful update
    - VIN has a fixed length; NCAP rating and discount are bounded
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CarId = NewType("CarId", int)
Version = NewType("Version", int)


# ─── Bounds ──────────────────────────────────────────────────────

VIN_LENGTH = 17
MIN_NCAP_RATING = 0
MAX_NCAP_RATING = 5
HOMEPAGE_MAX_LENGTH = 40
CONSTRUCTION_MODEL_MAX_LENGTH = 32
CONSTRUCTION_VARIANT_MAX_LENGTH = 16


# ─── Enums ───────────────────────────────────────────────────────

class EngineType(str, Enum):
    """Engine category — maps to DB `engine` column."""
    COMBUSTION = "COMBUSTION"
    ELECTRIC = "ELECTRIC"


class EntityKind(str, Enum):
    """Persistable kinds addressed by the store's delete contract."""
    CAR = "car"
    CONSTRUCTION = "construction"

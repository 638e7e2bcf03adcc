"""ORM Models — SQLAlchemy declarative models for cars and their construction.

Invariants:
    - All models inherit from Base (db/base.py)
    - Car is the aggregate root; Construction is owned by exactly one Car

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from car_registry.models.car import Car  # noqa: F401
from car_registry.models.construction import Construction  # noqa: F401

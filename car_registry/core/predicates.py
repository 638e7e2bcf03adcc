"""Search Predicates — store-agnostic intermediate form of a car query.

Invariants:
    - Predicates are immutable values (frozen dataclasses)
    - A Conjunction is an ordered AND of clauses; empty means "match all"
    - Lookup always selects by identity and eager-loads the construction

Design Decisions:
    - Typed clauses instead of SQL fragments: the translator never builds strings,
      a single adapter in infrastructure/ lowers predicates to SQLAlchemy
"""

from dataclasses import dataclass
from typing import Any, Union

from car_registry.core.domain_types import CarId


@dataclass(frozen=True)
class ConstructionContains:
    """Case-insensitive substring match on the construction model name."""
    text: str


@dataclass(frozen=True)
class TagContains:
    """Tag set contains a fixed keyword (compared upper-case)."""
    keyword: str


@dataclass(frozen=True)
class AttributeEquals:
    """Exact equality on a scalar Car attribute."""
    attribute: str
    value: Any


Clause = Union[ConstructionContains, TagContains, AttributeEquals]


@dataclass(frozen=True)
class Conjunction:
    """Ordered AND of clauses."""
    clauses: tuple[Clause, ...] = ()

    def and_(self, clause: Clause) -> "Conjunction":
        return Conjunction(self.clauses + (clause,))

    @property
    def is_empty(self) -> bool:
        return not self.clauses


@dataclass(frozen=True)
class Lookup:
    """Select exactly one car by identity."""
    car_id: CarId

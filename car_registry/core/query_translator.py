"""Query Translator — folds a criteria map into a search predicate.

Invariants:
    - Fixed precedence: construction substring → brand flags (declared order)
      → remaining keys as equality, in insertion order
    - Each key contributes at most one clause with exactly one match semantics
    - Brand flags contribute a clause only when their value is True
    - Pure: no caching, no state shared between calls

Design Decisions:
    - Keys are NOT validated here: the read service rejects unknown keys before
      translation so typos never silently widen a search
"""

import logging
from collections.abc import Mapping
from typing import Any

from car_registry.core.criteria import BRAND_FLAGS, CONSTRUCTION_KEY
from car_registry.core.predicates import (
    AttributeEquals, Conjunction, ConstructionContains, Lookup, TagContains,
)

logger = logging.getLogger(__name__)


def translate_lookup(car_id: int) -> Lookup:
    """Predicate selecting exactly the car with the given identity."""
    return Lookup(car_id=car_id)


def translate_search(criteria: Mapping[str, Any] | None) -> Conjunction:
    """Fold criteria into a conjunction of typed clauses."""
    predicate = Conjunction()
    if not criteria:
        return predicate

    remaining = dict(criteria)

    construction = remaining.pop(CONSTRUCTION_KEY, None)
    if isinstance(construction, str):
        predicate = predicate.and_(ConstructionContains(construction))

    for flag, keyword in BRAND_FLAGS.items():
        if remaining.pop(flag, None) is True:
            predicate = predicate.and_(TagContains(keyword))

    for attribute, value in remaining.items():
        predicate = predicate.and_(AttributeEquals(attribute, value))

    logger.debug(f"translate_search: {len(predicate.clauses)} clause(s)")
    return predicate

"""SQL Lowering — the single adapter from search predicates to SQLAlchemy statements.

Invariants:
    - Every statement outer-joins the construction and loads it eagerly
      (contains_eager), so callers never trigger a lazy load
    - User text is always a bound parameter; LIKE wildcards in it are escaped
    - Clauses are conjoined in the order the translator produced them
    - Only mapped Car columns can be addressed by AttributeEquals

Design Decisions:
    - icontains() over a hand-picked operator: SQLAlchemy compiles ILIKE on
      PostgreSQL and lower(x) LIKE lower(y) on other dialects
    - Brand flags compare upper(tags) against a fixed keyword constant;
      type_coerce to String keeps the SimpleArray bind processor out of the way
"""

from sqlalchemy import Select, String, func, select, type_coerce
from sqlalchemy.orm import contains_eager

from car_registry.core.predicates import (
    AttributeEquals, Clause, Conjunction, ConstructionContains, Lookup, TagContains,
)
from car_registry.models.car import Car
from car_registry.models.construction import Construction


def _base_select() -> Select:
    return (
        select(Car)
        .outerjoin(Car.construction)
        .options(contains_eager(Car.construction))
    )


def lower_lookup(lookup: Lookup) -> Select:
    """Statement selecting one car by id."""
    return _base_select().where(Car.id == lookup.car_id)


def lower_search(predicate: Conjunction) -> Select:
    """Statement selecting all cars matching every clause."""
    statement = _base_select()
    for clause in predicate.clauses:
        statement = statement.where(lower_clause(clause))
    return statement


def lower_clause(clause: Clause):
    """Lower one clause to a SQL boolean expression."""
    if isinstance(clause, ConstructionContains):
        return Construction.model.icontains(clause.text, autoescape=True)
    if isinstance(clause, TagContains):
        tags = type_coerce(Car.tags, String)
        return func.upper(tags).like(f"%{clause.keyword.upper()}%")
    if isinstance(clause, AttributeEquals):
        column = Car.__table__.columns.get(clause.attribute)
        if column is None:
            raise ValueError(f"Unknown car attribute: {clause.attribute}")
        return getattr(Car, clause.attribute) == clause.value
    raise TypeError(f"Unsupported clause: {clause!r}")

"""Infrastructure Layer — database access, store adapter, notifiers and logging.

Invariants:
    - Infrastructure imports core types (errors, predicates) but no core logic
    - All SQLAlchemy failures mapped to DatabaseError at the session boundary

Design Decisions:
    - One lowering adapter owns every SQL expression (ADR: translator stays store-agnostic)
"""

"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Criteria handling and predicate translation are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: the translator builds an
      intermediate predicate, infrastructure lowers it to SQL
"""

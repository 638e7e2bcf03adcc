"""Services Layer — read and write services over the car store.

Invariants:
    - Services receive store, read service and notifier via constructor
    - Domain failures raised as core/errors.py types, never HTTP exceptions

Design Decisions:
    - Read and write split into two services: the write path reuses the read
      path for existence, uniqueness and version checks
"""

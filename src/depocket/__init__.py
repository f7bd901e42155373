"""Typed dependency pocket.

This package provides a lightweight alternative to constructor injection: an
object keeps its dependencies in a pocket of named, optionally typed slots,
so subclasses can add or replace dependencies without changing constructor
signatures, and tests can swap them for mocks.

Exports:
- `Pocket`: the registry; define slots, set and get their values.
- `Kind`: enum of primitive kinds usable as declared types.
- `Constraint`, `ANY`, `as_constraint`, `kind_of`, `satisfies`: the type
  matching rules applied when a value is set.
- `PocketError` and its subclasses `InvalidNameError`, `AlreadyDefinedError`,
  `NotFoundError` and `TypeMismatchError`.
"""

from ._constraints import ANY, Constraint, Kind, as_constraint, kind_of, satisfies
from ._errors import AlreadyDefinedError, InvalidNameError, NotFoundError, PocketError, TypeMismatchError
from ._pocket import Pocket, Slot


__all__ = [
    "ANY",
    "AlreadyDefinedError",
    "Constraint",
    "InvalidNameError",
    "Kind",
    "NotFoundError",
    "Pocket",
    "PocketError",
    "Slot",
    "TypeMismatchError",
    "as_constraint",
    "kind_of",
    "satisfies",
]

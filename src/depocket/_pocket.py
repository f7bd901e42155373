from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, overload

from ._constraints import Constraint, as_constraint, describe, satisfies
from ._errors import AlreadyDefinedError, InvalidNameError, NotFoundError, TypeMismatchError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    # None/"" (any), a Kind, a type label, a class, a prototype instance or a Constraint
    Declared = object


_UNSET: Any = object()  # slot never assigned
_MISSING: Any = object()  # argument not passed


@dataclass
class Slot:
    name: str
    constraint: Constraint
    value: object = _UNSET

    @property
    def assigned(self) -> bool:
        """Whether a value (possibly None) was ever set."""
        return self.value is not _UNSET

    def read(self) -> object:
        return self.value if self.assigned else None


class Pocket:
    """Typed registry of named dependencies.

    - define named slots, optionally constrained to a type
    - set their values later, checked against the declared type
    - get them back one by one, by list, or all at once.

    Slots are never removed and names cannot be redefined; values can be
    overwritten freely. A pocket is not thread-safe: guard it with your own
    lock if it is shared between threads.

    Example:
      pocket = Pocket().define({"db": Database, "retries": "integer"})
      pocket.set("retries", 3)
      pocket.get("retries")  # 3
      pocket.get("db")  # None, defined but not set yet

    """

    def __init__(self) -> None:
        self._slots: dict[str, Slot] = {}

    def has(self, name: str, check_value: bool = False) -> bool:  # noqa: FBT001, FBT002
        """Whether `name` is defined; with `check_value`, whether it also holds a non-None value."""
        slot = self._slots.get(name)
        if slot is None:
            return False
        if check_value:
            return slot.read() is not None
        return True

    @overload
    def define(self, name: str, declared: Declared = ...) -> Pocket: ...

    @overload
    def define(self, name: Mapping[str, Declared] | Iterable[str | tuple[str, Declared]]) -> Pocket: ...

    def define(self, name: Any, declared: Any = None) -> Pocket:
        """Define one dependency, or several at once.

        Example:
          pocket.define("db", Database)
          pocket.define({"db": Database, "cache": None})
          pocket.define(["logger", ("retries", "integer")])  # bare names accept any type

        Bulk definitions stop at the first error; entries already defined stay.
        """
        if isinstance(name, str):
            self._define(name, declared)
            return self

        if declared is not None:
            msg = "A declared type cannot be combined with a bulk definition."
            raise TypeError(msg)

        entries = name.items() if isinstance(name, Mapping) else name
        for entry in entries:
            if isinstance(entry, str):
                self._define(entry, None)
            else:
                entry_name, entry_declared = entry
                self._define(entry_name, entry_declared)
        return self

    def _define(self, name: str, declared: object) -> None:
        if not isinstance(name, str) or not name.strip():
            msg = f"Dependency should have a name, got {name!r}."
            raise InvalidNameError(msg)

        if name in self._slots:
            raise AlreadyDefinedError(name)

        try:
            constraint = as_constraint(declared)
        except TypeError as e:
            msg = f"Dependency {name!r}: {e}"
            raise TypeError(msg) from e

        self._slots[name] = Slot(name=name, constraint=constraint)
        logger.debug("Defined dependency %r of type %r", name, constraint.label)

    @overload
    def set(self, name: str, value: object) -> Pocket: ...

    @overload
    def set(self, name: Mapping[str, object]) -> Pocket: ...

    def set(self, name: Any, value: Any = _MISSING) -> Pocket:
        """Set the value of one dependency, or of several from a mapping.

        None is accepted by every declared type. Bulk assignments stop at the
        first error; values already assigned are kept.
        """
        if isinstance(name, str):
            if value is _MISSING:
                msg = f"No value given for dependency {name!r}."
                raise TypeError(msg)
            self._set(name, value)
            return self

        if value is not _MISSING:
            msg = "A value cannot be combined with a bulk assignment."
            raise TypeError(msg)

        for entry_name, entry_value in name.items():
            self._set(entry_name, entry_value)
        return self

    def _set(self, name: str, value: object) -> None:
        slot = self._slot(name)

        if not satisfies(value, slot.constraint):
            given = describe(value)
            logger.debug("Rejected %s for dependency %r of type %r", given, name, slot.constraint.label)
            raise TypeMismatchError(name, slot.constraint.label, given)

        slot.value = value
        logger.debug("Set dependency %r to a value of type %r", name, describe(value))

    @overload
    def get(self, name: None = ...) -> dict[str, object]: ...

    @overload
    def get(self, name: str) -> object: ...

    @overload
    def get(self, name: Iterable[str]) -> dict[str, object]: ...

    def get(self, name: Any = None) -> object:
        """Get a dependency value.

        - no argument: a snapshot of every dependency
        - a name: that dependency's value (None while unset)
        - an iterable of names: a snapshot restricted to those names.
        """
        if name is None:
            return {slot_name: slot.read() for slot_name, slot in self._slots.items()}

        if isinstance(name, str):
            return self._slot(name).read()

        return {slot_name: self._slot(slot_name).read() for slot_name in name}

    def get_type(self, name: str) -> str:
        """Declared type label of a dependency ("" when any type is accepted)."""
        return self._slot(name).constraint.label

    def get_constraint(self, name: str) -> Constraint:
        return self._slot(name).constraint

    def _slot(self, name: str) -> Slot:
        slot = self._slots.get(name)
        if slot is None:
            raise NotFoundError(name)
        return slot

    def __getitem__(self, name: str) -> object:
        return self._slot(name).read()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._slots))

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        slots = ", ".join(f"{name}: {slot.constraint.label or 'any'}" for name, slot in self._slots.items())
        return f"{type(self).__name__}({slots})"

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, get_origin, get_type_hints


logger = logging.getLogger(__name__)


class Kind(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"
    MAPPING = "mapping"
    CALLABLE = "callable"
    OBJECT = "object"

    @classmethod
    def parse(cls, label: str) -> Kind | None:
        """Return the kind named by `label` (lowercase canonical name or alias), or None."""
        return _KIND_ALIASES.get(label)


_KIND_ALIASES: dict[str, Kind] = {kind.value: kind for kind in Kind}
_KIND_ALIASES.update(
    {
        "none": Kind.NULL,
        "bool": Kind.BOOLEAN,
        "int": Kind.INTEGER,
        "double": Kind.FLOAT,
        "str": Kind.STRING,
        "list": Kind.ARRAY,
        "tuple": Kind.ARRAY,
        "dict": Kind.MAPPING,
        "closure": Kind.CALLABLE,
    }
)


def kind_of(value: object) -> Kind:  # noqa: PLR0911
    """Runtime kind of a value."""
    if value is None:
        return Kind.NULL
    # bool is a subclass of int
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, int):
        return Kind.INTEGER
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (list, tuple)):
        return Kind.ARRAY
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if callable(value):
        return Kind.CALLABLE
    return Kind.OBJECT


def describe(value: object) -> str:
    """Type name used in diagnostics: the kind for plain data, the class name otherwise."""
    kind = kind_of(value)
    if kind in (Kind.CALLABLE, Kind.OBJECT):
        return type(value).__name__
    return kind.value


class Constraint:
    """Declared type of a slot.

    Subclasses implement `accepts()` for non-None values; `satisfies()` is the
    entry point callers should use.
    """

    @property
    def label(self) -> str:
        raise NotImplementedError

    def accepts(self, value: object) -> bool:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.label


class _AnyConstraint(Constraint):
    @property
    def label(self) -> str:
        return ""

    def accepts(self, value: object) -> bool:
        return True

    def __repr__(self) -> str:
        return "ANY"


ANY = _AnyConstraint()


@dataclass(frozen=True)
class KindConstraint(Constraint):
    kind: Kind
    alias: str | None = None

    @property
    def label(self) -> str:
        return self.alias if self.alias is not None else self.kind.value

    def accepts(self, value: object) -> bool:
        actual = kind_of(value)
        if actual is self.kind:
            return True
        # functions are objects too
        return self.kind is Kind.OBJECT and actual is Kind.CALLABLE


@dataclass(frozen=True)
class ClassConstraint(Constraint):
    cls: type

    @property
    def label(self) -> str:
        return self.cls.__name__

    def accepts(self, value: object) -> bool:
        if _is_protocol(self.cls) and not _is_runtime_checkable_protocol(self.cls):
            # isinstance() is not available for plain protocols
            if self.cls in type(value).__mro__:
                return True
            return not _protocol_conformance_problems(self.cls, value)
        return isinstance(value, self.cls)


@dataclass(frozen=True)
class ClassNameConstraint(Constraint):
    """Class given by name; matches `__name__`, `__qualname__` or `module.qualname` along the MRO."""

    name: str

    @property
    def label(self) -> str:
        return self.name

    def accepts(self, value: object) -> bool:
        # __class__ rather than type() so spec'd mocks pass like they do with isinstance()
        for klass in value.__class__.__mro__:
            if self.name in (klass.__name__, klass.__qualname__, f"{klass.__module__}.{klass.__qualname__}"):
                return True
        return False


def as_constraint(declared: object) -> Constraint:
    """Normalize a declared type into a `Constraint`.

    - None or "": any type.
    - a `Constraint`: returned unchanged.
    - a `Kind`, or a lowercase string naming a kind or one of its aliases: a kind constraint.
    - any other string: a class name.
    - `typing.Any` and parameterized generics such as `list[int]`: TypeError.
    - a class (including protocols): instances of that class.
    - any other object: instances of that object's class.
    """
    if declared is None or (isinstance(declared, str) and not declared):
        return ANY
    if isinstance(declared, Constraint):
        return declared
    if isinstance(declared, Kind):
        return KindConstraint(declared)
    if isinstance(declared, str):
        kind = Kind.parse(declared)
        if kind is None:
            return ClassNameConstraint(declared)
        return KindConstraint(kind, alias=declared)
    if declared is Any or get_origin(declared) is not None:
        msg = f"Declared type {declared!r} cannot be checked with isinstance(); use a class, a kind or a class name."
        raise TypeError(msg)
    if inspect.isclass(declared):
        return ClassConstraint(declared)
    return ClassConstraint(declared.__class__)


def satisfies(value: object, constraint: Constraint) -> bool:
    """Whether `value` may be stored under `constraint`. None always may."""
    if value is None:
        return True
    return constraint.accepts(value)


def _is_runtime_checkable_protocol(tp: type) -> bool:
    try:
        isinstance(None, tp)
    except TypeError:
        return False
    else:
        return True


def _protocol_conformance_problems(proto_cls: type, value: object) -> list[str]:  # noqa: C901
    """Best-effort structural conformance: presence + basic callable arity + return type checks."""
    missing: list[str] = []
    signature_mismatches: list[str] = []

    try:
        proto_hints = get_type_hints(proto_cls, include_extras=True)
    except TypeError:
        proto_hints = {}
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s type hints", exc.name, proto_cls.__qualname__)
        proto_hints = {}

    # Attributes required by annotations
    for name in proto_hints:
        if name.startswith("_"):
            continue
        if not hasattr(value, name):
            missing.append(name)

    for name, proto_attr in proto_cls.__dict__.items():
        if name.startswith("_") or not inspect.isfunction(proto_attr):
            continue

        if not hasattr(value, name):
            missing.append(name)
            continue

        member = getattr(value, name)
        if not callable(member):
            signature_mismatches.append(f"{name}: not callable")
            continue

        try:
            proto_sig = inspect.signature(proto_attr)
            member_sig = inspect.signature(member)
        except (TypeError, ValueError) as e:
            signature_mismatches.append(f"{name}: unable to compare signatures ({e})")
            continue

        proto_params = [p for p in proto_sig.parameters.values() if p.name != "self"]
        member_params = [p for p in member_sig.parameters.values() if p.name != "self"]

        takes_varargs = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in member_params)
        if not takes_varargs and _positional_arity(member_params) < _positional_arity(proto_params):
            signature_mismatches.append(
                f"{name}: fewer required positional params "
                f"({_positional_arity(member_params)}) than protocol "
                f"({_positional_arity(proto_params)})"
            )

        if not _is_return_type_compatible(member_sig.return_annotation, proto_sig.return_annotation):
            signature_mismatches.append(
                f"{name}: return type {member_sig.return_annotation!r} is not compatible with "
                f"protocol return type {proto_sig.return_annotation!r}"
            )

    problems = [f"missing member: {name}" for name in missing] + signature_mismatches
    if problems:
        logger.debug(
            "%s does not structurally conform to %s: %s",
            type(value).__name__,
            proto_cls.__name__,
            "; ".join(problems),
        )
    return problems


def _positional_arity(params: list[inspect.Parameter]) -> int:
    return sum(
        1
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        and p.default is inspect.Parameter.empty
    )


def _is_return_type_compatible(impl_ret: object, proto_ret: object) -> bool:
    empty = inspect.Signature.empty
    if impl_ret is empty or proto_ret is empty or impl_ret is Any or proto_ret is Any:
        return True

    # Exact match
    if impl_ret == proto_ret:
        return True

    # Postponed annotations cannot be compared reliably
    if isinstance(impl_ret, str) or isinstance(proto_ret, str):
        return True

    # Handle class-based covariance
    if isinstance(impl_ret, type) and isinstance(proto_ret, type):
        return issubclass(impl_ret, proto_ret)

    # Everything else (Union, Protocol, TypeVar, etc.) -> conservative failure
    return False


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def _is_protocol(tp: type) -> bool:
        return inspect.isclass(tp) and typing.is_protocol(tp)

else:

    def _is_protocol(tp: type) -> bool:
        """Detect whether 'tp' is a typing.Protocol subclass (safe)."""
        # issubclass(tp, Protocol) raises for non-runtime protocols on older interpreters
        return inspect.isclass(tp) and bool(tp.__dict__.get("_is_protocol", False)) and tp is not Protocol

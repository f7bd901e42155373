from __future__ import annotations


class PocketError(Exception):
    """Base class for every error raised by a pocket."""

    def __str__(self) -> str:
        # KeyError subclasses would otherwise render the message with quotes
        return str(self.args[0]) if self.args else ""


class InvalidNameError(PocketError, ValueError):
    pass


class AlreadyDefinedError(PocketError, KeyError):
    def __init__(self, name: str) -> None:
        self.name = name
        msg = f"Dependency {name!r} is already defined."
        super().__init__(msg)


class NotFoundError(PocketError, KeyError):
    def __init__(self, name: str) -> None:
        self.name = name
        msg = f"Dependency {name!r} not found. If it's a new one, define it first via 'define'."
        super().__init__(msg)


class TypeMismatchError(PocketError, TypeError):
    """Raised when a value does not satisfy the declared type of its slot.

    Carries the dependency ``name``, the ``declared`` type label and the
    ``given`` type of the rejected value.
    """

    def __init__(self, name: str, declared: str, given: str) -> None:
        self.name = name
        self.declared = declared
        self.given = given
        msg = f"Dependency {name!r} must be of type [{declared}], value of type [{given}] was given."
        super().__init__(msg)

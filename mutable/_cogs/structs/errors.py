"""
The errors of the change tracking and of the dynamic field setting.

The resetting and the field setting are strict: any failure aborts the whole
call and is raised to the caller as one of these errors. The analysis of the
changes never raises them: the faults are logged and the partial results
are returned instead.

The errors are distinguishable by their classes (or via `is_cannot_find`
& `is_cannot_set`), never by their messages. The messages are for humans.

The low-level reasons why a value cannot be set to a found field are raised
as `SetterError` sub-classes internally, and are then chained as the causes
of `CannotSetError` -- for better explainability of errors in the stack traces.
"""
from typing import Any, Optional


class MutableError(Exception):
    """ The base class for all the errors of the library. """


class InvalidTargetError(MutableError, TypeError):
    """ The reset was requested not for the tracked object itself. """


class NestedResetError(MutableError):
    """ One of the nested tracked objects failed to reset. """


class CannotFindError(MutableError, LookupError):
    """ No field matches the requested external path. """

    def __init__(self, path: str) -> None:
        super().__init__(f"Cannot find a suitable field: {path!r}")
        self._path = path

    @property
    def path(self) -> str:
        return self._path


class CannotSetError(MutableError):
    """ The field is found, but the value cannot be assigned to it. """

    def __init__(self, path: str, value: Any) -> None:
        super().__init__(f"Cannot set the value {value!r} to the field {path!r}")
        self._path = path
        self._value = value

    @property
    def path(self) -> str:
        return self._path

    @property
    def value(self) -> Any:
        return self._value

    @property
    def reason(self) -> Optional[BaseException]:
        return self.__cause__


class SetterError(MutableError):
    """ A low-level reason why the value cannot be set; see `CannotSetError`. """


class NotSettableError(SetterError):
    pass


class NotInterfaceableError(SetterError):
    pass


class UnsupportedTypeError(SetterError, TypeError):
    pass


class CannotParseError(SetterError, ValueError):
    pass


class NotJSONError(SetterError, ValueError):
    pass


def is_cannot_find(exc: Optional[BaseException]) -> bool:
    return isinstance(exc, CannotFindError)


def is_cannot_set(exc: Optional[BaseException]) -> bool:
    return isinstance(exc, CannotSetError)

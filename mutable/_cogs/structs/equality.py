"""
The equality of the fields' values for the regular (non-deep) analysis.

If the value's type provides the `Equaler` capability (an ``equal`` method),
it is used exclusively. Otherwise, the values are compared structurally:
the same types, and the same contents recursively, including the fields of
the dataclasses and the attributes of plain objects with no own equality.
"""
import collections.abc
import dataclasses
from typing import Any

from typing_extensions import Protocol, runtime_checkable


@runtime_checkable
class Equaler(Protocol):
    def equal(self, other: Any) -> bool: ...


def equal(current: Any, original: Any) -> bool:
    if not isinstance(current, type) and isinstance(current, Equaler):
        return bool(current.equal(original))
    return deep_equal(current, original)


def deep_equal(a: Any, b: Any) -> bool:
    """
    Compare two values structurally.

    Unlike the ``==`` operator, the types must be exactly the same
    (e.g. ``1``, ``1.0`` & ``True`` are all different), and the plain objects
    with no own equality are compared by their attributes, not by identity.
    """
    if a is b:
        return True
    elif type(a) is not type(b):
        return False
    elif isinstance(a, collections.abc.Mapping):
        return a.keys() == b.keys() and all(deep_equal(a[key], b[key]) for key in a)
    elif isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(deep_equal(x, y) for x, y in zip(a, b))
    elif dataclasses.is_dataclass(a) and not isinstance(a, type):
        return all(deep_equal(getattr(a, f.name), getattr(b, f.name)) for f in dataclasses.fields(a))
    elif type(a).__eq__ is object.__eq__ and hasattr(a, '__dict__'):
        return deep_equal(vars(a), vars(b))
    else:
        return bool(a == b)

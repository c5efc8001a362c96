"""
The snapshots (checkpoints) of the dataclasses, as the baselines for the diffs.

A snapshot is a value-copy of an object: as if the object were copied
by value with all its value-members, while the reference-members remain
the same references. This is what makes the in-place mutations through
the references invisible to the regular (non-deep) analysis, while the
mutations of the value-members are always noticed.

Specifically, per field kind:

* the structs are snapshotted recursively with the same rules;
* the references are kept as the same objects, unless they are deep-tracked
  (then they are snapshotted by value, so that the nested changes are noticed);
* the ignored fields are kept as is (they can hold uncopyable things, e.g. locks);
* everything else is deep-copied.

The snapshots of the tracked objects carry none of the tracking state of the
originals (see `mutable.Mutable`): the parents never touch the checkpoints
of the nested tracked objects, which own their checkpoints themselves.
"""
import copy
from typing import Any, TypeVar

from mutable._cogs.structs import fields

_T = TypeVar('_T')


def take(obj: _T) -> _T:
    """
    Make a snapshot of a dataclass instance; other values are deep-copied.
    """
    if not fields.is_struct(obj):
        return copy.deepcopy(obj)

    clone = copy.copy(obj)
    for descriptor in fields.describe(type(obj)):
        try:
            value = getattr(obj, descriptor.name)
        except AttributeError:
            continue  # unset fields remain unset in the snapshot too.
        object.__setattr__(clone, descriptor.name, capture(value, descriptor))
    return clone


def capture(value: Any, descriptor: fields.FieldDescriptor) -> Any:
    """
    Snapshot a single value of a field according to the field's descriptor.
    """
    if value is None or descriptor.ignored:
        return value
    elif descriptor.kind is fields.FieldKind.REFERENCE and not descriptor.deep:
        return value
    elif descriptor.composite and fields.is_struct(value):
        return take(value)
    else:
        return copy.deepcopy(value)

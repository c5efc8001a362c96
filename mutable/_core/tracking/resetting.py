"""
Resetting the tracked objects and their nested tracked objects.

The reset of an object itself (the checkpoint, the status, the changes)
is done by the object's own implementation of the trackable capability.
Here, the nested members of the reset object are reset recursively,
depth-first, in the fields' declaration order:

* the struct and reference fields, if they are trackable (``None`` is skipped);
* the collections of trackable items, element-wise:
  the items of the sequences, and the values of the mappings.

Only the direct members are inspected: the trackable objects nested
in the non-trackable structs are not searched for.

The sets of trackable items are not reset: their items cannot be modified
in place without breaking the sets' hashing. A warning is logged instead.
"""
import collections.abc
from typing import Any, Iterable

from mutable._cogs.structs import errors, fields, trackables
from mutable._core.engines import loggers


def reset(target: Any) -> None:
    """
    Reset a tracked object: take a checkpoint and forget all the changes.

    The target must be the tracked object itself -- not its class,
    and not an object without the trackable capability.
    """
    if not trackables.is_trackable(target):
        raise errors.InvalidTargetError(f"Only the trackable objects can be reset. Got {target!r}")
    target.reset_mutable_state(target)


def reset_members(obj: Any) -> None:
    """
    Reset all the nested trackable members of the object (but not the object).
    """
    for descriptor in fields.describe(type(obj)):
        if descriptor.ignored or descriptor.kind is fields.FieldKind.SCALAR:
            continue

        value = getattr(obj, descriptor.name, None)
        if value is None:
            continue

        if descriptor.kind is fields.FieldKind.COLLECTION:
            items = _iter_collection(obj, descriptor, value)
        else:
            items = [value]

        for item in items:
            if trackables.is_trackable(item):
                try:
                    item.reset_mutable_state(item)
                except Exception as e:
                    loggers.ObjectLogger(obj).error(f"Failed to reset the field {descriptor.name!r}: {e}")
                    raise errors.NestedResetError(
                        f"Failed to reset the nested field {descriptor.name!r}.") from e


def _iter_collection(obj: Any, descriptor: fields.FieldDescriptor, value: Any) -> Iterable[Any]:
    if isinstance(value, collections.abc.Mapping):
        return list(value.values())
    elif descriptor.shape is fields.ContainerShape.UNSUPPORTED or isinstance(value, collections.abc.Set):
        loggers.ObjectLogger(obj).warning(
            f"The items of the field {descriptor.name!r} cannot be reset in place "
            f"(unsupported container: {type(value).__name__}); skipping.")
        return []
    elif isinstance(value, collections.abc.Iterable):
        return list(value)
    else:
        return []

"""
The trackable capability: the protocol of the objects with change tracking.

Any object is trackable if it supports the reset, the analysis of changes,
and the dynamic setting of values -- regardless of its class hierarchy.
Usually, it is done by mixing `mutable.Mutable` into a dataclass,
but any other implementation of the protocol is accepted too,
including as a nested member of another tracked object.

The classes which implement the capability itself (i.e. the trackers)
are registered as the "capability types": the fields declared with these
types are never analysed, since they are the trackers, not the data.
"""
from typing import TYPE_CHECKING, Any, Optional, Set

from typing_extensions import Protocol, runtime_checkable

from mutable._cogs.structs import statuses

if TYPE_CHECKING:
    from mutable._cogs.configs import configuration
    from mutable._cogs.structs import diffs


@runtime_checkable
class Trackable(Protocol):
    mutable_status: statuses.Status

    @property
    def changed_fields(self) -> "diffs.ChangedFields": ...

    def reset_mutable_state(self, target: Any = None) -> None: ...

    def analyze_changes(
            self,
            *,
            settings: Optional["configuration.TrackingSettings"] = None,
    ) -> "diffs.ChangedFields": ...

    def set_value(self, path: str, value: Any) -> None: ...


_capability_types: Set[Any] = {Trackable}


def register_capability_type(cls: type) -> None:
    _capability_types.add(cls)


def is_capability_type(hint: Any) -> bool:
    try:
        return hint in _capability_types
    except TypeError:  # unhashable hints
        return False


def is_trackable(obj: Any) -> bool:
    """ Check if the object (but not a class) implements the tracking. """
    return not isinstance(obj, type) and isinstance(obj, Trackable)


def has_checkpoint(obj: Any) -> bool:
    """
    Check if the trackable object has a baseline to analyze its own changes.

    The objects which do not report it (via ``mutable_checkpointed``)
    are assumed to always have one.
    """
    return bool(getattr(obj, 'mutable_checkpointed', True))

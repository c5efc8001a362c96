"""
The default implementation of the trackable capability for the dataclasses.

Usage::

    @dataclasses.dataclass
    class Engine(mutable.Mutable):
        power: int = 0

    @dataclasses.dataclass
    class Car(mutable.Mutable):
        name: str = ''
        engine: Engine = mutable.field(deep=True, default_factory=Engine)

    car = Car(name='one')
    car.reset_mutable_state()
    car.engine.power = 100
    car.set_value('name', 'two')
    print(car.analyze_changes())

The tracking state (the status, the checkpoint, the changed fields) is kept
in the instance's ``__dict__`` next to the fields, but is not a part of the
dataclass: it is neither compared, nor shown in the ``repr()``, nor copied
(the copies and the unpickled objects start with a fresh tracking state).

The objects are not thread-safe: the reset, the analysis, and the setting
of the values on the same object must be serialized by the caller.
"""
from typing import Any, Dict, Optional

from mutable._cogs.configs import configuration
from mutable._cogs.structs import diffs, errors, snapshots, statuses, trackables
from mutable._core.engines import loggers
from mutable._core.tracking import analysis, resetting, setting

_STATUS_KEY = '_mutable_status'
_CHECKPOINT_KEY = '_mutable_checkpoint'
_CHANGES_KEY = '_mutable_changes'
_TRACKING_KEYS = (_STATUS_KEY, _CHECKPOINT_KEY, _CHANGES_KEY)


class Mutable:
    """
    A mixin for the dataclasses to track the changes of their fields.
    """

    @property
    def mutable_status(self) -> statuses.Status:
        return self.__dict__.get(_STATUS_KEY, statuses.Status.NOT_CHANGED)

    @mutable_status.setter
    def mutable_status(self, status: statuses.Status) -> None:
        self.__dict__[_STATUS_KEY] = statuses.Status(status)

    @property
    def mutable_checkpointed(self) -> bool:
        """ Whether the object was reset at least once, so it can analyze its changes. """
        return _CHECKPOINT_KEY in self.__dict__

    @property
    def changed_fields(self) -> diffs.ChangedFields:
        try:
            return self.__dict__[_CHANGES_KEY]
        except KeyError:
            return self.__dict__.setdefault(_CHANGES_KEY, diffs.ChangedFields())

    def reset_mutable_state(self, target: Any = None) -> None:
        """
        Take a new checkpoint, forget the changes, and reset the nested objects.

        If the target is passed, it must be the object itself (as the tracker
        is the object itself), not a copy or another object.
        """
        if target is not None and target is not self:
            raise errors.InvalidTargetError(
                f"The tracked object must be reset with itself, not with {type(target).__name__}.")
        self.__dict__[_CHECKPOINT_KEY] = snapshots.take(self)
        self.__dict__[_STATUS_KEY] = statuses.Status.NOT_CHANGED
        self.__dict__[_CHANGES_KEY] = diffs.ChangedFields()
        resetting.reset_members(self)

    def analyze_changes(
            self,
            *,
            settings: Optional[configuration.TrackingSettings] = None,
    ) -> diffs.ChangedFields:
        """
        Compare the object to its checkpoint, and return the changed fields.

        The changes are also merged into the object's own `changed_fields`.
        The analysis never fails: the faults are logged, and the changes
        found before the fault are returned.
        """
        if not self.mutable_checkpointed:
            loggers.ObjectLogger(self).warning("The changes cannot be analyzed before the first reset.")
            return diffs.ChangedFields()
        return analysis.analyze_struct(self, self.__dict__[_CHECKPOINT_KEY], settings=settings)

    def set_value(
            self,
            path: str,
            value: Any,
            *,
            settings: Optional[configuration.TrackingSettings] = None,
    ) -> None:
        """
        Set the value of a field by its external path (e.g. ``"engine/power"``).

        The strings & bytes are parsed as JSON documents if the field is not
        of a string/bytes type. See `mutable.set_value` for details.
        """
        setting.set_value(self, path, value, settings=settings)

    def get_value(
            self,
            path: str,
            *,
            settings: Optional[configuration.TrackingSettings] = None,
    ) -> Any:
        return setting.get_value(self, path, settings=settings)

    def __getstate__(self) -> Dict[str, Any]:
        state = dict(self.__dict__)
        for key in _TRACKING_KEYS:
            state.pop(key, None)
        return state


trackables.register_capability_type(Mutable)

import dataclasses
from typing import Dict, FrozenSet, List, Optional

import pytest

from mutable._cogs.structs.diffs import ChangedField
from mutable._cogs.structs.errors import InvalidTargetError, NestedResetError
from mutable._cogs.structs.statuses import Status
from mutable._core.tracking.resetting import reset
from mutable._core.tracking.setting import set_mutable_status
from mutable._core.tracking.trackables import Mutable


@dataclasses.dataclass
class Engine(Mutable):
    power: int = 0


@dataclasses.dataclass(frozen=True)
class Wheel(Mutable):
    size: int = 0


@dataclasses.dataclass
class Holder:
    engine: Engine = dataclasses.field(default_factory=Engine)


@dataclasses.dataclass
class Car(Mutable):
    name: str = ''
    engine: Engine = dataclasses.field(default_factory=Engine)
    spare: Optional[Engine] = None
    engines: List[Optional[Engine]] = dataclasses.field(default_factory=list)
    by_name: Dict[str, Engine] = dataclasses.field(default_factory=dict)
    holder: Holder = dataclasses.field(default_factory=Holder)


def _dirty(obj):
    set_mutable_status(obj, Status.CHANGED)
    obj.changed_fields['dirt'] = ChangedField(name='dirt', old_value=1, new_value=2)


def test_initial_state():
    car = Car()
    assert car.mutable_status == Status.NOT_CHANGED
    assert car.changed_fields == {}


def test_reset_clears_the_status_and_changes():
    car = Car()
    _dirty(car)
    reset(car)
    assert car.mutable_status == Status.NOT_CHANGED
    assert car.changed_fields == {}


def test_reset_is_idempotent():
    car = Car(name='one')
    reset(car)
    reset(car)
    assert car.mutable_status == Status.NOT_CHANGED
    assert car.changed_fields == {}
    assert car.analyze_changes() == {}


def test_reset_replaces_the_changes_object():
    car = Car()
    changes = car.changed_fields
    car.reset_mutable_state()
    assert car.changed_fields is not changes


def test_reset_via_the_method_with_itself():
    car = Car()
    _dirty(car)
    car.reset_mutable_state(car)
    assert car.mutable_status == Status.NOT_CHANGED


@pytest.mark.parametrize('status', [Status.ADDED, Status.REMOVED, Status.CHANGED])
def test_reset_resets_any_status(status):
    car = Car()
    car.mutable_status = status
    reset(car)
    assert car.mutable_status == Status.NOT_CHANGED


def test_reset_with_another_object_fails():
    car = Car()
    with pytest.raises(InvalidTargetError):
        car.reset_mutable_state(Car())


def test_reset_with_a_copy_fails():
    car = Car()
    with pytest.raises(InvalidTargetError):
        car.reset_mutable_state(dataclasses.replace(car))


@pytest.mark.parametrize('target', [
    pytest.param(Car, id='class'),
    pytest.param(Holder(), id='non-trackable'),
    pytest.param(None, id='none'),
    pytest.param(123, id='scalar'),
])
def test_reset_of_non_trackables_fails(target):
    with pytest.raises(InvalidTargetError):
        reset(target)


def test_invalid_target_is_a_type_error():
    with pytest.raises(TypeError):
        reset(Car)


def test_nested_structs_are_reset():
    car = Car()
    _dirty(car.engine)
    reset(car)
    assert car.engine.mutable_status == Status.NOT_CHANGED
    assert car.engine.changed_fields == {}


def test_nested_references_are_reset():
    car = Car(spare=Engine())
    _dirty(car.spare)
    reset(car)
    assert car.spare.mutable_status == Status.NOT_CHANGED


def test_nested_none_references_are_skipped():
    car = Car(spare=None)
    reset(car)
    assert car.spare is None


def test_nested_sequences_are_reset_element_wise():
    car = Car(engines=[Engine(), None, Engine()])
    _dirty(car.engines[0])
    _dirty(car.engines[2])
    reset(car)
    assert car.engines[0].mutable_status == Status.NOT_CHANGED
    assert car.engines[2].mutable_status == Status.NOT_CHANGED


def test_nested_mappings_are_reset_by_values():
    car = Car(by_name={'main': Engine()})
    _dirty(car.by_name['main'])
    reset(car)
    assert car.by_name['main'].mutable_status == Status.NOT_CHANGED


def test_nested_objects_get_their_own_checkpoints():
    car = Car(engine=Engine(power=1))
    reset(car)
    car.engine.power = 2
    changes = car.engine.analyze_changes()
    assert changes['power'].old_value == 1
    assert changes['power'].new_value == 2


def test_nested_objects_of_non_trackable_structs_are_not_reset():
    car = Car()
    _dirty(car.holder.engine)
    reset(car)
    assert car.holder.engine.mutable_status == Status.CHANGED


def test_nested_sets_are_skipped_with_warnings(assert_logs):

    @dataclasses.dataclass
    class Garage(Mutable):
        wheels: FrozenSet[Wheel] = frozenset()

    wheel = Wheel(size=1)
    _dirty(wheel)
    garage = Garage(wheels=frozenset({wheel}))
    reset(garage)

    assert garage.mutable_status == Status.NOT_CHANGED
    assert wheel.mutable_status == Status.CHANGED
    assert_logs([r"'wheels' cannot be reset in place"])


def test_frozen_objects_are_reset():
    wheel = Wheel(size=1)
    _dirty(wheel)
    reset(wheel)
    assert wheel.mutable_status == Status.NOT_CHANGED


def test_nested_failures_are_escalated(mocker, assert_logs):
    car = Car()
    error = ValueError('boom')
    mocker.patch.object(car.engine, 'reset_mutable_state', side_effect=error)

    with pytest.raises(NestedResetError) as err:
        reset(car)

    assert err.value.__cause__ is error
    assert_logs([r"Failed to reset the field 'engine': boom"])


def test_nested_failures_abort_the_remaining_resets(mocker):
    car = Car(spare=Engine())
    _dirty(car.spare)
    mocker.patch.object(car.engine, 'reset_mutable_state', side_effect=ValueError('boom'))

    with pytest.raises(NestedResetError):
        reset(car)

    assert car.spare.mutable_status == Status.CHANGED

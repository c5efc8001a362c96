import json

import pytest

from mutable._cogs.structs.statuses import Status


@pytest.mark.parametrize('status, value', [
    (Status.NOT_CHANGED, 'NotChanged'),
    (Status.CHANGED, 'Changed'),
    (Status.ADDED, 'Added'),
    (Status.REMOVED, 'Removed'),
])
def test_values(status, value):
    assert status == value
    assert str(status) == value
    assert repr(status) == repr(value)
    assert Status(value) is status


def test_json_serializable():
    assert json.dumps({'status': Status.CHANGED}) == '{"status": "Changed"}'


def test_unknown_values_rejected():
    with pytest.raises(ValueError):
        Status('Modified')

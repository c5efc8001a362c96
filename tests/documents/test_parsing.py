import pytest

from mutable._cogs.structs.documents import parse
from mutable._cogs.structs.errors import NotJSONError


@pytest.mark.parametrize('payload, expected', [
    ('123', 123),
    ('1.5', 1.5),
    ('"hello"', 'hello'),
    ('true', True),
    ('null', None),
    ('[1, 2, 3]', [1, 2, 3]),
    ('{"a": {"b": [null]}}', {'a': {'b': [None]}}),
    (b'[1,2,3]', [1, 2, 3]),
    (bytearray(b'"hello"'), 'hello'),
    ('"über"', 'über'),
])
def test_valid_documents(payload, expected):
    assert parse(payload) == expected


@pytest.mark.parametrize('payload', [
    pytest.param('', id='empty'),
    pytest.param('hello', id='unquoted'),
    pytest.param("'hello'", id='single-quoted'),
    pytest.param('[1, 2', id='unterminated'),
    pytest.param('{"a": 1,}', id='trailing-comma'),
    pytest.param('NaN', id='nan'),
    pytest.param('Infinity', id='infinity'),
    pytest.param('-Infinity', id='minus-infinity'),
    pytest.param('[1, NaN]', id='nested-nan'),
    pytest.param(b'\xff\xfe\x00', id='undecodable-bytes'),
])
def test_invalid_documents(payload):
    with pytest.raises(NotJSONError) as err:
        parse(payload)
    assert err.value.__cause__ is not None

import datetime
import json
import logging

from mutable._cogs.configs.configuration import SerializationSettings, TrackingSettings
from mutable._cogs.structs.diffs import ChangedField, ChangedFields


def test_leaf_changes_as_dicts():
    changes = ChangedFields([
        ChangedField(name='field_a', old_value='one', new_value='two'),
        ChangedField(name='field_c', old_value=3, new_value=16),
    ])
    assert changes.as_dict() == {
        'field_a': {'old_value': 'one', 'new_value': 'two'},
        'field_c': {'old_value': 3, 'new_value': 16},
    }


def test_nested_changes_as_dicts():
    nested = ChangedFields([ChangedField(name='field_a', old_value='tree', new_value='stone')])
    changes = ChangedFields([ChangedField(name='field_b', nested_fields=nested)])
    assert changes.as_dict() == {
        'field_b': {
            'old_value': None,
            'new_value': None,
            'nested_fields': {
                'field_a': {'old_value': 'tree', 'new_value': 'stone'},
            },
        },
    }


def test_names_are_not_serialized():
    changes = ChangedFields([ChangedField(name='field_a', old_value=1, new_value=2)])
    assert 'name' not in changes.as_dict()['field_a']


def test_compact_json():
    changes = ChangedFields([ChangedField(name='field_a', old_value='one', new_value='two')])
    assert changes.to_json() == '{"field_a":{"old_value":"one","new_value":"two"}}'


def test_pretty_json():
    changes = ChangedFields([ChangedField(name='field_a', old_value='one', new_value='two')])
    text = changes.to_json(pretty=True)
    assert text == (
        '{\n'
        '\t"field_a": {\n'
        '\t\t"old_value": "one",\n'
        '\t\t"new_value": "two"\n'
        '\t}\n'
        '}'
    )


def test_pretty_json_with_custom_indent():
    settings = TrackingSettings(serialization=SerializationSettings(indent=2))
    changes = ChangedFields([ChangedField(name='field_a', old_value=1, new_value=2)])
    text = changes.to_json(pretty=True, settings=settings)
    assert text.splitlines()[1] == '  "field_a": {'


def test_str_is_pretty_json():
    changes = ChangedFields([ChangedField(name='field_a', old_value=1, new_value=2)])
    assert str(changes) == changes.to_json(pretty=True)


def test_empty_changes_json():
    assert ChangedFields().to_json() == '{}'
    assert ChangedFields().to_json(pretty=True) == '{}'


def test_non_json_values_are_encoded():
    changes = ChangedFields([
        ChangedField(name='built', old_value=None, new_value=datetime.date(2020, 12, 31)),
        ChangedField(name='tags', old_value={'b', 'a'}, new_value=b'hi'),
    ])
    assert json.loads(changes.to_json()) == {
        'built': {'old_value': None, 'new_value': '2020-12-31'},
        'tags': {'old_value': ['a', 'b'], 'new_value': 'aGk='},
    }


def test_unserializable_values_are_logged_not_raised(caplog, assert_logs):
    changes = ChangedFields([ChangedField(name='field_a', old_value=object(), new_value=1)])
    text = changes.to_json()
    assert text == '{}'
    assert_logs([r"Cannot serialize the changed fields"])
    assert caplog.records[-1].levelno == logging.ERROR

import dataclasses
import json
import logging.handlers

import pytest

from mutable._core.engines.loggers import ObjectJsonFormatter, ObjectLogger, \
                                          ObjectPrefixingJsonFormatter, \
                                          ObjectPrefixingTextFormatter, ObjectTextFormatter


@dataclasses.dataclass
class Car:
    name: str = ''


@pytest.fixture()
def car():
    return Car(name='one')


@pytest.fixture()
def record(car):
    handler = logging.handlers.BufferingHandler(capacity=100)
    logger = ObjectLogger(car)
    logger.logger.addHandler(handler)
    try:
        logger.info("hello")
    finally:
        logger.logger.removeHandler(handler)
    return handler.buffer[0]


@pytest.fixture()
def plain_record():
    handler = logging.handlers.BufferingHandler(capacity=100)
    logger = logging.getLogger('mutable.objects')
    logger.addHandler(handler)
    try:
        logger.info("hello")
    finally:
        logger.removeHandler(handler)
    return handler.buffer[0]


def test_prefixing_text_formatter_adds_prefixes(record):
    formatter = ObjectPrefixingTextFormatter()
    formatted = formatter.format(record)
    assert formatted == '[Car] hello'


def test_prefixing_json_formatter_adds_prefixes(record):
    formatter = ObjectPrefixingJsonFormatter()
    formatted = formatter.format(record)
    decoded = json.loads(formatted)
    assert decoded['message'] == '[Car] hello'


def test_prefixing_text_formatter_omits_prefixes_without_objects(plain_record):
    formatter = ObjectPrefixingTextFormatter()
    formatted = formatter.format(plain_record)
    assert formatted == 'hello'


def test_prefixing_keeps_the_original_record_intact(record):
    formatter = ObjectPrefixingTextFormatter()
    formatter.format(record)
    assert record.msg == 'hello'


def test_regular_text_formatter_omits_prefixes(record):
    formatter = ObjectTextFormatter()
    formatted = formatter.format(record)
    assert formatted == 'hello'


def test_regular_json_formatter_omits_prefixes(record):
    formatter = ObjectJsonFormatter()
    formatted = formatter.format(record)
    decoded = json.loads(formatted)
    assert decoded['message'] == 'hello'


@pytest.mark.parametrize('cls', [ObjectJsonFormatter, ObjectPrefixingJsonFormatter])
@pytest.mark.parametrize('levelno, expected_severity', [
    (0,  'debug'),
    (logging.DEBUG, 'debug'),
    (logging.DEBUG + 1, 'info'),
    (logging.INFO, 'info'),
    (logging.INFO + 1, 'warn'),
    (logging.WARNING, 'warn'),
    (logging.WARNING + 1, 'error'),
    (logging.ERROR, 'error'),
    (logging.ERROR + 1, 'fatal'),
    (logging.FATAL, 'fatal'),
    (999, 'fatal'),
])
def test_json_formatters_add_severity(record, cls, levelno, expected_severity):
    record.levelno = levelno
    record.levelname = 'must-be-irrelevant'
    formatter = cls()
    formatted = formatter.format(record)
    decoded = json.loads(formatted)
    assert 'severity' in decoded
    assert decoded['severity'] == expected_severity


@pytest.mark.parametrize('cls', [ObjectJsonFormatter, ObjectPrefixingJsonFormatter])
def test_json_formatters_add_refkey_with_default_key(record, car, cls):
    formatter = cls()
    formatted = formatter.format(record)
    decoded = json.loads(formatted)
    assert 'object' in decoded
    assert decoded['object'] == {
        'type': 'Car',
        'module': __name__,
        'id': hex(id(car)),
    }


@pytest.mark.parametrize('cls', [ObjectJsonFormatter, ObjectPrefixingJsonFormatter])
def test_json_formatters_add_refkey_with_custom_key(record, cls):
    formatter = cls(refkey='tracked')
    formatted = formatter.format(record)
    decoded = json.loads(formatted)
    assert 'object' not in decoded
    assert decoded['tracked']['type'] == 'Car'


@pytest.mark.parametrize('cls', [ObjectJsonFormatter, ObjectPrefixingJsonFormatter])
def test_json_formatters_hide_the_raw_reference(record, cls):
    formatter = cls()
    formatted = formatter.format(record)
    decoded = json.loads(formatted)
    assert 'mutable_ref' not in decoded

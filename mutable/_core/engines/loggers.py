"""
The loggers & formatters of the library, and the logging configuration.

Everything related to a specific tracked object is logged via `ObjectLogger`,
which carries the object's reference (its class name and identity).
The reference is then used by the formatters: to prefix the messages
with the object's class name, or to put the reference into the JSON logs.

The library itself never configures the logging: it is the application's
responsibility. `configure` is a convenience for the simple applications.
"""
import copy
import enum
import logging
from typing import Any, MutableMapping, Optional, Tuple, Union

import pythonjsonlogger.core
import pythonjsonlogger.json

from mutable._cogs.helpers import typedefs

DEFAULT_JSON_REFKEY = 'object'
""" A key for object references in JSON logs, as seen by the log parsers. """


# As understood by the common log collectors (e.g. Stackdriver), from the least severe.
_SEVERITIES = [
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
]


class LogFormat(enum.Enum):
    """ Log formats, as accepted by `configure`. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-20.20s [%(levelname)-8.8s] %(message)s'
    JSON = '-json-'  # not a format string, only a marker for the JSON formatters


class ObjectFormatter(logging.Formatter):
    pass


class ObjectTextFormatter(ObjectFormatter, logging.Formatter):
    pass


class ObjectJsonFormatter(ObjectFormatter, pythonjsonlogger.json.JsonFormatter):
    def __init__(
            self,
            *args: Any,
            refkey: Optional[str] = None,
            **kwargs: Any,
    ) -> None:
        # Avoid type checking, as the args are not in the parent constructor.
        reserved_attrs = kwargs.pop('reserved_attrs', pythonjsonlogger.core.RESERVED_ATTRS)
        reserved_attrs = set(reserved_attrs)
        reserved_attrs |= {'mutable_ref'}
        kwargs.update(reserved_attrs=reserved_attrs)
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)
        self._refkey: str = refkey or DEFAULT_JSON_REFKEY

    def add_fields(
            self,
            log_record: MutableMapping[str, Any],
            record: logging.LogRecord,
            message_dict: MutableMapping[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)  # type: ignore

        if self._refkey and hasattr(record, 'mutable_ref'):
            ref = getattr(record, 'mutable_ref')
            log_record[self._refkey] = ref

        log_record.setdefault('severity', _severity(record.levelno))


def _severity(levelno: int) -> str:
    for threshold, severity in _SEVERITIES:
        if levelno <= threshold:
            return severity
    return 'fatal'


class ObjectPrefixingMixin(ObjectFormatter):
    def format(self, record: logging.LogRecord) -> str:
        if hasattr(record, 'mutable_ref'):
            ref = getattr(record, 'mutable_ref')
            prefix = f"[{ref.get('type', '')}]"
            record = copy.copy(record)  # shallow
            record.msg = f"{prefix} {record.msg}"
        return super().format(record)


class ObjectPrefixingTextFormatter(ObjectPrefixingMixin, ObjectTextFormatter):
    pass


class ObjectPrefixingJsonFormatter(ObjectPrefixingMixin, ObjectJsonFormatter):
    pass


class ObjectLogger(typedefs.LoggerAdapter):
    """
    A logger/adapter to carry the tracked object's reference for formatting.

    The reference is built once, when the adapter is created, and contains
    only the class name, the module, and the identity of the object --
    never the object itself, and never its values.
    """

    def __init__(self, obj: Any, *, base: Optional[logging.Logger] = None) -> None:
        cls = type(obj)
        super().__init__(base if base is not None else logger, dict(
            mutable_ref=dict(
                type=cls.__name__,
                module=cls.__module__,
                id=hex(id(obj)),
            ),
        ))

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # Native logging overwrites the message's extra with the adapter's extra.
        # We merge them, so that both message's & adapter's extras are available.
        kwargs["extra"] = dict(self.extra or {}, **kwargs.get('extra', {}))
        return msg, kwargs


logger = logging.getLogger('mutable.objects')


def configure(
        debug: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
        log_format: Union[str, LogFormat] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the simple applications (e.g. scripts).

    Re-configuration replaces the previously installed handler of the library,
    while the handlers of the application (if any) are kept intact.
    """
    log_level = 'DEBUG' if debug or verbose else 'WARNING' if quiet else 'INFO'
    formatter = make_formatter(log_format=log_format, log_prefix=log_prefix, log_refkey=log_refkey)
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger = logging.getLogger()
    for existing in list(logger.handlers):
        if isinstance(existing.formatter, ObjectFormatter):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(log_level)


def make_formatter(
        log_format: Union[str, LogFormat] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> ObjectFormatter:
    log_prefix = log_prefix if log_prefix is not None else bool(log_format is not LogFormat.JSON)
    if log_format is LogFormat.JSON:
        if log_prefix:
            return ObjectPrefixingJsonFormatter(refkey=log_refkey)
        else:
            return ObjectJsonFormatter(refkey=log_refkey)
    elif isinstance(log_format, (str, LogFormat)):
        fmt = log_format.value if isinstance(log_format, LogFormat) else log_format
        return ObjectPrefixingTextFormatter(fmt) if log_prefix else ObjectTextFormatter(fmt)
    else:
        raise ValueError(f"Unsupported log format: {log_format!r}")

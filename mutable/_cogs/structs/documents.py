"""
The JSON documents: parsing, decoding into the static types, encoding back.

The dynamic field setter accepts the strings & bytes as JSON documents,
and decodes them into the static type of the destination field:
e.g. ``"[1,2,3]"`` becomes ``[1, 2, 3]`` for a ``List[int]`` field,
and ``'"2020-12-31T23:59:59Z"'`` becomes a timezone-aware ``datetime``.

The decoding is symmetric to the encoding of the values in the diffs:
the dataclasses are JSON objects keyed by the fields' external names,
the datetimes/dates are ISO-8601 strings, the enums are their values,
the bytes are base64-encoded strings, the sets are lists.

Only the type coercion is done here. No schema validation of the values
is done beyond what is needed to construct the values of the static types.
"""
import base64
import binascii
import collections
import collections.abc
import dataclasses
import datetime
import decimal
import enum
import json
import typing
from typing import Any, Callable, Dict, NoReturn, Optional, Union

import iso8601
import typing_extensions

from mutable._cogs.configs import configuration
from mutable._cogs.structs import errors, fields

Payload = Union[str, bytes, bytearray]

_SEQUENCE_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)
_SET_ORIGINS = (set, frozenset, collections.abc.Set, collections.abc.MutableSet)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_LITERAL_ORIGINS = (typing.Literal, typing_extensions.Literal)


def parse(payload: Payload) -> Any:
    """
    Parse a JSON document, and fail if it is not a valid JSON document.

    Unlike the default Python's parser, the non-standard constants
    (``NaN``, ``Infinity``, ``-Infinity``) are not accepted.
    """
    try:
        return json.loads(payload, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError) as e:  # incl. json.JSONDecodeError
        raise errors.NotJSONError(f"The value is not a valid JSON document: {payload!r}") from e


def decode(data: Any, hint: Any) -> Any:
    """
    Convert a parsed JSON tree into a value of the static type (type hint).

    Raises `errors.CannotParseError` if the data do not fit the type.
    """
    if hint is Any or hint is object:
        return data
    elif hint is None or hint is type(None):
        return data if data is None else _fail(data, hint)

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin in fields.UNION_TYPES:
        return _decode_union(data, hint, args)
    elif origin in _LITERAL_ORIGINS:
        return data if data in args else _fail(data, hint)
    elif origin is tuple:
        return _decode_tuple(data, hint, args)
    elif origin in _SEQUENCE_ORIGINS:
        item = args[0] if args else Any
        return [decode(item_data, item) for item_data in _expect(data, list, hint)]
    elif origin in _SET_ORIGINS:
        item = args[0] if args else Any
        factory = frozenset if origin is frozenset else set
        try:
            return factory(decode(item_data, item) for item_data in _expect(data, list, hint))
        except TypeError as e:  # unhashable items
            raise errors.CannotParseError(f"Cannot decode {data!r} as a set") from e
    elif origin in _MAPPING_ORIGINS or origin is collections.OrderedDict:
        khint, vhint = args if len(args) == 2 else (Any, Any)
        factory = collections.OrderedDict if origin is collections.OrderedDict else dict
        return factory((_decode_key(key, khint), decode(val, vhint))
                       for key, val in _expect(data, dict, hint).items())
    elif origin is not None:
        raise errors.CannotParseError(f"Unsupported type for decoding: {hint!r}")
    elif not isinstance(hint, type):
        raise errors.CannotParseError(f"Unsupported type for decoding: {hint!r}")

    decoder = _DECODERS.get(hint)
    if decoder is not None:
        return decoder(data, hint)
    elif issubclass(hint, enum.Enum):
        try:
            return hint(data)
        except ValueError as e:
            raise errors.CannotParseError(f"{data!r} is not a value of {hint.__name__}") from e
    elif dataclasses.is_dataclass(hint):
        return _decode_struct(data, hint)
    elif isinstance(data, hint):
        return data
    else:
        _fail(data, hint)


def encode(obj: Any) -> Any:
    """
    Convert a non-JSON value into a JSON-compatible one (one level only).

    Used as a ``default=`` hook of `json.dumps`, which calls it again
    for the nested non-JSON values of the returned result.
    """
    if fields.is_struct(obj):
        return {descriptor.external_name: getattr(obj, descriptor.name)
                for descriptor in fields.describe(type(obj))}
    elif isinstance(obj, enum.Enum):
        return obj.value
    elif isinstance(obj, (datetime.date, datetime.time)):  # incl. datetime.datetime
        return obj.isoformat()
    elif isinstance(obj, decimal.Decimal):
        return str(obj)
    elif isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(obj).decode('ascii')
    elif isinstance(obj, collections.abc.Mapping):
        return dict(obj)
    elif isinstance(obj, (set, frozenset)):
        try:
            return sorted(obj)
        except TypeError:
            return list(obj)  # mixed or unorderable items: in the iteration order.
    elif isinstance(obj, collections.abc.Iterable) and not isinstance(obj, str):
        return list(obj)
    else:
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps(
        tree: Any,
        *,
        pretty: bool = False,
        settings: Optional[configuration.TrackingSettings] = None,
) -> str:
    settings = configuration.resolve_settings(settings)
    if pretty:
        return json.dumps(tree, default=encode,
                          indent=settings.serialization.indent,
                          ensure_ascii=settings.serialization.ensure_ascii)
    else:
        return json.dumps(tree, default=encode,
                          separators=(',', ':'),  # NB: no spaces
                          ensure_ascii=settings.serialization.ensure_ascii)


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _fail(data: Any, hint: Any) -> NoReturn:
    name = getattr(hint, '__name__', None) or repr(hint)
    raise errors.CannotParseError(f"Cannot decode {data!r} as {name}")


def _expect(data: Any, cls: type, hint: Any) -> Any:
    return data if isinstance(data, cls) else _fail(data, hint)


def _decode_union(data: Any, hint: Any, args: Any) -> Any:
    if data is None and type(None) in args:
        return None
    for arg in args:
        if arg is not type(None):
            try:
                return decode(data, arg)
            except errors.CannotParseError:
                pass
    _fail(data, hint)


def _decode_tuple(data: Any, hint: Any, args: Any) -> Any:
    items = _expect(data, list, hint)
    if not args:
        return tuple(items)
    elif len(args) == 2 and args[1] is Ellipsis:
        return tuple(decode(item, args[0]) for item in items)
    elif args == ((),):  # Tuple[()]
        return () if not items else _fail(data, hint)
    elif len(args) == len(items):
        return tuple(decode(item, arg) for item, arg in zip(items, args))
    else:
        _fail(data, hint)


def _decode_key(key: str, hint: Any) -> Any:
    if hint is Any or hint is str:
        return key
    try:
        data = json.loads(key)  # e.g. integer keys: {"1": ...}
    except ValueError:
        data = key  # e.g. string enums
    return decode(data, hint)


def _decode_struct(data: Any, hint: type) -> Any:
    kwargs: Dict[str, Any] = {}
    items = _expect(data, dict, hint)
    initable = {f.name for f in dataclasses.fields(hint) if f.init}
    for descriptor in fields.describe(hint):
        if descriptor.name in initable and descriptor.external_name in items:
            kwargs[descriptor.name] = decode(items[descriptor.external_name], descriptor.hint)
    try:
        return hint(**kwargs)
    except (TypeError, ValueError) as e:
        raise errors.CannotParseError(f"Cannot construct {hint.__name__} from {data!r}") from e


def _decode_bool(data: Any, hint: type) -> Any:
    return data if isinstance(data, bool) else _fail(data, hint)


def _decode_int(data: Any, hint: type) -> Any:
    return data if isinstance(data, int) and not isinstance(data, bool) else _fail(data, hint)


def _decode_float(data: Any, hint: type) -> Any:
    ok = isinstance(data, (int, float)) and not isinstance(data, bool)
    return float(data) if ok else _fail(data, hint)


def _decode_str(data: Any, hint: type) -> Any:
    return data if isinstance(data, str) else _fail(data, hint)


def _decode_bytes(data: Any, hint: type) -> Any:
    try:
        return hint(base64.b64decode(_expect(data, str, hint), validate=True))
    except binascii.Error as e:
        raise errors.CannotParseError(f"Cannot decode {data!r} as base64") from e


def _decode_datetime(data: Any, hint: type) -> Any:
    try:
        return iso8601.parse_date(_expect(data, str, hint))
    except iso8601.ParseError as e:
        raise errors.CannotParseError(f"Cannot decode {data!r} as an ISO-8601 datetime") from e


def _decode_date(data: Any, hint: type) -> Any:
    try:
        return datetime.date.fromisoformat(_expect(data, str, hint))
    except ValueError as e:
        raise errors.CannotParseError(f"Cannot decode {data!r} as an ISO-8601 date") from e


def _decode_decimal(data: Any, hint: type) -> Any:
    if isinstance(data, bool) or not isinstance(data, (str, int, float)):
        _fail(data, hint)
    try:
        return decimal.Decimal(str(data))
    except decimal.InvalidOperation as e:
        raise errors.CannotParseError(f"Cannot decode {data!r} as a decimal") from e


def _decode_builtin_container(data: Any, hint: type) -> Any:
    if hint is dict:
        return dict(_expect(data, dict, hint))
    try:
        return hint(_expect(data, list, hint))
    except TypeError as e:  # unhashable items of sets
        raise errors.CannotParseError(f"Cannot decode {data!r} as {hint.__name__}") from e


_DECODERS: Dict[type, Callable[[Any, type], Any]] = {
    bool: _decode_bool,
    int: _decode_int,
    float: _decode_float,
    str: _decode_str,
    bytes: _decode_bytes,
    bytearray: _decode_bytes,
    datetime.datetime: _decode_datetime,
    datetime.date: _decode_date,
    decimal.Decimal: _decode_decimal,
    list: _decode_builtin_container,
    tuple: _decode_builtin_container,
    set: _decode_builtin_container,
    frozenset: _decode_builtin_container,
    dict: _decode_builtin_container,
}

"""
The descriptors of the dataclasses' fields, as seen by the change tracking.

Every field of a dataclass is described once per class (and then cached):
its external name (an alias, or the declared name), its annotations
(``ignored``, ``deep``), and its kind -- as derived from the type hints:

* `FieldKind.STRUCT`: a dataclass, held by value; it is snapshotted
  by value and compared as a whole unless marked as ``deep``.
* `FieldKind.REFERENCE`: an optional dataclass (``Optional[Engine]``),
  held by reference; it is snapshotted as a reference, so in-place mutations
  are not noticed unless marked as ``deep``.
* `FieldKind.COLLECTION`: a sequence or a mapping of dataclasses;
  compared as a whole, but reset element-wise if the elements are trackable.
* `FieldKind.SCALAR`: everything else.

The annotations are declared in the fields' metadata, preferably with `field`::

    @dataclasses.dataclass
    class Car(mutable.Mutable):
        name: str = mutable.field(alias='car_name', default='')
        engine: Engine = mutable.field(deep=True, default_factory=Engine)
        notes: str = mutable.field(ignored=True, default='')

The raw metadata are also accepted: ``metadata={'mutable': 'deep,ignored'}``.
The flags are matched exactly, not as substrings.
"""
import collections
import collections.abc
import dataclasses
import enum
import sys
import types
import typing
import weakref
from typing import Any, Collection, Dict, Iterable, Mapping, MutableMapping, Optional, Tuple, Union

from mutable._cogs.structs import trackables

FLAGS_KEY = 'mutable'
ALIAS_KEY = 'alias'

FLAG_IGNORED = 'ignored'
FLAG_DEEP = 'deep'
KNOWN_FLAGS = frozenset({FLAG_IGNORED, FLAG_DEEP})

if sys.version_info >= (3, 10):
    UNION_TYPES: Tuple[Any, ...] = (Union, types.UnionType)
else:
    UNION_TYPES = (Union,)

_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence)
_MAPPING_ORIGINS = (dict, collections.OrderedDict, collections.defaultdict,
                    collections.abc.Mapping, collections.abc.MutableMapping)
_SET_ORIGINS = (set, frozenset, collections.abc.Set, collections.abc.MutableSet)


class FieldKind(enum.Enum):
    SCALAR = 'scalar'
    STRUCT = 'struct'
    REFERENCE = 'reference'
    COLLECTION = 'collection'


class ContainerShape(enum.Enum):
    SEQUENCE = 'sequence'
    MAPPING = 'mapping'
    UNSUPPORTED = 'unsupported'


@dataclasses.dataclass(frozen=True)
class FieldDescriptor:
    name: str  # as declared in the class
    external_name: str  # as used in the paths & documents
    kind: FieldKind
    hint: Any = Any  # the resolved type hint, as declared
    target: Optional[type] = None  # the dataclass of structs & references, or the collection items
    shape: Optional[ContainerShape] = None  # only for collections
    optional: bool = False
    ignored: bool = False
    deep: bool = False

    @property
    def composite(self) -> bool:
        return self.kind in (FieldKind.STRUCT, FieldKind.REFERENCE)


_descriptors: MutableMapping[type, Tuple[FieldDescriptor, ...]] = weakref.WeakKeyDictionary()


def field(
        *,
        alias: Optional[str] = None,
        ignored: bool = False,
        deep: bool = False,
        metadata: Optional[Mapping[Any, Any]] = None,
        **kwargs: Any,
) -> Any:
    """
    Declare a dataclass field with the change-tracking annotations.

    All other keyword arguments are passed to `dataclasses.field` as is.
    """
    flags = [flag for flag, enabled in [(FLAG_IGNORED, ignored), (FLAG_DEEP, deep)] if enabled]
    merged = dict(metadata or {})
    if alias is not None:
        merged[ALIAS_KEY] = alias
    if flags:
        merged[FLAGS_KEY] = tuple(flags)
    return dataclasses.field(metadata=merged, **kwargs)


def parse_flags(
        raw: Union[None, str, Iterable[str]],
) -> Collection[str]:
    """
    Convert the raw annotations of a field into a set of flags.

    Supported notations:

    * ``None`` (no flags).
    * ``"deep"`` or ``"deep,ignored"`` (comma-separated, spaces are stripped).
    * ``("deep", "ignored")`` or ``["deep"]``, or any other iterable of strings.
    """
    if raw is None:
        names: Iterable[str] = []
    elif isinstance(raw, str):
        names = raw.split(',')
    elif isinstance(raw, collections.abc.Iterable):
        names = raw
    else:
        raise ValueError(f"Flags must be either a str, or an iterable of str. Got {raw!r}")

    flags = frozenset(name.strip() for name in names if name.strip())
    unknown = flags - KNOWN_FLAGS
    if unknown:
        raise ValueError(f"Unknown field flags: {sorted(unknown)!r}; known: {sorted(KNOWN_FLAGS)!r}")
    return flags


def describe(cls: type) -> Tuple[FieldDescriptor, ...]:
    """
    Get the descriptors of all the fields of a dataclass, in declaration order.
    """
    if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
        raise TypeError(f"Only dataclasses can be described. Got {cls!r}")

    try:
        return _descriptors[cls]
    except KeyError:
        pass

    hints = _get_type_hints(cls)
    result = tuple(_describe_field(f, hints.get(f.name, f.type)) for f in dataclasses.fields(cls))
    _descriptors[cls] = result
    return result


def describe_field(cls: type, name: str) -> FieldDescriptor:
    for descriptor in describe(cls):
        if descriptor.name == name:
            return descriptor
    raise LookupError(f"The dataclass {cls.__name__} has no field {name!r}.")


def is_struct(value: Any) -> bool:
    """ Check if the value is a dataclass instance (but not a dataclass itself). """
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def unwrap_optional(hint: Any) -> Tuple[Any, bool]:
    """
    Strip ``None`` from an optional hint: ``Optional[X]`` becomes ``(X, True)``.

    Unions of several non-``None`` types are returned as unions (still optional).
    """
    if typing.get_origin(hint) in UNION_TYPES:
        args = typing.get_args(hint)
        nonnull = tuple(arg for arg in args if arg is not type(None))
        if len(nonnull) < len(args):
            return (nonnull[0] if len(nonnull) == 1 else Union[nonnull]), True
    return hint, hint is None or hint is type(None)


def _get_type_hints(cls: type) -> Mapping[str, Any]:
    """
    Resolve the fields' type hints, each in the namespace of its declaring class.

    The hints that cannot be resolved (e.g. forward references to the classes
    local to a function) fail the description with the field named: such fields
    cannot be classified, so they cannot be tracked properly.
    """
    hints: Dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        owner = next((base for base in reversed(cls.__mro__)
                      if getattr(base, '__dataclass_fields__', {}).get(f.name) is f), cls)
        module = sys.modules.get(owner.__module__)
        globalns = dict(vars(module)) if module is not None else {}
        localns = dict(vars(owner), **{owner.__name__: owner})
        holder = types.SimpleNamespace(__annotations__={f.name: f.type})
        try:
            hints.update(typing.get_type_hints(holder, globalns, localns))
        except (NameError, TypeError) as e:
            raise TypeError(f"Cannot resolve the type of the field "
                            f"{cls.__name__}.{f.name}: {f.type!r} ({e})") from e
    return hints


def _describe_field(f: 'dataclasses.Field[Any]', hint: Any) -> FieldDescriptor:
    flags = parse_flags(f.metadata.get(FLAGS_KEY))
    alias = f.metadata.get(ALIAS_KEY)
    external_name = alias if alias else f.name

    inner, optional = unwrap_optional(hint)
    kind, target, shape = _classify(inner, optional)

    # Never self-report on the tracker itself, if it is declared as a field.
    ignored = FLAG_IGNORED in flags or trackables.is_capability_type(inner)
    deep = FLAG_DEEP in flags and kind in (FieldKind.STRUCT, FieldKind.REFERENCE)

    return FieldDescriptor(
        name=f.name,
        external_name=external_name,
        kind=kind,
        hint=hint,
        target=target,
        shape=shape,
        optional=optional,
        ignored=ignored,
        deep=deep,
    )


def _classify(
        hint: Any,
        optional: bool,
) -> Tuple[FieldKind, Optional[type], Optional[ContainerShape]]:
    if _is_dataclass_type(hint):
        return (FieldKind.REFERENCE if optional else FieldKind.STRUCT), hint, None

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin in _SEQUENCE_ORIGINS and args:
        items = [arg for arg in args if arg is not Ellipsis]
        item, _ = unwrap_optional(items[0])
        if all(unwrap_optional(arg)[0] is item for arg in items) and _is_dataclass_type(item):
            return FieldKind.COLLECTION, item, ContainerShape.SEQUENCE
    elif origin in _MAPPING_ORIGINS and len(args) == 2:
        item, _ = unwrap_optional(args[1])
        if _is_dataclass_type(item):
            return FieldKind.COLLECTION, item, ContainerShape.MAPPING
    elif origin in _SET_ORIGINS and args:
        item, _ = unwrap_optional(args[0])
        if _is_dataclass_type(item):
            return FieldKind.COLLECTION, item, ContainerShape.UNSUPPORTED

    return FieldKind.SCALAR, None, None


def _is_dataclass_type(hint: Any) -> bool:
    return isinstance(hint, type) and dataclasses.is_dataclass(hint)

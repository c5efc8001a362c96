"""
The dynamic setting of the fields' values by their external paths.

The fields are searched depth-first by their external names (the aliases,
or the declared names), joined with the configured separator for the nested
structs: e.g. ``"engine/power"`` for the ``power`` field of the ``engine``
field. The search goes into a nested struct only if the requested path
starts with the struct field's path and the separator, so the resolution
is strictly hierarchical. The ignored fields are invisible to the search.

The values are assigned as is if their type is the field's static type.
Otherwise, the strings & bytes are treated as JSON documents and are decoded
into the field's static type (e.g. ``"[1,2,3]"`` for a ``List[int]`` field).
Values of any other types are rejected.

When the value is set, the field's trackable container is marked as changed
(unless it is already marked otherwise, e.g. as added), and the change is
recorded in its changed fields immediately, without the analysis.
The trackable containers of the container, up to the object where
the setting was requested, are also marked as changed the same way.
"""
import abc
import typing
from typing import Any, Optional

from mutable._cogs.configs import configuration
from mutable._cogs.structs import diffs, documents, equality, errors, fields, \
                                  paths, snapshots, statuses, trackables
from mutable._core.engines import loggers


def set_value(
        target: Any,
        path: paths.PathSpec,
        value: Any,
        *,
        settings: Optional[configuration.TrackingSettings] = None,
) -> None:
    """
    Set the value of a field by its external path.

    Raises `errors.CannotFindError` if there is no such field,
    or `errors.CannotSetError` if the value cannot be assigned to it
    (with the specific reason chained as the error's cause).
    """
    settings = configuration.resolve_settings(settings)
    path = _normalize(path, settings=settings)
    if not fields.is_struct(target):
        raise errors.CannotFindError(path)
    _set_value_to_object(target, '', path, value, settings=settings)


def get_value(
        target: Any,
        path: paths.PathSpec,
        *,
        settings: Optional[configuration.TrackingSettings] = None,
) -> Any:
    """
    Get the value of a field by its external path, the same way as it is set.
    """
    settings = configuration.resolve_settings(settings)
    path = _normalize(path, settings=settings)
    obj, descriptor = _find(target, '', path, settings=settings)
    try:
        return getattr(obj, descriptor.name)
    except AttributeError as e:
        raise errors.CannotFindError(path) from e


def set_mutable_status(obj: Any, status: statuses.Status) -> None:
    """
    Set the status of a trackable object, even if it is a frozen dataclass.
    """
    # Bypass the frozen dataclasses' restrictions, but not the property's setter.
    object.__setattr__(obj, 'mutable_status', statuses.Status(status))


def coerce(value: Any, hint: Any) -> Any:
    """
    Convert the value to the static type (type hint) of a field, if possible.
    """
    if matches(value, hint):
        return value
    elif isinstance(value, (str, bytes, bytearray)):
        return documents.decode(documents.parse(value), hint)
    else:
        raise errors.UnsupportedTypeError(
            f"Unsupported type {type(value).__name__} for the field of type {_name(hint)}")


def matches(value: Any, hint: Any) -> bool:
    """
    Check if the value's runtime type is the field's static type.

    The types must be exactly the same (e.g. ``bool`` is not an ``int``),
    except for the abstract types (e.g. ``Sequence[int]``), which accept
    any implementation except the strings and bytes (they are the documents).
    The generic types are checked by their origin only: ``List[int]`` is ``list``.
    """
    if hint is Any or hint is object:
        return True

    inner, optional = fields.unwrap_optional(hint)
    if value is None:
        return optional

    origin = typing.get_origin(inner) or inner
    if origin in fields.UNION_TYPES:
        return any(matches(value, arg) for arg in typing.get_args(inner))
    elif not isinstance(origin, type):
        return False
    elif isinstance(origin, abc.ABCMeta) and not issubclass(origin, (str, bytes, bytearray)):
        return isinstance(value, origin) and not isinstance(value, (str, bytes, bytearray))
    else:
        return type(value) is origin


def _set_value_to_object(
        obj: Any,
        prefix: str,
        path: str,
        value: Any,
        *,
        settings: configuration.TrackingSettings,
) -> None:
    separator = settings.paths.separator
    for descriptor in fields.describe(type(obj)):
        if descriptor.ignored:
            continue

        name = paths.join_path(prefix, descriptor.external_name, separator=separator)
        if name == path:
            try:
                old = _set_value_to_field(obj, descriptor, value)
            except errors.SetterError as e:
                loggers.ObjectLogger(obj).warning(f"Error: {e}, Field: {name}")
                raise errors.CannotSetError(path, value) from e
            new = getattr(obj, descriptor.name)
            _record_change(obj, descriptor,
                           snapshots.capture(old, descriptor),
                           snapshots.capture(new, descriptor))
            return

        elif descriptor.composite and paths.is_prefix_of(name, path, separator=separator):
            nested = getattr(obj, descriptor.name, None)
            if fields.is_struct(nested):
                _set_value_to_object(nested, name, path, value, settings=settings)
                _mark_changed(obj)
                return

    raise errors.CannotFindError(path)


def _set_value_to_field(obj: Any, descriptor: fields.FieldDescriptor, value: Any) -> Any:
    """
    Set the value to the field, and return the field's old value.
    """
    params = getattr(type(obj), '__dataclass_params__', None)
    if params is not None and params.frozen:
        raise errors.NotSettableError(f"The field {descriptor.name!r} of a frozen dataclass cannot be set.")

    try:
        old = getattr(obj, descriptor.name)
    except AttributeError as e:
        raise errors.NotInterfaceableError(f"The field {descriptor.name!r} cannot be read.") from e

    new = coerce(value, descriptor.hint)

    try:
        setattr(obj, descriptor.name, new)
    except AttributeError as e:  # incl. dataclasses.FrozenInstanceError
        raise errors.NotSettableError(f"The field {descriptor.name!r} cannot be set.") from e
    return old


def _record_change(obj: Any, descriptor: fields.FieldDescriptor, old: Any, new: Any) -> None:
    if not trackables.is_trackable(obj):
        return

    _mark_changed(obj)

    # Remember the value before the first setting, not the value before the latest one.
    existing = obj.changed_fields.get_field(descriptor.name)
    if existing is not None and not existing.composite:
        old = existing.old_value

    if equality.equal(new, old):
        obj.changed_fields.pop(descriptor.name, None)
    else:
        obj.changed_fields[descriptor.name] = diffs.ChangedField(
            name=descriptor.name, old_value=old, new_value=new)


def _mark_changed(obj: Any) -> None:
    # The added & removed objects stay as they are: only the unchanged ones are promoted.
    if trackables.is_trackable(obj) and obj.mutable_status == statuses.Status.NOT_CHANGED:
        set_mutable_status(obj, statuses.Status.CHANGED)


def _find(
        obj: Any,
        prefix: str,
        path: str,
        *,
        settings: configuration.TrackingSettings,
) -> typing.Tuple[Any, fields.FieldDescriptor]:
    separator = settings.paths.separator
    if fields.is_struct(obj):
        for descriptor in fields.describe(type(obj)):
            if descriptor.ignored:
                continue
            name = paths.join_path(prefix, descriptor.external_name, separator=separator)
            if name == path:
                return obj, descriptor
            elif descriptor.composite and paths.is_prefix_of(name, path, separator=separator):
                nested = getattr(obj, descriptor.name, None)
                if fields.is_struct(nested):
                    return _find(nested, name, path, settings=settings)
    raise errors.CannotFindError(path)


def _name(hint: Any) -> str:
    return getattr(hint, '__name__', None) or repr(hint)


def _normalize(path: paths.PathSpec, *, settings: configuration.TrackingSettings) -> str:
    separator = settings.paths.separator
    return paths.join_path(*paths.parse_path(path, separator=separator), separator=separator)

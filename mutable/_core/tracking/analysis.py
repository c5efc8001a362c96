"""
The analysis of the changes: comparing the live objects to their checkpoints.

For every field of the object, in the declaration order:

* the ignored fields are skipped;
* if the field is ``None`` on either side, the other side is reported as is
  (``None`` on both sides is not a change);
* the deep-tracked fields are analysed recursively: by the nested object's
  own analysis if it is trackable and was reset (it owns its checkpoint and
  its changes), or with the same algorithm against the checkpoint's nested
  value otherwise (e.g. for a never-reset object put in place of the old one);
  the nested changes are reported as one composite change of the field;
* all other fields are compared as a whole (see `equality.equal`)
  and reported as leaf changes with the old & new values.

The analysis is a read-only best-effort reporting: it never fails.
The faults are logged, and the changes found so far are returned.
The only side effect is that the changes of the trackable objects are merged
into their own changed fields. The status of the objects is never changed here.
"""
from typing import Any, Optional

from mutable._cogs.configs import configuration
from mutable._cogs.structs import diffs, equality, fields, snapshots, trackables
from mutable._core.engines import loggers


def analyze(
        target: Any,
        original: Any = None,
        *,
        settings: Optional[configuration.TrackingSettings] = None,
) -> diffs.ChangedFields:
    """
    Analyze the changes of an object.

    The trackable objects are compared to their own checkpoints.
    Any other dataclasses are compared to the explicitly passed originals.
    """
    if original is None and trackables.is_trackable(target):
        return target.analyze_changes(settings=settings)
    elif original is None or not fields.is_struct(target):
        loggers.ObjectLogger(target).warning("The changes cannot be analyzed: no baseline.")
        return diffs.ChangedFields()
    else:
        return analyze_struct(target, original, settings=settings)


def analyze_struct(
        current: Any,
        original: Any,
        *,
        settings: Optional[configuration.TrackingSettings] = None,
) -> diffs.ChangedFields:
    settings = configuration.resolve_settings(settings)
    changes = diffs.ChangedFields()
    try:
        for descriptor in fields.describe(type(current)):
            if not descriptor.ignored:
                change = _analyze_field(current, original, descriptor, settings=settings)
                if change is not None:
                    changes[change.name] = change
    except Exception as e:
        loggers.ObjectLogger(current).log(
            settings.analysis.log_level,
            f"Failed to analyze the changes ({len(changes)} found so far): {e!r}",
            exc_info=True)

    if changes and trackables.is_trackable(current):
        current.changed_fields.merge(changes)
    return changes


def _analyze_field(
        current: Any,
        original: Any,
        descriptor: fields.FieldDescriptor,
        *,
        settings: configuration.TrackingSettings,
) -> Optional[diffs.ChangedField]:
    new = getattr(current, descriptor.name, None)
    old = getattr(original, descriptor.name, None)

    if new is None or old is None:
        if new is None and old is None:
            return None
        return diffs.ChangedField(name=descriptor.name,
                                  old_value=snapshots.capture(old, descriptor),
                                  new_value=snapshots.capture(new, descriptor))

    if descriptor.deep:
        nested: Optional[diffs.ChangedFields] = None
        if trackables.is_trackable(new) and trackables.has_checkpoint(new):
            nested = new.analyze_changes(settings=settings)
        elif fields.is_struct(new) and type(new) is type(old):
            # Incl. the never-reset trackables put in place of the checkpointed ones.
            nested = analyze_struct(new, old, settings=settings)

        # A struct replaced with a struct of another type is compared as a whole (below).
        if nested is not None:
            return diffs.ChangedField(name=descriptor.name, nested_fields=nested) if nested else None

    if not equality.equal(new, old):
        return diffs.ChangedField(name=descriptor.name,
                                  old_value=snapshots.capture(old, descriptor),
                                  new_value=snapshots.capture(new, descriptor))
    return None

"""
The external paths of the fields in the nested dataclasses.

An external path is a string of the fields' external names (aliases,
or the declared names if there are no aliases) of all the nesting levels,
joined with a separator: e.g. ``"engine/power"``.

The paths are used only to address the fields dynamically (to set or to get
their values). The diffs are never keyed by the joined paths.
"""
from typing import List, Tuple, Union

FieldPath = Tuple[str, ...]
PathSpec = Union[None, str, FieldPath, List[str]]

DEFAULT_SEPARATOR = '/'


def parse_path(
        path: PathSpec,
        *,
        separator: str = DEFAULT_SEPARATOR,
) -> FieldPath:
    """
    Convert any path into a tuple of the external names of the nested fields.

    Supported notations:

    * ``None`` (for the object itself).
    * ``"field/subfield"`` (with the configured separator).
    * ``("field", "subfield")``
    * ``["field", "subfield"]``
    """
    if path is None:
        return tuple()
    elif isinstance(path, str):
        return tuple(path.split(separator)) if path else tuple()
    elif isinstance(path, (list, tuple)):
        return tuple(path)
    else:
        raise ValueError(f"Path must be either a str, or a list/tuple. Got {path!r}")


def join_path(
        *names: str,
        separator: str = DEFAULT_SEPARATOR,
) -> str:
    """
    Join the external names into a path; the empty prefixes are skipped.

    >>> join_path('', 'engine')
    'engine'
    >>> join_path('car', 'engine', 'power')
    'car/engine/power'
    """
    return separator.join(name for name in names if name)


def is_prefix_of(
        prefix: str,
        path: str,
        *,
        separator: str = DEFAULT_SEPARATOR,
) -> bool:
    """
    Check if the path goes into the nested fields of the prefix's field.

    Only the full names of the levels are matched: ``"engine"`` is a prefix
    of ``"engine/power"``, but not of ``"engine_v2/power"``, and not of
    ``"engine"`` itself (there is nothing nested in that path).
    """
    return bool(prefix) and path.startswith(prefix + separator)

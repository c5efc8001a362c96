"""
All configuration flags, options, settings to fine-tune the change tracking.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Some of the settings are flags, some are scalars, some are optional,
some are not (but all of them have reasonable defaults).

The settings can be passed explicitly to the operations (``settings=...``).
If they are not passed, the process-wide default settings are used:
see `get_default_settings` & `set_default_settings`.
"""
import dataclasses
import logging
from typing import Optional, Union


@dataclasses.dataclass
class PathSettings:

    separator: str = '/'
    """
    A separator of the nested levels in the external paths of the fields,
    e.g. ``"engine/power"`` for the ``power`` field of the ``engine`` field.

    It is used only by the dynamic field setter (and getter).
    The diffs are never keyed by the joined paths: they nest via
    the ``nested_fields`` of the changed fields, one level at a time.

    Must be a single non-alphanumeric character.
    """

    def __post_init__(self) -> None:
        if not isinstance(self.separator, str) or len(self.separator) != 1:
            raise ValueError(f"The path separator must be a single character: {self.separator!r}")
        if self.separator.isalnum() or self.separator == '_':
            raise ValueError(f"The path separator cannot be a name character: {self.separator!r}")


@dataclasses.dataclass
class SerializationSettings:

    indent: Union[None, int, str] = '\t'
    """
    The indentation of the pretty-printed JSON documents of the diffs.
    The compact documents are never indented and have no extra spaces.
    """

    ensure_ascii: bool = False
    """
    Should the non-ASCII characters be escaped in the JSON documents.
    """


@dataclasses.dataclass
class AnalysisSettings:

    log_level: int = logging.ERROR
    """
    The logging level of the faults absorbed during the changes' analysis.

    The analysis never fails: it logs the faults and returns the partial
    results accumulated so far. Setting this to ``logging.DEBUG``
    silences the faults in the normal logging mode.
    """


@dataclasses.dataclass
class TrackingSettings:
    paths: PathSettings = dataclasses.field(default_factory=PathSettings)
    serialization: SerializationSettings = dataclasses.field(default_factory=SerializationSettings)
    analysis: AnalysisSettings = dataclasses.field(default_factory=AnalysisSettings)


_default_settings: TrackingSettings = TrackingSettings()


def get_default_settings() -> TrackingSettings:
    return _default_settings


def set_default_settings(settings: TrackingSettings) -> None:
    global _default_settings
    _default_settings = settings


def resolve_settings(settings: Optional[TrackingSettings]) -> TrackingSettings:
    return settings if settings is not None else _default_settings

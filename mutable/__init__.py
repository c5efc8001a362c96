"""
The main module of the library for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from mutable._cogs.configs.configuration import (
    TrackingSettings,
    PathSettings,
    SerializationSettings,
    AnalysisSettings,
    get_default_settings,
    set_default_settings,
)
from mutable._cogs.helpers.typedefs import (
    Logger,
)
from mutable._cogs.helpers.versions import (
    version as __version__,
)
from mutable._cogs.structs.diffs import (
    RawChangedField,
    RawChangedFields,
    ChangedField,
    ChangedFields,
)
from mutable._cogs.structs.equality import (
    Equaler,
    deep_equal,
)
from mutable._cogs.structs.errors import (
    MutableError,
    InvalidTargetError,
    NestedResetError,
    CannotFindError,
    CannotSetError,
    SetterError,
    NotSettableError,
    NotInterfaceableError,
    UnsupportedTypeError,
    CannotParseError,
    NotJSONError,
    is_cannot_find,
    is_cannot_set,
)
from mutable._cogs.structs.fields import (
    FieldKind,
    ContainerShape,
    FieldDescriptor,
    field,
    describe,
    describe_field,
)
from mutable._cogs.structs.statuses import (
    Status,
)
from mutable._cogs.structs.trackables import (
    Trackable,
    register_capability_type,
    is_trackable,
    has_checkpoint,
)
from mutable._core.engines.loggers import (
    LogFormat,
    ObjectLogger,
    ObjectFormatter,
    ObjectTextFormatter,
    ObjectJsonFormatter,
    ObjectPrefixingTextFormatter,
    ObjectPrefixingJsonFormatter,
    configure,
    make_formatter,
)
from mutable._core.tracking.analysis import (
    analyze,
)
from mutable._core.tracking.resetting import (
    reset,
)
from mutable._core.tracking.setting import (
    set_value,
    get_value,
    set_mutable_status,
)
from mutable._core.tracking.trackables import (
    Mutable,
)

__all__ = [
    'TrackingSettings',
    'PathSettings',
    'SerializationSettings',
    'AnalysisSettings',
    'get_default_settings',
    'set_default_settings',
    'Logger',
    '__version__',
    'RawChangedField',
    'RawChangedFields',
    'ChangedField',
    'ChangedFields',
    'Equaler',
    'deep_equal',
    'MutableError',
    'InvalidTargetError',
    'NestedResetError',
    'CannotFindError',
    'CannotSetError',
    'SetterError',
    'NotSettableError',
    'NotInterfaceableError',
    'UnsupportedTypeError',
    'CannotParseError',
    'NotJSONError',
    'is_cannot_find',
    'is_cannot_set',
    'FieldKind',
    'ContainerShape',
    'FieldDescriptor',
    'field',
    'describe',
    'describe_field',
    'Status',
    'Trackable',
    'register_capability_type',
    'is_trackable',
    'has_checkpoint',
    'LogFormat',
    'ObjectLogger',
    'ObjectFormatter',
    'ObjectTextFormatter',
    'ObjectJsonFormatter',
    'ObjectPrefixingTextFormatter',
    'ObjectPrefixingJsonFormatter',
    'configure',
    'make_formatter',
    'analyze',
    'reset',
    'set_value',
    'get_value',
    'set_mutable_status',
    'Mutable',
]

"""
The changes of the tracked objects: the changed fields and their sets.

A changed field is reported in one of two mutually exclusive modes:

* a leaf change: the old & new values of the field as a whole;
* a composite change: the nested changed fields of a deep-tracked field,
  with no old & new values of its own (both are ``None``).

The sets of changed fields are keyed by the fields' declared names
(not by their external names, and not by the joined paths): the nested
levels are represented by the ``nested_fields`` of the composite changes.
"""
import collections.abc
import dataclasses
import logging
from typing import Any, Dict, Iterable, Iterator, Mapping, MutableMapping, Optional, Union

from typing_extensions import TypedDict

from mutable._cogs.configs import configuration
from mutable._cogs.structs import documents

logger = logging.getLogger(__name__)


class RawChangedField(TypedDict, total=False):
    old_value: Any
    new_value: Any
    nested_fields: Dict[str, "RawChangedField"]


RawChangedFields = Dict[str, RawChangedField]


@dataclasses.dataclass
class ChangedField:
    name: str
    old_value: Any = None
    new_value: Any = None
    nested_fields: "ChangedFields" = dataclasses.field(default_factory=lambda: ChangedFields())

    @property
    def composite(self) -> bool:
        return bool(self.nested_fields)

    def as_dict(self) -> RawChangedField:
        raw = RawChangedField(old_value=self.old_value, new_value=self.new_value)
        if self.nested_fields:
            raw['nested_fields'] = self.nested_fields.as_dict()
        return raw


class ChangedFields(MutableMapping[str, ChangedField]):
    """
    The changed fields of an object, keyed by the fields' declared names.

    It behaves as a regular mutable mapping, with a few helpers on top.
    The order of the fields is irrelevant (but it is preserved as reported).
    """

    def __init__(
            self,
            __src: Union[None, Mapping[str, ChangedField], Iterable[ChangedField]] = None,
    ) -> None:
        super().__init__()
        self._fields: Dict[str, ChangedField] = {}
        self.merge(__src if __src is not None else [])

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({list(self._fields.values())!r})'

    def __str__(self) -> str:
        return self.to_json(pretty=True)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __getitem__(self, name: str) -> ChangedField:
        return self._fields[name]

    def __setitem__(self, name: str, field: ChangedField) -> None:
        self._fields[name] = field

    def __delitem__(self, name: str) -> None:
        del self._fields[name]

    def contains(self, name: str) -> bool:
        return name in self._fields

    def get_field(self, name: str) -> Optional[ChangedField]:
        return self._fields.get(name)

    def merge(
            self,
            __src: Union[Mapping[str, ChangedField], Iterable[ChangedField]],
    ) -> None:
        """
        Add the changed fields, overwriting the existing ones with the same names.
        """
        fields = __src.values() if isinstance(__src, collections.abc.Mapping) else __src
        for field in fields:
            self._fields[field.name] = field

    def as_dict(self) -> RawChangedFields:
        return {name: field.as_dict() for name, field in self._fields.items()}

    def to_json(
            self,
            pretty: bool = False,
            *,
            settings: Optional[configuration.TrackingSettings] = None,
    ) -> str:
        """
        Serialize the changed fields to a JSON document (compact or pretty).

        The values which cannot be serialized are not a reason to fail:
        the error is logged, and an empty document is returned instead.
        """
        try:
            return documents.dumps(self.as_dict(), pretty=pretty, settings=settings)
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize the changed fields: {e}")
            return '{}'

"""
The statuses of the tracked objects.

Only the transition from `Status.NOT_CHANGED` to `Status.CHANGED` is ever
done by the library itself: by the dynamic field setter, when a field
of a tracked object is set. The reset puts the objects back to
`Status.NOT_CHANGED`. The analysis of the changes never touches the status.

`Status.ADDED` & `Status.REMOVED` are reserved for the library's users,
e.g. for marking the objects added to or removed from a collection.
They are never set by the library, and are preserved until the next reset.
"""
import enum


class Status(str, enum.Enum):
    NOT_CHANGED = 'NotChanged'
    REMOVED = 'Removed'
    ADDED = 'Added'
    CHANGED = 'Changed'

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return repr(self.value)

"""
The library's own version, as seen in the installed distribution's metadata.

There is no version in the code: it is only in the packaging metadata.
If the library is not installed (e.g. used from a source checkout),
the version is unknown (``None``).
"""
import importlib.metadata
from typing import Optional


def detect(name: str) -> Optional[str]:
    try:
        return importlib.metadata.version(name)
    except importlib.metadata.PackageNotFoundError:
        return None


# The top-level package name, which is also the distribution name unless forked.
version: Optional[str] = detect(__name__.split('.')[0])
